"""Document decoding capabilities: PDF, Word documents and raster images."""
from __future__ import annotations

import asyncio
from typing import Dict

import numpy as np

from comparison.models import GlyphPage
from extraction.capability import Capability, CapabilityState
from extraction.docx_decoder import DocxDecoder
from extraction.image_loader import load_image_as_pixel_buffer
from extraction.pdf_decoder import PdfDecoder
from utils.logging import logger


class DocumentDecoder:
    """
    Bundle of decoding capabilities handed to the comparison orchestrator.

    Nothing is imported until :meth:`initialize` (or the async variant) runs;
    until then PDF and Word decoding raise ``DependencyNotReady``.
    """

    def __init__(self, pdf: PdfDecoder | None = None, docx: DocxDecoder | None = None):
        self.pdf = pdf or PdfDecoder()
        self.docx = docx or DocxDecoder()

    @property
    def capabilities(self) -> Dict[str, Capability]:
        return {"pdf": self.pdf.capability, "docx": self.docx.capability}

    def initialize(self) -> Dict[str, CapabilityState]:
        return {name: cap.initialize() for name, cap in self.capabilities.items()}

    async def initialize_async(self) -> Dict[str, CapabilityState]:
        names = list(self.capabilities)
        states = await asyncio.gather(*(cap.initialize_async() for cap in self.capabilities.values()))
        result = dict(zip(names, states))
        logger.info("Decoder capabilities: %s", {k: v.value for k, v in result.items()})
        return result

    def decode_text_document(self, data: bytes, kind: str) -> str:
        if kind == "pdf":
            return self.pdf.decode_text(data)
        return self.docx.decode_text(data)

    def decode_positioned_glyphs(self, data: bytes, page_index: int, scale: float = 1.0) -> GlyphPage:
        return self.pdf.decode_positioned_glyphs(data, page_index, scale=scale)

    def rasterize_page(self, data: bytes, page_index: int, target_width: int) -> np.ndarray:
        return self.pdf.rasterize_page(data, page_index, target_width)

    def render_formatted_markup(self, data: bytes) -> str:
        return self.docx.render_formatted_markup(data)

    def load_image_as_pixel_buffer(self, data: bytes) -> np.ndarray:
        return load_image_as_pixel_buffer(data)


__all__ = [
    "Capability",
    "CapabilityState",
    "DocumentDecoder",
    "DocxDecoder",
    "PdfDecoder",
    "load_image_as_pixel_buffer",
]
