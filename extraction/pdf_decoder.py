"""PDF text, glyph and raster extraction using PyMuPDF."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List

import numpy as np

from comparison.errors import DecodeFailure
from comparison.image_diff import as_pixel_buffer
from comparison.models import GlyphPage, GlyphRun
from extraction.capability import Capability
from utils.logging import logger


def pymupdf_capability() -> Capability:
    return Capability(
        "PDF library",
        "fitz",
        install_hint="Install via `pip install PyMuPDF`",
    )


class PdfDecoder:
    """Decode paginated PDF bytes through a PyMuPDF capability handle."""

    def __init__(self, capability: Capability | None = None):
        self.capability = capability or pymupdf_capability()

    @contextmanager
    def _open(self, data: bytes) -> Iterator[object]:
        fitz = self.capability.require()
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            raise DecodeFailure(f"Unreadable PDF: {exc}") from exc
        try:
            yield doc
        finally:
            doc.close()

    def _page(self, doc, page_index: int):
        if page_index < 0 or page_index >= len(doc):
            raise DecodeFailure(f"PDF has no page {page_index + 1} (document has {len(doc)} pages)")
        return doc[page_index]

    def decode_text(self, data: bytes) -> str:
        """Extract the plain text of every page, pages joined by a space."""
        with self._open(data) as doc:
            page_texts = [page.get_text("text") for page in doc]
        logger.info("Decoded %d PDF pages of text", len(page_texts))
        return " ".join(page_texts)

    def decode_positioned_glyphs(self, data: bytes, page_index: int = 0, scale: float = 1.0) -> GlyphPage:
        """
        Extract word-level glyph runs for one page.

        PyMuPDF reports word boxes with a top-left origin; runs are returned
        with their anchor on the box bottom edge in bottom-left-origin page
        space so they follow PDF text-space conventions.

        Args:
            data: PDF bytes
            page_index: Zero-based page index
            scale: Render scale the runs will be projected at

        Returns:
            GlyphPage with one GlyphRun per word
        """
        with self._open(data) as doc:
            page = self._page(doc, page_index)
            width, height = float(page.rect.width), float(page.rect.height)
            runs: List[GlyphRun] = []
            for x0, y0, x1, y1, word, *_ in page.get_text("words"):
                runs.append(
                    GlyphRun(
                        text=word,
                        x=float(x0),
                        y=height - float(y1),
                        width=float(x1 - x0),
                        height=float(y1 - y0),
                        scale=scale,
                    )
                )
        logger.debug("Decoded %d glyph runs from PDF page %d", len(runs), page_index + 1)
        return GlyphPage(page_num=page_index + 1, width=width, height=height, glyph_runs=runs)

    def rasterize_page(self, data: bytes, page_index: int, target_width: int) -> np.ndarray:
        """Render one page to an RGBA pixel buffer ``target_width`` pixels wide, keeping aspect ratio."""
        fitz = self.capability.require()
        with self._open(data) as doc:
            page = self._page(doc, page_index)
            zoom = target_width / float(page.rect.width)
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
            image = np.frombuffer(pix.samples, dtype=np.uint8).reshape(pix.height, pix.width, pix.n)
        logger.debug("Rasterized PDF page %d at %dx%d", page_index + 1, image.shape[1], image.shape[0])
        return as_pixel_buffer(image.copy())
