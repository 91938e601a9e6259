"""Word-processor document text and markup extraction using python-docx."""
from __future__ import annotations

import html
import io
from typing import List

from comparison.errors import DecodeFailure
from extraction.capability import Capability
from utils.logging import logger


def python_docx_capability() -> Capability:
    return Capability(
        "Word document library",
        "docx",
        install_hint="Install via `pip install python-docx`",
    )


def _heading_level(style_name: str) -> int:
    """Heading level from a paragraph style name such as 'Heading 2'; 0 for body text."""
    if not style_name:
        return 0
    if style_name == "Title":
        return 1
    if style_name.startswith("Heading "):
        suffix = style_name[len("Heading "):].strip()
        if suffix.isdigit():
            return max(1, min(6, int(suffix)))
    return 0


def _run_markup(run) -> str:
    text = html.escape(run.text)
    if not text:
        return ""
    if run.italic:
        text = f"<em>{text}</em>"
    if run.bold:
        text = f"<strong>{text}</strong>"
    if run.underline:
        text = f"<u>{text}</u>"
    return text


class DocxDecoder:
    """Decode .docx bytes through a python-docx capability handle."""

    def __init__(self, capability: Capability | None = None):
        self.capability = capability or python_docx_capability()

    def _load(self, data: bytes):
        docx = self.capability.require()
        try:
            return docx.Document(io.BytesIO(data))
        except Exception as exc:
            raise DecodeFailure(f"Unreadable Word document: {exc}") from exc

    def decode_text(self, data: bytes) -> str:
        """Raw text: paragraphs and table cells separated by blank lines."""
        document = self._load(data)
        blocks: List[str] = [p.text for p in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                blocks.extend(cell.text for cell in row.cells)
        logger.info("Decoded %d Word text blocks", len(blocks))
        return "\n\n".join(blocks)

    def render_formatted_markup(self, data: bytes) -> str:
        """HTML-like markup keeping headings, paragraphs, bold, italic and underline."""
        document = self._load(data)
        parts: List[str] = []
        for paragraph in document.paragraphs:
            inner = "".join(_run_markup(run) for run in paragraph.runs)
            if not inner.strip():
                continue
            style_name = paragraph.style.name if paragraph.style is not None else ""
            level = _heading_level(style_name)
            tag = f"h{level}" if level else "p"
            parts.append(f"<{tag}>{inner}</{tag}>")
        for table in document.tables:
            rows = []
            for row in table.rows:
                cells = "".join(f"<td>{html.escape(cell.text)}</td>" for cell in row.cells)
                rows.append(f"<tr>{cells}</tr>")
            parts.append(f"<table>{''.join(rows)}</table>")
        return "\n".join(parts)
