"""Document kind detection from file names and MIME types."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class DocumentKind(str, Enum):
    PDF = "pdf"
    WORD = "word"
    IMAGE = "image"

    @property
    def is_text(self) -> bool:
        return self in (DocumentKind.PDF, DocumentKind.WORD)


_EXTENSIONS = {
    ".pdf": DocumentKind.PDF,
    ".docx": DocumentKind.WORD,
    ".png": DocumentKind.IMAGE,
    ".jpg": DocumentKind.IMAGE,
    ".jpeg": DocumentKind.IMAGE,
    ".gif": DocumentKind.IMAGE,
    ".bmp": DocumentKind.IMAGE,
    ".webp": DocumentKind.IMAGE,
    ".tif": DocumentKind.IMAGE,
    ".tiff": DocumentKind.IMAGE,
}


@dataclass(frozen=True)
class DocumentInput:
    """One side of a comparison: a display name, raw bytes and an optional MIME type."""

    name: str
    data: bytes
    mime_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: str | Path, mime_type: Optional[str] = None) -> "DocumentInput":
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes(), mime_type=mime_type)


def detect_kind(document: DocumentInput) -> Optional[DocumentKind]:
    """
    Classify a document as PDF, Word or image.

    The file extension wins; the MIME type is consulted only when the
    extension is unknown. Returns None for anything else.
    """
    kind = _EXTENSIONS.get(Path(document.name).suffix.lower())
    if kind is not None:
        return kind

    mime = (document.mime_type or "").lower()
    if "pdf" in mime:
        return DocumentKind.PDF
    if mime.startswith("image/"):
        return DocumentKind.IMAGE
    if "word" in mime or "document" in mime:
        return DocumentKind.WORD
    return None
