"""
Comparison orchestrator: selects and drives the comparison pipeline for a document pair.

Lifecycle of one orchestrator instance:

    IDLE -> LOADING(kind) -> SUCCESS(report) | FAILED(error) -> IDLE

``reset()`` returns to IDLE at any point. Only the most recent ``compare()``
call may publish its outcome; a comparison that finishes after being
superseded by ``reset()`` or a newer call raises ``StaleResult`` and leaves
the orchestrator untouched.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Literal, Optional, Tuple, TypeVar

import numpy as np

from comparison.errors import (
    ComparisonError,
    DecodeFailure,
    KindMismatch,
    MissingDocument,
    StaleResult,
    UnsupportedKind,
)
from comparison.image_diff import compare_images
from comparison.lexical_diff import compare_lexical, compare_lexical_texts
from comparison.models import DifferenceReport, GlyphPage, PositionalDiffResult
from comparison.positional_diff import compare_aligned, compare_positional, side_flags
from config.settings import settings
from extraction import DocumentDecoder
from pipeline.document_kind import DocumentInput, DocumentKind, detect_kind
from utils.logging import logger
from utils.performance import TimingRecorder
from utils.text_normalization import build_token_set, split_words
from visualization.glyph_highlighter import paint_fill_instructions, project_document_highlights
from visualization.markup_highlighter import (
    highlight_markup_documents,
    plain_text_to_markup,
    render_positional_stream,
)

T = TypeVar("T")


class HighlightMode(str, Enum):
    POSITIONAL = "positional"
    LEXICAL_MARKUP = "lexical-markup"
    LEXICAL_VISUAL = "lexical-visual"


class OrchestratorState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ComparisonConfig:
    """Configuration for the comparison pipeline; None fields fall back to settings."""

    highlight_mode: Optional[HighlightMode] = None
    text_alignment: Literal["positional", "aligned"] = "positional"
    image_threshold_policy: Optional[str] = None
    image_pixel_threshold: Optional[int] = None
    image_dimension_policy: Optional[str] = None
    visual_page_index: Optional[int] = None
    raster_target_width: Optional[int] = None

    def resolved_mode(self) -> HighlightMode:
        return self.highlight_mode or HighlightMode(settings.default_highlight_mode)


class ComparisonOrchestrator:
    """Drive decoding, diffing and highlighting for one document pair at a time."""

    def __init__(self, decoder: DocumentDecoder, config: ComparisonConfig | None = None):
        self.decoder = decoder
        self.config = config or ComparisonConfig()
        self._state = OrchestratorState.IDLE
        self._kind: Optional[DocumentKind] = None
        self._report: Optional[DifferenceReport] = None
        self._error: Optional[BaseException] = None
        self._generation = 0

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def kind(self) -> Optional[DocumentKind]:
        """Document kind being (or last) compared."""
        return self._kind

    @property
    def report(self) -> Optional[DifferenceReport]:
        return self._report

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def error_message(self) -> Optional[str]:
        return str(self._error) if self._error is not None else None

    def reset(self) -> None:
        """Discard the current report and make any in-flight comparison stale."""
        self._generation += 1
        self._state = OrchestratorState.IDLE
        self._kind = None
        self._report = None
        self._error = None
        logger.debug("Orchestrator reset (generation %d)", self._generation)

    async def compare(self, doc1: Optional[DocumentInput], doc2: Optional[DocumentInput]) -> DifferenceReport:
        """
        Compare two documents of the same kind.

        Returns:
            DifferenceReport for the pair

        Raises:
            ComparisonError: any validation, readiness or decode failure; the
                orchestrator is left in FAILED with the same exception
            StaleResult: the comparison was superseded before it finished
        """
        self._generation += 1
        generation = self._generation
        self._report = None
        self._kind = None
        self._error = None

        try:
            kind = self._validate(doc1, doc2)
            self._kind = kind
            self._state = OrchestratorState.LOADING
            logger.info("Comparing %s vs %s (%s)", doc1.name, doc2.name, kind.value)
            report = await self._run(kind, doc1, doc2)
        except StaleResult:
            raise
        except asyncio.CancelledError:
            if generation == self._generation:
                self._state = OrchestratorState.IDLE
                self._kind = None
            raise
        except Exception as exc:
            if generation != self._generation:
                raise StaleResult("Comparison was superseded before it failed") from exc
            self._state = OrchestratorState.FAILED
            self._error = exc
            logger.error("Comparison failed: %s", exc)
            raise

        if generation != self._generation:
            logger.info("Discarding stale comparison result (generation %d)", generation)
            raise StaleResult("Comparison was superseded before it finished")

        self._report = report
        self._state = OrchestratorState.SUCCESS
        return report

    def _validate(self, doc1: Optional[DocumentInput], doc2: Optional[DocumentInput]) -> DocumentKind:
        if doc1 is None or doc2 is None:
            raise MissingDocument("Please upload both files")

        kind1 = detect_kind(doc1)
        kind2 = detect_kind(doc2)
        for doc, kind in ((doc1, kind1), (doc2, kind2)):
            if kind is None:
                raise UnsupportedKind(
                    f"Unsupported document type for {doc.name!r}: expected a PDF, a Word document or an image"
                )
        if kind1 != kind2:
            raise KindMismatch(
                "Both files must be of the same type (both PDFs, both Word docs, or both images); "
                f"got {kind1.value} and {kind2.value}"
            )

        if kind1 == DocumentKind.PDF:
            self.decoder.pdf.capability.require()
        elif kind1 == DocumentKind.WORD:
            self.decoder.docx.capability.require()
        return kind1

    async def _run(self, kind: DocumentKind, doc1: DocumentInput, doc2: DocumentInput) -> DifferenceReport:
        recorder = TimingRecorder()
        if kind == DocumentKind.IMAGE:
            report = await self._compare_images(doc1, doc2, recorder)
        else:
            report = await self._compare_texts(kind, doc1, doc2, recorder)
        return replace(report, metadata={**report.metadata, "timings": recorder.as_dict()})

    async def _decode_pair(
        self,
        fn: Callable[..., T],
        doc1: DocumentInput,
        doc2: DocumentInput,
        *args,
    ) -> Tuple[T, T]:
        """Run a blocking decode on both documents concurrently; both must succeed."""

        async def decode(doc: DocumentInput) -> T:
            try:
                return await asyncio.to_thread(fn, doc.data, *args)
            except ComparisonError:
                raise
            except Exception as exc:
                raise DecodeFailure(f"Error processing {doc.name}: {exc}") from exc

        first, second = await asyncio.gather(decode(doc1), decode(doc2))
        return first, second

    async def _compare_texts(
        self,
        kind: DocumentKind,
        doc1: DocumentInput,
        doc2: DocumentInput,
        recorder: TimingRecorder,
    ) -> DifferenceReport:
        mode = self.config.resolved_mode()

        with recorder.track("decode_text"):
            text_a, text_b = await self._decode_pair(self.decoder.decode_text_document, doc1, doc2, kind.value)

        with recorder.track("positional_diff"):
            words_a = split_words(text_a)
            words_b = split_words(text_b)
            differ = compare_aligned if self.config.text_alignment == "aligned" else compare_positional
            positional = differ(words_a, words_b)

        payload = {"positional": positional}
        highlights = {
            "stream_a": render_positional_stream(words_a, side_flags(positional, len(words_a))),
            "stream_b": render_positional_stream(words_b, side_flags(positional, len(words_b))),
        }

        if mode == HighlightMode.LEXICAL_VISUAL and kind == DocumentKind.PDF:
            with recorder.track("visual_highlight"):
                lexical, visual = await self._visual_highlights(doc1, doc2)
            payload["lexical"] = lexical
            highlights.update(visual)
        elif mode in (HighlightMode.LEXICAL_MARKUP, HighlightMode.LEXICAL_VISUAL):
            if mode == HighlightMode.LEXICAL_VISUAL:
                logger.info("No page raster for %s documents, using markup highlighting", kind.value)
            with recorder.track("markup_highlight"):
                lexical = compare_lexical_texts(text_a, text_b, settings.markup_min_token_length)
                if kind == DocumentKind.WORD:
                    markup_a, markup_b = await self._decode_pair(self.decoder.render_formatted_markup, doc1, doc2)
                else:
                    markup_a, markup_b = plain_text_to_markup(text_a), plain_text_to_markup(text_b)
                highlights["markup_a"], highlights["markup_b"] = highlight_markup_documents(
                    markup_a, markup_b, lexical
                )
            payload["lexical"] = lexical

        return self._text_report(kind, mode, positional, payload, highlights)

    async def _visual_highlights(self, doc1: DocumentInput, doc2: DocumentInput):
        page_index = self.config.visual_page_index
        if page_index is None:
            page_index = settings.visual_page_index
        target_width = self.config.raster_target_width or settings.raster_target_width

        glyphs_a, glyphs_b = await self._decode_pair(self.decoder.decode_positioned_glyphs, doc1, doc2, page_index)
        raster_a, raster_b = await self._decode_pair(self.decoder.rasterize_page, doc1, doc2, page_index, target_width)

        lexical = compare_lexical(
            build_token_set((run.text for run in glyphs_a.glyph_runs), settings.visual_min_token_length),
            build_token_set((run.text for run in glyphs_b.glyph_runs), settings.visual_min_token_length),
        )
        fills_a, fills_b = project_document_highlights(
            glyphs_a,
            glyphs_b,
            lexical,
            scale_a=_raster_scale(raster_a, glyphs_a),
            scale_b=_raster_scale(raster_b, glyphs_b),
        )
        return lexical, {
            "page_index": page_index,
            "fills_a": fills_a,
            "fills_b": fills_b,
            "raster_a": paint_fill_instructions(raster_a, fills_a),
            "raster_b": paint_fill_instructions(raster_b, fills_b),
        }

    def _text_report(
        self,
        kind: DocumentKind,
        mode: HighlightMode,
        positional: PositionalDiffResult,
        payload: dict,
        highlights: dict,
    ) -> DifferenceReport:
        report = DifferenceReport(
            kind="text",
            similarity=positional.similarity,
            differences=positional.differences,
            total_units=positional.total_words,
            no_content=positional.no_content,
            mode=mode.value,
            payload=payload,
            highlights=highlights,
            metadata={"document_kind": kind.value, "alignment": self.config.text_alignment},
        )
        if report.no_content:
            logger.warning("Both documents are empty; similarity is undefined")
        else:
            logger.info(
                "Text comparison: similarity %.2f%%, %d differences over %d words",
                report.similarity,
                report.differences,
                report.total_units,
            )
        return report

    async def _compare_images(
        self,
        doc1: DocumentInput,
        doc2: DocumentInput,
        recorder: TimingRecorder,
    ) -> DifferenceReport:
        with recorder.track("decode_image"):
            buffer_a, buffer_b = await self._decode_pair(self.decoder.load_image_as_pixel_buffer, doc1, doc2)

        with recorder.track("image_diff"):
            result = compare_images(
                buffer_a,
                buffer_b,
                policy=self.config.image_threshold_policy,
                threshold=self.config.image_pixel_threshold,
                dimension_policy=self.config.image_dimension_policy,
            )

        metadata = {
            "document_kind": DocumentKind.IMAGE.value,
            "source_sizes": [list(buffer_a.shape[1::-1]), list(buffer_b.shape[1::-1])],
            "incomparable": result.incomparable,
        }
        if result.message:
            metadata["message"] = result.message

        return DifferenceReport(
            kind="image",
            similarity=result.similarity,
            differences=result.differing_pixels,
            total_units=result.total_pixels,
            no_content=result.no_content,
            payload={"image": result},
            highlights={"mask": result.mask} if result.mask is not None else {},
            metadata=metadata,
        )


def _raster_scale(raster: np.ndarray, page: GlyphPage) -> float:
    """Pixels per page unit of a rasterized page."""
    if page.width <= 0:
        return 1.0
    return raster.shape[1] / page.width
