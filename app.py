"""Command-line entry point for comparing two documents."""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from comparison.errors import ComparisonError
from config.settings import settings
from export import export_images, export_json
from extraction import DocumentDecoder
from pipeline import ComparisonConfig, ComparisonOrchestrator, DocumentInput, HighlightMode
from utils.logging import configure_logging, logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare two PDFs, Word documents or images.")
    parser.add_argument("doc1", type=Path)
    parser.add_argument("doc2", type=Path)
    parser.add_argument(
        "--mode",
        choices=[m.value for m in HighlightMode],
        default=settings.default_highlight_mode,
        help="Highlight mode for text documents",
    )
    parser.add_argument("--aligned", action="store_true", help="Use sequence alignment instead of positional diff")
    parser.add_argument("--strict-dimensions", action="store_true", help="Treat differently sized images as incomparable")
    parser.add_argument("--json", type=Path, default=None, help="Write the report as JSON")
    parser.add_argument("--images-dir", type=Path, default=None, help="Write masks and highlighted pages as PNG")
    return parser


async def run(args: argparse.Namespace) -> int:
    decoder = DocumentDecoder()
    await decoder.initialize_async()
    config = ComparisonConfig(
        highlight_mode=HighlightMode(args.mode),
        text_alignment="aligned" if args.aligned else "positional",
        image_dimension_policy="strict" if args.strict_dimensions else None,
    )
    orchestrator = ComparisonOrchestrator(decoder, config)
    try:
        report = await orchestrator.compare(DocumentInput.from_path(args.doc1), DocumentInput.from_path(args.doc2))
    except ComparisonError as exc:
        logger.error("Error processing files: %s", exc)
        return 1

    if report.no_content:
        print("Similarity: n/a (no content to compare)")
    elif report.metadata.get("incomparable"):
        print(f"Similarity: 0% ({report.metadata.get('message')})")
    else:
        print(f"Similarity: {report.similarity}%")
    print(f"Differences: {report.differences} of {report.total_units} {'words' if report.kind == 'text' else 'pixels'}")
    if report.positional is not None:
        print(f"Minor changes: {report.positional.minor_changes}")
        print(f"Paraphrased: {report.positional.paraphrased}")

    if args.json:
        export_json(report, args.json)
    if args.images_dir:
        export_images(report, args.images_dir, stem=args.doc1.stem)
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging(settings.log_level, settings.log_file)
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
