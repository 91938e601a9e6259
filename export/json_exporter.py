"""Export difference reports as JSON."""
from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

import numpy as np

from comparison.models import DifferenceReport, FillInstruction
from utils.logging import logger


def _fill_to_dict(fill: FillInstruction) -> Dict[str, Any]:
    data = asdict(fill)
    data["classification"] = fill.classification.value
    data["color"] = list(fill.color)
    return data


def report_to_dict(report: DifferenceReport) -> Dict[str, Any]:
    """
    Convert a report into JSON-serializable data.

    Pixel arrays (difference masks, painted rasters) are replaced by their
    shapes; use :mod:`export.image_exporter` to write them as images.
    """
    payload: Dict[str, Any] = {}
    positional = report.positional
    if positional is not None:
        payload["positional"] = {
            "similarity": positional.similarity,
            "differences": positional.differences,
            "matches": positional.matches,
            "total_words": positional.total_words,
            "identical_words": positional.identical_words,
            "minor_changes": positional.minor_changes,
            "paraphrased": positional.paraphrased,
            "classifications": [c.value for c in positional.classifications],
        }
    lexical = report.lexical
    if lexical is not None:
        payload["lexical"] = {
            "removed": sorted(lexical.removed),
            "added": sorted(lexical.added),
        }
    image = report.image
    if image is not None:
        payload["image"] = {
            "similarity": image.similarity,
            "differing_pixels": image.differing_pixels,
            "total_pixels": image.total_pixels,
            "width": image.width,
            "height": image.height,
            "incomparable": image.incomparable,
            "message": image.message,
        }

    highlights: Dict[str, Any] = {}
    for key, value in report.highlights.items():
        if isinstance(value, np.ndarray):
            highlights[key] = {"shape": list(value.shape)}
        elif isinstance(value, list):
            highlights[key] = [_fill_to_dict(v) if isinstance(v, FillInstruction) else v for v in value]
        else:
            highlights[key] = value

    return {
        "kind": report.kind,
        "mode": report.mode,
        "similarity": report.similarity,
        "differences": report.differences,
        "total_units": report.total_units,
        "no_content": report.no_content,
        "payload": payload,
        "highlights": highlights,
        "metadata": report.metadata,
    }


def export_json(report: DifferenceReport, output_path: str | Path) -> Path:
    """Write a report as indented UTF-8 JSON and return the output path."""
    output = Path(output_path)
    logger.info("Writing JSON report to %s", output)
    output.write_text(json.dumps(report_to_dict(report), ensure_ascii=False, indent=2), encoding="utf-8")
    return output
