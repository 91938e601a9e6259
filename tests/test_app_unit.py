from __future__ import annotations

import json

from PIL import Image

import app


def _save_png(path, color):
    Image.new("RGB", (4, 4), color).save(path, format="PNG")


def test_main_compares_images_and_exports(tmp_path, capsys):
    a = tmp_path / "a.png"
    b = tmp_path / "b.png"
    _save_png(a, (0, 0, 0))
    _save_png(b, (0, 0, 0))
    report_path = tmp_path / "report.json"

    exit_code = app.main([str(a), str(b), "--json", str(report_path), "--images-dir", str(tmp_path / "img")])

    assert exit_code == 0
    assert "Similarity: 100.0%" in capsys.readouterr().out
    assert json.loads(report_path.read_text(encoding="utf-8"))["kind"] == "image"
    assert (tmp_path / "img" / "a_mask.png").exists()


def test_main_reports_kind_mismatch(tmp_path):
    a = tmp_path / "a.png"
    _save_png(a, (0, 0, 0))
    doc = tmp_path / "b.pdf"
    doc.write_bytes(b"%PDF-1.4")

    assert app.main([str(a), str(doc)]) == 1
