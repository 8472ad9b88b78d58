from __future__ import annotations

import tempfile
from pathlib import Path

from makepdf.pipeline.render_preview import preview_path, render_previews


class DummyRect:
    width = 300.0
    height = 400.0


class DummyPixmap:
    def save(self, path: str) -> None:
        Path(path).write_text("preview", encoding="utf-8")


class DummyPage:
    rect = DummyRect()

    def __init__(self, calls: list) -> None:
        self.calls = calls

    def get_pixmap(self, matrix=None, alpha=True) -> DummyPixmap:
        self.calls.append(alpha)
        return DummyPixmap()


class DummyDoc:
    def __init__(self, page_count: int = 3) -> None:
        self.page_count = page_count
        self.closed = False
        self.calls: list = []

    def __enter__(self) -> "DummyDoc":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    def load_page(self, index: int) -> DummyPage:
        return DummyPage(self.calls)


def test_preview_path_numbering() -> None:
    assert preview_path(Path("out/plan.pdf"), 0) == Path("out/plan-page-001.png")
    assert preview_path(Path("plan.pdf"), 11, Path("shots")) == Path("shots/plan-page-012.png")


def test_render_previews_closes_document(monkeypatch) -> None:
    doc = DummyDoc()

    def fake_open(path):
        return doc

    with tempfile.TemporaryDirectory() as temp_dir:
        monkeypatch.setattr("makepdf.pipeline.render_preview.fitz.open", fake_open)
        previews = render_previews(Path(temp_dir) / "sample.pdf", 5)
        assert doc.closed is True
        assert len(previews) == 3
        assert all(path.exists() for path in previews)
        assert doc.calls == [False, False, False]


def test_render_previews_respects_count_and_out_dir(monkeypatch, tmp_path) -> None:
    doc = DummyDoc(page_count=10)
    monkeypatch.setattr("makepdf.pipeline.render_preview.fitz.open", lambda path: doc)
    previews = render_previews(tmp_path / "sample.pdf", 2, out_dir=tmp_path / "previews")
    assert [p.name for p in previews] == ["sample-page-001.png", "sample-page-002.png"]
    assert all(p.parent == tmp_path / "previews" for p in previews)
