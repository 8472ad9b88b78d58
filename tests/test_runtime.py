from __future__ import annotations

import textwrap
from pathlib import Path

import fitz
import pytest

from makepdf.config import PdfConfig
from makepdf.errors import ConfigExtractError, FontAttachError, ScriptExecError, ScriptLoadError
from makepdf.pipeline.runtime import Runtime, make_pdf


def _config(tmp_path: Path, source: str, **planner) -> PdfConfig:
    script = tmp_path / "script.py"
    script.write_text(textwrap.dedent(source), encoding="utf-8")
    pdf_config = PdfConfig(script=str(script), title="Runtime Test")
    pdf_config.planner.year = 2024
    for kind in ("monthly", "weekly", "daily"):
        getattr(pdf_config.planner, kind).enabled = planner.get(kind, False)
    return pdf_config


def _open(data: bytes) -> fitz.Document:
    return fitz.open(stream=data, filetype="pdf")


def test_daily_hooks_draw_in_depth_order(tmp_path: Path) -> None:
    pdf_config = _config(
        tmp_path,
        """
        @pdf.hooks.on_daily_page
        def daily(page):
            page.push(pdf.object.text(point=[10, 10], text=page.date.format("%Y-%m-%d"), depth=1))
            page.push(pdf.object.rect(bounds=page.bounds(), fill_color="#EEEEEE", depth=0))
        """,
        daily=True,
    )
    built = Runtime(pdf_config).setup().build()
    assert built.page_count == 366

    with _open(built.data) as doc:
        assert doc.page_count == 366
        content = doc[0].read_contents()
        assert b" re" in content
        assert b"Tj" in content
        assert content.index(b" re") < content.index(b"Tj")
        toc = doc.get_toc()
        assert toc[0][1] == "2024-01-01 (Monday)"
        assert len(toc) == 366


def test_dangling_goto_is_dropped(tmp_path: Path) -> None:
    pdf_config = _config(
        tmp_path,
        """
        page = pdf.pages.create("Only")
        missing = 1
        while missing in pdf.pages.ids():
            missing += 1
        page.push(pdf.object.text(point=[10, 10], text="dangling", link=missing))
        """,
    )
    built = Runtime(pdf_config).setup().build()
    with _open(built.data) as doc:
        assert doc.page_count == 1
        assert doc[0].get_links() == []


def test_goto_and_uri_links(tmp_path: Path) -> None:
    pdf_config = _config(
        tmp_path,
        """
        first = pdf.pages.create("First")
        second = pdf.pages.create("Second", width=100, height=50)
        first.push(pdf.object.rect(bounds=[0, 0, 20, 20], link=second.id))
        second.push(pdf.object.text(point=[5, 5], text="site", link="https://example.com"))
        """,
    )
    built = Runtime(pdf_config).setup().build()
    with _open(built.data) as doc:
        assert doc.page_count == 2
        goto_links = doc[0].get_links()
        assert len(goto_links) == 1
        assert goto_links[0]["page"] == 1
        uri_links = doc[1].get_links()
        assert len(uri_links) == 1
        assert uri_links[0]["uri"] == "https://example.com"
        assert doc[1].rect.width == pytest.approx(100 * 72 / 25.4, rel=1e-3)


def test_missing_script(tmp_path: Path) -> None:
    pdf_config = PdfConfig(script=str(tmp_path / "nope.py"))
    with pytest.raises(ScriptLoadError):
        Runtime(pdf_config).setup()
    with pytest.raises(ScriptLoadError):
        Runtime(PdfConfig(script="makepdf:nope")).setup()


def test_script_errors_are_wrapped(tmp_path: Path) -> None:
    pdf_config = _config(tmp_path, "raise RuntimeError('boom')\n")
    with pytest.raises(ScriptExecError, match="boom"):
        Runtime(pdf_config).setup()


def test_hook_errors_are_wrapped(tmp_path: Path) -> None:
    pdf_config = _config(
        tmp_path,
        """
        @pdf.hooks.on_monthly_page
        def monthly(page):
            raise KeyError("bad hook")
        """,
        monthly=True,
    )
    with pytest.raises(ScriptExecError, match="monthly hook failed"):
        Runtime(pdf_config).setup()


def test_invalid_config_after_script(tmp_path: Path) -> None:
    pdf_config = _config(tmp_path, "pdf.page.fill_color = 'not a color'\n")
    with pytest.raises(ConfigExtractError):
        Runtime(pdf_config).setup()


def test_states_are_single_use(tmp_path: Path) -> None:
    pdf_config = _config(tmp_path, "pdf.pages.create('One')\n")
    runtime = Runtime(pdf_config)
    scripted = runtime.setup()
    with pytest.raises(RuntimeError):
        runtime.setup()
    built = scripted.build()
    with pytest.raises(RuntimeError):
        scripted.build()
    built.save(tmp_path / "one.pdf")
    with pytest.raises(RuntimeError):
        built.save(tmp_path / "two.pdf")


def test_save_creates_parent_directories(tmp_path: Path) -> None:
    pdf_config = _config(tmp_path, "pdf.title = 'Nested'\npdf.pages.create('One')\n")
    target = tmp_path / "a" / "b" / "out.pdf"
    assert make_pdf(pdf_config, target) == target
    with fitz.open(target) as doc:
        assert doc.page_count == 1
        assert doc.metadata["title"] == "Nested"


@pytest.mark.parametrize("name", ["example", "panda"])
def test_builtin_hook_scripts(name: str) -> None:
    pdf_config = PdfConfig(script=f"makepdf:{name}")
    pdf_config.planner.year = 2024
    built = Runtime(pdf_config).setup().build()
    assert built.page_count == 12 + 52 + 366


def test_builtin_planner_monthly_pages() -> None:
    pdf_config = PdfConfig(script="makepdf:planner")
    pdf_config.planner.year = 2024
    pdf_config.planner.weekly.enabled = False
    pdf_config.planner.daily.enabled = False
    built = Runtime(pdf_config).setup().build()
    assert built.page_count == 12
    with _open(built.data) as doc:
        assert doc[0].read_contents()
        assert doc.get_toc()[0][1] == "January 2024"


def test_font_attach_failure_aborts_build(monkeypatch, tmp_path: Path) -> None:
    def reject(font):
        raise ValueError("unsupported outlines")

    monkeypatch.setattr("makepdf.pipeline.fonts.pdfmetrics.registerFont", reject)
    pdf_config = _config(tmp_path, "pdf.pages.create('One')\n")
    scripted = Runtime(pdf_config).setup()
    fallback = scripted.fonts.fallback_font_id()
    with pytest.raises(FontAttachError) as excinfo:
        scripted.build()
    assert excinfo.value.font_id == fallback
    assert "unsupported outlines" in str(excinfo.value)

    target = tmp_path / "out" / "one.pdf"
    with pytest.raises(FontAttachError):
        make_pdf(_config(tmp_path, "pdf.pages.create('One')\n"), target)
    assert not target.exists()
    assert not target.parent.exists()
