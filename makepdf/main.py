from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import logging

import typer
from slugify import slugify

from . import config
from .errors import MakePdfError
from .pipeline.host import list_builtin_scripts
from .pipeline.render_preview import render_previews
from .pipeline.runtime import make_pdf

app = typer.Typer(help="Generate planner-style PDFs from Python scripts")
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(log_file: Path, quiet: bool, verbose: int) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = []
    if not quiet:
        stream = logging.StreamHandler()
        stream.setLevel(level)
        stream.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        handlers.append(stream)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    handlers.append(file_handler)
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def default_output(title: str) -> Path:
    name = slugify(title, separator="_", lowercase=False) or "makepdf"
    return Path(f"{name}.pdf")


@app.callback()
def main(
    log_file: Path = typer.Option(Path(config.DEFAULT_LOG_FILE), "--log-file", help="Log file path"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No log output on the console"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Debug logging"),
) -> None:
    _configure_logging(log_file, quiet, verbose)


DEFAULT_DIMENSIONS = f"{config.DEFAULT_WIDTH_PX}x{config.DEFAULT_HEIGHT_PX}px"


def _has_default_size(page: config.PageConfig) -> bool:
    defaults = config.PageConfig()
    return (page.width, page.height) == (defaults.width, defaults.height)


def _build_config(
    config_path: Optional[Path],
    dimensions: Optional[str],
    dpi: Optional[float],
    font: Optional[Path],
    script: Optional[str],
    title: Optional[str],
    year: Optional[int],
) -> config.PdfConfig:
    pdf_config = config.PdfConfig()
    if config_path:
        pdf_config = config.load_config(config_path, pdf_config)
    if dpi is not None:
        # unsized pages keep the default pixel size at the new dpi
        if not dimensions and _has_default_size(pdf_config.page):
            dimensions = DEFAULT_DIMENSIONS
        pdf_config.page.dpi = dpi
    if dimensions:
        pdf_config.page.set_dimensions(dimensions)
    if font:
        pdf_config.page.font = str(font)
    if script:
        pdf_config.script = script
    if title:
        pdf_config.title = title
    if year is not None:
        pdf_config.planner.year = year
    return config.normalize_config(pdf_config)


@app.command()
def make(
    dimensions: Optional[str] = typer.Option(None, "--dimensions", "-d", help="Page size such as 1404x1872px or 210x297mm"),
    dpi: Optional[float] = typer.Option(None, "--dpi", help="DPI used for px dimensions"),
    font: Optional[Path] = typer.Option(None, "--font", help="Fallback font file"),
    script: Optional[str] = typer.Option(None, "--script", "-s", help="Script path or makepdf:<name>"),
    title: Optional[str] = typer.Option(None, "--title", help="Document title"),
    year: Optional[int] = typer.Option(None, "--year", help="Planner year"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output PDF path"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="JSON config overrides"),
    preview: int = typer.Option(0, "--preview", min=0, help="Render PNG previews of the first N pages"),
    open_pdf: bool = typer.Option(False, "--open", help="Open the PDF when done"),
) -> None:
    try:
        pdf_config = _build_config(config_path, dimensions, dpi, font, script, title, year)
        target = output or default_output(pdf_config.title)
        logger.info(
            "Building %r at %s (%.2fx%.2fmm)",
            pdf_config.title,
            pdf_config.page.to_px_size_string(),
            pdf_config.page.width,
            pdf_config.page.height,
        )
        path = make_pdf(pdf_config, target)
        previews = render_previews(path, preview) if preview else []
    except (MakePdfError, OSError, ValueError) as exc:
        logger.exception("makepdf failed")
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Saved {path}")
    for preview_file in previews:
        typer.echo(f"Preview {preview_file}")
    if open_pdf:
        typer.launch(str(path))


@app.command()
def scripts() -> None:
    for name in list_builtin_scripts():
        typer.echo(f"{config.BUILTIN_SCRIPT_PREFIX}{name}")


if __name__ == "__main__":
    app()
