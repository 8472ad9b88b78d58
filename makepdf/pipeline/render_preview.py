from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import logging

import fitz  # PyMuPDF


logger = logging.getLogger(__name__)

DEFAULT_MIN_PX = 1200


def preview_path(pdf_path: Path, index: int, out_dir: Optional[Path] = None) -> Path:
    base = out_dir if out_dir is not None else pdf_path.parent
    return base / f"{pdf_path.stem}-page-{index + 1:03d}.png"


def _render_page_to_png(doc: fitz.Document, page_index: int, out_path: Path, min_px: int = DEFAULT_MIN_PX) -> None:
    page = doc.load_page(page_index)

    # Scale so the short side of the image reaches at least min_px.
    rect = page.rect
    short_side = min(rect.width, rect.height)
    zoom = max(1.0, min_px / float(short_side))
    mat = fitz.Matrix(zoom, zoom)

    pix = page.get_pixmap(matrix=mat, alpha=False)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    pix.save(str(out_path))


def render_previews(
    pdf_path: Path,
    count: int,
    out_dir: Optional[Path] = None,
    min_px: int = DEFAULT_MIN_PX,
) -> List[Path]:
    """Writes PNGs of the first ``count`` pages and returns their paths."""
    pdf_path = Path(pdf_path)
    paths: List[Path] = []
    with fitz.open(pdf_path) as doc:
        total = min(max(count, 0), doc.page_count)
        for index in range(total):
            out_path = preview_path(pdf_path, index, out_dir)
            _render_page_to_png(doc, index, out_path, min_px=min_px)
            paths.append(out_path)
    logger.info("Rendered %d previews for %s", len(paths), pdf_path)
    return paths
