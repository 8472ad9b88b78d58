from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List, Optional
import logging

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .geometry import Bounds
from .styles import GoTo, LinkAnnotation, Uri


logger = logging.getLogger(__name__)


def destination_name(page_id: int) -> str:
    return f"page-{page_id:08X}"


@dataclass
class DocPage:
    index: int
    page_id: int
    title: str
    width: float
    height: float

    @property
    def destination(self) -> str:
        return destination_name(self.page_id)


class OutputDocument:
    """Single-pass reportlab document; pages are written in the order they are begun."""

    def __init__(self, title: str, width: float, height: float) -> None:
        self.title = title
        self._buffer = BytesIO()
        self.canvas = canvas.Canvas(self._buffer, pagesize=(width * mm, height * mm), invariant=1)
        self.canvas.setTitle(title)
        self.canvas.setCreator("makepdf")
        self.canvas.showOutline()
        self.fonts: List[str] = []
        self.pages: Dict[int, DocPage] = {}
        self._current: Optional[DocPage] = None
        self._data: Optional[bytes] = None

    def plan_page(self, page_id: int, title: str, width: float, height: float) -> DocPage:
        doc_page = DocPage(len(self.pages), page_id, title, width, height)
        self.pages[page_id] = doc_page
        return doc_page

    def begin_page(self, doc_page: DocPage) -> None:
        canv = self.canvas
        canv.setPageSize((doc_page.width * mm, doc_page.height * mm))
        canv.bookmarkPage(doc_page.destination)
        canv.addOutlineEntry(doc_page.title, doc_page.destination, level=0)
        self._current = doc_page

    def add_link(self, annotation: LinkAnnotation) -> bool:
        rect = _to_points(annotation.bounds)
        link = annotation.link
        if isinstance(link, GoTo):
            target = self.pages.get(link.page)
            if target is None:
                logger.warning("Dropping link to unknown page %08X", link.page & 0xFFFFFFFF)
                return False
            self.canvas.linkRect("", target.destination, rect, relative=0, thickness=0)
            return True
        if isinstance(link, Uri):
            self.canvas.linkURL(link.uri, rect, relative=0, thickness=0)
            return True
        logger.warning("Dropping unsupported link %r", link)
        return False

    def end_page(self) -> None:
        self.canvas.showPage()
        self._current = None

    def finish(self) -> bytes:
        if self._data is None:
            self.canvas.save()
            self._data = self._buffer.getvalue()
        return self._data


def _to_points(bounds: Bounds):
    llx, lly, urx, ury = bounds.to_coords()
    return (
        min(llx, urx) * mm,
        min(lly, ury) * mm,
        max(llx, urx) * mm,
        max(lly, ury) * mm,
    )
