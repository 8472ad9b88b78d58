from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Dict, List, Optional
import logging
import random

from fontTools.ttLib import TTFont as FontToolsTTFont
from fontTools.ttLib import TTLibError
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ..config import BUILTIN_FONT_PATH
from ..errors import FontAttachError, FontParseError


logger = logging.getLogger(__name__)

FontId = int
FONT_NAME_PREFIX = "MakePdf-"


class FontFace:
    """Parsed font data exposing the metrics text layout needs."""

    def __init__(self, data: bytes, source: str = "<bytes>") -> None:
        self.data = bytes(data)
        self.source = source
        try:
            font = FontToolsTTFont(BytesIO(self.data), lazy=False)
            self.units_per_em = int(font["head"].unitsPerEm)
            hhea = font["hhea"]
            self.ascender = int(hhea.ascent)
            self.descender = int(hhea.descent)
            self.line_gap = int(hhea.lineGap)
            self._cmap: Dict[int, str] = dict(font.getBestCmap() or {})
            self._advances: Dict[str, int] = {
                name: int(metric[0]) for name, metric in font["hmtx"].metrics.items()
            }
        except (TTLibError, KeyError, AttributeError, AssertionError, ValueError) as exc:
            raise FontParseError(f"Unable to parse font from {source}: {exc}") from exc
        if self.units_per_em <= 0:
            raise FontParseError(f"Font {source} has invalid unitsPerEm {self.units_per_em}")

    def glyph_name(self, char: str) -> Optional[str]:
        return self._cmap.get(ord(char))

    def has_glyph(self, char: str) -> bool:
        return self.glyph_name(char) is not None

    def advance(self, char: str) -> int:
        name = self.glyph_name(char)
        if name is None:
            return 0
        return self._advances.get(name, 0)


class _FontEntry:
    def __init__(self, face: FontFace, path: Optional[Path]) -> None:
        self.face = face
        self.path = path
        self.doc_ref: Optional[str] = None


class FontRegistry:
    def __init__(self, builtin_path: Optional[Path] = None) -> None:
        self._fonts: Dict[FontId, _FontEntry] = {}
        self._order: List[FontId] = []
        self._path_cache: Dict[Path, FontId] = {}
        self._builtin_path = builtin_path or BUILTIN_FONT_PATH
        self._builtin_id: Optional[FontId] = None
        self._fallback: Optional[FontId] = None

    def _next_id(self) -> FontId:
        while True:
            candidate = random.getrandbits(32)
            if candidate not in self._fonts:
                return candidate

    def _insert(self, face: FontFace, path: Optional[Path]) -> FontId:
        font_id = self._next_id()
        self._fonts[font_id] = _FontEntry(face, path)
        self._order.append(font_id)
        return font_id

    def add_from_path(self, path) -> FontId:
        canonical = Path(path).expanduser().resolve(strict=True)
        cached = self._path_cache.get(canonical)
        if cached is not None:
            return cached
        data = canonical.read_bytes()
        face = FontFace(data, source=str(canonical))
        font_id = self._insert(face, canonical)
        self._path_cache[canonical] = font_id
        logger.debug("Loaded font %08X from %s", font_id, canonical)
        return font_id

    def add_from_bytes(self, data: bytes) -> FontId:
        font_id = self._insert(FontFace(data), None)
        logger.debug("Loaded font %08X from %d bytes", font_id, len(data))
        return font_id

    def add_builtin_font(self) -> FontId:
        if self._builtin_id is not None:
            return self._builtin_id
        face = FontFace(Path(self._builtin_path).read_bytes(), source="<builtin>")
        self._builtin_id = self._insert(face, None)
        return self._builtin_id

    def add_font_as_fallback(self, font_id: FontId) -> Optional[FontId]:
        previous = self._fallback
        self._fallback = font_id
        return previous

    def fallback_font_id(self) -> Optional[FontId]:
        return self._fallback

    def ids(self) -> List[FontId]:
        return list(self._order)

    def path(self, font_id: FontId) -> Optional[Path]:
        entry = self._fonts.get(font_id)
        return entry.path if entry else None

    def get_font_face(self, font_id: Optional[FontId]) -> Optional[FontFace]:
        entry = self._fonts.get(font_id) if font_id is not None else None
        return entry.face if entry else None

    def get_font_doc_ref(self, font_id: Optional[FontId]) -> Optional[str]:
        entry = self._fonts.get(font_id) if font_id is not None else None
        return entry.doc_ref if entry else None

    def add_font_to_doc(self, font_id: FontId, doc=None) -> bool:
        """Registers the face with reportlab; returns False for unknown ids."""
        entry = self._fonts.get(font_id)
        if entry is None:
            return False
        if entry.doc_ref is not None:
            return True
        name = f"{FONT_NAME_PREFIX}{font_id:08X}"
        try:
            pdfmetrics.registerFont(TTFont(name, BytesIO(entry.face.data)))
        except Exception as exc:
            raise FontAttachError(font_id, str(exc)) from exc
        entry.doc_ref = name
        if doc is not None:
            doc.fonts.append(name)
        logger.debug("Attached font %08X as %s", font_id, name)
        return True

    def __len__(self) -> int:
        return len(self._order)
