from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from pathlib import Path
from typing import Any, Optional, Tuple
import json
import math

import reportlab

from .pipeline.color import Color
from .pipeline.geometry import Bounds
from .pipeline.styles import DashPattern, LineCapStyle, LineJoinStyle


BASE_DIR = Path(__file__).resolve().parent
BUILTIN_SCRIPTS_DIR = BASE_DIR / "scripts"
BUILTIN_SCRIPT_PREFIX = "makepdf:"
BUILTIN_FONT_PATH = Path(reportlab.__file__).resolve().parent / "fonts" / "Vera.ttf"

DEFAULT_SCRIPT = "makepdf.py"
DEFAULT_LOG_FILE = "makepdf.log"

DEFAULT_DPI = 300.0
DEFAULT_WIDTH_PX = 1404
DEFAULT_HEIGHT_PX = 1872
DEFAULT_FONT_SIZE = 12.0
DEFAULT_OUTLINE_THICKNESS = 1.0

MM_PER_INCH = 25.4
POINTS_PER_INCH = 72.0
SIZE_UNITS = ("in", "mm", "px")


def px_to_mm(px: float, dpi: float) -> float:
    pt = px * POINTS_PER_INCH / dpi
    return pt * MM_PER_INCH / POINTS_PER_INCH


def mm_to_px(value: float, dpi: float) -> float:
    return value / MM_PER_INCH * dpi


def parse_size(value: str, dpi: float = DEFAULT_DPI) -> Tuple[float, float]:
    """
    Parses WIDTHxHEIGHT{in,mm,px} into millimetres. Pixel sizes go through
    points at the given dpi.
    """
    raw = str(value).strip().lower()
    unit = raw[-2:]
    if unit not in SIZE_UNITS:
        raise ValueError(f"Invalid size {value!r}: unit must be one of {', '.join(SIZE_UNITS)}")
    parts = raw[:-2].split("x")
    if len(parts) != 2:
        raise ValueError(f"Invalid size {value!r}: expected WIDTHxHEIGHT{unit}")
    try:
        width, height = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ValueError(f"Invalid size {value!r}: dimensions must be numbers") from exc
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid size {value!r}: dimensions must be positive")

    if unit == "in":
        return width * MM_PER_INCH, height * MM_PER_INCH
    if unit == "px":
        if dpi <= 0:
            raise ValueError(f"Invalid dpi {dpi!r}")
        return px_to_mm(width, dpi), px_to_mm(height, dpi)
    return width, height


@dataclass
class PageConfig:
    dpi: float = DEFAULT_DPI
    font: Optional[str] = None
    width: float = px_to_mm(DEFAULT_WIDTH_PX, DEFAULT_DPI)
    height: float = px_to_mm(DEFAULT_HEIGHT_PX, DEFAULT_DPI)
    font_size: float = DEFAULT_FONT_SIZE
    fill_color: Color = Color(0.0, 0.0, 0.0)
    outline_color: Color = Color(0.0, 0.0, 0.0)
    outline_thickness: float = DEFAULT_OUTLINE_THICKNESS
    dash_pattern: DashPattern = DashPattern()
    cap_style: LineCapStyle = LineCapStyle.ROUND
    join_style: LineJoinStyle = LineJoinStyle.ROUND

    def bounds(self) -> Bounds:
        return Bounds.from_coords(0.0, 0.0, max(self.width, 0.0), max(self.height, 0.0))

    def set_dimensions(self, value: str) -> None:
        self.width, self.height = parse_size(value, self.dpi)

    def to_px_size_string(self) -> str:
        # rounding first keeps exact pixel sizes from flooring one short
        width = math.floor(round(mm_to_px(self.width, self.dpi), 6))
        height = math.floor(round(mm_to_px(self.height, self.dpi), 6))
        return f"{width}x{height}px"


@dataclass
class PlannerKindConfig:
    enabled: bool = True


@dataclass
class PlannerConfig:
    year: int = field(default_factory=lambda: date.today().year)
    monthly: PlannerKindConfig = field(default_factory=PlannerKindConfig)
    weekly: PlannerKindConfig = field(default_factory=PlannerKindConfig)
    daily: PlannerKindConfig = field(default_factory=PlannerKindConfig)


def default_title() -> str:
    return f"MakePDF {date.today().isoformat()}"


@dataclass
class PdfConfig:
    page: PageConfig = field(default_factory=PageConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    script: str = DEFAULT_SCRIPT
    title: str = field(default_factory=default_title)


def to_px_size_string(page: PageConfig) -> str:
    return page.to_px_size_string()


_PAGE_FIELDS = {f.name for f in fields(PageConfig)}
_PLANNER_KINDS = ("monthly", "weekly", "daily")


def apply_overrides(config: PdfConfig, data: dict) -> PdfConfig:
    if not isinstance(data, dict):
        raise ValueError("Config overrides must be a JSON object")
    unknown = set(data) - {"page", "planner", "script", "title"}
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    page = data.get("page") or {}
    if not isinstance(page, dict):
        raise ValueError("'page' must be an object")
    # dpi first so pixel dimensions convert at the requested resolution
    if "dpi" in page:
        config.page.dpi = float(page["dpi"])
    for key, value in page.items():
        if key == "dpi":
            continue
        if key == "dimensions":
            config.page.set_dimensions(value)
        elif key in _PAGE_FIELDS:
            setattr(config.page, key, value)
        else:
            raise ValueError(f"Unknown page config key: {key!r}")

    planner = data.get("planner") or {}
    if not isinstance(planner, dict):
        raise ValueError("'planner' must be an object")
    for key, value in planner.items():
        if key == "year":
            config.planner.year = int(value)
        elif key in _PLANNER_KINDS:
            enabled = value.get("enabled", True) if isinstance(value, dict) else value
            getattr(config.planner, key).enabled = bool(enabled)
        else:
            raise ValueError(f"Unknown planner config key: {key!r}")

    if "script" in data:
        config.script = str(data["script"])
    if "title" in data:
        config.title = str(data["title"])
    return normalize_config(config)


def load_config(path: Path, config: Optional[PdfConfig] = None) -> PdfConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    return apply_overrides(config or PdfConfig(), data)


def _positive(name: str, value: Any) -> float:
    number = float(value)
    if number <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return number


def normalize_config(config: PdfConfig) -> PdfConfig:
    """Coerces script-assigned values into their typed forms, in place."""
    page = config.page
    page.dpi = _positive("page.dpi", page.dpi)
    page.width = _positive("page.width", page.width)
    page.height = _positive("page.height", page.height)
    page.font_size = _positive("page.font_size", page.font_size)
    page.outline_thickness = float(page.outline_thickness)
    page.font = None if page.font in (None, "") else str(page.font)
    page.fill_color = Color.from_value(page.fill_color)
    page.outline_color = Color.from_value(page.outline_color)
    page.dash_pattern = DashPattern.from_value(page.dash_pattern)
    page.cap_style = LineCapStyle(page.cap_style)
    page.join_style = LineJoinStyle(page.join_style)

    planner = config.planner
    planner.year = int(planner.year)
    for kind in _PLANNER_KINDS:
        value = getattr(planner, kind)
        if not isinstance(value, PlannerKindConfig):
            value = PlannerKindConfig(enabled=bool(value))
            setattr(planner, kind, value)
        value.enabled = bool(value.enabled)

    config.script = str(config.script)
    config.title = str(config.title)
    return config
