from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple
import string

from reportlab.lib import colors


def _clamp(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


def _byte(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Invalid color channel: {value!r}")
    if float(value) != int(value) or not 0 <= value <= 255:
        raise ValueError(f"Color channels are whole numbers in 0-255, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class Color:
    """RGB color with float channels in [0, 1]."""

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "red", _clamp(self.red))
        object.__setattr__(self, "green", _clamp(self.green))
        object.__setattr__(self, "blue", _clamp(self.blue))

    @classmethod
    def from_bytes(cls, red: int, green: int, blue: int) -> "Color":
        return cls(_byte(red) / 255.0, _byte(green) / 255.0, _byte(blue) / 255.0)

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        raw = str(value).strip().lstrip("#")
        if len(raw) != 6 or any(c not in string.hexdigits for c in raw):
            raise ValueError(f"Invalid hex color: {value!r}")
        parsed = colors.HexColor("#" + raw)
        return cls(parsed.red, parsed.green, parsed.blue)

    @classmethod
    def from_value(cls, value: Any) -> "Color":
        """
        Accepts a Color, a hex string, or byte channels (0-255) as an
        ``[r, g, b]`` sequence or an ``{r, g, b}``/``{red, green, blue}`` mapping.
        Fractional channels are rejected rather than read as bytes.
        """
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        if isinstance(value, dict):
            if all(key in value for key in ("red", "green", "blue")):
                return cls.from_bytes(value["red"], value["green"], value["blue"])
            if all(key in value for key in ("r", "g", "b")):
                return cls.from_bytes(value["r"], value["g"], value["b"])
        if isinstance(value, (list, tuple)) and len(value) == 3:
            return cls.from_bytes(*value)
        raise TypeError(f"Invalid color: {value!r}")

    def to_bytes(self) -> Tuple[int, int, int]:
        return (
            int(round(self.red * 255)),
            int(round(self.green * 255)),
            int(round(self.blue * 255)),
        )

    def to_hex(self) -> str:
        # hexval truncates, so centre each channel inside its byte
        centred = colors.Color(*((b + 0.5) / 255.0 for b in self.to_bytes()))
        return centred.hexval()[2:].upper()

    def to_rgb(self) -> Tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    def luminance(self) -> float:
        return 0.2126 * self.red + 0.7152 * self.green + 0.0722 * self.blue

    def is_light(self) -> bool:
        return self.luminance() > 0.5

    def lighten(self, percentage: float) -> "Color":
        return Color(
            self.red + (1.0 - self.red) * percentage,
            self.green + (1.0 - self.green) * percentage,
            self.blue + (1.0 - self.blue) * percentage,
        )

    def darken(self, percentage: float) -> "Color":
        factor = 1.0 - percentage
        return Color(self.red * factor, self.green * factor, self.blue * factor)

    def __str__(self) -> str:
        return self.to_hex()


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
