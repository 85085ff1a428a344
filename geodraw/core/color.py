"""
Color values for shape styling.

Shapes carry a stroke color and a fill color. The fill is conventionally the
stroke color at 20% alpha. Hosts hand colors in as `Color` values or as
strings in the formats GeoJSON styling commonly uses:

- Hex: #FF0000, #ff0000, FF0000
- RGB: rgb(255, 0, 0)
- RGBA: rgba(255, 0, 0, 0.5)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
import re


_RGBA_REGEX = re.compile(
    r"rgba?\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([0-9]*\.?[0-9]+)\s*)?\)"
)
_HEX_DIGITS = "0123456789ABCDEFabcdef"


@dataclass(frozen=True)
class Color:
    """An RGB color (0-255 per channel) with an alpha in [0, 1]."""

    r: int
    g: int
    b: int
    a: float = 1.0

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            v = getattr(self, name)
            if not 0 <= int(v) <= 255:
                raise ValueError(f"{name} must be within 0-255, got {v}")
        if not 0.0 <= float(self.a) <= 1.0:
            raise ValueError(f"alpha must be within 0-1, got {self.a}")

    def with_alpha(self, alpha: float) -> "Color":
        """Same RGB channels with a different alpha."""
        return Color(self.r, self.g, self.b, float(alpha))

    def to_hex(self) -> str:
        """
        Hex string without alpha, e.g. '#FF0000'.

        Example:
            >>> Color(255, 0, 0).to_hex()
            '#FF0000'
        """
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def to_rgba(self) -> str:
        a = float(self.a)
        a_str = str(int(a)) if a.is_integer() else f"{a:g}"
        return f"rgba({self.r},{self.g},{self.b},{a_str})"

    @property
    def is_transparent(self) -> bool:
        return self.a == 0.0

    @classmethod
    def parse(cls, value: ColorLike) -> "Color":
        """
        Parse various color formats into a Color.

        An unparseable string raises ValueError; there is no default color.

        Example:
            >>> Color.parse("#00FF00")
            Color(r=0, g=255, b=0, a=1.0)
            >>> Color.parse("rgba(8, 122, 255, 0.2)").a
            0.2
        """
        if isinstance(value, Color):
            return value
        s = (value or "").strip()
        if not s:
            raise ValueError("empty color string")

        hex_part = s.lstrip("#")
        if len(hex_part) == 6 and all(c in _HEX_DIGITS for c in hex_part):
            r, g, b = (int(hex_part[i : i + 2], 16) for i in (0, 2, 4))
            return cls(r, g, b)

        if s.lower().startswith(("rgba", "rgb")):
            match = _RGBA_REGEX.search(s)
            if match:
                r, g, b = (int(x) for x in match.groups()[:3])
                alpha = match.group(4)
                return cls(r, g, b, float(alpha) if alpha is not None else 1.0)

        raise ValueError(f"Unrecognized color: {value!r}")


ColorLike = Union[Color, str]


RED = Color(255, 0, 0)
BLUE = Color(0, 0, 255)
PURPLE = Color(128, 0, 128)
TRANSPARENT = Color(0, 0, 0, 0.0)

# Fill alpha applied to the stroke color when a shape is finalized or recolored.
FILL_ALPHA = 0.2


def fill_for(stroke: Color, alpha: float = FILL_ALPHA) -> Color:
    return stroke.with_alpha(alpha)
