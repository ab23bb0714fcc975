"""RGB color value used by the metric codec and adapters."""

from __future__ import annotations

import colorsys
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Color:
    """RGB color with channels in [0, 1]."""

    r: float
    g: float
    b: float

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse "#rrggbb" (leading # optional)."""
        text = value.lstrip("#")
        if len(text) != 6:
            raise ValueError(f"Expected #rrggbb color, got {value!r}")
        r, g, b = (int(text[i:i + 2], 16) for i in (0, 2, 4))
        return cls(r / 255.0, g / 255.0, b / 255.0)

    @classmethod
    def from_hsl(cls, hue: float, saturation: float, lightness: float) -> "Color":
        """Build from HSL components, each in [0, 1]."""
        r, g, b = colorsys.hls_to_rgb(hue % 1.0, _unit(lightness), _unit(saturation))
        return cls(r, g, b)

    @property
    def rgb(self) -> Tuple[float, float, float]:
        return self.r, self.g, self.b

    def to_rgb255(self) -> Tuple[int, int, int]:
        return tuple(int(round(_unit(c) * 255)) for c in self.rgb)  # type: ignore[return-value]

    def to_hex(self) -> str:
        r, g, b = self.to_rgb255()
        return f"#{r:02x}{g:02x}{b:02x}"

    def to_hsl(self) -> Tuple[float, float, float]:
        h, l, s = colorsys.rgb_to_hls(*self.rgb)
        return h, s, l


def _unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)
