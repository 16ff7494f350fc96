"""Fixed constants for the grid walk animation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

Color = Tuple[int, int, int]

GRID_SQUARE = "square"
GRID_TRIANGULAR = "triangular"
GRID_HEXAGON = "hexagon"
GRID_CIRCULAR = "circular"

GRID_KINDS: Tuple[str, ...] = (GRID_SQUARE, GRID_TRIANGULAR, GRID_HEXAGON, GRID_CIRCULAR)

RESTART_DELAYED = "delayed"
RESTART_IMMEDIATE = "immediate"

RESTART_POLICIES: Tuple[str, ...] = (RESTART_DELAYED, RESTART_IMMEDIATE)


def hex_color(value: str) -> Color:
    """Parse ``#RRGGBB`` into an RGB tuple."""
    digits = value.lstrip("#")
    if len(digits) != 6:
        raise ValueError(f"expected #RRGGBB color, got {value!r}")
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


@dataclass(frozen=True)
class ArtConfig:
    width: int = 600
    height: int = 600
    cell_size: int = 20
    hex_radius: int = 20
    background: Color = hex_color("#EFE6DD")
    link_color: Color = hex_color("#888888")
    link_width: int = 4
    dot_colors: Tuple[Color, ...] = field(
        default_factory=lambda: (
            hex_color("#FF7F7F"),
            hex_color("#7F9EFF"),
            hex_color("#FFF97F"),
        )
    )
    dot_scale: float = 0.6
    restart_delay: float = 2.0
    grid_kinds: Tuple[str, ...] = GRID_KINDS

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("canvas width/height must be positive")
        if self.cell_size <= 0 or self.hex_radius <= 0:
            raise ValueError("cell_size and hex_radius must be positive")
        if self.restart_delay < 0:
            raise ValueError("restart_delay must be >= 0")
        if not self.dot_colors:
            raise ValueError("dot_colors must not be empty")
        unknown = [k for k in self.grid_kinds if k not in GRID_KINDS]
        if unknown or not self.grid_kinds:
            raise ValueError(f"invalid grid kinds: {unknown or 'none given'}")

    def dot_diameter(self, kind: str) -> float:
        base = self.hex_radius if kind == GRID_HEXAGON else self.cell_size
        return base * self.dot_scale
