"""Grid builders for the four walk topologies.

Each builder lays nodes out over the canvas and returns a ``GridGraph`` with:
- positions: node key -> (x, y) in canvas pixels
- adjacency: node key -> set of neighbour keys (always symmetric)
- start: the key the walk grows from

Keys are canonical "a,b" strings. Square and triangular grids key by lattice
coordinates; hexagon and circular grids key by position rounded to 2 decimals,
which is what merges corners shared by neighbouring hexagons.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Set, Tuple

from .config import (
    GRID_CIRCULAR,
    GRID_HEXAGON,
    GRID_SQUARE,
    GRID_TRIANGULAR,
    ArtConfig,
)

Point = Tuple[float, float]

SQUARE_DIRS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))

# Axial unit steps of a triangular lattice.
TRI_DIRS: Tuple[Tuple[int, int], ...] = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, -1),
    (-1, 1),
)

SQRT3 = math.sqrt(3)


def _fmt(v: float) -> str:
    if isinstance(v, int):
        return str(v)
    v = round(v, 2)
    if v.is_integer():
        return str(int(v))
    return repr(v)


def coord_key(a: float, b: float) -> str:
    return f"{_fmt(a)},{_fmt(b)}"


def parse_key(key: str) -> Tuple[int, int]:
    a, b = key.split(",")
    return int(a), int(b)


@dataclass
class GridGraph:
    kind: str
    positions: Dict[str, Point] = field(default_factory=dict)
    adjacency: Dict[str, Set[str]] = field(default_factory=dict)
    start: str = ""

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, key: object) -> bool:
        return key in self.positions

    def add_node(self, key: str, pos: Point) -> None:
        if key not in self.positions:
            self.positions[key] = pos
            self.adjacency[key] = set()

    def link(self, a: str, b: str) -> None:
        self.adjacency[a].add(b)
        self.adjacency[b].add(a)

    def neighbors(self, key: str) -> Set[str]:
        return self.adjacency[key]

    def edges(self) -> Set[Tuple[str, str]]:
        out: Set[Tuple[str, str]] = set()
        for a, nbrs in self.adjacency.items():
            for b in nbrs:
                out.add((a, b) if a < b else (b, a))
        return out

    def nearest(self, target: Point, keys: Iterable[str] = ()) -> str:
        """Key closest to ``target``; the first one wins on ties."""
        tx, ty = target
        best = ""
        best_d = math.inf
        for k in keys or self.positions:
            x, y = self.positions[k]
            d = (x - tx) ** 2 + (y - ty) ** 2
            if d < best_d:
                best_d = d
                best = k
        return best


# ---------- square ----------
def build_square_graph(width: int, height: int, cell_size: int) -> GridGraph:
    g = GridGraph(GRID_SQUARE)
    cols = width // cell_size + 1
    rows = height // cell_size + 1

    # Outermost ring is left empty so nothing sits on the canvas edge.
    for i in range(1, cols - 1):
        for j in range(1, rows - 1):
            g.add_node(coord_key(i, j), (i * cell_size, j * cell_size))

    for key in g.positions:
        i, j = parse_key(key)
        for di, dj in SQUARE_DIRS:
            nk = coord_key(i + di, j + dj)
            if nk in g.positions:
                g.adjacency[key].add(nk)

    g.start = coord_key(cols // 2, rows // 2)
    return g


# ---------- triangular ----------
def build_triangular_graph(width: int, height: int, cell_size: int) -> GridGraph:
    g = GridGraph(GRID_TRIANGULAR)
    max_q = width // cell_size + 1
    max_r = height // cell_size + 1

    for q in range(-max_q, max_q + 1):
        for r in range(-max_r, max_r + 1):
            x = width / 2 + cell_size * (q + r / 2)
            y = height / 2 + (SQRT3 / 2) * cell_size * r
            if cell_size <= x <= width - cell_size and cell_size <= y <= height - cell_size:
                g.add_node(coord_key(q, r), (x, y))

    for key in g.positions:
        q, r = parse_key(key)
        for dq, dr in TRI_DIRS:
            nk = coord_key(q + dq, r + dr)
            if nk in g.positions:
                g.adjacency[key].add(nk)

    g.start = coord_key(0, 0)
    return g


# ---------- hexagon corners ----------
def hex_corners(cx: float, cy: float, radius: float) -> List[Tuple[str, Point]]:
    """Pointy-top corners of one hexagon as (key, rounded position) pairs."""
    out: List[Tuple[str, Point]] = []
    for i in range(6):
        ang = math.pi / 6 + math.pi / 3 * i
        x = round(cx + radius * math.cos(ang), 2)
        y = round(cy + radius * math.sin(ang), 2)
        out.append((coord_key(x, y), (x, y)))
    return out


def hex_center(width: int, height: int, radius: float, q: int, r: int) -> Point:
    return (width / 2 + SQRT3 * radius * (q + r / 2), height / 2 + 1.5 * radius * r)


def build_hexagon_graph(width: int, height: int, hex_radius: int) -> GridGraph:
    g = GridGraph(GRID_HEXAGON)
    max_q = int(width // (SQRT3 * hex_radius)) + 2
    max_r = int(height // (1.5 * hex_radius)) + 2

    for q in range(-max_q, max_q + 1):
        for r in range(-max_r, max_r + 1):
            cx, cy = hex_center(width, height, hex_radius, q, r)
            if not (
                cx - hex_radius >= 0
                and cx + hex_radius <= width
                and cy - hex_radius >= 0
                and cy + hex_radius <= height
            ):
                continue
            corners = hex_corners(cx, cy, hex_radius)
            for key, pos in corners:
                g.add_node(key, pos)
            for i in range(6):
                g.link(corners[i][0], corners[(i + 1) % 6][0])

    g.start = g.nearest((width / 2, height / 2))
    return g


# ---------- circular polar ----------
def ring_sizes(max_ring: int) -> List[int]:
    """Point count per ring; ring 0 is the lone center."""
    return [1] + [max(6, math.floor(2 * math.pi * i)) for i in range(1, max_ring + 1)]


def build_circular_graph(width: int, height: int, cell_size: int) -> GridGraph:
    g = GridGraph(GRID_CIRCULAR)
    cx, cy = width / 2, height / 2
    max_ring = math.floor((min(width, height) / 2 - cell_size) / cell_size)

    center = coord_key(cx, cy)
    g.add_node(center, (cx, cy))
    rings: List[List[str]] = [[center]]

    for i, n in enumerate(ring_sizes(max_ring)[1:], start=1):
        ring: List[str] = []
        for j in range(n):
            theta = 2 * math.pi * j / n
            x = round(cx + i * cell_size * math.cos(theta), 2)
            y = round(cy + i * cell_size * math.sin(theta), 2)
            key = coord_key(x, y)
            g.add_node(key, (x, y))
            ring.append(key)
        rings.append(ring)

    if max_ring >= 1:
        for k in rings[1]:
            g.link(center, k)

    for ring in rings[1:]:
        for j, a in enumerate(ring):
            g.link(a, ring[(j + 1) % len(ring)])

    for i in range(2, len(rings)):
        for k in rings[i]:
            g.link(k, g.nearest(g.positions[k], rings[i - 1]))

    g.start = center
    return g


# ---------- dispatch ----------
BUILDERS: Dict[str, Callable[[ArtConfig], GridGraph]] = {
    GRID_SQUARE: lambda c: build_square_graph(c.width, c.height, c.cell_size),
    GRID_TRIANGULAR: lambda c: build_triangular_graph(c.width, c.height, c.cell_size),
    GRID_HEXAGON: lambda c: build_hexagon_graph(c.width, c.height, c.hex_radius),
    GRID_CIRCULAR: lambda c: build_circular_graph(c.width, c.height, c.cell_size),
}


def build_graph(kind: str, config: ArtConfig) -> GridGraph:
    try:
        builder = BUILDERS[kind]
    except KeyError:
        raise ValueError(f"unknown grid kind: {kind!r}") from None
    return builder(config)
