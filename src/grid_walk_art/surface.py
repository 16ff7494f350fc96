"""Drawing surfaces the animation paints onto.

``PygameSurface`` is the real window. ``RecordingSurface`` keeps the calls in
memory for headless runs and tests.
"""

from __future__ import annotations

from typing import Any, List, Protocol, Tuple

from .config import Color

Point = Tuple[float, float]


class DrawingSurface(Protocol):
    def clear(self, color: Color) -> None: ...

    def line(self, p1: Point, p2: Point, color: Color, width: int) -> None: ...

    def dot(self, center: Point, diameter: float, color: Color) -> None: ...

    def present(self) -> None: ...

    def pump_events(self) -> None: ...

    def close(self) -> None: ...


class RecordingSurface:
    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self.frames = 0

    def clear(self, color: Color) -> None:
        self.calls.append(("clear", color))

    def line(self, p1: Point, p2: Point, color: Color, width: int) -> None:
        self.calls.append(("line", p1, p2, color, width))

    def dot(self, center: Point, diameter: float, color: Color) -> None:
        self.calls.append(("dot", center, diameter, color))

    def present(self) -> None:
        self.frames += 1

    def pump_events(self) -> None:
        pass

    def close(self) -> None:
        pass

    def count(self, op: str) -> int:
        return sum(1 for c in self.calls if c[0] == op)

    def of(self, op: str) -> List[Tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == op]


class PygameSurface:
    """Persistent pygame canvas; strokes accumulate until ``clear``."""

    def __init__(self, width: int, height: int, caption: str = "Grid Walk Art") -> None:
        import pygame

        pygame.init()
        self._pygame = pygame
        self._screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(caption)

    def clear(self, color: Color) -> None:
        self._screen.fill(color)

    def line(self, p1: Point, p2: Point, color: Color, width: int) -> None:
        self._pygame.draw.line(self._screen, color, p1, p2, width)

    def dot(self, center: Point, diameter: float, color: Color) -> None:
        self._pygame.draw.circle(self._screen, color, center, diameter / 2)

    def present(self) -> None:
        self._pygame.display.flip()

    def pump_events(self) -> None:
        for event in self._pygame.event.get():
            if event.type == self._pygame.QUIT:
                raise KeyboardInterrupt

    def close(self) -> None:
        self._pygame.quit()
