"""Random spanning walks over square, triangular, hexagon and polar grids.

Each cycle builds a fresh grid, grows a random spanning tree over it one edge
per tick, drops a colored dot on every leaf as soon as it can no longer grow,
and restarts once the walk is exhausted.

Restart policies:
- delayed: first cycle is always the square grid, then a 2 second pause before
  each new random grid.
- immediate: every cycle (the first included) picks a random grid and starts
  on the tick that finished the previous one.
"""

from __future__ import annotations

import argparse
import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .config import (
    GRID_SQUARE,
    RESTART_DELAYED,
    RESTART_POLICIES,
    ArtConfig,
)
from .geometry import GridGraph, build_graph
from .log import setup_logging
from .surface import DrawingSurface, PygameSurface, RecordingSurface
from .walk import WalkState

logger = logging.getLogger(__name__)


@dataclass
class CycleSummary:
    index: int
    kind: str
    nodes: int
    edges: int
    leaves: int


class GridWalkArt:
    def __init__(
        self,
        config: ArtConfig,
        surface: DrawingSurface,
        *,
        restart: str = RESTART_DELAYED,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
        visual: bool = False,
        step_rate: float = 0.0,
        render_fps: float = 0.0,
        max_steps: int = 0,
    ) -> None:
        if restart not in RESTART_POLICIES:
            raise ValueError(f"unknown restart policy: {restart!r}")

        self.config = config
        self.surface = surface
        self.restart = restart
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock
        self.sleep = sleep
        self.visual = visual
        self.step_rate = step_rate
        self.render_fps = render_fps
        self.max_steps = max_steps

        self.step = 0
        self.cycle = 0
        self.completed: List[CycleSummary] = []
        self.waiting_since: Optional[float] = None

        self._last_step_wall = self.clock()
        self._last_render_wall = self.clock()

        # Per-cycle context, replaced wholesale by new_cycle().
        self.kind = ""
        self.graph: GridGraph
        self.walk: WalkState
        self.new_cycle()

    # ---------- cycle control ----------
    def pick_kind(self) -> str:
        if self.restart == RESTART_DELAYED and self.cycle == 0:
            return GRID_SQUARE
        return self.rng.choice(self.config.grid_kinds)

    def new_cycle(self) -> None:
        self.kind = self.pick_kind()
        self.graph = build_graph(self.kind, self.config)
        self.walk = WalkState.start(self.graph)
        self.cycle += 1
        self.waiting_since = None
        self.surface.clear(self.config.background)
        logger.info(
            "cycle %d: %s grid, %d nodes, start %s",
            self.cycle,
            self.kind,
            len(self.graph),
            self.graph.start,
        )

    def finish_cycle(self) -> CycleSummary:
        self.color_leaves()
        summary = CycleSummary(
            index=self.cycle,
            kind=self.kind,
            nodes=len(self.walk.visited),
            edges=len(self.walk.edges),
            leaves=len(self.walk.leaf_marked),
        )
        self.completed.append(summary)
        logger.info(
            "cycle %d done: %d edges, %d leaves",
            summary.index,
            summary.edges,
            summary.leaves,
        )
        return summary

    @property
    def waiting(self) -> bool:
        return self.waiting_since is not None

    # ---------- drawing ----------
    def draw_link(self, a: str, b: str) -> None:
        pos = self.graph.positions
        self.surface.line(pos[a], pos[b], self.config.link_color, self.config.link_width)

    def color_leaves(self) -> List[str]:
        fresh = self.walk.mark_leaves()
        diameter = self.config.dot_diameter(self.kind)
        for key in fresh:
            color = self.rng.choice(self.config.dot_colors)
            self.surface.dot(self.graph.positions[key], diameter, color)
        return fresh

    # ---------- timing / rendering ----------
    def _throttle_step_rate(self) -> None:
        if self.step_rate <= 0:
            return
        target_dt = 1.0 / self.step_rate
        while True:
            now = self.clock()
            elapsed = now - self._last_step_wall
            if elapsed >= target_dt:
                self._last_step_wall = now
                return
            self.sleep(min(0.002, target_dt - elapsed))
            self.surface.pump_events()
            self._maybe_render()

    def _maybe_render(self, force: bool = False) -> None:
        now = self.clock()
        if force or self.render_fps <= 0:
            self.surface.present()
            self._last_render_wall = now
            return
        if now - self._last_render_wall >= 1.0 / self.render_fps:
            self.surface.present()
            self._last_render_wall = now

    # ---------- stepping ----------
    def tick(self) -> None:
        if self.visual:
            self.surface.pump_events()
            self._throttle_step_rate()

        if self.waiting_since is not None:
            if self.clock() - self.waiting_since >= self.config.restart_delay:
                self.new_cycle()
                self._maybe_render(force=True)
            return

        if self.max_steps and self.step >= self.max_steps:
            raise RuntimeError(
                f"max steps reached ({self.max_steps}). Increase --max-steps to continue."
            )

        edge = self.walk.step(self.rng)
        if edge is None:
            self.finish_cycle()
            if self.restart == RESTART_DELAYED:
                self.waiting_since = self.clock()
            else:
                self.new_cycle()
            self._maybe_render(force=True)
            return

        self.step += 1
        self.draw_link(*edge)
        self.color_leaves()
        logger.debug("step %d: %s -> %s", self.step, edge[0], edge[1])
        self._maybe_render()

    def run(self, cycles: int = 0) -> List[CycleSummary]:
        """Tick until ``cycles`` walks finish; 0 runs until interrupted."""
        target = len(self.completed) + cycles
        while cycles <= 0 or len(self.completed) < target:
            if self.waiting_since is not None and not self.visual:
                remaining = self.config.restart_delay - (self.clock() - self.waiting_since)
                if remaining > 0:
                    self.sleep(remaining)
            self.tick()
        return self.completed[-cycles:]

    def close(self) -> None:
        self.surface.close()


# ---------------------------------
# CLI
# ---------------------------------
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Random spanning walks over four grid types")
    p.add_argument("--visual", action="store_true", help="Open a pygame window and animate forever")
    p.add_argument(
        "--restart",
        choices=list(RESTART_POLICIES),
        default=RESTART_DELAYED,
        help="delayed: square first, 2s pause between grids; immediate: random grid every cycle",
    )
    p.add_argument("--seed", type=int, default=None, help="Random seed")
    p.add_argument("--cycles", type=int, default=1, help="Walks to run headless (ignored with --visual)")
    p.add_argument(
        "--step-rate",
        type=float,
        default=60.0,
        help="Walk steps per second in visual mode (0 = unlimited)",
    )
    p.add_argument(
        "--render-fps",
        type=float,
        default=60.0,
        help="Render frames per second in visual mode (0 = render every step)",
    )
    p.add_argument("--max-steps", type=int, default=0, help="Hard step limit (0 = none)")
    p.add_argument("--log-file", default=None, help="Write logs here instead of stderr")
    p.add_argument("--verbose", action="store_true", help="Log every walk step")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, logging.DEBUG if args.verbose else logging.INFO)

    config = ArtConfig()
    if args.visual:
        surface: DrawingSurface = PygameSurface(config.width, config.height)
    else:
        surface = RecordingSurface()

    engine = GridWalkArt(
        config,
        surface,
        restart=args.restart,
        rng=random.Random(args.seed),
        visual=args.visual,
        step_rate=args.step_rate if args.visual else 0.0,
        render_fps=args.render_fps if args.visual else 0.0,
        max_steps=args.max_steps,
    )

    try:
        summaries = engine.run(0 if args.visual else args.cycles)
        print("Grid walk run complete")
        for s in summaries:
            print(f"- cycle {s.index}: {s.kind} nodes={s.nodes} edges={s.edges} leaves={s.leaves}")
    except KeyboardInterrupt:
        print("Interrupted by user.")
    except Exception:
        logger.exception("Unhandled exception during the walk")
        raise
    finally:
        engine.close()


if __name__ == "__main__":
    main()
