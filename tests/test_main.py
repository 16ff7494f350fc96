import random

import pytest

from grid_walk_art.config import (
    GRID_HEXAGON,
    GRID_KINDS,
    GRID_SQUARE,
    RESTART_DELAYED,
    RESTART_IMMEDIATE,
    ArtConfig,
    hex_color,
)
from grid_walk_art.main import GridWalkArt, build_parser, main
from grid_walk_art.surface import RecordingSurface

SMALL = ArtConfig(width=100, height=100)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_engine(restart, seed=1, config=SMALL):
    clock = FakeClock()
    surface = RecordingSurface()
    engine = GridWalkArt(
        config,
        surface,
        restart=restart,
        rng=random.Random(seed),
        clock=clock,
        sleep=lambda dt: None,
    )
    return engine, surface, clock


def run_until_exhausted(engine):
    done = len(engine.completed)
    ticks = 0
    while len(engine.completed) == done:
        engine.tick()
        ticks += 1
        assert ticks < 10000
    return ticks


def test_delayed_policy_starts_with_square_and_waits():
    engine, surface, clock = make_engine(RESTART_DELAYED)
    assert engine.kind == GRID_SQUARE
    assert engine.cycle == 1

    run_until_exhausted(engine)
    assert engine.waiting
    summary = engine.completed[-1]
    assert summary.kind == GRID_SQUARE
    assert summary.nodes == len(engine.graph)
    assert summary.edges == summary.nodes - 1

    clock.now += 1.0
    engine.tick()
    assert engine.waiting
    assert engine.cycle == 1

    clock.now += 1.0
    engine.tick()
    assert not engine.waiting
    assert engine.cycle == 2
    assert engine.kind in GRID_KINDS
    assert surface.count("clear") == 2


def test_immediate_policy_restarts_on_exhausting_tick():
    engine, surface, clock = make_engine(RESTART_IMMEDIATE)
    run_until_exhausted(engine)
    assert not engine.waiting
    assert engine.cycle == 2
    assert engine.walk.visited == [engine.graph.start]
    assert surface.count("clear") == 2


def test_immediate_policy_randomizes_first_grid():
    kinds = set()
    for seed in range(40):
        engine, _, _ = make_engine(RESTART_IMMEDIATE, seed=seed)
        kinds.add(engine.kind)
    assert len(kinds) > 1


def test_each_step_draws_one_link_and_leaf_dots():
    engine, surface, _ = make_engine(RESTART_DELAYED)
    ticks = run_until_exhausted(engine)
    summary = engine.completed[-1]

    # last tick only detects exhaustion
    assert ticks == summary.edges + 1
    lines = surface.of("line")
    assert len(lines) == summary.edges
    for _, p1, p2, color, width in lines:
        assert color == SMALL.link_color
        assert width == 4

    assert surface.frames == ticks

    dots = surface.of("dot")
    assert len(dots) == summary.leaves
    assert summary.leaves > 0
    for _, center, diameter, color in dots:
        assert center in engine.graph.positions.values()
        assert diameter == pytest.approx(12.0)
        assert color in SMALL.dot_colors


def test_dot_size_follows_grid_kind():
    config = ArtConfig(cell_size=20, hex_radius=30)
    assert config.dot_diameter(GRID_HEXAGON) == pytest.approx(18.0)
    assert config.dot_diameter(GRID_SQUARE) == pytest.approx(12.0)


def test_run_returns_requested_cycles():
    engine, _, _ = make_engine(RESTART_IMMEDIATE, seed=5)
    summaries = engine.run(3)
    assert [s.index for s in summaries] == [1, 2, 3]
    for s in summaries:
        assert s.edges == s.nodes - 1


def test_max_steps_guard():
    engine = GridWalkArt(SMALL, RecordingSurface(), rng=random.Random(0), max_steps=3)
    for _ in range(3):
        engine.tick()
    with pytest.raises(RuntimeError):
        engine.tick()


def test_unknown_restart_policy():
    with pytest.raises(ValueError):
        GridWalkArt(SMALL, RecordingSurface(), restart="never")


def test_config_validation():
    assert hex_color("#EFE6DD") == (239, 230, 221)
    with pytest.raises(ValueError):
        ArtConfig(cell_size=0)
    with pytest.raises(ValueError):
        ArtConfig(grid_kinds=("square", "penrose"))
    with pytest.raises(ValueError):
        hex_color("#FFF")


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.restart == RESTART_DELAYED
    assert args.cycles == 1
    assert not args.visual
    assert args.seed is None


def test_cli_headless_run(capsys):
    main(["--cycles", "2", "--restart", "immediate", "--seed", "3"])
    out = capsys.readouterr().out
    assert "Grid walk run complete" in out
    assert "cycle 1:" in out
    assert "cycle 2:" in out
