from __future__ import annotations

import pytest

from ecosystem.sim.core.cell import Cell, ObjectType
from ecosystem.sim.core.config import WorldConfig
from ecosystem.sim.core.errors import InputFormatError, SimulationFinishedError
from ecosystem.sim.core.grid import GridState
from ecosystem.sim.core.world import World
from ecosystem.sim.io.world_file import parse_world

MIXED_WORLD = """\
2 3 4 30 6 6
12
ROCK 0 3
ROCK 2 2
ROCK 4 4
RABBIT 0 0
RABBIT 1 4
RABBIT 2 5
RABBIT 3 1
RABBIT 5 0
RABBIT 5 5
FOX 1 1
FOX 3 3
FOX 5 2
"""


def _rocks(world: World) -> list[tuple[int, int]]:
    return [(x, y) for x, y, _ in world.grid.objects(ObjectType.ROCK)]


def test_three_by_three_single_rabbit_generation():
    config = WorldConfig(gen_proc_rabbits=2, gen_proc_foxes=2, gen_food_foxes=3, n_gen=1, n_rows=3, n_cols=3)
    world = World(config)
    world.place(ObjectType.RABBIT, 0, 0)

    world.run()

    assert [(x, y, c.type) for x, y, c in world.grid.objects()] == [(0, 1, ObjectType.RABBIT)]
    assert world.grid.get(0, 1).gen_proc == 1
    assert world.finished
    assert world.remaining == 0
    assert world.generation == 1


def test_boxed_fox_is_removed_on_third_generation():
    config = WorldConfig(gen_proc_foxes=10, gen_food_foxes=3, n_gen=3, n_rows=2, n_cols=2)
    world = World(config)
    world.place(ObjectType.FOX, 0, 0)
    world.place(ObjectType.ROCK, 0, 1)
    world.place(ObjectType.ROCK, 1, 0)

    world.step()
    assert world.grid.get(0, 0) == Cell(ObjectType.FOX, gen_proc=1, last_ate=1)
    world.step()
    assert world.grid.get(0, 0) == Cell(ObjectType.FOX, gen_proc=2, last_ate=2)
    metrics = world.step()
    assert world.grid.get(0, 0).is_empty
    assert metrics.fox_phase.starved == 1
    assert metrics.foxes == 0


def test_foxes_see_the_committed_rabbit_phase():
    # The rabbit moves next to the fox during the rabbit phase and is eaten in the same generation.
    config = WorldConfig(gen_proc_rabbits=5, gen_proc_foxes=5, gen_food_foxes=5, n_gen=1, n_rows=1, n_cols=3)
    world = World(config)
    world.place(ObjectType.RABBIT, 0, 0)
    world.place(ObjectType.FOX, 0, 2)

    metrics = world.step()

    assert world.grid.get(0, 1) == Cell(ObjectType.FOX, gen_proc=1, last_ate=0)
    assert metrics.fox_phase.prey_eaten == 1
    assert metrics.rabbits == 0


def test_runs_exactly_n_gen_generations():
    world = parse_world(MIXED_WORLD)
    produced = world.run()
    assert len(produced) == 30
    assert [m.generation for m in produced] == list(range(30))
    with pytest.raises(SimulationFinishedError):
        world.step()


def test_zero_generation_world_is_already_finished():
    world = World(WorldConfig(n_gen=0, n_rows=2, n_cols=2))
    assert world.finished
    assert world.run() == []


def test_identical_worlds_evolve_identically():
    world_a = parse_world(MIXED_WORLD)
    world_b = parse_world(MIXED_WORLD)
    for _ in range(30):
        world_a.step()
        world_b.step()
        assert world_a.grid == world_b.grid


def test_rocks_never_change():
    world = parse_world(MIXED_WORLD)
    rocks = _rocks(world)
    for _ in range(world.remaining):
        world.step()
        assert _rocks(world) == rocks
        assert all(world.grid.get(x, y) == Cell(ObjectType.ROCK) for x, y in rocks)


def test_population_accounting_per_phase():
    world = parse_world(MIXED_WORLD)
    rabbits = world.grid.count(ObjectType.RABBIT)
    foxes = world.grid.count(ObjectType.FOX)

    def _check(current: World) -> None:
        nonlocal rabbits, foxes
        metrics = current.metrics[-1]
        rabbit_phase = metrics.rabbit_phase
        fox_phase = metrics.fox_phase

        assert rabbit_phase.population_before == rabbits
        assert rabbit_phase.population_after == rabbits + rabbit_phase.births - rabbit_phase.deaths
        assert fox_phase.population_before == foxes
        assert fox_phase.population_after == foxes + fox_phase.births - fox_phase.deaths
        assert metrics.rabbits == rabbit_phase.population_after - fox_phase.prey_eaten
        assert metrics.foxes == fox_phase.population_after

        rabbits = metrics.rabbits
        foxes = metrics.foxes

    world.run(_check)
    assert len(world.metrics) == 30


def test_reset_replays_the_same_history():
    world = parse_world(MIXED_WORLD)
    initial = world.grid.copy()
    first = [world.step().rabbits for _ in range(10)]
    after_ten = world.grid.copy()

    world.reset()
    assert world.generation == 0
    assert world.remaining == 30
    assert world.metrics == []
    assert world.grid == initial

    second = [world.step().rabbits for _ in range(10)]
    assert second == first
    assert world.grid == after_ten


def test_snapshot_reports_rows_and_population():
    world = parse_world(MIXED_WORLD)
    snapshot = world.snapshot()
    assert snapshot.generation == 0
    assert snapshot.remaining == 30
    assert snapshot.metrics is None
    assert snapshot.rows[0] == "R  *  "
    assert snapshot.population == {"rocks": 3, "rabbits": 6, "foxes": 3}
    assert snapshot.metadata.n_rows == 6

    world.step()
    snapshot = world.snapshot()
    assert snapshot.generation == 1
    assert snapshot.metrics is world.metrics[-1]


def test_grid_shape_must_match_config():
    with pytest.raises(InputFormatError):
        World(WorldConfig(n_rows=2, n_cols=2), GridState(2, 3))


@pytest.mark.slow
def test_long_run_stays_consistent():
    world = parse_world(MIXED_WORLD.replace("2 3 4 30 6 6", "2 3 4 2000 6 6", 1))
    rocks = _rocks(world)
    world.run()
    assert _rocks(world) == rocks
    assert world.generation == 2000
