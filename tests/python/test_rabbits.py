from __future__ import annotations

from ecosystem.sim.core.cell import Cell, ObjectType
from ecosystem.sim.core.config import WorldConfig
from ecosystem.sim.systems.rabbits import run_rabbit_phase

RABBIT = ObjectType.RABBIT


def test_single_rabbit_moves_east_from_corner(make_world):
    config = WorldConfig(gen_proc_rabbits=2, gen_proc_foxes=2, gen_food_foxes=3, n_gen=1, n_rows=3, n_cols=3)
    world = make_world(config, {(0, 0): RABBIT})

    metrics = run_rabbit_phase(world.grid, config, 0)

    assert world.grid.get(0, 1) == Cell(RABBIT, gen_proc=1)
    assert world.grid.get(0, 0).is_empty
    assert metrics.births == 0
    assert metrics.population_before == metrics.population_after == 1


def test_boxed_rabbit_stays_and_ages(make_world):
    config = WorldConfig(gen_proc_rabbits=0, n_rows=1, n_cols=2)
    world = make_world(config, {(0, 0): RABBIT, (0, 1): ObjectType.ROCK})

    run_rabbit_phase(world.grid, config, 0)
    run_rabbit_phase(world.grid, config, 1)

    # Staying never procreates, even past the threshold.
    assert world.grid.get(0, 0) == Cell(RABBIT, gen_proc=2)
    assert world.grid.count(RABBIT) == 1


def test_rabbit_procreates_only_strictly_past_threshold(make_world):
    config = WorldConfig(gen_proc_rabbits=1, n_rows=1, n_cols=3)
    world = make_world(config, {(0, 0): Cell(RABBIT, gen_proc=0)})

    # gen_proc becomes 1, not > 1: plain move.
    first = run_rabbit_phase(world.grid, config, 0)
    assert first.births == 0
    assert world.grid.get(0, 1) == Cell(RABBIT, gen_proc=1)

    # gen_proc becomes 2 > 1: leaves a newborn behind, parent resets.
    second = run_rabbit_phase(world.grid, config, 0)
    assert second.births == 1
    assert world.grid.get(0, 1) == Cell(RABBIT)
    moved = [(x, y) for x, y, _ in world.grid.objects(RABBIT) if (x, y) != (0, 1)]
    assert len(moved) == 1
    assert world.grid.get(*moved[0]) == Cell(RABBIT, gen_proc=0)


def test_newborn_does_not_act_in_birth_phase(make_world):
    config = WorldConfig(gen_proc_rabbits=0, n_rows=1, n_cols=4)
    world = make_world(config, {(0, 0): RABBIT})

    metrics = run_rabbit_phase(world.grid, config, 0)

    # The parent moved east; the newborn at (0, 0) was not visited.
    assert metrics.population_before == 1
    assert metrics.moves == 1
    assert world.grid.get(0, 0) == Cell(RABBIT)
    assert world.grid.get(0, 1) == Cell(RABBIT)
    assert world.grid.get(0, 2).is_empty


def test_equal_age_conflict_keeps_earlier_mover(make_world):
    config = WorldConfig(gen_proc_rabbits=5, n_rows=1, n_cols=3)
    world = make_world(config, {(0, 0): RABBIT, (0, 2): RABBIT})

    metrics = run_rabbit_phase(world.grid, config, 0)

    assert world.grid.get(0, 1) == Cell(RABBIT, gen_proc=1)
    assert world.grid.get(0, 0).is_empty
    assert world.grid.get(0, 2).is_empty
    assert metrics.conflicts == 1
    assert metrics.population_after == metrics.population_before + metrics.births - metrics.deaths


def test_older_later_mover_wins_conflict(make_world):
    config = WorldConfig(gen_proc_rabbits=5, n_rows=1, n_cols=3)
    world = make_world(config, {(0, 0): Cell(RABBIT, gen_proc=0), (0, 2): Cell(RABBIT, gen_proc=1)})

    run_rabbit_phase(world.grid, config, 0)

    assert world.grid.get(0, 1) == Cell(RABBIT, gen_proc=2)


def test_older_earlier_mover_is_kept(make_world):
    config = WorldConfig(gen_proc_rabbits=5, n_rows=1, n_cols=3)
    world = make_world(config, {(0, 0): Cell(RABBIT, gen_proc=3), (0, 2): Cell(RABBIT, gen_proc=1)})

    run_rabbit_phase(world.grid, config, 0)

    assert world.grid.get(0, 1) == Cell(RABBIT, gen_proc=4)


def test_procreating_mover_loses_conflict_after_reset(make_world):
    config = WorldConfig(gen_proc_rabbits=5, n_rows=1, n_cols=3)
    world = make_world(config, {(0, 0): Cell(RABBIT, gen_proc=5), (0, 2): Cell(RABBIT, gen_proc=0)})

    metrics = run_rabbit_phase(world.grid, config, 0)

    assert world.grid.get(0, 0) == Cell(RABBIT)
    assert world.grid.get(0, 1) == Cell(RABBIT, gen_proc=1)
    assert world.grid.get(0, 2).is_empty
    assert metrics.births == 1
    assert metrics.deaths == 1
    assert metrics.population_after == 2


def test_rabbits_never_enter_rock_or_fox_cells(make_world):
    config = WorldConfig(gen_proc_rabbits=0, n_rows=3, n_cols=3)
    world = make_world(
        config,
        {
            (1, 1): RABBIT,
            (0, 1): ObjectType.ROCK,
            (1, 2): ObjectType.FOX,
            (2, 1): ObjectType.ROCK,
        },
    )

    run_rabbit_phase(world.grid, config, 0)

    assert world.grid.get(0, 1).type is ObjectType.ROCK
    assert world.grid.get(2, 1).type is ObjectType.ROCK
    assert world.grid.get(1, 2).type is ObjectType.FOX
    assert world.grid.get(1, 0) == Cell(RABBIT)
    assert world.grid.get(1, 1) == Cell(RABBIT)
