import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from ecosystem.sim.core.cell import Cell  # noqa: E402
from ecosystem.sim.core.config import WorldConfig  # noqa: E402
from ecosystem.sim.core.world import World  # noqa: E402


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run long multi-hundred-generation simulations",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "slow: marks long-running simulations skipped unless --run-slow is given",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-slow"):
        return

    skip_marker = pytest.mark.skip(reason="Long simulation (use --run-slow)")

    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_marker)


@pytest.fixture
def make_world():
    """Build a world from a config and a ``{(row, col): Cell | ObjectType}`` layout."""

    def _make(config: WorldConfig, layout: dict) -> World:
        world = World(config)
        for (x, y), value in layout.items():
            cell = value if isinstance(value, Cell) else Cell(value)
            world.grid.set(x, y, cell)
        return world

    return _make
