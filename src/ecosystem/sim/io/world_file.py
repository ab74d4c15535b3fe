"""Reading and writing the plain-text world description.

The format is a stream of whitespace-separated tokens::

    gen_proc_rabbits gen_proc_foxes gen_food_foxes n_gen n_rows n_cols
    n_objects
    TYPE row col      (n_objects times, TYPE is ROCK, RABBIT or FOX)

Worlds may also be described in YAML with the six config keys and an
``objects`` list of ``{type, row, col}`` mappings.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List

import yaml

from ..core.cell import ObjectType
from ..core.config import WORLD_FIELDS, WorldConfig, load_config
from ..core.errors import InputFormatError, OutOfBoundsError
from ..core.world import World

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[0-9]+")
_PLACEABLE = {ObjectType.ROCK.value, ObjectType.RABBIT.value, ObjectType.FOX.value}
YAML_SUFFIXES = {".yaml", ".yml"}


class _Tokens:
    def __init__(self, text: str) -> None:
        self._tokens: Iterator[str] = iter(text.split())

    def word(self, what: str) -> str:
        token = next(self._tokens, None)
        if token is None:
            raise InputFormatError(f"unexpected end of input, expected {what}")
        return token

    def integer(self, what: str) -> int:
        token = self.word(what)
        if not _INTEGER.fullmatch(token):
            raise InputFormatError(f"expected a non-negative integer for {what}, got {token!r}")
        return int(token)


def _object_type(token: Any) -> ObjectType:
    if not isinstance(token, str) or token not in _PLACEABLE:
        raise InputFormatError(f"unknown object type {token!r}")
    return ObjectType(token)


def _place(world: World, obj_type: ObjectType, row: int, col: int) -> None:
    if not world.grid.in_bounds(row, col):
        raise OutOfBoundsError(
            f"{obj_type.value} at ({row}, {col}) outside {world.config.n_rows}x{world.config.n_cols} grid"
        )
    world.place(obj_type, row, col)


def parse_world(text: str) -> World:
    tokens = _Tokens(text)
    values = {name: tokens.integer(name) for name in WORLD_FIELDS}
    world = World(WorldConfig(**values))

    n_objects = tokens.integer("object count")
    for i in range(n_objects):
        obj_type = _object_type(tokens.word(f"type of object {i}"))
        row = tokens.integer(f"row of object {i}")
        col = tokens.integer(f"column of object {i}")
        _place(world, obj_type, row, col)

    logger.debug("loaded %dx%d world with %d objects", world.config.n_rows, world.config.n_cols, n_objects)
    return world


def parse_world_yaml(raw: Dict[str, Any]) -> World:
    if not isinstance(raw, dict):
        raise InputFormatError("world description must be a mapping")
    missing = [name for name in WORLD_FIELDS if name not in raw]
    if missing:
        raise InputFormatError(f"world description is missing {', '.join(missing)}")
    config = load_config({k: v for k, v in raw.items() if k != "objects"})
    world = World(config)

    objects = raw.get("objects") or []
    if not isinstance(objects, list):
        raise InputFormatError("objects must be a list")
    for i, entry in enumerate(objects):
        if not isinstance(entry, dict) or not {"type", "row", "col"} <= set(entry):
            raise InputFormatError(f"object {i} must be a mapping with type, row and col")
        row = entry["row"]
        col = entry["col"]
        if isinstance(row, bool) or isinstance(col, bool) or not isinstance(row, int) or not isinstance(col, int):
            raise InputFormatError(f"object {i} has non-integer coordinates ({row!r}, {col!r})")
        if row < 0 or col < 0:
            raise InputFormatError(f"object {i} has negative coordinates ({row}, {col})")
        _place(world, _object_type(entry["type"]), row, col)

    logger.debug("loaded %dx%d world with %d objects", config.n_rows, config.n_cols, len(objects))
    return world


def load_world(path: Path) -> World:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InputFormatError(f"{path} is not valid UTF-8 text: {exc}") from exc
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise InputFormatError(f"invalid YAML in {path}: {exc}") from exc
        return parse_world_yaml(raw)
    return parse_world(text)


def format_world(world: World) -> str:
    """Serialize ``world`` back to the text format.

    The ``n_gen`` slot carries the generations still to run, so a finished
    world reports ``0``.
    """

    config = world.config
    objects: List[str] = [f"{cell.type.value} {x} {y}" for x, y, cell in world.grid.objects()]
    header = (
        f"{config.gen_proc_rabbits} {config.gen_proc_foxes} {config.gen_food_foxes} "
        f"{world.remaining} {config.n_rows} {config.n_cols} {len(objects)}"
    )
    return "\n".join([header, *objects]) + "\n"


def write_world(world: World, path: Path) -> None:
    Path(path).write_text(format_world(world))
