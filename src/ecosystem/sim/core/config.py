from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import InputFormatError

WORLD_FIELDS = ("gen_proc_rabbits", "gen_proc_foxes", "gen_food_foxes", "n_gen", "n_rows", "n_cols")


@dataclass(frozen=True, slots=True)
class WorldConfig:
    gen_proc_rabbits: int = 2
    gen_proc_foxes: int = 4
    gen_food_foxes: int = 3
    n_gen: int = 10
    n_rows: int = 10
    n_cols: int = 10

    @property
    def shape(self) -> tuple[int, int]:
        return (self.n_rows, self.n_cols)

    def as_tuple(self) -> tuple[int, ...]:
        return tuple(getattr(self, name) for name in WORLD_FIELDS)

    @staticmethod
    def from_yaml(path: Path) -> "WorldConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


@dataclass
class ServerConfig:
    generation_interval: float = 0.25
    broadcast_interval: int = 1
    world_path: Optional[str] = None


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    world: WorldConfig = field(default_factory=WorldConfig)

    @staticmethod
    def from_yaml(path: Path) -> "AppConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_app_config(data)


def _non_negative_int(name: str, value: Any) -> int:
    # bool is an int subclass; "true" in a YAML file is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputFormatError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InputFormatError(f"{name} must be non-negative, got {value}")
    return value


def load_config(raw: Dict[str, Any]) -> WorldConfig:
    if not isinstance(raw, dict):
        raise InputFormatError(f"world config must be a mapping, got {type(raw).__name__}")
    unknown = sorted(set(raw) - set(WORLD_FIELDS))
    if unknown:
        raise InputFormatError(f"unknown world config keys: {', '.join(unknown)}")
    values = {name: _non_negative_int(name, raw[name]) for name in WORLD_FIELDS if name in raw}
    return WorldConfig(**values)


def _load_server_config(raw: Any) -> ServerConfig:
    if not isinstance(raw, dict):
        raise InputFormatError(f"server config must be a mapping, got {type(raw).__name__}")
    known = {f.name for f in fields(ServerConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise InputFormatError(f"unknown server config keys: {', '.join(unknown)}")
    return ServerConfig(**raw)


def load_app_config(raw: Dict[str, Any]) -> AppConfig:
    if not isinstance(raw, dict):
        raise InputFormatError(f"app config must be a mapping, got {type(raw).__name__}")
    server = _load_server_config(raw.get("server", {}))
    world = load_config(raw.get("world", {}))
    return AppConfig(server=server, world=world)
