from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class ObjectType(str, Enum):
    NONE = "NONE"
    ROCK = "ROCK"
    RABBIT = "RABBIT"
    FOX = "FOX"


@dataclass(frozen=True, slots=True)
class Cell:
    """One grid slot. ``gen_proc`` counts generations since birth or last procreation,
    ``last_ate`` counts generations since a fox last ate."""

    type: ObjectType = ObjectType.NONE
    gen_proc: int = 0
    last_ate: int = 0

    @property
    def is_empty(self) -> bool:
        return self.type is ObjectType.NONE

    def aged(self) -> "Cell":
        return replace(self, gen_proc=self.gen_proc + 1)

    def hungrier(self) -> "Cell":
        return replace(self, last_ate=self.last_ate + 1)

    def with_counters(self, gen_proc: int | None = None, last_ate: int | None = None) -> "Cell":
        return replace(
            self,
            gen_proc=self.gen_proc if gen_proc is None else gen_proc,
            last_ate=self.last_ate if last_ate is None else last_ate,
        )


EMPTY = Cell()


def newborn(obj_type: ObjectType) -> Cell:
    return Cell(obj_type)
