from __future__ import annotations

from collections import deque
from collections.abc import Hashable, Iterable, Iterator, Mapping
from enum import IntEnum
from itertools import chain
from typing import Any, Self, TypeAlias

Symbol: TypeAlias = Hashable

BLANK = "0"


class Move(IntEnum):
    L = -1
    N = 0
    R = 1

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, val: str) -> Self:
        match val:
            case "L" | "N" | "R":
                return getattr(cls, val)
            case _:
                raise ValueError(f"Unknown move '{val}', expected one of L, N, R")


class Tape:
    """An unbounded tape split around the head.

    `left` and `right` hold the materialized cells on either side of the head, each ordered from the cell nearest to
    the head outwards. Cells that were never materialized are implicitly `blank`.
    """

    __slots__ = ("_left", "center", "_right", "blank")

    def __init__(
        self,
        left: Iterable[Symbol] = (),
        center: Symbol | None = None,
        right: Iterable[Symbol] = (),
        *,
        blank: Symbol = BLANK,
    ) -> None:
        self._left = deque(left)
        self.center = blank if center is None else center
        self._right = deque(right)
        self.blank = blank

    @property
    def left(self) -> tuple[Symbol, ...]:
        return tuple(self._left)

    @property
    def right(self) -> tuple[Symbol, ...]:
        return tuple(self._right)

    @property
    def head(self) -> int:
        return len(self._left)

    def read(self) -> Symbol:
        return self.center

    def write(self, symbol: Symbol) -> None:
        self.center = symbol

    def move(self, direction: Move) -> None:
        match direction:
            case Move.L:
                self._right.appendleft(self.center)
                self.center = self._left.popleft() if self._left else self.blank
            case Move.R:
                self._left.appendleft(self.center)
                self.center = self._right.popleft() if self._right else self.blank
            case Move.N:
                pass

    def copy(self) -> Self:
        return type(self)(self._left, self.center, self._right, blank=self.blank)

    def census(self, target: Symbol) -> int:
        return self._left.count(target) + (self.center == target) + self._right.count(target)

    def cells(self) -> Iterator[Symbol]:
        return chain(reversed(self._left), (self.center,), self._right)

    def __len__(self) -> int:
        return len(self._left) + 1 + len(self._right)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tape):
            return NotImplemented
        return (self._left, self.center, self._right, self.blank) == (
            other._left,
            other.center,
            other._right,
            other.blank,
        )

    def __repr__(self) -> str:
        return f"Tape(left={list(self._left)!r}, center={self.center!r}, right={list(self._right)!r})"

    def __str__(self) -> str:
        left = "".join(f"-{symbol}" for symbol in reversed(self._left))
        right = "-".join(str(symbol) for symbol in self._right)
        return f"--{left}[{self.center}]{right}---"

    def pretty(self) -> str:
        def fmt(symbol: Symbol) -> str:
            return f"[grey58]{symbol}[/]" if symbol == self.blank else str(symbol)

        left = "".join(f"-{fmt(symbol)}" for symbol in reversed(self._left))
        right = "-".join(fmt(symbol) for symbol in self._right)
        return f"[grey58]--[/]{left}[cyan]\\[{self.center}][/]{right}[grey58]---[/]"

    def to_dict(self) -> dict[str, Any]:
        return {
            "left": list(self._left),
            "center": self.center,
            "right": list(self._right),
            "blank": self.blank,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        blank = data.get("blank", BLANK)
        return cls(data.get("left", ()), data.get("center", blank), data.get("right", ()), blank=blank)
