from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from itertools import chain
from types import MappingProxyType
from typing import Any, NamedTuple, Self, TypeAlias

from turingsim.tape import Move, Symbol, Tape


class Halt(Enum):
    HALT = "HALT"

    def __str__(self) -> str:
        return self.value


HALT = Halt.HALT

State: TypeAlias = str | Halt


class Transition(NamedTuple):
    write: Symbol
    move: Move
    next_state: State


TransitionTable: TypeAlias = Mapping[str, Mapping[Symbol, Transition]]


class MachineDefnError(Exception):
    pass


class UndefinedState(MachineDefnError):
    def __init__(self, state: State) -> None:
        super().__init__(f"State '{state}' has no transitions")
        self.state = state


class UndefinedTransition(MachineDefnError):
    def __init__(self, state: State, symbol: Symbol) -> None:
        super().__init__(f"State '{state}' has no transition for symbol '{symbol}'")
        self.state = state
        self.symbol = symbol


class UnserializableSymbol(ValueError):
    def __init__(self, symbol: Symbol) -> None:
        super().__init__(f"Symbol {symbol!r} cannot be stored in a snapshot, only string symbols can")
        self.symbol = symbol


def freeze_table(table: TransitionTable) -> TransitionTable:
    return MappingProxyType({
        state: MappingProxyType({symbol: Transition(*trans) for symbol, trans in row.items()})
        for state, row in table.items()
    })


def format_table(table: TransitionTable) -> str:
    lines = []
    for state, row in table.items():
        cells = (f"  {symbol}: |{write} {move!s} {target!s:4}|" for symbol, (write, move, target) in row.items())
        lines.append(f"{state}:{''.join(cells)}")
    return "\n".join(lines)


@dataclass(eq=False)
class Machine:
    """A single tape Turing machine.

    The transition table is copied into read-only mappings when the machine is created, the tape is owned by the
    machine and mutated by every step. Missing table entries are only detected once a step actually needs them.
    """

    table: TransitionTable
    state: State
    tape: Tape
    steps: int = 0

    def __post_init__(self) -> None:
        self.table = freeze_table(self.table)
        self.tape = self.tape.copy()

    @property
    def halted(self) -> bool:
        return self.state is HALT

    def step(self) -> None:
        if self.state is HALT:
            return
        self.steps += 1
        try:
            row = self.table[self.state]
        except KeyError:
            raise UndefinedState(self.state) from None
        symbol = self.tape.read()
        try:
            write, move, state = row[symbol]
        except KeyError:
            raise UndefinedTransition(self.state, symbol) from None
        self.tape.write(write)
        self.tape.move(move)
        self.state = state

    def run(self) -> None:
        while self.state is not HALT:
            self.step()

    def trace(self) -> Iterator[Self]:
        while self.state is not HALT:
            self.step()
            yield self

    __iter__ = trace

    def census(self, symbol: Symbol) -> int:
        return self.tape.census(symbol)

    def count_ones(self, one: Symbol = "1") -> int:
        return self.tape.census(one)

    def __str__(self) -> str:
        return f"Steps: {self.steps}\nState: {self.state}\nTable:\n{format_table(self.table)}\n{self.tape}\n"

    def pretty(self) -> str:
        state = f"[attention]{self.state}[/]" if self.halted else f"[cyan]{self.state}[/]"
        return f"{self.steps: >8}    {state}    {self.tape.pretty()}"

    def to_dict(self) -> dict[str, Any]:
        symbols = chain(
            (self.tape.blank,),
            self.tape.cells(),
            *((symbol, write) for row in self.table.values() for symbol, (write, _, _) in row.items()),
        )
        for symbol in symbols:
            if not isinstance(symbol, str):
                raise UnserializableSymbol(symbol)

        def encode(state: State) -> str | None:
            return None if state is HALT else state

        return {
            "steps": self.steps,
            "state": encode(self.state),
            "table": {
                state: {symbol: [write, str(move), encode(target)] for symbol, (write, move, target) in row.items()}
                for state, row in self.table.items()
            },
            "tape": self.tape.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        def decode(state: str | None) -> State:
            return HALT if state is None else state

        table = {
            state: {
                symbol: Transition(write, Move.parse(move), decode(target))
                for symbol, (write, move, target) in row.items()
            }
            for state, row in data["table"].items()
        }
        return cls(table, decode(data["state"]), Tape.from_dict(data["tape"]), data.get("steps", 0))
