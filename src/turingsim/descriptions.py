from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from turingsim.tape import BLANK, Move, Tape
from turingsim.turing_machine import HALT, Machine, State, Transition


class DescriptionError(ValueError):
    pass


def state_name(index: int) -> str:
    return chr(ord("A") + index)


def parse_standard(text: str) -> Machine:
    """Parses the compact text format used by busy beaver searches, e.g. `1RB1LB_1LA1RZ`.

    Rows are separated by underscores and name the states `A`, `B`, ... in order, the cells of a row are the
    transitions for the symbols `0`, `1`, ... and are written as `<write><move><next state>`. `---` marks a missing
    transition and `Z` (or `H` for machines with fewer than eight states) is the halting state.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip() and not line.lstrip().startswith("#")]
    if not lines:
        raise DescriptionError("Empty machine description")
    rows = lines[0].split("_")
    halt_names = {"Z", "H"} if len(rows) < 8 else {"Z"}

    table: dict[str, dict[str, Transition]] = {}
    for index, row in enumerate(rows):
        if not row or len(row) % 3:
            raise DescriptionError(f"Row {index + 1} '{row}' is not made of three character transitions")
        cells: dict[str, Transition] = {}
        for symbol, offset in enumerate(range(0, len(row), 3)):
            cell = row[offset : offset + 3]
            if cell == "---":
                continue
            write, move, target = cell
            try:
                direction = Move.parse(move)
            except ValueError as e:
                raise DescriptionError(f"Transition '{cell}' in row {index + 1}: {e}") from e
            cells[str(symbol)] = Transition(write, direction, HALT if target in halt_names else target)
        table[state_name(index)] = cells
    return Machine(table, "A", Tape())


def parse_transition(state: str, symbol: str, value: Any, halt: str) -> Transition:
    match value:
        case [str() as write, str() as move, str() as target]:
            try:
                direction = Move.parse(move)
            except ValueError as e:
                raise DescriptionError(f"Transition ({state}, {symbol}): {e}") from e
            next_state: State = HALT if target == halt else target
            return Transition(write, direction, next_state)
        case _:
            raise DescriptionError(
                f"Transition ({state}, {symbol}) must be a list [write, move, next state] of strings, got {value!r}"
            )


def from_description(data: Mapping[str, Any]) -> Machine:
    halt = data.get("halt", "HALT")
    blank = data.get("blank", BLANK)
    start = data.get("start", "A")
    initial: State = HALT if start == halt else start

    rows = data.get("table")
    if not isinstance(rows, Mapping) or not rows:
        raise DescriptionError("Description has no transition table")
    table: dict[str, dict[str, Transition]] = {}
    for state, row in rows.items():
        if state == halt:
            raise DescriptionError(f"The halting state '{halt}' cannot have transitions")
        if not isinstance(row, Mapping):
            raise DescriptionError(f"Transitions of state '{state}' must be a table")
        table[state] = {symbol: parse_transition(state, symbol, value, halt) for symbol, value in row.items()}

    tape = data.get("tape", {})
    if not isinstance(tape, Mapping):
        raise DescriptionError("The tape must be a table with 'left', 'center' and 'right' entries")
    return Machine(table, initial, Tape(tape.get("left", ()), tape.get("center"), tape.get("right", ()), blank=blank))


def parse_toml(text: str) -> Machine:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise DescriptionError(f"Invalid TOML: {e}") from e
    return from_description(data)


def check_snapshot(data: Any) -> None:
    if not isinstance(data, Mapping):
        raise DescriptionError("A snapshot must be a JSON object")
    for key in ("state", "table", "tape"):
        if key not in data:
            raise DescriptionError(f"Snapshot is missing '{key}'")
    if not isinstance(data["table"], Mapping):
        raise DescriptionError("The snapshot table must be an object of states")
    for state, row in data["table"].items():
        if not isinstance(row, Mapping):
            raise DescriptionError(f"Transitions of state '{state}' must be an object")
    if not isinstance(data["tape"], Mapping):
        raise DescriptionError("The snapshot tape must be an object with 'left', 'center' and 'right' entries")


def parse_snapshot(text: str) -> Machine:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DescriptionError(f"Invalid JSON: {e}") from e
    check_snapshot(data)
    try:
        return Machine.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise DescriptionError(f"Malformed snapshot: {e!r}") from e


def dump_snapshot(machine: Machine) -> str:
    return json.dumps(machine.to_dict(), indent=2)


def load_machine(path: Path) -> Machine:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DescriptionError(f"{path}: not a UTF-8 text file") from e
    try:
        match path.suffix:
            case ".toml":
                return parse_toml(text)
            case ".json":
                return parse_snapshot(text)
            case _:
                return parse_standard(text)
    except DescriptionError as e:
        raise DescriptionError(f"{path}: {e}") from e


def save_snapshot(machine: Machine, path: Path) -> None:
    path.write_text(dump_snapshot(machine) + "\n", encoding="utf-8")
