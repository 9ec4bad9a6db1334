from __future__ import annotations

import random

import pytest

from turingsim.tape import Move, Tape


def test_move_parse_accepts_known_directions() -> None:
    assert [Move.parse(m) for m in "LNR"] == [Move.L, Move.N, Move.R]
    assert str(Move.R) == "R"
    with pytest.raises(ValueError):
        Move.parse("X")


def test_new_tape_is_a_single_blank_cell() -> None:
    tape = Tape()
    assert tape.read() == "0"
    assert len(tape) == 1
    assert tape.census("0") == 1


def test_move_left_pushes_center_onto_right() -> None:
    tape = Tape(["b", "a"], "c", ["d"])
    tape.move(Move.L)
    assert tape.read() == "b"
    assert tape.left == ("a",)
    assert tape.right == ("c", "d")


def test_move_right_off_the_end_materializes_a_blank() -> None:
    tape = Tape(center="1")
    tape.move(Move.R)
    assert tape.read() == "0"
    assert tape.left == ("1",)
    assert tape.right == ()
    assert len(tape) == 2


def test_move_none_changes_nothing() -> None:
    tape = Tape(["1"], "1", ["0", "1"])
    before = Tape(["1"], "1", ["0", "1"])
    tape.move(Move.N)
    assert tape == before


def test_moves_grow_tape_by_at_most_one_cell() -> None:
    tape = Tape()
    rng = random.Random(7)
    for _ in range(500):
        size = len(tape)
        tape.move(rng.choice(list(Move)))
        assert len(tape) - size in (0, 1)


def test_cells_are_ordered_left_to_right() -> None:
    tape = Tape(["b", "a"], "c", ["d", "e"])
    assert list(tape.cells()) == ["a", "b", "c", "d", "e"]
    assert tape.head == 2


def strip_blanks(tape: Tape) -> tuple[list[str], int]:
    cells = list(tape.cells())
    start = next(i for i, symbol in enumerate(cells) if symbol != tape.blank)
    end = max(i for i, symbol in enumerate(cells) if symbol != tape.blank)
    return cells[start : end + 1], tape.head - start


@pytest.mark.parametrize("seed", range(5))
def test_moves_followed_by_reverse_moves_restore_the_tape(seed: int) -> None:
    rng = random.Random(seed)
    left = [rng.choice("01x") for _ in range(rng.randrange(5))] + ["1"]
    right = [rng.choice("01x") for _ in range(rng.randrange(5))] + ["x"]
    tape = Tape(left, rng.choice("01x"), right)
    original = Tape(left, tape.read(), right)

    moves = [rng.choice([Move.L, Move.R, Move.N]) for _ in range(40)]
    for move in moves:
        tape.move(move)
    for move in reversed(moves):
        tape.move(Move(-move))

    assert tape.read() == original.read()
    assert strip_blanks(tape) == strip_blanks(original)
    for symbol in "1x":
        assert tape.census(symbol) == original.census(symbol)


def test_census_counts_only_materialized_cells() -> None:
    tape = Tape(["1", "0"], "1", ["x", "1"])
    assert tape.census("1") == 3
    assert tape.census("0") == 1
    assert tape.census("x") == 1
    assert tape.census("y") == 0


def test_census_after_write() -> None:
    tape = Tape(["1"], "0", ["1"])
    tape.write("1")
    assert tape.census("1") == 3
    assert tape.census("0") == 0
    tape.write("1")
    assert tape.census("1") == 3


def test_census_accepts_non_string_symbols() -> None:
    tape = Tape([1, 0], 1, [2], blank=0)
    assert tape.census(1) == 2
    tape.move(Move.R)
    tape.move(Move.R)
    assert tape.read() == 0
    assert tape.census(0) == 2


def test_render_matches_reference_layout() -> None:
    assert str(Tape(["b", "a"], "c", ["d", "e"])) == "---a-b[c]d-e---"
    assert str(Tape()) == "--[0]---"


def test_dict_round_trip() -> None:
    tape = Tape(["1", "0"], "1", ["1"], blank="_")
    assert Tape.from_dict(tape.to_dict()) == tape
