import pytest

from cubesolver.errors import FormatError
from cubesolver.moves import (MOVE_NAMES, PHASE2_MOVES, PHASE2_SKIP, format_moves, format_solution, inverse_move,
                              invert_moves, is_redundant, parse_moves, power_of)


def test_move_names_order():
    assert len(MOVE_NAMES) == 18
    assert MOVE_NAMES[:6] == ('U', 'U2', "U'", 'R', 'R2', "R'")
    assert MOVE_NAMES[-1] == "B'"


def test_phase2_moves():
    assert PHASE2_MOVES == (0, 1, 2, 4, 7, 9, 10, 11, 13, 16)
    assert PHASE2_SKIP == {3, 5, 6, 8, 12, 14, 15, 17}


def test_parse_and_format():
    moves = parse_moves("R U2 F' . D")
    assert moves == [3, 1, 8, 9]
    assert format_moves(moves) == ['R', 'U2', "F'", 'D']
    assert format_solution(format_moves(moves)) == "R U2 F' D"
    assert parse_moves(['L2', "B'"]) == [13, 17]
    assert parse_moves("") == []


@pytest.mark.parametrize('text', ["R3", "X", "r", "R U2'", "R,U"])
def test_parse_rejects_bad_tokens(text):
    with pytest.raises(FormatError):
        parse_moves(text)


def test_inverse():
    assert format_moves([inverse_move(m) for m in parse_moves("R R2 R'")]) == ["R'", 'R2', 'R']
    assert format_moves(invert_moves(parse_moves("R U F2"))) == ['F2', "U'", "R'"]
    assert [power_of(m) for m in parse_moves("D D2 D'")] == [1, 2, 3]


def test_redundant_faces():
    assert not is_redundant(None, 0)
    assert is_redundant(1, 1)  # R after R
    assert is_redundant(3, 0)  # U after D
    assert not is_redundant(0, 3)  # D after U
    assert not is_redundant(0, 1)
