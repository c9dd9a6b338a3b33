import pytest

from cubesolver.cubie import CubieCube
from cubesolver.errors import FormatError
from cubesolver.facelet import SOLVED_FACELETS, to_cubie_cube, to_facelet_string, check_facelets
from cubesolver.tools import random_cubie_cube

R_MOVED = "UUFUUFUUFRRRRRRRRRFFDFFDFFDDDBDDBDDBLLLLLLLLLUBBUBBUBB"


def test_solved():
    assert SOLVED_FACELETS == "UUUUUUUUURRRRRRRRRFFFFFFFFFDDDDDDDDDLLLLLLLLLBBBBBBBBB"
    assert to_facelet_string(CubieCube.solved()) == SOLVED_FACELETS
    assert to_cubie_cube(SOLVED_FACELETS).is_solved()


def test_single_move():
    assert to_facelet_string(CubieCube.solved().move(3)) == R_MOVED
    assert to_cubie_cube(R_MOVED) == CubieCube.solved().move(3)


def test_round_trip(rng):
    for _ in range(50):
        c = random_cubie_cube(rng)
        assert to_cubie_cube(to_facelet_string(c)) == c


def test_any_symbols():
    table = str.maketrans('URFDLB', 'WRGYOB')
    colored = R_MOVED.translate(table)
    assert to_cubie_cube(colored) == CubieCube.solved().move(3)
    assert to_facelet_string(CubieCube.solved().move(3), 'WRGYOB') == colored


def test_centres_define_faces():
    # the same cube with the colour scheme permuted
    table = str.maketrans('URFDLB', 'FDLBUR')
    assert to_cubie_cube(R_MOVED.translate(table)) == CubieCube.solved().move(3)


@pytest.mark.parametrize('facelets', [
    SOLVED_FACELETS[:-1],
    SOLVED_FACELETS + 'B',
    'X' + SOLVED_FACELETS[1:],  # seven symbols
    'R' + SOLVED_FACELETS[1:],  # U 8 times, R 10 times
    None,
])
def test_malformed(facelets):
    with pytest.raises(FormatError):
        to_cubie_cube(facelets)


def test_duplicate_centres():
    f = list(SOLVED_FACELETS)
    f[4], f[9] = f[9], f[4]  # U centre becomes R, counts stay 9
    with pytest.raises(FormatError, match='Centre'):
        check_facelets(''.join(f))


def test_wrong_colour_count_for_output():
    with pytest.raises(FormatError):
        to_facelet_string(CubieCube.solved(), 'URF')
