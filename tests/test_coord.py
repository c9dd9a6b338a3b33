from cubesolver.coord import CoordCube
from cubesolver.cubie import CubieCube, N_MERGE
from cubesolver.moves import PHASE2_MOVES
from cubesolver.tools import random_cubie_cube

FIELDS = ('twist', 'flip', 'parity', 'fr_to_br', 'urf_to_dlf', 'ur_to_ul', 'ub_to_df')


def test_solved(tables):
    c = CoordCube(CubieCube.solved(), tables)
    assert c.is_solved()
    assert c.in_subgroup()
    assert c.slice == 0
    assert c.ur_to_df == 0


def test_moves_match_cubie_level(tables, rng):
    for _ in range(5):
        cube = random_cubie_cube(rng)
        for m in range(18):
            moved = cube.copy().move(m)
            c = CoordCube(cube, tables).move(m)
            expected = CoordCube(moved, tables)
            for name in FIELDS:
                assert getattr(c, name) == getattr(expected, name), (m, name)
            if c.ur_to_ul < N_MERGE and c.ub_to_df < N_MERGE:
                assert c.ur_to_df == moved.get_URtoDF()


def test_phase2_sequence_keeps_ur_to_df(tables, rng):
    cube = CubieCube.solved()
    c = CoordCube(cube, tables)
    for _ in range(30):
        m = rng.choice(PHASE2_MOVES)
        cube.move(m)
        c.move(m)
        assert c.in_subgroup()
        assert c.ur_to_df == cube.get_URtoDF()
        assert c.urf_to_dlf == cube.get_URFtoDLF()


def test_copy_is_independent(tables):
    c = CoordCube(CubieCube.solved(), tables)
    d = c.copy().move(3)
    assert c.is_solved()
    assert not d.is_solved()
    assert d.copy().move(5).is_solved()
