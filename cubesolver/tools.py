import random

from cubesolver.cubie import CubieCube, N_TWIST, N_FLIP, N_URFtoDLB, N_URtoBR
from cubesolver.errors import FormatError, VerifyResult
from cubesolver.facelet import to_cubie_cube, to_facelet_string, face_colors
from cubesolver.moves import parse_moves


def verify(facelets: str) -> int:
    """
    Check that a facelet string describes a solvable cube.
    0: solvable
    -1: not 54 facelets with 9 of each of 6 colours and distinct centres
    -2: not all 12 edges exist exactly once
    -3: one edge has to be flipped
    -4: not all 8 corners exist exactly once
    -5: one corner has to be twisted
    -6: two corners or two edges have to be exchanged
    """
    try:
        cube = to_cubie_cube(facelets)
    except FormatError:
        return int(VerifyResult.WRONG_FACELET_COUNT)
    return int(cube.verify())


def random_cubie_cube(rng: random.Random = None) -> CubieCube:
    """Uniformly random solvable cube, permutations redrawn until their parities agree"""
    rng = rng or random
    c = CubieCube.solved()
    c.set_flip(rng.randrange(N_FLIP))
    c.set_twist(rng.randrange(N_TWIST))
    while True:
        c.set_URFtoDLB(rng.randrange(N_URFtoDLB))
        c.set_URtoBR(rng.randrange(N_URtoBR))
        if c.edge_parity() == c.corner_parity():
            return c


def random_cube(rng: random.Random = None) -> str:
    return to_facelet_string(random_cubie_cube(rng))


def apply_moves(facelets: str, moves) -> str:
    """Facelet string after the moves, written with the symbols of the input"""
    cube = to_cubie_cube(facelets)
    cube.apply(parse_moves(moves))
    return to_facelet_string(cube, face_colors(facelets))


def scramble(moves) -> str:
    """Facelet string of the solved cube after the moves"""
    return to_facelet_string(CubieCube.solved().apply(parse_moves(moves)))
