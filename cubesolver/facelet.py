"""
Facelet level of the cube: a 54 character string, faces in the order U, R, F, D, L, B,
nine stickers per face read row by row as the face is seen from outside

             |************|
             |*U1**U2**U3*|
             |*U4**U5**U6*|
             |*U7**U8**U9*|
 ************|************|************|************
 *L1**L2**L3*|*F1**F2**F3*|*R1**R2**R3*|*B1**B2**B3*
 *L4**L5**L6*|*F4**F5**F6*|*R4**R5**R6*|*B4**B5**B6*
 *L7**L8**L9*|*F7**F8**F9*|*R7**R8**R9*|*B7**B8**B9*
 ************|************|************|************
             |*D1**D2**D3*|
             |*D4**D5**D6*|
             |*D7**D8**D9*|

Any six symbols may be used, the centre sticker of each face names its colour.
"""
from collections import Counter

import numpy as np

from cubesolver.cubie import CubieCube
from cubesolver.errors import FormatError
from cubesolver.moves import FACES

N_FACELETS = 54
CENTERS = (4, 13, 22, 31, 40, 49)
SOLVED_FACELETS = ''.join(f * 9 for f in FACES)

U, R, F, D, L, B = range(6)

# sticker positions of each corner position, the first one is on the U or D face,
# the others follow clockwise
CORNER_FACELETS = (
    (8, 9, 20),  # URF: U9 R1 F3
    (6, 18, 38),  # UFL: U7 F1 L3
    (0, 36, 47),  # ULB: U1 L1 B3
    (2, 45, 11),  # UBR: U3 B1 R3
    (29, 26, 15),  # DFR: D3 F9 R7
    (27, 44, 24),  # DLF: D1 L9 F7
    (33, 53, 42),  # DBL: D7 B9 L7
    (35, 17, 51),  # DRB: D9 R9 B7
)

EDGE_FACELETS = (
    (5, 10),  # UR
    (7, 19),  # UF
    (3, 37),  # UL
    (1, 46),  # UB
    (32, 16),  # DR
    (28, 25),  # DF
    (30, 43),  # DL
    (34, 52),  # DB
    (23, 12),  # FR
    (21, 41),  # FL
    (50, 39),  # BL
    (48, 14),  # BR
)

CORNER_COLORS = (
    (U, R, F), (U, F, L), (U, L, B), (U, B, R),
    (D, F, R), (D, L, F), (D, B, L), (D, R, B),
)

EDGE_COLORS = (
    (U, R), (U, F), (U, L), (U, B), (D, R), (D, F),
    (D, L), (D, B), (F, R), (F, L), (B, L), (B, R),
)


def check_facelets(facelets: str) -> list[int]:
    """
    Translate the symbols to face indices 0..5 through the centre stickers.
    Raises FormatError unless there are 54 symbols, six distinct ones, nine of each,
    with six different centres.
    """
    if not isinstance(facelets, str):
        raise FormatError(f"Facelets must be a string, got {type(facelets).__name__}")
    if len(facelets) != N_FACELETS:
        raise FormatError(f"Expected {N_FACELETS} facelets, got {len(facelets)}")

    count = Counter(facelets)
    if len(count) != 6 or any(n != 9 for n in count.values()):
        raise FormatError(f"Each of 6 colours must appear 9 times: {dict(count)}")

    centers = [facelets[i] for i in CENTERS]
    if len(set(centers)) != 6:
        raise FormatError(f"Centre facelets must all differ: {''.join(centers)}")

    face_of_color = {c: i for i, c in enumerate(centers)}
    return [face_of_color[c] for c in facelets]


def to_cubie_cube(facelets: str) -> CubieCube:
    """
    Facelet string to cubie level. A sticker combination that matches no piece leaves
    that position at piece 0, which verify() then reports as a missing piece.
    """
    f = check_facelets(facelets)
    cp = [0] * 8
    co = [0] * 8
    ep = [0] * 12
    eo = [0] * 12

    for i, stickers in enumerate(CORNER_FACELETS):
        for ori in range(3):  # find the U or D sticker
            if f[stickers[ori]] in (U, D):
                break
        else:
            ori = 0
        col1 = f[stickers[(ori + 1) % 3]]
        col2 = f[stickers[(ori + 2) % 3]]
        for j, colors in enumerate(CORNER_COLORS):
            if col1 == colors[1] and col2 == colors[2]:
                cp[i] = j
                co[i] = ori
                break

    for i, (s0, s1) in enumerate(EDGE_FACELETS):
        for j, (c0, c1) in enumerate(EDGE_COLORS):
            if f[s0] == c0 and f[s1] == c1:
                ep[i] = j
                eo[i] = 0
                break
            if f[s0] == c1 and f[s1] == c0:
                ep[i] = j
                eo[i] = 1
                break

    return CubieCube.from_lists(cp, co, ep, eo)


def to_facelet_string(cube: CubieCube, colors: str = FACES) -> str:
    """Cubie level to facelet string, colors[i] is written for face i (default URFDLB)"""
    if len(colors) != 6:
        raise FormatError(f"Expected 6 colour symbols, got {colors!r}")
    f = np.zeros(N_FACELETS, dtype=np.int8)
    for i in range(6):
        f[9 * i:9 * i + 9] = i

    cp, co, ep, eo = cube.cp.tolist(), cube.co.tolist(), cube.ep.tolist(), cube.eo.tolist()
    for i, stickers in enumerate(CORNER_FACELETS):
        j, ori = cp[i], co[i]
        for n in range(3):
            f[stickers[(n + ori) % 3]] = CORNER_COLORS[j][n]

    for i, stickers in enumerate(EDGE_FACELETS):
        j, ori = ep[i], eo[i]
        for n in range(2):
            f[stickers[(n + ori) % 2]] = EDGE_COLORS[j][n]

    return ''.join(colors[c] for c in f.tolist())


def face_colors(facelets: str) -> str:
    """The six centre symbols in U, R, F, D, L, B order"""
    return ''.join(facelets[i] for i in CENTERS)
