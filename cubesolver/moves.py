import re

from cubesolver.errors import FormatError

FACES = 'URFDLB'  # face order of facelet strings and of move indices
POWERS = ('', '2', "'")  # quarter clockwise, half, quarter counter-clockwise
N_MOVE = 18

# move index m = 3 * face + power
MOVE_NAMES = tuple(f + p for f in FACES for p in POWERS)
MOVE_INDEX = {name: i for i, name in enumerate(MOVE_NAMES)}

# <U, D, R2, L2, F2, B2>, the moves that keep a cube inside the H-subgroup
PHASE2_MOVES = tuple(m for m in range(N_MOVE) if m // 3 in (0, 3) or m % 3 == 1)
# moves a phase-2 pruning table never expands: quarter turns of R, F, L, B
PHASE2_SKIP = frozenset(range(N_MOVE)) - frozenset(PHASE2_MOVES)

SEPARATOR = '.'

_TOKEN = re.compile(r"([URFDLB])(2|'|)")


def face_of(m: int) -> int:
    return m // 3


def power_of(m: int) -> int:
    """Number of clockwise quarter turns, 1..3"""
    return m % 3 + 1


def inverse_move(m: int) -> int:
    return 3 * (m // 3) + 2 - m % 3


def is_redundant(prev_face: int | None, face: int) -> bool:
    """
    Same face twice in a row merges into one move; of two opposite faces only the
    order U-D, R-L, F-B is kept since the two turns commute.
    """
    if prev_face is None:
        return False
    return face == prev_face or face == prev_face - 3


def parse_moves(text: str | list | tuple) -> list[int]:
    """Parse 'R U2 F'' style text (or a list of tokens), separators are dropped"""
    tokens = text.split() if isinstance(text, str) else list(text)
    moves = []
    for token in tokens:
        if token == SEPARATOR:
            continue
        if not _TOKEN.fullmatch(token):
            raise FormatError(f"Invalid move token: {token!r}")
        moves.append(MOVE_INDEX[token])
    return moves


def format_moves(moves) -> list[str]:
    return [MOVE_NAMES[m] for m in moves]


def format_solution(tokens: list[str]) -> str:
    return ' '.join(tokens)


def invert_moves(moves: list[int]) -> list[int]:
    return [inverse_move(m) for m in reversed(moves)]
