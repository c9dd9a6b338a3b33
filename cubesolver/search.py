"""
Two-phase search.

Phase 1 turns the cube into the H-subgroup <U, D, R2, L2, F2, B2>: twist, flip and
slice coordinate 0. Phase 2 solves it there with the 10 moves that keep H. Both phases
are depth-first searches bounded by the pruning tables, deepened one move at a time.

    G  →  G₁ = <U, D, R2, L2, F2, B2>  →  {e}
    |G / G₁| = 3⁷ · 2¹¹ · 495,  |G₁| = 8! · 8! · 4! / 2
"""
import logging
import threading
import time
from dataclasses import dataclass, field

from config import Config
from cubesolver.coord import CoordCube, PARITY_MOVE
from cubesolver.cubie import CubieCube, N_SLICE1, N_SLICE2
from cubesolver.errors import SolverFailure, SolverTimeout, SearchCancelled
from cubesolver.moves import N_MOVE, PHASE2_MOVES, SEPARATOR, format_moves, format_solution, is_redundant
from cubesolver.tables import TableBundle, get_pruning

logger = logging.getLogger(__name__)


@dataclass
class Solution:
    moves: list[int] = field(default_factory=list)
    phase1_length: int = 0

    def __len__(self):
        return len(self.moves)

    def __str__(self):
        return format_solution(self.tokens())

    def tokens(self, separator: bool = False) -> list[str]:
        """Move names, with separator a '.' between the two phases of a non-empty solution"""
        names = format_moves(self.moves)
        if separator and names:
            names.insert(self.phase1_length, SEPARATOR)
        return names


class Search:
    """
    One search over a shared TableBundle. Options:
      max_length: move ceiling, at most Config.MAX_LENGTH_LIMIT
      timeout:    seconds, checked between depths only
      cancel:     threading.Event, checked between depths only
      shortest:   deepen the total length instead of the phase-1 length
    """

    def __init__(self, tables: TableBundle, max_length: int = None, timeout: float = None,
                 cancel: threading.Event = None, shortest: bool = False):
        self.tables = tables
        self.max_length = Config.MAX_LENGTH if max_length is None else max_length
        if not 0 <= self.max_length <= Config.MAX_LENGTH_LIMIT:
            raise ValueError(f"max_length must be within 0..{Config.MAX_LENGTH_LIMIT}, got {self.max_length}")
        self.timeout = timeout
        self.cancel = cancel
        self.shortest = shortest
        self.phase2_max_depth = Config.PHASE2_MAX_DEPTH
        self._deadline = None
        self._v = tables.views

    def _check(self):
        if self.cancel is not None and self.cancel.is_set():
            raise SearchCancelled(max_length=self.max_length)
        if self._deadline is not None and time.monotonic() > self._deadline:
            raise SolverTimeout(max_length=self.max_length)

    # ---------------- heuristics ----------------

    def phase1_bound(self, twist: int, flip: int, slice_: int) -> int:
        v = self._v
        return max(get_pruning(v.slice_twist_prun, N_SLICE1 * twist + slice_),
                   get_pruning(v.slice_flip_prun, N_SLICE1 * flip + slice_))

    def phase2_bound(self, urf_to_dlf: int, ur_to_df: int, fr_to_br: int, parity: int) -> int:
        v = self._v
        return max(get_pruning(v.slice_urf_parity_prun, (N_SLICE2 * urf_to_dlf + fr_to_br) * 2 + parity),
                   get_pruning(v.slice_urdf_parity_prun, (N_SLICE2 * ur_to_df + fr_to_br) * 2 + parity))

    # ---------------- phase 1 ----------------

    def phase1(self, twist: int, flip: int, slice_: int, depth: int, path: list, last_face: int = None):
        """
        Yield every phase-1 move sequence of exactly depth moves that ends in H.
        Only the last node of a sequence lies in H, the start excepted.
        """
        if depth == 0:
            if twist == 0 and flip == 0 and slice_ == 0:
                yield list(path)
            return
        h = self.phase1_bound(twist, flip, slice_)
        if h > depth or (h == 0 and path):
            return

        v = self._v
        for m in range(N_MOVE):
            face = m // 3
            if is_redundant(last_face, face):
                continue
            path.append(m)
            yield from self.phase1(v.twist_move[twist][m], v.flip_move[flip][m],
                                   v.fr_to_br_move[slice_ * N_SLICE2][m] // N_SLICE2,
                                   depth - 1, path, face)
            path.pop()

    # ---------------- phase 2 ----------------

    def phase2(self, urf_to_dlf: int, ur_to_df: int, fr_to_br: int, parity: int, depth: int,
               path: list, last_face: int = None) -> bool:
        """Append a phase-2 solution of exactly depth moves to path, False if there is none"""
        if depth == 0:
            return urf_to_dlf == 0 and ur_to_df == 0 and fr_to_br == 0

        v = self._v
        for m in PHASE2_MOVES:
            face = m // 3
            if is_redundant(last_face, face):
                continue
            urf = v.urf_to_dlf_move[urf_to_dlf][m]
            urdf = v.ur_to_df_move[ur_to_df][m]
            frbr = v.fr_to_br_move[fr_to_br][m]
            par = PARITY_MOVE[parity][m]
            if self.phase2_bound(urf, urdf, frbr, par) >= depth:
                continue
            path.append(m)
            if self.phase2(urf, urdf, frbr, par, depth - 1, path, face):
                return True
            path.pop()
        return False

    def solve_phase2(self, c: CoordCube, max_depth: int) -> list[int] | None:
        """Shortest phase-2 solution of at most max_depth moves from a cube in H"""
        h = self.phase2_bound(c.urf_to_dlf, c.ur_to_df, c.fr_to_br, c.parity)
        for depth in range(h, max_depth + 1):
            self._check()
            path = []
            if self.phase2(c.urf_to_dlf, c.ur_to_df, c.fr_to_br, c.parity, depth, path):
                return path
        return None

    # ---------------- driver ----------------

    def solve(self, cube: CubieCube) -> Solution:
        """
        Solve a verified cube. Raises SolverFailure when nothing fits max_length,
        SolverTimeout or SearchCancelled when stopped between depths.
        """
        self._deadline = time.monotonic() + self.timeout if self.timeout is not None else None
        start = CoordCube(cube, self.tables)
        solution = self._solve_shortest(start) if self.shortest else self._solve_fast(start)
        if solution is None:
            raise SolverFailure(max_length=self.max_length)
        logger.info(f"Solution of {len(solution)} moves, phase 1: {solution.phase1_length}")
        return solution

    def _solve_fast(self, start: CoordCube) -> Solution | None:
        """
        Deepen the phase-1 length. Each phase-1 sequence gets the shortest phase-2
        continuation of at most phase2_max_depth moves; a continuation starting on the
        face of the last phase-1 move (or its opposite out of order) is rejected.
        """
        h1 = self.phase1_bound(start.twist, start.flip, start.slice)
        for d1 in range(h1, self.max_length + 1):
            self._check()
            logger.debug(f"Phase 1 depth {d1}")
            max_depth2 = min(self.phase2_max_depth, self.max_length - d1)
            for path in self.phase1(start.twist, start.flip, start.slice, d1, []):
                c = start.copy().apply(path)
                path2 = self.solve_phase2(c, max_depth2)
                if path2 is None:
                    continue
                if path and path2 and is_redundant(path[-1] // 3, path2[0] // 3):
                    continue
                return Solution(path + path2, d1)
        return None

    def _solve_shortest(self, start: CoordCube) -> Solution | None:
        """Deepen the total length, every split into phase 1 and phase 2 is tried per length"""
        h1 = self.phase1_bound(start.twist, start.flip, start.slice)
        for total in range(h1, self.max_length + 1):
            self._check()
            logger.debug(f"Total depth {total}")
            for d1 in range(h1, total + 1):
                for path in self.phase1(start.twist, start.flip, start.slice, d1, []):
                    c = start.copy().apply(path)
                    last_face = path[-1] // 3 if path else None
                    path2 = []
                    if self.phase2(c.urf_to_dlf, c.ur_to_df, c.fr_to_br, c.parity, total - d1,
                                   path2, last_face):
                        return Solution(path + path2, d1)
        return None
