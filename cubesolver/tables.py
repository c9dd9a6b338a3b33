import logging
import os
import time
import zipfile
from dataclasses import dataclass, fields
from enum import Enum
from functools import cached_property
from typing import NamedTuple

import numpy as np

from cubesolver.coord import PARITY_MOVE
from cubesolver.cubie import (CubieCube, N_TWIST, N_FLIP, N_SLICE1, N_SLICE2, N_PARITY, N_FRtoBR,
                              N_URFtoDLF, N_URtoUL, N_UBtoDF, N_URtoDF, N_MERGE)
from cubesolver.moves import N_MOVE, PHASE2_SKIP

logger = logging.getLogger(__name__)

UNKNOWN = 0x0F  # pruning entry not reached yet

N_SLICE_TWIST = N_SLICE1 * N_TWIST
N_SLICE_FLIP = N_SLICE1 * N_FLIP
N_SLICE_URF_PARITY = N_SLICE2 * N_URFtoDLF * N_PARITY
N_SLICE_URDF_PARITY = N_SLICE2 * N_URtoDF * N_PARITY


def packed_size(n: int) -> int:
    return (n + 1) // 2


# name -> (shape, dtype) of every array in a complete bundle
TABLE_LAYOUT = {
    'twist_move': ((N_TWIST, N_MOVE), np.int16),
    'flip_move': ((N_FLIP, N_MOVE), np.int16),
    'fr_to_br_move': ((N_FRtoBR, N_MOVE), np.int16),
    'urf_to_dlf_move': ((N_URFtoDLF, N_MOVE), np.int16),
    # entries of quarter turns of R, F, L, B leave the 0..20159 range
    'ur_to_df_move': ((N_URtoDF, N_MOVE), np.int32),
    'ur_to_ul_move': ((N_URtoUL, N_MOVE), np.int16),
    'ub_to_df_move': ((N_UBtoDF, N_MOVE), np.int16),
    'merge_ur_to_df': ((N_MERGE, N_MERGE), np.int16),
    'slice_urf_parity_prun': ((packed_size(N_SLICE_URF_PARITY),), np.uint8),
    'slice_urdf_parity_prun': ((packed_size(N_SLICE_URDF_PARITY),), np.uint8),
    'slice_twist_prun': ((packed_size(N_SLICE_TWIST),), np.uint8),
    'slice_flip_prun': ((packed_size(N_SLICE_FLIP),), np.uint8),
}


# ---------------- packed 4 bit entries ----------------

def get_pruning(table, index: int) -> int:
    """Entry at index of a packed table: even index in the low nibble, odd in the high one"""
    b = int(table[index >> 1])
    return b & 0x0F if index & 1 == 0 else b >> 4


def set_pruning(table, index: int, value: int):
    i = index >> 1
    b = int(table[i])
    if index & 1 == 0:
        table[i] = (b & 0xF0) | (value & 0x0F)
    else:
        table[i] = (b & 0x0F) | ((value & 0x0F) << 4)


def pack_nibbles(values: np.ndarray) -> np.ndarray:
    """Values 0..15 to bytes holding two entries each, an odd tail is padded with UNKNOWN"""
    values = np.asarray(values, dtype=np.uint8)
    if values.size % 2:
        values = np.append(values, np.uint8(UNKNOWN))
    return ((values[0::2] & 0x0F) | (values[1::2] << 4)).astype(np.uint8)


def unpack_nibbles(packed: np.ndarray, n: int = None) -> np.ndarray:
    packed = np.asarray(packed, dtype=np.uint8)
    values = np.empty(packed.size * 2, dtype=np.uint8)
    values[0::2] = packed & 0x0F
    values[1::2] = packed >> 4
    return values if n is None else values[:n]


# ---------------- move tables ----------------

def build_move_table(n: int, set_coord, get_coord, multiply, dtype=np.int16) -> np.ndarray:
    """
    Row i holds the coordinate after each of the 18 moves applied to a cube with coordinate i.
    Each face is turned three times for its three entries, the fourth turn restores the cube.
    """
    table = np.zeros((n, N_MOVE), dtype=dtype)
    a = CubieCube.solved()
    for i in range(n):
        set_coord(a, i)
        row = []
        for face_cube in CubieCube.move_cubes:
            for _ in range(3):
                multiply(a, face_cube)
                row.append(get_coord(a))
            multiply(a, face_cube)
        table[i] = row
    return table


def build_merge_table() -> np.ndarray:
    """URtoDF from URtoUL and UBtoDF while both are below 336, the six edges are then outside the slice"""
    table = np.zeros((N_MERGE, N_MERGE), dtype=np.int16)
    for ur_to_ul in range(N_MERGE):
        table[ur_to_ul] = [CubieCube.merge_URtoDF(ur_to_ul, ub_to_df) for ub_to_df in range(N_MERGE)]
    return table


# ---------------- pruning tables ----------------

def bfs_depths(size: int, expand) -> np.ndarray:
    """
    Exact distance of every index to index 0, layer by layer.
    expand(indices) returns the neighbour indices, one column per move.
    """
    dist = np.full(size, UNKNOWN, dtype=np.uint8)
    dist[0] = 0
    done = 1
    depth = 0
    frontier = np.zeros(1, dtype=np.int64)
    while frontier.size:
        neighbours = np.unique(expand(frontier).ravel())
        frontier = neighbours[dist[neighbours] == UNKNOWN]
        if frontier.size and depth + 1 >= UNKNOWN:
            raise ValueError(f"Depth {depth + 1} does not fit a 4 bit entry")
        dist[frontier] = depth + 1
        done += frontier.size
        depth += 1
        logger.debug(f"depth {depth}: {done}/{size}")

    if done != size:
        raise ValueError(f"Pruning search reached {done} of {size} entries")
    return dist


def build_slice_twist_prun(twist_move: np.ndarray, fr_to_br_move: np.ndarray) -> np.ndarray:
    """index = N_SLICE1 * twist + slice, all 18 moves"""
    slice_move = fr_to_br_move[::N_SLICE2].astype(np.int64) // N_SLICE2
    twist_move = twist_move.astype(np.int64)

    def expand(idx):
        twist, slice_ = np.divmod(idx, N_SLICE1)
        return N_SLICE1 * twist_move[twist] + slice_move[slice_]

    return pack_nibbles(bfs_depths(N_SLICE_TWIST, expand))


def build_slice_flip_prun(flip_move: np.ndarray, fr_to_br_move: np.ndarray) -> np.ndarray:
    """index = N_SLICE1 * flip + slice, all 18 moves"""
    slice_move = fr_to_br_move[::N_SLICE2].astype(np.int64) // N_SLICE2
    flip_move = flip_move.astype(np.int64)

    def expand(idx):
        flip, slice_ = np.divmod(idx, N_SLICE1)
        return N_SLICE1 * flip_move[flip] + slice_move[slice_]

    return pack_nibbles(bfs_depths(N_SLICE_FLIP, expand))


def build_slice_parity_prun(perm_move: np.ndarray, fr_to_br_move: np.ndarray) -> np.ndarray:
    """
    index = (N_SLICE2 * perm + slice) * 2 + parity over the phase-2 moves, perm being
    URFtoDLF or URtoDF and slice the permutation of the slice edges below 24.
    """
    moves = [m for m in range(N_MOVE) if m not in PHASE2_SKIP]  # 只展开 G₁ 内的 10 个 move
    perm_move = perm_move[:, moves].astype(np.int64)
    slice_move = fr_to_br_move[:N_SLICE2, moves].astype(np.int64)
    parity_move = np.array(PARITY_MOVE, dtype=np.int64)[:, moves]

    def expand(idx):
        rest, parity = np.divmod(idx, 2)
        perm, slice_ = np.divmod(rest, N_SLICE2)
        return (N_SLICE2 * perm_move[perm] + slice_move[slice_]) * 2 + parity_move[parity]

    return pack_nibbles(bfs_depths(perm_move.shape[0] * N_SLICE2 * N_PARITY, expand))


class BuildStep(Enum):
    """Build order, later steps read tables of earlier ones"""
    TWIST_MOVE = 'twist_move'
    FLIP_MOVE = 'flip_move'
    FR_TO_BR_MOVE = 'fr_to_br_move'
    URF_TO_DLF_MOVE = 'urf_to_dlf_move'
    UR_TO_DF_MOVE = 'ur_to_df_move'
    UR_TO_UL_MOVE = 'ur_to_ul_move'
    UB_TO_DF_MOVE = 'ub_to_df_move'
    MERGE_UR_TO_DF = 'merge_ur_to_df'
    SLICE_URF_PARITY_PRUN = 'slice_urf_parity_prun'
    SLICE_URDF_PARITY_PRUN = 'slice_urdf_parity_prun'
    SLICE_TWIST_PRUN = 'slice_twist_prun'
    SLICE_FLIP_PRUN = 'slice_flip_prun'

    def build(self, t: dict) -> np.ndarray:
        if self is BuildStep.TWIST_MOVE:
            return build_move_table(N_TWIST, CubieCube.set_twist, CubieCube.get_twist, CubieCube.corner_multiply)
        if self is BuildStep.FLIP_MOVE:
            return build_move_table(N_FLIP, CubieCube.set_flip, CubieCube.get_flip, CubieCube.edge_multiply)
        if self is BuildStep.FR_TO_BR_MOVE:
            return build_move_table(N_FRtoBR, CubieCube.set_FRtoBR, CubieCube.get_FRtoBR,
                                    CubieCube.edge_multiply)
        if self is BuildStep.URF_TO_DLF_MOVE:
            return build_move_table(N_URFtoDLF, CubieCube.set_URFtoDLF, CubieCube.get_URFtoDLF,
                                    CubieCube.corner_multiply)
        if self is BuildStep.UR_TO_DF_MOVE:
            return build_move_table(N_URtoDF, CubieCube.set_URtoDF, CubieCube.get_URtoDF,
                                    CubieCube.edge_multiply, dtype=np.int32)
        if self is BuildStep.UR_TO_UL_MOVE:
            return build_move_table(N_URtoUL, CubieCube.set_URtoUL, CubieCube.get_URtoUL,
                                    CubieCube.edge_multiply)
        if self is BuildStep.UB_TO_DF_MOVE:
            return build_move_table(N_UBtoDF, CubieCube.set_UBtoDF, CubieCube.get_UBtoDF,
                                    CubieCube.edge_multiply)
        if self is BuildStep.MERGE_UR_TO_DF:
            return build_merge_table()
        if self is BuildStep.SLICE_URF_PARITY_PRUN:
            return build_slice_parity_prun(t['urf_to_dlf_move'], t['fr_to_br_move'])
        if self is BuildStep.SLICE_URDF_PARITY_PRUN:
            return build_slice_parity_prun(t['ur_to_df_move'], t['fr_to_br_move'])
        if self is BuildStep.SLICE_TWIST_PRUN:
            return build_slice_twist_prun(t['twist_move'], t['fr_to_br_move'])
        return build_slice_flip_prun(t['flip_move'], t['fr_to_br_move'])


class TableViews(NamedTuple):
    """Plain Python copies of the tables for the search loop, ints instead of numpy scalars"""
    twist_move: list
    flip_move: list
    fr_to_br_move: list
    urf_to_dlf_move: list
    ur_to_df_move: list
    ur_to_ul_move: list
    ub_to_df_move: list
    merge_ur_to_df: list
    slice_urf_parity_prun: bytes
    slice_urdf_parity_prun: bytes
    slice_twist_prun: bytes
    slice_flip_prun: bytes


@dataclass(frozen=True, eq=False)
class TableBundle:
    """All move and pruning tables of one solver, read-only once constructed"""
    twist_move: np.ndarray
    flip_move: np.ndarray
    fr_to_br_move: np.ndarray
    urf_to_dlf_move: np.ndarray
    ur_to_df_move: np.ndarray
    ur_to_ul_move: np.ndarray
    ub_to_df_move: np.ndarray
    merge_ur_to_df: np.ndarray
    slice_urf_parity_prun: np.ndarray
    slice_urdf_parity_prun: np.ndarray
    slice_twist_prun: np.ndarray
    slice_flip_prun: np.ndarray

    def __post_init__(self):
        for f in fields(self):
            shape, dtype = TABLE_LAYOUT[f.name]
            arr = getattr(self, f.name)
            if arr.shape != shape or arr.dtype != dtype:
                raise ValueError(f"Table {f.name}: expected {shape} {np.dtype(dtype)}, got {arr.shape} {arr.dtype}")
            arr.flags.writeable = False

    @classmethod
    def from_dict(cls, tables: dict) -> "TableBundle":
        return cls(**{f.name: tables[f.name] for f in fields(cls)})

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @cached_property
    def views(self) -> TableViews:
        return TableViews(**{
            name: arr.tobytes() if arr.dtype == np.uint8 else arr.tolist()
            for name, arr in self.as_dict().items()
        })

    def save(self, path: str):
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(path, 'wb') as f:
            np.savez(f, **self.as_dict())
        logger.info(f"Tables saved to {path}")

    @classmethod
    def load(cls, path: str) -> "TableBundle":
        """Raises OSError for a missing file, ValueError for a damaged or foreign one"""
        try:
            with np.load(path) as data:
                missing = [name for name in TABLE_LAYOUT if name not in data.files]
                if missing:
                    raise ValueError(f"Tables missing in {path}: {missing}")
                tables = {name: data[name] for name in TABLE_LAYOUT}
        except (zipfile.BadZipFile, EOFError) as e:
            raise ValueError(f"Unreadable table file {path}: {e}") from e
        bundle = cls.from_dict(tables)
        logger.info(f"Tables loaded from {path}")
        return bundle


class TableBuilder:
    """
    Builds the tables one step per next() call so that a host can spread the work.
    Calls after the last step do nothing.

        builder = TableBuilder()
        while not builder.is_finished:
            builder.next()
        tables = builder.tables()
    """

    def __init__(self, tables: dict = None):
        self._tables = dict(tables or {})
        self._pending = list(BuildStep)

    @property
    def is_finished(self) -> bool:
        return not self._pending

    @property
    def progress(self) -> float:
        """Fraction of steps done, 0.0..1.0"""
        return 1.0 - len(self._pending) / len(BuildStep)

    @property
    def current_step(self) -> BuildStep | None:
        return self._pending[0] if self._pending else None

    def next(self, force: bool = False) -> BuildStep | None:
        """
        Run the next step and return it, None once finished. A table that is already
        present is kept unless force is set.
        """
        if not self._pending:
            return None
        step = self._pending.pop(0)
        if force or step.value not in self._tables:
            start = time.time()
            self._tables[step.value] = step.build(self._tables)
            logger.info(f"Built {step.value} in {time.time() - start:.2f}s "
                        f"({len(BuildStep) - len(self._pending)}/{len(BuildStep)})")
        return step

    def build_all(self, force: bool = False) -> TableBundle:
        while not self.is_finished:
            self.next(force)
        return self.tables()

    def tables(self) -> TableBundle:
        if not self.is_finished:
            raise RuntimeError(f"Tables not finished, next step is {self.current_step.value}")
        return TableBundle.from_dict(self._tables)


def load_or_build(path: str = None, force: bool = False) -> TableBundle:
    """Load the cached bundle at path, build and save it when missing, damaged or forced"""
    if path and not force:
        if os.path.exists(path):
            try:
                return TableBundle.load(path)
            except (OSError, ValueError) as e:
                logger.warning(f"Discarding table cache {path}: {e}")
        else:
            logger.info(f"No table cache at {path}, building")

    bundle = TableBuilder().build_all(force=force)
    if path:
        try:
            bundle.save(path)
        except OSError as e:
            logger.warning(f"Could not save tables to {path}: {e}")
    return bundle
