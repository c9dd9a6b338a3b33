from dataclasses import dataclass
from math import comb, factorial

import numpy as np

from cubesolver.base import class_property, class_cache
from cubesolver.errors import VerifyResult
from cubesolver.moves import face_of, power_of

# corners
URF, UFL, ULB, UBR, DFR, DLF, DBL, DRB = range(8)
# edges
UR, UF, UL, UB, DR, DF, DL, DB, FR, FL, BL, BR = range(12)

N_TWIST = 2187  # 3^7 corner orientations
N_FLIP = 2048  # 2^11 edge orientations
N_SLICE1 = 495  # C(12,4) positions of FR, FL, BL, BR
N_SLICE2 = 24  # 4! permutations of FR, FL, BL, BR inside the slice
N_PARITY = 2
N_FRtoBR = 11880  # 12!/8! permutation of FR, FL, BL, BR
N_URFtoDLF = 20160  # 8!/2! permutation of URF, UFL, ULB, UBR, DFR, DLF
N_URtoUL = 1320  # 12!/9! permutation of UR, UF, UL
N_UBtoDF = 1320  # 12!/9! permutation of UB, DR, DF
N_URtoDF = 20160  # 8!/2! permutation of UR..DF once none of them is in the slice
N_URFtoDLB = 40320  # 8! all corners
N_URtoBR = 479001600  # 12! all edges
N_MERGE = 336  # URtoUL / UBtoDF below this: the three edges are outside the slice

# Face generators as (cp, co, ep, eo), the piece that is moved into each position and
# the orientation it picks up on the way. Order is U, R, F, D, L, B.
_GENERATORS = (
    ((UBR, URF, UFL, ULB, DFR, DLF, DBL, DRB), (0, 0, 0, 0, 0, 0, 0, 0),
     (UB, UR, UF, UL, DR, DF, DL, DB, FR, FL, BL, BR), (0,) * 12),
    ((DFR, UFL, ULB, URF, DRB, DLF, DBL, UBR), (2, 0, 0, 1, 1, 0, 0, 2),
     (FR, UF, UL, UB, BR, DF, DL, DB, DR, FL, BL, UR), (0,) * 12),
    ((UFL, DLF, ULB, UBR, URF, DFR, DBL, DRB), (1, 2, 0, 0, 2, 1, 0, 0),
     (UR, FL, UL, UB, DR, FR, DL, DB, UF, DF, BL, BR), (0, 1, 0, 0, 0, 1, 0, 0, 1, 1, 0, 0)),
    ((URF, UFL, ULB, UBR, DLF, DBL, DRB, DFR), (0, 0, 0, 0, 0, 0, 0, 0),
     (UR, UF, UL, UB, DF, DL, DB, DR, FR, FL, BL, BR), (0,) * 12),
    ((URF, ULB, DBL, UBR, DFR, UFL, DLF, DRB), (0, 1, 2, 0, 0, 2, 1, 0),
     (UR, UF, BL, UB, DR, DF, FL, DB, FR, UL, DL, BR), (0,) * 12),
    ((URF, UFL, UBR, DRB, DFR, DLF, ULB, DBL), (0, 0, 1, 2, 0, 0, 2, 1),
     (UR, UF, UL, BR, DR, DF, DL, BL, FR, FL, UB, DB), (0, 0, 0, 1, 0, 0, 0, 1, 0, 0, 1, 1)),
)


def rotate_left(arr: list, left: int, right: int):
    """arr[left..right] one step to the left, arr[left] wraps around"""
    head = arr[left]
    arr[left:right] = arr[left + 1:right + 1]
    arr[right] = head


def rotate_right(arr: list, left: int, right: int):
    tail = arr[right]
    arr[left + 1:right + 1] = arr[left:right]
    arr[left] = tail


def permutation_parity(perm) -> int:
    """Number of inversions mod 2"""
    s = 0
    n = len(perm)
    for i in range(n - 1, 0, -1):
        for j in range(i - 1, -1, -1):
            if perm[j] > perm[i]:
                s += 1
    return s % 2


def encode_slots(perm: list[int], first: int, k: int, from_top: bool = False) -> int:
    """
    Coordinate of k pieces first..first+k-1 inside perm:
      a < C(n,k): which positions they occupy (combinatorial number system)
      b < k!    : in which order
    from_top ranks positions from the last one, so that pieces parked at the end
    of the array encode as a = 0.
    """
    n = len(perm)
    a = x = 0
    chosen = []
    for j in range(n):
        if first <= perm[j] < first + k:
            chosen.append(perm[j])
    if from_top:
        for j in range(n - 1, -1, -1):
            if first <= perm[j] < first + k:
                a += comb(n - 1 - j, x + 1)
                x += 1
    else:
        for j in range(n):
            if first <= perm[j] < first + k:
                a += comb(j, x + 1)
                x += 1

    b = 0
    for j in range(k - 1, 0, -1):
        r = 0
        while chosen[j] != first + j:
            rotate_left(chosen, 0, j)
            r += 1
        b = (j + 1) * b + r
    return factorial(k) * a + b


def decode_slots(idx: int, n: int, first: int, k: int, from_top: bool = False,
                 fill: bool = True) -> list[int]:
    """
    Inverse of encode_slots. The other pieces fill the free positions in ascending
    order when fill is set, otherwise the free positions hold -1.
    """
    size = factorial(k)
    a, b = divmod(idx, size)
    chosen = list(range(first, first + k))
    for j in range(1, k):
        r = b % (j + 1)
        b //= j + 1
        for _ in range(r):
            rotate_right(chosen, 0, j)

    perm = [-1] * n
    x = k - 1
    if from_top:
        for j in range(n):
            if x >= 0 and a - comb(n - 1 - j, x + 1) >= 0:
                perm[j] = chosen[k - 1 - x]
                a -= comb(n - 1 - j, x + 1)
                x -= 1
    else:
        for j in range(n - 1, -1, -1):
            if x >= 0 and a - comb(j, x + 1) >= 0:
                perm[j] = chosen[x]
                a -= comb(j, x + 1)
                x -= 1

    if fill:
        others = iter([p for p in range(n) if not first <= p < first + k])
        perm = [next(others) if p < 0 else p for p in perm]
    return perm


@dataclass
class CubieCube:
    """
    Cube on the cubie level. Position i holds piece cp[i] (ep[i]) with orientation
    co[i] (eo[i]); the solved cube is the identity with zero orientations.
    Mutable: multiply() and the set_* coordinate methods change the cube in place.

        G = (S₈ × S₁₂) ⋉ (ℤ₃⁷ × ℤ₂¹¹),  sgn(cp) = sgn(ep)
        |G| = 8! · 3⁷ · 12! · 2¹¹ / 2
    """
    cp: np.ndarray  # (8,)  0..7, ∈ S₈
    co: np.ndarray  # (8,)  0..2, ∈ ℤ₃
    ep: np.ndarray  # (12,) 0..11, ∈ S₁₂
    eo: np.ndarray  # (12,) 0..1, ∈ ℤ₂

    @classmethod
    def solved(cls) -> "CubieCube":
        return cls(
            cp=np.arange(8, dtype=np.int8),
            co=np.zeros(8, dtype=np.int8),
            ep=np.arange(12, dtype=np.int8),
            eo=np.zeros(12, dtype=np.int8),
        )

    @classmethod
    def from_lists(cls, cp, co, ep, eo) -> "CubieCube":
        return cls(
            cp=np.array(cp, dtype=np.int8),
            co=np.array(co, dtype=np.int8),
            ep=np.array(ep, dtype=np.int8),
            eo=np.array(eo, dtype=np.int8),
        )

    def copy(self) -> "CubieCube":
        return CubieCube(cp=self.cp.copy(), co=self.co.copy(), ep=self.ep.copy(), eo=self.eo.copy())

    def __eq__(self, other):
        if not isinstance(other, CubieCube):
            return NotImplemented
        return (
                np.array_equal(self.cp, other.cp) and
                np.array_equal(self.co, other.co) and
                np.array_equal(self.ep, other.ep) and
                np.array_equal(self.eo, other.eo)
        )

    def __repr__(self):
        return (f"CubieCube(cp={self.cp.tolist()}, co={self.co.tolist()}, "
                f"ep={self.ep.tolist()}, eo={self.eo.tolist()})")

    # ---------------- group multiplication ----------------

    @class_property('MOVE_CUBES')
    def move_cubes(cls) -> tuple:
        """The six quarter-turn face generators U, R, F, D, L, B"""
        return tuple(cls.from_lists(*g) for g in _GENERATORS)

    @class_cache(key=lambda m: m)
    def generator(cls, m: int) -> "CubieCube":
        """Cube of move index m (0..17) applied to the solved cube. Shared, never modify it."""
        c = cls.solved()
        for _ in range(power_of(m)):
            c.multiply(cls.move_cubes[face_of(m)])
        return c

    def corner_multiply(self, b: "CubieCube"):
        """self = self * b on the corners, b acts after self"""
        self.co = (self.co[b.cp] + b.co) % 3
        self.cp = self.cp[b.cp]

    def edge_multiply(self, b: "CubieCube"):
        self.eo = (self.eo[b.ep] + b.eo) % 2
        self.ep = self.ep[b.ep]

    def multiply(self, b: "CubieCube") -> "CubieCube":
        self.corner_multiply(b)
        self.edge_multiply(b)
        return self

    def move(self, m: int) -> "CubieCube":
        return self.multiply(self.generator(m))

    def apply(self, moves) -> "CubieCube":
        for m in moves:
            self.multiply(self.generator(m))
        return self

    def inverse(self) -> "CubieCube":
        cp_inv = np.argsort(self.cp).astype(np.int8)
        ep_inv = np.argsort(self.ep).astype(np.int8)
        return CubieCube(
            cp=cp_inv,
            co=(-self.co[cp_inv]) % 3,
            ep=ep_inv,
            eo=self.eo[ep_inv].copy(),
        )

    # ---------------- parity ----------------

    def corner_parity(self) -> int:
        return permutation_parity(self.cp.tolist())

    def edge_parity(self) -> int:
        return permutation_parity(self.ep.tolist())

    # ---------------- orientation coordinates ----------------

    def get_twist(self) -> int:
        """0..2186, orientation of the first 7 corners in base 3, 第 8 个角由 Σ co ≡ 0 (mod 3) 决定"""
        ret = 0
        for o in self.co[:7].tolist():
            ret = 3 * ret + o
        return ret

    def set_twist(self, twist: int):
        co = [0] * 8
        parity = 0
        for i in range(6, -1, -1):
            twist, co[i] = divmod(twist, 3)
            parity += co[i]
        co[7] = (3 - parity % 3) % 3
        self.co = np.array(co, dtype=np.int8)

    def get_flip(self) -> int:
        """0..2047, orientation of the first 11 edges in base 2"""
        ret = 0
        for o in self.eo[:11].tolist():
            ret = 2 * ret + o
        return ret

    def set_flip(self, flip: int):
        eo = [0] * 12
        parity = 0
        for i in range(10, -1, -1):
            flip, eo[i] = divmod(flip, 2)
            parity += eo[i]
        eo[11] = parity % 2
        self.eo = np.array(eo, dtype=np.int8)

    # ---------------- permutation coordinates ----------------

    def get_FRtoBR(self) -> int:
        """
        0..11879, position and order of the slice edges FR, FL, BL, BR.
        FRtoBR // 24 is the phase-1 slice coordinate (0: all four in the slice),
        below 24 the value is the phase-2 permutation inside the slice.
        """
        return encode_slots(self.ep.tolist(), FR, 4, from_top=True)

    def set_FRtoBR(self, idx: int):
        self.ep = np.array(decode_slots(idx, 12, FR, 4, from_top=True), dtype=np.int8)

    def get_URFtoDLF(self) -> int:
        """0..20159, position and order of the corners URF..DLF"""
        return encode_slots(self.cp.tolist(), URF, 6)

    def set_URFtoDLF(self, idx: int):
        self.cp = np.array(decode_slots(idx, 8, URF, 6), dtype=np.int8)

    def get_URtoUL(self) -> int:
        """0..1319, position and order of UR, UF, UL"""
        return encode_slots(self.ep.tolist(), UR, 3)

    def set_URtoUL(self, idx: int):
        # only the three edges are meaningful, the other positions get BR
        perm = decode_slots(idx, 12, UR, 3, fill=False)
        self.ep = np.array([BR if p < 0 else p for p in perm], dtype=np.int8)

    def get_UBtoDF(self) -> int:
        """0..1319, position and order of UB, DR, DF; 114 on the solved cube"""
        return encode_slots(self.ep.tolist(), UB, 3)

    def set_UBtoDF(self, idx: int):
        perm = decode_slots(idx, 12, UB, 3, fill=False)
        self.ep = np.array([BR if p < 0 else p for p in perm], dtype=np.int8)

    def get_URtoDF(self) -> int:
        """
        Position and order of the six edges UR..DF. Below 20160 exactly when none of
        them sits in the slice, which always holds in phase 2.
        """
        return encode_slots(self.ep.tolist(), UR, 6)

    def set_URtoDF(self, idx: int):
        self.ep = np.array(decode_slots(idx, 12, UR, 6), dtype=np.int8)

    @staticmethod
    def merge_URtoDF(ur_to_ul: int, ub_to_df: int) -> int:
        """URtoDF of a cube from its URtoUL and UBtoDF parts, -1 if both claim one position"""
        a = decode_slots(ur_to_ul, 12, UR, 3, fill=False)
        b = decode_slots(ub_to_df, 12, UB, 3, fill=False)
        ep = []
        for i in range(12):
            if a[i] >= 0 and b[i] >= 0:
                return -1
            ep.append(a[i] if a[i] >= 0 else b[i])
        return encode_slots(ep, UR, 6)

    def get_URFtoDLB(self) -> int:
        """0..40319, the whole corner permutation"""
        return encode_slots(self.cp.tolist(), URF, 8)

    def set_URFtoDLB(self, idx: int):
        self.cp = np.array(decode_slots(idx, 8, URF, 8), dtype=np.int8)

    def get_URtoBR(self) -> int:
        """0..479001599, the whole edge permutation"""
        return encode_slots(self.ep.tolist(), UR, 12)

    def set_URtoBR(self, idx: int):
        self.ep = np.array(decode_slots(idx, 12, UR, 12), dtype=np.int8)

    # ---------------- phase predicates ----------------

    def is_solved(self) -> bool:
        return self == self.solved()

    def in_subgroup(self) -> bool:
        """Phase-1 target: no twist, no flip, slice edges inside the slice"""
        return self.get_twist() == 0 and self.get_flip() == 0 and self.get_FRtoBR() < N_SLICE2

    # ---------------- validity ----------------

    def verify(self) -> VerifyResult:
        """
        First failed check of a cube read from stickers:
        每个 piece 恰好一次, Σ eo ≡ 0 (mod 2), Σ co ≡ 0 (mod 3), sgn(cp) = sgn(ep)
        """
        edge_count = np.bincount(self.ep.astype(np.int64), minlength=12)
        if np.any(edge_count != 1):
            return VerifyResult.MISSING_EDGE
        if int(self.eo.sum()) % 2 != 0:
            return VerifyResult.EDGE_FLIP_ERROR
        corner_count = np.bincount(self.cp.astype(np.int64), minlength=8)
        if np.any(corner_count != 1):
            return VerifyResult.MISSING_CORNER
        if int(self.co.sum()) % 3 != 0:
            return VerifyResult.CORNER_TWIST_ERROR
        if self.edge_parity() != self.corner_parity():
            return VerifyResult.PARITY_ERROR
        return VerifyResult.OK
