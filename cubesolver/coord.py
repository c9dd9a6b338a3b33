from cubesolver.cubie import CubieCube, N_MERGE

# parity change of a move: quarter turns swap it, half turns keep it
PARITY_MOVE = (
    (1, 0, 1) * 6,
    (0, 1, 0) * 6,
)


class CoordCube:
    """
    Cube on the coordinate level. Every field is an int and move() is pure table lookup,
    no cubie algebra happens once the cube is built.
    """
    __slots__ = ('tables', 'twist', 'flip', 'parity', 'fr_to_br', 'urf_to_dlf',
                 'ur_to_ul', 'ub_to_df', 'ur_to_df')

    def __init__(self, cubie: CubieCube = None, tables=None):
        self.tables = tables
        if cubie is None:
            return
        self.twist = cubie.get_twist()
        self.flip = cubie.get_flip()
        self.parity = cubie.corner_parity()
        self.fr_to_br = cubie.get_FRtoBR()
        self.urf_to_dlf = cubie.get_URFtoDLF()
        self.ur_to_ul = cubie.get_URtoUL()
        self.ub_to_df = cubie.get_UBtoDF()
        self.ur_to_df = cubie.get_URtoDF()  # only valid inside the H-subgroup

    def __repr__(self):
        return (f"CoordCube(twist={self.twist}, flip={self.flip}, parity={self.parity}, "
                f"fr_to_br={self.fr_to_br}, urf_to_dlf={self.urf_to_dlf}, ur_to_ul={self.ur_to_ul}, "
                f"ub_to_df={self.ub_to_df}, ur_to_df={self.ur_to_df})")

    def copy(self) -> "CoordCube":
        c = CoordCube(tables=self.tables)
        for name in self.__slots__[1:]:
            setattr(c, name, getattr(self, name))
        return c

    @property
    def slice(self) -> int:
        """Phase-1 slice coordinate 0..494, C(12,4) = 495 个位置组合"""
        return self.fr_to_br // 24

    def in_subgroup(self) -> bool:
        # G₁ = <U, D, R2, L2, F2, B2>
        return self.twist == 0 and self.flip == 0 and self.fr_to_br < 24

    def is_solved(self) -> bool:
        return (self.in_subgroup() and self.fr_to_br == 0 and self.urf_to_dlf == 0
                and self.ur_to_ul == 0 and self.ub_to_df == 114)

    def move(self, m: int) -> "CoordCube":
        v = self.tables.views
        self.twist = v.twist_move[self.twist][m]
        self.flip = v.flip_move[self.flip][m]
        self.parity = PARITY_MOVE[self.parity][m]
        self.fr_to_br = v.fr_to_br_move[self.fr_to_br][m]
        self.urf_to_dlf = v.urf_to_dlf_move[self.urf_to_dlf][m]
        self.ur_to_ul = v.ur_to_ul_move[self.ur_to_ul][m]
        self.ub_to_df = v.ub_to_df_move[self.ub_to_df][m]
        if self.ur_to_ul < N_MERGE and self.ub_to_df < N_MERGE:
            self.ur_to_df = v.merge_ur_to_df[self.ur_to_ul][self.ub_to_df]
        return self

    def apply(self, moves) -> "CoordCube":
        for m in moves:
            self.move(m)
        return self
