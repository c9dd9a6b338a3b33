import numpy as np
import pytest

from cubesolver.coord import CoordCube, PARITY_MOVE
from cubesolver.cubie import CubieCube, N_SLICE1, N_SLICE2
from cubesolver.moves import N_MOVE, PHASE2_MOVES, parse_moves
from cubesolver.tables import (TABLE_LAYOUT, UNKNOWN, BuildStep, TableBuilder, TableBundle, get_pruning,
                               load_or_build, pack_nibbles, set_pruning, unpack_nibbles,
                               N_SLICE_TWIST, N_SLICE_FLIP, N_SLICE_URF_PARITY, N_SLICE_URDF_PARITY)


def test_pack_nibbles():
    packed = pack_nibbles([1, 2, 3])
    assert packed.tolist() == [0x21, 0xF3]
    assert unpack_nibbles(packed, 3).tolist() == [1, 2, 3]
    assert unpack_nibbles(packed).tolist() == [1, 2, 3, UNKNOWN]


def test_get_set_pruning():
    table = np.full(3, 0xFF, dtype=np.uint8)
    set_pruning(table, 0, 4)
    set_pruning(table, 1, 9)
    set_pruning(table, 4, 0)
    assert [get_pruning(table, i) for i in range(6)] == [4, 9, UNKNOWN, UNKNOWN, 0, UNKNOWN]
    assert get_pruning(table.tobytes(), 1) == 9
    set_pruning(table, 1, 2)
    assert get_pruning(table, 0) == 4
    assert get_pruning(table, 1) == 2


def test_layout(tables):
    for name, (shape, dtype) in TABLE_LAYOUT.items():
        arr = getattr(tables, name)
        assert arr.shape == shape
        assert arr.dtype == dtype
        with pytest.raises(ValueError):
            arr[0] = 0


def test_bundle_rejects_wrong_shape(tables):
    arrays = tables.as_dict()
    arrays['twist_move'] = np.zeros((10, 18), dtype=np.int16)
    with pytest.raises(ValueError, match='twist_move'):
        TableBundle.from_dict(arrays)


def test_views(tables):
    v = tables.views
    assert v is tables.views
    assert isinstance(v.twist_move[0][0], int)
    assert isinstance(v.slice_twist_prun, bytes)
    assert v.ub_to_df_move[114][0] == tables.ub_to_df_move[114, 0]


def test_move_tables_restore(tables):
    for name in ('twist_move', 'flip_move', 'fr_to_br_move', 'urf_to_dlf_move', 'ur_to_ul_move'):
        t = getattr(tables.views, name)
        for i in (0, 1, len(t) // 2, len(t) - 1):
            for m in range(0, 18, 3):
                j = i
                for _ in range(4):
                    j = t[j][m]
                assert j == i, (name, i, m)


def test_merge_table(tables):
    assert tables.merge_ur_to_df[0, 114] == 0
    assert tables.merge_ur_to_df[0, 0] == -1


@pytest.mark.parametrize('name, size', [
    ('slice_twist_prun', N_SLICE_TWIST),
    ('slice_flip_prun', N_SLICE_FLIP),
    ('slice_urf_parity_prun', N_SLICE_URF_PARITY),
    ('slice_urdf_parity_prun', N_SLICE_URDF_PARITY),
])
def test_pruning_complete(tables, name, size):
    values = unpack_nibbles(getattr(tables, name), size)
    assert values[0] == 0
    assert np.count_nonzero(values == 0) == 1
    assert values.max() < UNKNOWN
    if size % 2:
        assert unpack_nibbles(getattr(tables, name))[-1] == UNKNOWN


def bfs_layers(start, neighbours, max_depth=4):
    seen = {start: 0}
    layer = [start]
    for depth in range(1, max_depth + 1):
        nxt = []
        for state in layer:
            for s in neighbours(state):
                if s not in seen:
                    seen[s] = depth
                    nxt.append(s)
        layer = nxt
    return seen


def test_slice_twist_distances_exact(tables):
    """Breadth first search on (twist, slice) up to depth 4 agrees with the table"""
    v = tables.views
    seen = bfs_layers((0, 0), lambda s: [(v.twist_move[s[0]][m], v.fr_to_br_move[s[1] * N_SLICE2][m] // N_SLICE2)
                                         for m in range(N_MOVE)])
    for (twist, slice_), depth in seen.items():
        assert get_pruning(v.slice_twist_prun, N_SLICE1 * twist + slice_) == depth


def test_slice_flip_distances_exact(tables):
    v = tables.views
    seen = bfs_layers((0, 0), lambda s: [(v.flip_move[s[0]][m], v.fr_to_br_move[s[1] * N_SLICE2][m] // N_SLICE2)
                                         for m in range(N_MOVE)])
    for (flip, slice_), depth in seen.items():
        assert get_pruning(v.slice_flip_prun, N_SLICE1 * flip + slice_) == depth


@pytest.mark.parametrize('move_name, prun_name', [
    ('urf_to_dlf_move', 'slice_urf_parity_prun'),
    ('ur_to_df_move', 'slice_urdf_parity_prun'),
])
def test_phase2_distances_exact(tables, move_name, prun_name):
    """Phase-2 tables only expand the H moves, parity flips on the quarter turns of U and D"""
    v = tables.views
    perm_move = getattr(v, move_name)
    prun = getattr(v, prun_name)
    seen = bfs_layers((0, 0, 0), lambda s: [(perm_move[s[0]][m], v.fr_to_br_move[s[1]][m], PARITY_MOVE[s[2]][m])
                                            for m in PHASE2_MOVES])
    assert len(seen) > 100
    for (perm, frbr, parity), depth in seen.items():
        assert get_pruning(prun, (N_SLICE2 * perm + frbr) * 2 + parity) == depth


def test_phase2_bounds(tables):
    c = CoordCube(CubieCube.solved().apply(parse_moves("R2")), tables)
    v = tables.views
    assert get_pruning(v.slice_urf_parity_prun, (N_SLICE2 * c.urf_to_dlf + c.fr_to_br) * 2 + c.parity) == 1
    assert get_pruning(v.slice_urdf_parity_prun, (N_SLICE2 * c.ur_to_df + c.fr_to_br) * 2 + c.parity) == 1


def test_builder_steps(tables):
    builder = TableBuilder(tables.as_dict())
    assert builder.progress == 0.0
    assert builder.current_step is BuildStep.TWIST_MOVE
    with pytest.raises(RuntimeError):
        builder.tables()

    steps = []
    while not builder.is_finished:
        steps.append(builder.next())
    assert steps == list(BuildStep)
    assert len(steps) == 12
    assert builder.progress == 1.0
    assert builder.next() is None
    assert builder.tables().twist_move is tables.twist_move


def test_builder_force_rebuilds_step(tables):
    builder = TableBuilder(tables.as_dict())
    assert builder.next(force=True) is BuildStep.TWIST_MOVE
    rebuilt = builder._tables['twist_move']
    assert rebuilt is not tables.twist_move
    assert np.array_equal(rebuilt, tables.twist_move)


def test_save_and_load(tables, tmp_path):
    path = str(tmp_path / 'sub' / 'tables.npz')
    tables.save(path)
    loaded = TableBundle.load(path)
    for name in TABLE_LAYOUT:
        assert np.array_equal(getattr(loaded, name), getattr(tables, name))
    assert load_or_build(path).slice_flip_prun.shape == tables.slice_flip_prun.shape


def test_load_damaged(tmp_path):
    path = tmp_path / 'tables.npz'
    path.write_bytes(b'not a table file')
    with pytest.raises(ValueError):
        TableBundle.load(str(path))

    np.savez(str(path), twist_move=np.zeros((3, 18), dtype=np.int16))
    with pytest.raises(ValueError, match='missing'):
        TableBundle.load(str(path))
