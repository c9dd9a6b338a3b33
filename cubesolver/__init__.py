from cubesolver.cubie import CubieCube
from cubesolver.coord import CoordCube
from cubesolver.errors import (CubeError, FormatError, ValidationError, SolverFailure, SolverTimeout,
                               SearchCancelled, VerifyResult, error_message)
from cubesolver.facelet import to_cubie_cube, to_facelet_string, SOLVED_FACELETS
from cubesolver.moves import parse_moves, format_solution, invert_moves
from cubesolver.search import Search, Solution
from cubesolver.solver import Solver, solve
from cubesolver.tables import TableBuilder, TableBundle, BuildStep, load_or_build
from cubesolver.tools import verify, random_cube, apply_moves, scramble

__all__ = [
    'CubieCube', 'CoordCube',
    'CubeError', 'FormatError', 'ValidationError', 'SolverFailure', 'SolverTimeout', 'SearchCancelled',
    'VerifyResult', 'error_message',
    'to_cubie_cube', 'to_facelet_string', 'SOLVED_FACELETS',
    'parse_moves', 'format_solution', 'invert_moves',
    'Search', 'Solution', 'Solver', 'solve',
    'TableBuilder', 'TableBundle', 'BuildStep', 'load_or_build',
    'verify', 'random_cube', 'apply_moves', 'scramble',
]
