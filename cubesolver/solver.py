import logging
import threading

from config import Config
from cubesolver.errors import ValidationError, VerifyResult
from cubesolver.facelet import to_cubie_cube
from cubesolver.search import Search, Solution
from cubesolver.tables import TableBundle, load_or_build

logger = logging.getLogger(__name__)


class Solver:
    """
    Owns one TableBundle and solves facelet strings with it. Tables are loaded from
    table_path (or built and saved there) on first use unless a bundle is passed in.
    The bundle is read-only, any number of threads may solve with one Solver.
    """

    def __init__(self, tables: TableBundle = None, table_path: str = None):
        self._tables = tables
        self.table_path = table_path
        self._lock = threading.Lock()

    @property
    def tables(self) -> TableBundle:
        if self._tables is None:
            with self._lock:
                if self._tables is None:
                    self._tables = load_or_build(self.table_path or Config.table_path())
        return self._tables

    def build_tables(self, force: bool = False) -> TableBundle:
        """Build all tables now, force ignores and overwrites a cached file"""
        with self._lock:
            self._tables = load_or_build(self.table_path or Config.table_path(), force=force)
        return self._tables

    def solve_cube(self, facelets: str, max_length: int = None, timeout: float = None,
                   cancel: threading.Event = None, shortest: bool = False) -> Solution:
        """
        Verified search. Raises FormatError or ValidationError before any search starts,
        SolverFailure (SolverTimeout, SearchCancelled) when the search gives up.
        """
        cube = to_cubie_cube(facelets)
        result = cube.verify()
        if result != VerifyResult.OK:
            raise ValidationError(result)

        search = Search(self.tables, max_length=max_length,
                        timeout=Config.TIMEOUT_SEC if timeout is None else timeout,
                        cancel=cancel, shortest=shortest)
        return search.solve(cube)

    def solve(self, facelets: str, max_length: int = None, timeout: float = None, separator: bool = False,
              cancel: threading.Event = None, shortest: bool = False) -> list[str]:
        """Move tokens that solve the cube, '.' between the phases when separator is set"""
        solution = self.solve_cube(facelets, max_length=max_length, timeout=timeout, cancel=cancel,
                                   shortest=shortest)
        return solution.tokens(separator)


default_solver = Solver()


def solve(facelets: str, **kwargs) -> list[str]:
    return default_solver.solve(facelets, **kwargs)
