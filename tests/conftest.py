import random

import pytest

from config import Config
from cubesolver.solver import Solver
from cubesolver.tables import load_or_build


@pytest.fixture(scope='session')
def table_file(request, tmp_path_factory) -> str:
    """Table cache kept in pytest's cache folder, built once and reused between runs"""
    cache = getattr(request.config, 'cache', None)
    if cache is not None:
        folder = cache.mkdir('cubesolver-tables')
    else:  # cacheprovider plugin disabled: build into a session temp folder
        folder = tmp_path_factory.mktemp('cubesolver-tables')
    return str(folder / Config.TABLE_FILE)


@pytest.fixture(scope='session')
def tables(table_file):
    return load_or_build(table_file)


@pytest.fixture(scope='session')
def solver(tables):
    return Solver(tables=tables)


@pytest.fixture
def rng():
    return random.Random(20141006)
