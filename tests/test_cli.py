import pytest

from cubesolver.__main__ import main
from cubesolver.facelet import SOLVED_FACELETS
from cubesolver.tools import scramble, verify


def test_verify_ok(capsys):
    assert main(['verify', SOLVED_FACELETS]) == 0
    assert capsys.readouterr().out.strip() == "0 Cube is solvable"


def test_verify_bad(capsys):
    assert main(['verify', SOLVED_FACELETS[:-1]]) == 1
    assert capsys.readouterr().out.startswith("-1 ")


def test_random(capsys):
    assert main(['random']) == 0
    facelets = capsys.readouterr().out.strip()
    assert verify(facelets) == 0


def test_solve(tables, table_file, capsys):
    assert main(['--tables', table_file, 'solve', scramble("R")]) == 0
    assert capsys.readouterr().out.strip() == "R'"


def test_solve_separator(tables, table_file, capsys):
    assert main(['--tables', table_file, 'solve', '--separator', scramble("U R2 F")]) == 0
    assert '.' in capsys.readouterr().out.split()


def test_solve_invalid(tables, table_file, capsys):
    f = list(SOLVED_FACELETS)
    f[5], f[10] = f[10], f[5]
    assert main(['--tables', table_file, 'solve', ''.join(f)]) == 1
    assert "Error -3" in capsys.readouterr().err


def test_solve_bad_ceiling(tables, table_file, capsys):
    assert main(['--tables', table_file, 'solve', '--max-length', '40', scramble("R")]) == 2
    assert 'max_length' in capsys.readouterr().err


def test_build_tables_uses_cache(tables, table_file, capsys):
    assert main(['--tables', table_file, 'build-tables']) == 0
    assert capsys.readouterr().out.strip() == table_file


def test_command_required():
    with pytest.raises(SystemExit):
        main([])
