import argparse
import sys

from config import Config, setup_logging
from cubesolver.errors import CubeError, error_message
from cubesolver.solver import Solver
from cubesolver.tools import verify, random_cube


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog='cubesolver', description="Two-phase Rubik's cube solver")
    ap.add_argument("--config", help="YAML file overriding Config values")
    ap.add_argument("--tables", help="table cache file, default DATA_FOLDER/TABLE_FILE")
    ap.add_argument("-v", "--verbose", action="store_true", help="log at INFO level")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("solve", help="print a solution for a facelet string")
    p.add_argument("facelets", help="54 facelets, faces U R F D L B")
    p.add_argument("--max-length", type=int, default=None, help="move ceiling")
    p.add_argument("--timeout", type=float, default=None, help="seconds")
    p.add_argument("--separator", action="store_true", help="print '.' between the two phases")
    p.add_argument("--shortest", action="store_true", help="deepen the total length (slow)")

    p = sub.add_parser("verify", help="check that a facelet string is solvable")
    p.add_argument("facelets")

    sub.add_parser("random", help="print a random solvable facelet string")

    p = sub.add_parser("build-tables", help="build and cache the move and pruning tables")
    p.add_argument("--force", action="store_true", help="rebuild even if the cache is valid")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.config:
        Config.load(args.config)
    setup_logging('INFO' if args.verbose else Config.LOG_LEVEL)

    if args.command == "verify":
        code = verify(args.facelets)
        print(code, error_message(code))
        return 0 if code == 0 else 1

    if args.command == "random":
        print(random_cube())
        return 0

    solver = Solver(table_path=args.tables)
    if args.command == "build-tables":
        solver.build_tables(force=args.force)
        print(args.tables or Config.table_path())
        return 0

    try:
        tokens = solver.solve(args.facelets, max_length=args.max_length, timeout=args.timeout,
                              separator=args.separator, shortest=args.shortest)
    except CubeError as e:
        print(f"Error {int(e.code)}: {e.message}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    print(' '.join(tokens))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
