import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .core.constants import FILENAME
from .core.errors import ParseError
from .core.fields import parse_line
from .core.models import LineResult
from .core.reporting import Reporter
from .core.scanner import (
    DEFAULT_MAX_FILE_SIZE,
    DirectoryScanner,
    SingleFileScanner,
    configure_logging,
)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="securitytxt",
        description="Parse security.txt files line by line and report fields, comments and errors.",
    )
    sub = p.add_subparsers(dest="mode", required=True)

    # dir mode
    d = sub.add_parser("dir", help="Find and parse security.txt files under a directory.")
    d.add_argument("path", type=Path, help="Directory to search recursively.")
    d.add_argument("--out", type=Path, default=Path("./securitytxt_output"), help="Output directory.")
    d.add_argument("--workers", type=int, default=8, help="Number of worker threads.")
    d.add_argument("--include", default=FILENAME, help="File name glob(s) to parse, comma-separated.")
    d.add_argument("--exclude", default=".git,.venv,node_modules,venv,.tox,.mypy_cache,.pytest_cache,__pycache__", help="Dir names to exclude, comma-separated.")
    d.add_argument("--max-file-size", type=int, default=DEFAULT_MAX_FILE_SIZE, help="Max file size in bytes to parse (default 1MB).")
    d.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    d.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")

    # file mode
    f = sub.add_parser("file", help="Parse a single file.")
    f.add_argument("path", type=Path, help="File to parse.")
    f.add_argument("--out", type=Path, default=Path("./securitytxt_output"), help="Output directory.")
    f.add_argument("--max-file-size", type=int, default=DEFAULT_MAX_FILE_SIZE, help="Max file size in bytes to parse (default 1MB).")
    f.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")

    # line mode
    ln = sub.add_parser("line", help="Parse lines given as arguments and print JSON to stdout.")
    ln.add_argument("lines", nargs="+", help="Raw lines, e.g. 'Contact: mailto:security@example.com'.")

    return p


def _exit_code(results: List[LineResult]) -> int:
    return 1 if any(r.kind == "error" for r in results) else 0


def run_dir(args: argparse.Namespace) -> int:
    if not args.path.is_dir():
        print(f"Not a directory: {args.path}", file=sys.stderr)
        return 2

    scanner = DirectoryScanner(
        root=args.path,
        include_globs=[g.strip() for g in args.include.split(",") if g.strip()],
        exclude_dirs=[e.strip() for e in args.exclude.split(",") if e.strip()],
        max_file_size=args.max_file_size,
        workers=args.workers,
        logger=configure_logging(verbose=args.verbose),
        verbose=args.verbose,
        show_progress=not args.no_progress,
    )
    results = scanner.scan()

    Reporter(args.out).write_all(results)
    return _exit_code(results)


def run_file(args: argparse.Namespace) -> int:
    if not args.path.is_file():
        print(f"Not a file: {args.path}", file=sys.stderr)
        return 2

    scanner = SingleFileScanner(
        file_path=args.path,
        max_file_size=args.max_file_size,
        logger=configure_logging(verbose=args.verbose),
        verbose=args.verbose,
    )
    results = scanner.scan()

    Reporter(args.out).write_all(results)
    return _exit_code(results)


def run_line(args: argparse.Namespace) -> int:
    results: List[LineResult] = []
    source = Path("<argv>")
    for i, text in enumerate(args.lines, start=1):
        try:
            result = LineResult.from_line(source, i, text, parse_line(text))
        except ParseError as exc:
            result = LineResult.from_error(source, i, text, exc)
        results.append(result)
        print(json.dumps(result.__dict__))
    return _exit_code(results)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.mode == "dir":
        return run_dir(args)
    elif args.mode == "file":
        return run_file(args)
    elif args.mode == "line":
        return run_line(args)
    else:
        parser.print_help()
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
