"""Command-line interface for unlongify."""

from __future__ import annotations

import argparse
import re
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from unlongify.driver import DEFAULT_EXTENSIONS, FileResult, process_tree
from unlongify.errors import FileAccessError, ScanError

CONFIG_NAME = "unlongify.toml"

USAGE = """\
usage: unlongify [options] <PATH>

Eg:

    unlongify /usr2/st

This recursively scans a directory tree for C source files and headers and
modifies them to change "long" type declarations to "int". Care is taken to
avoid false positives elsewhere in the source. Printf/scanf format options
are also updated to use "int".

This tool is aimed at updating 32-bit x86 C code to dual 32/64-bit
(x86/x86_64) code. GCC on x86 processors compiles both "int" and "long" to
32-bit integers, whereas on x86_64 "int" compiles to 32-bit and "long"
compiles to 64-bit. The tool doesn't really understand C, and should be
treated as a blunt object to get the code close to correct.

Users writing modern code should consider updating any program interfaces
to use fixed width integers defined in "stdint.h". This is more portable
between compilers and architectures.

Note: not all longs are bad, specifically some system calls explicitly
require and return "long" arguments. Of particular note is the "mtype" field
in the struct argument to "msgrcv", which must be of type "long". THIS TOOL
WILL BLINDLY CONVERT THESE TO "ints"!

Users should check their code after using this tool. Modern versions of GCC
will warn in at least some cases; check the compiler's output.

WARNING: this does not make backups before editing files
"""


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    root: Path
    skip_dirs: list[re.Pattern[str]]
    extensions: list[str]
    keep_going: bool
    dry_run: bool
    diff: bool
    verbose: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="unlongify",
        description='Rewrite "long" declarations and %l format specifiers in C sources',
    )
    p.add_argument("path", nargs="?", help="Directory tree or single file to rewrite")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--skip-dir",
        action="append",
        default=[],
        metavar="REGEX",
        help="Skip directories whose path matches REGEX (repeatable)",
    )
    p.add_argument(
        "--ext",
        action="append",
        default=[],
        metavar="EXT",
        help="Also process files with this extension, e.g. .cc (repeatable)",
    )
    p.add_argument(
        "--keep-going",
        action="store_true",
        help="Skip files that fail to scan instead of stopping",
    )
    p.add_argument(
        "-n", "--dry-run", action="store_true", help="Report changes without writing files"
    )
    p.add_argument("--diff", action="store_true", help="Print a unified diff of each change")
    p.add_argument("-v", "--verbose", action="store_true", help="Report each rewritten file")
    p.add_argument("--debug", action="store_true", help="Dump token streams to stderr")
    return p


def parse_pattern(s: str) -> re.Pattern[str]:
    """Compile a skip-dir regular expression."""
    try:
        return re.compile(s)
    except re.error as exc:
        raise argparse.ArgumentTypeError(f"invalid skip-dir pattern {s!r}: {exc}") from exc


def parse_extension(s: str) -> str:
    """Normalize an extension to the ".ext" form."""
    s = s.strip()
    if not s or s == ".":
        raise argparse.ArgumentTypeError("empty file extension")
    return s if s.startswith(".") else f".{s}"


def load_config(config_path: Path | None, root: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file.

    Raises FileAccessError if the file exists but cannot be read.
    """
    if config_path is None:
        base = root if root.is_dir() else root.parent
        config_path = base / CONFIG_NAME

    if not config_path.is_file():
        return {}

    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except OSError as exc:
        raise FileAccessError(f"cannot read config file ({exc.strerror})", config_path) from exc


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    root = Path(args.path)

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, root)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    # Skip dirs: config < CLI
    skip_dirs: list[re.Pattern[str]] = []
    cfg_skip = config.get("skip_dirs")
    if isinstance(cfg_skip, list):
        skip_dirs.extend(parse_pattern(str(s)) for s in cfg_skip)
    skip_dirs.extend(parse_pattern(s) for s in args.skip_dir)

    # Extensions: defaults replaced by config, extended by CLI
    extensions = list(DEFAULT_EXTENSIONS)
    cfg_ext = config.get("extensions")
    if isinstance(cfg_ext, list):
        extensions = [parse_extension(str(e)) for e in cfg_ext]
    for raw in args.ext:
        ext = parse_extension(raw)
        if ext not in extensions:
            extensions.append(ext)

    keep_going = False
    cfg_keep = config.get("keep_going")
    if isinstance(cfg_keep, bool):
        keep_going = cfg_keep
    if args.keep_going:
        keep_going = True

    return CliOptions(
        root=root,
        skip_dirs=skip_dirs,
        extensions=extensions,
        keep_going=keep_going,
        dry_run=args.dry_run,
        diff=args.diff,
        verbose=args.verbose,
        debug=args.debug,
    )


def _report_result(options: CliOptions, result: FileResult) -> None:
    if options.debug:
        from unlongify.debug import dump_scan

        dump_scan(result.original, str(result.path), file=sys.stderr)

    if not result.changed:
        return

    if options.diff:
        from unlongify.preview import unified_diff

        sys.stdout.write(unified_diff(result.original, result.rewritten, str(result.path)))

    if options.dry_run:
        print(f"would rewrite {result.path}", file=sys.stderr)
    elif options.verbose:
        print(f"rewrote {result.path}", file=sys.stderr)


def _report_scan_error(options: CliOptions, exc: ScanError) -> None:
    if options.debug:
        from unlongify.debug import dump_scan

        dump_scan(exc.source, exc.filename, file=sys.stderr)
    print(str(exc), file=sys.stderr)


def run(options: CliOptions) -> int:
    """Walk the tree and rewrite files. Returns the exit code."""
    try:
        report = process_tree(
            options.root,
            skip_dirs=options.skip_dirs,
            extensions=options.extensions,
            keep_going=options.keep_going,
            dry_run=options.dry_run,
            on_result=lambda result: _report_result(options, result),
        )
    except ScanError as exc:
        _report_scan_error(options, exc)
        print(f"stopped at {exc.filename}; no changes written to it", file=sys.stderr)
        return 1
    except FileAccessError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    for _path, exc in report.failed:
        _report_scan_error(options, exc)

    if options.verbose or options.dry_run or report.failed:
        print(report.summary(), file=sys.stderr)

    return 1 if report.failed else 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.path is None:
        print(USAGE)
        return 1

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except FileAccessError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    return run(options)
