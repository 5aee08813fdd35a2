"""Tree walk and in-place file rewriting."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from unlongify.errors import FileAccessError, ScanError
from unlongify.rewriter import decode_source, encode_source, rewrite

DEFAULT_EXTENSIONS: tuple[str, ...] = (".c", ".h", ".cpp", ".hpp")


@dataclass(frozen=True, slots=True)
class FileResult:
    """Outcome of rewriting one file in memory."""

    path: Path
    original: str
    rewritten: str

    @property
    def changed(self) -> bool:
        return self.original != self.rewritten


@dataclass(slots=True)
class RunReport:
    """Summary of a tree walk."""

    rewritten: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, ScanError]] = field(default_factory=list)

    def summary(self) -> str:
        text = f"{len(self.rewritten)} file(s) rewritten, {len(self.unchanged)} unchanged"
        if self.failed:
            text += f", {len(self.failed)} failed"
        return text


def matches_any(path: Path, patterns: Sequence[re.Pattern[str]]) -> bool:
    """Return True if any pattern is found anywhere in the path string."""
    s = str(path)
    return any(p.search(s) for p in patterns)


def iter_source_files(
    root: Path,
    skip_dirs: Sequence[re.Pattern[str]] = (),
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> Iterator[Path]:
    """Yield matching files under root in sorted order, pruning skipped dirs.

    Raises FileAccessError if root does not exist or a directory cannot be
    listed.
    """
    if not root.exists():
        raise FileAccessError("no such file or directory", root)
    if not root.is_dir():
        if root.suffix in extensions:
            yield root
        return
    if matches_any(root, skip_dirs):
        return

    def _onerror(exc: OSError) -> None:
        raise FileAccessError(f"cannot list directory ({exc.strerror})", exc.filename or root)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_onerror):
        base = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if not matches_any(base / d, skip_dirs))
        for name in sorted(filenames):
            path = base / name
            if path.suffix in extensions:
                yield path


def rewrite_file(path: Path) -> FileResult:
    """Read path and rewrite its contents in memory. Nothing is written."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FileAccessError(f"cannot read file ({exc.strerror})", path) from exc
    original = decode_source(data)
    return FileResult(path, original, rewrite(original, str(path)))


def write_result(result: FileResult) -> None:
    """Truncate and overwrite the file with the rewritten text."""
    try:
        result.path.write_bytes(encode_source(result.rewritten))
    except OSError as exc:
        raise FileAccessError(f"cannot write file ({exc.strerror})", result.path) from exc


def process_tree(
    root: Path,
    *,
    skip_dirs: Sequence[re.Pattern[str]] = (),
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    keep_going: bool = False,
    dry_run: bool = False,
    on_result: Callable[[FileResult], None] | None = None,
) -> RunReport:
    """Rewrite every matching file under root in place.

    A ScanError stops the walk unless keep_going is set, in which case the
    file is left untouched and recorded in the report. FileAccessError always
    stops the walk. Files rewritten before a stop stay rewritten.
    """
    report = RunReport()
    for path in iter_source_files(root, skip_dirs, extensions):
        try:
            result = rewrite_file(path)
        except ScanError as exc:
            if not keep_going:
                raise
            report.failed.append((path, exc))
            continue

        if on_result is not None:
            on_result(result)

        if not result.changed:
            report.unchanged.append(path)
            continue
        if not dry_run:
            write_result(result)
        report.rewritten.append(path)
    return report
