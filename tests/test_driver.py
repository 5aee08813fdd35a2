"""Tests for the tree walk and in-place rewriting."""

from __future__ import annotations

import os
import re
from pathlib import Path

import pytest

from unlongify.driver import (
    FileResult,
    RunReport,
    iter_source_files,
    process_tree,
    rewrite_file,
)
from unlongify.errors import FileAccessError, ScanError

# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------


class TestIterSourceFiles:
    def test_extensions_and_order(self, make_tree) -> None:
        root = make_tree(
            {
                "b.h": "",
                "a.c": "",
                "d.hpp": "",
                "c.cpp": "",
                "notes.txt": "",
                "tool.py": "",
                "sub/e.c": "",
            }
        )
        found = [p.relative_to(root).as_posix() for p in iter_source_files(root)]
        assert found == ["a.c", "b.h", "c.cpp", "d.hpp", "sub/e.c"]

    def test_skip_dirs_pruned(self, make_tree) -> None:
        root = make_tree({"a.c": "", "third_party/x.c": "", "third_party/deep/y.c": ""})
        found = list(iter_source_files(root, [re.compile(r"[/\\]third_party$")]))
        assert found == [root / "a.c"]

    def test_custom_extensions(self, make_tree) -> None:
        root = make_tree({"a.c": "", "b.cc": ""})
        assert list(iter_source_files(root, extensions=[".cc"])) == [root / "b.cc"]

    def test_single_file_root(self, make_tree) -> None:
        root = make_tree({"one.c": ""})
        assert list(iter_source_files(root / "one.c")) == [root / "one.c"]

    def test_single_file_root_wrong_extension(self, make_tree) -> None:
        root = make_tree({"one.txt": ""})
        assert list(iter_source_files(root / "one.txt")) == []

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(FileAccessError) as exc_info:
            list(iter_source_files(tmp_path / "nope"))
        assert exc_info.value.path == tmp_path / "nope"


# ---------------------------------------------------------------------------
# Single file
# ---------------------------------------------------------------------------


class TestRewriteFile:
    def test_in_memory_only(self, make_tree) -> None:
        root = make_tree({"a.c": "long x;\n"})
        result = rewrite_file(root / "a.c")
        assert result.changed
        assert result.rewritten == "int x;\n"
        assert (root / "a.c").read_text() == "long x;\n"

    def test_unreadable_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileAccessError, match="cannot read file"):
            rewrite_file(tmp_path)

    def test_result_changed_flag(self) -> None:
        assert not FileResult(Path("a.c"), "int x;", "int x;").changed


# ---------------------------------------------------------------------------
# Tree processing
# ---------------------------------------------------------------------------


class TestProcessTree:
    def test_rewrites_in_place(self, make_tree) -> None:
        root = make_tree({"a.c": "long x;\n", "b.h": "int y;\n"})
        report = process_tree(root)
        assert report.rewritten == [root / "a.c"]
        assert report.unchanged == [root / "b.h"]
        assert (root / "a.c").read_text() == "int x;\n"

    def test_unchanged_file_not_written(self, make_tree) -> None:
        root = make_tree({"b.h": "int y;\n"})
        path = root / "b.h"
        os.utime(path, ns=(1_000_000_000, 1_000_000_000))
        process_tree(root)
        assert path.stat().st_mtime_ns == 1_000_000_000

    def test_non_utf8_bytes_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.c"
        path.write_bytes(b"/* \xa9 1994 */\nlong x;\n")
        process_tree(tmp_path)
        assert path.read_bytes() == b"/* \xa9 1994 */\nint x;\n"

    def test_dry_run_writes_nothing(self, make_tree) -> None:
        root = make_tree({"a.c": "long x;\n"})
        report = process_tree(root, dry_run=True)
        assert report.rewritten == [root / "a.c"]
        assert (root / "a.c").read_text() == "long x;\n"

    def test_on_result_sees_every_file(self, make_tree) -> None:
        root = make_tree({"a.c": "long x;\n", "b.c": "int y;\n"})
        seen: list[FileResult] = []
        process_tree(root, on_result=seen.append)
        assert [r.path.name for r in seen] == ["a.c", "b.c"]
        assert [r.changed for r in seen] == [True, False]

    def test_scan_error_stops_walk(self, make_tree) -> None:
        root = make_tree({"a.c": "long a;\n", "b.c": "long b; /* open\n", "c.c": "long c;\n"})
        with pytest.raises(ScanError) as exc_info:
            process_tree(root)
        assert exc_info.value.filename == str(root / "b.c")
        # Files before the failure stay rewritten; nothing after is touched
        assert (root / "a.c").read_text() == "int a;\n"
        assert (root / "b.c").read_text() == "long b; /* open\n"
        assert (root / "c.c").read_text() == "long c;\n"

    def test_keep_going_skips_bad_file(self, make_tree) -> None:
        root = make_tree({"a.c": "long a;\n", "b.c": 'puts("open);\n', "c.c": "long c;\n"})
        report = process_tree(root, keep_going=True)
        assert [p for p, _ in report.failed] == [root / "b.c"]
        assert report.rewritten == [root / "a.c", root / "c.c"]
        assert (root / "b.c").read_text() == 'puts("open);\n'
        assert (root / "c.c").read_text() == "int c;\n"


class TestRunReport:
    def test_summary(self) -> None:
        report = RunReport(rewritten=[Path("a.c")], unchanged=[Path("b.c"), Path("c.c")])
        assert report.summary() == "1 file(s) rewritten, 2 unchanged"

    def test_summary_with_failures(self, make_tree) -> None:
        root = make_tree({"bad.c": "/*"})
        report = process_tree(root, keep_going=True)
        assert report.summary() == "0 file(s) rewritten, 0 unchanged, 1 failed"
