"""Tests for relman.platform.files module."""

from __future__ import annotations

from pathlib import Path

from relman.platform.files import atomic_write_text, scratch_dir


class TestAtomicWriteText:
    def test_creates_parents(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "file.txt"

        atomic_write_text(path, "hello\n")

        assert path.read_text(encoding="utf-8") == "hello\n"

    def test_overwrites_and_leaves_no_temp_files(self, tmp_path: Path) -> None:
        path = tmp_path / "file.txt"
        path.write_text("old", encoding="utf-8")

        atomic_write_text(path, "new")

        assert path.read_text(encoding="utf-8") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]

    def test_preserves_newlines(self, tmp_path: Path) -> None:
        path = tmp_path / "crlf.txt"

        atomic_write_text(path, "a\r\nb\n")

        assert path.read_bytes() == b"a\r\nb\n"


def test_scratch_dir_is_fresh_and_prefixed() -> None:
    first = scratch_dir("relman-test-")
    second = scratch_dir("relman-test-")

    assert first != second
    assert first.is_dir()
    assert first.name.startswith("relman-test-")
    assert list(first.iterdir()) == []
