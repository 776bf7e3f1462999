"""Tests for ZIP packaging (gincrud.archiver)."""

from __future__ import annotations

import io
import os
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from gincrud.archiver import (
    ArchiveError,
    archive_entries,
    build_archive,
    build_archive_with_entries,
    write_archive,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "tree"
    (root / "a" / "y").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "b.txt").write_bytes(b"bee\n")
    (root / "a" / "x.txt").write_bytes(b"ex")
    (root / "a" / "y" / "z.bin").write_bytes(bytes(range(256)))
    (root / ".hidden").write_text("dot", encoding="utf-8")
    return root


def _open(content: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(content))


class TestArchiveEntries:
    def test_lexical_depth_first_order(self, tree):
        assert archive_entries(tree) == [".hidden", "a/x.txt", "a/y/z.bin", "b.txt"]

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(ArchiveError):
            archive_entries(tmp_path / "missing")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlinks_skipped(self, tree):
        try:
            (tree / "link.txt").symlink_to(tree / "b.txt")
        except OSError:
            pytest.skip("cannot create symlinks here")
        assert "link.txt" not in archive_entries(tree)


class TestBuildArchive:
    def test_entries_are_regular_files_only(self, tree):
        with _open(build_archive(tree)) as zf:
            names = zf.namelist()
        assert names == archive_entries(tree)
        assert not any(name.endswith("/") for name in names)

    def test_entry_names_relative_with_forward_slashes(self, tree):
        with _open(build_archive(tree)) as zf:
            for name in zf.namelist():
                assert "\\" not in name
                assert not name.startswith("/")
                assert str(tree) not in name

    def test_content_is_byte_identical(self, tree):
        with _open(build_archive(tree)) as zf:
            for name in zf.namelist():
                assert zf.read(name) == (tree / name).read_bytes()

    def test_deflated(self, tree):
        with _open(build_archive(tree)) as zf:
            assert all(i.compress_type == zipfile.ZIP_DEFLATED for i in zf.infolist())

    def test_with_entries_reports_written_names(self, tree):
        content, names = build_archive_with_entries(tree)
        with _open(content) as zf:
            assert zf.namelist() == names
        assert names == [".hidden", "a/x.txt", "a/y/z.bin", "b.txt"]
        assert content == build_archive(tree)

    def test_reproducible(self, tree):
        assert build_archive(tree) == build_archive(tree)

    def test_compresslevel(self, tree):
        (tree / "big.txt").write_text("gincrud " * 5000, encoding="utf-8")
        stored = build_archive(tree, compresslevel=0)
        best = build_archive(tree, compresslevel=9)
        assert len(best) < len(stored)

    def test_empty_tree(self, tmp_path):
        with _open(build_archive(tmp_path)) as zf:
            assert zf.namelist() == []

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(ArchiveError):
            build_archive(tmp_path / "missing")

    def test_read_failure(self, tree):
        with patch.object(Path, "read_bytes", side_effect=OSError("disk gone")):
            with pytest.raises(ArchiveError) as exc_info:
                build_archive(tree)
        assert "disk gone" in str(exc_info.value)


class TestWriteArchive:
    def test_writes_target(self, tree, tmp_path):
        target = tmp_path / "out" / "demo.zip"
        result = write_archive(tree, target)
        assert result == target.resolve()
        with zipfile.ZipFile(target) as zf:
            assert zf.namelist() == archive_entries(tree)
        assert not (tmp_path / "out" / "demo.zip.part").exists()

    def test_failure_leaves_nothing_behind(self, tree, tmp_path):
        target = tmp_path / "demo.zip"
        with patch("gincrud.archiver._write_zip", side_effect=OSError("no space")):
            with pytest.raises(ArchiveError):
                write_archive(tree, target)
        assert not target.exists()
        assert not (tmp_path / "demo.zip.part").exists()

    def test_failure_keeps_previous_target(self, tree, tmp_path):
        target = tmp_path / "demo.zip"
        target.write_bytes(b"previous")
        with patch("gincrud.archiver._write_zip", side_effect=OSError("no space")):
            with pytest.raises(ArchiveError):
                write_archive(tree, target)
        assert target.read_bytes() == b"previous"
