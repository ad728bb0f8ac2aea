"""
Tests for directory digests.
"""

import os
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from simrun.bundles.digest import directory_digest
from simrun.core.exceptions import DigestError


class TestDirectoryDigest:
    """Test directory content fingerprints."""

    def test_repeated_digest_is_stable(self, app_bundle: Path) -> None:
        """Digesting the same tree twice yields the same string."""
        assert directory_digest(app_bundle) == directory_digest(app_bundle)

    def test_digest_is_hex_sha256(self, app_bundle: Path) -> None:
        digest = directory_digest(app_bundle)
        assert len(digest) == 64
        int(digest, 16)

    def test_identical_copy_matches(self, app_bundle: Path, installed_copy: Path) -> None:
        """A copy in another location has the same digest."""
        assert directory_digest(app_bundle) == directory_digest(installed_copy)

    def test_accepts_string_path(self, app_bundle: Path) -> None:
        assert directory_digest(str(app_bundle)) == directory_digest(app_bundle)

    def test_one_byte_change_differs(self, app_bundle: Path, installed_copy: Path) -> None:
        """Changing one byte of Info.plist changes the digest."""
        plist = installed_copy / "Info.plist"
        data = bytearray(plist.read_bytes())
        data[-2] = (data[-2] + 1) % 256
        plist.write_bytes(bytes(data))

        assert directory_digest(app_bundle) != directory_digest(installed_copy)

    def test_rename_differs(self, app_bundle: Path, installed_copy: Path) -> None:
        """Same bytes under a different name change the digest."""
        (installed_copy / "icon.png").rename(installed_copy / "icon@2x.png")
        assert directory_digest(app_bundle) != directory_digest(installed_copy)

    def test_added_empty_directory_differs(
        self, app_bundle: Path, installed_copy: Path
    ) -> None:
        (installed_copy / "PlugIns").mkdir()
        assert directory_digest(app_bundle) != directory_digest(installed_copy)

    def test_moving_content_between_files_differs(self, temp_dir: Path) -> None:
        """Content boundaries between files are part of the digest."""
        a = temp_dir / "a"
        b = temp_dir / "b"
        a.mkdir()
        b.mkdir()
        (a / "x").write_bytes(b"ab")
        (a / "y").write_bytes(b"c")
        (b / "x").write_bytes(b"a")
        (b / "y").write_bytes(b"bc")

        assert directory_digest(a) != directory_digest(b)

    def test_timestamps_are_ignored(self, app_bundle: Path, installed_copy: Path) -> None:
        os.utime(installed_copy / "icon.png", (0, 0))
        assert directory_digest(app_bundle) == directory_digest(installed_copy)

    def test_creation_order_is_ignored(self, temp_dir: Path) -> None:
        first = temp_dir / "first"
        second = temp_dir / "second"
        first.mkdir()
        second.mkdir()
        for name in ("a", "b", "c"):
            (first / name).write_text(name)
        for name in ("c", "a", "b"):
            (second / name).write_text(name)

        assert directory_digest(first) == directory_digest(second)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_hashed_by_target(self, temp_dir: Path) -> None:
        tree = temp_dir / "tree"
        tree.mkdir()
        (tree / "real").write_text("data")
        os.symlink("real", tree / "link")
        before = directory_digest(tree)

        (tree / "link").unlink()
        os.symlink("elsewhere", tree / "link")

        assert directory_digest(tree) != before

    def test_missing_directory_raises(self, temp_dir: Path) -> None:
        with pytest.raises(DigestError) as exc_info:
            directory_digest(temp_dir / "missing")
        assert exc_info.value.details["reason"] == "not a directory"

    def test_empty_directory_raises(self, temp_dir: Path) -> None:
        empty = temp_dir / "empty"
        empty.mkdir()
        with pytest.raises(DigestError):
            directory_digest(empty)

    def test_does_not_modify_tree(self, app_bundle: Path, temp_dir: Path) -> None:
        snapshot = temp_dir / "snapshot"
        shutil.copytree(app_bundle, snapshot)
        directory_digest(app_bundle)
        assert sorted(p.name for p in app_bundle.rglob("*")) == sorted(
            p.name for p in snapshot.rglob("*")
        )

    def test_unlistable_subdirectory_raises(self, app_bundle: Path) -> None:
        """A directory that cannot be listed fails instead of hashing as empty."""
        real_scandir = os.scandir

        def scandir(path):
            if Path(path).name == "Base.lproj":
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        with patch("os.scandir", side_effect=scandir):
            with pytest.raises(DigestError) as exc_info:
                directory_digest(app_bundle)

        assert "cannot list" in exc_info.value.details["reason"]
        assert isinstance(exc_info.value.__cause__, PermissionError)

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs unsupported")
    def test_fifo_is_tagged_not_read(self, temp_dir: Path) -> None:
        """A named pipe is hashed by kind without being opened."""
        with_fifo = temp_dir / "with_fifo"
        with_file = temp_dir / "with_file"
        for tree in (with_fifo, with_file):
            tree.mkdir()
            (tree / "Info.plist").write_text("plist")
        os.mkfifo(with_fifo / "pipe")
        (with_file / "pipe").write_bytes(b"")

        assert directory_digest(with_fifo) == directory_digest(with_fifo)
        assert directory_digest(with_fifo) != directory_digest(with_file)
