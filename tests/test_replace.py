"""Tests for the backup-and-swap file replace."""

import shutil
from unittest.mock import patch

import pytest

from assets.replace import backup_path, replace_with_backup


@pytest.mark.parametrize(
    "name,expected",
    [
        ("logo.png", "logo.orig.png"),
        ("photo.final.JPG", "photo.final.orig.JPG"),
        ("icon", "icon.orig"),
    ],
)
def test_backup_path(tmp_path, name, expected):
    assert backup_path(tmp_path / name) == tmp_path / expected


def test_replace_with_backup(tmp_path):
    original = tmp_path / "logo.png"
    original.write_bytes(b"original")
    replacement = tmp_path / "out" / "logo.png"
    replacement.parent.mkdir()
    replacement.write_bytes(b"small")

    backup = replace_with_backup(original, replacement)

    assert original.read_bytes() == b"small"
    assert backup.read_bytes() == b"original"
    assert not replacement.exists()


def test_failed_swap_restores_original(tmp_path):
    original = tmp_path / "logo.png"
    original.write_bytes(b"original")
    replacement = tmp_path / "missing.png"

    real_move = shutil.move
    calls = []

    def flaky_move(src, dst):
        calls.append((src, dst))
        if len(calls) == 2:
            raise OSError("disk full")
        return real_move(src, dst)

    with patch("assets.replace.shutil.move", side_effect=flaky_move):
        with pytest.raises(OSError, match="disk full"):
            replace_with_backup(original, replacement)

    assert original.read_bytes() == b"original"
    assert not backup_path(original).exists()
