"""Tests for :class:`ExportWriter`."""

from pathlib import Path

import pytest

from stronghold_bot.core.export import ExportWriter
from stronghold_bot.errors import ExportWriteError


def test_write_creates_and_overwrites(tmp_path: Path) -> None:
    path = tmp_path / "users.xml"
    writer = ExportWriter(path)

    writer.write("<first />")
    assert path.read_text(encoding="utf-8") == "<first />"

    writer.write("<second />")
    assert path.read_text(encoding="utf-8") == "<second />"
    assert not writer.tmp_path.exists()


def test_write_keeps_unicode(tmp_path: Path) -> None:
    path = tmp_path / "users.xml"
    ExportWriter(path).write("<user username=\"Zoë ✓\" />")
    assert "Zoë ✓" in path.read_text(encoding="utf-8")


def test_unwritable_path_raises(tmp_path: Path) -> None:
    path = tmp_path / "missing-dir" / "users.xml"
    with pytest.raises(ExportWriteError):
        ExportWriter(path).write("<doc />")
    assert not path.exists()


def test_failed_write_leaves_previous_export(tmp_path: Path) -> None:
    path = tmp_path / "users.xml"
    writer = ExportWriter(path)
    writer.write("<old />")

    # a directory squatting on the temp name makes the next write fail
    writer.tmp_path.mkdir()
    with pytest.raises(ExportWriteError):
        writer.write("<new />")
    assert path.read_text(encoding="utf-8") == "<old />"


def test_unencodable_document_raises_and_cleans_up(tmp_path: Path) -> None:
    path = tmp_path / "users.xml"
    writer = ExportWriter(path)
    writer.write("<old />")

    with pytest.raises(ExportWriteError):
        writer.write("<user username=\"x\ud800y\" />")
    assert not writer.tmp_path.exists()
    assert path.read_text(encoding="utf-8") == "<old />"
