import os
import stat
import sys

import pytest

from audiocutter.core import files as files_module
from audiocutter.core.files import read_audio_file, stat_file, write_audio_file


def test_write_then_read(tmp_path) -> None:
    target = tmp_path / "out" / "song.mp3"

    assert write_audio_file(target, b"abc")

    assert read_audio_file(target) == b"abc"
    assert stat_file(target).size == 3
    assert [p.name for p in target.parent.iterdir()] == ["song.mp3"]


def test_overwrites_existing(tmp_path) -> None:
    target = tmp_path / "song.wav"
    target.write_bytes(b"old contents")

    assert write_audio_file(target, b"new")
    assert target.read_bytes() == b"new"


def test_failed_replace_keeps_original(tmp_path, monkeypatch) -> None:
    target = tmp_path / "song.wav"
    target.write_bytes(b"old")

    def _fail(_src, _dst):
        raise OSError("disk full")

    monkeypatch.setattr(files_module.os, "replace", _fail)

    assert write_audio_file(target, b"new") is False
    assert target.read_bytes() == b"old"
    assert sorted(os.listdir(tmp_path)) == ["song.wav"]


def test_missing_file(tmp_path) -> None:
    assert read_audio_file(tmp_path / "missing.mp3") is None
    assert stat_file(tmp_path / "missing.mp3") is None


@pytest.fixture
def umask_022():
    previous = os.umask(0o022)
    yield
    os.umask(previous)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_new_file_follows_umask(tmp_path, umask_022) -> None:
    target = tmp_path / "song.wav"

    assert write_audio_file(target, b"RIFF")

    assert stat.S_IMODE(target.stat().st_mode) == 0o644


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_overwrite_keeps_existing_mode(tmp_path, umask_022) -> None:
    target = tmp_path / "song.mp3"
    target.write_bytes(b"old")
    target.chmod(0o664)

    assert write_audio_file(target, b"new")

    assert stat.S_IMODE(target.stat().st_mode) == 0o664
    assert target.read_bytes() == b"new"
