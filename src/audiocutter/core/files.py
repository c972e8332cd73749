"""Disk collaborators: read, atomic write and stat of audio files."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileStats:
    size: int


def read_audio_file(path: Path) -> Optional[bytes]:
    """Return the file contents or ``None`` when it cannot be read."""

    try:
        return Path(path).read_bytes()
    except OSError as exc:
        logger.warning("Error reading audio file %s: %s", path, exc)
        return None


def stat_file(path: Path) -> Optional[FileStats]:
    try:
        return FileStats(size=Path(path).stat().st_size)
    except OSError as exc:
        logger.warning("Error getting file stats for %s: %s", path, exc)
        return None


def _target_mode(target: Path) -> int:
    """Mode for the written file: keep an existing file's, else honour the umask."""

    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_audio_file(path: Path, data: bytes) -> bool:
    """Write ``data`` next to ``path`` and move it into place.

    The destination is only replaced once the temporary file is fully written,
    so a failure never leaves a truncated file (nor touches an existing one).
    """

    target = Path(path)
    temp_path: Path | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{target.stem}.",
            suffix=".part",
            dir=str(target.parent),
        )
        temp_path = Path(temp_name)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(temp_path, _target_mode(target))
        os.replace(temp_path, target)
        temp_path = None
        return True
    except OSError as exc:
        logger.warning("Error writing audio file %s: %s", target, exc)
        return False
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
