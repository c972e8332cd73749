"""Entry point for the AudioCutter application."""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

import wx

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from audiocutter.core.config import SettingsManager
from audiocutter.core.env import resolve_log_dir
from audiocutter.core.i18n import set_language
from audiocutter.ui.main_frame import MainFrame


def _configure_logging(level_override: Optional[str] = None) -> Optional[Path]:
    env_level = os.environ.get("LOGLEVEL")
    level_name = (env_level or level_override or "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)

    primary_dir = resolve_log_dir()
    fallback_dir = Path(tempfile.gettempdir()) / "audiocutter_logs"
    logs_dir = primary_dir
    log_path: Path | None = None

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        logs_dir = fallback_dir
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            logging.basicConfig(level=level)
            return None

    try:
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        log_path = logs_dir / f"audiocutter-{timestamp}.log"
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        file_handler.setFormatter(formatter)
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logging.basicConfig(level=level, handlers=[file_handler, stream_handler])
    except OSError:
        log_path = None
        logging.basicConfig(level=level)
    if log_path:
        logging.getLogger(__name__).info("Writing log to %s", log_path)
        if logs_dir is fallback_dir:
            logging.getLogger(__name__).warning("Using fallback log directory %s", logs_dir)
    return log_path


def run() -> None:
    """Start the main wxPython event loop."""
    settings = SettingsManager()
    _configure_logging(settings.get_diagnostics_log_level())
    app = wx.App()
    set_language(settings.get_language())
    frame = MainFrame(settings=settings)
    frame.Show()
    if len(sys.argv) > 1:
        frame.load_file(Path(sys.argv[1]))
    app.MainLoop()


if __name__ == "__main__":
    run()
