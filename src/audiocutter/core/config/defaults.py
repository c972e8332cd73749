"""Default configuration values."""

from __future__ import annotations

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "general": {
        "language": "en",
    },
    "editor": {
        "fade_in_seconds": 0.0,
        "fade_out_seconds": 0.0,
        "last_directory": "",
    },
    "export": {
        "default_bitrate_kbps": 256,
        "fade_composition": "overwrite",
        "filename_suffix": " - edited",
        "ffmpeg_path": "",
    },
    "lookup": {
        "enabled": True,
        "base_url": "https://musicbrainz.org/ws/2",
        "user_agent": "AudioCutter/1.0.0 (https://github.com/genau7/audio-cutter)",
        "timeout_seconds": 10.0,
    },
    "diagnostics": {
        "log_level": "WARNING",
    },
}
