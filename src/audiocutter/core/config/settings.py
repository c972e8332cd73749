"""Application configuration management module."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import DEFAULT_CONFIG
from .merge import merge_settings
from audiocutter.audio.render import FadeComposition
from audiocutter.audio.types import SUPPORTED_BITRATES
from audiocutter.core.env import resolve_config_path


logger = logging.getLogger(__name__)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class SettingsManager:
    """YAML settings file layered over :data:`DEFAULT_CONFIG`."""

    config_path: Path = Path("config/settings.yaml")

    def __post_init__(self) -> None:
        self.config_path = resolve_config_path(self.config_path)
        self._data: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if self.config_path.exists():
            try:
                with self.config_path.open("r", encoding="utf-8") as file:
                    user_config = yaml.safe_load(file) or {}
            except (OSError, yaml.YAMLError) as exc:
                logger.warning("Failed to read settings %s: %s", self.config_path, exc)
                user_config = {}
            if not isinstance(user_config, dict):
                user_config = {}
            self._data = merge_settings(DEFAULT_CONFIG, user_config)
        else:
            self._data = copy.deepcopy(DEFAULT_CONFIG)

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with self.config_path.open("w", encoding="utf-8") as file:
            yaml.safe_dump(self._data, file, allow_unicode=False, sort_keys=True)

    def get_raw(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def _section(self, name: str) -> Dict[str, Any]:
        section = self._data.get(name, {})
        return section if isinstance(section, dict) else {}

    def _float(self, section: str, key: str, *, minimum: Optional[float] = None) -> float:
        default = DEFAULT_CONFIG[section][key]
        value = self._section(section).get(key, default)
        try:
            result = float(value)
        except (TypeError, ValueError):
            return default
        if minimum is not None and result < minimum:
            return default
        return result

    def get_language(self) -> str:
        value = self._section("general").get("language", DEFAULT_CONFIG["general"]["language"])
        return str(value or DEFAULT_CONFIG["general"]["language"])

    def set_language(self, language: str) -> None:
        self._data.setdefault("general", {})["language"] = str(language)

    def get_default_fade_in(self) -> float:
        return self._float("editor", "fade_in_seconds", minimum=0.0)

    def get_default_fade_out(self) -> float:
        return self._float("editor", "fade_out_seconds", minimum=0.0)

    def set_default_fades(self, fade_in: float, fade_out: float) -> None:
        editor = self._data.setdefault("editor", {})
        editor["fade_in_seconds"] = max(0.0, float(fade_in))
        editor["fade_out_seconds"] = max(0.0, float(fade_out))

    def get_last_directory(self) -> Optional[Path]:
        value = self._section("editor").get("last_directory") or ""
        return Path(value) if value else None

    def set_last_directory(self, directory: Path | None) -> None:
        self._data.setdefault("editor", {})["last_directory"] = str(directory) if directory else ""

    def get_default_bitrate(self) -> int:
        default = DEFAULT_CONFIG["export"]["default_bitrate_kbps"]
        value = self._section("export").get("default_bitrate_kbps", default)
        try:
            bitrate = int(value)
        except (TypeError, ValueError):
            return default
        return bitrate if bitrate in SUPPORTED_BITRATES else default

    def get_fade_composition(self) -> FadeComposition:
        value = self._section("export").get("fade_composition", DEFAULT_CONFIG["export"]["fade_composition"])
        return FadeComposition.parse(value)

    def get_filename_suffix(self) -> str:
        value = self._section("export").get("filename_suffix", DEFAULT_CONFIG["export"]["filename_suffix"])
        return str(value) if value is not None else ""

    def get_ffmpeg_path(self) -> Optional[str]:
        value = self._section("export").get("ffmpeg_path") or ""
        return str(value) or None

    def get_lookup_enabled(self) -> bool:
        return bool(self._section("lookup").get("enabled", DEFAULT_CONFIG["lookup"]["enabled"]))

    def get_lookup_base_url(self) -> str:
        value = self._section("lookup").get("base_url") or DEFAULT_CONFIG["lookup"]["base_url"]
        return str(value).rstrip("/")

    def get_lookup_user_agent(self) -> str:
        value = self._section("lookup").get("user_agent") or DEFAULT_CONFIG["lookup"]["user_agent"]
        return str(value)

    def get_lookup_timeout(self) -> float:
        return self._float("lookup", "timeout_seconds", minimum=0.1)

    def get_diagnostics_log_level(self) -> str:
        value = self._section("diagnostics").get("log_level", DEFAULT_CONFIG["diagnostics"]["log_level"])
        level = str(value or "").upper()
        return level if level in _LOG_LEVELS else DEFAULT_CONFIG["diagnostics"]["log_level"]
