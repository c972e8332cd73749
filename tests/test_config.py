from pathlib import Path

import pytest
import yaml

from audiocutter.audio.render import FadeComposition
from audiocutter.core.config import DEFAULT_CONFIG, SettingsManager


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch) -> None:
    monkeypatch.delenv("AUDIOCUTTER_CONFIG_PATH", raising=False)
    monkeypatch.delenv("AUDIOCUTTER_CONFIG_DIR", raising=False)


def test_defaults_when_file_missing(tmp_path) -> None:
    settings = SettingsManager(config_path=tmp_path / "settings.yaml")

    assert settings.get_default_bitrate() == 256
    assert settings.get_fade_composition() is FadeComposition.OVERWRITE
    assert settings.get_filename_suffix() == " - edited"
    assert settings.get_default_fade_in() == 0.0
    assert settings.get_lookup_enabled() is True
    assert settings.get_lookup_base_url() == "https://musicbrainz.org/ws/2"
    assert settings.get_diagnostics_log_level() == "WARNING"
    assert settings.get_ffmpeg_path() is None
    assert settings.get_raw() == DEFAULT_CONFIG


def test_user_values_are_merged_over_defaults(tmp_path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "export": {"default_bitrate_kbps": 192, "fade_composition": "multiply"},
                "editor": {"fade_in_seconds": 1.5},
                "diagnostics": {"log_level": "debug"},
            }
        ),
        encoding="utf-8",
    )

    settings = SettingsManager(config_path=path)

    assert settings.get_default_bitrate() == 192
    assert settings.get_fade_composition() is FadeComposition.MULTIPLY
    assert settings.get_default_fade_in() == 1.5
    assert settings.get_default_fade_out() == 0.0
    assert settings.get_filename_suffix() == " - edited"
    assert settings.get_diagnostics_log_level() == "DEBUG"


def test_malformed_values_fall_back(tmp_path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "export": {"default_bitrate_kbps": 100, "fade_composition": 3},
                "editor": {"fade_in_seconds": "soon", "fade_out_seconds": -2},
                "lookup": {"timeout_seconds": "x"},
                "diagnostics": {"log_level": "LOUD"},
            }
        ),
        encoding="utf-8",
    )

    settings = SettingsManager(config_path=path)

    assert settings.get_default_bitrate() == 256
    assert settings.get_fade_composition() is FadeComposition.OVERWRITE
    assert settings.get_default_fade_in() == 0.0
    assert settings.get_default_fade_out() == 0.0
    assert settings.get_lookup_timeout() == 10.0
    assert settings.get_diagnostics_log_level() == "WARNING"


def test_non_mapping_file_is_ignored(tmp_path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert SettingsManager(config_path=path).get_default_bitrate() == 256


def test_save_and_reload(tmp_path) -> None:
    path = tmp_path / "nested" / "settings.yaml"
    settings = SettingsManager(config_path=path)
    settings.set_default_fades(0.5, 2.0)
    settings.set_last_directory(tmp_path)
    settings.save()

    reloaded = SettingsManager(config_path=path)
    assert reloaded.get_default_fade_in() == 0.5
    assert reloaded.get_default_fade_out() == 2.0
    assert reloaded.get_last_directory() == tmp_path


def test_config_path_env_override(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("AUDIOCUTTER_CONFIG_DIR", str(tmp_path))
    settings = SettingsManager(config_path=Path("ignored.yaml"))
    assert settings.config_path == tmp_path / "settings.yaml"


def test_blank_sections_keep_defaults(tmp_path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("export:\nlookup:\n  timeout_seconds:\n  enabled: false\n", encoding="utf-8")

    settings = SettingsManager(config_path=path)

    assert settings.get_raw()["export"] == DEFAULT_CONFIG["export"]
    assert settings.get_lookup_timeout() == 10.0
    assert settings.get_lookup_enabled() is False


def test_unknown_keys_survive_save(tmp_path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("export:\n  normalize: true\nplugins:\n  - one\n", encoding="utf-8")

    settings = SettingsManager(config_path=path)
    settings.save()

    saved = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert saved["export"]["normalize"] is True
    assert saved["export"]["default_bitrate_kbps"] == 256
    assert saved["plugins"] == ["one"]
