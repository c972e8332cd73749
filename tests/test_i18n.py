import struct

import pytest

from audiocutter.core import i18n


def _write_mo(path, messages: dict[str, str]) -> None:
    """Write a minimal little-endian GNU .mo catalogue."""

    entries = sorted({"": "Content-Type: text/plain; charset=UTF-8\n", **messages}.items())
    count = len(entries)
    strings_start = 28 + count * 16
    blob = b""
    originals = []
    translations = []
    for table, index in ((originals, 0), (translations, 1)):
        for entry in entries:
            encoded = entry[index].encode("utf-8")
            table.append((len(encoded), strings_start + len(blob)))
            blob += encoded + b"\0"
    header = struct.pack("<7I", 0x950412DE, 0, count, 28, 28 + count * 8, 0, 0)
    tables = b"".join(struct.pack("<2I", *item) for item in originals + translations)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(header + tables + blob)


@pytest.fixture(autouse=True)
def _english_afterwards():
    yield
    i18n.set_language(None)


def test_catalogue_is_loaded_from_locale_dir(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("AUDIOCUTTER_LOCALE_DIR", str(tmp_path))
    _write_mo(tmp_path / "pl" / "LC_MESSAGES" / "audiocutter.mo", {"Saving file...": "Zapisywanie pliku..."})

    assert i18n.set_language("pl")

    assert i18n.gettext("Saving file...") == "Zapisywanie pliku..."
    assert i18n.gettext("Encoding WAV...") == "Encoding WAV..."


def test_missing_catalogue_keeps_english(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("AUDIOCUTTER_LOCALE_DIR", str(tmp_path))

    assert not i18n.set_language("de")
    assert i18n.gettext("Saving file...") == "Saving file..."


def test_source_language_needs_no_catalogue(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("AUDIOCUTTER_LOCALE_DIR", str(tmp_path))
    _write_mo(tmp_path / "pl" / "LC_MESSAGES" / "audiocutter.mo", {"Saving file...": "Zapisywanie pliku..."})
    i18n.set_language("pl")

    assert not i18n.set_language("en")
    assert i18n.gettext("Saving file...") == "Saving file..."
