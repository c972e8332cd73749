"""Translation of the status and label strings shown in the editor.

Messages are written in English; ``set_language`` swaps in a gettext
catalogue (``<locale dir>/<lang>/LC_MESSAGES/audiocutter.mo``) when one is
installed, and keeps the English text otherwise.
"""

from __future__ import annotations

import gettext as _gettext
import logging
from pathlib import Path
from typing import Optional

from audiocutter.core.env import resolve_locale_dir


logger = logging.getLogger(__name__)

DOMAIN = "audiocutter"
SOURCE_LANGUAGE = "en"

_translation: _gettext.NullTranslations = _gettext.NullTranslations()


def locale_dir() -> Path:
    return resolve_locale_dir(Path(__file__).resolve().parent.parent / "locale")


def set_language(language: Optional[str]) -> bool:
    """Activate ``language``; return whether a catalogue was found for it."""

    global _translation
    code = (language or "").strip()
    if not code or code == SOURCE_LANGUAGE:
        _translation = _gettext.NullTranslations()
        return False
    catalogue = _gettext.translation(DOMAIN, localedir=str(locale_dir()), languages=[code], fallback=True)
    found = isinstance(catalogue, _gettext.GNUTranslations)
    if not found:
        logger.info("No %s catalogue for %r in %s; using English", DOMAIN, code, locale_dir())
    _translation = catalogue
    return found


def gettext(message: str) -> str:
    return _translation.gettext(message)
