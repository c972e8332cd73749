"""Layering of the user's settings file over the defaults."""

from __future__ import annotations

import copy
from typing import Any, Mapping


def merge_settings(defaults: Mapping[str, Any], user: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``defaults`` with ``user`` values laid over them, section by section.

    Keys the user left blank (``export:`` with nothing under it loads as
    ``None``) keep their default; unknown keys are carried through so a newer
    settings file survives a round trip through an older release.
    """

    merged: dict[str, Any] = copy.deepcopy(dict(defaults))
    for key, value in user.items():
        if value is None and key in merged:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
