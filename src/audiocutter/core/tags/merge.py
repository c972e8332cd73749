"""Combining stored tags with values typed into the editor."""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping, Optional

from audiocutter.core.tags.constants import OVERRIDABLE_FIELDS
from audiocutter.core.tags.models import TagSet


def merge_tags(original: Optional[TagSet], overrides: Mapping[str, Optional[str]]) -> TagSet:
    """Overlay non-empty override values on ``original``.

    Only the overridable fields are considered; everything else in
    ``original`` passes through. Values are not validated.
    """

    base = original if original is not None else TagSet()
    changes = {}
    for name in OVERRIDABLE_FIELDS:
        value = overrides.get(name)
        if isinstance(value, str) and value.strip():
            changes[name] = value
    return replace(base, **changes)
