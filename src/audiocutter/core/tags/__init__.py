"""Reading, merging and writing of audio tags."""

from __future__ import annotations

from audiocutter.core.tags.constants import OVERRIDABLE_FIELDS
from audiocutter.core.tags.extract import read_tags
from audiocutter.core.tags.merge import merge_tags
from audiocutter.core.tags.models import TagSet
from audiocutter.core.tags.save import write_tags
from audiocutter.core.tags.support import is_droppable_audio_file

__all__ = [
    "OVERRIDABLE_FIELDS",
    "TagSet",
    "is_droppable_audio_file",
    "merge_tags",
    "read_tags",
    "write_tags",
]
