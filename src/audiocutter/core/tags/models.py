"""Shared data structures for tag handling."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional


@dataclass(slots=True)
class TagSet:
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    year: Optional[str] = None
    genre: Optional[str] = None
    track_number: Optional[str] = None
    comment: Optional[str] = None

    def as_dict(self) -> Dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value}

    def is_empty(self) -> bool:
        return not self.as_dict()
