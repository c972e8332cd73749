"""Album/year lookup against the MusicBrainz web service (no API key)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

import requests


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://musicbrainz.org/ws/2"
DEFAULT_USER_AGENT = "AudioCutter/1.0.0 (https://github.com/genau7/audio-cutter)"

_YEAR_RE = re.compile(r"^(\d{4})")


class MetadataLookupError(RuntimeError):
    pass


@dataclass(frozen=True)
class LookupResult:
    success: bool
    album: str = ""
    year: str = ""
    error: Optional[str] = None


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _year_from(date: Any) -> str:
    match = _YEAR_RE.match(str(date or ""))
    return match.group(1) if match else ""


def _get_json(url: str, *, params: dict[str, str] | None, user_agent: str, timeout: float) -> Any:
    try:
        resp = requests.get(url, params=params, headers={"User-Agent": user_agent}, timeout=timeout)
    except requests.RequestException as exc:
        raise MetadataLookupError(str(exc)) from exc
    if resp.status_code >= 400:
        raise MetadataLookupError(f"HTTP {resp.status_code} {resp.reason}")
    try:
        return resp.json()
    except ValueError as exc:
        raise MetadataLookupError("Failed to parse search results") from exc


def search_recording(
    artist: str,
    title: str,
    *,
    base_url: str = DEFAULT_BASE_URL,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = 10.0,
) -> LookupResult:
    """Find album and release year for ``artist`` - ``title``.

    The first recording's first release wins. When that release carries no
    date a second request fetches the release itself; if that one fails the
    album found so far is still returned.
    """

    artist = (artist or "").strip()
    title = (title or "").strip()
    if not artist or not title:
        return LookupResult(success=False, error="Artist and title are required")

    base = base_url.rstrip("/")
    logger.info("Searching for track info: %s - %s", artist, title)
    try:
        data = _get_json(
            f"{base}/recording/",
            params={"query": f"artist:{_quote(artist)} AND recording:{_quote(title)}", "fmt": "json"},
            user_agent=user_agent,
            timeout=timeout,
        )
    except MetadataLookupError as exc:
        logger.warning("MusicBrainz search failed: %s", exc)
        return LookupResult(success=False, error=str(exc))

    recordings = data.get("recordings") if isinstance(data, dict) else None
    if not recordings:
        return LookupResult(success=False, error="No matching tracks found")

    releases = recordings[0].get("releases") or []
    if not releases:
        return LookupResult(success=True)

    release = releases[0]
    album = str(release.get("title") or "")
    year = _year_from(release.get("date"))
    release_id = release.get("id")
    if release_id and not year:
        try:
            details = _get_json(
                f"{base}/release/{release_id}",
                params={"fmt": "json"},
                user_agent=user_agent,
                timeout=timeout,
            )
        except MetadataLookupError as exc:
            logger.debug("Release lookup for %s failed: %s", release_id, exc)
        else:
            if isinstance(details, dict):
                year = _year_from(details.get("date"))
    return LookupResult(success=True, album=album, year=year)
