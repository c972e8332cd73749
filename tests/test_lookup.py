import pytest
import requests

from audiocutter.core import lookup as lookup_module
from audiocutter.core.lookup import search_recording


class _Response:
    def __init__(self, payload=None, status_code: int = 200, reason: str = "OK") -> None:
        self._payload = payload
        self.status_code = status_code
        self.reason = reason

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def fake_get(monkeypatch):
    calls = []
    responses = []

    def _get(url, params=None, headers=None, timeout=None):
        calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        result = responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(lookup_module.requests, "get", _get)
    return calls, responses


def test_first_release_supplies_album_and_year(fake_get) -> None:
    calls, responses = fake_get
    responses.append(
        _Response(
            {
                "recordings": [
                    {"releases": [{"id": "r1", "title": "Abbey Road", "date": "1969-09-26"}, {"title": "Other"}]}
                ]
            }
        )
    )

    result = search_recording("The Beatles", "Something", user_agent="test/1.0", timeout=3.0)

    assert result.success
    assert (result.album, result.year) == ("Abbey Road", "1969")
    assert len(calls) == 1
    assert calls[0]["url"] == "https://musicbrainz.org/ws/2/recording/"
    assert calls[0]["params"]["query"] == 'artist:"The Beatles" AND recording:"Something"'
    assert calls[0]["params"]["fmt"] == "json"
    assert calls[0]["headers"] == {"User-Agent": "test/1.0"}
    assert calls[0]["timeout"] == 3.0


def test_missing_date_triggers_release_lookup(fake_get) -> None:
    calls, responses = fake_get
    responses.append(_Response({"recordings": [{"releases": [{"id": "abc", "title": "Album"}]}]}))
    responses.append(_Response({"date": "2004"}))

    result = search_recording("A", "B", base_url="http://mb.local/ws/2/")

    assert (result.album, result.year) == ("Album", "2004")
    assert calls[1]["url"] == "http://mb.local/ws/2/release/abc"


def test_release_lookup_failure_keeps_album(fake_get) -> None:
    _calls, responses = fake_get
    responses.append(_Response({"recordings": [{"releases": [{"id": "abc", "title": "Album"}]}]}))
    responses.append(_Response(status_code=503, reason="Service Unavailable"))

    result = search_recording("A", "B")

    assert result.success
    assert (result.album, result.year) == ("Album", "")


def test_no_recordings(fake_get) -> None:
    _calls, responses = fake_get
    responses.append(_Response({"recordings": []}))

    result = search_recording("A", "B")

    assert not result.success
    assert result.error == "No matching tracks found"


def test_recording_without_releases_is_empty_success(fake_get) -> None:
    _calls, responses = fake_get
    responses.append(_Response({"recordings": [{"title": "B"}]}))

    result = search_recording("A", "B")

    assert result.success
    assert (result.album, result.year) == ("", "")


def test_transport_error(fake_get) -> None:
    _calls, responses = fake_get
    responses.append(requests.ConnectionError("offline"))

    result = search_recording("A", "B")

    assert not result.success
    assert "offline" in result.error


def test_http_error_and_bad_json(fake_get) -> None:
    _calls, responses = fake_get
    responses.append(_Response(status_code=500, reason="Server Error"))
    responses.append(_Response(ValueError("not json")))

    first = search_recording("A", "B")
    second = search_recording("A", "B")

    assert first.error == "HTTP 500 Server Error"
    assert second.error == "Failed to parse search results"


def test_quotes_are_escaped(fake_get) -> None:
    calls, responses = fake_get
    responses.append(_Response({"recordings": []}))

    search_recording('Say "Hi"', "Song")

    assert calls[0]["params"]["query"] == 'artist:"Say \\"Hi\\"" AND recording:"Song"'


@pytest.mark.parametrize("artist, title", [("", "B"), ("A", "  "), (None, "B")])
def test_artist_and_title_required(fake_get, artist, title) -> None:
    calls, _responses = fake_get

    result = search_recording(artist, title)

    assert not result.success
    assert calls == []
