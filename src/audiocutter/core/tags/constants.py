from __future__ import annotations

# Same set the Open dialog offers.
DROP_EXTENSIONS = {".mp3", ".m4a", ".wav", ".flac", ".ogg"}

# Fields the editor lets the user override before export.
OVERRIDABLE_FIELDS = ("title", "artist", "album", "year")

ID3_TEXT_FRAMES = {
    "title": "TIT2",
    "artist": "TPE1",
    "album": "TALB",
    "year": "TDRC",
    "genre": "TCON",
    "track_number": "TRCK",
}

EASY_KEYS = {
    "title": "title",
    "artist": "artist",
    "album": "album",
    "year": "date",
    "genre": "genre",
    "track_number": "tracknumber",
}
