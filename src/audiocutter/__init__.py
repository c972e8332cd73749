"""AudioCutter: trim, fade and re-encode MP3/M4A files."""

__version__ = "1.0.0"
