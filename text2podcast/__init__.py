"""text2podcast - convert long-form text into a tagged podcast MP3."""

__version__ = "0.1.0"
