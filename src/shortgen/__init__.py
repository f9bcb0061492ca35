"""Short Generator - assemble vertical image slideshows with burned-in subtitles."""

__version__ = "0.1.0"
