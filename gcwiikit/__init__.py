"""GameCube and Wii disc image helpers: junk data, sector crypto, streams, DAT lookup and layout."""

__version__ = "2.0.0a3"