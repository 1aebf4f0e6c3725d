"""treehash: incremental content-hash index of a directory tree."""

__version__ = "0.3.0"
