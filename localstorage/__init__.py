"""Local storage helpers: paths, signing, partitions, mergerfs, a hooked SQLite store and disk views."""

__version__ = "0.1.0"