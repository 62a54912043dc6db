"""AppleVerse - apple cultivar catalogue and dataset importer."""

__version__ = "0.1.0"
