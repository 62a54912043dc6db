"""Command-line tools for AppleVerse."""
