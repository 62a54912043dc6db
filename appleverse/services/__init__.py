"""Services for AppleVerse."""
