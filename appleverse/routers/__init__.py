"""API routers for AppleVerse."""

from appleverse.routers import apples, dataset, export

__all__ = ["apples", "dataset", "export"]
