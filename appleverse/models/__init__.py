"""MongoDB document models for AppleVerse."""

from appleverse.models.apple import Apple
from appleverse.models.dataset_generation import DatasetGeneration, GenerationStatus

__all__ = [
    "Apple",
    "DatasetGeneration",
    "GenerationStatus",
]
