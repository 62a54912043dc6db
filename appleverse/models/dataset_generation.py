"""DatasetGeneration document model for tracking dataset replacements."""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from beanie import Document, Indexed
from pydantic import Field

from appleverse.models.apple import Apple

logger = logging.getLogger(__name__)


class GenerationStatus(str, Enum):
    """Lifecycle of a dataset generation."""

    STAGING = "staging"
    ACTIVE = "active"
    SUPERSEDED = "superseded"
    DISCARDED = "discarded"


class DatasetGeneration(Document):
    """One full dataset import.

    Records are inserted under a staging generation and become visible when
    the generation is activated, which supersedes the previous one and
    deletes its records.
    """

    generation: Indexed(int, unique=True)
    status: GenerationStatus = GenerationStatus.STAGING
    source_file: str = ""

    # Import results
    total_rows: int = 0
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    records_with_images: int = 0
    elapsed_seconds: float = 0.0

    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    activated_at: Optional[datetime] = None

    class Settings:
        name = "dataset_generations"

    @classmethod
    async def get_active(cls) -> Optional["DatasetGeneration"]:
        """Return the currently active generation, if any."""
        return await cls.find(
            cls.status == GenerationStatus.ACTIVE,
        ).sort(-cls.generation).first_or_none()

    @classmethod
    async def next_generation_number(cls) -> int:
        latest = await cls.find_all().sort(-cls.generation).first_or_none()
        return latest.generation + 1 if latest else 1

    @classmethod
    async def start(cls, source_file: str = "", total_rows: int = 0) -> "DatasetGeneration":
        """Create a new staging generation."""
        staged = cls(
            generation=await cls.next_generation_number(),
            source_file=source_file,
            total_rows=total_rows,
        )
        await staged.insert()
        return staged

    async def activate(self) -> int:
        """Make this generation the active one and delete older records.

        The status flip is a single document update, so readers switch from
        the old records to the new ones without an empty window.

        Returns:
            Number of records deleted from older generations.
        """
        self.status = GenerationStatus.ACTIVE
        self.activated_at = datetime.now(timezone.utc)
        await self.save()

        previous = await DatasetGeneration.find(
            DatasetGeneration.status == GenerationStatus.ACTIVE,
            DatasetGeneration.generation != self.generation,
        ).to_list()
        for old in previous:
            old.status = GenerationStatus.SUPERSEDED
            await old.save()

        result = await Apple.find(Apple.generation < self.generation).delete()
        deleted = result.deleted_count if result is not None else 0
        logger.info("Activated generation %d, removed %d old records", self.generation, deleted)
        return deleted

    async def discard(self) -> None:
        """Delete this generation's records and mark it discarded."""
        await Apple.find(Apple.generation == self.generation).delete()
        self.status = GenerationStatus.DISCARDED
        await self.save()
        logger.info("Discarded generation %d", self.generation)

    def __repr__(self) -> str:
        return f"<DatasetGeneration(generation={self.generation}, status={self.status.value})>"
