"""Pydantic models for AppleVerse configuration.

These models define the structure of config.toml.
"""

from pathlib import Path

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """API server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    # CORS configuration - empty list means same-origin only
    cors_origins: list[str] = []


class DatabaseConfig(BaseModel):
    """MongoDB database configuration."""

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "appleverse"
    # Connection pool settings
    min_pool_size: int = 1
    max_pool_size: int = 50


class StorageConfig(BaseModel):
    """Dataset and image directory configuration."""

    data_dir: Path = Field(default_factory=lambda: Path("data"))
    images_dir: Path = Field(default_factory=lambda: Path("images"))

    @property
    def image_sources(self) -> list[tuple[Path, str]]:
        """Image directories paired with the URL prefix they are served under."""
        return [(self.images_dir, "/images"), (self.data_dir, "/data")]


class ImporterConfig(BaseModel):
    """Bulk import configuration."""

    batch_size: int = Field(default=50, ge=1)
    # Workbook sheets read first, in this order; remaining sheets follow in file order
    priority_sheets: list[str] = Field(
        default_factory=lambda: ["Accession", "Pedigree", "Descriptors", "Accession Source"]
    )
    # Exact file names tried before the "*final*dataset*" search
    dataset_file_names: list[str] = Field(
        default_factory=lambda: [
            "FINAL_DATASET_APPLEVERSE.xlsx",
            "FINAL_DATASET_APPLEVERSE.xls",
            "FINAL_DATASET_APPLEVERSE.csv",
            "final dataset.xlsx",
            "final dataset.xls",
            "final dataset.csv",
            "final_dataset.xlsx",
            "final_dataset.xls",
            "final_dataset.csv",
        ]
    )


class AppleverseConfig(BaseModel):
    """Main AppleVerse configuration loaded from config.toml."""

    app_name: str = "AppleVerse"
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    importer: ImporterConfig = Field(default_factory=ImporterConfig)
