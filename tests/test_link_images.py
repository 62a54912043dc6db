"""Tests for relinking images to the active catalogue."""

from pathlib import Path

import pytest

from appleverse.cli.link_images import link_images
from appleverse.config import reset_settings
from appleverse.models import Apple, DatasetGeneration
from appleverse.services.import_service import link_active_images


async def _seed_active() -> DatasetGeneration:
    generation = await DatasetGeneration.start(source_file="seed.csv")
    await Apple(
        generation=generation.generation,
        accession_code="MAL0101",
        cultivar_name="King",
        images=["/images/old-king.jpg"],
        source_row_index=2,
    ).insert()
    await Apple(
        generation=generation.generation,
        accession_code="MAL0102",
        cultivar_name="Fuji",
        source_row_index=3,
    ).insert()
    await Apple(
        generation=generation.generation,
        accession_code="MAL0103",
        cultivar_name="Empire",
        source_row_index=4,
    ).insert()
    generation.imported = 3
    await generation.activate()
    return generation


class TestLinkActiveImages:
    """Tests for link_active_images."""

    @pytest.mark.asyncio
    async def test_links_new_images_and_keeps_existing(
        self, init_test_db, images_dir: Path, sample_image_bytes: bytes
    ):
        """Test images are appended to matching records and saved."""
        generation = await _seed_active()
        (images_dir / "King MAL0101.JPG").write_bytes(sample_image_bytes)
        (images_dir / "fuji.png").write_bytes(sample_image_bytes)

        report = await link_active_images([(images_dir, "/images")])

        assert report.generation == generation.generation
        assert report.records_scanned == 3
        assert report.images_found == 2
        assert report.images_matched == 2
        assert report.records_updated == 2
        assert report.records_with_images == 2

        king = await Apple.find_one(Apple.accession_code == "MAL0101")
        fuji = await Apple.find_one(Apple.accession_code == "MAL0102")
        empire = await Apple.find_one(Apple.accession_code == "MAL0103")
        assert king.images == ["/images/old-king.jpg", "/images/King MAL0101.JPG"]
        assert fuji.images == ["/images/fuji.png"]
        assert empire.images == []

        active = await DatasetGeneration.get_active()
        assert active.records_with_images == 2

    @pytest.mark.asyncio
    async def test_second_run_changes_nothing(
        self, init_test_db, images_dir: Path, sample_image_bytes: bytes
    ):
        """Test relinking is idempotent."""
        await _seed_active()
        (images_dir / "fuji.png").write_bytes(sample_image_bytes)

        await link_active_images([(images_dir, "/images")])
        report = await link_active_images([(images_dir, "/images")])

        assert report.records_updated == 0
        fuji = await Apple.find_one(Apple.accession_code == "MAL0102")
        assert fuji.images == ["/images/fuji.png"]

    @pytest.mark.asyncio
    async def test_dry_run_saves_nothing(
        self, init_test_db, images_dir: Path, sample_image_bytes: bytes
    ):
        """Test a dry run reports changes without writing them."""
        await _seed_active()
        (images_dir / "fuji.png").write_bytes(sample_image_bytes)

        report = await link_active_images([(images_dir, "/images")], dry_run=True)

        assert report.records_updated == 1
        fuji = await Apple.find_one(Apple.accession_code == "MAL0102")
        assert fuji.images == []

    @pytest.mark.asyncio
    async def test_only_active_generation(
        self, init_test_db, images_dir: Path, sample_image_bytes: bytes
    ):
        """Test staged records are left alone."""
        await _seed_active()
        staged = await DatasetGeneration.start(source_file="next.csv")
        await Apple(generation=staged.generation, cultivar_name="Fuji", source_row_index=2).insert()
        (images_dir / "fuji.png").write_bytes(sample_image_bytes)

        report = await link_active_images([(images_dir, "/images")])

        assert report.records_scanned == 3
        staged_fuji = await Apple.find_one(Apple.generation == staged.generation)
        assert staged_fuji.images == []

    @pytest.mark.asyncio
    async def test_no_active_dataset(self, init_test_db, images_dir: Path):
        """Test nothing happens without an active dataset."""
        report = await link_active_images([(images_dir, "/images")])

        assert report.generation is None
        assert report.records_updated == 0


class TestLinkImagesCommand:
    """Tests for the link_images coroutine."""

    @pytest.fixture
    def configured_images(self, tmp_path: Path, monkeypatch):
        images = tmp_path / "images"
        images.mkdir()
        monkeypatch.setenv("APPLEVERSE_IMAGES_DIR", str(images))
        monkeypatch.setenv("APPLEVERSE_DATA_DIR", str(tmp_path / "data"))
        reset_settings()
        yield images
        reset_settings()

    @pytest.mark.asyncio
    async def test_prints_summary(self, init_test_db, configured_images: Path, sample_image_bytes: bytes, capsys):
        """Test a relink returns 0 and prints the summary."""
        await _seed_active()
        (configured_images / "empire-1.jpg").write_bytes(sample_image_bytes)

        code = await link_images(skip_db_init=True)

        assert code == 0
        out = capsys.readouterr().out
        assert "Records updated:  1" in out
        empire = await Apple.find_one(Apple.accession_code == "MAL0103")
        assert empire.images == ["/images/empire-1.jpg"]

    @pytest.mark.asyncio
    async def test_no_active_dataset(self, init_test_db, configured_images: Path, capsys):
        """Test the command fails without an active dataset."""
        code = await link_images(skip_db_init=True)

        assert code == 1
        assert "No active dataset" in capsys.readouterr().out
