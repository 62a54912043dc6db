"""Tests for the catalogue API endpoints."""

from pathlib import Path

import pytest
import pytest_asyncio

from appleverse.config import reset_settings
from appleverse.models import Apple, DatasetGeneration


async def _seed(records: list[dict]) -> DatasetGeneration:
    """Insert records as a new active generation."""
    generation = await DatasetGeneration.start(source_file="seed.csv", total_rows=len(records))
    for row_index, fields in enumerate(records, start=2):
        await Apple(generation=generation.generation, source_row_index=row_index, **fields).insert()
    generation.imported = len(records)
    await generation.activate()
    return generation


SAMPLE_APPLES = [
    {"accession_code": "MAL0003", "cultivar_name": "Gala", "country": "New Zealand", "images": ["/images/gala.jpg"]},
    {"accession_code": "MAL0001", "cultivar_name": "Antonovka", "country": "Russia", "genus": "Malus",
     "metadata": {"NARATIVEKEYWORD": "winter hardy"}},
    {"accession_code": "MAL0002", "cultivar_name": "Sieversii wild", "country": "Kazakhstan", "genus": "Malus",
     "species": "sieversii"},
    {"accession_code": "PYR0001", "cultivar_name": "Bartlett", "country": "England", "genus": "Pyrus"},
]


@pytest_asyncio.fixture
async def seeded(init_test_db):
    """The sample apples as the active dataset."""
    return await _seed(SAMPLE_APPLES)


@pytest.fixture
def configured_dirs(tmp_path: Path, monkeypatch):
    """Point the data and image directories at temporary folders."""
    data = tmp_path / "data"
    images = tmp_path / "images"
    data.mkdir()
    images.mkdir()
    monkeypatch.setenv("APPLEVERSE_DATA_DIR", str(data))
    monkeypatch.setenv("APPLEVERSE_IMAGES_DIR", str(images))
    reset_settings()
    yield data, images
    reset_settings()


class TestListApples:
    """Tests for GET /api/apples."""

    @pytest.mark.asyncio
    async def test_empty_catalogue(self, client):
        """Test listing with no active dataset."""
        response = await client.get("/api/apples")
        assert response.status_code == 200
        data = response.json()
        assert data["apples"] == []
        assert data["pagination"]["total"] == 0

    @pytest.mark.asyncio
    async def test_default_order_is_source_row(self, client, seeded):
        """Test records come back in spreadsheet row order."""
        response = await client.get("/api/apples")
        assert response.status_code == 200
        data = response.json()
        assert [a["cultivar_name"] for a in data["apples"]] == ["Gala", "Antonovka", "Sieversii wild", "Bartlett"]
        assert data["pagination"] == {"page": 1, "limit": 50, "total": 4, "pages": 1}
        assert data["apples"][0]["primary_image"] == "/images/gala.jpg"
        assert data["apples"][0]["full_name"] == "Malus 'Gala'"

    @pytest.mark.asyncio
    async def test_pagination(self, client, seeded):
        """Test page and limit."""
        response = await client.get("/api/apples", params={"page": 2, "limit": 3})
        data = response.json()
        assert [a["cultivar_name"] for a in data["apples"]] == ["Bartlett"]
        assert data["pagination"]["pages"] == 2

    @pytest.mark.asyncio
    async def test_limit_capped(self, client, seeded):
        """Test limits above the maximum are rejected."""
        response = await client.get("/api/apples", params={"limit": 501})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_search(self, client, seeded):
        """Test case-insensitive search over names, codes and metadata."""
        response = await client.get("/api/apples", params={"search": "gala"})
        assert [a["cultivar_name"] for a in response.json()["apples"]] == ["Gala"]

        response = await client.get("/api/apples", params={"search": "mal000"})
        assert response.json()["pagination"]["total"] == 3

        response = await client.get("/api/apples", params={"search": "HARDY"})
        assert [a["cultivar_name"] for a in response.json()["apples"]] == ["Antonovka"]

    @pytest.mark.asyncio
    async def test_search_escapes_regex(self, client, seeded):
        """Test search text is matched literally."""
        response = await client.get("/api/apples", params={"search": ".*"})
        assert response.json()["pagination"]["total"] == 0

    @pytest.mark.asyncio
    async def test_filters(self, client, seeded):
        """Test country, genus and image filters."""
        response = await client.get("/api/apples", params={"country": "russia"})
        assert [a["cultivar_name"] for a in response.json()["apples"]] == ["Antonovka"]

        response = await client.get("/api/apples", params={"genus": "Pyrus"})
        assert [a["cultivar_name"] for a in response.json()["apples"]] == ["Bartlett"]

        response = await client.get("/api/apples", params={"has_images": "true"})
        assert [a["cultivar_name"] for a in response.json()["apples"]] == ["Gala"]

        response = await client.get("/api/apples", params={"has_images": "false"})
        assert response.json()["pagination"]["total"] == 3

    @pytest.mark.asyncio
    async def test_sort(self, client, seeded):
        """Test sorting by another field and direction."""
        response = await client.get("/api/apples", params={"sort": "cultivar_name", "order": "desc"})
        names = [a["cultivar_name"] for a in response.json()["apples"]]
        assert names == ["Sieversii wild", "Gala", "Bartlett", "Antonovka"]

    @pytest.mark.asyncio
    async def test_only_active_generation_listed(self, client, seeded):
        """Test staged records are invisible until activated."""
        staged = await DatasetGeneration.start(source_file="next.csv")
        await Apple(generation=staged.generation, cultivar_name="Staged", source_row_index=2).insert()

        response = await client.get("/api/apples")
        assert "Staged" not in [a["cultivar_name"] for a in response.json()["apples"]]


class TestGetApple:
    """Tests for GET /api/apples/{id}."""

    @pytest.mark.asyncio
    async def test_get_by_id(self, client, seeded):
        """Test fetching one apple."""
        apple = await Apple.find_one(Apple.accession_code == "MAL0001")
        response = await client.get(f"/api/apples/{apple.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(apple.id)
        assert data["metadata"] == {"NARATIVEKEYWORD": "winter hardy"}

    @pytest.mark.asyncio
    async def test_unknown_and_invalid_ids(self, client, seeded):
        """Test unknown and malformed IDs return 404."""
        response = await client.get("/api/apples/000000000000000000000000")
        assert response.status_code == 404

        response = await client.get("/api/apples/not-an-id")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_superseded_record_not_found(self, client, seeded):
        """Test records outside the active generation return 404."""
        staged = await DatasetGeneration.start(source_file="next.csv")
        apple = Apple(generation=staged.generation, cultivar_name="Staged")
        await apple.insert()

        response = await client.get(f"/api/apples/{apple.id}")
        assert response.status_code == 404


class TestImagesAndPreview:
    """Tests for image lookup and the local data preview."""

    @pytest.mark.asyncio
    async def test_find_image(self, client, configured_dirs, sample_image_bytes):
        """Test images are found by accession in both directories."""
        data, images = configured_dirs
        (images / "MAL0001_front.jpg").write_bytes(sample_image_bytes)
        (data / "mal0001-back.png").write_bytes(sample_image_bytes)
        (images / "MAL0002.jpg").write_bytes(sample_image_bytes)

        response = await client.get("/api/apples/find-image/MAL0001")

        assert response.status_code == 200
        result = response.json()
        assert result["count"] == 2
        assert [i["path"] for i in result["images"]] == ["/images/MAL0001_front.jpg", "/data/mal0001-back.png"]

    @pytest.mark.asyncio
    async def test_find_images_batch(self, client, configured_dirs, sample_image_bytes):
        """Test several accessions are looked up in one request."""
        data, images = configured_dirs
        (images / "MAL0001_front.jpg").write_bytes(sample_image_bytes)
        (data / "mal0002.png").write_bytes(sample_image_bytes)

        response = await client.post(
            "/api/apples/find-images-batch",
            json={"accessions": ["MAL0001", "MAL0002", "MAL0003"]},
        )

        assert response.status_code == 200
        assert response.json() == {
            "results": {
                "MAL0001": ["/images/MAL0001_front.jpg"],
                "MAL0002": ["/data/mal0002.png"],
            },
            "found": 2,
            "total": 3,
        }

    @pytest.mark.asyncio
    async def test_find_images_batch_requires_list(self, client):
        """Test the request body must carry an accessions list."""
        response = await client.post("/api/apples/find-images-batch", json={"accessions": "MAL0001"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_preview_local(self, client, configured_dirs, sample_image_bytes):
        """Test the preview reads the data directory and matches images."""
        data, images = configured_dirs
        (data / "apples.csv").write_text("ACCESSION,CULTIVAR NAME\nMAL0001,Gala\nMAL0002,\n", encoding="utf-8")
        (images / "gala.jpg").write_bytes(sample_image_bytes)

        response = await client.get("/api/apples/preview-local")

        assert response.status_code == 200
        result = response.json()
        assert result["total_rows"] == 2
        assert result["skipped"] == 1
        assert result["records"][0]["cultivar_name"] == "Gala"
        assert result["records"][0]["images"] == ["/images/gala.jpg"]
        assert await Apple.find_all().count() == 0


class TestDatasetStatus:
    """Tests for GET /api/dataset/status."""

    @pytest.mark.asyncio
    async def test_no_dataset(self, client):
        """Test status before any import."""
        response = await client.get("/api/dataset/status")
        assert response.status_code == 200
        assert response.json()["active"] is False

    @pytest.mark.asyncio
    async def test_active_dataset(self, client, seeded):
        """Test status reports the active generation."""
        response = await client.get("/api/dataset/status")
        data = response.json()
        assert data["active"] is True
        assert data["generation"] == seeded.generation
        assert data["record_count"] == 4
        assert data["source_file"] == "seed.csv"


@pytest.mark.asyncio
async def test_health(client):
    """Test the health endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
