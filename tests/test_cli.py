"""Tests for the command-line tools."""

from pathlib import Path
from subprocess import CompletedProcess

import pytest

from appleverse.cli import server
from appleverse.cli.import_dataset import import_dataset, main
from appleverse.cli.server import build_command
from appleverse.config import reset_settings
from appleverse.models import Apple


def _write_dataset(path: Path, rows: list[tuple[str, str]]) -> Path:
    lines = ["ACCESSION,CULTIVAR NAME"] + [f"{code},{name}" for code, name in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class TestImportDataset:
    """Tests for the import_dataset coroutine."""

    @pytest.mark.asyncio
    async def test_import_prints_summary(self, init_test_db, data_dir: Path, capsys):
        """Test a successful import returns 0 and prints the summary."""
        path = _write_dataset(data_dir / "apples.csv", [("MAL0001", "Gala"), ("MAL0002", ""), ("MAL0003", "Fuji")])

        code = await import_dataset(path, data_dir=data_dir, use_images=False, skip_db_init=True)

        assert code == 0
        assert await Apple.find_all().count() == 2
        captured = capsys.readouterr()
        assert "Imported:      2" in captured.out
        assert "Skipped:       1" in captured.out
        assert "Total in database: 2" in captured.out
        assert "Sample record:" in captured.out
        assert "Gala" in captured.out

    @pytest.mark.asyncio
    async def test_finds_dataset_in_data_dir(self, init_test_db, data_dir: Path, capsys):
        """Test the dataset file is located when no path is given."""
        _write_dataset(data_dir / "Final Dataset 2024.csv", [("MAL0001", "Gala")])

        code = await import_dataset(data_dir=data_dir, use_images=False, skip_db_init=True)

        assert code == 0
        assert "Final Dataset 2024.csv" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_no_dataset_found(self, init_test_db, data_dir: Path, capsys):
        """Test a data directory without a dataset returns 1 and lists its files."""
        (data_dir / "readme.txt").write_text("x")

        code = await import_dataset(data_dir=data_dir, skip_db_init=True)

        assert code == 1
        out = capsys.readouterr().out
        assert "Error: No dataset file found" in out
        assert "readme.txt" in out

    @pytest.mark.asyncio
    async def test_no_usable_rows(self, init_test_db, data_dir: Path, capsys):
        """Test a dataset without cultivar names returns 1."""
        path = _write_dataset(data_dir / "apples.csv", [("MAL0001", "")])

        code = await import_dataset(path, data_dir=data_dir, use_images=False, skip_db_init=True)

        assert code == 1
        assert "Error:" in capsys.readouterr().out
        assert await Apple.find_all().count() == 0

    @pytest.mark.asyncio
    async def test_unsupported_file(self, init_test_db, data_dir: Path, capsys):
        """Test an unsupported file type returns 1."""
        path = data_dir / "apples.docx"
        path.write_bytes(b"doc")

        code = await import_dataset(path, data_dir=data_dir, skip_db_init=True)

        assert code == 1
        assert "Unsupported file type" in capsys.readouterr().out


class TestMain:
    """Tests for argument handling in main()."""

    def test_missing_file(self, tmp_path: Path, capsys):
        """Test a missing dataset path exits with 1."""
        code = main([str(tmp_path / "missing.xlsx"), "--data-dir", str(tmp_path)])

        assert code == 1
        assert "Dataset file not found" in capsys.readouterr().out

    def test_dry_run(self, data_dir: Path, capsys):
        """Test a dry run reads the file without touching the database."""
        path = _write_dataset(data_dir / "apples.csv", [("MAL0001", "Gala"), ("MAL0002", "")])

        code = main([str(path), "--data-dir", str(data_dir), "--no-images", "--dry-run"])

        assert code == 0
        out = capsys.readouterr().out
        assert "[DRY RUN]" in out
        assert "1 records (1 skipped)" in out

    def test_invalid_batch_size(self, tmp_path: Path):
        """Test a batch size below one is rejected by the parser."""
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "x.csv"), "--batch-size", "0"])
        assert exc_info.value.code == 2


class TestServer:
    """Tests for the server launcher."""

    def test_build_command(self):
        """Test the uvicorn command line."""
        cmd = build_command("0.0.0.0", 9000, reload=True, debug=True)

        assert cmd[1:4] == ["-m", "uvicorn", "appleverse.main:app"]
        assert cmd[4:8] == ["--host", "0.0.0.0", "--port", "9000"]
        assert "--reload" in cmd
        assert cmd[-2:] == ["--log-level", "debug"]

    def test_defaults_from_settings(self, monkeypatch):
        """Test host and port come from the configuration."""
        monkeypatch.setenv("APPLEVERSE_SERVER_HOST", "0.0.0.0")
        monkeypatch.setenv("APPLEVERSE_SERVER_PORT", "8123")
        monkeypatch.delenv("APPLEVERSE_DEBUG", raising=False)
        monkeypatch.delenv("APPLEVERSE_SERVER_DEBUG", raising=False)
        reset_settings()
        calls = []
        monkeypatch.setattr(server.subprocess, "run", lambda cmd: calls.append(cmd) or CompletedProcess(cmd, 0))
        try:
            code = server.main([])
        finally:
            reset_settings()

        assert code == 0
        assert calls[0][4:8] == ["--host", "0.0.0.0", "--port", "8123"]
        assert "--reload" not in calls[0]

    def test_arguments_override_settings(self, monkeypatch):
        """Test command-line options win over the configuration."""
        calls = []
        monkeypatch.setattr(server.subprocess, "run", lambda cmd: calls.append(cmd) or CompletedProcess(cmd, 3))

        code = server.main(["--host", "10.0.0.1", "--port", "9001", "--reload"])

        assert code == 3
        assert calls[0][4:8] == ["--host", "10.0.0.1", "--port", "9001"]
        assert "--reload" in calls[0]
