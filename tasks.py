"""Invoke tasks for AppleVerse development."""

import sys

from invoke import task
from invoke.context import Context


@task
def start(ctx: Context, host: str = "", port: int = 0, reload: bool = False) -> None:
    """Start the AppleVerse API server.

    Args:
        ctx: Invoke context
        host: Host to bind to (empty = configured server.host)
        port: Port to bind to (0 = configured server.port)
        reload: Enable auto-reload for development
    """
    cmd = "uv run appleverse-server"
    if host:
        cmd += f" --host {host}"
    if port:
        cmd += f" --port {port}"
    if reload:
        cmd += " --reload"

    try:
        ctx.run(cmd, pty=True)
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)


@task(name="import")
def import_dataset(
    ctx: Context,
    file: str = "",
    batch_size: int = 0,
    no_images: bool = False,
    dry_run: bool = False,
) -> None:
    """Replace the catalogue with a dataset file.

    Args:
        ctx: Invoke context
        file: Dataset file (searched for in the data directory if omitted)
        batch_size: Records inserted concurrently per batch (0 = configured default)
        no_images: Skip image matching
        dry_run: Read and match only
    """
    cmd = "uv run appleverse-import"
    if file:
        cmd += f" '{file}'"
    if batch_size:
        cmd += f" --batch-size {batch_size}"
    if no_images:
        cmd += " --no-images"
    if dry_run:
        cmd += " --dry-run"
    ctx.run(cmd, pty=True)


@task
def link_images(ctx: Context, dry_run: bool = False) -> None:
    """Link image files to the active catalogue without re-importing."""
    cmd = "uv run appleverse-link-images"
    if dry_run:
        cmd += " --dry-run"
    ctx.run(cmd, pty=True)


@task
def test(ctx: Context, verbose: bool = False, coverage: bool = False) -> None:
    """Run the test suite.

    Args:
        ctx: Invoke context
        verbose: Enable verbose output
        coverage: Run with coverage report
    """
    cmd = "uv run pytest"
    if verbose:
        cmd += " -v"
    if coverage:
        cmd += " --cov=appleverse --cov-report=term-missing"
    ctx.run(cmd, pty=True)


@task
def clean(ctx: Context) -> None:
    """Clean up temporary files."""
    for pattern in ["__pycache__", "*.pyc", "*.pyo", ".pytest_cache"]:
        ctx.run(f"find . -name '{pattern}' -exec rm -rf {{}} + 2>/dev/null || true", warn=True)

    for path in ["build", "dist", "*.egg-info", ".eggs"]:
        ctx.run(f"rm -rf {path} 2>/dev/null || true", warn=True)

    print("Cleanup complete")
