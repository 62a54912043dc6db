"""Image relink script for AppleVerse.

Attaches image files to the records of the active dataset without
re-importing it. Images already linked are kept.

Usage:
    appleverse-link-images
    appleverse-link-images --dry-run        # report changes without saving
"""

import argparse
import asyncio
import logging
import sys

from appleverse.config import settings
from appleverse.database import close_db, init_db
from appleverse.services.import_service import LinkReport, link_active_images

logger = logging.getLogger(__name__)


def print_summary(report: LinkReport, dry_run: bool = False) -> None:
    """Print the result of a relink run."""
    print()
    print("Image Link Summary" + (" [DRY RUN]" if dry_run else ""))
    print("=" * 50)
    print(f"Generation:       {report.generation}")
    print(f"Records scanned:  {report.records_scanned}")
    print(f"Images found:     {report.images_found}")
    print(f"Images matched:   {report.images_matched}")
    print(f"Records updated:  {report.records_updated}")
    print(f"With images:      {report.records_with_images}")


async def link_images(dry_run: bool = False, skip_db_init: bool = False) -> int:
    """Relink images for the active dataset.

    Args:
        dry_run: Count changes without saving them.
        skip_db_init: Use an already initialized database (for tests).

    Returns:
        Exit code (0 for success, 1 when no dataset is active).
    """
    print("\nAppleVerse Image Linking")
    print("=" * 50)
    for directory, prefix in settings.image_sources:
        print(f"Scanning:   {directory} -> {prefix}")

    if not skip_db_init:
        await init_db()

    try:
        report = await link_active_images(settings.image_sources, dry_run=dry_run)
    finally:
        if not skip_db_init:
            await close_db()

    if report.generation is None:
        print("\nError: No active dataset. Run appleverse-import first.")
        return 1

    print_summary(report, dry_run=dry_run)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the image relink script."""
    parser = argparse.ArgumentParser(
        description="Link image files to the active AppleVerse catalogue",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report changes without saving them",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        return asyncio.run(link_images(dry_run=args.dry_run))
    except KeyboardInterrupt:
        print("\nLinking interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
