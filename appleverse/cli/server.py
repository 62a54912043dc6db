"""AppleVerse API server launcher.

Host, port and debug mode come from config.toml / APPLEVERSE_* variables
unless given on the command line.

Usage:
    appleverse-server [--host HOST] [--port PORT] [--reload]
"""

import argparse
import subprocess
import sys

from appleverse.config import settings

APP_PATH = "appleverse.main:app"


def build_command(host: str, port: int, reload: bool = False, debug: bool = False) -> list[str]:
    """Build the uvicorn command line for the API server."""
    cmd = [
        sys.executable, "-m", "uvicorn",
        APP_PATH,
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        cmd.append("--reload")
    if debug:
        cmd.extend(["--log-level", "debug"])
    return cmd


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run the AppleVerse API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind to (default: {settings.host})",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=settings.port,
        help=f"Port to bind to (default: {settings.port})",
    )
    parser.add_argument(
        "--reload", "-r",
        action="store_true",
        default=settings.debug,
        help="Enable auto-reload (default on when debug is set)",
    )

    args = parser.parse_args(argv)

    cmd = build_command(args.host, args.port, reload=args.reload, debug=settings.debug)
    print(f"Starting AppleVerse server on http://{args.host}:{args.port}")
    print("Press Ctrl+C to stop the server")
    try:
        result = subprocess.run(cmd)
    except KeyboardInterrupt:
        print("\nServer stopped")
        return 0
    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
