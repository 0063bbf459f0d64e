"""
Generate Z-Wave firmware update manifests from vendor changelog spreadsheets.

Every ``*.csv`` revision history below the firmware directory produces one
``<out>/<brand>/<model>.json`` manifest listing the released firmware files,
their download URLs and sha256 integrity of the firmware payload.

Usage (from repository root):
    firmware-manifests
    firmware-manifests --summary --dry-run
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .config import (
    DEFAULT_BRANCH,
    DEFAULT_FIRMWARE_DIR,
    DEFAULT_GIT_TIMEOUT,
    DEFAULT_OUT_DIR,
    DEFAULT_REMOTE,
    Settings,
)
from .logutil import configure_logging
from .pipeline import run


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate firmware update manifests from changelog spreadsheets."
    )
    parser.add_argument(
        "--repo-root",
        default=".",
        help="Repository root used for relative paths (default: current directory)",
    )
    parser.add_argument(
        "--firmware-dir",
        default=DEFAULT_FIRMWARE_DIR,
        help=f"Directory holding changelogs and firmware files (default: {DEFAULT_FIRMWARE_DIR})",
    )
    parser.add_argument(
        "--out-dir",
        default=DEFAULT_OUT_DIR,
        help=f"Directory that is replaced with the generated manifests (default: {DEFAULT_OUT_DIR})",
    )
    parser.add_argument(
        "--repository",
        help="GitHub repository serving the firmware files. Defaults to GITHUB_REPOSITORY.",
    )
    parser.add_argument(
        "--remote",
        default=DEFAULT_REMOTE,
        help=f"Git remote to fetch the published revision from (default: {DEFAULT_REMOTE})",
    )
    parser.add_argument(
        "--branch",
        default=DEFAULT_BRANCH,
        help=f"Published branch (default: {DEFAULT_BRANCH})",
    )
    parser.add_argument(
        "--revision",
        help="Commit to pin download URLs to, skipping the git lookup.",
    )
    parser.add_argument(
        "--git-timeout",
        type=float,
        default=DEFAULT_GIT_TIMEOUT,
        help=f"Seconds to wait for each git command (default: {DEFAULT_GIT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--no-api-fallback",
        action="store_true",
        help="Do not ask the GitHub API for the revision when git fails.",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a summary table of generated manifests.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview changes without touching the output directory.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    settings = Settings.from_args(args)
    return run(settings, summary=args.summary)


if __name__ == "__main__":
    raise SystemExit(main())
