"""
Batch pipeline: discover changelogs, parse them, resolve their firmware files
and write one manifest per device.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .changelog import parse_changelog
from .config import Settings
from .discovery import find_changelogs
from .errors import ChangelogError
from .logutil import log_skip
from .manifest import assemble_manifest, build_summary_table, write_manifests
from .models import Manifest
from .resolver import resolve_upgrades
from .revision import lookup_revision

logger = logging.getLogger(__name__)


def process_changelog(
    path: Path, revision: Optional[str], settings: Settings
) -> Optional[Manifest]:
    """Build the manifest for a single changelog file, or ``None`` if skipped."""
    text = path.read_text(encoding="utf-8", errors="replace")
    try:
        parsed = parse_changelog(text, source=path)
    except ChangelogError as exc:
        log_skip(logger, "Skipping %s, %s", path, exc)
        return None
    logger.debug(
        "Parsed %s: %s %s with %d changelog entries",
        path,
        parsed.device.brand,
        parsed.device.model,
        len(parsed.entries),
    )
    upgrades = resolve_upgrades(parsed.entries, path, revision, settings)
    return assemble_manifest(parsed.device, upgrades, source=path)


def build_manifests(settings: Settings, revision: Optional[str]) -> List[Manifest]:
    changelogs = find_changelogs(settings.firmware_dir)
    if not changelogs:
        logger.warning("No changelog files found in %s", settings.firmware_dir)
    manifests: List[Manifest] = []
    for path in changelogs:
        manifest = process_changelog(path, revision, settings)
        if manifest is not None:
            manifests.append(manifest)
    return manifests


def run(settings: Settings, *, summary: bool = False) -> int:
    revision = lookup_revision(settings)
    manifests = build_manifests(settings, revision)
    # Output is only touched once every changelog has been processed.
    written = write_manifests(manifests, settings.out_dir, dry_run=settings.dry_run)
    if summary:
        print("\nManifest summary:\n")
        print(build_summary_table(manifests, settings.out_dir))
    logger.info("Done, wrote %d manifest(s) to %s", len(written), settings.out_dir)
    return 0
