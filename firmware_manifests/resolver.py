"""
Turn changelog entries into published upgrade records.

Each version is expected to have a sibling directory of the changelog file,
named exactly like the version, holding a single firmware file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import quote

from .config import RAW_URL_TEMPLATE, Settings
from .discovery import find_firmware_files
from .errors import AmbiguousFirmwareError, FirmwareNotFoundError, FirmwareResolutionError
from .firmware import extract_firmware, firmware_integrity, guess_firmware_format
from .logutil import log_skip
from .models import ChangelogEntry, UpgradeRecord

logger = logging.getLogger(__name__)

UNRELEASED_MARKER = "OTA file will not be released"

# Characters encodeURIComponent leaves alone besides letters, digits and "-_.~".
URI_COMPONENT_SAFE = "!'()*"


def is_unreleased(entry: ChangelogEntry) -> bool:
    return UNRELEASED_MARKER in entry.changelog


def version_directory(changelog_path: Path, version: str) -> Path:
    """Directory holding the firmware of ``version``, next to the changelog.

    Versions that would point outside the changelog's own directory are
    rejected.
    """
    base = changelog_path.parent
    directory = base / version
    try:
        inside = directory.resolve().relative_to(base.resolve())
    except ValueError:
        inside = None
    if inside is None or inside == Path("."):
        raise FirmwareNotFoundError(f"{version!r} is not a directory below {base}")
    return directory


def locate_firmware_file(changelog_path: Path, version: str) -> Path:
    directory = version_directory(changelog_path, version)
    candidates = find_firmware_files(directory)
    if not candidates:
        raise FirmwareNotFoundError(f"no firmware file in {directory}")
    if len(candidates) > 1:
        raise AmbiguousFirmwareError(directory, candidates)
    return candidates[0]


def encode_path(relative_path: str) -> str:
    segments = relative_path.replace("\\", "/").split("/")
    return "/".join(quote(part, safe=URI_COMPONENT_SAFE) for part in segments if part)


def build_download_url(
    firmware_file: Path,
    revision: Optional[str],
    settings: Settings,
) -> str:
    """Raw download URL of ``firmware_file`` pinned to ``revision``.

    Without a revision the URL follows the configured branch instead. Files
    outside the firmware directory raise :class:`FirmwareResolutionError`.
    """
    relative = Path(os.path.relpath(firmware_file, settings.firmware_dir)).as_posix()
    if relative == ".." or relative.startswith("../"):
        raise FirmwareResolutionError(
            f"{firmware_file} is outside the firmware directory {settings.firmware_dir}"
        )
    path = encode_path(relative)
    prefix = encode_path(settings.url_prefix)
    if prefix:
        path = f"{prefix}/{path}"
    return RAW_URL_TEMPLATE.format(
        repository=settings.repository,
        revision=revision or settings.branch,
        path=path,
    )


def compute_integrity(firmware_file: Path) -> str:
    raw = firmware_file.read_bytes()
    fmt = guess_firmware_format(firmware_file, raw)
    return firmware_integrity(extract_firmware(raw, fmt))


def resolve_upgrade(
    entry: ChangelogEntry,
    changelog_path: Path,
    revision: Optional[str],
    settings: Settings,
) -> Optional[UpgradeRecord]:
    if is_unreleased(entry):
        log_skip(
            logger,
            "Skipping %s version %s, unreleased firmware file",
            changelog_path,
            entry.version,
            level=logging.INFO,
        )
        return None
    try:
        firmware_file = locate_firmware_file(changelog_path, entry.version)
        url = build_download_url(firmware_file, revision, settings)
    except FirmwareResolutionError as exc:
        log_skip(
            logger,
            "Skipping %s version %s, failed to locate firmware file: %s",
            changelog_path,
            entry.version,
            exc,
        )
        return None
    logger.debug("Resolved %s version %s to %s", changelog_path, entry.version, firmware_file)
    return UpgradeRecord(
        version=entry.version,
        changelog=entry.changelog,
        url=url,
        integrity=compute_integrity(firmware_file),
    )


def resolve_upgrades(
    entries: Sequence[ChangelogEntry],
    changelog_path: Path,
    revision: Optional[str],
    settings: Settings,
) -> List[UpgradeRecord]:
    upgrades: List[UpgradeRecord] = []
    for entry in entries:
        upgrade = resolve_upgrade(entry, changelog_path, revision, settings)
        if upgrade is not None:
            upgrades.append(upgrade)
    return upgrades
