"""Assemble per-device manifests and write them below the output directory."""

from __future__ import annotations

import json
import logging
import re
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from .logutil import log_skip
from .models import DeviceInfo, Manifest, UpgradeRecord

logger = logging.getLogger(__name__)

_UNSAFE_RUN = re.compile(r"[/\s]+")


def sanitize_segment(value: str) -> str:
    return _UNSAFE_RUN.sub("_", value)


def manifest_path(out_dir: Path, brand: str, model: str) -> Path:
    return out_dir / sanitize_segment(brand.lower()) / f"{sanitize_segment(model)}.json"


def assemble_manifest(
    device: DeviceInfo,
    upgrades: Sequence[UpgradeRecord],
    source: Optional[Path] = None,
) -> Optional[Manifest]:
    if not upgrades:
        log_skip(logger, "Skipping %s, no available firmwares", source or device.model)
        return None
    return Manifest(device=device, upgrades=list(upgrades), source=source)


def render_manifest(manifest: Manifest) -> str:
    return json.dumps(manifest.to_json(), indent="\t", ensure_ascii=False) + "\n"


def write_manifests(
    manifests: Sequence[Manifest], out_dir: Path, *, dry_run: bool = False
) -> List[Path]:
    """Replace ``out_dir`` with one JSON file per manifest.

    The previous contents are removed first, so the directory always reflects
    exactly one run.
    """
    written: List[Path] = []
    if dry_run:
        print(f"[dry-run] Would remove {out_dir}")
    elif out_dir.exists():
        shutil.rmtree(out_dir)
    for manifest in manifests:
        path = manifest_path(out_dir, manifest.device.brand, manifest.device.model)
        if path in written:
            logger.warning("%s is written by more than one changelog, last one wins", path)
        written.append(path)
        if dry_run:
            print(f"[dry-run] Would write {path}")
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(render_manifest(manifest))
    return written


def build_summary_table(manifests: Sequence[Manifest], out_dir: Path) -> str:
    headers = ["Idx", "Brand", "Model", "Upgrades", "Versions", "Path"]
    rows: List[List[str]] = []
    for index, manifest in enumerate(manifests):
        device = manifest.device
        path = manifest_path(out_dir, device.brand, device.model)
        try:
            shown = path.relative_to(out_dir.parent).as_posix()
        except ValueError:
            shown = path.as_posix()
        rows.append(
            [
                str(index),
                device.brand,
                device.model,
                str(len(manifest.upgrades)),
                ", ".join(upgrade.version for upgrade in manifest.upgrades),
                shown,
            ]
        )
    data = [headers] + rows
    widths = [max(len(row[i]) for row in data) for i in range(len(headers))]
    lines = [
        "  ".join(row[i].ljust(widths[i]) for i in range(len(headers))).rstrip()
        for row in data
    ]
    return "\n".join(lines)
