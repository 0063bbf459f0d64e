from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True)
class DeviceInfo:
    brand: str
    model: str
    manufacturer_id: str
    product_type: str
    product_id: str

    def manifest_entry(self) -> Dict[str, str]:
        return {
            "brand": self.brand,
            "model": self.model,
            "manufacturerId": self.manufacturer_id,
            "productType": self.product_type,
            "productId": self.product_id,
        }


@dataclass(frozen=True)
class ChangelogEntry:
    version: str
    changelog: str


@dataclass(frozen=True)
class UpgradeRecord:
    version: str
    changelog: str
    url: str
    integrity: str

    def manifest_entry(self) -> Dict[str, str]:
        return {
            "version": self.version,
            "changelog": self.changelog,
            "url": self.url,
            "integrity": self.integrity,
        }


@dataclass
class ParsedChangelog:
    """Result of parsing one changelog file."""

    device: DeviceInfo
    entries: List[ChangelogEntry] = field(default_factory=list)
    description: Optional[str] = None


@dataclass
class Manifest:
    device: DeviceInfo
    upgrades: List[UpgradeRecord]
    source: Optional[Path] = None

    def __post_init__(self) -> None:
        if not self.upgrades:
            raise ValueError("A manifest needs at least one upgrade")

    def to_json(self) -> Dict[str, object]:
        return {
            "devices": [self.device.manifest_entry()],
            "upgrades": [upgrade.manifest_entry() for upgrade in self.upgrades],
        }
