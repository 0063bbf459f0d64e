import json
import logging
from pathlib import Path

import pytest

from firmware_manifests.manifest import (
    assemble_manifest,
    build_summary_table,
    manifest_path,
    render_manifest,
    sanitize_segment,
    write_manifests,
)
from firmware_manifests.models import DeviceInfo, Manifest, UpgradeRecord

DEVICE = DeviceInfo("Jasco/Products", "GE 12722", "0x0063", "0x4952", "0x3036")
UPGRADE = UpgradeRecord(
    version="5.29",
    changelog="Line one\nLine two",
    url="https://raw.githubusercontent.com/jascoproducts/firmware/abc/zwave/fw.otz",
    integrity="sha256:00",
)


def test_output_path_is_sanitized():
    assert manifest_path(Path("out"), "Jasco/Products", "GE 12722") == Path(
        "out/jasco_products/GE_12722.json"
    )
    assert sanitize_segment("A / B\t\tC") == "A_B_C"


def test_render_uses_tabs_and_trailing_newline():
    text = render_manifest(Manifest(DEVICE, [UPGRADE]))
    assert text.endswith("}\n")
    assert '\n\t"devices": [' in text
    data = json.loads(text)
    assert list(data) == ["devices", "upgrades"]
    assert data["devices"] == [
        {
            "brand": "Jasco/Products",
            "model": "GE 12722",
            "manufacturerId": "0x0063",
            "productType": "0x4952",
            "productId": "0x3036",
        }
    ]
    assert list(data["upgrades"][0]) == ["version", "changelog", "url", "integrity"]


def test_manifest_requires_upgrades():
    with pytest.raises(ValueError):
        Manifest(DEVICE, [])


def test_assemble_discards_devices_without_upgrades(caplog):
    with caplog.at_level(logging.WARNING):
        assert assemble_manifest(DEVICE, [], source=Path("GE 12722.csv")) is None
    assert "no available firmwares" in caplog.text
    assert assemble_manifest(DEVICE, [UPGRADE]).upgrades == [UPGRADE]


def test_write_replaces_output_directory(tmp_path):
    out_dir = tmp_path / "out"
    stale = out_dir / "old" / "device.json"
    stale.parent.mkdir(parents=True)
    stale.write_text("{}")
    written = write_manifests([Manifest(DEVICE, [UPGRADE])], out_dir)
    assert written == [out_dir / "jasco_products" / "GE_12722.json"]
    assert not stale.exists()
    assert json.loads(written[0].read_text(encoding="utf-8"))["upgrades"][0]["version"] == "5.29"


def test_write_without_manifests_leaves_empty_output(tmp_path):
    out_dir = tmp_path / "out"
    (out_dir / "old").mkdir(parents=True)
    assert write_manifests([], out_dir) == []
    assert not out_dir.exists()


def test_dry_run_writes_nothing(tmp_path, capsys):
    out_dir = tmp_path / "out"
    stale = out_dir / "stale.json"
    out_dir.mkdir()
    stale.write_text("{}")
    written = write_manifests([Manifest(DEVICE, [UPGRADE])], out_dir, dry_run=True)
    assert stale.exists()
    assert not written[0].exists()
    assert "[dry-run] Would write" in capsys.readouterr().out


def test_summary_table():
    second = UpgradeRecord("5.26", "Initial", UPGRADE.url, "sha256:11")
    table = build_summary_table([Manifest(DEVICE, [UPGRADE, second])], Path("/repo/out"))
    header, row = table.splitlines()
    assert header.split() == ["Idx", "Brand", "Model", "Upgrades", "Versions", "Path"]
    assert "Jasco/Products" in row
    assert "5.29, 5.26" in row
    assert row.endswith("out/jasco_products/GE_12722.json")
