from __future__ import annotations

import io
from pathlib import Path

import pytest
from intelhex import IntelHex

from firmware_manifests.config import Settings

SAMPLE_CHANGELOG = """\
FIRMWARE REVISION HISTORY,GE 12722,Jasco/Products,"In-Wall Smart Switch, On/Off"
Manufacturer ID,0x0063
Product Type ID,0x4952
Product ID,0x3036

VERSION,DATE,CHANGELOG
5.29,2021-03-01,"Fixed association reports, group 3"
,,Improved LED indicator timing
5.26,2020-11-19,Initial release
"""


def write_changelog(directory: Path, text: str = SAMPLE_CHANGELOG, name: str = "GE 12722.csv") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


def write_firmware(directory: Path, name: str, data: bytes) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_bytes(data)
    return path


def to_intel_hex(payload: bytes, offset: int = 0) -> bytes:
    image = IntelHex()
    image.frombytes(payload, offset=offset)
    buffer = io.StringIO()
    image.write_hex_file(buffer, write_start_addr=False)
    return buffer.getvalue().encode("ascii")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        repo_root=tmp_path,
        firmware_dir=tmp_path / "zwave",
        out_dir=tmp_path / "out",
        revision="abc123",
        api_fallback=False,
    )
