"""
Firmware container detection and payload extraction.

Integrity hashes are computed over the extracted payload, so the same
firmware shipped as Intel HEX and as a raw image hashes identically.
"""

from __future__ import annotations

import enum
import hashlib
import io
from pathlib import Path
from typing import Union

from intelhex import IntelHex, IntelHexError

from .errors import FirmwareFormatError

FIRMWARE_EXTENSIONS = (".otz", ".ota", ".hex", ".bin")
HEX_PADDING = 0xFF


class FirmwareFormat(str, enum.Enum):
    BIN = "bin"
    HEX = "hex"
    OTA = "ota"
    OTZ = "otz"


def is_firmware_file(path: Union[str, Path]) -> bool:
    return str(path).lower().endswith(FIRMWARE_EXTENSIONS)


def guess_firmware_format(path: Union[str, Path], data: bytes) -> FirmwareFormat:
    name = Path(path).name.lower()
    if name.endswith(".bin"):
        return FirmwareFormat.BIN
    if name.endswith((".hex", ".ota", ".otz")):
        return FirmwareFormat(name[-3:])
    raise FirmwareFormatError(f"Could not detect firmware format of {path}")


def extract_hex(data: bytes) -> bytes:
    """Decode Intel HEX into a flat image starting at address 0.

    Gaps between records are filled with 0xFF, the erased-flash value.
    """
    try:
        image = IntelHex(io.StringIO(data.decode("ascii")))
    except (UnicodeDecodeError, IntelHexError) as exc:
        raise FirmwareFormatError(f"Invalid Intel HEX data: {exc}") from exc
    if not image.addresses():
        return b""
    image.padding = HEX_PADDING
    return bytes(image.tobinarray(start=0))


def extract_firmware(data: bytes, fmt: FirmwareFormat) -> bytes:
    if fmt is FirmwareFormat.HEX:
        return extract_hex(data)
    if fmt in (FirmwareFormat.OTA, FirmwareFormat.OTZ):
        # Usually Intel HEX, but some vendors ship raw images with this extension.
        if data[:1] == b":":
            return extract_hex(data)
        return bytes(data)
    if fmt is FirmwareFormat.BIN:
        return bytes(data)
    raise FirmwareFormatError(f"Unsupported firmware format {fmt!r}")


def firmware_integrity(payload: bytes) -> str:
    return f"sha256:{hashlib.sha256(payload).hexdigest()}"
