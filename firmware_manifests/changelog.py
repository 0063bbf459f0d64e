"""
Parse vendor firmware revision history spreadsheets.

Expected layout (exported from a spreadsheet, so extra columns are common):

    FIRMWARE REVISION HISTORY,<model>,<brand>,<description>
    Manufacturer ID,0x0063
    Product Type ID,0x4952
    Product ID,0x3036
    VERSION,DATE,CHANGELOG
    5.29,2021-03-01,First line of the changelog
    ,,Second line of the same entry
    5.26,2020-11-19,Another release
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .csvscan import field, scan_csv_line, strip_bom
from .errors import ChangelogFormatError, IncompleteDeviceInfoError
from .logutil import log_skip
from .models import ChangelogEntry, DeviceInfo, ParsedChangelog

logger = logging.getLogger(__name__)

MARKER = "FIRMWARE REVISION HISTORY"
CHANGELOG_HEADER = "VERSION"

# Lower-cased header labels mapped to the DeviceInfo attribute they fill.
METADATA_LABELS: Dict[str, str] = {
    "manufacturer id": "manufacturer_id",
    "product type id": "product_type",
    "product id": "product_id",
}

REQUIRED_FIELDS = ("model", "brand", "manufacturer_id", "product_type", "product_id")


class ChangelogState(enum.Enum):
    HEADER = "header"
    CHANGELOG = "changelog"


class ChangelogParser:
    """Line classifier for a single changelog file.

    The parser starts in ``HEADER`` state and collects device metadata until
    the ``VERSION`` row, then accumulates changelog entries. An entry stays
    open until the next versioned row or :meth:`finish`.
    """

    def __init__(self, source: Union[str, Path, None] = None):
        self.source = source
        self.state = ChangelogState.HEADER
        self.metadata: Dict[str, str] = {}
        self.description: Optional[str] = None
        self.entries: List[ChangelogEntry] = []
        self._version: Optional[str] = None
        self._text: Optional[str] = None

    @property
    def has_open_entry(self) -> bool:
        return self._version is not None

    def feed(self, fields: Sequence[str]) -> None:
        if self.state is ChangelogState.CHANGELOG:
            self._feed_changelog(fields)
        else:
            self._feed_header(fields)

    def _feed_header(self, fields: Sequence[str]) -> None:
        label = field(fields, 0)
        if label == MARKER:
            self.metadata["model"] = field(fields, 1)
            self.metadata["brand"] = field(fields, 2)
            self.description = field(fields, 3) or None
        elif label.lower() in METADATA_LABELS:
            self.metadata[METADATA_LABELS[label.lower()]] = field(fields, 1)
        elif label == CHANGELOG_HEADER:
            self.state = ChangelogState.CHANGELOG

    def _feed_changelog(self, fields: Sequence[str]) -> None:
        version = field(fields, 0)
        text = field(fields, 2).strip()
        if version:
            self._close_entry()
            self._version = version
            self._text = text
        elif self.has_open_entry:
            self._text = f"{self._text}\n{text}"
        else:
            log_skip(
                logger,
                "Skipping row in %s, unexpected changelog format",
                self.source or "<changelog>",
            )

    def _close_entry(self) -> None:
        # Entries without any text are dropped, like the spreadsheet's blank rows.
        if self._version and self._text:
            self.entries.append(ChangelogEntry(self._version, self._text))
        self._version = None
        self._text = None

    def finish(self) -> ParsedChangelog:
        self._close_entry()
        missing = [name for name in REQUIRED_FIELDS if not self.metadata.get(name)]
        if missing:
            raise IncompleteDeviceInfoError(missing)
        device = DeviceInfo(**{name: self.metadata[name] for name in REQUIRED_FIELDS})
        return ParsedChangelog(
            device=device,
            entries=list(self.entries),
            description=self.description,
        )


def split_lines(text: str) -> List[str]:
    stripped = (line.strip() for line in strip_bom(text).split("\n"))
    return [line for line in stripped if line]


def parse_changelog(text: str, source: Union[str, Path, None] = None) -> ParsedChangelog:
    """Parse the decoded contents of one changelog file.

    Raises :class:`ChangelogFormatError` when the text does not start with the
    revision history marker and :class:`IncompleteDeviceInfoError` when any of
    the device identity fields is missing.
    """
    lines = split_lines(text)
    if not lines or not lines[0].startswith(MARKER):
        raise ChangelogFormatError("unexpected format")
    parser = ChangelogParser(source)
    for line in lines:
        parser.feed(scan_csv_line(line))
    return parser.finish()
