"""
Line-level helpers for the loosely formatted CSV exports vendors publish.

The files are hand-edited spreadsheets, so they are not fed through the csv
module: quotes only toggle whether a comma separates fields, and there is no
escape sequence for a literal quote.
"""

from __future__ import annotations

from typing import List

BOM = "\ufeff"


def scan_csv_line(line: str) -> List[str]:
    fields: List[str] = []
    current: List[str] = []
    in_quote = False
    for char in line:
        if char == '"':
            in_quote = not in_quote
        elif char == "," and not in_quote:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    # An unterminated quote simply ends with the line.
    fields.append("".join(current))
    return fields


def strip_bom(text: str) -> str:
    """Drop a leading byte-order mark.

    Decoding a UTF-8 file with a BOM (EF BB BF) leaves U+FEFF as the first
    character.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected a string, got {type(text).__name__}")
    if text.startswith(BOM):
        return text[1:]
    return text


def field(fields: List[str], index: int) -> str:
    """Return ``fields[index]`` or an empty string for short rows."""
    if index < len(fields):
        return fields[index]
    return ""
