from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, List, Union

from .firmware import is_firmware_file


def enum_files_recursive(
    root: Union[str, Path],
    predicate: Callable[[Path], bool],
    *,
    skip_hidden: bool = False,
) -> List[Path]:
    """Return every file below ``root`` accepted by ``predicate``, sorted.

    A missing ``root`` yields no files.
    """
    root = Path(root)
    matches: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        if skip_hidden:
            dirnames[:] = [name for name in dirnames if not name.startswith(".")]
        for name in filenames:
            path = Path(dirpath) / name
            if predicate(path):
                matches.append(path)
    return sorted(matches)


def find_changelogs(root: Union[str, Path]) -> List[Path]:
    # skip .git and other hidden directories of the firmware repository
    return enum_files_recursive(
        root, lambda path: path.name.lower().endswith(".csv"), skip_hidden=True
    )


def find_firmware_files(directory: Union[str, Path]) -> List[Path]:
    return enum_files_recursive(directory, is_firmware_file)
