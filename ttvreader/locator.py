from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from .constants import DIRECTORY_MARKER, TAIL_SCAN_WINDOW

logger = logging.getLogger(__name__)

# (data, start) -> exclusive end offset, or None when the scan never closes
DirectoryScanner = Callable[[bytes, int], Optional[int]]

_OPEN_BRACE = ord("{")
_CLOSE_BRACE = ord("}")


def find_directory_start(data: bytes, window: int = TAIL_SCAN_WINDOW) -> Optional[int]:
    """Return the absolute offset of the directory marker, or None.

    Only the final `window` bytes are searched (the whole buffer when shorter);
    the directory is always appended at the end, so large archives cost the
    same as small ones. The first occurrence inside the window wins.
    """
    base = len(data) - window if len(data) > window else 0
    pos = data.find(DIRECTORY_MARKER, base)
    return pos if pos >= 0 else None


def balance_braces(data: bytes, start: int) -> Optional[int]:
    """Brace-depth scan forward from `start`.

    Returns the offset just past the `}` that brings the depth back to zero.
    Quoted strings are not understood: a brace inside a JSON string value
    still moves the depth.
    """
    depth = 0
    for pos in range(start, len(data)):
        b = data[pos]
        if b == _OPEN_BRACE:
            depth += 1
        elif b == _CLOSE_BRACE:
            depth -= 1
            if depth == 0:
                return pos + 1
    return None


def locate_directory(data: bytes, scanner: DirectoryScanner = balance_braces) -> Optional[Tuple[int, int]]:
    """Find the [start, end) byte range of the trailing directory.

    Absence means no directory information is available, not an error.
    """
    start = find_directory_start(data)
    if start is None:
        logger.debug("directory marker not found in final %d bytes", TAIL_SCAN_WINDOW)
        return None
    end = scanner(data, start)
    if end is None:
        logger.debug("directory at offset %d never closes", start)
        return None
    return start, end
