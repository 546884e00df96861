from __future__ import annotations

from typing import List

from .constants import BLOB_PREVIEW_BYTES, HEADER_DUMP_BYTES, HEX_ROW_WIDTH


def hex_row(chunk: bytes) -> str:
    return " ".join(f"{b:02x}" for b in chunk)


def hex_preview(data: bytes, limit: int = BLOB_PREVIEW_BYTES, width: int = HEX_ROW_WIDTH) -> List[str]:
    """Rows of the first `limit` bytes, `width` bytes per row, no offsets."""
    head = bytes(data[:limit])
    return [hex_row(head[i : i + width]) for i in range(0, len(head), width)]


def hex_dump(data: bytes, limit: int = HEADER_DUMP_BYTES, width: int = HEX_ROW_WIDTH) -> List[str]:
    """Offset-prefixed rows ("0010: ...") of the first `limit` bytes."""
    head = bytes(data[:limit])
    return [f"{i:04x}: {hex_row(head[i : i + width])}" for i in range(0, len(head), width)]
