from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .constants import (
    KEY_BLOBS,
    KEY_BLOB_TAG,
    KEY_COMPRESSION_CODEC,
    KEY_PROPERTIES,
    KEY_SCHEMA,
    KEY_SEGMENTS,
    UNKNOWN,
)
from .fields import get_array, get_object, get_str, get_u64
from .index import SchemaEntry, SegmentEntry, parse_schema, parse_segments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlobDescriptor:
    tag: str
    kind: str
    offset: int
    length: int
    properties: Dict[str, Any] = field(default_factory=dict)
    compression_codec: Optional[str] = None

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass
class Directory:
    blobs: List[BlobDescriptor]
    span: Tuple[int, int]
    schema: Optional[List[SchemaEntry]] = None
    segments: Optional[List[SegmentEntry]] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    def __iter__(self) -> Iterator[BlobDescriptor]:
        return iter(self.blobs)

    def __len__(self) -> int:
        return len(self.blobs)

    @property
    def has_index_metadata(self) -> bool:
        return self.schema is not None or self.segments is not None


def parse_blob_descriptor(entry: Any) -> BlobDescriptor:
    # Non-object entries fall through to all-default descriptors
    props = get_object(entry, KEY_PROPERTIES) or {}
    codec = get_str(entry, KEY_COMPRESSION_CODEC, "") or None
    return BlobDescriptor(
        tag=get_str(props, KEY_BLOB_TAG, UNKNOWN),
        kind=get_str(entry, "type", UNKNOWN),
        offset=get_u64(entry, "offset"),
        length=get_u64(entry, "length"),
        properties=dict(props),
        compression_codec=codec,
    )


def parse_directory(doc: Dict[str, Any], span: Tuple[int, int]) -> Directory:
    entries = get_array(doc, KEY_BLOBS) or []
    return Directory(
        blobs=[parse_blob_descriptor(e) for e in entries],
        span=span,
        schema=parse_schema(get_array(doc, KEY_SCHEMA)),
        segments=parse_segments(get_array(doc, KEY_SEGMENTS)),
        properties=dict(get_object(doc, KEY_PROPERTIES) or {}),
        raw=doc,
    )


def decode_directory(data: bytes, span: Tuple[int, int]) -> Optional[Directory]:
    """Parse the located byte range as the archive directory.

    Invalid UTF-8, invalid JSON, or a top-level value that is not an object
    all yield None; the rest of the inspection carries on without it.
    """
    start, end = span
    try:
        text = bytes(data[start:end]).decode("utf-8")
        doc = json.loads(text)
    except UnicodeDecodeError as exc:
        logger.debug("directory at %d..%d is not UTF-8: %s", start, end, exc)
        return None
    except (ValueError, RecursionError) as exc:
        logger.debug("directory at %d..%d is not valid JSON: %s", start, end, exc)
        return None
    if not isinstance(doc, dict):
        logger.debug("directory at %d..%d is not a JSON object", start, end)
        return None
    return parse_directory(doc, span)
