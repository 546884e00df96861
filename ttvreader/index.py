from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .constants import KEY_SCHEMA, KEY_SEGMENTS, U64_MAX, UNKNOWN
from .fields import get_array, get_bool, get_object, get_str, get_u64


@dataclass(frozen=True)
class SchemaEntry:
    name: str
    type: str
    indexed: bool
    stored: bool


@dataclass(frozen=True)
class SegmentEntry:
    segment_id: str
    document_count: int


@dataclass
class IndexAnalysis:
    schema: Optional[List[SchemaEntry]]
    segments: Optional[List[SegmentEntry]]
    source: str = "blob"

    @property
    def total_documents(self) -> int:
        # Recomputed on every access; saturates instead of growing past u64
        total = 0
        for seg in self.segments or []:
            total = min(U64_MAX, total + seg.document_count)
        return total

    @property
    def is_empty(self) -> bool:
        return self.total_documents == 0


def parse_schema_entry(field: Any) -> SchemaEntry:
    options = get_object(field, "options")
    return SchemaEntry(
        name=get_str(field, "name", UNKNOWN),
        type=get_str(field, "type", UNKNOWN),
        indexed=get_object(options, "indexing") is not None,
        stored=get_bool(options, "stored", False),
    )


def parse_segment_entry(segment: Any) -> SegmentEntry:
    return SegmentEntry(
        segment_id=get_str(segment, "segment_id", UNKNOWN),
        document_count=get_u64(segment, "max_doc", 0),
    )


def parse_schema(entries: Optional[List[Any]]) -> Optional[List[SchemaEntry]]:
    if entries is None:
        return None
    return [parse_schema_entry(f) for f in entries]


def parse_segments(entries: Optional[List[Any]]) -> Optional[List[SegmentEntry]]:
    if entries is None:
        return None
    return [parse_segment_entry(s) for s in entries]


def analyze_index(document: Any, *, source: str = "blob") -> IndexAnalysis:
    """Summarize an index meta.json document.

    Args:
        document: Parsed JSON value. Anything other than an object simply has
            no schema and no segments.
        source: Where the document came from, carried through for reporting.

    Returns:
        IndexAnalysis. `schema`/`segments` are None when the document has no
        array under that key; an empty array gives an empty list.
    """
    return IndexAnalysis(
        schema=parse_schema(get_array(document, KEY_SCHEMA)),
        segments=parse_segments(get_array(document, KEY_SEGMENTS)),
        source=source,
    )
