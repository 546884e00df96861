from __future__ import annotations

from enum import Enum
from typing import Optional

from .constants import META_TAG_MARKER, TERM_TAG_MARKER


class BlobClass(Enum):
    STRUCTURED_METADATA = "metadata"
    TERM_DICTIONARY = "terms"
    OPAQUE_BINARY = "binary"


def classify(tag: str, kind: Optional[str] = None) -> BlobClass:
    """Pick an interpretation for a blob from its tag.

    Substring match, first rule wins: "meta.json", then ".term", else opaque.
    So "segment_03.term.gz" is still a term dictionary. `kind` is accepted for
    callers that carry it but does not affect the decision.
    """
    if META_TAG_MARKER in tag:
        return BlobClass.STRUCTURED_METADATA
    if TERM_TAG_MARKER in tag:
        return BlobClass.TERM_DICTIONARY
    return BlobClass.OPAQUE_BINARY
