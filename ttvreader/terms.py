from __future__ import annotations

from typing import List

from .constants import MIN_TERM_LENGTH, PRINTABLE_MAX, PRINTABLE_MIN


def extract_terms(data: bytes) -> List[str]:
    """Candidate tokens from runs of printable ASCII.

    A run is emitted only when a non-printable byte ends it and it is at least
    MIN_TERM_LENGTH long. A run still open at end of input is dropped.
    """
    terms: List[str] = []
    current = bytearray()
    for b in data:
        if PRINTABLE_MIN <= b <= PRINTABLE_MAX:
            current.append(b)
            continue
        if len(current) >= MIN_TERM_LENGTH:
            terms.append(current.decode("ascii"))
        current.clear()
    return terms
