from __future__ import annotations

from dataclasses import dataclass

from .constants import PUFFIN_MAGIC


@dataclass(frozen=True)
class HeaderCheck:
    """Outcome of the magic check: Valid, or Mismatch carrying what was seen.

    `observed` holds the first four bytes of the buffer (fewer when the buffer
    is shorter than the magic).
    """

    valid: bool
    observed: bytes

    @property
    def observed_hex(self) -> str:
        return " ".join(f"{b:02X}" for b in self.observed)


def check_header(data: bytes) -> HeaderCheck:
    observed = bytes(data[: len(PUFFIN_MAGIC)])
    return HeaderCheck(valid=observed == PUFFIN_MAGIC, observed=observed)
