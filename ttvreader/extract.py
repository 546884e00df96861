from __future__ import annotations

from dataclasses import dataclass

from .directory import BlobDescriptor
from .errors import BlobBoundsError


@dataclass(frozen=True)
class ExtractedBlob:
    start: int
    end: int
    data: memoryview

    def __len__(self) -> int:
        return self.end - self.start

    def tobytes(self) -> bytes:
        return self.data.tobytes()


def extract_blob(data: bytes, desc: BlobDescriptor) -> ExtractedBlob:
    """Bounds-check a descriptor and return a zero-copy view of its bytes.

    Raises:
        BlobBoundsError: offset/length fall outside the buffer.
    """
    start = desc.offset
    # Python ints cannot wrap, so the sign check is the whole overflow guard
    if start < 0 or desc.length < 0:
        raise BlobBoundsError(f"negative offset/length for blob {desc.tag!r}")
    end = start + desc.length
    if end > len(data):
        raise BlobBoundsError(
            f"blob {desc.tag!r} spans {start}..{end}, beyond archive size {len(data)}"
        )
    return ExtractedBlob(start=start, end=end, data=memoryview(data)[start:end])
