from __future__ import annotations

from typing import Optional

import zstandard

from .constants import CODEC_ZSTD
from .errors import BlobDecodeError, UnsupportedCodecError


class Codec:
    """Blob compression named by a descriptor's compression-codec."""

    def __init__(self, name: Optional[str] = None):
        self.name = name or None

    def decompress(self, data: bytes) -> bytes:
        if self.name is None:
            return data
        if self.name == CODEC_ZSTD:
            # decompressobj copes with frames that omit the content size
            dobj = zstandard.ZstdDecompressor().decompressobj()
            try:
                out = dobj.decompress(data)
            except zstandard.ZstdError as e:
                raise BlobDecodeError(f"zstd decompression failed: {e}")
            if not dobj.eof:
                raise BlobDecodeError("zstd frame truncated")
            return out
        # Unknown/unsupported codec: fail fast
        raise UnsupportedCodecError(f"unsupported compression codec: {self.name}")
