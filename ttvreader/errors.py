class TtvError(Exception):
    """Base class for ttvreader-specific errors."""


# Per-blob conditions; the inspector records these and moves on
class BlobBoundsError(TtvError):
    pass


class BlobDecodeError(TtvError):
    pass


class UnsupportedCodecError(BlobDecodeError):
    pass
