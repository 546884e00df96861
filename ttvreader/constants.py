# Magic and markers
PUFFIN_MAGIC = b"PFA1"          # 4 bytes at offset 0
DIRECTORY_MARKER = b'{"blobs"'  # 8 bytes: opening of the trailing directory

# Directory search only looks at the tail of the buffer
TAIL_SCAN_WINDOW = 10_000


# Term heuristic
PRINTABLE_MIN = 32   # ' '
PRINTABLE_MAX = 126  # '~'
MIN_TERM_LENGTH = 3


# Blob tag markers (substring match, in priority order)
META_TAG_MARKER = "meta.json"
TERM_TAG_MARKER = ".term"

# Directory keys
KEY_BLOBS = "blobs"
KEY_SCHEMA = "schema"
KEY_SEGMENTS = "segments"
KEY_PROPERTIES = "properties"
KEY_BLOB_TAG = "blob_tag"
KEY_COMPRESSION_CODEC = "compression-codec"

UNKNOWN = "unknown"
U64_MAX = (1 << 64) - 1


# Compression codecs named by blob metadata (None/"" = stored as-is)
CODEC_ZSTD = "zstd"


# Presentation sizes
HEADER_DUMP_BYTES = 128
BLOB_PREVIEW_BYTES = 32
HEX_ROW_WIDTH = 16
