"""
ttvreader — read-only inspector for Puffin (.ttv) sealed archives.

A Puffin archive is a 4-byte magic ("PFA1"), any number of opaque blobs, and a
trailing JSON directory describing those blobs. This package:

- Checks the magic header (informational only; never blocks parsing)
- Locates the trailing directory by tail scan plus brace balancing
- Decodes blob descriptors and bounds-checks every blob before slicing
- Interprets recognizable blobs: the index meta.json document (schema fields,
  segment document counts) and term dictionaries (printable-run heuristic)
- Decompresses zstd blobs named by the directory's compression-codec

The core never touches the filesystem; callers hand it the archive bytes.
The `ttvreader` CLI (ttvreader.cli) does the file read and renders reports.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "errors",
    "fields",
    "header",
    "locator",
    "directory",
    "extract",
    "codec",
    "classify",
    "terms",
    "index",
    "inspector",
    "hexdump",
]

# Programmatic entry point: ttvreader.inspector.inspect_bytes(data) or
# ArchiveInspector(data).inspect(); both return an Inspection.
