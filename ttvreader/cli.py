from __future__ import annotations

import argparse
import json as _json
import logging
import sys
from pathlib import Path
from typing import List

from ttvreader.classify import BlobClass
from ttvreader.codec import Codec
from ttvreader.constants import BLOB_PREVIEW_BYTES, HEADER_DUMP_BYTES, PUFFIN_MAGIC
from ttvreader.errors import TtvError
from ttvreader.extract import extract_blob
from ttvreader.hexdump import hex_dump, hex_preview
from ttvreader.index import IndexAnalysis
from ttvreader.inspector import ArchiveInspector, BlobReport, Inspection


def _load(archive: str) -> bytes:
    return Path(archive).read_bytes()


def _inspect(archive: str) -> Inspection:
    return ArchiveInspector(_load(archive)).inspect()


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _print_preview(data: bytes, *, more: bool = True) -> None:
    rows = hex_preview(data) or [""]
    print(f"   Preview: {rows[0]}")
    for row in rows[1:]:
        print(f"            {row}")
    if more and len(data) > BLOB_PREVIEW_BYTES:
        print(f"            ... ({len(data) - BLOB_PREVIEW_BYTES} more bytes)")


def _print_index(analysis: IndexAnalysis) -> None:
    print(f"Index Analysis ({analysis.source}):\n")
    if analysis.schema is not None:
        print("Fields defined:")
        for f in analysis.schema:
            print(f"  - {f.name} (type: {f.type}, indexed: {_flag(f.indexed)}, stored: {_flag(f.stored)})")
    if analysis.segments is not None:
        print("\nSegments:")
        for seg in analysis.segments:
            print(f"  - {seg.segment_id} ({seg.document_count} documents)")
        total = analysis.total_documents
        print(f"\nTotal documents: {total}")
        if total == 0:
            print("⚠ Index is EMPTY - no documents indexed")
        else:
            print("✓ Index contains data")


def _print_blob(report: BlobReport) -> None:
    d = report.descriptor
    print(f"{report.position + 1}. {d.tag} ({d.length} bytes at offset {d.offset})")
    print(f"   Type: {d.kind}")
    if d.compression_codec:
        print(f"   Codec: {d.compression_codec}")
    if not report.in_bounds:
        print("   ⚠ Invalid offset/length!")
        print()
        return
    payload = report.payload
    if report.classification is BlobClass.STRUCTURED_METADATA:
        if report.document is not None:
            print(f"   Content: {_json.dumps(report.document, indent=2)}")
    elif report.classification is BlobClass.TERM_DICTIONARY:
        _print_preview(payload, more=False)
        if report.terms:
            print(f"   Terms found: {', '.join(report.terms)}")
    else:
        _print_preview(payload)
    if report.error:
        print(f"   ⚠ Undecodable: {report.error}")
    print()


def cmd_inspect(archive: str, *, as_json: bool = False) -> bool:
    """Full report: header, index analysis, embedded blobs, directory, hex.

    Args:
        archive: Path to a .ttv (Puffin) file.
        as_json: When True, print the structured result as JSON instead.
    """
    data = _load(archive)
    result = ArchiveInspector(data).inspect()
    if as_json:
        print(_json.dumps({"path": archive, **result.to_dict()}, indent=2))
        return True

    print(f"\nFile: {archive}")
    print(f"Size: {result.size} bytes ({result.size / 1024.0:.2f} KB)\n")

    if result.header.valid:
        print("✓ Valid Puffin Archive Format v1\n")
    else:
        print(f"⚠ Header: {result.header.observed_hex or '(empty)'} (expected {PUFFIN_MAGIC.decode('ascii')})\n")

    if result.directory is None:
        if result.span is None:
            print("⚠ No blob directory found")
        else:
            print(f"⚠ Blob directory at {result.span[0]}..{result.span[1]} could not be decoded")
    else:
        if result.index is not None:
            _print_index(result.index)
        print("\nEmbedded Files:\n")
        for report in result.blobs:
            _print_blob(report)
        print(f"\nFull Metadata:\n{_json.dumps(result.directory.raw, indent=2)}")

    print(f"\nHex (first {HEADER_DUMP_BYTES} bytes):")
    for line in hex_dump(data):
        print(line)
    return True


def cmd_list(archive: str) -> bool:
    """List blobs: position, class, length, offset, tag.

    Args:
        archive: Path to a .ttv (Puffin) file.
    """
    result = _inspect(archive)
    if result.directory is None:
        print("Warning: no blob directory found", file=sys.stderr)
        return False
    for r in result.blobs:
        d = r.descriptor
        status = "" if r.error is None else f"\t! {r.error}"
        print(f"{r.position + 1}\t{r.classification.value}\t{d.length}\t{d.offset}\t{d.tag}{status}")
    return True


def cmd_info(archive: str) -> bool:
    """Show archive summary.

    Args:
        archive: Path to a .ttv (Puffin) file.
    """
    result = _inspect(archive)
    print(f"Archive: {archive}")
    print(f"  Size: {result.size}")
    print(f"  Header: {PUFFIN_MAGIC.decode('ascii') if result.header.valid else 'mismatch (' + result.header.observed_hex + ')'}")
    if result.span is not None:
        print(f"  Directory: {result.span[0]}..{result.span[1]}")
    else:
        print("  Directory: not found")
    if result.directory is not None:
        bad = sum(1 for r in result.blobs if r.error is not None)
        print(f"  Blobs: {len(result.directory)}")
        for cls in BlobClass:
            print(f"    {cls.value}: {sum(1 for r in result.blobs if r.classification is cls)}")
        print(f"  Problems: {bad}")
    if result.index is not None:
        print(f"  Total documents: {result.index.total_documents}")
    return True


def cmd_terms(archive: str) -> bool:
    """Print the candidate tokens of every term dictionary blob.

    Args:
        archive: Path to a .ttv (Puffin) file.
    """
    result = _inspect(archive)
    for r in result.blobs:
        if r.classification is not BlobClass.TERM_DICTIONARY:
            continue
        terms = r.terms or []
        print(f"{r.descriptor.tag}: {len(terms)} term(s)")
        for t in terms:
            print(f"  {t}")
    return True


def cmd_extract(archive: str, position: int, *, output: str) -> bool:
    """Write one blob's bytes (decompressed when a codec is named) to a file.

    Args:
        archive: Path to a .ttv (Puffin) file. Never modified.
        position: 1-based blob position as shown by `list`.
        output: Destination file path.

    Raises:
        RuntimeError: No directory, or no blob at that position.
        TtvError: The blob is out of range or cannot be decompressed.
    """
    inspector = ArchiveInspector(_load(archive))
    directory = inspector.directory()
    if directory is None:
        raise RuntimeError("No blob directory found")
    if not 1 <= position <= len(directory):
        raise RuntimeError(f"No blob at position {position} (archive has {len(directory)})")
    desc = directory.blobs[position - 1]
    blob = extract_blob(inspector.data, desc)
    payload = Codec(desc.compression_codec).decompress(blob.tobytes())
    Path(output).write_bytes(payload)
    print(f"Wrote {len(payload)} bytes of {desc.tag} to {output}")
    return True


def main(argv: List[str] | None = None):
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", "-v", action="store_true", help="Log decoder diagnostics to stderr")

    ap = argparse.ArgumentParser(
        prog="ttvreader",
        description="Read-only inspector for Puffin (.ttv) archives",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_inspect = sub.add_parser("inspect", parents=[common], help="Full archive report")
    ap_inspect.add_argument("archive", help="Archive path")
    ap_inspect.add_argument("--json", action="store_true", help="Emit the structured result as JSON")

    ap_list = sub.add_parser("list", parents=[common], help="List embedded blobs")
    ap_list.add_argument("archive", help="Archive path")

    ap_info = sub.add_parser("info", parents=[common], help="Show archive summary")
    ap_info.add_argument("archive", help="Archive path")

    ap_terms = sub.add_parser("terms", parents=[common], help="Show tokens found in term dictionary blobs")
    ap_terms.add_argument("archive", help="Archive path")

    ap_extract = sub.add_parser("extract", parents=[common], help="Write one blob to a file")
    ap_extract.add_argument("archive", help="Archive path")
    ap_extract.add_argument("position", type=int, help="1-based blob position (see 'list')")
    ap_extract.add_argument("--output", "-o", required=True, help="Output file path")

    args = ap.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s")
    try:
        if args.cmd == "inspect":
            cmd_inspect(args.archive, as_json=args.json)
        elif args.cmd == "list":
            ok = cmd_list(args.archive)
            sys.exit(0 if ok else 1)
        elif args.cmd == "info":
            cmd_info(args.archive)
        elif args.cmd == "terms":
            cmd_terms(args.archive)
        elif args.cmd == "extract":
            cmd_extract(args.archive, args.position, output=args.output)
        else:
            raise RuntimeError("Unknown command")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except (TtvError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
