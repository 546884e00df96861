from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .classify import BlobClass, classify
from .codec import Codec
from .directory import BlobDescriptor, Directory, decode_directory
from .errors import BlobBoundsError, BlobDecodeError
from .extract import ExtractedBlob, extract_blob
from .header import HeaderCheck, check_header
from .index import IndexAnalysis, analyze_index
from .locator import DirectoryScanner, balance_braces, locate_directory
from .terms import extract_terms

logger = logging.getLogger(__name__)


@dataclass
class BlobReport:
    position: int
    descriptor: BlobDescriptor
    classification: BlobClass
    blob: Optional[ExtractedBlob] = None
    decoded: Optional[bytes] = None
    error: Optional[str] = None
    document: Any = None
    terms: Optional[List[str]] = None

    @property
    def in_bounds(self) -> bool:
        return self.blob is not None

    @property
    def payload(self) -> Optional[Union[bytes, memoryview]]:
        """Blob bytes after decompression, or the raw view when stored as-is."""
        if self.decoded is not None:
            return self.decoded
        if self.blob is not None:
            return self.blob.data
        return None

    def to_dict(self) -> Dict[str, Any]:
        d = self.descriptor
        return {
            "position": self.position,
            "tag": d.tag,
            "type": d.kind,
            "offset": d.offset,
            "length": d.length,
            "compression_codec": d.compression_codec,
            "class": self.classification.value,
            "in_bounds": self.in_bounds,
            "error": self.error,
            "document": self.document,
            "terms": self.terms,
        }


@dataclass
class Inspection:
    size: int
    header: HeaderCheck
    span: Optional[Tuple[int, int]] = None
    directory: Optional[Directory] = None
    blobs: List[BlobReport] = field(default_factory=list)
    index: Optional[IndexAnalysis] = None

    def to_dict(self) -> Dict[str, Any]:
        directory = None
        if self.directory is not None:
            directory = {
                "span": list(self.directory.span),
                "blob_count": len(self.directory),
                "properties": self.directory.properties,
            }
        index = None
        if self.index is not None:
            index = {
                "source": self.index.source,
                "schema": [asdict(f) for f in self.index.schema] if self.index.schema is not None else None,
                "segments": [asdict(s) for s in self.index.segments] if self.index.segments is not None else None,
                "total_documents": self.index.total_documents,
                "empty": self.index.is_empty,
            }
        return {
            "size": self.size,
            "header": {"valid": self.header.valid, "observed": self.header.observed.hex()},
            "directory_span": list(self.span) if self.span else None,
            "directory": directory,
            "blobs": [r.to_dict() for r in self.blobs],
            "index": index,
        }


def decode_document(payload: Union[bytes, memoryview]) -> Any:
    """Parse a structured-metadata blob as JSON.

    Raises:
        BlobDecodeError: the bytes are not UTF-8 or not valid JSON.
    """
    try:
        return json.loads(bytes(payload).decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise BlobDecodeError(f"not UTF-8: {exc}")
    except (ValueError, RecursionError) as exc:
        raise BlobDecodeError(f"not valid JSON: {exc}")


class ArchiveInspector:
    """Runs the read-only inspection pipeline over one in-memory archive.

    The buffer is never modified; every extracted blob is a view into it.
    Nothing raised by one blob's interpretation reaches the caller: the
    condition is recorded on that blob's report and the next one is tried.
    """

    def __init__(self, data: bytes, scanner: DirectoryScanner = balance_braces):
        self.data = bytes(data)
        self.scanner = scanner

    def header(self) -> HeaderCheck:
        return check_header(self.data)

    def locate(self) -> Optional[Tuple[int, int]]:
        return locate_directory(self.data, self.scanner)

    def directory(self, span: Optional[Tuple[int, int]] = None) -> Optional[Directory]:
        if span is None:
            span = self.locate()
        if span is None:
            return None
        return decode_directory(self.data, span)

    def blobs(self, directory: Optional[Directory]) -> Iterator[BlobReport]:
        if directory is None:
            return
        for pos, desc in enumerate(directory):
            yield self._inspect_blob(pos, desc)

    def inspect(self) -> Inspection:
        span = self.locate()
        directory = self.directory(span) if span is not None else None
        reports = list(self.blobs(directory))
        return Inspection(
            size=len(self.data),
            header=self.header(),
            span=span,
            directory=directory,
            blobs=reports,
            index=self._analyze(directory, reports),
        )

    # internals
    def _inspect_blob(self, pos: int, desc: BlobDescriptor) -> BlobReport:
        report = BlobReport(position=pos, descriptor=desc, classification=classify(desc.tag, desc.kind))
        try:
            report.blob = extract_blob(self.data, desc)
        except BlobBoundsError as exc:
            logger.debug("blob %d: %s", pos, exc)
            report.error = str(exc)
            return report
        try:
            if desc.compression_codec:
                report.decoded = Codec(desc.compression_codec).decompress(report.blob.tobytes())
            payload = report.payload
            if report.classification is BlobClass.STRUCTURED_METADATA:
                report.document = decode_document(payload)
            elif report.classification is BlobClass.TERM_DICTIONARY:
                report.terms = extract_terms(payload)
        except BlobDecodeError as exc:
            logger.debug("blob %d (%s) undecodable: %s", pos, desc.tag, exc)
            report.error = str(exc)
        return report

    def _analyze(self, directory: Optional[Directory], reports: List[BlobReport]) -> Optional[IndexAnalysis]:
        for r in reports:
            if r.classification is BlobClass.STRUCTURED_METADATA and isinstance(r.document, dict):
                return analyze_index(r.document, source=f"blob:{r.descriptor.tag}")
        if directory is not None and directory.has_index_metadata:
            return IndexAnalysis(directory.schema, directory.segments, source="directory")
        return None


def inspect_bytes(data: bytes) -> Inspection:
    return ArchiveInspector(data).inspect()
