from __future__ import annotations

import json
import unittest

from ttvreader.classify import BlobClass, classify
from ttvreader.constants import TAIL_SCAN_WINDOW, U64_MAX
from ttvreader.directory import BlobDescriptor, decode_directory, parse_blob_descriptor
from ttvreader.errors import BlobBoundsError
from ttvreader.extract import extract_blob
from ttvreader.fields import get_u64
from ttvreader.header import check_header
from ttvreader.index import IndexAnalysis, SchemaEntry, SegmentEntry, analyze_index
from ttvreader.locator import balance_braces, find_directory_start, locate_directory
from ttvreader.terms import extract_terms


def _desc(offset: int, length: int, tag: str = "blob") -> BlobDescriptor:
    return BlobDescriptor(tag=tag, kind="opaque", offset=offset, length=length)


class HeaderTests(unittest.TestCase):
    def test_short_buffers_mismatch_without_error(self):
        for data in (b"", b"P", b"PF", b"PFA"):
            res = check_header(data)
            self.assertFalse(res.valid)
            self.assertEqual(res.observed, data)

    def test_magic_is_valid(self):
        self.assertTrue(check_header(b"PFA1").valid)
        self.assertTrue(check_header(b"PFA1\x00\x01rest").valid)

    def test_mismatch_carries_observed_bytes(self):
        res = check_header(b"PFA2xyz")
        self.assertFalse(res.valid)
        self.assertEqual(res.observed, b"PFA2")
        self.assertEqual(res.observed_hex, "50 46 41 32")


class LocatorTests(unittest.TestCase):
    def test_no_marker(self):
        self.assertIsNone(find_directory_start(b"PFA1 nothing here {}"))
        self.assertIsNone(locate_directory(b"PFA1 nothing here {}"))

    def test_marker_outside_tail_window_is_ignored(self):
        data = b'{"blobs":{}}' + b"\x00" * TAIL_SCAN_WINDOW
        self.assertIsNone(locate_directory(data))
        # Moving it inside the window makes it visible
        data = b"\x00" * TAIL_SCAN_WINDOW + b'{"blobs":{}}'
        self.assertEqual(locate_directory(data), (TAIL_SCAN_WINDOW, TAIL_SCAN_WINDOW + 12))

    def test_exact_range_regardless_of_trailing_bytes(self):
        doc = b'{"blobs":{"x":1}}'
        for trailer in (b"", b"}}}", b"\x00\x01{{", b"PFA1"):
            data = b"junk" + doc + trailer
            self.assertEqual(locate_directory(data), (4, 4 + len(doc)))

    def test_unbalanced_directory_is_absent(self):
        self.assertIsNone(locate_directory(b'PFA1{"blobs":[{"offset":4}'))

    def test_brace_inside_string_still_counts(self):
        data = b'{"blobs":[],"note":"}"}'
        span = locate_directory(data)
        # The scan closes on the brace inside the string value
        self.assertEqual(span, (0, data.index(b"}") + 1))
        self.assertIsNone(decode_directory(data, span))

    def test_scanner_is_pluggable(self):
        data = b'xx{"blobs":[]}yy'
        self.assertEqual(locate_directory(data, scanner=lambda d, s: len(d)), (2, len(data)))
        self.assertEqual(balance_braces(data, 2), len(data) - 2)


class DirectoryTests(unittest.TestCase):
    def test_descriptors_in_order(self):
        doc = {
            "blobs": [
                {"type": "t%d" % i, "offset": i * 10, "length": i, "properties": {"blob_tag": "tag%d" % i}}
                for i in range(5)
            ]
        }
        raw = json.dumps(doc).encode("utf-8")
        directory = decode_directory(raw, (0, len(raw)))
        self.assertIsNotNone(directory)
        self.assertEqual(len(directory), 5)
        self.assertEqual([d.tag for d in directory], ["tag0", "tag1", "tag2", "tag3", "tag4"])
        self.assertEqual([d.offset for d in directory], [0, 10, 20, 30, 40])
        self.assertIsNone(directory.schema)
        self.assertIsNone(directory.segments)

    def test_invalid_utf8_and_json_degrade_to_none(self):
        bad_utf8 = b'{"blobs":["\xff\xfe"]}'
        self.assertIsNone(decode_directory(bad_utf8, (0, len(bad_utf8))))
        bad_json = b'{"blobs":[1,,2]}'
        self.assertIsNone(decode_directory(bad_json, (0, len(bad_json))))
        not_object = b"[1, 2]"
        self.assertIsNone(decode_directory(not_object, (0, len(not_object))))

    def test_embedded_index_metadata(self):
        doc = {
            "blobs": [],
            "schema": [{"name": "body", "options": {"indexing": {}, "stored": True}}, {"type": "u64"}],
            "segments": [{"segment_id": "d0", "max_doc": 4}, {"max_doc": -1}],
        }
        raw = json.dumps(doc).encode("utf-8")
        directory = decode_directory(raw, (0, len(raw)))
        self.assertEqual(
            directory.schema,
            [SchemaEntry("body", "unknown", True, True), SchemaEntry("unknown", "u64", False, False)],
        )
        self.assertEqual(directory.segments, [SegmentEntry("d0", 4), SegmentEntry("unknown", 0)])
        self.assertTrue(directory.has_index_metadata)

        raw = json.dumps({"blobs": [], "segments": []}).encode("utf-8")
        directory = decode_directory(raw, (0, len(raw)))
        self.assertIsNone(directory.schema)
        self.assertEqual(directory.segments, [])

    def test_descriptor_defaults(self):
        d = parse_blob_descriptor({})
        self.assertEqual((d.tag, d.kind, d.offset, d.length), ("unknown", "unknown", 0, 0))
        d = parse_blob_descriptor("not an object")
        self.assertEqual((d.tag, d.offset), ("unknown", 0))
        d = parse_blob_descriptor({"offset": -4, "length": True, "type": 7, "properties": {"blob_tag": 3}})
        self.assertEqual((d.tag, d.kind, d.offset, d.length), ("unknown", "unknown", 0, 0))

    def test_compression_codec(self):
        d = parse_blob_descriptor({"compression-codec": "zstd", "properties": {"blob_tag": "a"}})
        self.assertEqual(d.compression_codec, "zstd")
        self.assertIsNone(parse_blob_descriptor({"compression-codec": ""}).compression_codec)

    def test_u64_rejects_out_of_range(self):
        self.assertEqual(get_u64({"n": 1 << 64}, "n"), 0)
        self.assertEqual(get_u64({"n": 3.0}, "n"), 0)
        self.assertEqual(get_u64({"n": U64_MAX}, "n"), U64_MAX)


class ExtractorTests(unittest.TestCase):
    def test_out_of_range(self):
        with self.assertRaises(BlobBoundsError):
            extract_blob(b"abc", _desc(0, 5))
        with self.assertRaises(BlobBoundsError):
            extract_blob(b"abc", _desc(4, 0))

    def test_in_range_view(self):
        data = b"PFA1hello world"
        blob = extract_blob(data, _desc(4, 5))
        self.assertEqual((blob.start, blob.end), (4, 9))
        self.assertEqual(blob.tobytes(), b"hello")
        self.assertEqual(len(blob), 5)
        with self.assertRaises(BlobBoundsError):
            extract_blob(data, _desc(-1, 3))
        with self.assertRaises(BlobBoundsError):
            extract_blob(data, _desc(2, -1))
        empty = extract_blob(data, _desc(len(data), 0))
        self.assertEqual(empty.tobytes(), b"")


class ClassifierTests(unittest.TestCase):
    def test_precedence_and_substring(self):
        self.assertIs(classify("segment.term.meta.json"), BlobClass.STRUCTURED_METADATA)
        self.assertIs(classify("meta.json"), BlobClass.STRUCTURED_METADATA)
        self.assertIs(classify("segment_03.term.gz"), BlobClass.TERM_DICTIONARY)
        self.assertIs(classify("abc.term", kind="anything"), BlobClass.TERM_DICTIONARY)
        self.assertIs(classify("abc.idx"), BlobClass.OPAQUE_BINARY)
        self.assertIs(classify("unknown"), BlobClass.OPAQUE_BINARY)


class TermTests(unittest.TestCase):
    def test_short_runs_dropped(self):
        self.assertEqual(extract_terms(b"ab\x00cde\x00f\x00ghi\x00"), ["cde", "ghi"])

    def test_run_at_end_of_input_is_not_emitted(self):
        self.assertEqual(extract_terms(b"ab\x00cde\x00f\x00ghi"), ["cde"])
        self.assertEqual(extract_terms(b"hello"), [])

    def test_printable_bounds(self):
        # 0x1f and 0x7f are boundaries; space and tilde are printable
        self.assertEqual(extract_terms(b"\x1f a~\x7fxyz\x80"), [" a~", "xyz"])

    def test_empty(self):
        self.assertEqual(extract_terms(b""), [])
        self.assertEqual(extract_terms(b"\x00\x01\x02"), [])


class IndexAnalyzerTests(unittest.TestCase):
    def test_total_documents(self):
        res = analyze_index(
            {"segments": [{"segment_id": "s0", "max_doc": 0}, {"segment_id": "s1", "max_doc": 12}]}
        )
        self.assertEqual([s.segment_id for s in res.segments], ["s0", "s1"])
        self.assertEqual(res.total_documents, 12)
        self.assertFalse(res.is_empty)

    def test_empty_segments(self):
        res = analyze_index({"segments": []})
        self.assertEqual(res.segments, [])
        self.assertEqual(res.total_documents, 0)
        self.assertTrue(res.is_empty)

    def test_absent_arrays(self):
        res = analyze_index({"schema": "nope"})
        self.assertIsNone(res.schema)
        self.assertIsNone(res.segments)
        self.assertEqual(res.total_documents, 0)
        self.assertIsNone(analyze_index([1, 2, 3]).schema)

    def test_schema_flags(self):
        res = analyze_index(
            {
                "schema": [
                    {"name": "body", "type": "text", "options": {"indexing": {"record": "position"}, "stored": True}},
                    {"name": "id", "type": "u64", "options": {"stored": "yes"}},
                    {"name": "a", "type": "text", "options": {"indexing": None}},
                    {"name": "b", "type": "text", "options": {"indexing": "basic"}},
                    {"options": 5},
                ]
            }
        )
        self.assertEqual(
            [(f.name, f.type, f.indexed, f.stored) for f in res.schema],
            [
                ("body", "text", True, True),
                ("id", "u64", False, False),
                ("a", "text", False, False),
                ("b", "text", False, False),
                ("unknown", "unknown", False, False),
            ],
        )

    def test_segment_defaults(self):
        res = analyze_index({"segments": [{"max_doc": -3}, {"segment_id": 9, "max_doc": "7"}, None]})
        self.assertEqual([(s.segment_id, s.document_count) for s in res.segments], [("unknown", 0)] * 3)

    def test_total_is_recomputed_and_saturates(self):
        res = IndexAnalysis(schema=None, segments=[SegmentEntry("a", 5)])
        self.assertEqual(res.total_documents, 5)
        res.segments.append(SegmentEntry("b", 7))
        self.assertEqual(res.total_documents, 12)
        res.segments.append(SegmentEntry("c", U64_MAX))
        self.assertEqual(res.total_documents, U64_MAX)


class PackageTests(unittest.TestCase):
    def test_all_lists_importable_modules(self):
        import importlib

        import ttvreader

        for name in ("errors", "codec", "fields", "hexdump"):
            self.assertIn(name, ttvreader.__all__)
        for name in ttvreader.__all__:
            importlib.import_module(f"ttvreader.{name}")


if __name__ == "__main__":
    unittest.main()
