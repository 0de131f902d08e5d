import datetime
import json
import unittest as ut
from storls.exc import RecordSerializationError, RecordParseError
from storls.listing.format import DisplayRecord, EntryKind, EntryFormatter, format_entry, human_size
from storls.listing.paths import SeparatorStyle
from storls.storage.base import StorageEntry

UTC = datetime.timezone.utc
EST = datetime.timezone(datetime.timedelta(hours=-5), "EST")
MODIFIED = datetime.datetime(2015, 6, 1, 12, 30, 15, tzinfo=UTC)


class TestHumanSize(ut.TestCase):

    def test_sizes(self):
        cases = [
            (0, "0 B"),
            (9, "9 B"),
            (512, "512 B"),
            (1023, "1023 B"),
            (1024, "1.0 KiB"),
            (1536, "1.5 KiB"),
            (10240, "10 KiB"),
            (1572864, "1.5 MiB"),
            (5 * 1024 ** 3, "5.0 GiB"),
        ]
        for size, expected in cases:
            with self.subTest(size=size):
                self.assertEqual(human_size(size), expected)


class TestFormatEntry(ut.TestCase):

    def test_file(self):
        record = format_entry(StorageEntry("sub/file.txt", False, 1024, MODIFIED), SeparatorStyle.SLASH, UTC)
        self.assertIs(record.kind, EntryKind.FILE)
        self.assertEqual(record.size_bytes, 1024)
        self.assertEqual(record.relative_key, "sub/file.txt")
        self.assertEqual(record.timestamp, MODIFIED)

    def test_folder(self):
        record = format_entry(StorageEntry("sub", True, 0, MODIFIED), SeparatorStyle.SLASH, UTC)
        self.assertIs(record.kind, EntryKind.FOLDER)
        self.assertEqual(record.relative_key, "sub/")

    def test_backslash_style(self):
        record = format_entry(StorageEntry("sub/inner/", True), SeparatorStyle.BACKSLASH)
        self.assertEqual(record.relative_key, "sub\\inner\\")
        record = format_entry(StorageEntry("sub/inner/file.txt", False), SeparatorStyle.BACKSLASH)
        self.assertEqual(record.relative_key, "sub\\inner\\file.txt")

    def test_timezone_conversion(self):
        record = format_entry(StorageEntry("a", False, 1, MODIFIED), SeparatorStyle.SLASH, EST)
        self.assertEqual(record.timestamp.hour, 7)
        self.assertEqual(record.timestamp, MODIFIED)

    def test_naive_timestamp_treated_as_utc(self):
        naive = datetime.datetime(2015, 6, 1, 12, 30, 15)
        record = format_entry(StorageEntry("a", False, 1, naive), SeparatorStyle.SLASH, UTC)
        self.assertEqual(record.timestamp, MODIFIED)

    def test_missing_timestamp(self):
        record = format_entry(StorageEntry("a/", True), SeparatorStyle.SLASH)
        self.assertIsNone(record.timestamp)
        self.assertIsNone(record.to_map()["lastModified"])

    def test_formatter_trims(self):
        formatter = EntryFormatter(SeparatorStyle.SLASH, UTC)
        root = StorageEntry("/bucket/dir/", True)
        record = formatter.format(root, StorageEntry("/bucket/dir/sub/", True, 0, MODIFIED))
        self.assertEqual(record.relative_key, "sub/")
        self.assertTrue(record.is_folder())

    def test_folder_suffix_invariant(self):
        for raw in ("sub", "sub/", "sub//", "/a/sub///"):
            for style in SeparatorStyle:
                with self.subTest(raw=raw, style=style):
                    folder = format_entry(StorageEntry(raw, True), style).relative_key
                    self.assertTrue(folder.endswith(style.separator))
                    self.assertFalse(folder.endswith(style.separator * 2))
                    file = format_entry(StorageEntry(raw, False), style).relative_key
                    self.assertFalse(file.endswith(style.separator))


class TestDisplayRecord(ut.TestCase):

    def test_structured_fields(self):
        record = DisplayRecord(EntryKind.FOLDER, MODIFIED, 0, "sub/")
        map_ = record.to_map()
        self.assertEqual(list(map_.keys()), ["type", "lastModified", "size", "key"])
        self.assertEqual(map_["type"], "folder")
        self.assertEqual(map_["lastModified"], "2015-06-01T12:30:15+00:00")
        self.assertEqual(map_["size"], 0)
        self.assertEqual(map_["key"], "sub/")

    def test_round_trip(self):
        record = DisplayRecord(EntryKind.FILE, MODIFIED.astimezone(EST), 2048, "sub/file.txt")
        parsed = DisplayRecord.from_json(record.to_json())
        self.assertEqual(parsed, record)
        self.assertIs(parsed.kind, EntryKind.FILE)
        self.assertEqual(parsed.timestamp, MODIFIED)

    def test_serialization_failure(self):
        record = DisplayRecord(EntryKind.FILE, MODIFIED, object(), "x")
        with self.assertRaises(RecordSerializationError):
            record.to_json()

    def test_parse_errors(self):
        bad = [
            "not json",
            "[1, 2]",
            json.dumps({"type": "file", "size": 1, "key": "x"}),
            json.dumps({"type": "link", "lastModified": None, "size": 1, "key": "x"}),
            json.dumps({"type": "file", "lastModified": "yesterday", "size": 1, "key": "x"}),
            json.dumps({"type": "file", "lastModified": None, "size": "1", "key": "x"}),
            json.dumps({"type": "file", "lastModified": None, "size": 1, "key": 5}),
        ]
        for text in bad:
            with self.subTest(text=text):
                with self.assertRaises(RecordParseError):
                    DisplayRecord.from_json(text)

    def test_human_line_plain(self):
        record = DisplayRecord(EntryKind.FILE, MODIFIED, 1536, "sub/file.txt")
        self.assertEqual(record.human_line(color=False), "[2015-06-01 12:30:15 UTC] 1.5 KiB sub/file.txt")

    def test_human_line_alignment(self):
        record = DisplayRecord(EntryKind.FOLDER, MODIFIED.astimezone(EST), 0, "sub/")
        self.assertEqual(record.human_line(color=False), "[2015-06-01 07:30:15 EST]    0 B sub/")

    def test_human_line_colored_keeps_content(self):
        record = DisplayRecord(EntryKind.FOLDER, MODIFIED, 0, "sub/")
        line = record.human_line(color=True)
        self.assertIn("\x1b[", line)
        self.assertIn("sub/", line)
        self.assertIn("2015-06-01 12:30:15 UTC", line)
