from __future__ import annotations
import datetime
import enum
import json
import math
import typing as t
import click
from storls.exc import RecordSerializationError, RecordParseError
from storls.storage.base import StorageEntry
from .paths import SeparatorStyle, normalize
from .trim import PrefixTrimmer

PRINT_DATE = "%Y-%m-%d %H:%M:%S %Z"

IEC_UNITS = ["B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB"]

TAG_STYLES = {
    "Time": {"fg": "green"},
    "Size": {"fg": "yellow"},
    "Dir": {"fg": "blue", "bold": True},
    "File": {},
}


class EntryKind(enum.Enum):

    FILE = "file"
    FOLDER = "folder"


def human_size(size: int) -> str:
    """Bytes in IEC units: 512 B, 1.0 KiB, 10 KiB, 1.5 MiB."""
    if size < 10:
        return f"{size} B"
    exp = 0
    while exp < len(IEC_UNITS) - 1 and size >= 1024 ** (exp + 1):
        exp += 1
    val = math.floor(size / (1024 ** exp) * 10 + 0.5) / 10
    if val >= 10:
        return f"{val:.0f} {IEC_UNITS[exp]}"
    return f"{val:.1f} {IEC_UNITS[exp]}"


def colorize(tag: str, text: str, color: bool = True) -> str:
    if not color:
        return text
    return click.style(text, **TAG_STYLES.get(tag, {}))


def to_local_time(value: t.Optional[datetime.datetime], tz: t.Optional[datetime.tzinfo] = None) -> t.Optional[datetime.datetime]:
    """Convert to local time (or to tz); naive values are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(tz)


class DisplayRecord(t.NamedTuple):
    """One printable line of a listing."""

    kind: EntryKind
    timestamp: t.Optional[datetime.datetime]
    size_bytes: int
    relative_key: str

    def is_folder(self) -> bool:
        return self.kind is EntryKind.FOLDER

    def to_map(self) -> dict:
        return {
            "type": self.kind.value,
            "lastModified": self.timestamp.isoformat() if self.timestamp is not None else None,
            "size": self.size_bytes,
            "key": self.relative_key,
        }

    def to_json(self) -> str:
        try:
            return json.dumps(self.to_map())
        except (TypeError, ValueError) as ex:
            raise RecordSerializationError(f"Unable to serialize record [{self.relative_key}]: {ex}") from ex

    def human_line(self, color: bool = True) -> str:
        if self.timestamp is not None:
            time_text = self.timestamp.strftime(PRINT_DATE)
        else:
            time_text = "-" * 19
        message = colorize("Time", f"[{time_text}] ", color)
        message += colorize("Size", f"{human_size(self.size_bytes):>6} ", color)
        message += colorize("Dir" if self.is_folder() else "File", self.relative_key, color)
        return message

    @staticmethod
    def from_map(map_: dict) -> DisplayRecord:
        for key in ("type", "lastModified", "size", "key"):
            if key not in map_:
                raise RecordParseError(f"Missing record field [{key}]", 1101)
        try:
            kind = EntryKind(map_["type"])
        except ValueError as ex:
            raise RecordParseError(f"Invalid record type [{map_['type']}]", 1102) from ex
        timestamp = None
        if map_["lastModified"] is not None:
            try:
                timestamp = datetime.datetime.fromisoformat(map_["lastModified"])
            except (TypeError, ValueError) as ex:
                raise RecordParseError(f"Invalid record timestamp [{map_['lastModified']}]", 1103) from ex
        if isinstance(map_["size"], bool) or not isinstance(map_["size"], int):
            raise RecordParseError(f"Invalid record size [{map_['size']}]", 1104)
        if not isinstance(map_["key"], str):
            raise RecordParseError(f"Invalid record key [{map_['key']}]", 1105)
        return DisplayRecord(kind, timestamp, map_["size"], map_["key"])

    @staticmethod
    def from_json(text: str) -> DisplayRecord:
        try:
            map_ = json.loads(text)
        except ValueError as ex:
            raise RecordParseError(f"Invalid JSON record", 1100) from ex
        if not isinstance(map_, dict):
            raise RecordParseError(f"JSON record is not an object", 1100)
        return DisplayRecord.from_map(map_)


def format_entry(entry: StorageEntry, style: SeparatorStyle, tz: t.Optional[datetime.tzinfo] = None) -> DisplayRecord:
    """Build the display record of an entry whose path has already been trimmed."""
    return DisplayRecord(
        kind=EntryKind.FOLDER if entry.is_dir else EntryKind.FILE,
        timestamp=to_local_time(entry.modified, tz),
        size_bytes=entry.size,
        relative_key=normalize(entry.path, entry.is_dir, style),
    )


class EntryFormatter:
    """Trims and formats entries relative to a queried root."""

    def __init__(self, style: SeparatorStyle, tz: t.Optional[datetime.tzinfo] = None):
        self.style = style
        self.tz = tz

    def format(self, queried_root: StorageEntry, entry: StorageEntry) -> DisplayRecord:
        return self.format_trimmed(PrefixTrimmer(queried_root).trim(entry))

    def format_trimmed(self, entry: StorageEntry) -> DisplayRecord:
        return format_entry(entry, self.style, self.tz)
