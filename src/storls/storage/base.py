from __future__ import annotations
import datetime
import errno
import functools
import typing as t
from urllib.parse import urlparse, ParseResult
import zrlog
from storls.exc import StorlsError
from storls.util import HaltFlag


class StorageEntry(t.NamedTuple):
    """One item found while listing a storage location."""

    path: str
    is_dir: bool
    size: int = 0
    modified: t.Optional[datetime.datetime] = None
    separator: str = "/"

    def with_path(self, path: str) -> StorageEntry:
        """Copy of this entry pointing at a different path."""
        return self._replace(path=path)


class ListingItem(t.NamedTuple):
    """Result of pulling one item from a listing; exactly one of entry and error is set."""

    entry: t.Optional[StorageEntry] = None
    error: t.Optional[BaseException] = None

    @staticmethod
    def ok(entry: StorageEntry) -> ListingItem:
        return ListingItem(entry, None)

    @staticmethod
    def failed(error: BaseException) -> ListingItem:
        return ListingItem(None, error)


class StorageError(StorlsError):
    """Error class specifically for storage errors."""

    def __init__(self, msg, code, is_recoverable: bool = False, location: t.Optional[str] = None):
        super().__init__(msg, "STORAGE", code, is_recoverable=is_recoverable)
        self.location = location


class BrokenSymlinkError(StorageError):

    def __init__(self, location: str):
        super().__init__(f"Broken symbolic link [{location}]", 1010, location=location)


class TooManySymlinkLevelsError(StorageError):

    def __init__(self, location: str):
        super().__init__(f"Too many levels of symbolic links [{location}]", 1011, location=location)


class PathNotFoundError(StorageError):

    def __init__(self, location: str):
        super().__init__(f"Path not found [{location}]", 1012, location=location)


class InsufficientPermissionError(StorageError):

    def __init__(self, location: str):
        super().__init__(f"Insufficient permission [{location}]", 1013, True, location=location)


class RootResolutionError(StorageError):
    """The queried location itself could not be resolved; fatal to the whole listing."""

    def __init__(self, location: str, reason: str = "Unable to resolve location"):
        super().__init__(f"{reason} [{location}]", 1020, location=location)


def os_error_to_storage_error(ex: OSError, location: str) -> StorageError:
    """Convert an OSError raised while touching [location] into the matching StorageError."""
    if ex.errno == errno.ELOOP:
        return TooManySymlinkLevelsError(location)
    elif isinstance(ex, PermissionError) or ex.errno in (errno.EACCES, errno.EPERM):
        return InsufficientPermissionError(location)
    elif isinstance(ex, (FileNotFoundError, NotADirectoryError)) or ex.errno in (errno.ENOENT, errno.ENOTDIR):
        return PathNotFoundError(location)
    return StorageError(f"Exception processing local file: {ex.__class__.__name__}: {str(ex)}", 1005, location=location)


def local_file_error_wrap(cb):
    """Converts typical local file-system errors raised by a handle method into StorageErrors."""

    @functools.wraps(cb)
    def _inner(self, *args, **kwargs):
        try:
            return cb(self, *args, **kwargs)
        except StorageError:
            raise
        except OSError as ex:
            raise os_error_to_storage_error(ex, self.path()) from ex

    return _inner


class BaseStorageHandle:
    """A location that can be resolved to a queried root and listed."""

    def __init__(self, *args, halt_flag: HaltFlag = None, **kwargs):
        self._cached_properties = {}
        self._halt_flag = halt_flag
        self._log = zrlog.get_logger("storls.storage")

    def __str__(self):
        return self.path()

    def _with_cache(self, key: str, callback: callable, *args, clear_cache: bool = False, **kwargs):
        if clear_cache or key not in self._cached_properties:
            self._cached_properties[key] = callback(*args, **kwargs)
        return self._cached_properties[key]

    def path(self) -> str:
        """Get a string representation of this path that could be used to rebuild it."""
        raise NotImplementedError

    def resolve_root(self, clear_cache: bool = False) -> StorageEntry:
        """Describe the location itself, raising RootResolutionError if that is not possible."""
        return self._with_cache('root', self._resolve_root_wrapped, clear_cache=clear_cache)

    def _resolve_root_wrapped(self) -> StorageEntry:
        try:
            return self._resolve_root()
        except RootResolutionError:
            raise
        except StorlsError as ex:
            raise RootResolutionError(self.path(), str(ex)) from ex

    def _resolve_root(self) -> StorageEntry:
        raise NotImplementedError

    def list(self, recursive: bool = False, include_incomplete: bool = False) -> t.Iterable[ListingItem]:
        """Lazily list the contents of this location.

            Per-entry failures are yielded as ListingItems carrying the error rather than
            being raised, so that one bad entry does not end the listing. Raising the halt flag
            ends the listing with a HaltInterrupt.
        """
        yield from HaltFlag.iterate(self._list(recursive, include_incomplete), self._halt_flag)

    def _list(self, recursive: bool, include_incomplete: bool) -> t.Iterable[ListingItem]:
        raise NotImplementedError

    @staticmethod
    def supports(file_path: str) -> bool:
        """Check if this handle class supports the given file path."""
        raise NotImplementedError

    @classmethod
    def build(cls, file_path: str, halt_flag: HaltFlag = None) -> BaseStorageHandle:
        """Construct a handle from the given file path."""
        return cls(file_path, halt_flag=halt_flag)


class UrlBaseHandle(BaseStorageHandle):
    """General implementation of url-based handles."""

    def __init__(self, url: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._url = url

    def parse_url(self) -> ParseResult:
        """Get the parts of the URL."""
        return self._with_cache('_parse_url', urlparse, self._url)

    def path(self) -> str:
        return self._url
