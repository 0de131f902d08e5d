"""Local file handle"""
import datetime
import errno
import os
import pathlib
import stat
import typing as t
from .base import (
    BaseStorageHandle, StorageEntry, ListingItem, local_file_error_wrap, os_error_to_storage_error,
    BrokenSymlinkError, TooManySymlinkLevelsError
)
from storls.util import HaltFlag


class LocalHandle(BaseStorageHandle):
    """Handle for a directory or file stored on a local disk or accessible network drive.

        Entry paths are absolute native paths. The queried root of a directory always
        ends with the native separator. Symbolic links are reported as the thing they
        point to; symlinked directories are listed but never descended into, which
        keeps recursive listings free of cycles.
    """

    def __init__(self, path: pathlib.Path, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._path = path.expanduser().absolute()

    def path(self) -> str:
        return str(self._path)

    @local_file_error_wrap
    def stat(self, clear_cache: bool = False) -> os.stat_result:
        """Retrieve the stat information about the file handle."""
        return self._with_cache('stat', self._path.stat, clear_cache=clear_cache)

    def _resolve_root(self) -> StorageEntry:
        st = self.stat()
        is_dir = stat.S_ISDIR(st.st_mode)
        path = str(self._path)
        if is_dir and not path.endswith(os.sep):
            path += os.sep
        return self._build_entry(path, st, is_dir)

    @staticmethod
    def _build_entry(path: str, st: os.stat_result, is_dir: bool) -> StorageEntry:
        return StorageEntry(
            path=path,
            is_dir=is_dir,
            size=0 if is_dir else st.st_size,
            modified=datetime.datetime.fromtimestamp(st.st_mtime, datetime.timezone.utc),
            separator=os.sep,
        )

    def _list(self, recursive: bool, include_incomplete: bool) -> t.Iterable[ListingItem]:
        root = self.resolve_root()
        if not root.is_dir:
            yield ListingItem.ok(root)
        elif recursive:
            yield from self._walk(self._path)
        else:
            for child in self._children(self._path):
                if isinstance(child, ListingItem):
                    yield child
                else:
                    yield self._entry_item(child)

    def _walk(self, directory: pathlib.Path) -> t.Iterable[ListingItem]:
        for child in HaltFlag.iterate(self._children(directory), self._halt_flag):
            if isinstance(child, ListingItem):
                yield child
                continue
            # lstat so symlinked directories are never descended into
            try:
                st = child.lstat()
            except OSError as ex:
                self._log.debug(f"Unable to stat [{child}]: {ex}")
                yield ListingItem.failed(os_error_to_storage_error(ex, str(child)))
                continue
            if stat.S_ISDIR(st.st_mode):
                yield from self._walk(child)
            else:
                yield self._entry_item(child)

    def _children(self, directory: pathlib.Path) -> t.Iterable[t.Union[pathlib.Path, ListingItem]]:
        try:
            children = sorted(directory.iterdir())
        except OSError as ex:
            self._log.debug(f"Unable to read directory [{directory}]: {ex}")
            yield ListingItem.failed(os_error_to_storage_error(ex, str(directory)))
            return
        yield from children

    def _entry_item(self, path: pathlib.Path) -> ListingItem:
        try:
            st = path.stat()
        except OSError as ex:
            if ex.errno == errno.ELOOP:
                return ListingItem.failed(TooManySymlinkLevelsError(str(path)))
            if isinstance(ex, FileNotFoundError) and path.is_symlink():
                return ListingItem.failed(BrokenSymlinkError(str(path)))
            return ListingItem.failed(os_error_to_storage_error(ex, str(path)))
        is_dir = stat.S_ISDIR(st.st_mode)
        return ListingItem.ok(self._build_entry(str(path), st, is_dir))

    @staticmethod
    def supports(file_path: str) -> bool:
        return True

    @classmethod
    def build(cls, file_path: str, halt_flag: HaltFlag = None) -> BaseStorageHandle:
        if file_path.startswith("file://"):
            return cls(pathlib.Path(file_path[7:]), halt_flag=halt_flag)
        return cls(pathlib.Path(file_path), halt_flag=halt_flag)
