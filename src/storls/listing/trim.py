from storls.storage.base import StorageEntry


def _strip_prefix(value: str, prefix: str) -> str:
    if prefix and value.startswith(prefix):
        return value[len(prefix):]
    return value


class PrefixTrimmer:
    """Turns entry paths into paths relative to the queried root up to its last separator.

        Listing /data/dir/ displays file.txt and sub/file.txt, while listing /data/dir
        (no trailing separator) displays dir/file.txt. Listing the top of a namespace
        ("/") displays entry paths without their leading separator. When the queried
        root is a file, paths are displayed unchanged.

        The prefix is computed once per root; trimming itself has no state.
    """

    def __init__(self, queried_root: StorageEntry):
        self.queried_root = queried_root
        self._root_is_separator = queried_root.path == queried_root.separator
        self.trim_prefix = self._compute_trim_prefix(queried_root)

    @staticmethod
    def _compute_trim_prefix(queried_root: StorageEntry) -> str:
        if not queried_root.is_dir:
            return ""
        sep = queried_root.separator
        if queried_root.path == sep:
            return sep
        # Up to and including the last separator, without a leading one
        prefix = queried_root.path[:queried_root.path.rfind(sep) + 1]
        return _strip_prefix(prefix, sep)

    def relative_key(self, entry: StorageEntry) -> str:
        if not self.queried_root.is_dir:
            return entry.path
        if self._root_is_separator:
            return _strip_prefix(entry.path, self.trim_prefix)
        path = _strip_prefix(entry.path, entry.separator)
        return _strip_prefix(path, self.trim_prefix)

    def trim(self, entry: StorageEntry) -> StorageEntry:
        """Copy of the entry whose path is relative to the queried root's parent."""
        key = self.relative_key(entry)
        if key == entry.path:
            return entry
        return entry.with_path(key)


def trim(queried_root: StorageEntry, entry: StorageEntry) -> StorageEntry:
    return PrefixTrimmer(queried_root).trim(entry)
