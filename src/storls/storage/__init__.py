"""
    Provides the storage backends that feed a listing.

    In general, one should use the StorageController to get a handle to a location.
    The handle knows how to describe the location itself (the queried root) and how to
    list what is inside it, regardless of if it is in the cloud or on a local drive.

    Every handle yields ListingItems: either a StorageEntry or the error that prevented
    one entry from being read. Errors on individual entries never end the listing;
    only a failure to resolve the queried location raises (RootResolutionError).

    For URL-based storage, there can be an ambiguity when it comes to a directory name
    vs. a blob name. This component adopts the convention that URL-based directories
    end with a trailing slash (e.g. https://account.blob.core.windows.net/container/dir/)
    and that a location without one is a blob if it exists, otherwise a virtual
    directory if anything is stored beneath it.

    Local file system paths make a system call to determine if something is a
    directory or a file.
"""
from .core import StorageController
from .base import (
    BaseStorageHandle, StorageEntry, ListingItem, StorageError, RootResolutionError,
    BrokenSymlinkError, TooManySymlinkLevelsError, PathNotFoundError, InsufficientPermissionError
)
