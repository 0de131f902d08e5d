import enum
import errno
import typing as t
import azure.core.exceptions as ace
from storls.storage.base import (
    BrokenSymlinkError, TooManySymlinkLevelsError, PathNotFoundError, InsufficientPermissionError
)


class ErrorCategory(enum.Enum):
    """Why a single entry could not be listed. None of these stop a listing."""

    BROKEN_LINK = 'broken-link'
    TOO_MANY_SYMLINK_LEVELS = 'too-many-symlink-levels'
    PATH_NOT_FOUND = 'path-not-found'
    INSUFFICIENT_PERMISSION = 'insufficient-permission'
    OTHER = 'other'


_FAILURE_MESSAGES = {
    ErrorCategory.BROKEN_LINK: "Unable to list broken link.",
    ErrorCategory.TOO_MANY_SYMLINK_LEVELS: "Unable to list too many levels link.",
}

# Checked in order, so subclasses must precede their parents
_ERROR_TYPES: list[tuple[type, ErrorCategory]] = [
    (BrokenSymlinkError, ErrorCategory.BROKEN_LINK),
    (TooManySymlinkLevelsError, ErrorCategory.TOO_MANY_SYMLINK_LEVELS),
    (PathNotFoundError, ErrorCategory.PATH_NOT_FOUND),
    (InsufficientPermissionError, ErrorCategory.INSUFFICIENT_PERMISSION),
    (ace.ResourceNotFoundError, ErrorCategory.PATH_NOT_FOUND),
    (ace.ClientAuthenticationError, ErrorCategory.INSUFFICIENT_PERMISSION),
    (FileNotFoundError, ErrorCategory.PATH_NOT_FOUND),
    (NotADirectoryError, ErrorCategory.PATH_NOT_FOUND),
    (PermissionError, ErrorCategory.INSUFFICIENT_PERMISSION),
]

_ERRNO_CATEGORIES = {
    errno.ELOOP: ErrorCategory.TOO_MANY_SYMLINK_LEVELS,
    errno.ENOENT: ErrorCategory.PATH_NOT_FOUND,
    errno.ENOTDIR: ErrorCategory.PATH_NOT_FOUND,
    errno.EACCES: ErrorCategory.INSUFFICIENT_PERMISSION,
    errno.EPERM: ErrorCategory.INSUFFICIENT_PERMISSION,
}

_HTTP_STATUS_CATEGORIES = {
    403: ErrorCategory.INSUFFICIENT_PERMISSION,
    404: ErrorCategory.PATH_NOT_FOUND,
}


def _classify_one(error: BaseException) -> t.Optional[ErrorCategory]:
    for error_type, category in _ERROR_TYPES:
        if isinstance(error, error_type):
            return category
    if isinstance(error, OSError) and error.errno in _ERRNO_CATEGORIES:
        return _ERRNO_CATEGORIES[error.errno]
    if isinstance(error, ace.HttpResponseError) and error.status_code in _HTTP_STATUS_CATEGORIES:
        return _HTTP_STATUS_CATEGORIES[error.status_code]
    return None


def classify(error: t.Optional[BaseException]) -> ErrorCategory:
    """Map a listing error to its category; unknown errors are OTHER, never raises."""
    seen = set()
    while error is not None and id(error) not in seen:
        seen.add(id(error))
        category = _classify_one(error)
        if category is not None:
            return category
        error = error.__cause__
    return ErrorCategory.OTHER


def failure_message(category: ErrorCategory) -> str:
    return _FAILURE_MESSAGES.get(category, "Unable to list folder.")


class ListingFailure:
    """A classified failure to list one entry."""

    def __init__(self, error: BaseException, category: t.Optional[ErrorCategory] = None):
        self.error = error
        self.category = classify(error) if category is None else category
        self.message = failure_message(self.category)

    def location(self) -> t.Optional[str]:
        return getattr(self.error, 'location', None)

    def to_map(self) -> dict:
        return {
            'status': 'error',
            'category': self.category.value,
            'message': self.message,
            'error': str(self.error),
            'location': self.location(),
        }

    def __repr__(self):
        return f"ListingFailure({self.category.name}, {self.error!r})"
