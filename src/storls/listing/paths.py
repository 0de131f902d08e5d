import enum
import sys
import typing as t
from storls.exc import ConfigError


class SeparatorStyle(enum.Enum):
    """How separators are rendered in displayed keys."""

    SLASH = "/"
    BACKSLASH = "\\"

    @property
    def separator(self) -> str:
        return self.value

    @staticmethod
    def for_platform(platform_name: t.Optional[str] = None) -> "SeparatorStyle":
        platform_name = sys.platform if platform_name is None else platform_name
        if platform_name in ("win32", "cygwin"):
            return SeparatorStyle.BACKSLASH
        return SeparatorStyle.SLASH

    @staticmethod
    def from_config(value: t.Optional[str], platform_name: t.Optional[str] = None) -> "SeparatorStyle":
        """Parse the separator_style setting: auto, slash or backslash."""
        cleaned = (value or "auto").strip().lower()
        if cleaned == "auto":
            return SeparatorStyle.for_platform(platform_name)
        elif cleaned == "slash":
            return SeparatorStyle.SLASH
        elif cleaned == "backslash":
            return SeparatorStyle.BACKSLASH
        raise ConfigError("storls.separator_style", value, 1000)


def normalize(raw_path: str, is_dir: bool, style: SeparatorStyle) -> str:
    """Render a path with the separators of the given style.

        Exactly one trailing separator is present for directories and none for files.
    """
    if style is SeparatorStyle.BACKSLASH:
        path = raw_path.replace("/", "\\").rstrip("\\")
    else:
        path = raw_path.rstrip("/")
    if is_dir:
        return path + style.separator
    return path
