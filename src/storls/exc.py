import typing as t


class StorlsError(Exception):
    """Super-type of all errors raised by storls code"""

    def __init__(self, msg: str, code_space: str = "GEN", code_number: int = None, is_recoverable: bool = False):
        self.internal_code = "" if code_number is None else f"{code_space}-{code_number}"
        super().__init__(f"{msg} [{self.internal_code}]")
        self.is_recoverable = is_recoverable


class ConfigError(StorlsError):

    def __init__(self, key: str, value: t.Any = None, code_number: int = None):
        super().__init__(f"Invalid configuration value [{key}={value!r}]", "CONFIG", code_number)
        self.key = key
        self.value = value


class RecordSerializationError(StorlsError):
    """Raised when a display record cannot be converted to its structured form."""

    def __init__(self, msg: str, code_number: int = 1000):
        super().__init__(msg, "RECORD", code_number)


class RecordParseError(StorlsError):
    """Raised when a structured record cannot be parsed back into a display record."""

    def __init__(self, msg: str, code_number: int = 1100):
        super().__init__(msg, "RECORD", code_number)
