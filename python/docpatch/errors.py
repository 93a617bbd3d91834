from __future__ import annotations

from typing import Optional


class DocpatchError(Exception):
    """Base exception class for all docpatch errors."""

    def __init__(self, msg: str, error_path: str = "") -> None:
        super().__init__(msg)
        self._msg = f"[{error_path}] {msg}" if error_path else msg
        self._error_path = error_path

    def where(self) -> str:
        return self._error_path

    def __str__(self) -> str:
        return self._msg


class ParseError(DocpatchError):
    """Exception class for errors detected while parsing pointers and patches."""


class PointerError(ParseError):
    """Exception class for malformed JSON pointers."""


class MissingDelimiterError(PointerError):
    def __init__(self, raw: str, error_path: str = "") -> None:
        super().__init__(f"JSON pointer '{raw}' invalid: values are delimited by a '/' character", error_path)


class MustStartWithDelimiterError(PointerError):
    def __init__(self, raw: str, error_path: str = "") -> None:
        super().__init__(
            f"JSON pointer '{raw}' invalid: the first character MUST be '/' or the pointer must be empty", error_path
        )


class EmptyReferenceTokenError(PointerError):
    def __init__(self, raw: str, error_path: str = "") -> None:
        super().__init__(f"JSON pointer '{raw}' invalid: reference tokens must not be empty", error_path)


class InvalidJsonFormatError(ParseError):
    pass


class BadStringEncodingError(ParseError):
    pass


class EmptyPatchArrayError(ParseError):
    def __init__(self) -> None:
        super().__init__("patch cannot be an empty array")


class InvalidRootElementError(ParseError):
    def __init__(self, found: str) -> None:
        super().__init__(f"patch must be an object or an array, got {found}")


class MissingOperationError(ParseError):
    def __init__(self, error_path: str) -> None:
        super().__init__("patch operation must include string element 'op'", error_path)


class InvalidOperationError(ParseError):
    pass


class MissingPathError(ParseError):
    def __init__(self, error_path: str) -> None:
        super().__init__("patch operation must include string element 'path'", error_path)


class MissingFromError(ParseError):
    def __init__(self, op: str, error_path: str) -> None:
        super().__init__(f"'{op}' operation must include string element 'from'", error_path)


class MissingValueError(ParseError):
    def __init__(self, op: str, error_path: str, allow_null: bool = False) -> None:
        requirement = "element 'value'" if allow_null else "non-null element 'value'"
        super().__init__(f"'{op}' operation must include {requirement}", error_path)


class ApplyError(DocpatchError):
    """
    Exception class for errors detected while applying a patch.

    The error path is the pointer that failed to resolve. When raised from a patch, 'step' holds
    the index of the operation that failed.
    """

    def __init__(self, msg: str, error_path: str = "") -> None:
        super().__init__(msg, error_path)
        self.step: Optional[int] = None

    def __str__(self) -> str:
        if self.step is None:
            return self._msg
        return f"operation {self.step} failed: {self._msg}"


class PathNotFoundError(ApplyError):
    pass


class EndOfArrayMarkerError(PathNotFoundError):
    def __init__(self, error_path: str) -> None:
        super().__init__("the end-of-array marker '-' is not supported", error_path)


class InvalidJsonError(ApplyError):
    pass


class ArrayIndexOutOfBoundsError(ApplyError):
    def __init__(self, index: int, length: int, error_path: str) -> None:
        super().__init__(f"cannot add at index {index} into an array of length {length}", error_path)


class TestFailedError(ApplyError):
    __test__ = False  # not a pytest test class


class MoveIntoDescendantError(ApplyError):
    def __init__(self, source: str, error_path: str) -> None:
        super().__init__(f"cannot move value at '{source}' into its own child", error_path)


class DataParsingError(DocpatchError):
    """Exception class for documents that are not valid JSON or YAML."""


class ConfigError(DocpatchError):
    """Exception class for invalid configuration."""
