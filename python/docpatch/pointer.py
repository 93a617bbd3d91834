"""Implements JSON pointers based on RFC 6901: https://www.rfc-editor.org/rfc/rfc6901."""

from typing import Iterable, Tuple

from .constants import (
    END_OF_ARRAY_MARKER,
    ESCAPED_DELIMITER,
    ESCAPED_ESCAPE_CHARACTER,
    POINTER_DELIMITER,
    POINTER_ESCAPE_CHARACTER,
)
from .errors import EmptyReferenceTokenError, MissingDelimiterError, MustStartWithDelimiterError

__all__ = ["END_OF_ARRAY_MARKER", "JsonPointer"]


def _decode_token(token: str) -> str:
    """Resolve escaped characters ~ and /."""
    # the order of the replace statements is important, do not change without
    # consulting the RFC
    return token.replace(ESCAPED_DELIMITER, POINTER_DELIMITER).replace(
        ESCAPED_ESCAPE_CHARACTER, POINTER_ESCAPE_CHARACTER
    )


def _encode_token(token: str) -> str:
    return token.replace(POINTER_ESCAPE_CHARACTER, ESCAPED_ESCAPE_CHARACTER).replace(
        POINTER_DELIMITER, ESCAPED_DELIMITER
    )


class JsonPointer:
    """
    Immutable, parsed JSON pointer.

    'raw' is the pointer as it was written, 'tokens' are the unescaped reference tokens.
    An empty pointer references the whole document.
    """

    __slots__ = ("_raw", "_tokens")

    def __init__(self, raw: str, error_path: str = "") -> None:
        if raw == "":
            # pointer to the root
            tokens: Tuple[str, ...] = ()

        else:
            if POINTER_DELIMITER not in raw:
                raise MissingDelimiterError(raw, error_path)
            if not raw.startswith(POINTER_DELIMITER):
                raise MustStartWithDelimiterError(raw, error_path)

            segments = raw.split(POINTER_DELIMITER)[1:]
            if "" in segments:
                raise EmptyReferenceTokenError(raw, error_path)
            tokens = tuple(_decode_token(seg) for seg in segments)

        self._raw = raw
        self._tokens = tokens

    @staticmethod
    def parse(raw: str, error_path: str = "") -> "JsonPointer":
        return JsonPointer(raw, error_path)

    @staticmethod
    def from_tokens(tokens: Iterable[str]) -> "JsonPointer":
        encoded = [_encode_token(tok) for tok in tokens]
        if not encoded:
            return ROOT
        return JsonPointer(POINTER_DELIMITER + POINTER_DELIMITER.join(encoded))

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._tokens

    @property
    def is_root(self) -> bool:
        return len(self._tokens) == 0

    @property
    def first(self) -> str:
        if self.is_root:
            raise ValueError("the root pointer has no reference tokens")
        return self._tokens[0]

    @property
    def last(self) -> str:
        if self.is_root:
            raise ValueError("the root pointer has no reference tokens")
        return self._tokens[-1]

    def tail(self) -> "JsonPointer":
        """Pointer over all tokens after the first one, relative to the first token's target."""

        if self.is_root:
            raise ValueError("cannot take the tail of the root pointer")

        # the raw segments are still escaped, so they can be joined back as they are
        rest = self._raw.split(POINTER_DELIMITER)[2:]
        if not rest:
            return ROOT
        return JsonPointer(POINTER_DELIMITER + POINTER_DELIMITER.join(rest))

    def parent(self) -> "JsonPointer":
        if self.is_root:
            raise ValueError("the root pointer has no parent")
        return JsonPointer.from_tokens(self._tokens[:-1])

    def is_prefix_of(self, other: "JsonPointer") -> bool:
        """True if 'other' points to this pointer's target or anywhere below it."""

        return other._tokens[: len(self._tokens)] == self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonPointer):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"JsonPointer({self._raw!r})"


ROOT = JsonPointer("")
