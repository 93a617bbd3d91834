import json
from typing import Any, Iterator, List, Sequence, Tuple, Union

from .errors import (
    BadStringEncodingError,
    DataParsingError,
    EmptyPatchArrayError,
    InvalidJsonFormatError,
    InvalidRootElementError,
)
from .operation import AnyOperation, parse_operation
from .utils.parsing import parse_json
from .value import kind_name


class Patch:
    """
    Ordered, non-empty sequence of RFC 6902 operations.

    Build it with 'Patch.parse()' from JSON text (str or UTF-8 bytes), or with 'Patch.from_json()' from an already
    decoded JSON value.
    A JSON object is a patch with a single operation, a JSON array holds the operations in the order
    they are applied.
    """

    __slots__ = ("_operations",)

    def __init__(self, operations: Sequence[AnyOperation]) -> None:
        if len(operations) == 0:
            raise EmptyPatchArrayError()
        self._operations: Tuple[AnyOperation, ...] = tuple(operations)

    @staticmethod
    def parse(raw: Union[str, bytes, Any]) -> "Patch":
        if isinstance(raw, (bytes, bytearray)):
            try:
                raw = bytes(raw).decode("utf8")
            except UnicodeDecodeError as e:
                raise BadStringEncodingError(f"patch string encoding must be UTF-8: {e}") from e

        if isinstance(raw, str):
            try:
                raw = parse_json(raw)
            except (json.JSONDecodeError, DataParsingError) as e:
                raise InvalidJsonFormatError(f"patch is not a valid JSON text: {e}") from e

        return Patch.from_json(raw)

    @staticmethod
    def from_json(value: Any) -> "Patch":
        """Build a patch from an already decoded JSON value. A string is a wrong root, not JSON text."""

        if isinstance(value, dict):
            return Patch([parse_operation(value)])
        if isinstance(value, list):
            if len(value) == 0:
                raise EmptyPatchArrayError()
            return Patch([parse_operation(data, f"/{i}") for i, data in enumerate(value)])
        raise InvalidRootElementError(kind_name(value))

    @property
    def operations(self) -> Tuple[AnyOperation, ...]:
        return self._operations

    def to_json(self) -> List[Any]:
        return [op.to_json() for op in self._operations]

    def __iter__(self) -> Iterator[AnyOperation]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __getitem__(self, index: int) -> AnyOperation:
        return self._operations[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Patch):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(a == b for a, b in zip(self._operations, other._operations))

    def __repr__(self) -> str:
        return f"Patch({self.to_json()!r})"
