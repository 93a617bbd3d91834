"""RFC 6902 patch operations: https://www.rfc-editor.org/rfc/rfc6902#section-4."""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Union

from .errors import InvalidOperationError, MissingFromError, MissingOperationError, MissingPathError, MissingValueError
from .pointer import JsonPointer
from .value import json_equal, kind_name


class OperationKind(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


@dataclass(frozen=True, eq=False)
class Operation:
    kind: ClassVar[OperationKind]
    path: JsonPointer

    def to_json(self) -> Dict[str, Any]:
        return {"op": self.kind.value, "path": self.path.raw}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Operation):
            return NotImplemented
        return type(self) is type(other) and json_equal(self.to_json(), other.to_json())


@dataclass(frozen=True, eq=False)
class AddOperation(Operation):
    kind: ClassVar[OperationKind] = OperationKind.ADD
    value: Any

    def to_json(self) -> Dict[str, Any]:
        return {**super().to_json(), "value": self.value}


@dataclass(frozen=True, eq=False)
class RemoveOperation(Operation):
    kind: ClassVar[OperationKind] = OperationKind.REMOVE


@dataclass(frozen=True, eq=False)
class ReplaceOperation(Operation):
    kind: ClassVar[OperationKind] = OperationKind.REPLACE
    value: Any

    def to_json(self) -> Dict[str, Any]:
        return {**super().to_json(), "value": self.value}


@dataclass(frozen=True, eq=False)
class MoveOperation(Operation):
    kind: ClassVar[OperationKind] = OperationKind.MOVE
    source: JsonPointer

    def to_json(self) -> Dict[str, Any]:
        return {**super().to_json(), "from": self.source.raw}


@dataclass(frozen=True, eq=False)
class CopyOperation(Operation):
    kind: ClassVar[OperationKind] = OperationKind.COPY
    source: JsonPointer

    def to_json(self) -> Dict[str, Any]:
        return {**super().to_json(), "from": self.source.raw}


@dataclass(frozen=True, eq=False)
class TestOperation(Operation):
    __test__ = False  # not a pytest test class

    kind: ClassVar[OperationKind] = OperationKind.TEST
    value: Any

    def to_json(self) -> Dict[str, Any]:
        return {**super().to_json(), "value": self.value}


AnyOperation = Union[AddOperation, RemoveOperation, ReplaceOperation, MoveOperation, CopyOperation, TestOperation]


def parse_operation(data: Any, error_path: str = "") -> AnyOperation:
    """
    Build an operation from its decoded JSON object.

    Unknown members and members the operation does not use are ignored.
    """

    if not isinstance(data, dict):
        raise InvalidOperationError(f"patch operation must be an object, got {kind_name(data)}", error_path)

    # the elements 'op' and 'path' are mandatory
    op = data.get("op")
    if not isinstance(op, str):
        raise MissingOperationError(f"{error_path}/op")
    try:
        kind = OperationKind(op)
    except ValueError as e:
        expected = ", ".join(f"'{k.value}'" for k in OperationKind)
        raise InvalidOperationError(f"unknown operation '{op}', expected one of: {expected}", f"{error_path}/op") from e

    raw_path = data.get("path")
    if not isinstance(raw_path, str):
        raise MissingPathError(f"{error_path}/path")
    path = JsonPointer(raw_path, f"{error_path}/path")

    # 'from' is mandatory for move and copy
    if kind in (OperationKind.MOVE, OperationKind.COPY):
        raw_source = data.get("from")
        if not isinstance(raw_source, str):
            raise MissingFromError(op, f"{error_path}/from")
        source = JsonPointer(raw_source, f"{error_path}/from")
        if kind is OperationKind.MOVE:
            return MoveOperation(path, source)
        return CopyOperation(path, source)

    if kind is OperationKind.REMOVE:
        return RemoveOperation(path)

    # test may compare against null, add and replace may not insert it
    if kind is OperationKind.TEST:
        if "value" not in data:
            raise MissingValueError(op, f"{error_path}/value", allow_null=True)
        return TestOperation(path, copy.deepcopy(data["value"]))

    if data.get("value") is None:
        raise MissingValueError(op, f"{error_path}/value")
    value = copy.deepcopy(data["value"])
    if kind is OperationKind.ADD:
        return AddOperation(path, value)
    return ReplaceOperation(path, value)
