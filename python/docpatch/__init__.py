from .constants import VERSION
from .errors import ApplyError, DocpatchError, ParseError
from .operation import (
    AddOperation,
    CopyOperation,
    MoveOperation,
    Operation,
    OperationKind,
    RemoveOperation,
    ReplaceOperation,
    TestOperation,
    parse_operation,
)
from .patch import Patch
from .patcher import Patcher, apply_patch, resolve, resolve_and_transform
from .pointer import JsonPointer

__version__ = VERSION

__all__ = [
    "AddOperation",
    "ApplyError",
    "CopyOperation",
    "DocpatchError",
    "JsonPointer",
    "MoveOperation",
    "Operation",
    "OperationKind",
    "ParseError",
    "Patch",
    "Patcher",
    "RemoveOperation",
    "ReplaceOperation",
    "TestOperation",
    "apply_patch",
    "parse_operation",
    "resolve",
    "resolve_and_transform",
]
