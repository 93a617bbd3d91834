from typing import Any

import pytest

from docpatch.errors import (
    BadStringEncodingError,
    EmptyPatchArrayError,
    EmptyReferenceTokenError,
    InvalidJsonFormatError,
    InvalidOperationError,
    InvalidRootElementError,
    MissingFromError,
    MissingOperationError,
    MissingPathError,
    MissingValueError,
    MustStartWithDelimiterError,
    ParseError,
)
from docpatch.operation import (
    AddOperation,
    CopyOperation,
    MoveOperation,
    OperationKind,
    RemoveOperation,
    ReplaceOperation,
    TestOperation,
    parse_operation,
)
from docpatch.patch import Patch
from docpatch.pointer import JsonPointer

PATCH = """
[
    { "op": "test", "path": "/a/b/c", "value": "foo" },
    { "op": "remove", "path": "/a/b/c" },
    { "op": "add", "path": "/a/b/c", "value": [ "foo", "bar" ] },
    { "op": "replace", "path": "/a/b/c", "value": 42 },
    { "op": "move", "from": "/a/b/c", "path": "/a/b/d" },
    { "op": "copy", "from": "/a/b/d", "path": "/a/b/e" }
]
"""


def test_parse_all_operations():
    patch = Patch.parse(PATCH)
    assert len(patch) == 6
    assert [op.kind for op in patch] == [
        OperationKind.TEST,
        OperationKind.REMOVE,
        OperationKind.ADD,
        OperationKind.REPLACE,
        OperationKind.MOVE,
        OperationKind.COPY,
    ]
    assert patch[0] == TestOperation(JsonPointer("/a/b/c"), "foo")
    assert patch[1] == RemoveOperation(JsonPointer("/a/b/c"))
    assert patch[2] == AddOperation(JsonPointer("/a/b/c"), ["foo", "bar"])
    assert patch[3] == ReplaceOperation(JsonPointer("/a/b/c"), 42)
    assert patch[4] == MoveOperation(JsonPointer("/a/b/d"), JsonPointer("/a/b/c"))
    assert patch[5] == CopyOperation(JsonPointer("/a/b/e"), JsonPointer("/a/b/d"))


def test_parse_bytes_and_decoded():
    assert Patch.parse(PATCH.encode("utf8")) == Patch.parse(PATCH)
    assert Patch.parse([{"op": "remove", "path": "/a"}]) == Patch.parse('[{"op": "remove", "path": "/a"}]')


def test_parse_single_object():
    patch = Patch.parse('{ "op": "add", "path": "/a", "value": 1 }')
    assert len(patch) == 1
    assert patch.operations == (AddOperation(JsonPointer("/a"), 1),)


def test_unknown_members_ignored():
    patch = Patch.parse('{ "op": "remove", "path": "/a", "value": 1, "from": "/b", "xyz": true }')
    assert patch[0] == RemoveOperation(JsonPointer("/a"))


@pytest.mark.parametrize(
    "raw,exc",
    [
        ("[]", EmptyPatchArrayError),
        ([], EmptyPatchArrayError),
        ("42", InvalidRootElementError),
        ('"add"', InvalidRootElementError),
        ("null", InvalidRootElementError),
        ("[{]", InvalidJsonFormatError),
        ("", InvalidJsonFormatError),
        ('{"op": "add", "op": "remove", "path": "/a"}', InvalidJsonFormatError),
        (b"\xff\xfe", BadStringEncodingError),
        ("[1]", InvalidOperationError),
        ('[{"path": "/a"}]', MissingOperationError),
        ('[{"op": 1, "path": "/a"}]', MissingOperationError),
        ('[{"op": "frobnicate", "path": "/a"}]', InvalidOperationError),
        ('[{"op": "remove"}]', MissingPathError),
        ('[{"op": "remove", "path": 5}]', MissingPathError),
        ('[{"op": "remove", "path": "a"}]', ParseError),
        ('[{"op": "remove", "path": "a/b"}]', MustStartWithDelimiterError),
        ('[{"op": "remove", "path": "/a//b"}]', EmptyReferenceTokenError),
        ('[{"op": "move", "path": "/a"}]', MissingFromError),
        ('[{"op": "copy", "path": "/a", "from": null}]', MissingFromError),
        ('[{"op": "copy", "path": "/a", "from": "b"}]', ParseError),
        ('[{"op": "add", "path": "/a"}]', MissingValueError),
        ('[{"op": "add", "path": "/a", "value": null}]', MissingValueError),
        ('[{"op": "replace", "path": "/a"}]', MissingValueError),
        ('[{"op": "test", "path": "/a"}]', MissingValueError),
    ],
)
def test_parse_invalid(raw: Any, exc: type) -> None:
    with pytest.raises(exc):
        Patch.parse(raw)


def test_test_accepts_null():
    patch = Patch.parse('[{"op": "test", "path": "/a", "value": null}]')
    assert patch[0] == TestOperation(JsonPointer("/a"), None)


def test_error_paths():
    raw = '[{"op": "remove", "path": "/a"}, {"op": "add", "path": "/b"}]'
    with pytest.raises(MissingValueError) as e:
        Patch.parse(raw)
    assert e.value.where() == "/1/value"

    with pytest.raises(MissingOperationError) as e2:
        Patch.parse('[{"op": "remove", "path": "/a"}, {"path": "/b"}]')
    assert e2.value.where() == "/1/op"

    with pytest.raises(ParseError) as e3:
        Patch.parse('[{"op": "copy", "path": "/a", "from": "b"}]')
    assert e3.value.where() == "/0/from"


def test_parse_operation_copies_value():
    value = {"x": [1, 2]}
    operation = parse_operation({"op": "add", "path": "/a", "value": value})
    assert isinstance(operation, AddOperation)
    value["x"].append(3)
    assert operation.value == {"x": [1, 2]}


def test_to_json():
    patch = Patch.parse(PATCH)
    assert patch.to_json() == [
        {"op": "test", "path": "/a/b/c", "value": "foo"},
        {"op": "remove", "path": "/a/b/c"},
        {"op": "add", "path": "/a/b/c", "value": ["foo", "bar"]},
        {"op": "replace", "path": "/a/b/c", "value": 42},
        {"op": "move", "path": "/a/b/d", "from": "/a/b/c"},
        {"op": "copy", "path": "/a/b/e", "from": "/a/b/d"},
    ]
    assert Patch.parse(patch.to_json()) == patch


def test_operation_equality():
    assert AddOperation(JsonPointer("/a"), 1) != AddOperation(JsonPointer("/a"), True)
    assert AddOperation(JsonPointer("/a"), 1) != ReplaceOperation(JsonPointer("/a"), 1)
    assert Patch.parse('{"op": "remove", "path": "/a"}') != Patch.parse(
        '[{"op": "remove", "path": "/a"}, {"op": "remove", "path": "/b"}]'
    )


def test_empty_constructor():
    with pytest.raises(EmptyPatchArrayError):
        Patch([])


def test_from_json():
    assert Patch.from_json([{"op": "remove", "path": "/a"}]) == Patch.parse('[{"op": "remove", "path": "/a"}]')
    assert Patch.from_json({"op": "remove", "path": "/a"}) == Patch.parse('{"op": "remove", "path": "/a"}')

    # a decoded string is a wrong root, it is not decoded again
    with pytest.raises(InvalidRootElementError):
        Patch.from_json('[{"op": "remove", "path": "/a"}]')
    with pytest.raises(EmptyPatchArrayError):
        Patch.from_json([])
