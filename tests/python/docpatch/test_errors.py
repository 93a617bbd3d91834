import pytest

from docpatch.errors import (
    ApplyError,
    ArrayIndexOutOfBoundsError,
    DocpatchError,
    EmptyPatchArrayError,
    EndOfArrayMarkerError,
    MissingDelimiterError,
    MissingValueError,
    ParseError,
    PathNotFoundError,
    PointerError,
    TestFailedError,
)


def test_docpatch_error() -> None:
    with pytest.raises(DocpatchError) as error:
        raise DocpatchError("this is testing error", "/error")

    assert str(error.value) == "[/error] this is testing error"
    assert error.value.where() == "/error"


def test_docpatch_error_without_path() -> None:
    error = EmptyPatchArrayError()
    assert str(error) == "patch cannot be an empty array"
    assert error.where() == ""
    assert isinstance(error, ParseError)


def test_pointer_error() -> None:
    error = MissingDelimiterError("abc", "/0/path")
    assert isinstance(error, PointerError)
    assert str(error) == "[/0/path] JSON pointer 'abc' invalid: values are delimited by a '/' character"


def test_missing_value_error() -> None:
    assert str(MissingValueError("add", "/value")) == "[/value] 'add' operation must include non-null element 'value'"
    assert str(MissingValueError("test", "/value", allow_null=True)) == "[/value] 'test' operation must include element 'value'"


def test_apply_error_step() -> None:
    error = ArrayIndexOutOfBoundsError(5, 2, "/a/5")
    assert isinstance(error, ApplyError)
    assert error.step is None
    assert str(error) == "[/a/5] cannot add at index 5 into an array of length 2"

    error.step = 3
    assert str(error) == "operation 3 failed: [/a/5] cannot add at index 5 into an array of length 2"


def test_apply_error_hierarchy() -> None:
    assert issubclass(EndOfArrayMarkerError, PathNotFoundError)
    assert issubclass(TestFailedError, ApplyError)
    assert not issubclass(ApplyError, ParseError)
