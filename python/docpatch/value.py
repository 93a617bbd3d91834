"""JSON value kinds and structural equality for native Python JSON data."""

from enum import Enum, auto
from typing import Any, Dict, List, Union

from typing_extensions import TypeAlias

from .errors import InvalidJsonError

JsonValue: TypeAlias = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


class JsonKind(Enum):
    NULL = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    ARRAY = auto()
    OBJECT = auto()

    def is_container(self) -> bool:
        return self in (JsonKind.ARRAY, JsonKind.OBJECT)


def kind_of(value: Any, error_path: str = "") -> JsonKind:
    # bool is a subclass of int, it must be checked first
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise InvalidJsonError(f"value of type '{type(value).__name__}' is not a JSON value", error_path)


def json_equal(a: Any, b: Any) -> bool:
    """
    Deep structural equality of two JSON values.

    Unlike '==', values of different JSON kinds are never equal, so 'True' does not equal '1'.
    Numbers are compared by their numeric value.
    """

    kind = kind_of(a)
    if kind is not kind_of(b):
        return False

    if kind is JsonKind.ARRAY:
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    if kind is JsonKind.OBJECT:
        if a.keys() != b.keys():
            return False
        return all(json_equal(a[key], b[key]) for key in a)
    return a == b


def kind_name(value: Any) -> str:
    try:
        return kind_of(value).name.lower()
    except InvalidJsonError:
        return type(value).__name__
