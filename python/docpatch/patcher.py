"""
Applies RFC 6902 patches to JSON documents.

Documents are never modified in place. Every operation rebuilds the containers on the way from the root
to its target and shares everything else with the previous version of the document.
"""

import copy
import logging
import re
from typing import Any, Callable, Union

from .constants import END_OF_ARRAY_MARKER
from .errors import (
    ApplyError,
    ArrayIndexOutOfBoundsError,
    EndOfArrayMarkerError,
    InvalidJsonError,
    MoveIntoDescendantError,
    PathNotFoundError,
    TestFailedError,
)
from .operation import (
    AddOperation,
    AnyOperation,
    CopyOperation,
    MoveOperation,
    RemoveOperation,
    ReplaceOperation,
    TestOperation,
)
from .patch import Patch
from .pointer import JsonPointer
from .value import JsonKind, JsonValue, json_equal, kind_of

logger = logging.getLogger(__name__)

Transform = Callable[[Any, JsonPointer], Any]

_ARRAY_INDEX = re.compile(r"0|[1-9][0-9]*")


def _array_index(token: str, location: str) -> int:
    if token == END_OF_ARRAY_MARKER:
        raise EndOfArrayMarkerError(location)
    if not _ARRAY_INDEX.fullmatch(token):
        raise PathNotFoundError(f"'{token}' is not a valid array index", location)
    return int(token)


def _container_kind(value: Any, token: str, location: str) -> JsonKind:
    kind = kind_of(value, location)
    if not kind.is_container():
        raise InvalidJsonError(f"cannot reference '{token}' inside a {kind.name.lower()} value", location)
    return kind


def _child(container: Any, token: str, location: str) -> Any:
    """Value of an existing member or element of a container."""

    if _container_kind(container, token, location) is JsonKind.OBJECT:
        if token not in container:
            raise PathNotFoundError(f"object has no member '{token}'", location)
        return container[token]

    index = _array_index(token, location)
    if index >= len(container):
        raise PathNotFoundError(f"index {index} is out of range for an array of length {len(container)}", location)
    return container[index]


def _with_child(container: Any, token: str, value: Any) -> Any:
    """Shallow copy of a container with one existing member or element replaced."""

    if isinstance(container, dict):
        new_dict = dict(container)
        new_dict[token] = value
        return new_dict
    new_list = list(container)
    new_list[int(token)] = value
    return new_list


def resolve(document: JsonValue, pointer: JsonPointer) -> JsonValue:
    """Return the value the pointer references, the document itself for the root pointer."""

    current = document
    for token in pointer.tokens:
        current = _child(current, token, pointer.raw)
    return current


def resolve_and_transform(document: Any, pointer: JsonPointer, transform: Transform) -> Any:
    """
    Walk the document along the pointer and let 'transform' produce the new innermost container.

    'transform' is called with the container holding the target and a pointer with the single remaining
    token, or with the whole document and the root pointer. Its result is spliced back into copies of
    all containers on the way up, the new document is returned.
    """

    return _resolve_and_transform(document, pointer, transform, pointer.raw)


def _resolve_and_transform(document: Any, pointer: JsonPointer, transform: Transform, location: str) -> Any:
    if len(pointer) <= 1:
        return transform(document, pointer)

    token = pointer.first
    child = _child(document, token, location)
    return _with_child(document, token, _resolve_and_transform(child, pointer.tail(), transform, location))


def _add(document: Any, path: JsonPointer, value: Any) -> Any:
    location = path.raw

    def transform(container: Any, pointer: JsonPointer) -> Any:
        if pointer.is_root:
            return value

        token = pointer.first
        if _container_kind(container, token, location) is JsonKind.OBJECT:
            new_dict = dict(container)
            new_dict[token] = value
            return new_dict

        index = _array_index(token, location)
        if index > len(container):
            raise ArrayIndexOutOfBoundsError(index, len(container), location)
        new_list = list(container)
        new_list.insert(index, value)
        return new_list

    return resolve_and_transform(document, path, transform)


def _remove(document: Any, path: JsonPointer) -> Any:
    location = path.raw

    def transform(container: Any, pointer: JsonPointer) -> Any:
        if pointer.is_root:
            raise PathNotFoundError("the whole document cannot be removed", location)

        token = pointer.first
        _child(container, token, location)
        if isinstance(container, dict):
            new_dict = dict(container)
            del new_dict[token]
            return new_dict
        new_list = list(container)
        del new_list[int(token)]
        return new_list

    return resolve_and_transform(document, path, transform)


def _replace(document: Any, path: JsonPointer, value: Any) -> Any:
    location = path.raw

    def transform(container: Any, pointer: JsonPointer) -> Any:
        if pointer.is_root:
            return value

        token = pointer.first
        _child(container, token, location)
        return _with_child(container, token, value)

    return resolve_and_transform(document, path, transform)


def _move(document: Any, path: JsonPointer, source: JsonPointer) -> Any:
    if source.is_prefix_of(path) and len(source) < len(path):
        raise MoveIntoDescendantError(source.raw, path.raw)

    # the value is read before the removal, it is gone from the document afterwards
    value = resolve(document, source)
    if source.tokens == path.tokens:
        return document

    document = _remove(document, source)
    return _add(document, path, value)


def _copy(document: Any, path: JsonPointer, source: JsonPointer) -> Any:
    value = resolve(document, source)
    return _add(document, path, copy.deepcopy(value))


def _test(document: Any, path: JsonPointer, value: Any) -> Any:
    actual = resolve(document, path)
    if not json_equal(actual, value):
        raise TestFailedError(f"value {actual!r} does not match the expected {value!r}", path.raw)
    return document


class Patcher:
    """RFC 6902 compliant patch application."""

    @staticmethod
    def apply(patch: Patch, document: JsonValue) -> JsonValue:
        """
        Apply all operations of the patch, in order, and return the patched document.

        The first failing operation aborts the whole patch. The raised 'ApplyError' has its 'step'
        set to the index of that operation. The given document is never modified.
        """

        for step, operation in enumerate(patch):
            logger.debug("Applying step %d: '%s' at '%s'", step, operation.kind.value, operation.path)
            try:
                document = Patcher.apply_operation(operation, document)
            except ApplyError as e:
                e.step = step
                logger.debug("Patch aborted at step %d: %s", step, e)
                raise
        return document

    @staticmethod
    def apply_operation(operation: AnyOperation, document: Any) -> Any:
        if isinstance(operation, AddOperation):
            return _add(document, operation.path, copy.deepcopy(operation.value))
        if isinstance(operation, RemoveOperation):
            return _remove(document, operation.path)
        if isinstance(operation, ReplaceOperation):
            return _replace(document, operation.path, copy.deepcopy(operation.value))
        if isinstance(operation, MoveOperation):
            return _move(document, operation.path, operation.source)
        if isinstance(operation, CopyOperation):
            return _copy(document, operation.path, operation.source)
        if isinstance(operation, TestOperation):
            return _test(document, operation.path, operation.value)
        raise TypeError(f"unsupported patch operation: {operation!r}")


def apply_patch(patch: Union[Patch, str, bytes, Any], document: JsonValue) -> JsonValue:
    """Parse the patch unless it already is a 'Patch' and apply it to the document."""

    if not isinstance(patch, Patch):
        patch = Patch.parse(patch)
    return Patcher.apply(patch, document)
