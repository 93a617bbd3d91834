from typing import Any, Literal, Optional, Tuple

from .operation import AddOperation, RemoveOperation, ReplaceOperation
from .patch import Patch
from .patcher import Patcher, resolve
from .pointer import JsonPointer
from .value import JsonKind, kind_of

QueryMethod = Literal["get", "delete", "put", "patch"]


def query(original: Any, method: QueryMethod, ptr: str, payload: Any = None) -> Tuple[Any, Optional[Any]]:
    """
    Run a single REST-like query against a document.

    Returns the new document and the value to report back to the caller. The original document
    is considered immutable and is never modified.

      get    - returns the value at the pointer
      delete - removes the value at the pointer
      put    - sets the value at the pointer; object members are created, array elements must exist
      patch  - applies the payload as a JSON patch, with paths relative to the pointer
    """

    pointer = JsonPointer(ptr)

    if method == "get":
        return original, resolve(original, pointer)

    if method == "delete":
        return Patcher.apply_operation(RemoveOperation(pointer), original), None

    if method == "put":
        if pointer.is_root:
            return payload, None
        parent = resolve(original, pointer.parent())
        if kind_of(parent, pointer.raw) is JsonKind.ARRAY:
            return Patcher.apply_operation(ReplaceOperation(pointer, payload), original), None
        return Patcher.apply_operation(AddOperation(pointer, payload), original), None

    if method == "patch":
        patch = Patch.from_json(payload)
        if pointer.is_root:
            return Patcher.apply(patch, original), None

        # patch the addressed subtree on its own and put the result back
        patched = Patcher.apply(patch, resolve(original, pointer))
        return Patcher.apply_operation(ReplaceOperation(pointer, patched), original), None

    raise ValueError(f"invalid query method '{method}'")
