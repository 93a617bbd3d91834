from asyncio import Lock
from typing import Any, Awaitable, Callable, List, Tuple, TypeVar

from .value import json_equal

T = TypeVar("T")

UpdateCallback = Callable[[Any], Awaitable[None]]


class DocumentStore:
    """
    Holds the current version of a document.

    Registered callbacks are notified about every new version. Updates are serialized, a change computed
    by 'modify()' always sees the latest version.
    """

    def __init__(self, initial_document: Any) -> None:
        self._document = initial_document
        self._revision = 0
        self._callbacks: List[UpdateCallback] = []
        self._update_lock: Lock = Lock()

    async def _commit(self, document: Any) -> None:
        self._document = document
        self._revision += 1

        # invoke change callbacks
        for call in self._callbacks:
            await call(document)

    async def update(self, document: Any) -> None:
        async with self._update_lock:
            await self._commit(document)

    async def modify(self, change: Callable[[Any], Tuple[Any, T]]) -> T:
        """
        Compute a new version from the current one and store it.

        'change' returns the new document and a value that is passed back to the caller. When it raises,
        the stored document stays as it was.
        """

        async with self._update_lock:
            document, result = change(self._document)
            await self._commit(document)
            return result

    async def register_on_change_callback(self, callback: UpdateCallback) -> None:
        """
        Registers new callback and immediately calls it with the current document
        """

        self._callbacks.append(callback)
        await callback(self.get())

    def get(self) -> Any:
        return self._document

    @property
    def revision(self) -> int:
        return self._revision


def only_on_real_changes_update(
    selector: Callable[[Any], Any], skip_first: bool = False
) -> Callable[[UpdateCallback], UpdateCallback]:
    """
    Call the decorated callback only when the selected part of the document changed since the last call.

    With 'skip_first', the first call only records the selected value, for callbacks that need not run
    on the document they were registered with.
    """

    def decorator(orig_func: UpdateCallback) -> UpdateCallback:
        original_value_set: Any = False
        original_value: Any = None

        async def new_func_update(document: Any) -> None:
            nonlocal original_value_set
            nonlocal original_value
            if not original_value_set:
                original_value_set = True
                original_value = selector(document)
                if not skip_first:
                    await orig_func(document)
            elif not json_equal(original_value, selector(document)):
                original_value = selector(document)
                await orig_func(document)

        return new_func_update

    return decorator
