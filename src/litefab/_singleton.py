"""Process-wide single instances with guarded first creation.

Lifecycle: UNINITIALIZED -> INITIALIZING -> READY. Exactly one caller runs the
factory; concurrent callers wait on the same lock and then read the stored
instance. Once READY, `get()` does not lock. There is no way to destroy or
replace a READY instance.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar


if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingletonState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class SingletonCell(Generic[T]):
    def __init__(self, factory: Callable[[], T], *, name: str | None = None) -> None:
        self._factory = factory
        self._name = name or getattr(factory, "__qualname__", repr(factory))
        self._lock = threading.Lock()
        self._state = SingletonState.UNINITIALIZED
        self._instance: T | None = None
        self._initializing_thread: int | None = None

    @property
    def state(self) -> SingletonState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is SingletonState.READY

    def get(self) -> T:
        """Return the instance, creating it on first demand."""
        return self._get_or_create(self._factory)

    def _get_or_create(self, factory: Callable[[], T]) -> T:
        if self._state is SingletonState.READY:
            return self._instance  # type: ignore[return-value]

        if self._state is SingletonState.INITIALIZING and self._initializing_thread == threading.get_ident():
            msg = f"{self._name} requested itself while being created"
            raise RuntimeError(msg)

        with self._lock:
            # Check-and-create under the lock; a waiter sees READY here.
            if self._state is SingletonState.READY:
                return self._instance  # type: ignore[return-value]

            self._state = SingletonState.INITIALIZING
            self._initializing_thread = threading.get_ident()
            try:
                instance = factory()
            except BaseException:
                self._state = SingletonState.UNINITIALIZED
                raise
            finally:
                self._initializing_thread = None

            self._instance = instance
            self._state = SingletonState.READY
            logger.debug("Created singleton %s", self._name)
            return instance

    def __repr__(self) -> str:
        return f"SingletonCell({self._name}, state={self._state.value})"


class SingletonMeta(type):
    """Metaclass turning every `Cls(...)` call into the one shared instance.

    Arguments are used only by the call that creates the instance; later calls
    get the existing object back unchanged.
    """

    _cells_lock = threading.Lock()

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        cell = SingletonMeta._cell_for(cls)
        if cell.is_ready:
            return cell.get()

        def construct() -> Any:
            return super(SingletonMeta, cls).__call__(*args, **kwargs)

        return cell._get_or_create(construct)  # noqa: SLF001

    @staticmethod
    def _cell_for(cls: type) -> SingletonCell[Any]:
        cell = cls.__dict__.get("_singleton_cell")
        if cell is None:
            with SingletonMeta._cells_lock:
                cell = cls.__dict__.get("_singleton_cell")
                if cell is None:
                    cell = SingletonCell(cls, name=cls.__qualname__)
                    type.__setattr__(cls, "_singleton_cell", cell)
        return cell


def singleton_state(cls: type) -> SingletonState:
    """Lifecycle state of a class built with `SingletonMeta`."""
    if not isinstance(cls, SingletonMeta):
        msg = f"{cls.__name__} does not use SingletonMeta"
        raise TypeError(msg)
    cell = cls.__dict__.get("_singleton_cell")
    return SingletonState.UNINITIALIZED if cell is None else cell.state
