"""Run-scoped shared key/value context for exchanging data between tests."""

import logging
from typing import Any, Optional, Protocol, TypeVar, runtime_checkable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class ContextLifecycle(Protocol):
    """Interface for custom context types named by ``@shared_context``."""

    def initialize(self) -> None: ...

    def dispose(self) -> None: ...


class SharedContext:
    """Key/value store shared by every test that asks for it.

    Instances are handed out by a :class:`SharedContextManager`; do not
    construct them directly. Values are replaced by key, never merged.
    """

    def __init__(self, initialization_count: int):
        self._data: dict[str, Any] = {}
        self.initialization_count = initialization_count
        self.is_disposed = False

    @classmethod
    def create(cls) -> "SharedContext":
        """Return the live instance from the process-wide manager."""
        return default_manager.create()

    def set_data(self, key: str, value: Any) -> None:
        self._data[key] = value

    def get_data(self, key: str, default: Any = None, *, expected_type: Optional[type[T]] = None) -> Any:
        """Return the value stored under ``key``, or ``default`` if absent.

        Raises:
            TypeError: If ``expected_type`` is given and the stored value is
                not an instance of it.
        """
        if key not in self._data:
            return default
        value = self._data[key]
        if expected_type is not None and not isinstance(value, expected_type):
            raise TypeError(
                f"Shared value {key!r} is {type(value).__name__}, expected {expected_type.__name__}"
            )
        return value

    def has_data(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> list[str]:
        return list(self._data)

    def dispose(self) -> None:
        """Clear all entries and mark the instance disposed."""
        self._data.clear()
        self.is_disposed = True
        logger.debug("Shared context #%d disposed", self.initialization_count)

    def __repr__(self) -> str:
        state = "disposed" if self.is_disposed else f"{len(self._data)} entries"
        return f"<SharedContext #{self.initialization_count} {state}>"


class SharedContextManager:
    """Owns at most one live :class:`SharedContext` at a time.

    The lifetime counter keeps increasing across every instance this
    manager creates. Not thread-safe; the engine never runs suites
    concurrently.
    """

    def __init__(self) -> None:
        self._current: Optional[SharedContext] = None
        self.initialization_count = 0

    @property
    def current(self) -> Optional[SharedContext]:
        return self._current

    def create(self) -> SharedContext:
        """Return the live context, creating a fresh one if needed."""
        if self._current is None or self._current.is_disposed:
            self.initialization_count += 1
            self._current = SharedContext(self.initialization_count)
            logger.debug("Shared context #%d initialized", self.initialization_count)
        return self._current

    def dispose(self) -> None:
        if self._current is not None and not self._current.is_disposed:
            self._current.dispose()


default_manager = SharedContextManager()
