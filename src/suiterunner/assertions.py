"""Assertion checks used inside test bodies.

Every check passes silently or raises :class:`AssertionFailure` with a
message of the form ``Assert.<check> failed: <detail>. <msg>``.
"""

from typing import Any, Awaitable, Callable, Container, Optional, Union

from suiterunner.exceptions import AssertionFailure


def _failure(check: str, detail: str, message: Optional[str], inner: Optional[BaseException] = None) -> AssertionFailure:
    text = f"Assert.{check} failed: {detail}"
    if message:
        text = f"{text}. {message}"
    return AssertionFailure(text, inner)


def _type_name(exc_type: type) -> str:
    return getattr(exc_type, "__qualname__", str(exc_type))


class Assert:
    """Namespace of static assertion checks."""

    @staticmethod
    def is_true(condition: Any, message: str = "Expected true") -> None:
        if not condition:
            raise _failure("is_true", "condition is false", message)

    @staticmethod
    def is_false(condition: Any, message: str = "Expected false") -> None:
        if condition:
            raise _failure("is_false", "condition is true", message)

    @staticmethod
    def are_equal(expected: Any, actual: Any, message: Optional[str] = None) -> None:
        if not expected == actual:
            raise _failure("are_equal", f"Expected {expected!r}, Actual {actual!r}", message)

    @staticmethod
    def are_not_equal(expected: Any, actual: Any, message: Optional[str] = None) -> None:
        if expected == actual:
            raise _failure("are_not_equal", f"Values are equal {expected!r}", message)

    @staticmethod
    def is_null(obj: Any, message: str = "Expected None") -> None:
        if obj is not None:
            raise _failure("is_null", f"got {obj!r}", message)

    @staticmethod
    def is_not_null(obj: Any, message: str = "Expected not None") -> None:
        if obj is None:
            raise _failure("is_not_null", "got None", message)

    @staticmethod
    def throws(
        exc_type: type[BaseException],
        action: Callable[[], Any],
        message: Optional[str] = None,
    ) -> BaseException:
        """Check that ``action`` raises ``exc_type`` (or a subclass).

        Returns:
            The caught exception, for further inspection.
        """
        try:
            action()
        except exc_type as e:
            return e
        except Exception as e:
            raise _failure(
                "throws",
                f"Expected exception of type {_type_name(exc_type)} but caught {type(e).__name__}",
                message,
                inner=e,
            )
        raise _failure(
            "throws",
            f"Expected exception of type {_type_name(exc_type)} but no exception was thrown",
            message,
        )

    @staticmethod
    async def throws_async(
        exc_type: type[BaseException],
        action: Union[Awaitable[Any], Callable[[], Awaitable[Any]]],
        message: Optional[str] = None,
    ) -> BaseException:
        """Awaitable form of :meth:`throws`.

        ``action`` may be an awaitable or a callable returning one. It is
        awaited before the outcome is judged.
        """
        try:
            awaitable = action() if callable(action) else action
            await awaitable
        except exc_type as e:
            return e
        except Exception as e:
            raise _failure(
                "throws_async",
                f"Expected exception of type {_type_name(exc_type)} but caught {type(e).__name__}",
                message,
                inner=e,
            )
        raise _failure(
            "throws_async",
            f"Expected exception of type {_type_name(exc_type)} but no exception was thrown",
            message,
        )

    @staticmethod
    def does_not_throw(action: Callable[[], Any], message: Optional[str] = None) -> Any:
        try:
            return action()
        except Exception as e:
            raise _failure(
                "does_not_throw",
                f"Unexpected exception of type {type(e).__name__}: {e}",
                message,
                inner=e,
            )

    @staticmethod
    def in_range(value: Any, minimum: Any, maximum: Any, message: Optional[str] = None) -> None:
        """Check ``minimum <= value <= maximum``."""
        if value < minimum or value > maximum:
            raise _failure("in_range", f"Value {value} is not in range [{minimum}, {maximum}]", message)

    @staticmethod
    def contains(collection: Container[Any], item: Any, message: Optional[str] = None) -> None:
        if item not in collection:
            raise _failure("contains", f"Collection does not contain {item!r}", message)

    @staticmethod
    def fail(message: str = "Test failed") -> None:
        raise AssertionFailure(f"Assert.fail: {message}")
