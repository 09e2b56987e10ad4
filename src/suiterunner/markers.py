"""Decorators that declare suites, tests, parameter cases and lifecycle hooks.

Markers only attach metadata to the decorated object. Discovery reads it
back and builds descriptors; the engine never looks at these attributes.

Example::

    @test_class(category="Moves", priority=1)
    class BishopTests:
        @before_each
        def reset(self):
            self.board = Board.empty()

        @test_method
        @test_case(36, 13, name="center")
        @test_case(0, 7, name="corner")
        def move_count(self, square, expected):
            Assert.are_equal(expected, count_moves(self.board, square))
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar, overload

from suiterunner.context import SharedContext
from suiterunner.models import LifecycleRole, ParameterSet, SharedContextRequirement

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)

SUITE_ATTR = "__suiterunner_suite__"
TEST_ATTR = "__suiterunner_test__"
CASES_ATTR = "__suiterunner_cases__"
ROLES_ATTR = "__suiterunner_roles__"
SKIP_ATTR = "__suiterunner_skip__"
CONTEXT_ATTR = "__suiterunner_context__"


@dataclass(frozen=True)
class SuiteMarker:
    category: Optional[str] = None
    priority: int = 0


@dataclass(frozen=True)
class TestMarker:
    __test__ = False

    priority: Optional[int] = None
    description: str = ""
    critical: bool = False


def _target(obj: Any) -> Any:
    """Return the function that carries metadata (unwraps static/classmethod)."""
    return getattr(obj, "__func__", obj)


def test_class(category: Optional[str] = None, priority: int = 0) -> Callable[[C], C]:
    """Mark a class as a test suite."""

    def decorator(cls: C) -> C:
        setattr(cls, SUITE_ATTR, SuiteMarker(category=category, priority=priority))
        return cls

    return decorator


@overload
def test_method(func: F) -> F: ...


@overload
def test_method(
    *, priority: Optional[int] = None, description: str = "", critical: bool = False
) -> Callable[[F], F]: ...


def test_method(
    func: Optional[F] = None,
    *,
    priority: Optional[int] = None,
    description: str = "",
    critical: bool = False,
) -> Any:
    """Mark a method as a test. Usable bare or with keyword options.

    ``priority`` overrides the suite's default priority for this test.
    """
    marker = TestMarker(priority=priority, description=description, critical=critical)

    def decorator(f: F) -> F:
        setattr(_target(f), TEST_ATTR, marker)
        return f

    if func is not None:
        return decorator(func)
    return decorator


def test_case(*args: Any, name: Optional[str] = None) -> Callable[[F], F]:
    """Add one parameter set to a test. Stack for several cases.

    Cases run in the order they appear in the source, top to bottom.
    """
    case = ParameterSet(args=tuple(args), name=name)

    def decorator(f: F) -> F:
        target = _target(f)
        # Decorators apply bottom-up; prepend to keep source order.
        cases = [case] + list(getattr(target, CASES_ATTR, ()))
        setattr(target, CASES_ATTR, tuple(cases))
        return f

    return decorator


def skip(reason: str = "") -> Callable[[F], F]:
    """Exclude a test from execution."""

    def decorator(f: F) -> F:
        setattr(_target(f), SKIP_ATTR, reason)
        return f

    return decorator


def _role_marker(role: LifecycleRole) -> Callable[[F], F]:
    def decorator(f: F) -> F:
        target = _target(f)
        roles = set(getattr(target, ROLES_ATTR, frozenset()))
        roles.add(role)
        setattr(target, ROLES_ATTR, frozenset(roles))
        return f

    decorator.__name__ = role.value
    decorator.__doc__ = f"Mark a method as a {role.value} lifecycle hook."
    return decorator


before_all = _role_marker(LifecycleRole.SUITE_SETUP)
after_all = _role_marker(LifecycleRole.SUITE_TEARDOWN)
before_each = _role_marker(LifecycleRole.PER_TEST_SETUP)
after_each = _role_marker(LifecycleRole.PER_TEST_TEARDOWN)


def shared_context(
    context_type: type = SharedContext,
    attribute: str = "context",
    dispose: bool = True,
) -> Callable[[C], C]:
    """Ask the runner to inject a shared context into the suite instance.

    With the default ``SharedContext`` type the runner's live context is
    injected. Any other type must provide ``initialize()`` and ``dispose()``;
    the runner creates one per suite. With ``dispose=True`` the context is
    disposed after the suite's ``after_all`` hooks.
    """

    def decorator(cls: C) -> C:
        requirement = SharedContextRequirement(
            context_type=context_type, attribute=attribute, dispose=dispose
        )
        setattr(cls, CONTEXT_ATTR, requirement)
        return cls

    return decorator


# Keep pytest from collecting the decorators when they are imported into test modules.
test_class.__test__ = False  # type: ignore[attr-defined]
test_method.__test__ = False  # type: ignore[attr-defined]
test_case.__test__ = False  # type: ignore[attr-defined]
