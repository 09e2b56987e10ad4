"""Test discovery functionality."""

import importlib
import importlib.util
import inspect
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable, Iterator, Optional

from suiterunner.exceptions import DiscoveryError
from suiterunner.markers import (
    CASES_ATTR,
    CONTEXT_ATTR,
    ROLES_ATTR,
    SKIP_ATTR,
    SUITE_ATTR,
    TEST_ATTR,
    SuiteMarker,
    TestMarker,
)
from suiterunner.models import (
    LifecycleRole,
    SuiteDescriptor,
    TestDescriptor,
    normalize_category,
)

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryResult:
    """Result of discovering suites in one module."""

    module_name: str
    suites: list[SuiteDescriptor] = field(default_factory=list)

    @property
    def test_count(self) -> int:
        """Number of executions after parameter expansion."""
        return sum(s.case_count for s in self.suites)

    @property
    def skipped_count(self) -> int:
        return sum(len(s.skipped) for s in self.suites)


def load_module(target: str | Path) -> ModuleType:
    """Load a module from a ``.py`` file path or a dotted module name.

    Raises:
        DiscoveryError: If the target cannot be found or fails to import.
    """
    target_str = str(target).strip()
    if not target_str:
        raise DiscoveryError("No module location given")

    path = Path(target_str)
    if path.suffix == ".py" or path.exists():
        if path.is_dir():
            path = path / "__init__.py"
        if not path.exists():
            raise DiscoveryError(f"Test module not found: {path}")
        return _load_from_file(path.resolve())

    try:
        return importlib.import_module(target_str)
    except ImportError as e:
        raise DiscoveryError(f"Cannot import test module {target_str!r}: {e}") from e


def _load_from_file(path: Path) -> ModuleType:
    module_name = f"suiterunner_target_{path.stem}_{abs(hash(str(path))):x}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise DiscoveryError(f"Cannot load test module from {path}")

    module = importlib.util.module_from_spec(spec)
    # Registered before execution so dataclasses and pickling can resolve it.
    sys.modules[module_name] = module
    # Sibling imports from the test file's own directory.
    parent = str(path.parent)
    if parent not in sys.path:
        sys.path.insert(0, parent)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise DiscoveryError(f"Error importing {path}: {type(e).__name__}: {e}") from e
    return module


class SuiteDiscovery:
    """Builds suite descriptors from marked classes."""

    def __init__(self, categories: Optional[Iterable[str]] = None):
        """Initialize suite discovery.

        Args:
            categories: Only keep suites in these categories (case-insensitive).
                ``None`` or empty keeps everything.
        """
        self.categories = {normalize_category(c).lower() for c in categories or ()}

    def discover(self, module: ModuleType) -> DiscoveryResult:
        """Discover all suites declared in ``module``, in definition order."""
        result = DiscoveryResult(module_name=module.__name__)

        for obj in list(vars(module).values()):
            if not inspect.isclass(obj) or obj.__module__ != module.__name__:
                continue
            if getattr(obj, SUITE_ATTR, None) is None:
                continue
            suite = self.discover_class(obj)
            if self._selected(suite):
                result.suites.append(suite)

        logger.debug(
            "Discovered %d suites (%d cases) in %s",
            len(result.suites),
            result.test_count,
            module.__name__,
        )
        return result

    def discover_classes(self, classes: Iterable[type]) -> list[SuiteDescriptor]:
        suites = [self.discover_class(cls) for cls in classes]
        return [s for s in suites if self._selected(s)]

    def discover_class(self, cls: type) -> SuiteDescriptor:
        """Build the descriptor for one suite class.

        Raises:
            DiscoveryError: If the class carries no suite marker.
        """
        marker: Optional[SuiteMarker] = getattr(cls, SUITE_ATTR, None)
        if marker is None:
            raise DiscoveryError(f"{cls.__qualname__} is not marked with @test_class")

        suite_name = cls.__name__
        tests: list[TestDescriptor] = []
        hooks: dict[LifecycleRole, list[str]] = {role: [] for role in LifecycleRole}

        for name, func in _iter_members(cls):
            for role in LifecycleRole:
                if role in getattr(func, ROLES_ATTR, ()):
                    hooks[role].append(name)

            test_marker: Optional[TestMarker] = getattr(func, TEST_ATTR, None)
            if test_marker is None:
                continue

            skip_reason = getattr(func, SKIP_ATTR, None)
            tests.append(
                TestDescriptor(
                    name=name,
                    suite_name=suite_name,
                    priority=marker.priority if test_marker.priority is None else test_marker.priority,
                    cases=tuple(getattr(func, CASES_ATTR, ())),
                    is_async=inspect.iscoroutinefunction(func),
                    skip=skip_reason is not None,
                    skip_reason=skip_reason or "",
                    description=test_marker.description or (inspect.getdoc(func) or "").split("\n")[0],
                    critical=test_marker.critical,
                )
            )

        return SuiteDescriptor(
            name=suite_name,
            suite_class=cls,
            category=marker.category or "",
            priority=marker.priority,
            declared_tests=tuple(tests),
            hooks={role: tuple(names) for role, names in hooks.items() if names},
            context=getattr(cls, CONTEXT_ATTR, None),
        )

    def _selected(self, suite: SuiteDescriptor) -> bool:
        if not self.categories:
            return True
        return normalize_category(suite.category).lower() in self.categories


def _iter_members(cls: type) -> Iterator[tuple[str, Any]]:
    """Yield ``(name, function)`` in declaration order, base classes first.

    An override keeps the position of the member it overrides. Static and
    class methods are unwrapped to their function.
    """
    seen: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, member in vars(klass).items():
            func = getattr(member, "__func__", member)
            if inspect.isfunction(func):
                seen[name] = func
            elif name in seen:
                del seen[name]
    yield from seen.items()
