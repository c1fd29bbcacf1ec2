"""Module and class discovery for registering event variants by convention.

This module scans Python packages for event variants so that a registry
can be populated from a package name instead of an explicit list.
"""

import importlib
import inspect
import pkgutil
from collections.abc import Callable, Iterable
from types import ModuleType
from typing import TypeVar

T = TypeVar("T")


def _should_skip_module(module_name: str) -> bool:
    """Check if a module should be skipped during scanning.

    Args:
        module_name: Base name of the module to check

    Returns:
        True if module should be skipped
    """
    return module_name.startswith("test_") or (
        module_name.startswith("_") and module_name != "__init__"
    )


class ModuleScanner:
    """Recursively scan packages for Python modules.

    Handles various package structures:
    - Direct files: myapp/events.py
    - Packages: myapp/users/__init__.py
    - Nested packages: myapp/users/events/created.py (recursive)

    Automatically skips:
    - Test files (test_*.py)
    - Private modules (_*.py, except __init__.py)
    """

    def __init__(self, package_name: str):
        """Initialize scanner for a package.

        Args:
            package_name: Fully qualified package name (e.g., "myapp.domain")

        Raises:
            ImportError: If the package cannot be imported
        """
        self.package_name = package_name
        self.root_module = importlib.import_module(package_name)

    def scan_all_modules(self) -> Iterable[ModuleType]:
        """Scan all non-private modules in the package recursively.

        Yields:
            ModuleType: All discovered modules

        Examples:
            >>> scanner = ModuleScanner("evented.users")
            >>> for module in scanner.scan_all_modules():
            ...     print(module.__name__)
            evented.users
            evented.users.events
            evented.users.models
        """
        yield self.root_module
        yield from self._scan_package_recursive(self.root_module)

    def _scan_package_recursive(self, package: ModuleType) -> Iterable[ModuleType]:
        if not hasattr(package, "__path__"):
            return

        for _importer, modname, is_pkg in pkgutil.iter_modules(
            package.__path__, prefix=f"{package.__name__}."
        ):
            basename = modname.split(".")[-1]
            if _should_skip_module(basename):
                continue

            try:
                module = importlib.import_module(modname)
            except ImportError as e:
                msg = (
                    f"Failed to import module {modname} "
                    f"while scanning {package.__name__}. Error: {e}"
                )
                raise ImportError(msg) from e

            yield module
            if is_pkg:
                yield from self._scan_package_recursive(module)


class ClassScanner:
    """Extract classes from modules by type."""

    @staticmethod
    def find_subclasses(
        module: ModuleType,
        base_class: type[T],
        predicate: Callable[[type[T]], bool] | None = None,
    ) -> Iterable[type[T]]:
        """Find all subclasses of base_class defined in module.

        Filters out:
        - The base class itself
        - Private classes (names starting with _)
        - Classes not defined in the module (imported from elsewhere)
        - Classes rejected by ``predicate``, when given

        Args:
            module: Module to scan
            base_class: Base class to find subclasses of
            predicate: Optional extra filter

        Yields:
            type[T]: Subclasses of base_class
        """
        for name, obj in inspect.getmembers(module, inspect.isclass):
            if not _should_include_subclass(obj, name, base_class, module):
                continue
            if predicate is None or predicate(obj):
                yield obj


def _should_include_subclass(
    cls: type, name: str, base_class: type, module: ModuleType
) -> bool:
    return (
        issubclass(cls, base_class)
        and cls is not base_class
        and not name.startswith("_")
        and not inspect.isabstract(cls)
        and cls.__module__ == module.__name__
    )
