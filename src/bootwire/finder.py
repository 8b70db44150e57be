"""Discovery of bootstrapper classes in packages."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from collections.abc import Iterable
from types import ModuleType

from bootwire.bootstrapper import Bootstrapper


def _should_skip_module(module_name: str) -> bool:
    """Return whether a module is a test module or private."""
    return module_name.startswith("test_") or (
        module_name.startswith("_") and module_name != "__init__"
    )


class BootstrapperFinder:
    """Find concrete ``Bootstrapper`` subclasses by scanning packages.

    Skips test modules (``test_*``), private modules (``_*``), abstract
    classes, private classes and classes merely imported into a module.
    """

    def find_all(self, *package_names: str) -> list[type[Bootstrapper]]:
        """Import the packages recursively and return their bootstrapper classes.

        Args:
            package_names: Fully qualified names of packages or modules to scan.

        Returns:
            Bootstrapper classes ordered by module name, then definition order.

        Raises:
            ImportError: If a package or one of its modules fails to import.

        """
        found: list[type[Bootstrapper]] = []
        seen_modules: set[str] = set()
        for package_name in package_names:
            for module in sorted(self._scan(importlib.import_module(package_name)), key=lambda m: m.__name__):
                if module.__name__ in seen_modules:
                    continue
                seen_modules.add(module.__name__)
                for bootstrapper_class in self._find_in_module(module):
                    if bootstrapper_class not in found:
                        found.append(bootstrapper_class)
        return found

    def _scan(self, package: ModuleType) -> Iterable[ModuleType]:
        yield package
        if not hasattr(package, "__path__"):
            return

        for _finder, module_name, is_package in pkgutil.iter_modules(
            package.__path__,
            prefix=f"{package.__name__}.",
        ):
            if _should_skip_module(module_name.rsplit(".", 1)[-1]):
                continue

            try:
                module = importlib.import_module(module_name)
            except ImportError as error:
                msg = f"Failed to import module {module_name} while scanning {package.__name__}: {error}"
                raise ImportError(msg) from error

            if is_package:
                yield from self._scan(module)
            else:
                yield module

    @staticmethod
    def _find_in_module(module: ModuleType) -> list[type[Bootstrapper]]:
        classes = [
            value
            for name, value in vars(module).items()
            if inspect.isclass(value)
            and issubclass(value, Bootstrapper)
            and value is not Bootstrapper
            and not inspect.isabstract(value)
            and not name.startswith("_")
            and value.__module__ == module.__name__
        ]
        return classes
