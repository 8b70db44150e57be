from __future__ import annotations

import sys
import textwrap
from collections.abc import Iterator
from pathlib import Path

import pytest

from bootwire import BootstrapperFinder

_BOOTSTRAPPER_MODULE = """
from abc import abstractmethod

from bootwire import Bootstrapper, IContainer


class {name}(Bootstrapper):
    def register_bindings(self, container: IContainer) -> None:
        container.bind_instance("{name}", object())
"""


@pytest.fixture()
def bootstrapper_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    package_name = "finder_fixture_app"
    root = tmp_path / package_name
    (root / "billing").mkdir(parents=True)
    (root / "__init__.py").write_text("")
    (root / "billing" / "__init__.py").write_text("")
    (root / "mail.py").write_text(_BOOTSTRAPPER_MODULE.format(name="MailBootstrapper"))
    (root / "billing" / "invoices.py").write_text(
        _BOOTSTRAPPER_MODULE.format(name="InvoiceBootstrapper")
        + textwrap.dedent(
            """

            class AbstractBootstrapper(Bootstrapper):
                @abstractmethod
                def extra(self) -> None: ...


            class _PrivateBootstrapper(Bootstrapper):
                def register_bindings(self, container: IContainer) -> None:
                    pass
            """,
        ),
    )
    (root / "reexports.py").write_text("from finder_fixture_app.mail import MailBootstrapper\n")
    (root / "test_bootstrappers.py").write_text(_BOOTSTRAPPER_MODULE.format(name="TestOnlyBootstrapper"))
    (root / "_private.py").write_text(_BOOTSTRAPPER_MODULE.format(name="HiddenBootstrapper"))

    monkeypatch.syspath_prepend(str(tmp_path))
    yield package_name
    for module_name in [name for name in sys.modules if name.startswith(package_name)]:
        del sys.modules[module_name]


class TestBootstrapperFinder:
    def test_finds_concrete_bootstrappers_recursively(self, bootstrapper_package: str) -> None:
        found = BootstrapperFinder().find_all(bootstrapper_package)

        assert [cls.__qualname__ for cls in found] == ["InvoiceBootstrapper", "MailBootstrapper"]

    def test_scanning_twice_does_not_duplicate(self, bootstrapper_package: str) -> None:
        found = BootstrapperFinder().find_all(bootstrapper_package, f"{bootstrapper_package}.mail")

        assert [cls.__qualname__ for cls in found] == ["InvoiceBootstrapper", "MailBootstrapper"]

    def test_broken_module_raises_import_error(self, bootstrapper_package: str, tmp_path: Path) -> None:
        (tmp_path / bootstrapper_package / "broken.py").write_text("import does_not_exist_anywhere\n")

        with pytest.raises(ImportError, match="Failed to import module finder_fixture_app.broken"):
            BootstrapperFinder().find_all(bootstrapper_package)
