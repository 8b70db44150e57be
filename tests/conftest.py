"""Shared pytest fixtures for bootwire tests."""

import pytest

from bootwire import BindingInspector, Container, LazyBindingRegistrant, LockMode
from bootwire.inspection import BindingInspectionContainer


@pytest.fixture()
def container() -> Container:
    """Default container with autowiring enabled."""
    return Container()


@pytest.fixture()
def container_no_autowire() -> Container:
    """Container that only resolves explicit bindings."""
    return Container(autowire=False)


@pytest.fixture()
def inspection_container() -> BindingInspectionContainer:
    return BindingInspectionContainer()


@pytest.fixture()
def inspector() -> BindingInspector:
    return BindingInspector()


@pytest.fixture()
def registrant(container_no_autowire: Container) -> LazyBindingRegistrant:
    """Registrant bound to a strict container so missing binds fail loudly."""
    return LazyBindingRegistrant(container_no_autowire, lock_mode=LockMode.NONE)
