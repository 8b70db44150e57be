from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from bootwire.container_interface import IContainer


class Bootstrapper(ABC):
    """A unit of registration logic.

    Subclasses bind interfaces into the container they are given, and may
    resolve interfaces bound by other bootstrappers. They must only talk to
    the container through ``IContainer`` so that they can be inspected
    without running for real.
    """

    @abstractmethod
    def register_bindings(self, container: IContainer) -> None:
        """Register bindings into the container."""


class IBootstrapperDispatcher(ABC):
    """Interface for objects that get bootstrapper bindings into a container."""

    @abstractmethod
    def dispatch(self, bootstrappers: Sequence[Bootstrapper]) -> None:
        """Dispatch the bootstrappers, in order."""


class EagerBootstrapperDispatcher(IBootstrapperDispatcher):
    """Run every bootstrapper's registration logic immediately, in order."""

    def __init__(self, container: IContainer) -> None:
        self._container = container

    def dispatch(self, bootstrappers: Sequence[Bootstrapper]) -> None:
        for bootstrapper in bootstrappers:
            bootstrapper.register_bindings(self._container)
