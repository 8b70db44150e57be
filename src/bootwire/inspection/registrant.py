from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, TypeVar

from bootwire.bootstrapper import Bootstrapper
from bootwire.container_interface import IContainer
from bootwire.exceptions import describe_key
from bootwire.inspection.bindings import BootstrapperBinding
from bootwire.lock_mode import LockMode

T = TypeVar("T")

logger = logging.getLogger(__name__)


class LazyBindingState(Enum):
    """Lifecycle of a lazy binding factory."""

    PENDING = "pending"
    """Installed, not yet triggered by a resolve."""

    DISPATCHED = "dispatched"
    """Triggered; the real binding replaced the factory."""


class LazyBindingFactory:
    """Placeholder factory that swaps itself for the real binding on first use.

    When called it unbinds itself, dispatches the owning bootstrapper unless
    the registrant already did, and resolves the interface again, now hitting
    the binding the bootstrapper made.
    """

    def __init__(self, registrant: LazyBindingRegistrant, binding: BootstrapperBinding) -> None:
        self.registrant = registrant
        self.binding = binding
        self.state = LazyBindingState.PENDING

    def __call__(self) -> Any:
        return self.registrant.resolve_lazily(self)

    def __repr__(self) -> str:
        return (
            f"LazyBindingFactory({describe_key(self.binding.interface)}, "
            f"bootstrapper={describe_key(self.binding.bootstrapper)}, state={self.state.value})"
        )


class LazyBindingRegistrant:
    """Register inspected bindings into a container as lazy factories.

    Each bootstrapper's real registration logic runs at most once per
    registrant, on the first resolve of any interface it binds.
    """

    def __init__(self, container: IContainer, *, lock_mode: LockMode = LockMode.THREAD) -> None:
        """Initialize the registrant.

        Args:
            container: The container lazy factories are bound to and
                bootstrappers are dispatched against.
            lock_mode: Lock strategy guarding dispatch. Use ``LockMode.THREAD``
                when the container is resolved from several threads.

        """
        self._container = container
        self._lock = lock_mode.create_lock()
        self._dispatched_bootstrappers: dict[int, Bootstrapper] = {}

    def is_dispatched(self, bootstrapper: Bootstrapper) -> bool:
        """Return whether the bootstrapper's real registration logic already ran."""
        return id(bootstrapper) in self._dispatched_bootstrappers

    def register_bindings(self, bindings: Iterable[BootstrapperBinding]) -> None:
        """Bind a lazy factory for every binding.

        Args:
            bindings: Inspected bindings, in the order they should be bound.

        """
        for binding in bindings:
            self._install(LazyBindingFactory(self, binding))
            logger.debug(
                "Installed lazy binding for %s from %s",
                describe_key(binding.interface),
                describe_key(binding.bootstrapper),
            )

    def resolve_lazily(self, factory: LazyBindingFactory) -> Any:
        """Dispatch the factory's bootstrapper if needed and resolve the real value.

        Errors raised by the bootstrapper propagate unchanged. The bootstrapper
        is then not marked dispatched and the lazy factory is bound again, so
        the next resolve retries.
        """
        binding = factory.binding
        with self._lock:
            # Threads that looked the factory up before it was replaced end up
            # here after the first caller; they only need the real value.
            if factory.state is LazyBindingState.PENDING:
                # Unbind first so that resolving the interface below, or from
                # inside the bootstrapper, never lands back in this factory.
                self._in_scope(binding, lambda container: container.unbind(binding.interface))
                factory.state = LazyBindingState.DISPATCHED
                self._dispatch(factory)

            return self._in_scope(binding, lambda container: container.resolve(binding.interface))

    def _dispatch(self, factory: LazyBindingFactory) -> None:
        bootstrapper = factory.binding.bootstrapper
        if self.is_dispatched(bootstrapper):
            return

        try:
            # A universal factory may fire while the container is building a
            # target class; registration always starts from the universal scope.
            self._container.for_target(None, bootstrapper.register_bindings)
        except Exception:
            factory.state = LazyBindingState.PENDING
            self._install(factory)
            raise
        self._dispatched_bootstrappers[id(bootstrapper)] = bootstrapper
        logger.debug("Dispatched %s", describe_key(bootstrapper))

    def _install(self, factory: LazyBindingFactory) -> None:
        binding = factory.binding
        self._in_scope(binding, lambda container: container.bind_factory(binding.interface, factory))

    def _in_scope(self, binding: BootstrapperBinding, callback: Callable[[IContainer], T]) -> T:
        # Universal bindings switch to the ``None`` target too, never the caller's.
        return self._container.for_target(binding.target_class, callback)
