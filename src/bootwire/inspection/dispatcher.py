from __future__ import annotations

import logging
from collections.abc import Sequence

from bootwire.bootstrapper import Bootstrapper, IBootstrapperDispatcher
from bootwire.container_interface import IContainer
from bootwire.inspection.caching import IBootstrapperBindingCache
from bootwire.inspection.inspector import BindingInspector
from bootwire.inspection.registrant import LazyBindingRegistrant
from bootwire.lock_mode import LockMode

logger = logging.getLogger(__name__)


class BindingInspectorBootstrapperDispatcher(IBootstrapperDispatcher):
    """Dispatch bootstrappers lazily using binding inspection.

    Bindings come from the cache when one is configured and holds an entry,
    otherwise from inspecting the bootstrappers (and are then cached). Each
    binding is registered as a lazy factory, so no bootstrapper runs for real
    until something resolves an interface it binds.
    """

    def __init__(
        self,
        container: IContainer,
        binding_cache: IBootstrapperBindingCache | None = None,
        binding_inspector: BindingInspector | None = None,
        *,
        lock_mode: LockMode = LockMode.THREAD,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            container: The container bootstrappers are dispatched against.
            binding_cache: Cache for inspected bindings, or ``None`` to inspect
                on every dispatch.
            binding_inspector: Inspector to use, or ``None`` for the default.
            lock_mode: Lock strategy of the underlying lazy binding registrant.

        """
        self._binding_cache = binding_cache
        self._binding_inspector = binding_inspector or BindingInspector()
        self._lazy_binding_registrant = LazyBindingRegistrant(container, lock_mode=lock_mode)

    def dispatch(self, bootstrappers: Sequence[Bootstrapper]) -> None:
        """Register lazy bindings for the bootstrappers.

        Raises:
            BootwireImpossibleBindingError: If inspection finds no valid
                ordering of the bootstrappers.

        """
        if self._binding_cache is None:
            bindings = self._binding_inspector.get_bindings(bootstrappers)
        else:
            cached_bindings = self._binding_cache.get()
            if cached_bindings is None:
                logger.info("Bootstrapper binding cache miss, inspecting %d bootstrappers", len(bootstrappers))
                bindings = self._binding_inspector.get_bindings(bootstrappers)
                self._binding_cache.set(bindings)
            else:
                logger.info("Bootstrapper binding cache hit, %d bindings", len(cached_bindings))
                bindings = cached_bindings

        self._lazy_binding_registrant.register_bindings(bindings)
