from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from bootwire.bootstrapper import Bootstrapper
from bootwire.exceptions import BootwireImpossibleBindingError, BootwireResolutionError, describe_key
from bootwire.inspection.bindings import BootstrapperBinding
from bootwire.inspection.container import BindingInspectionContainer, BindingKey

logger = logging.getLogger(__name__)


class BindingInspector:
    """Discover the bindings bootstrappers produce by simulating them.

    Each bootstrapper runs against a ``BindingInspectionContainer``. A
    bootstrapper that resolves something nobody has bound yet is moved to the
    back of the queue and retried after the others, so the returned bindings
    are ordered such that every resolve is preceded by the bind it needs.
    """

    def __init__(
        self,
        inspection_container_factory: Callable[[], BindingInspectionContainer] = BindingInspectionContainer,
    ) -> None:
        """Initialize the inspector.

        Args:
            inspection_container_factory: Builds the inspection container. A
                fresh container is created for every ``get_bindings`` call.

        """
        self._inspection_container_factory = inspection_container_factory

    def get_bindings(self, bootstrappers: Sequence[Bootstrapper]) -> list[BootstrapperBinding]:
        """Inspect bootstrappers and return the bindings they produce, in order.

        Args:
            bootstrappers: Bootstrappers to inspect, in preferred order.

        Returns:
            One binding per bind that took effect, ordered so that bindings a
            bootstrapper depends on come before the bootstrapper's own.

        Raises:
            BootwireImpossibleBindingError: If the bootstrappers depend on each
                other cyclically, resolve something nothing binds, or resolve
                universally what is only bound for specific targets.

        """
        container = self._inspection_container_factory()
        pending: deque[Bootstrapper] = deque(bootstrappers)
        remaining_attempts = len(pending) ** 2
        attempt_count = 0
        failed_resolves_by_bootstrapper: dict[int, list[BindingKey]] = {}

        while pending:
            if remaining_attempts <= 0:
                raise self._create_unresolvable_error(container, pending, failed_resolves_by_bootstrapper)

            bootstrapper = pending.popleft()
            attempt_count += 1
            failed_resolves = self._inspect_bootstrapper(container, bootstrapper)
            if not failed_resolves:
                logger.debug("Committed bindings of %s", describe_key(bootstrapper))
                continue

            logger.debug(
                "Deferred %s until %s is bound",
                describe_key(bootstrapper),
                describe_key(failed_resolves[0][1]),
            )
            failed_resolves_by_bootstrapper[id(bootstrapper)] = failed_resolves
            pending.append(bootstrapper)
            remaining_attempts -= 1

        bindings = container.get_bindings()
        logger.info(
            "Inspected %d bootstrappers: %d bindings found in %d attempts",
            len(bootstrappers),
            len(bindings),
            attempt_count,
        )
        return bindings

    def _inspect_bootstrapper(
        self,
        container: BindingInspectionContainer,
        bootstrapper: Bootstrapper,
    ) -> list[BindingKey]:
        """Simulate one bootstrapper, returning the resolves that could not be satisfied."""
        container.begin_attempt(bootstrapper)
        try:
            bootstrapper.register_bindings(container)
        except BootwireResolutionError:
            if not container.failed_resolves:
                container.discard_attempt()
                raise
        except Exception:
            container.discard_attempt()
            raise

        failed_resolves = container.failed_resolves
        if failed_resolves:
            container.discard_attempt()
        else:
            container.commit_attempt()
        return failed_resolves

    def _create_unresolvable_error(
        self,
        container: BindingInspectionContainer,
        pending: Iterable[Bootstrapper],
        failed_resolves_by_bootstrapper: dict[int, list[BindingKey]],
    ) -> BootwireImpossibleBindingError:
        bootstrappers = tuple(pending)
        scope_conflicts = [
            (interface, bootstrapper)
            for bootstrapper in bootstrappers
            for target_class, interface in failed_resolves_by_bootstrapper.get(id(bootstrapper), [])
            if target_class is None and container.is_bound_only_for_targets(interface)
        ]
        if scope_conflicts:
            return self._create_scope_conflict_error(scope_conflicts)

        interfaces: list[Any] = []
        details: list[str] = []
        for bootstrapper in bootstrappers:
            failed_resolves = failed_resolves_by_bootstrapper.get(id(bootstrapper), [])
            names = []
            for target_class, interface in failed_resolves:
                if interface not in interfaces:
                    interfaces.append(interface)
                name = describe_key(interface)
                if target_class is not None:
                    name += f" (for {describe_key(target_class)})"
                names.append(name)
            details.append(f"{describe_key(bootstrapper)} needs {', '.join(names) or 'nothing'}")

        msg = (
            "Bootstrappers have cyclical or unsatisfiable dependencies: "
            + "; ".join(details)
        )
        return BootwireImpossibleBindingError(msg, interfaces=interfaces, bootstrappers=bootstrappers)

    def _create_scope_conflict_error(
        self,
        scope_conflicts: list[tuple[Any, Bootstrapper]],
    ) -> BootwireImpossibleBindingError:
        interfaces: list[Any] = []
        bootstrappers: list[Bootstrapper] = []
        for interface, bootstrapper in scope_conflicts:
            if interface not in interfaces:
                interfaces.append(interface)
            if bootstrapper not in bootstrappers:
                bootstrappers.append(bootstrapper)

        interface, bootstrapper = scope_conflicts[0]
        msg = (
            f"{describe_key(interface)} is only bound for specific target classes, "
            f"but {describe_key(bootstrapper)} resolves it universally."
        )
        return BootwireImpossibleBindingError(msg, interfaces=interfaces, bootstrappers=bootstrappers)
