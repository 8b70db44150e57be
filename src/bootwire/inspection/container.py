from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Any, TypeVar

from bootwire.bootstrapper import Bootstrapper
from bootwire.container_interface import IContainer
from bootwire.exceptions import BootwireResolutionError, describe_key
from bootwire.inspection.bindings import BootstrapperBinding, create_binding

T = TypeVar("T")

BindingKey = tuple[Any, Any]
"""``(target_class, interface)``; the target is ``None`` for universal bindings."""


class InspectionPlaceholder:
    """Stand-in value returned by ``BindingInspectionContainer.resolve``.

    Attribute access, calls and iteration all succeed and yield more
    placeholders (or nothing), so bootstrappers that touch a resolved value
    while registering keep running during inspection.
    """

    __slots__ = ("_interface",)

    def __init__(self, interface: Any) -> None:
        object.__setattr__(self, "_interface", interface)

    def __getattr__(self, name: str) -> InspectionPlaceholder:
        return InspectionPlaceholder(self._interface)

    def __setattr__(self, name: str, value: Any) -> None:
        pass

    def __call__(self, *args: Any, **kwargs: Any) -> InspectionPlaceholder:
        return self

    def __iter__(self) -> Iterator[Any]:
        return iter(())

    def __enter__(self) -> InspectionPlaceholder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def __repr__(self) -> str:
        return f"<InspectionPlaceholder for {describe_key(self._interface)}>"


class BindingInspectionContainer(IContainer):
    """Record what bootstrappers bind and resolve instead of doing it.

    The inspector drives the container one attempt at a time: it calls
    ``begin_attempt`` with the bootstrapper about to be simulated, runs the
    bootstrapper against this container, then either ``commit_attempt`` or
    ``discard_attempt``. Binds from committed attempts are kept as
    ``BootstrapperBinding`` records in the order they took effect.

    One instance serves one inspection pass and is not thread-safe.
    """

    def __init__(self) -> None:
        self._target_stack: list[Any] = []
        self._bindings: dict[BindingKey, BootstrapperBinding] = {}
        self._bootstrapper: Bootstrapper | None = None
        self._attempt_binds: dict[BindingKey, None] = {}
        self._attempt_failed_resolves: list[BindingKey] = []

    @property
    def current_target(self) -> Any:
        return self._target_stack[-1] if self._target_stack else None

    @property
    def failed_resolves(self) -> list[BindingKey]:
        """Resolves of the current attempt that nothing could satisfy yet."""
        return list(self._attempt_failed_resolves)

    def get_bindings(self) -> list[BootstrapperBinding]:
        """Return the bindings of every committed attempt, in effect order."""
        return list(self._bindings.values())

    # region Attempts
    def begin_attempt(self, bootstrapper: Bootstrapper) -> None:
        self._bootstrapper = bootstrapper
        self._attempt_binds = {}
        self._attempt_failed_resolves = []
        self._target_stack = []

    def commit_attempt(self) -> list[BootstrapperBinding]:
        """Turn the current attempt's binds into bindings and return them."""
        bootstrapper = self._require_bootstrapper()
        committed: list[BootstrapperBinding] = []
        for target_class, interface in self._attempt_binds:
            # Last bind wins, at the position where it happened.
            self._bindings.pop((target_class, interface), None)
            binding = create_binding(target_class, interface, bootstrapper)
            self._bindings[(target_class, interface)] = binding
            committed.append(binding)
        self._end_attempt()
        return committed

    def discard_attempt(self) -> None:
        self._end_attempt()

    def _end_attempt(self) -> None:
        self._bootstrapper = None
        self._attempt_binds = {}
        self._attempt_failed_resolves = []
        self._target_stack = []

    def _require_bootstrapper(self) -> Bootstrapper:
        if self._bootstrapper is None:
            msg = "The inspection container is only usable while a bootstrapper is being inspected."
            raise RuntimeError(msg)
        return self._bootstrapper

    # endregion Attempts

    # region Recording
    def bind_instance(self, interface: Any, instance: Any) -> None:
        self._record_bind(interface)

    def bind_factory(
        self,
        interface: Any,
        factory: Callable[[], Any],
        *,
        resolve_as_singleton: bool = False,
    ) -> None:
        self._record_bind(interface)

    def bind_class(
        self,
        interface: Any,
        concrete_class: type | None = None,
        primitives: Sequence[Any] = (),
        *,
        resolve_as_singleton: bool = False,
    ) -> None:
        self._record_bind(interface)

    def unbind(self, interface: Any) -> None:
        self._attempt_binds.pop((self.current_target, interface), None)

    def has_binding(self, interface: Any) -> bool:
        return self._is_satisfiable(self.current_target, interface)

    def resolve(self, interface: Any) -> Any:
        self._require_bootstrapper()
        target_class = self.current_target
        if self._is_satisfiable(target_class, interface):
            return InspectionPlaceholder(interface)

        # A later bootstrapper may still bind the interface universally, so a
        # targeted-only interface is retried like any other missing one.
        self._attempt_failed_resolves.append((target_class, interface))
        if target_class is None and self.is_bound_only_for_targets(interface):
            reason = "only bound for specific target classes so far"
        else:
            reason = "not bound by any bootstrapper yet"
        raise BootwireResolutionError(interface, target_class, reason=reason)

    def for_target(self, target_class: Any, callback: Callable[[BindingInspectionContainer], T]) -> T:
        self._target_stack.append(target_class)
        try:
            return callback(self)
        finally:
            self._target_stack.pop()

    def _record_bind(self, interface: Any) -> None:
        self._require_bootstrapper()
        key = (self.current_target, interface)
        self._attempt_binds.pop(key, None)
        self._attempt_binds[key] = None

    def _is_bound(self, key: BindingKey) -> bool:
        return key in self._bindings or key in self._attempt_binds

    def _is_satisfiable(self, target_class: Any, interface: Any) -> bool:
        if self._is_bound((None, interface)):
            return True
        return target_class is not None and self._is_bound((target_class, interface))

    def is_bound_only_for_targets(self, interface: Any) -> bool:
        """Return whether ``interface`` has targeted binds but no universal one."""
        if self._is_bound((None, interface)):
            return False
        return any(
            target_class is not None and bound_interface == interface
            for target_class, bound_interface in (*self._bindings, *self._attempt_binds)
        )

    # endregion Recording
