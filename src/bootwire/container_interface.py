from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, TypeVar, overload

from typing_extensions import Self

T = TypeVar("T")


class IContainer(ABC):
    """Interface for container-like objects.

    Implemented by the real ``Container`` and by the
    ``BindingInspectionContainer`` that bootstrappers run against during
    inspection. Bootstrappers should only depend on this interface.
    """

    @abstractmethod
    def bind_instance(self, interface: Any, instance: Any) -> None:
        """Bind an already-built instance to an interface."""

    @abstractmethod
    def bind_factory(
        self,
        interface: Any,
        factory: Callable[[], Any],
        *,
        resolve_as_singleton: bool = False,
    ) -> None:
        """Bind a zero-argument factory to an interface."""

    @abstractmethod
    def bind_class(
        self,
        interface: Any,
        concrete_class: type | None = None,
        primitives: Sequence[Any] = (),
        *,
        resolve_as_singleton: bool = False,
    ) -> None:
        """Bind a class that is autowired on resolution.

        ``concrete_class`` defaults to ``interface`` itself.
        """

    def bind_prototype(
        self,
        interface: Any,
        concrete_class: type | None = None,
        primitives: Sequence[Any] = (),
    ) -> None:
        """Bind a class that is built anew on every resolution."""
        self.bind_class(interface, concrete_class, primitives, resolve_as_singleton=False)

    def bind_singleton(
        self,
        interface: Any,
        concrete_class: type | None = None,
        primitives: Sequence[Any] = (),
    ) -> None:
        """Bind a class that is built once and then reused."""
        self.bind_class(interface, concrete_class, primitives, resolve_as_singleton=True)

    @abstractmethod
    def unbind(self, interface: Any) -> None:
        """Remove the binding for an interface in the current target scope."""

    @abstractmethod
    def has_binding(self, interface: Any) -> bool:
        """Return whether the interface is bound for the current target or universally."""

    @overload
    @abstractmethod
    def resolve(self, interface: type[T]) -> T: ...

    @overload
    @abstractmethod
    def resolve(self, interface: Any) -> Any: ...

    @abstractmethod
    def resolve(self, interface: Any) -> Any:
        """Resolve an interface, raising ``BootwireResolutionError`` when unbound."""

    @abstractmethod
    def for_target(self, target_class: Any, callback: Callable[[Self], T]) -> T:
        """Run ``callback`` with this container scoped to ``target_class``.

        Binds and resolves made inside the callback apply to ``target_class``
        only. A ``target_class`` of ``None`` selects the universal scope, even
        inside an enclosing ``for_target`` block. The previous scope is
        restored when the callback returns or raises.
        """
