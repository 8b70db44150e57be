from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def describe_key(value: Any) -> str:
    """Return a readable name for an interface, target class or bootstrapper."""
    if isinstance(value, str):
        return repr(value)
    if isinstance(value, type):
        return value.__qualname__
    return type(value).__qualname__


class BootwireError(Exception):
    """Represent a base class for all bootwire-specific failures.

    Catch this type when you want to handle any bootwire error path without
    matching each concrete exception class individually.
    """


class BootwireInvalidBindingError(BootwireError):
    """Signal an invalid binding call.

    Raised by ``bind_factory`` when the factory is not callable and by
    ``bind_class`` when the concrete class is not a class.
    """


class BootwireResolutionError(BootwireError):
    """Signal that an interface cannot be resolved.

    Raised by ``resolve`` when no binding exists for the interface in the
    current target scope and the interface cannot be autowired.

    Typical fixes include binding the interface in a bootstrapper, binding it
    universally instead of only for a target class, or enabling autowiring for
    concrete classes.
    """

    def __init__(self, interface: Any, target_class: Any = None, reason: str | None = None) -> None:
        self.interface = interface
        self.target_class = target_class
        msg = f"Interface {describe_key(interface)} is not bound"
        if target_class is not None:
            msg += f" for target {describe_key(target_class)}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class BootwireCircularDependencyError(BootwireResolutionError):
    """Signal a constructor dependency cycle found while autowiring.

    The ``chain`` attribute lists the interfaces in resolution order, ending
    with the interface that closed the cycle.
    """

    def __init__(self, chain: Iterable[Any]) -> None:
        self.chain = tuple(chain)
        path = " -> ".join(describe_key(item) for item in self.chain)
        super().__init__(self.chain[-1], reason=f"circular dependency {path}")


class BootwireImpossibleBindingError(BootwireError):
    """Signal that no ordering of bootstrappers can satisfy every resolve.

    Raised by ``BindingInspector.get_bindings`` when the retry budget is
    exhausted (a cyclical or unsatisfiable bootstrapper set) or when a
    universal resolve could only be satisfied by a targeted binding.

    Treat this as a fatal startup configuration error.
    """

    def __init__(
        self,
        message: str,
        *,
        interfaces: Iterable[Any] = (),
        bootstrappers: Iterable[Any] = (),
    ) -> None:
        self.interfaces = tuple(interfaces)
        self.bootstrappers = tuple(bootstrappers)
        super().__init__(message)
