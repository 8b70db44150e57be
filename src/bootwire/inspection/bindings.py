from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bootwire.bootstrapper import Bootstrapper


@dataclass(frozen=True)
class BootstrapperBinding:
    """Record that a bootstrapper makes an interface resolvable when it runs."""

    interface: Any
    """The interface the bootstrapper binds."""
    bootstrapper: Bootstrapper
    """The bootstrapper whose registration logic performs the real bind."""
    target_class: Any = field(default=None, init=False)
    """Target class the binding is scoped to, or ``None`` for universal bindings."""


@dataclass(frozen=True)
class UniversalBootstrapperBinding(BootstrapperBinding):
    """A binding visible to every consumer of the interface."""


@dataclass(frozen=True, init=False)
class TargetedBootstrapperBinding(BootstrapperBinding):
    """A binding visible only while resolving for ``target_class``."""

    def __init__(self, target_class: Any, interface: Any, bootstrapper: Bootstrapper) -> None:
        object.__setattr__(self, "interface", interface)
        object.__setattr__(self, "bootstrapper", bootstrapper)
        object.__setattr__(self, "target_class", target_class)


def create_binding(target_class: Any, interface: Any, bootstrapper: Bootstrapper) -> BootstrapperBinding:
    """Build a universal binding when ``target_class`` is ``None``, a targeted one otherwise."""
    if target_class is None:
        return UniversalBootstrapperBinding(interface, bootstrapper)
    return TargetedBootstrapperBinding(target_class, interface, bootstrapper)
