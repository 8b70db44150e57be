from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(kw_only=True)
class ContainerBinding:
    """Describe how the real container produces a value for one interface."""

    resolve_as_singleton: bool = False
    """Cache the first produced value and return it on later resolutions."""

    cached_instance: Any = field(default=None, init=False, repr=False)
    has_cached_instance: bool = field(default=False, init=False, repr=False)


@dataclass(kw_only=True)
class InstanceContainerBinding(ContainerBinding):
    """Bind a pre-built instance."""

    instance: Any
    resolve_as_singleton: bool = True


@dataclass(kw_only=True)
class FactoryContainerBinding(ContainerBinding):
    """Bind a zero-argument factory."""

    factory: Callable[[], Any]


@dataclass(kw_only=True)
class ClassContainerBinding(ContainerBinding):
    """Bind a concrete class that is autowired on resolution."""

    concrete_class: type
    primitives: tuple[Any, ...] = ()
