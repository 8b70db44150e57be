from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Callable, Sequence
from contextvars import ContextVar
from typing import Any, TypeVar

from bootwire.container_bindings import (
    ClassContainerBinding,
    ContainerBinding,
    FactoryContainerBinding,
    InstanceContainerBinding,
)
from bootwire.container_interface import IContainer
from bootwire.exceptions import (
    BootwireCircularDependencyError,
    BootwireInvalidBindingError,
    BootwireResolutionError,
    describe_key,
)
from bootwire.lock_mode import LockMode

T = TypeVar("T")

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES: frozenset[type] = frozenset(
    {int, float, complex, str, bytes, bool, list, dict, set, frozenset, tuple},
)


class Container(IContainer):
    """Store bindings and resolve interfaces, optionally scoped to a target class.

    Bindings are keyed by ``(target_class, interface)``; universal bindings use
    ``None`` as the target. While inside ``for_target`` (or while autowiring a
    class) a targeted binding for the current target wins over the universal
    one.

    Unbound concrete classes are autowired from their constructor type hints
    unless ``autowire=False``.
    """

    def __init__(
        self,
        *,
        autowire: bool = True,
        lock_mode: LockMode = LockMode.THREAD,
    ) -> None:
        """Initialize an empty container.

        Args:
            autowire: Build unbound concrete classes on demand by resolving
                their constructor parameters.
            lock_mode: Lock strategy guarding the binding table and singleton
                caches.

        """
        self._autowire = autowire
        self._lock = lock_mode.create_lock()
        self._bindings: dict[tuple[Any, Any], ContainerBinding] = {}
        # Per execution context, so threads and tasks never see each other's targets.
        self._target_stack: ContextVar[tuple[Any, ...]] = ContextVar(
            f"bootwire_target_stack_{id(self)}",
            default=(),
        )
        self._resolution_stack: ContextVar[tuple[Any, ...]] = ContextVar(
            f"bootwire_resolution_stack_{id(self)}",
            default=(),
        )

    @property
    def current_target(self) -> Any:
        """Target class of the innermost ``for_target`` block, or ``None``."""
        stack = self._target_stack.get()
        return stack[-1] if stack else None

    # region Binding Methods
    def bind_instance(self, interface: Any, instance: Any) -> None:
        self._set_binding(interface, InstanceContainerBinding(instance=instance))

    def bind_factory(
        self,
        interface: Any,
        factory: Callable[[], Any],
        *,
        resolve_as_singleton: bool = False,
    ) -> None:
        if not callable(factory):
            msg = f"Factory bound to {describe_key(interface)} must be callable, got {factory!r}."
            raise BootwireInvalidBindingError(msg)
        self._set_binding(
            interface,
            FactoryContainerBinding(factory=factory, resolve_as_singleton=resolve_as_singleton),
        )

    def bind_class(
        self,
        interface: Any,
        concrete_class: type | None = None,
        primitives: Sequence[Any] = (),
        *,
        resolve_as_singleton: bool = False,
    ) -> None:
        concrete = interface if concrete_class is None else concrete_class
        if not isinstance(concrete, type):
            msg = f"Concrete class bound to {describe_key(interface)} must be a class, got {concrete!r}."
            raise BootwireInvalidBindingError(msg)
        self._set_binding(
            interface,
            ClassContainerBinding(
                concrete_class=concrete,
                primitives=tuple(primitives),
                resolve_as_singleton=resolve_as_singleton,
            ),
        )

    def unbind(self, interface: Any) -> None:
        with self._lock:
            self._bindings.pop((self.current_target, interface), None)

    def has_binding(self, interface: Any) -> bool:
        return self._find_binding(interface, self.current_target) is not None

    def _set_binding(self, interface: Any, binding: ContainerBinding) -> None:
        with self._lock:
            self._bindings[(self.current_target, interface)] = binding

    def _find_binding(self, interface: Any, target_class: Any) -> ContainerBinding | None:
        with self._lock:
            if target_class is not None:
                binding = self._bindings.get((target_class, interface))
                if binding is not None:
                    return binding
            return self._bindings.get((None, interface))

    # endregion Binding Methods

    # region Resolution Methods
    def resolve(self, interface: Any) -> Any:
        """Resolve an interface.

        Args:
            interface: Interface key to resolve, usually a class or a string.

        Returns:
            The bound value, or a freshly autowired instance for unbound
            concrete classes.

        Raises:
            BootwireResolutionError: If the interface is unbound and cannot be
                autowired, or a constructor parameter cannot be resolved.
            BootwireCircularDependencyError: If autowiring hits a cycle.

        """
        target_class = self.current_target
        binding = self._find_binding(interface, target_class)
        if binding is None:
            if not self._can_autowire(interface):
                raise BootwireResolutionError(interface, target_class)
            logger.debug("Autowiring unbound class %s", describe_key(interface))
            return self._autowire_class(interface, ())

        return self._resolve_binding(binding)

    def for_target(self, target_class: Any, callback: Callable[[Container], T]) -> T:
        token = self._target_stack.set((*self._target_stack.get(), target_class))
        try:
            return callback(self)
        finally:
            self._target_stack.reset(token)

    def _resolve_binding(self, binding: ContainerBinding) -> Any:
        if binding.has_cached_instance:
            return binding.cached_instance

        if isinstance(binding, InstanceContainerBinding):
            value = binding.instance
        elif isinstance(binding, FactoryContainerBinding):
            value = binding.factory()
        else:
            class_binding = typing.cast("ClassContainerBinding", binding)
            value = self._autowire_class(class_binding.concrete_class, class_binding.primitives)

        if not binding.resolve_as_singleton:
            return value
        with self._lock:
            if not binding.has_cached_instance:
                binding.cached_instance = value
                binding.has_cached_instance = True
            return binding.cached_instance

    def _can_autowire(self, interface: Any) -> bool:
        return (
            self._autowire
            and isinstance(interface, type)
            and interface not in _PRIMITIVE_TYPES
            and not inspect.isabstract(interface)
            and not getattr(interface, "_is_protocol", False)
        )

    def _autowire_class(self, concrete_class: type, primitives: Sequence[Any]) -> Any:
        stack = self._resolution_stack.get()
        if concrete_class in stack:
            raise BootwireCircularDependencyError((*stack, concrete_class))

        token = self._resolution_stack.set((*stack, concrete_class))
        try:
            return self.for_target(
                concrete_class,
                lambda container: container._construct(concrete_class, primitives),
            )
        finally:
            self._resolution_stack.reset(token)

    def _construct(self, concrete_class: type, primitives: Sequence[Any]) -> Any:
        try:
            signature = inspect.signature(concrete_class)
        except (TypeError, ValueError):
            return concrete_class()

        hints = _constructor_type_hints(concrete_class)
        remaining_primitives = list(primitives)
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for name, parameter in signature.parameters.items():
            if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
                continue

            annotation = hints.get(name, parameter.annotation)
            if _is_primitive_annotation(annotation):
                if remaining_primitives:
                    value = remaining_primitives.pop(0)
                elif parameter.default is not parameter.empty:
                    continue
                else:
                    raise BootwireResolutionError(
                        concrete_class,
                        reason=f"no primitive value supplied for parameter '{name}'",
                    )
            else:
                try:
                    value = self.resolve(annotation)
                except BootwireCircularDependencyError:
                    raise
                except BootwireResolutionError:
                    if parameter.default is parameter.empty:
                        raise
                    continue

            if parameter.kind is parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[name] = value

        return concrete_class(*args, **kwargs)

    # endregion Resolution Methods


def _constructor_type_hints(concrete_class: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(concrete_class.__init__)
    except (NameError, TypeError):
        return {}


def _is_primitive_annotation(annotation: Any) -> bool:
    if annotation is inspect.Parameter.empty:
        return True
    origin = typing.get_origin(annotation) or annotation
    return origin in _PRIMITIVE_TYPES
