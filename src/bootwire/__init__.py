from bootwire.bootstrapper import Bootstrapper, EagerBootstrapperDispatcher, IBootstrapperDispatcher
from bootwire.container import Container
from bootwire.container_interface import IContainer
from bootwire.exceptions import (
    BootwireCircularDependencyError,
    BootwireError,
    BootwireImpossibleBindingError,
    BootwireInvalidBindingError,
    BootwireResolutionError,
)
from bootwire.finder import BootstrapperFinder
from bootwire.inspection import (
    BindingInspector,
    BindingInspectorBootstrapperDispatcher,
    BootstrapperBinding,
    FileBootstrapperBindingCache,
    IBootstrapperBindingCache,
    LazyBindingRegistrant,
    TargetedBootstrapperBinding,
    UniversalBootstrapperBinding,
)
from bootwire.lock_mode import LockMode

__all__ = [
    "BindingInspector",
    "BindingInspectorBootstrapperDispatcher",
    "Bootstrapper",
    "BootstrapperBinding",
    "BootstrapperFinder",
    "BootwireCircularDependencyError",
    "BootwireError",
    "BootwireImpossibleBindingError",
    "BootwireInvalidBindingError",
    "BootwireResolutionError",
    "Container",
    "EagerBootstrapperDispatcher",
    "FileBootstrapperBindingCache",
    "IBootstrapperBindingCache",
    "IBootstrapperDispatcher",
    "IContainer",
    "LazyBindingRegistrant",
    "LockMode",
    "TargetedBootstrapperBinding",
    "UniversalBootstrapperBinding",
]
