from bootwire.inspection.bindings import (
    BootstrapperBinding,
    TargetedBootstrapperBinding,
    UniversalBootstrapperBinding,
)
from bootwire.inspection.caching import FileBootstrapperBindingCache, IBootstrapperBindingCache
from bootwire.inspection.container import BindingInspectionContainer, InspectionPlaceholder
from bootwire.inspection.dispatcher import BindingInspectorBootstrapperDispatcher
from bootwire.inspection.inspector import BindingInspector
from bootwire.inspection.registrant import LazyBindingFactory, LazyBindingRegistrant, LazyBindingState

__all__ = [
    "BindingInspectionContainer",
    "BindingInspector",
    "BindingInspectorBootstrapperDispatcher",
    "BootstrapperBinding",
    "FileBootstrapperBindingCache",
    "IBootstrapperBindingCache",
    "InspectionPlaceholder",
    "LazyBindingFactory",
    "LazyBindingRegistrant",
    "LazyBindingState",
    "TargetedBootstrapperBinding",
    "UniversalBootstrapperBinding",
]
