from __future__ import annotations

from collections.abc import Sequence

import pytest

from bootwire import Bootstrapper, Container, IContainer, LockMode
from bootwire.exceptions import BootwireImpossibleBindingError
from bootwire.inspection import (
    BindingInspector,
    BindingInspectorBootstrapperDispatcher,
    BootstrapperBinding,
    IBootstrapperBindingCache,
    UniversalBootstrapperBinding,
)
from tests.mocks import (
    Bar,
    BarFromFooBootstrapper,
    CountingBootstrapper,
    Foo,
    FooBootstrapper,
    FooConsumer,
    IBar,
    IFoo,
)


class _MemoryBindingCache(IBootstrapperBindingCache):
    def __init__(self, bindings: list[BootstrapperBinding] | None = None) -> None:
        self.bindings = bindings
        self.set_calls = 0

    def get(self) -> list[BootstrapperBinding] | None:
        return self.bindings

    def set(self, bindings: Sequence[BootstrapperBinding]) -> None:
        self.set_calls += 1
        self.bindings = list(bindings)

    def flush(self) -> None:
        self.bindings = None


class _SpyInspector(BindingInspector):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def get_bindings(self, bootstrappers: Sequence[Bootstrapper]) -> list[BootstrapperBinding]:
        self.calls += 1
        return super().get_bindings(bootstrappers)


class TestDispatchWithoutCache:
    def test_dispatch_registers_lazy_bindings(self, container_no_autowire: Container) -> None:
        foo_bootstrapper = FooBootstrapper()
        bar_bootstrapper = BarFromFooBootstrapper()
        dispatcher = BindingInspectorBootstrapperDispatcher(container_no_autowire)

        dispatcher.dispatch([bar_bootstrapper, foo_bootstrapper])

        bar = container_no_autowire.resolve(IBar)
        assert isinstance(bar, Bar)
        assert container_no_autowire.resolve(IBar) is bar
        assert isinstance(container_no_autowire.resolve(IFoo), Foo)

    def test_bootstrappers_do_not_run_for_real_until_resolved(self, container_no_autowire: Container) -> None:
        bootstrapper = CountingBootstrapper()
        dispatcher = BindingInspectorBootstrapperDispatcher(container_no_autowire)

        dispatcher.dispatch([bootstrapper])

        # Inspection runs the bootstrapper against the inspection container only.
        assert bootstrapper.calls == 1
        container_no_autowire.resolve(IFoo)
        container_no_autowire.resolve(IBar)
        assert bootstrapper.calls == 2

    def test_impossible_bindings_fail_before_anything_is_bound(self, container_no_autowire: Container) -> None:
        class NeedsFoo(Bootstrapper):
            def register_bindings(self, container: IContainer) -> None:
                container.resolve(IFoo)
                container.bind_instance(IBar, Bar())

        dispatcher = BindingInspectorBootstrapperDispatcher(container_no_autowire)

        with pytest.raises(BootwireImpossibleBindingError):
            dispatcher.dispatch([NeedsFoo()])

        assert not container_no_autowire.has_binding(IBar)

    def test_autowired_consumer_triggers_lazy_binding_in_universal_scope(self, container: Container) -> None:
        dispatcher = BindingInspectorBootstrapperDispatcher(container, lock_mode=LockMode.NONE)
        dispatcher.dispatch([BarFromFooBootstrapper(), FooBootstrapper()])

        consumer = container.resolve(FooConsumer)

        assert isinstance(consumer.foo, Foo)
        assert container.resolve(IFoo) is consumer.foo
        assert isinstance(container.resolve(IBar), Bar)


class TestDispatchWithCache:
    def test_cache_miss_inspects_and_stores_bindings(self, container_no_autowire: Container) -> None:
        cache = _MemoryBindingCache()
        inspector = _SpyInspector()
        bootstrapper = FooBootstrapper()
        dispatcher = BindingInspectorBootstrapperDispatcher(container_no_autowire, cache, inspector)

        dispatcher.dispatch([bootstrapper])

        assert inspector.calls == 1
        assert cache.set_calls == 1
        assert cache.bindings == [UniversalBootstrapperBinding(IFoo, bootstrapper)]
        assert isinstance(container_no_autowire.resolve(IFoo), Foo)

    def test_cache_hit_skips_inspection_and_bootstrappers(self, container_no_autowire: Container) -> None:
        bootstrapper = CountingBootstrapper()
        cache = _MemoryBindingCache([UniversalBootstrapperBinding(IFoo, bootstrapper)])
        inspector = _SpyInspector()
        dispatcher = BindingInspectorBootstrapperDispatcher(container_no_autowire, cache, inspector)

        dispatcher.dispatch([bootstrapper])

        assert inspector.calls == 0
        assert cache.set_calls == 0
        assert bootstrapper.calls == 0
        assert isinstance(container_no_autowire.resolve(IFoo), Foo)
        assert bootstrapper.calls == 1
