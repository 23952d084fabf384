"""Tests for concurrent resolution over a frozen registry."""

import threading
from concurrent.futures import ThreadPoolExecutor

from dagwire.keys import Key
from dagwire.lifetime import Lifetime
from dagwire.registry import BindingRegistry
from dagwire.resolver import Resolver


class Shared:
    pass


class Consumer:
    def __init__(self, left: Shared, right: Shared) -> None:
        self.left = left
        self.right = right


class TestConcurrentResolution:
    def test_concurrent_transient_resolution_keeps_caches_apart(
        self,
        registry: BindingRegistry,
    ) -> None:
        registry.register(Shared, (), Shared)
        registry.register(Consumer, [Shared, Shared], Consumer)
        registry.freeze()
        resolver = Resolver(registry)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: resolver.resolve(Consumer), range(64)))

        assert all(result.left is result.right for result in results)
        assert len({id(result.left) for result in results}) == 64

    def test_concurrent_singleton_resolution_same_instance(
        self,
        registry: BindingRegistry,
    ) -> None:
        calls: list[int] = []
        barrier = threading.Barrier(8)

        def make_shared() -> Shared:
            calls.append(1)
            return Shared()

        registry.register(Shared, (), make_shared, lifetime=Lifetime.SINGLETON)
        registry.freeze()
        resolver = Resolver(registry)

        def resolve(_: int) -> Shared:
            barrier.wait()
            return resolver.resolve(Shared)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(resolve, range(8)))

        assert len(calls) == 1
        assert all(result is results[0] for result in results)

    def test_concurrent_lookup_on_frozen_registry(self, registry: BindingRegistry) -> None:
        for index in range(50):
            registry.register(Key(int, index), (), lambda index=index: index)
        registry.freeze()
        resolver = Resolver(registry)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda index: resolver.resolve(Key(int, index)), range(50)))

        assert results == list(range(50))
