from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from dagwire.exceptions import CyclicDependencyError, UnresolvedBindingError
from dagwire.keys import Key
from dagwire.lifetime import Lifetime
from dagwire.registry import Binding, BindingRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _ResolutionContext:
    """State owned by a single resolution call and dropped when it returns."""

    instances: dict[Key, Any] = field(default_factory=dict)
    stack: list[Key] = field(default_factory=list)
    resolving: set[Key] = field(default_factory=set)


class Resolver:
    """Build object graphs from a ``BindingRegistry``.

    Resolution is depth-first: every dependency of a binding is resolved before
    its constructor is called with the values in declared order. Each call to
    ``resolve`` owns a fresh instance cache, so a dependency shared by several
    consumers (a diamond) is built once per call, and nothing is reused between
    calls except ``Lifetime.SINGLETON`` bindings.

    Cycles are detected with the stack of keys currently being built and fail
    with ``CyclicDependencyError`` instead of recursing forever.
    """

    __slots__ = ("_lock", "_registry", "_singletons")

    def __init__(self, registry: BindingRegistry) -> None:
        self._registry = registry
        self._singletons: dict[Key, Any] = {}
        self._lock = threading.RLock()

    @property
    def registry(self) -> BindingRegistry:
        return self._registry

    def resolve(self, key: Any) -> Any:
        """Resolve ``key`` and return a fully constructed instance.

        Raises:
            UnresolvedBindingError: If ``key`` or one of its transitive
                dependencies has no binding.
            CyclicDependencyError: If a cycle is reachable from ``key``.

        """
        root = Key.from_value(key)
        instance = self._resolve(root, _ResolutionContext(), dependent=None)
        logger.debug("Resolved %s", root)
        return instance

    def resolve_many(self, keys: Iterable[Any]) -> list[Any]:
        """Resolve several keys sharing one instance cache."""
        context = _ResolutionContext()
        return [self._resolve(Key.from_value(key), context, dependent=None) for key in keys]

    def validate(self, roots: Iterable[Any] | None = None) -> None:
        """Check the graph reachable from ``roots`` (default: every binding).

        Nothing is constructed. Raises the same errors ``resolve`` would.
        """
        root_keys = (
            self._registry.keys() if roots is None else tuple(Key.from_value(root) for root in roots)
        )
        checked: set[Key] = set()
        for root in root_keys:
            self._visit(root, checked)
        logger.info("Validated binding graph (%d keys reachable)", len(checked))

    def _resolve(self, root: Key, context: _ResolutionContext, dependent: Key | None) -> Any:
        # Frames carrying a binding construct their key; its dependencies are cached by then.
        work: list[tuple[Key, Key | None, Binding | None]] = [(root, dependent, None)]
        while work:
            key, requested_by, binding = work.pop()
            if binding is not None:
                context.stack.pop()
                context.resolving.discard(key)
                context.instances[key] = self._construct(binding, context)
                continue

            if key in context.instances:
                continue
            if key in self._singletons:
                context.instances[key] = self._singletons[key]
                continue
            if key in context.resolving:
                raise CyclicDependencyError([*context.stack[context.stack.index(key) :], key])

            binding = self._lookup(key, requested_by)
            context.stack.append(key)
            context.resolving.add(key)
            work.append((key, requested_by, binding))
            work.extend((dependency, key, None) for dependency in reversed(binding.dependencies))

        return context.instances[root]

    def _construct(self, binding: Binding, context: _ResolutionContext) -> Any:
        if binding.lifetime is Lifetime.SINGLETON:
            with self._lock:
                if binding.key in self._singletons:
                    return self._singletons[binding.key]
                instance = self._call(binding, context)
                self._singletons[binding.key] = instance
                return instance
        return self._call(binding, context)

    def _call(self, binding: Binding, context: _ResolutionContext) -> Any:
        arguments = [context.instances[dependency] for dependency in binding.dependencies]
        logger.debug("Constructing %s", binding.key)
        return binding.constructor(*arguments)

    def _visit(self, root: Key, checked: set[Key]) -> None:
        stack: list[Key] = []
        on_stack: set[Key] = set()
        work: list[tuple[Key, Key | None, bool]] = [(root, None, False)]
        while work:
            key, requested_by, expanded = work.pop()
            if expanded:
                stack.pop()
                on_stack.discard(key)
                checked.add(key)
                continue

            if key in checked:
                continue
            if key in on_stack:
                raise CyclicDependencyError([*stack[stack.index(key) :], key])

            binding = self._lookup(key, requested_by)
            stack.append(key)
            on_stack.add(key)
            work.append((key, requested_by, True))
            work.extend((dependency, key, False) for dependency in reversed(binding.dependencies))

    def _lookup(self, key: Key, dependent: Key | None) -> Binding:
        try:
            return self._registry.lookup(key)
        except UnresolvedBindingError:
            if dependent is None:
                raise
            raise UnresolvedBindingError(key, dependent) from None
