from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Literal, TypeVar

from dagwire.defaults import DEFAULT_LIFETIME
from dagwire.dependencies import DependenciesExtractor
from dagwire.exceptions import DuplicateBindingError, InvalidBindingError, UnresolvedBindingError
from dagwire.keys import Key
from dagwire.lifetime import Lifetime

T = TypeVar("T")
C = TypeVar("C", bound=type[Any])

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Binding:
    """A registered recipe: build ``key`` by calling ``constructor`` with ``dependencies``.

    Dependency values are passed positionally in the declared order.
    """

    key: Key
    dependencies: tuple[Key, ...]
    constructor: Callable[..., Any]
    lifetime: Lifetime = Lifetime.TRANSIENT

    def __str__(self) -> str:
        constructor_name = getattr(self.constructor, "__qualname__", repr(self.constructor))
        deps = ", ".join(str(dependency) for dependency in self.dependencies)
        return f"{self.key} <- {constructor_name}({deps}) [{self.lifetime.value}]"


class BindingRegistry:
    """Map keys to bindings.

    The registry is populated once at startup and then frozen; after that it is
    only read, which makes concurrent ``lookup`` calls safe. Registering the same
    key twice raises ``DuplicateBindingError``.
    """

    __slots__ = ("_bindings", "_dependencies_extractor", "_frozen")

    def __init__(self) -> None:
        self._bindings: dict[Key, Binding] = {}
        self._dependencies_extractor = DependenciesExtractor()
        self._frozen = False

    def register(
        self,
        key: Any,
        dependency_keys: Sequence[Any],
        constructor: Callable[..., Any],
        *,
        lifetime: Lifetime = DEFAULT_LIFETIME,
    ) -> Binding:
        """Add a binding for ``key``.

        Args:
            key: A ``Key``, a type, or an ``Annotated[T, Qualifier(...)]`` token.
            dependency_keys: Keys (in any form accepted for ``key``) resolved and
                passed to ``constructor`` positionally, in this order.
            constructor: Callable building the instance.
            lifetime: Whether instances are rebuilt per resolution call or shared.

        Returns:
            The stored binding.

        Raises:
            DuplicateBindingError: If ``key`` is already registered.
            InvalidBindingError: If ``constructor`` is not callable or the
                registry is frozen.

        """
        binding_key = Key.from_value(key)
        if self._frozen:
            msg = f"Cannot register {binding_key}: the registry is frozen"
            raise InvalidBindingError(msg)
        if not callable(constructor):
            msg = f"Constructor for {binding_key} must be callable, got {constructor!r}"
            raise InvalidBindingError(msg)
        if binding_key in self._bindings:
            raise DuplicateBindingError(binding_key)

        binding = Binding(
            key=binding_key,
            dependencies=tuple(Key.from_value(dependency) for dependency in dependency_keys),
            constructor=constructor,
            lifetime=Lifetime(lifetime),
        )
        self._bindings[binding_key] = binding
        logger.debug("Registered binding %s", binding)
        return binding

    def lookup(self, key: Any) -> Binding:
        """Return the binding for ``key``.

        Raises:
            UnresolvedBindingError: If no binding is registered for ``key``.

        """
        binding_key = Key.from_value(key)
        binding = self._bindings.get(binding_key)
        if binding is None:
            raise UnresolvedBindingError(binding_key)
        return binding

    def add_instance(
        self,
        value: T,
        *,
        provides: Any | None = None,
        qualifier: Any = None,
    ) -> Binding:
        """Bind a ready-made value. ``provides`` defaults to ``type(value)``."""
        key = Key.from_value(provides if provides is not None else type(value), qualifier)
        return self.register(key, (), lambda: value, lifetime=Lifetime.SINGLETON)

    def add_factory(
        self,
        factory: Callable[..., Any],
        *,
        provides: Any | Literal["infer"] = "infer",
        qualifier: Any = None,
        dependencies: Iterable[Any] | Literal["infer"] = "infer",
        lifetime: Lifetime = DEFAULT_LIFETIME,
    ) -> Binding:
        """Bind a provider function.

        ``provides`` is inferred from the return annotation and ``dependencies``
        from parameter annotations unless given explicitly. ``Annotated``
        parameters carrying a ``Qualifier`` depend on the qualified key.
        """
        if provides == "infer":
            key = Key.from_value(self._dependencies_extractor.get_return_key(factory), qualifier)
        else:
            key = Key.from_value(provides, qualifier)
        return self.register(
            key,
            self._dependency_keys(factory, dependencies),
            factory,
            lifetime=lifetime,
        )

    def add_concrete(
        self,
        concrete_type: C,
        *,
        provides: Any | None = None,
        qualifier: Any = None,
        dependencies: Iterable[Any] | Literal["infer"] = "infer",
        lifetime: Lifetime = DEFAULT_LIFETIME,
    ) -> C:
        """Bind a class built through constructor injection and return it unchanged."""
        if not isinstance(concrete_type, type):
            msg = f"add_concrete expects a class, got {concrete_type!r}"
            raise InvalidBindingError(msg)
        key = Key.from_value(provides if provides is not None else concrete_type, qualifier)
        self.register(
            key,
            self._dependency_keys(concrete_type, dependencies),
            concrete_type,
            lifetime=lifetime,
        )
        return concrete_type

    def freeze(self) -> None:
        """Reject further registrations."""
        if not self._frozen:
            self._frozen = True
            logger.info("Binding registry frozen with %d bindings", len(self._bindings))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def keys(self) -> tuple[Key, ...]:
        return tuple(self._bindings)

    def __contains__(self, key: object) -> bool:
        try:
            return Key.from_value(key) in self._bindings
        except (InvalidBindingError, TypeError):
            return False

    def __iter__(self) -> Iterator[Binding]:
        return iter(tuple(self._bindings.values()))

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"<BindingRegistry {len(self._bindings)} bindings, {state}>"

    def _dependency_keys(
        self,
        provider: Callable[..., Any],
        dependencies: Iterable[Any] | Literal["infer"],
    ) -> tuple[Any, ...]:
        if dependencies == "infer":
            return self._dependencies_extractor.get_dependencies(provider)
        return tuple(dependencies)
