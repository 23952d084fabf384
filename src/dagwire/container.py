from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar, overload

from typing_extensions import Self

from dagwire.defaults import DEFAULT_VALIDATE_ON_BUILD
from dagwire.injection import FieldSpec, Injector
from dagwire.keys import Key
from dagwire.modules import Module, build_registry
from dagwire.registry import BindingRegistry
from dagwire.resolver import Resolver

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Container:
    """Expose resolution and field injection over a finished registry.

    The container freezes the registry it is given, so every binding is fixed
    before the first resolution. With ``validate=True`` the whole graph is
    checked up front and missing or cyclic bindings fail here rather than on
    first use.

    Examples:
        .. code-block:: python

            container = Container.from_modules(app_module, info_module)
            hi = container.resolve(Decorator, qualifier="Decorator1")
            container.inject(main)

    """

    __slots__ = ("_injector", "_registry", "_resolver")

    def __init__(
        self,
        registry: BindingRegistry,
        *,
        validate: bool = DEFAULT_VALIDATE_ON_BUILD,
    ) -> None:
        """Initialize a container over ``registry``.

        Args:
            registry: Populated registry; it is frozen by this call.
            validate: Check every binding's dependencies immediately.

        Raises:
            UnresolvedBindingError: If validation finds a missing dependency.
            CyclicDependencyError: If validation finds a cycle.

        """
        registry.freeze()
        self._registry = registry
        self._resolver = Resolver(registry)
        self._injector = Injector(self._resolver)
        if validate:
            self._resolver.validate()
        logger.debug("Container ready over %r", registry)

    @classmethod
    def from_modules(cls, *modules: Module, validate: bool = DEFAULT_VALIDATE_ON_BUILD) -> Self:
        """Build the registry from ``modules`` and wrap it."""
        return cls(build_registry(*modules), validate=validate)

    @property
    def registry(self) -> BindingRegistry:
        return self._registry

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    @overload
    def resolve(self, key: type[T], qualifier: Any = None) -> T: ...

    @overload
    def resolve(self, key: Any, qualifier: Any = None) -> Any: ...

    def resolve(self, key: Any, qualifier: Any = None) -> Any:
        """Resolve ``key``, optionally narrowed by ``qualifier``."""
        return self._resolver.resolve(Key.from_value(key, qualifier))

    def inject(self, target: T, field_specs: Sequence[FieldSpec] | None = None) -> T:
        """Populate ``target``'s fields and return it.

        Without ``field_specs`` the ``Injected[...]`` annotations of the
        target's class are used.
        """
        if field_specs is None:
            self._injector.inject(target)
        else:
            self._injector.inject_fields(target, field_specs)
        return target

    def validate(self) -> None:
        """Check the whole binding graph without constructing anything."""
        self._resolver.validate()
