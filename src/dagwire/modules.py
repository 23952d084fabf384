from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Literal, TypeVar, overload

from dagwire.defaults import DEFAULT_LIFETIME
from dagwire.lifetime import Lifetime
from dagwire.registry import BindingRegistry

C = TypeVar("C", bound=type[Any])
FactoryF = TypeVar("FactoryF", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


class Module:
    """Group registrations so they can be installed into a registry together.

    Registrations are recorded and replayed by ``install``; nothing is checked
    until then, so the usual ``DuplicateBindingError``/``InvalidBindingError``
    surface from ``install`` or ``build_registry``.

    Examples:
        .. code-block:: python

            info_module = Module("info")


            @info_module.provides(qualifier="InfoStr1")
            def kotlin() -> str:
                return "Kotlin"

    """

    __slots__ = ("_registrations", "name")

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self._registrations: list[Callable[[BindingRegistry], object]] = []

    @overload
    def provides(
        self,
        factory: FactoryF,
        *,
        provides: Any | Literal["infer"] = "infer",
        qualifier: Any = None,
        dependencies: Iterable[Any] | Literal["infer"] = "infer",
        lifetime: Lifetime = DEFAULT_LIFETIME,
    ) -> FactoryF: ...

    @overload
    def provides(
        self,
        factory: Literal["from_decorator"] = "from_decorator",
        *,
        provides: Any | Literal["infer"] = "infer",
        qualifier: Any = None,
        dependencies: Iterable[Any] | Literal["infer"] = "infer",
        lifetime: Lifetime = DEFAULT_LIFETIME,
    ) -> Callable[[FactoryF], FactoryF]: ...

    def provides(
        self,
        factory: FactoryF | Literal["from_decorator"] = "from_decorator",
        *,
        provides: Any | Literal["infer"] = "infer",
        qualifier: Any = None,
        dependencies: Iterable[Any] | Literal["infer"] = "infer",
        lifetime: Lifetime = DEFAULT_LIFETIME,
    ) -> FactoryF | Callable[[FactoryF], FactoryF]:
        """Record a provider function, directly or as a decorator.

        Arguments are forwarded to ``BindingRegistry.add_factory``. The function
        is returned unchanged and stays callable as plain code.
        """
        if factory == "from_decorator":

            def decorator(decorated_factory: FactoryF) -> FactoryF:
                return self.provides(
                    decorated_factory,
                    provides=provides,
                    qualifier=qualifier,
                    dependencies=dependencies,
                    lifetime=lifetime,
                )

            return decorator

        if dependencies != "infer":
            dependencies = tuple(dependencies)
        self._registrations.append(
            lambda registry: registry.add_factory(
                factory,
                provides=provides,
                qualifier=qualifier,
                dependencies=dependencies,
                lifetime=lifetime,
            ),
        )
        return factory

    def concrete(
        self,
        concrete_type: C,
        *,
        provides: Any | None = None,
        qualifier: Any = None,
        dependencies: Iterable[Any] | Literal["infer"] = "infer",
        lifetime: Lifetime = DEFAULT_LIFETIME,
    ) -> C:
        """Record a class built through constructor injection."""
        if dependencies != "infer":
            dependencies = tuple(dependencies)
        self._registrations.append(
            lambda registry: registry.add_concrete(
                concrete_type,
                provides=provides,
                qualifier=qualifier,
                dependencies=dependencies,
                lifetime=lifetime,
            ),
        )
        return concrete_type

    def instance(self, value: Any, *, provides: Any | None = None, qualifier: Any = None) -> None:
        """Record a ready-made value."""
        self._registrations.append(
            lambda registry: registry.add_instance(value, provides=provides, qualifier=qualifier),
        )

    def install(self, registry: BindingRegistry) -> None:
        """Replay every recorded registration into ``registry``."""
        for registration in self._registrations:
            registration(registry)
        logger.debug("Installed module %s (%d bindings)", self, len(self._registrations))

    def __len__(self) -> int:
        return len(self._registrations)

    def __str__(self) -> str:
        return self.name or f"Module@{id(self):x}"


def build_registry(*modules: Module, freeze: bool = True) -> BindingRegistry:
    """Install ``modules`` into a new registry, frozen unless ``freeze=False``."""
    registry = BindingRegistry()
    for module in modules:
        module.install(registry)
    if freeze:
        registry.freeze()
    return registry
