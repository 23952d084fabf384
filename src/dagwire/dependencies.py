from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from types import FunctionType, MethodType
from typing import Any, get_type_hints

from dagwire.exceptions import InvalidBindingError
from dagwire.keys import Key

_SKIPPED_PARAMETER_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    """Information about a constructor/function parameter."""

    name: str
    key: Key
    has_default: bool


class DependenciesExtractor:
    """Extract type-hinted dependency keys from classes and provider functions."""

    def __init__(self) -> None:
        self._cache: dict[Any, tuple[ParameterInfo, ...]] = {}

    def get_parameters(self, provider: Callable[..., Any]) -> tuple[ParameterInfo, ...]:
        """Return every named parameter of ``provider`` with its dependency key.

        Results are cached per provider; unhashable providers are inspected on
        every call.
        """
        try:
            cached = self._cache.get(provider)
        except TypeError:
            return self._extract_parameters(provider)
        if cached is not None:
            return cached

        parameters = self._extract_parameters(provider)
        self._cache[provider] = parameters
        return parameters

    def _extract_parameters(self, provider: Callable[..., Any]) -> tuple[ParameterInfo, ...]:
        init_func = self._get_init_func(provider)
        type_hints = self._get_type_hints(provider, init_func)
        try:
            signature = inspect.signature(provider)
        except (TypeError, ValueError) as e:
            msg = f"Cannot inspect the signature of {provider!r}"
            raise InvalidBindingError(msg) from e

        result: list[ParameterInfo] = []
        for name, parameter in signature.parameters.items():
            if parameter.kind in _SKIPPED_PARAMETER_KINDS:
                continue
            has_default = parameter.default is not inspect.Parameter.empty
            hint = type_hints.get(name)
            if hint is None:
                if has_default:
                    continue
                msg = (
                    f"Cannot infer dependency for parameter {name!r} of {provider!r}: "
                    "add a type annotation or pass explicit dependencies"
                )
                raise InvalidBindingError(msg)
            result.append(ParameterInfo(name=name, key=Key.from_value(hint), has_default=has_default))

        return tuple(result)

    def get_dependencies(self, provider: Callable[..., Any]) -> tuple[Key, ...]:
        """Return ordered keys for the required parameters of ``provider``.

        Parameters with default values are left to their defaults.
        """
        return tuple(
            parameter.key for parameter in self.get_parameters(provider) if not parameter.has_default
        )

    def get_return_key(self, factory: Callable[..., Any]) -> Key:
        """Return the key described by the return annotation of ``factory``."""
        return_hint = self._get_type_hints(factory, self._get_call_target(factory)).get("return")
        if return_hint is None or return_hint is type(None):
            msg = f"Cannot infer what {factory!r} provides: add a return annotation or pass provides=..."
            raise InvalidBindingError(msg)
        return Key.from_value(return_hint)

    def _get_type_hints(self, provider: Any, func: Any) -> dict[str, Any]:
        try:
            return get_type_hints(func, include_extras=True)
        except (TypeError, NameError) as e:
            msg = f"Cannot resolve type hints of {provider!r}: {e}"
            raise InvalidBindingError(msg) from e

    def _get_init_func(self, provider: Any) -> Any:
        if isinstance(provider, type):
            return provider.__init__
        return self._get_call_target(provider)

    def _get_call_target(self, provider: Any) -> Any:
        if isinstance(provider, FunctionType | MethodType | type):
            return provider
        # Callable instances carry their annotations on the class's __call__.
        return getattr(type(provider), "__call__", provider)
