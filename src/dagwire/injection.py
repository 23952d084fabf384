from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, get_type_hints

from dagwire.exceptions import InvalidBindingError
from dagwire.keys import Key
from dagwire.markers import is_injected_annotation, strip_injected_annotation
from dagwire.resolver import Resolver

logger = logging.getLogger(__name__)
_ABSENT = object()


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A field of an injection target and the key that populates it."""

    name: str
    key: Key

    @classmethod
    def of(cls, name: str, key: Any, qualifier: Any = None) -> FieldSpec:
        return cls(name=name, key=Key.from_value(key, qualifier))


def field_specs_for(target_type: type) -> tuple[FieldSpec, ...]:
    """Collect ``Injected[...]`` class annotations in declaration order, bases first.

    Raises:
        InvalidBindingError: If the annotations of ``target_type`` cannot be
            evaluated.

    """
    try:
        hints = get_type_hints(target_type, include_extras=True)
    except (TypeError, NameError) as e:
        msg = f"Cannot resolve annotations of {target_type!r}: {e}"
        raise InvalidBindingError(msg) from e

    return tuple(
        FieldSpec(name=name, key=Key.from_value(strip_injected_annotation(hint)))
        for name, hint in hints.items()
        if is_injected_annotation(hint)
    )


class Injector:
    """Populate fields of objects built outside the container.

    All keys are resolved through one shared instance cache before anything is
    assigned, so a failing field leaves the target untouched.
    """

    __slots__ = ("_resolver",)

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver

    def inject_fields(self, target: Any, field_specs: Sequence[FieldSpec]) -> None:
        """Resolve each spec's key and assign the value to ``target``.

        Fields assigned before a failing ``setattr`` are restored to their
        previous values (or removed) before the error propagates.

        Raises:
            UnresolvedBindingError: If a field's key cannot be resolved.
            CyclicDependencyError: If a field's key sits on a cycle.

        """
        values = self._resolver.resolve_many(spec.key for spec in field_specs)
        assigned: list[tuple[str, Any]] = []
        try:
            for spec, value in zip(field_specs, values):
                previous = getattr(target, spec.name, _ABSENT)
                setattr(target, spec.name, value)
                assigned.append((spec.name, previous))
        except BaseException:
            for name, previous in reversed(assigned):
                if previous is _ABSENT:
                    delattr(target, name)
                else:
                    setattr(target, name, previous)
            raise
        logger.debug("Injected %d fields into %s", len(field_specs), type(target).__qualname__)

    def inject(self, target: Any) -> None:
        """Inject every ``Injected[...]`` field declared on ``type(target)``.

        Raises:
            InvalidBindingError: If the target type declares no injectable field.

        """
        field_specs = field_specs_for(type(target))
        if not field_specs:
            msg = f"{type(target).__qualname__} declares no Injected[...] fields"
            raise InvalidBindingError(msg)
        self.inject_fields(target, field_specs)
