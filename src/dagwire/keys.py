from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin

from dagwire.exceptions import InvalidBindingError
from dagwire.markers import Qualifier, _build_annotated, extract_qualifier


@dataclass(frozen=True, slots=True, eq=False)
class Key:
    """Identify a binding by its type and an optional qualifier tag.

    Two keys are equal only when both the type and the qualifier match, so
    ``Key(str, "InfoStr1")`` and ``Key(str, "InfoStr2")`` never collide.
    Qualifiers also compare by their own type: ``1``, ``True`` and ``1.0`` are
    three different tags.
    """

    type: Any
    qualifier: Any = None

    @classmethod
    def from_value(cls, value: Any, qualifier: Any = None) -> Key:
        """Build a key from a ``Key``, a plain type or an ``Annotated`` token.

        ``Annotated[T, Qualifier(tag)]`` becomes ``Key(T, tag)``. A ``Qualifier``
        passed as ``qualifier`` is unwrapped to its tag.

        Raises:
            InvalidBindingError: If ``value`` already carries a qualifier that
                differs from ``qualifier``.

        """
        if isinstance(qualifier, Qualifier):
            qualifier = qualifier.value

        if isinstance(value, Key):
            base, embedded = value.type, value.qualifier
        elif get_origin(value) is Annotated:
            marker = extract_qualifier(value)
            base = get_args(value)[0]
            embedded = marker.value if marker is not None else None
        else:
            base, embedded = value, None

        if (
            embedded is not None
            and qualifier is not None
            and (type(embedded), embedded) != (type(qualifier), qualifier)
        ):
            msg = f"Conflicting qualifiers for {base!r}: {embedded!r} and {qualifier!r}"
            raise InvalidBindingError(msg)

        return cls(base, embedded if embedded is not None else qualifier)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def _identity(self) -> tuple[Any, Any, Any]:
        return (self.type, type(self.qualifier), self.qualifier)

    @property
    def annotation(self) -> Any:
        """Return the ``Annotated`` token equivalent to this key."""
        if self.qualifier is None:
            return self.type
        return _build_annotated((self.type, Qualifier(self.qualifier)))

    def __str__(self) -> str:
        type_name = getattr(self.type, "__qualname__", None) or repr(self.type)
        if self.qualifier is None:
            return type_name
        return f"{type_name} (qualifier={self.qualifier!r})"
