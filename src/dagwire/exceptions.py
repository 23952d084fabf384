from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dagwire.keys import Key


class DagwireError(Exception):
    """Represent a base class for all dagwire-specific failures.

    Catch this type when you want to handle any dagwire error path without
    matching each concrete exception class individually.
    """


class InvalidBindingError(DagwireError):
    """Signal invalid registration or injection configuration.

    Raised by ``BindingRegistry.register`` and its ``add_*`` shortcuts, and by
    ``Injector.inject`` when a target declares nothing to inject.

    Typical fixes include passing a callable constructor, annotating every
    required provider parameter (or passing explicit ``dependencies=...``), and
    finishing all registrations before the registry is frozen.
    """


class UnresolvedBindingError(DagwireError):
    """Signal that a dependency key has no binding.

    Raised by ``Resolver.resolve``, ``Resolver.validate`` and injection calls
    when a requested key, or a key some binding depends on, was never
    registered. ``key`` is the missing key and ``dependent`` is the key whose
    binding required it (``None`` for a root request).

    Typical fixes include registering the missing key, or checking that the
    qualifier on the consumer matches the qualifier used at registration.
    """

    def __init__(self, key: Key, dependent: Key | None = None) -> None:
        self.key = key
        self.dependent = dependent
        message = f"No binding registered for {key}"
        if dependent is not None:
            message += f" (required by {dependent})"
        super().__init__(message)


class DuplicateBindingError(DagwireError):
    """Signal a second registration for an already bound key.

    Typical fix is adding a distinct ``qualifier`` to one of the registrations.
    """

    def __init__(self, key: Key) -> None:
        self.key = key
        super().__init__(f"A binding for {key} is already registered")


class CyclicDependencyError(DagwireError):
    """Signal a dependency cycle reachable from the requested key.

    ``cycle`` lists keys from the first occurrence of ``key`` back to the
    repeated ``key``.

    Typical fix is breaking the cycle, for example by moving one of the
    dependencies to field injection on an object built outside the graph.
    """

    def __init__(self, cycle: Sequence[Key]) -> None:
        self.cycle = tuple(cycle)
        self.key = self.cycle[-1]
        path = " -> ".join(str(key) for key in self.cycle)
        super().__init__(f"Circular dependency detected: {path}")
