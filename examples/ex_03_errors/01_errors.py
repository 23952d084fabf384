"""Errors: missing, duplicate and cyclic bindings fail loudly.

Every failure is a ``DagwireError`` subclass carrying the offending key.
"""

from __future__ import annotations

from dagwire import (
    BindingRegistry,
    CyclicDependencyError,
    DuplicateBindingError,
    Key,
    Resolver,
    UnresolvedBindingError,
)


class Chicken:
    def __init__(self, egg: Egg) -> None:
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken) -> None:
        self.chicken = chicken


def main() -> None:
    registry = BindingRegistry()
    registry.add_instance("Kotlin", qualifier="InfoStr1")
    registry.add_concrete(Chicken)
    registry.add_concrete(Egg)

    try:
        registry.add_instance("Scala", qualifier="InfoStr1")
    except DuplicateBindingError as error:
        print(f"duplicate={error.key}")  # => duplicate=str (qualifier='InfoStr1')

    resolver = Resolver(registry)

    try:
        resolver.resolve(Key(str, "InfoStr2"))
    except UnresolvedBindingError as error:
        print(f"missing={error.key}")  # => missing=str (qualifier='InfoStr2')

    try:
        resolver.resolve(Chicken)
    except CyclicDependencyError as error:
        print(f"cycle={' -> '.join(str(key) for key in error.cycle)}")  # => cycle=Chicken -> Egg -> Chicken


if __name__ == "__main__":
    main()
