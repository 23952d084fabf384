"""Explicit registry: keys, dependency keys and constructors, no inference.

Every binding names its key and the ordered keys of its constructor
arguments. A diamond-shaped dependency is built once per resolution call.
"""

from __future__ import annotations

from dagwire import BindingRegistry, Key, Resolver


class Settings:
    def __init__(self, url: str) -> None:
        self.url = url


class Reader:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings


class Writer:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings


class Storage:
    def __init__(self, reader: Reader, writer: Writer) -> None:
        self.reader = reader
        self.writer = writer


def main() -> None:
    registry = BindingRegistry()
    registry.register(Key(str, "url"), (), lambda: "sqlite://")
    registry.register(Key(Settings), [Key(str, "url")], Settings)
    registry.register(Key(Reader), [Key(Settings)], Reader)
    registry.register(Key(Writer), [Key(Settings)], Writer)
    registry.register(Key(Storage), [Key(Reader), Key(Writer)], Storage)
    registry.freeze()

    resolver = Resolver(registry)
    first = resolver.resolve(Storage)
    second = resolver.resolve(Storage)

    print(f"url={first.reader.settings.url}")  # => url=sqlite://
    print(f"shared_within_call={first.reader.settings is first.writer.settings}")  # => shared_within_call=True
    print(f"shared_across_calls={first.reader.settings is second.reader.settings}")  # => shared_across_calls=False


if __name__ == "__main__":
    main()
