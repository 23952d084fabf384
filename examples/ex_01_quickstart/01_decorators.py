"""Quickstart: modules, qualifiers and field injection.

Two string providers are told apart by qualifiers, two decorators are built
from them, and an object created outside the container receives both
decorators through its ``Injected[...]`` fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Protocol

from dagwire import Container, Injected, Module, Qualifier

InfoStr1 = Annotated[str, Qualifier("InfoStr1")]
InfoStr2 = Annotated[str, Qualifier("InfoStr2")]


class Decorator(Protocol):
    def decorate(self) -> str: ...


Decorator1 = Annotated[Decorator, Qualifier("Decorator1")]
Decorator2 = Annotated[Decorator, Qualifier("Decorator2")]


@dataclass
class Info:
    text: str


@dataclass
class HiDecorator:
    info: Info

    def decorate(self) -> str:
        return f" Hi {self.info.text}!!"


@dataclass
class ByeDecorator:
    info: Info

    def decorate(self) -> str:
        return f" Bye {self.info.text}!!"


info_module = Module("info")


@info_module.provides(qualifier="InfoStr1")
def kotlin() -> str:
    return "Kotlin"


@info_module.provides(qualifier="InfoStr2")
def scala() -> str:
    return "Scala"


@info_module.provides
def info(text: InfoStr1) -> Info:
    return Info(text)


app_module = Module("app")


@app_module.provides(qualifier="Decorator1")
def hi_decorator(text: InfoStr1) -> Decorator:
    return HiDecorator(info(text))


@app_module.provides(qualifier="Decorator2")
def bye_decorator(text: InfoStr2) -> Decorator:
    return ByeDecorator(info(text))


class MainClass:
    hi_decorator: Injected[Decorator1]
    bye_decorator: Injected[Decorator2]

    def __init__(self, container: Container) -> None:
        container.inject(self)

    def present(self) -> str:
        return f"{self.hi_decorator.decorate()}  {self.bye_decorator.decorate()}"


def main() -> None:
    container = Container.from_modules(app_module, info_module)

    print(MainClass(container).present())  # => Hi Kotlin!!   Bye Scala!!

    hi = container.resolve(Decorator, qualifier="Decorator1")
    print(f"type={type(hi).__name__}")  # => type=HiDecorator
    print(f"info={container.resolve(Info).text}")  # => info=Kotlin


if __name__ == "__main__":
    main()
