"""Object graph from the decorator walkthrough, shared by the test modules."""

from dataclasses import dataclass
from typing import Annotated, Protocol

from dagwire import Injected, Module, Qualifier

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


class MainClass:
    hi_decorator: Injected[Decorator1]
    bye_decorator: Injected[Decorator2]

    def present(self) -> str:
        return f"{self.hi_decorator.decorate()}  {self.bye_decorator.decorate()}"


def make_info_module() -> Module:
    module = Module("info")
    module.instance("Kotlin", qualifier="InfoStr1")
    module.instance("Scala", qualifier="InfoStr2")

    @module.provides
    def info(text: InfoStr1) -> Info:
        return Info(text)

    return module


def make_app_module() -> Module:
    module = Module("app")

    @module.provides(qualifier="Decorator1")
    def hi_decorator(text: InfoStr1) -> Decorator:
        return HiDecorator(Info(text))

    @module.provides(qualifier="Decorator2")
    def bye_decorator(text: InfoStr2) -> Decorator:
        return ByeDecorator(Info(text))

    return module
