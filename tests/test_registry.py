from dataclasses import dataclass
from typing import Annotated

import pytest

from dagwire.exceptions import DuplicateBindingError, InvalidBindingError, UnresolvedBindingError
from dagwire.keys import Key
from dagwire.lifetime import Lifetime
from dagwire.markers import Qualifier
from dagwire.registry import Binding, BindingRegistry
from dagwire.resolver import Resolver


class Info:
    def __init__(self, text: Annotated[str, Qualifier("InfoStr1")]) -> None:
        self.text = text


@dataclass
class Greeter:
    prefix: str

    def __call__(self, name: Annotated[str, Qualifier("name")]) -> str:
        return f"{self.prefix} {name}"


@dataclass
class Config:
    host: Annotated[str, Qualifier("host")]
    port: int = 8080


class TestRegister:
    def test_register_stores_binding_with_normalized_keys(self, registry: BindingRegistry) -> None:
        binding = registry.register(Info, [Annotated[str, Qualifier("InfoStr1")]], Info)

        assert binding == Binding(
            key=Key(Info),
            dependencies=(Key(str, "InfoStr1"),),
            constructor=Info,
            lifetime=Lifetime.TRANSIENT,
        )
        assert registry.lookup(Info) is binding

    def test_lookup_accepts_every_key_form(self, registry: BindingRegistry) -> None:
        binding = registry.register(Key(str, "A"), (), lambda: "Kotlin")

        assert registry.lookup(Key(str, "A")) is binding
        assert registry.lookup(Annotated[str, Qualifier("A")]) is binding

    def test_duplicate_key_raises(self, registry: BindingRegistry) -> None:
        registry.register(Key(str, "A"), (), lambda: "Kotlin")

        with pytest.raises(DuplicateBindingError) as exc_info:
            registry.register(Key(str, "A"), (), lambda: "Scala")

        assert exc_info.value.key == Key(str, "A")
        assert registry.lookup(Key(str, "A")).constructor() == "Kotlin"

    def test_same_type_with_different_qualifiers_is_not_a_duplicate(
        self,
        registry: BindingRegistry,
    ) -> None:
        registry.register(Key(str, "A"), (), lambda: "Kotlin")
        registry.register(Key(str, "B"), (), lambda: "Scala")
        registry.register(Key(str), (), lambda: "Java")

        assert len(registry) == 3

    def test_unqualified_duplicates_raise(self, registry: BindingRegistry) -> None:
        registry.register(str, (), lambda: "Kotlin")

        with pytest.raises(DuplicateBindingError):
            registry.register(str, (), lambda: "Scala")

    def test_lookup_missing_key_names_type_and_qualifier(self, registry: BindingRegistry) -> None:
        with pytest.raises(UnresolvedBindingError) as exc_info:
            registry.lookup(Key(str, "InfoStr2"))

        assert exc_info.value.key == Key(str, "InfoStr2")
        assert exc_info.value.dependent is None
        assert "str (qualifier='InfoStr2')" in str(exc_info.value)

    def test_non_callable_constructor_raises(self, registry: BindingRegistry) -> None:
        with pytest.raises(InvalidBindingError, match="must be callable"):
            registry.register(str, (), "Kotlin")  # type: ignore[arg-type]

    def test_frozen_registry_rejects_registration(self, registry: BindingRegistry) -> None:
        registry.register(str, (), lambda: "Kotlin")
        registry.freeze()

        assert registry.frozen
        with pytest.raises(InvalidBindingError, match="frozen"):
            registry.register(int, (), lambda: 1)
        assert registry.lookup(str).constructor() == "Kotlin"

    def test_iteration_follows_registration_order(self, registry: BindingRegistry) -> None:
        registry.register(Key(str, "B"), (), lambda: "Scala")
        registry.register(Key(str, "A"), (), lambda: "Kotlin")

        assert [binding.key for binding in registry] == [Key(str, "B"), Key(str, "A")]
        assert registry.keys() == (Key(str, "B"), Key(str, "A"))
        assert Key(str, "A") in registry
        assert Annotated[str, Qualifier("B")] in registry
        assert str not in registry


class TestConvenienceRegistrations:
    def test_add_instance_binds_singleton_constant(self, registry: BindingRegistry) -> None:
        binding = registry.add_instance("Kotlin", qualifier="InfoStr1")

        assert binding.key == Key(str, "InfoStr1")
        assert binding.dependencies == ()
        assert binding.lifetime is Lifetime.SINGLETON
        assert binding.constructor() == "Kotlin"

    def test_add_instance_with_provides(self, registry: BindingRegistry) -> None:
        binding = registry.add_instance(True, provides=object)

        assert binding.key == Key(object)

    def test_add_factory_infers_key_and_dependencies(self, registry: BindingRegistry) -> None:
        def info(text: Annotated[str, Qualifier("InfoStr1")]) -> Info:
            return Info(text)

        binding = registry.add_factory(info)

        assert binding.key == Key(Info)
        assert binding.dependencies == (Key(str, "InfoStr1"),)
        assert binding.constructor is info

    def test_add_factory_combines_inferred_type_with_qualifier(
        self,
        registry: BindingRegistry,
    ) -> None:
        def kotlin() -> str:
            return "Kotlin"

        binding = registry.add_factory(kotlin, qualifier="InfoStr1")

        assert binding.key == Key(str, "InfoStr1")

    def test_add_factory_with_explicit_provides_and_dependencies(
        self,
        registry: BindingRegistry,
    ) -> None:
        binding = registry.add_factory(
            lambda text: Info(text),
            provides=Annotated[Info, Qualifier("explicit")],
            dependencies=[Key(str, "InfoStr1")],
        )

        assert binding.key == Key(Info, "explicit")
        assert binding.dependencies == (Key(str, "InfoStr1"),)

    def test_add_factory_without_return_annotation_raises(
        self,
        registry: BindingRegistry,
    ) -> None:
        def untyped():  # type: ignore[no-untyped-def]
            return "Kotlin"

        with pytest.raises(InvalidBindingError, match="return annotation"):
            registry.add_factory(untyped)

    def test_add_factory_with_unannotated_parameter_raises(
        self,
        registry: BindingRegistry,
    ) -> None:
        def info(text) -> Info:  # type: ignore[no-untyped-def]
            return Info(text)

        with pytest.raises(InvalidBindingError, match="'text'"):
            registry.add_factory(info)

    def test_add_concrete_uses_init_annotations(self, registry: BindingRegistry) -> None:
        assert registry.add_concrete(Info) is Info

        binding = registry.lookup(Info)
        assert binding.dependencies == (Key(str, "InfoStr1"),)
        assert binding.constructor is Info

    def test_add_concrete_skips_parameters_with_defaults(self, registry: BindingRegistry) -> None:
        registry.add_concrete(Config, qualifier="main", lifetime=Lifetime.SINGLETON)

        binding = registry.lookup(Key(Config, "main"))
        assert binding.dependencies == (Key(str, "host"),)
        assert binding.lifetime is Lifetime.SINGLETON

    def test_add_factory_accepts_unhashable_callable(self, registry: BindingRegistry) -> None:
        greeter = Greeter("Hi")
        registry.add_instance("Kotlin", qualifier="name")

        binding = registry.add_factory(greeter, provides=Annotated[str, Qualifier("greeting")])

        assert binding.dependencies == (Key(str, "name"),)
        assert Resolver(registry).resolve(Key(str, "greeting")) == "Hi Kotlin"

    def test_qualifiers_of_different_types_do_not_collide(
        self,
        registry: BindingRegistry,
    ) -> None:
        registry.add_instance("one", qualifier=1)
        registry.add_instance("true", qualifier=True)
        registry.add_instance("float", qualifier=1.0)

        assert len(registry) == 3
        assert Resolver(registry).resolve(Key(str, True)) == "true"

    def test_add_concrete_rejects_non_class(self, registry: BindingRegistry) -> None:
        with pytest.raises(InvalidBindingError, match="expects a class"):
            registry.add_concrete(lambda: None)  # type: ignore[arg-type]
