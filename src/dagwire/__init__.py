from dagwire.container import Container
from dagwire.exceptions import (
    CyclicDependencyError,
    DagwireError,
    DuplicateBindingError,
    InvalidBindingError,
    UnresolvedBindingError,
)
from dagwire.injection import FieldSpec, Injector, field_specs_for
from dagwire.keys import Key
from dagwire.lifetime import Lifetime
from dagwire.markers import Injected, Qualifier
from dagwire.modules import Module, build_registry
from dagwire.registry import Binding, BindingRegistry
from dagwire.resolver import Resolver

__all__ = [
    "Binding",
    "BindingRegistry",
    "Container",
    "CyclicDependencyError",
    "DagwireError",
    "DuplicateBindingError",
    "FieldSpec",
    "Injected",
    "Injector",
    "InvalidBindingError",
    "Key",
    "Lifetime",
    "Module",
    "Qualifier",
    "Resolver",
    "UnresolvedBindingError",
    "build_registry",
    "field_specs_for",
]
