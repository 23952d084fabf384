"""Shared pytest fixtures for dagwire tests."""

import pytest

from dagwire.container import Container
from dagwire.dependencies import DependenciesExtractor
from dagwire.modules import build_registry
from dagwire.registry import BindingRegistry
from dagwire.resolver import Resolver
from tests.helpers import make_app_module, make_info_module


@pytest.fixture()
def registry() -> BindingRegistry:
    """Empty, open registry."""
    return BindingRegistry()


@pytest.fixture()
def resolver(registry: BindingRegistry) -> Resolver:
    """Resolver over the ``registry`` fixture; register before resolving."""
    return Resolver(registry)


@pytest.fixture()
def decorator_registry() -> BindingRegistry:
    """Frozen registry holding the decorator walkthrough bindings."""
    return build_registry(make_app_module(), make_info_module())


@pytest.fixture()
def decorator_container(decorator_registry: BindingRegistry) -> Container:
    return Container(decorator_registry)


@pytest.fixture()
def dependencies_extractor() -> DependenciesExtractor:
    """DependenciesExtractor instance."""
    return DependenciesExtractor()
