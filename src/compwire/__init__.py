"""Dependency injection container.

This package provides a dependency injection container for Python components
declared once, at class definition time, and wired together on request.

Exports:
- `Container`: registry and resolver; singletons, per-request components, factory
  methods, lazy dependencies, a property bag and an optional component scanner.
- `component` / `external` / `describe`: declare components, externally built
  objects, or just a class's dependencies.
- `Inject`, `DependencySpec`, `FactorySpec`, `ComponentDescriptor`: declaration types.
- `ResolutionError` and its subclasses: failures of a single `get`.
"""

from ._container import Container
from ._declarations import all_declared_types, component, describe, discover_descriptor, external
from ._descriptor import ComponentDescriptor, DependencySpec, FactorySpec, Inject
from ._errors import (
    ComponentNotFound,
    ContainerClosedError,
    CyclicDependency,
    NamedComponentNotFound,
    ResolutionError,
)
from ._lazy import LazyProxy


__all__ = [
    "ComponentDescriptor",
    "ComponentNotFound",
    "Container",
    "ContainerClosedError",
    "CyclicDependency",
    "DependencySpec",
    "FactorySpec",
    "Inject",
    "LazyProxy",
    "NamedComponentNotFound",
    "ResolutionError",
    "all_declared_types",
    "component",
    "describe",
    "discover_descriptor",
    "external",
]
