from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._descriptor import ComponentDescriptor
    from ._registry import Registration
    from ._resolver import Resolver


class InstanceFactory(Protocol):
    def create(self, registration: Registration) -> object: ...


class Constructor:
    """Constructor injection followed by attribute injection."""

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver

    def create(self, registration: Registration) -> object:
        cls = registration.component_type
        if cls is None:
            msg = f"Component '{registration.name}' has no type to construct"
            raise TypeError(msg)

        args = [self._resolver.bind(d) for d in registration.descriptor.constructor_dependencies]
        instance = cls(*args)
        self.inject_attributes(instance, registration.descriptor)
        return instance

    def inject_attributes(self, instance: object, descriptor: ComponentDescriptor) -> None:
        for dependency in descriptor.attribute_dependencies:
            setattr(instance, dependency.slot, self._resolver.bind(dependency))


class FactoryMethod:
    """Calls a factory method on the (resolved) owner component."""

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver

    def create(self, registration: Registration) -> object:
        owner_registration = registration.factory_owner
        spec = registration.factory
        if owner_registration is None or spec is None:
            msg = f"Component '{registration.name}' is not produced by a factory method"
            raise TypeError(msg)

        owner = self._resolver.instance_of(owner_registration)
        return getattr(owner, spec.method)()


def run_hooks(instance: object, hooks: Iterable[str]) -> None:
    for hook in hooks:
        logger.debug("Calling %s.%s()", type(instance).__name__, hook)
        getattr(instance, hook)()
