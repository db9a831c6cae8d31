from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from ._declarations import declared_name
from ._errors import ComponentNotFound, ContainerClosedError, CyclicDependency, NamedComponentNotFound
from ._factory import Constructor, FactoryMethod, run_hooks
from ._lazy import LazyProxy
from ._registry import Registration, Registry, Status


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ._descriptor import DependencySpec
    from ._factory import InstanceFactory

    Discover = Callable[[str, type | None], Registration | None]


class Resolver:
    """Turns a component name into a fully wired instance.

    Registrations move through REGISTERED -> INSTANTIATING -> INSTANTIATED
    (singletons) or back to REGISTERED (everything else). Meeting a registration
    that is still INSTANTIATING means the current resolution path loops back on
    itself.
    """

    def __init__(self, registry: Registry, properties: Mapping[str, Any]) -> None:
        self._registry = registry
        self._properties = properties
        self._lock = threading.RLock()
        self._path: list[str] = []
        self._instantiated: list[Registration] = []
        self._constructor = Constructor(self)
        self._factory_method = FactoryMethod(self)
        self.discover: Discover | None = None
        self.closed = False

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def constructor(self) -> Constructor:
        return self._constructor

    def resolve(self, name: str, component_type: type | None = None) -> object:
        with self._lock:
            self._check_open()
            registration = self._find(name, component_type)
            if registration is None:
                raise ComponentNotFound(name)
            return self.instance_of(registration)

    def resolve_dependency(self, dependency: DependencySpec) -> object:
        """Resolve one injection point, preferring property-bag values."""
        with self._lock:
            self._check_open()
            if dependency.name is not None:
                if dependency.name in self._properties:
                    return self._properties[dependency.name]
                registration = self._find(dependency.name, dependency.target)
                if registration is None:
                    raise NamedComponentNotFound(dependency.name)
                return self.instance_of(registration)

            if isinstance(dependency.slot, str) and dependency.slot in self._properties:
                return self._properties[dependency.slot]

            return self.resolve(self.name_for_type(dependency.target), dependency.target)

    def bind(self, dependency: DependencySpec) -> object:
        if dependency.lazy:
            return LazyProxy(self, dependency)
        return self.resolve_dependency(dependency)

    def name_for_type(self, component_type: type | None) -> str:
        if component_type is None:
            msg = "Cannot derive a component name without a type"
            raise TypeError(msg)
        return self._registry.name_for(component_type) or declared_name(component_type)

    def instance_of(self, registration: Registration) -> object:
        with self._lock:
            if registration.status is Status.INSTANTIATED:
                return registration.instance

            if registration.status is Status.INSTANTIATING:
                raise CyclicDependency(registration.name, [*self._path, registration.name])

            registration.status = Status.INSTANTIATING
            self._path.append(registration.name)
            try:
                instance = self._strategy_for(registration).create(registration)
                run_hooks(instance, registration.descriptor.initializers)
            except Exception:
                registration.status = Status.REGISTERED
                raise
            finally:
                self._path.pop()

            if registration.singleton:
                registration.instance = instance
                registration.status = Status.INSTANTIATED
                self._instantiated.append(registration)
                logger.debug("Instantiated singleton '%s'", registration.name)
            else:
                registration.status = Status.REGISTERED

            return instance

    def drain_instantiated(self) -> list[Registration]:
        """Hand over cached registrations, most recently instantiated first, and forget them."""
        with self._lock:
            drained = list(reversed(self._instantiated))
            self._instantiated.clear()
            return drained

    def _check_open(self) -> None:
        if self.closed:
            raise ContainerClosedError

    def _find(self, name: str, component_type: type | None) -> Registration | None:
        registration = self._registry.lookup(name)
        if registration is None and self.discover is not None:
            registration = self.discover(name, component_type)
        return registration

    def _strategy_for(self, registration: Registration) -> InstanceFactory:
        if registration.factory_owner is not None:
            return self._factory_method
        return self._constructor
