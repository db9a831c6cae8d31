from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._declarations import build_descriptor, discover_descriptor, find_declaration
from ._errors import ContainerClosedError
from ._factory import run_hooks
from ._registry import Registration, Registry, Status
from ._resolver import Resolver


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._descriptor import ComponentDescriptor

    T = TypeVar("T")

CONTAINER_NAME = "Container"


class Container:
    """Dependency injection container.

    - register component types, by type name, declared name or explicit name
    - resolve with constructor and attribute injection
    - singletons, per-request components and factory-produced components
    - lazy dependencies, a property bag and wiring of externally built objects
    - optional component scanner over declared components.
    """

    def __init__(self, *, scan: bool = False) -> None:
        self._registry = Registry()
        self._properties: dict[str, Any] = {}
        self._resolver = Resolver(self._registry, self._properties)
        self._closed = False
        self._register_self()
        if scan:
            self.enable_component_scanner()

    def register(
        self,
        component_type: type,
        name: str | None = None,
        *,
        descriptor: ComponentDescriptor | None = None,
    ) -> None:
        """Register a component type.

        Example:
          container.register(SmtpMailer)
          container.register(FakeMailer, "mailer")
          container.register(Repo, descriptor=ComponentDescriptor(singleton=False))

        The descriptor defaults to the declared one, or to one inferred from the
        type's constructor hints.
        """
        self._check_open()
        if descriptor is None:
            descriptor = discover_descriptor(component_type) or build_descriptor(component_type)

        with self._resolver.lock:
            self._registry.register(component_type, descriptor, name)

    @overload
    def get(self, component_type: type[T], name: str | None = None) -> T: ...

    @overload
    def get(self, component_type: str, name: None = ...) -> Any: ...

    def get(self, component_type: type[T] | str, name: str | None = None) -> Any:
        """Resolve a component by type, by type and name, or by name alone."""
        self._check_open()
        if isinstance(component_type, str):
            return self._resolver.resolve(component_type)

        with self._resolver.lock:
            return self._resolver.resolve(name or self._resolver.name_for_type(component_type), component_type)

    def add_property(self, name: str, value: Any) -> None:
        """Add a value injectable by name. It is injected verbatim."""
        self._check_open()
        with self._resolver.lock:
            self._properties[name] = value

    def enable_component_scanner(self) -> None:
        """Register declared components on demand when a lookup misses."""
        self._check_open()
        self._resolver.discover = self._discover

    def wire(self, obj: object, descriptor: ComponentDescriptor | None = None) -> None:
        """Inject the attribute dependencies of an object built outside the container.

        Its initializers run once, before this returns.
        """
        self._check_open()
        if descriptor is None:
            descriptor = discover_descriptor(type(obj)) or build_descriptor(type(obj), constructor=False)

        with self._resolver.lock:
            self._resolver.constructor.inject_attributes(obj, descriptor)
            run_hooks(obj, descriptor.initializers)

    def component_names(self) -> Iterable[str]:
        return self._registry.names()

    def reset(self) -> None:
        """Tear down and forget every cached instance. Registrations are kept.

        Every destroyer runs even when an earlier one fails; the first failure
        is re-raised once teardown is complete.
        """
        self._check_open()
        with self._resolver.lock:
            teardown = []
            for registration in self._resolver.drain_instantiated():
                teardown.append((registration.instance, registration.descriptor.destroyers))
                registration.instance = None
                registration.status = Status.REGISTERED

            first_error: Exception | None = None
            for instance, destroyers in teardown:
                for hook in destroyers:
                    try:
                        run_hooks(instance, (hook,))
                    except Exception as e:
                        logger.exception("Destroyer %s.%s() failed", type(instance).__name__, hook)
                        first_error = first_error or e

            if first_error is not None:
                raise first_error

    def close(self) -> None:
        """Tear down cached instances and drop all state. The container is unusable afterwards."""
        if self._closed:
            return
        try:
            self.reset()
        finally:
            with self._resolver.lock:
                self._registry.clear()
                self._properties.clear()
                self._resolver.discover = None
                self._resolver.closed = True
                self._closed = True
            logger.debug("Container closed")

    def __enter__(self) -> Container:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _register_self(self) -> None:
        self._registry.add(
            Registration(
                name=CONTAINER_NAME,
                component_type=type(self),
                descriptor=build_descriptor(type(self), dependencies=()),
                instance=self,
                status=Status.INSTANTIATED,
            )
        )

    def _discover(self, name: str, component_type: type | None) -> Registration | None:
        cls = find_declaration(name, component_type)
        if cls is None:
            return None

        descriptor = discover_descriptor(cls)
        if descriptor is None:
            return None

        logger.debug("Component scanner registering %s for '%s'", cls.__qualname__, name)
        self._registry.register(cls, descriptor)
        return self._registry.lookup(name)

    def _check_open(self) -> None:
        if self._closed:
            raise ContainerClosedError
