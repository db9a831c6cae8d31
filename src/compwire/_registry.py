from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ._descriptor import ComponentDescriptor, FactorySpec


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import KeysView


class Status(Enum):
    REGISTERED = "registered"
    INSTANTIATING = "instantiating"
    INSTANTIATED = "instantiated"


@dataclass
class Registration:
    name: str
    component_type: type | None
    descriptor: ComponentDescriptor
    singleton: bool = True
    factory: FactorySpec | None = None
    factory_owner: Registration | None = None
    instance: object | None = None  # cached singleton
    status: Status = Status.REGISTERED


class Registry:
    """Name -> Registration table. The first registration of a name wins."""

    def __init__(self) -> None:
        self._registrations: dict[str, Registration] = {}

    def register(
        self,
        component_type: type,
        descriptor: ComponentDescriptor,
        name: str | None = None,
    ) -> Registration | None:
        """Register ``component_type`` and every component its factory methods produce.

        Returns the new registration, or ``None`` when the name was already taken.
        """
        owner = Registration(
            name=name or descriptor.name or component_type.__name__,
            component_type=component_type,
            descriptor=descriptor,
            singleton=descriptor.singleton,
        )
        if not self.add(owner):
            return None

        for spec in descriptor.factories:
            spec = spec.bind(component_type)  # noqa: PLW2901
            self.add(
                Registration(
                    name=spec.name,
                    component_type=spec.produces,
                    descriptor=ComponentDescriptor(singleton=spec.singleton),
                    singleton=spec.singleton,
                    factory=spec,
                    factory_owner=owner,
                )
            )

        return owner

    def add(self, registration: Registration) -> bool:
        if registration.name in self._registrations:
            logger.warning("Component with name '%s' already registered.", registration.name)
            return False

        self._registrations[registration.name] = registration
        logger.debug("Registered component '%s' (%s)", registration.name, registration.component_type)
        return True

    def lookup(self, name: str) -> Registration | None:
        return self._registrations.get(name)

    def name_for(self, component_type: type) -> str | None:
        """Name of the registration built for exactly ``component_type``."""
        for registration in self._registrations.values():
            if registration.component_type is component_type:
                return registration.name
        return None

    def names(self) -> KeysView[str]:
        return self._registrations.keys()

    def clear(self) -> None:
        self._registrations.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)
