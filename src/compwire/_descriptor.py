from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import get_type_hints


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Inject:
    """Marker for ``typing.Annotated`` metadata declaring an injection point.

    Example:
      logger: Annotated[Logger, Inject(name="audit", lazy=True)]

    """

    name: str | None = None
    lazy: bool = False


@dataclass(frozen=True)
class DependencySpec:
    """A single injection point of a component.

    - ``slot``: constructor parameter position (``int``) or attribute name (``str``)
    - ``target``: declared type, used to derive the component name
    - ``name``: explicit component/property name, takes precedence over ``target``
    - ``lazy``: bind a proxy instead of resolving at construction time
    """

    slot: int | str
    target: type | None = None
    name: str | None = None
    lazy: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.slot, bool) or not isinstance(self.slot, (int, str)):
            msg = f"Dependency slot must be a parameter position or an attribute name, got {self.slot!r}"
            raise TypeError(msg)

        if self.target is None and self.name is None:
            msg = f"Dependency in slot {self.slot!r} needs a target type or an explicit name"
            raise ValueError(msg)

    @property
    def is_constructor_argument(self) -> bool:
        return isinstance(self.slot, int)

    @property
    def type_name(self) -> str:
        return getattr(self.target, "__name__", repr(self.target))


@dataclass(frozen=True)
class FactorySpec:
    """A method of a component that produces another component."""

    method: str
    produces: type | None = None
    name: str | None = None
    singleton: bool = True

    def bind(self, owner: type) -> FactorySpec:
        """Fill in the produced type and name from ``owner``'s method signature."""
        produces = self.produces
        if produces is None and self.name is None:
            produces = _return_type(owner, self.method)

        name = self.name or getattr(produces, "__name__", None)
        if name is None:
            msg = (
                f"Cannot tell what {owner.__name__}.{self.method}() produces; "
                "annotate its return type or pass `produces`/`name`."
            )
            raise TypeError(msg)

        return dataclasses.replace(self, produces=produces, name=name)


@dataclass(frozen=True)
class ComponentDescriptor:
    dependencies: tuple[DependencySpec, ...] = ()
    factories: tuple[FactorySpec, ...] = ()
    name: str | None = None
    singleton: bool = True
    initializers: tuple[str, ...] = ()
    destroyers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        positions = [d.slot for d in self.dependencies if d.is_constructor_argument]
        if sorted(positions) != list(range(len(positions))):
            msg = f"Constructor dependency positions must be unique and contiguous from 0, got {positions}"
            raise ValueError(msg)

        attributes = [d.slot for d in self.dependencies if not d.is_constructor_argument]
        if len(set(attributes)) != len(attributes):
            msg = f"Attribute dependencies must be unique, got {attributes}"
            raise ValueError(msg)

    @property
    def constructor_dependencies(self) -> list[DependencySpec]:
        return sorted((d for d in self.dependencies if d.is_constructor_argument), key=lambda d: d.slot)

    @property
    def attribute_dependencies(self) -> list[DependencySpec]:
        return [d for d in self.dependencies if not d.is_constructor_argument]


def _return_type(owner: type, method: str) -> type | None:
    try:
        func = getattr(owner, method)
    except AttributeError as e:
        msg = f"{owner.__name__} has no factory method '{method}'"
        raise TypeError(msg) from e

    try:
        return get_type_hints(func).get("return")
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s.%s return type", exc.name, owner.__name__, method)
        return None
