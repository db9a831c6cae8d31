"""Process-wide table of component declarations.

Classes are declared once, at definition time, either through the ``component``
and ``external`` class decorators or by calling ``describe`` directly. Containers
only read this table: to find the descriptor of a registered type, and, with the
component scanner enabled, to register declared components on demand.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Annotated, Any, TypeVar, get_args, get_origin, get_type_hints

from ._descriptor import ComponentDescriptor, DependencySpec, FactorySpec, Inject


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from ._container import Container

    T = TypeVar("T")

_descriptors: dict[type, ComponentDescriptor] = {}
# insertion ordered; doubles as an ordered set
_discoverable: dict[type, None] = {}


def describe(
    cls: type,
    *,
    dependencies: Iterable[DependencySpec] | None = None,
    factories: Iterable[FactorySpec] = (),
    name: str | None = None,
    singleton: bool = True,
    initializers: Iterable[str] = (),
    destroyers: Iterable[str] = (),
) -> ComponentDescriptor:
    """Build the descriptor of ``cls`` and record it in the declaration table.

    When ``dependencies`` is omitted they are inferred from the type hints of
    ``cls.__init__`` and from class attributes annotated with ``Inject``.
    """
    descriptor = build_descriptor(
        cls,
        dependencies=dependencies,
        factories=factories,
        name=name,
        singleton=singleton,
        initializers=initializers,
        destroyers=destroyers,
    )
    _descriptors[cls] = descriptor
    return descriptor


def build_descriptor(
    cls: type,
    *,
    dependencies: Iterable[DependencySpec] | None = None,
    factories: Iterable[FactorySpec] = (),
    name: str | None = None,
    singleton: bool = True,
    initializers: Iterable[str] = (),
    destroyers: Iterable[str] = (),
    constructor: bool = True,
) -> ComponentDescriptor:
    """Like ``describe`` but without recording the result."""
    if dependencies is None:
        dependencies = infer_dependencies(cls, constructor=constructor)

    return ComponentDescriptor(
        dependencies=tuple(dependencies),
        factories=tuple(f.bind(cls) for f in factories),
        name=name,
        singleton=singleton,
        initializers=tuple(initializers),
        destroyers=tuple(destroyers),
    )


def component(
    *,
    dependencies: Iterable[DependencySpec] | None = None,
    factories: Iterable[FactorySpec] = (),
    name: str | None = None,
    singleton: bool = True,
    initializers: Iterable[str] = (),
    destroyers: Iterable[str] = (),
) -> Callable[[type[T]], type[T]]:
    """Declare a class as a component visible to the component scanner.

    Example:
      @component(name="mailer", initializers=["connect"], destroyers=["disconnect"])
      class SmtpMailer: ...

    """

    def decorator(cls: type[T]) -> type[T]:
        describe(
            cls,
            dependencies=dependencies,
            factories=factories,
            name=name,
            singleton=singleton,
            initializers=initializers,
            destroyers=destroyers,
        )
        _discoverable[cls] = None
        logger.debug("Declared component %s", cls.__qualname__)
        return cls

    return decorator


def external(
    container: Callable[[], Container],
    *,
    dependencies: Iterable[DependencySpec] | None = None,
    initializers: Iterable[str] = (),
) -> Callable[[type[T]], type[T]]:
    """Declare a class whose instances are built by user code but still get wired.

    Every instance is handed to ``container().wire`` right after its own
    ``__init__`` has run. Only attribute dependencies can be declared.
    """

    def decorator(cls: type[T]) -> type[T]:
        descriptor = build_descriptor(
            cls, dependencies=dependencies, initializers=initializers, constructor=False
        )
        if descriptor.constructor_dependencies:
            msg = f"External class {cls.__name__} cannot declare constructor dependencies"
            raise TypeError(msg)
        _descriptors[cls] = descriptor

        native_init = cls.__init__

        @functools.wraps(native_init)
        def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
            native_init(self, *args, **kwargs)
            container().wire(self, descriptor)

        cls.__init__ = __init__  # type: ignore[misc]
        return cls

    return decorator


def discover_descriptor(cls: type) -> ComponentDescriptor | None:
    return _descriptors.get(cls)


def all_declared_types() -> Iterator[tuple[type, ComponentDescriptor]]:
    """Discoverable components, most recently declared first."""
    for cls in reversed(list(_discoverable)):
        yield cls, _descriptors[cls]


def find_declaration(name: str, component_type: type | None = None) -> type | None:
    """Find the discoverable class providing ``name``.

    The requested type itself wins when it is declared under that name. Otherwise
    the newest declaration whose name, or one of whose factory products, matches.
    """
    if component_type in _discoverable and declared_name(component_type) == name:
        return component_type

    for cls, descriptor in all_declared_types():
        if declared_name(cls) == name or any(f.name == name for f in descriptor.factories):
            return cls

    return None


def declared_name(cls: type) -> str:
    descriptor = _descriptors.get(cls)
    return (descriptor and descriptor.name) or cls.__name__


def infer_dependencies(cls: type, *, constructor: bool = True) -> list[DependencySpec]:
    inferred = _constructor_dependencies(cls) if constructor else []
    inferred.extend(_attribute_dependencies(cls))
    return inferred


def _constructor_dependencies(cls: type) -> list[DependencySpec]:
    if "__init__" not in cls.__dict__:
        return []

    hints = _get_init_type_hints(cls)
    result = []

    for position, p in enumerate(inspect.signature(cls).parameters.values()):
        if p.kind not in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            break

        base, marker = _split_annotated(hints.get(p.name))
        is_component = _is_component_type(base)
        if marker is None and p.default is not p.empty:
            # left to its default, along with everything after it; Inject() opts back in
            break

        marker = marker or Inject()
        name = marker.name or (None if is_component else p.name)
        target = base if is_component else None
        result.append(DependencySpec(position, target=target, name=name, lazy=marker.lazy))

    return result


def _attribute_dependencies(cls: type) -> list[DependencySpec]:
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s attribute type hints", exc.name, cls.__qualname__)
        return []

    result = []
    for attr, annotation in hints.items():
        if get_origin(annotation) is not Annotated:
            continue
        base, *metadata = get_args(annotation)
        marker = next((m for m in metadata if isinstance(m, Inject)), None)
        if marker is None:
            continue
        target = base if _is_component_type(base) else None
        name = marker.name or (None if target else attr)
        result.append(DependencySpec(attr, target=target, name=name, lazy=marker.lazy))

    return result


def _split_annotated(annotation: Any) -> tuple[Any, Inject | None]:
    if get_origin(annotation) is not Annotated:
        return annotation, None

    base, *metadata = get_args(annotation)
    for m in metadata:
        if isinstance(m, Inject):
            return base, m
        if isinstance(m, str):
            return base, Inject(name=m)
    return base, None


def _is_component_type(tp: Any) -> bool:
    return inspect.isclass(tp) and getattr(tp, "__module__", "") != "builtins"


def _get_init_type_hints(cls: type) -> dict[str, Any]:
    try:
        init = inspect.getattr_static(cls, "__init__")
        hints = get_type_hints(init, include_extras=True)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s (%s) type hints", exc.name, cls.__name__, cls.__qualname__)
        hints = {}

    return hints
