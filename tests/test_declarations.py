import logging
from typing import Annotated

import pytest

from compwire import ComponentDescriptor, Container, DependencySpec, FactorySpec, Inject, describe, discover_descriptor


class Engine: ...


class Wheel: ...


def test_describe_infers_constructor_dependencies_from_hints():
    class Car:
        def __init__(self, engine: Engine, wheel: Annotated[Wheel, "spare"], color, doors: int = 4):
            ...

    descriptor = describe(Car)
    assert descriptor.dependencies == (
        DependencySpec(0, target=Engine),
        DependencySpec(1, target=Wheel, name="spare"),
        DependencySpec(2, name="color"),
    )
    assert discover_descriptor(Car) is descriptor


def test_describe_infers_lazy_and_named_markers():
    class Car:
        radio: Annotated[Engine, Inject(name="fm", lazy=True)]
        plate: Annotated[str, Inject()]
        untouched: int

        def __init__(self, engine: Annotated[Engine, Inject(lazy=True)]):
            ...

    descriptor = describe(Car)
    assert descriptor.constructor_dependencies == [DependencySpec(0, target=Engine, lazy=True)]
    assert descriptor.attribute_dependencies == [
        DependencySpec("radio", target=Engine, name="fm", lazy=True),
        DependencySpec("plate", name="plate"),
    ]


def test_inherited_constructor_is_not_inspected():
    class Base:
        def __init__(self, engine: Engine = None):
            self.engine = engine

    class Derived(Base): ...

    assert describe(Derived).dependencies == ()


def test_explicit_dependencies_skip_inference():
    class Car:
        def __init__(self, engine: Engine):
            ...

    descriptor = describe(Car, dependencies=[DependencySpec("wheel", Wheel)])
    assert descriptor.dependencies == (DependencySpec("wheel", Wheel),)


def test_describe_binds_factory_products():
    class Garage:
        def build(self) -> Engine:
            return Engine()

    descriptor = describe(Garage, factories=[FactorySpec("build", singleton=False)])
    assert descriptor.factories == (FactorySpec("build", produces=Engine, name="Engine", singleton=False),)


def test_unresolvable_hint_is_logged_and_ignored(caplog):
    class Car:
        engine: Annotated["NoSuchType", Inject()]  # noqa: F821

    with caplog.at_level(logging.WARNING, logger="compwire"):
        descriptor = describe(Car)

    assert descriptor.dependencies == ()
    assert any("NoSuchType" in m for m in caplog.messages)


@pytest.mark.parametrize(
    "dependencies",
    [
        (DependencySpec(1, Engine),),
        (DependencySpec(0, Engine), DependencySpec(0, Wheel)),
        (DependencySpec("engine", Engine), DependencySpec("engine", Wheel)),
    ],
)
def test_descriptor_rejects_bad_slots(dependencies):
    with pytest.raises(ValueError):
        ComponentDescriptor(dependencies=dependencies)


def test_dependency_needs_target_or_name():
    with pytest.raises(ValueError):
        DependencySpec("engine")


def test_dependency_slot_must_be_position_or_attribute():
    with pytest.raises(TypeError):
        DependencySpec(True, Engine)


def test_registered_class_without_declaration_is_autowired():
    c = Container()

    class Car:
        def __init__(self, engine: Engine, doors: int = 4):
            self.engine = engine
            self.doors = doors

    c.register(Engine)
    c.register(Car)
    car = c.get(Car)
    assert car.engine is c.get(Engine)
    assert car.doors == 4
    assert discover_descriptor(Car) is None


def test_defaulted_component_parameter_keeps_its_default():
    c = Container()

    class Car:
        def __init__(self, engine: Engine = None, wheel: Annotated[Wheel, Inject()] = None):
            self.engine = engine
            self.wheel = wheel

    assert describe(Car).dependencies == ()

    class Truck:
        def __init__(self, engine: Annotated[Engine, Inject()] = None):
            self.engine = engine

    c.register(Car)
    c.register(Truck)
    c.register(Engine)
    assert c.get(Car).engine is None
    assert c.get(Truck).engine is c.get(Engine)
