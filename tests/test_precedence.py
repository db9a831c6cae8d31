import unittest
from typing import Annotated

import pytest

from compwire import ComponentDescriptor, Container, DependencySpec, Inject, NamedComponentNotFound


class TestResolutionPrecedence(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()

    def test_explicit_name_wins_over_type(self):
        class DB: ...

        class AnotherDB: ...

        class Repo:
            db: Annotated[DB, Inject(name="replica")]

        self.cont.register(DB)
        self.cont.register(AnotherDB, "replica")
        self.cont.register(Repo)

        assert isinstance(self.cont.get(Repo).db, AnotherDB)

    def test_property_wins_over_component_of_same_name(self):
        class Repo:
            db: Annotated[object, Inject(name="db")]

        class DB: ...

        self.cont.register(DB, "db")
        self.cont.add_property("db", "sqlite://")
        self.cont.register(Repo)

        assert self.cont.get(Repo).db == "sqlite://"

    def test_property_keyed_by_attribute_wins_over_type(self):
        class DB: ...

        class Repo:
            db: Annotated[DB, Inject()]

        override = DB()
        self.cont.register(DB)
        self.cont.add_property("db", override)
        self.cont.register(Repo)

        assert self.cont.get(Repo).db is override

    def test_type_is_used_when_no_property_matches(self):
        class DB: ...

        class Repo:
            db: Annotated[DB, Inject()]

        self.cont.register(DB)
        self.cont.register(Repo)

        assert self.cont.get(Repo).db is self.cont.get(DB)

    def test_untyped_constructor_parameter_is_resolved_by_name(self):
        class Repo:
            def __init__(self, dsn):
                self.dsn = dsn

        self.cont.add_property("dsn", "postgres://")
        self.cont.register(Repo)

        assert self.cont.get(Repo).dsn == "postgres://"

    def test_type_name_follows_exact_type_registration(self):
        class DB: ...

        class Repo:
            def __init__(self, db: DB):
                self.db = db

        self.cont.register(DB, "primary")
        self.cont.register(Repo)

        assert self.cont.get(Repo).db is self.cont.get("primary")


def test_failed_get_can_be_retried_after_adding_property():
    c = Container()
    built = []

    class Repo:
        def __init__(self, dsn):
            built.append(dsn)

    c.register(Repo, descriptor=ComponentDescriptor(dependencies=(DependencySpec(0, name="dsn"),)))

    with pytest.raises(NamedComponentNotFound):
        c.get(Repo)

    c.add_property("dsn", "postgres://")
    c.get(Repo)
    assert built == ["postgres://"]
