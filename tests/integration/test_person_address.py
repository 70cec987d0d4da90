"""End-to-end journeys over a person and the address it references."""

from dataclasses import dataclass
from typing import Annotated
from unittest.mock import MagicMock

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kvgraph import (
    Id,
    KeyValueStore,
    LocalClient,
    MissingEntityError,
    Reference,
    Repository,
    Value,
    entity,
)


@entity(name="example.domain.Address")
@dataclass
class Address:
    id: Annotated[int, Id] = 0
    town: Annotated[str | None, Value] = None
    street: Annotated[str | None, Value] = None


@entity(name="example.domain.Person")
@dataclass
class Person:
    id: Annotated[int, Id] = 0
    name: Annotated[str | None, Value] = None
    age: Annotated[int | None, Value] = None
    address: Annotated[Address | None, Reference] = None


@pytest.fixture
def repo(client):
    return Repository(store=KeyValueStore(client))


def test_write_then_read_person_with_address(repo, client):
    """Seeded counters reproduce the canonical ids (person 2, address 6)."""
    client.set("example.domain.person:next_id", b"1")
    client.set("example.domain.address:next_id", b"5")
    person = Person(
        name="mikael foobar",
        age=33,
        address=Address(town="Stockholm", street="Lundagatan"),
    )

    person_id = repo.write(person)

    assert (person_id, person.address.id) == (2, 6)
    assert client.get("example.domain.person:2:name") == b"mikael foobar"
    assert client.get("example.domain.person:2:address") == b"6"
    assert client.get("example.domain.address:6:street") == b"Lundagatan"

    loaded = repo.get(Person(), 2)

    assert loaded == Person(
        id=2,
        name="mikael foobar",
        age=33,
        address=Address(id=6, town="Stockholm", street="Lundagatan"),
    )


def test_read_from_prepared_backend():
    """Entities stored by another writer are read purely from the key layout."""
    stored = {
        "example.domain.person:2": b"1",
        "example.domain.person:2:name": b"mikael foobar",
        "example.domain.person:2:age": b"33",
        "example.domain.person:2:address": b"6",
        "example.domain.address:6": b"1",
        "example.domain.address:6:town": b"Stockholm",
        "example.domain.address:6:street": b"Lundagatan",
    }
    client = MagicMock()
    client.get.side_effect = stored.get
    client.exists.side_effect = stored.__contains__
    repo = Repository(store=KeyValueStore(client))

    person = repo.get(Person(), 2)

    assert (person.id, person.name, person.age) == (2, "mikael foobar", 33)
    assert (person.address.id, person.address.town) == (6, "Stockholm")
    assert person.address.street == "Lundagatan"
    client.set.assert_not_called()


def test_delete_person_keeps_address(repo):
    person = Person(name="mikael", address=Address(town="Stockholm"))
    repo.write(person)
    address_id = person.address.id

    repo.delete(person)

    with pytest.raises(MissingEntityError):
        repo.get(Person(), person.id)
    assert repo.get(Address(), address_id).town == "Stockholm"


def test_update_keeps_identity(repo, client):
    person = Person(name="mikael", age=33)
    person_id = repo.write(person)

    person.age = 34
    person.address = Address(town="Uppsala")
    repo.write(person)

    loaded = repo.get(Person(), person_id)
    assert loaded.age == 34
    assert loaded.address.town == "Uppsala"
    assert client.get("example.domain.person:next_id") == b"1"


def test_snapshot_restores_a_graph(repo, client):
    person_id = repo.write(Person(name="mikael", address=Address(town="Stockholm")))
    data = client.snapshot()

    restored = LocalClient()
    restored.restore(data)
    loaded = Repository(store=KeyValueStore(restored)).get(Person(), person_id)

    assert loaded.address.town == "Stockholm"


@given(
    name=st.none() | st.text(max_size=40),
    age=st.none() | st.integers(min_value=-(10**9), max_value=10**9),
    town=st.none() | st.text(max_size=40),
    street=st.none() | st.text(max_size=40),
)
def test_roundtrip_property(name, age, town, street):
    """Whatever is written is what comes back."""
    repo = Repository(store=KeyValueStore(LocalClient()))
    person = Person(name=name, age=age, address=Address(town=town, street=street))

    person_id = repo.write(person)

    assert repo.get(Person(), person_id) == person
