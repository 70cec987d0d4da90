"""Tests for writing entity graphs.

Critical Invariants:
- Every written entity has an id > 0
- Rewriting an entity keeps its id
- References are stored as ids, never inlined
- Empty reference collections leave no stored key
"""

from dataclasses import dataclass
from typing import Annotated

import pytest

from kvgraph import (
    ConverterError,
    EntityValidationError,
    FieldAccessError,
    Id,
    Reference,
    Value,
    entity,
)


@dataclass
class Unregistered:
    id: Annotated[int, Id] = 0


@entity
@dataclass
class Holder:
    id: Annotated[int, Id] = 0
    first: Annotated[str | None, Value] = None
    other: Annotated[Unregistered | None, Reference] = None


def test_write_assigns_ids_to_root_and_references(repository, person_cls, address_cls):
    person = person_cls(name="mikael", age=33, address=address_cls(town="Stockholm"))

    person_id = repository.write(person)

    assert person_id == person.id == 1
    assert person.address.id == 1


def test_fields_are_stored_under_type_id_field_keys(repository, client, person_cls, address_cls):
    person = person_cls(name="mikael", age=33, address=address_cls(town="Stockholm"))
    repository.write(person)

    assert client.exists("person:1")
    assert client.get("person:1:name") == b"mikael"
    assert client.get("person:1:age") == b"33"
    assert client.get("address:1:town") == b"Stockholm"


def test_reference_is_stored_as_referred_id(repository, client, person_cls, address_cls):
    client.set("address:next_id", b"5")
    person = person_cls(address=address_cls(town="Stockholm"))

    repository.write(person)

    assert client.get("person:1:address") == b"6"
    assert not client.exists("person:1:address:town")


def test_rewrite_keeps_id(repository, client, person_cls):
    """CRITICAL: Writing an entity twice reuses its id.

    Why: A second id would leave a stale duplicate in the store.
    """
    person = person_cls(name="mikael")

    first = repository.write(person)
    person.name = "mika"
    second = repository.write(person)

    assert first == second
    assert client.get("person:next_id") == b"1"
    assert client.get(f"person:{first}:name") == b"mika"


def test_none_fields_are_not_stored(repository, client, person_cls):
    repository.write(person_cls(name="mikael"))

    assert not client.exists("person:1:age")
    assert not client.exists("person:1:address")


def test_value_collections_are_stored(repository, client, book_cls):
    book = book_cls(keywords=["b", "a", "b"], ratings={5, 3})

    repository.write(book)

    assert client.lrange("book:1:keywords") == [b"b", b"a", b"b"]
    assert client.smembers("book:1:ratings") == {b"5", b"3"}


def test_reference_collection_ids_follow_iteration_order(
    repository, client, book_cls, author_cls
):
    client.set("author:next_id", b"10")
    a, b, c = author_cls(name="a"), author_cls(name="b"), author_cls(name="c")

    repository.write(book_cls(coauthors=[c, a, b]))

    assert (c.id, a.id, b.id) == (11, 12, 13)
    assert client.lrange("book:1:coauthors") == [b"11", b"12", b"13"]


def test_empty_reference_collection_is_skipped(repository, client, book_cls):
    repository.write(book_cls(title="empty"))

    assert not client.exists("book:1:coauthors")
    assert not client.exists("book:1:genres")


def test_shared_reference_is_written_once(repository, client, book_cls, author_cls):
    """An entity reachable through several fields gets one id and one write."""
    author = author_cls(name="ann")
    book = book_cls(author=author, editor=author, coauthors=[author])

    repository.write(book)

    assert client.get("author:next_id") == b"1"
    assert client.get("book:1:author") == client.get("book:1:editor") == b"1"
    assert client.lrange("book:1:coauthors") == [b"1"]


def test_field_failure_is_wrapped_with_context(repository, book_cls):
    book = book_cls(title="ok", pages="many")  # type: ignore[arg-type]

    with pytest.raises(FieldAccessError) as exc_info:
        repository.write(book)

    error = exc_info.value
    assert error.entity_type is book_cls
    assert error.entity_id == 1
    assert error.field_name == "pages"
    assert isinstance(error.__cause__, ConverterError)
    assert "book" in str(error).lower() and "pages" in str(error)


def test_failure_keeps_earlier_fields_and_skips_later_ones(repository, client, book_cls):
    """No rollback: fields before the failing one stay, later ones are not written."""
    book = book_cls(title="ok", pages="many", keywords=["x"])  # type: ignore[arg-type]

    with pytest.raises(FieldAccessError):
        repository.write(book)

    assert client.get("book:1:title") == b"ok"
    assert not client.exists("book:1:keywords")


def test_nested_failure_names_the_outer_field(repository, book_cls, author_cls):
    book = book_cls(author=author_cls(name=7))  # type: ignore[arg-type]

    with pytest.raises(FieldAccessError) as exc_info:
        repository.write(book)

    assert exc_info.value.field_name == "author"
    inner = exc_info.value.__cause__
    assert isinstance(inner, FieldAccessError)
    assert inner.entity_type is author_cls
    assert inner.field_name == "name"


def test_invalid_graph_fails_before_any_io(repository, client):
    """Validation covers every reachable type before anything is stored."""
    with pytest.raises(EntityValidationError):
        repository.write(Holder(first="x"))

    assert client.keys() == []


def test_unregistered_entity_fails(repository):
    with pytest.raises(EntityValidationError):
        repository.write(Unregistered())


def test_bool_on_int_field_is_not_stored(repository, client, person_cls):
    person = person_cls(name="mikael", age=True)  # type: ignore[arg-type]

    with pytest.raises(FieldAccessError) as exc_info:
        repository.write(person)

    assert exc_info.value.field_name == "age"
    assert isinstance(exc_info.value.__cause__, ConverterError)
    assert not client.exists("person:1:age")
