"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass, field
from typing import Annotated

from kvgraph import Id, KeyValueStore, LocalClient, Reference, Repository, Value, entity


@entity(name="address")
@dataclass
class FixtureAddress:
    id: Annotated[int, Id] = 0
    town: Annotated[str | None, Value] = None
    street: Annotated[str | None, Value] = None


@entity(name="person")
@dataclass
class FixturePerson:
    id: Annotated[int, Id] = 0
    name: Annotated[str | None, Value] = None
    age: Annotated[int | None, Value] = None
    address: Annotated[FixtureAddress | None, Reference] = None


@entity(name="author")
@dataclass
class FixtureAuthor:
    id: Annotated[int, Id] = 0
    name: Annotated[str | None, Value] = None


# eq=False keeps instances hashable by identity, so they can live in sets
@entity(name="genre")
@dataclass(eq=False)
class FixtureGenre:
    id: Annotated[int, Id] = 0
    label: Annotated[str | None, Value] = None


@entity(name="book")
@dataclass
class FixtureBook:
    id: Annotated[int, Id] = 0
    title: Annotated[str | None, Value] = None
    pages: Annotated[int | None, Value] = None
    keywords: Annotated[list[str] | None, Value] = None
    ratings: Annotated[set[int] | None, Value] = None
    author: Annotated[FixtureAuthor | None, Reference] = None
    editor: Annotated[FixtureAuthor | None, Reference] = None
    coauthors: Annotated[list[FixtureAuthor], Reference] = field(default_factory=list)
    genres: Annotated[set[FixtureGenre], Reference] = field(default_factory=set)


@pytest.fixture
def client():
    """Fresh in-memory key-value client."""
    return LocalClient()


@pytest.fixture
def store(client):
    """Key-value store over the fresh client."""
    return KeyValueStore(client)


@pytest.fixture
def repository(store):
    """Repository over the fresh store."""
    return Repository(store=store)


@pytest.fixture
def person_cls():
    return FixturePerson


@pytest.fixture
def address_cls():
    return FixtureAddress


@pytest.fixture
def author_cls():
    return FixtureAuthor


@pytest.fixture
def genre_cls():
    return FixtureGenre


@pytest.fixture
def book_cls():
    return FixtureBook
