import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated

from kvgraph import Id, KeyValueStore, LocalClient, Reference, Repository, Value, entity


class Status(Enum):
    OPEN = "open"
    DONE = "done"


@entity(name="address")
@dataclass
class Address:
    id: Annotated[int, Id] = 0
    town: Annotated[str | None, Value] = None
    street: Annotated[str | None, Value] = None


@entity(name="person")
@dataclass
class Person:
    id: Annotated[int, Id] = 0
    name: Annotated[str | None, Value] = None
    age: Annotated[int | None, Value] = None
    address: Annotated[Address | None, Reference] = None


@entity(name="task")
@dataclass
class Task:
    id: Annotated[int, Id] = 0
    title: Annotated[str | None, Value] = None
    status: Annotated[Status, Value] = Status.OPEN
    tags: Annotated[set[str], Value] = field(default_factory=set)
    owner: Annotated[Person | None, Reference] = None
    watchers: Annotated[list[Person], Reference] = field(default_factory=list)


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    client = LocalClient()
    repo = Repository(store=KeyValueStore(client))

    mikael = Person(name="mikael", age=33, address=Address(town="Stockholm", street="Lundagatan"))
    task = Task(title="Write report", tags={"q3"}, owner=mikael, watchers=[mikael])
    task_id = repo.write(task)

    for key in sorted(client.keys()):
        print(key)

    loaded = repo.get(Task(), task_id)
    print(f"Task {loaded.id}: {loaded.title} [{loaded.status.value}]")
    print(f"Owner {loaded.owner.name} lives in {loaded.owner.address.town}")
    print(f"Owner is also the watcher: {loaded.watchers[0] is loaded.owner}")

    repo.delete(loaded)
    print(f"Address still stored after deleting the task: {repo.load(Address, mikael.address.id)}")


if __name__ == "__main__":
    main()
