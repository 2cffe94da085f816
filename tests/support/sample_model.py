"""Types used as snapshot targets throughout the test suite.

These live at module level so generated code can refer to them as
``sample_model.<Name>``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, final


class Person(ABC):
    @abstractmethod
    def get_name(self) -> str: ...

    @abstractmethod
    def get_age(self) -> int: ...

    @abstractmethod
    def get_mother(self) -> Person | None: ...


class PersonImpl(Person):
    def __init__(self, name: str, age: int, mother: Person | None):
        self._name = name
        self._age = age
        self._mother = mother
        self.calls: list[str] = []

    def get_name(self) -> str:
        self.calls.append("get_name")
        return self._name

    def get_age(self) -> int:
        self.calls.append("get_age")
        return self._age

    def get_mother(self) -> Person | None:
        self.calls.append("get_mother")
        return self._mother

    def set_mother(self, mother: Person | None) -> None:
        self._mother = mother

    def __str__(self) -> str:
        return f"PersonImpl({self._name})"


class Family(ABC):
    @abstractmethod
    def get_persons(self) -> list[Person]: ...


class FamilyImpl(Family):
    def __init__(self, persons: list[Person]):
        self._persons = persons

    def get_persons(self) -> list[Person]:
        return self._persons


class Couple(ABC):
    """Two accessors that may return the same object."""

    @abstractmethod
    def first(self) -> Person: ...

    @abstractmethod
    def second(self) -> Person: ...


class CoupleImpl(Couple):
    def __init__(self, first: Person, second: Person):
        self._first = first
        self._second = second

    def first(self) -> Person:
        return self._first

    def second(self) -> Person:
        return self._second


class Node(ABC):
    @abstractmethod
    def next(self) -> Node | None: ...


class NodeImpl(Node):
    def __init__(self, next_node: Node | None = None):
        self.next_node = next_node

    def next(self) -> Node | None:
        return self.next_node

    def __repr__(self) -> str:
        return f"NodeImpl@{id(self):x}"


class Widget:
    """Neither literalizable nor a recursion type."""


class Holder(ABC):
    @abstractmethod
    def get_thing(self) -> Widget: ...


class HolderImpl(Holder):
    def __init__(self, thing: Widget):
        self._thing = thing

    def get_thing(self) -> Widget:
        return self._thing


class Bag(ABC):
    @abstractmethod
    def get_items(self) -> list: ...


class BagImpl(Bag):
    def __init__(self, items: list):
        self._items = items

    def get_items(self) -> list:
        return self._items


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Settings(ABC):
    """Mixes void methods, properties, and the ignored equality/hash methods."""

    @abstractmethod
    def reset(self) -> None: ...

    @property
    @abstractmethod
    def color(self) -> Color: ...

    @abstractmethod
    def Zeta(self) -> int: ...

    @abstractmethod
    def alpha(self) -> tuple[int, ...]: ...

    def equals(self, other: object, strict: bool) -> bool:
        return self is other

    def hash_code(self, seed: int) -> int:
        return seed


class SettingsImpl(Settings):
    def __init__(self) -> None:
        self.reset_calls = 0

    def reset(self) -> None:
        self.reset_calls += 1

    @property
    def color(self) -> Color:
        return Color.GREEN

    def Zeta(self) -> int:
        return 26

    def alpha(self) -> tuple[int, ...]:
        return (1, 2)


class Labeled(ABC):
    """One abstract accessor and one concrete accessor built on it."""

    @abstractmethod
    def get_label(self) -> str: ...

    def summary(self) -> str:
        return f"<{self.get_label()}>"


class LabeledImpl(Labeled):
    def __init__(self, label: str):
        self._label = label

    def get_label(self) -> str:
        return self._label


class Commands(ABC):
    @abstractmethod
    def get_name(self) -> str: ...

    @abstractmethod
    def do_thing(self, s: str) -> None: ...


class CommandsImpl(Commands):
    def __init__(self) -> None:
        self.calls = 0

    def get_name(self) -> str:
        self.calls += 1
        return "commands"

    def do_thing(self, s: str) -> None:
        self.calls += 1


class Exploding(ABC):
    @abstractmethod
    def get_value(self) -> int: ...


class ExplodingImpl(Exploding):
    def get_value(self) -> int:
        raise RuntimeError("boom")


class Named(Protocol):
    def get_name(self) -> str: ...


@dataclass
class NamedThing:
    name: str

    def get_name(self) -> str:
        return self.name


@final
class Sealed:
    def get_name(self) -> str:
        return "sealed"


class NeedsArgs:
    def __init__(self, value: int):
        self.value = value

    def get_value(self) -> int:
        return self.value
