"""Scoped registry of literalizable types.

A Context is a scope chain: each scope points at its parent and adds its own
literalizable types on top. A snapshot node opens a child scope that exposes
its recursion types, so literal encoding inside that node (a list of custom
objects, say) knows to snapshot the nested objects. Sibling scopes never see
each other's additions.

Scopes also collect the modules that rendered code refers to. Imports required
in a child scope propagate to every ancestor, so the root ends up with the full
set needed to evaluate anything rendered under it.
"""

from __future__ import annotations

import collections.abc
import datetime
import decimal
import enum
import typing
import uuid
from types import NoneType, UnionType
from typing import TYPE_CHECKING, Annotated, Any, Union

from snapgen.config.SnapshotConfig import DEFAULT_CONFIG, SnapshotConfig

if TYPE_CHECKING:
    from snapgen.snapshot.Session import SnapshotSession

# Types the literal encoder can always reduce to source text.
BUILTIN_LITERAL_TYPES: tuple[type, ...] = (
    NoneType,
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    list,
    tuple,
    dict,
    set,
    frozenset,
    enum.Enum,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    decimal.Decimal,
    uuid.UUID,
    collections.abc.Sequence,
    collections.abc.Mapping,
    collections.abc.Set,
)


def erase(tp: Any) -> Any:
    """Reduce a type annotation to the class it constrains.

    ``list[int]`` -> ``list``, ``Person | None`` -> ``Person``,
    ``Annotated[str, ...]`` -> ``str``. Unions of several non-None members are
    returned unchanged.
    """
    origin = typing.get_origin(tp)
    if origin is Annotated:
        return erase(typing.get_args(tp)[0])
    if origin in (Union, UnionType):
        members = [a for a in typing.get_args(tp) if a is not NoneType]
        if len(members) == 1:
            return erase(members[0])
        return tp
    if origin is not None:
        return origin
    return tp


def union_members(tp: Any) -> list[Any] | None:
    """Non-None members of a union annotation, or None if tp is not a union."""
    if typing.get_origin(tp) in (Union, UnionType):
        return [a for a in typing.get_args(tp) if a is not NoneType]
    return None


class Context:
    _parent: Context | None
    _types: list[type]
    _session: SnapshotSession | None
    _imports: set[str]
    config: SnapshotConfig

    def __init__(
        self,
        parent: Context | None = None,
        types: typing.Iterable[type] = (),
        session: SnapshotSession | None = None,
        config: SnapshotConfig | None = None,
    ):
        self._parent = parent
        self._types = list(types)
        self._session = session
        self._imports = set()
        if config is None:
            config = parent.config if parent is not None else DEFAULT_CONFIG
        self.config = config

    @classmethod
    def create(
        cls, parent: Context | None = None, config: SnapshotConfig | None = None
    ) -> Context:
        return cls(parent=parent, config=config)

    def scope(
        self,
        types: typing.Iterable[type] = (),
        session: SnapshotSession | None = None,
    ) -> Context:
        """Open a child scope with extra literalizable types and an optional session binding."""
        return Context(parent=self, types=types, session=session)

    @property
    def parent(self) -> Context | None:
        return self._parent

    def _chain(self) -> typing.Iterator[Context]:
        scope: Context | None = self
        while scope is not None:
            yield scope
            scope = scope._parent

    def add_literalizable(self, *types: type) -> None:
        """Register types as literalizable in this scope and its descendants."""
        for tp in types:
            if tp not in self._types:
                self._types.append(tp)

    def custom_types(self) -> tuple[type, ...]:
        """All non-builtin literalizable types visible from this scope, nearest first."""
        seen: list[type] = []
        for scope in self._chain():
            for tp in scope._types:
                if tp not in seen:
                    seen.append(tp)
        return tuple(seen)

    def is_literalizable(self, tp: Any) -> bool:
        members = union_members(tp)
        if members is not None and len(members) > 1:
            return all(self.is_literalizable(m) for m in members)

        erased = erase(tp)
        if not isinstance(erased, type):
            return False
        if issubclass(erased, BUILTIN_LITERAL_TYPES):
            return True
        return self.literalizable_target(erased) is not None

    def literalizable_target(self, runtime_type: type) -> type | None:
        """The registered custom type that runtime_type should be snapshotted as."""
        for scope in self._chain():
            for tp in scope._types:
                if issubclass(runtime_type, tp):
                    return tp
        return None

    @property
    def session(self) -> SnapshotSession | None:
        """The nearest session bound in the scope chain."""
        for scope in self._chain():
            if scope._session is not None:
                return scope._session
        return None

    def require_import(self, module: str) -> None:
        for scope in self._chain():
            scope._imports.add(module)

    @property
    def imports(self) -> frozenset[str]:
        """Modules required by code rendered in this scope or its descendants."""
        return frozenset(self._imports)
