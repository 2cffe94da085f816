"""How a single accessor return value gets represented.

First match wins:
1. ``None`` is always the null literal.
2. A value that already has an expression in this invocation (canned, or
   produced earlier) reuses it.
3. A value whose declared type is literalizable in the context is handed to
   the literal encoder.
4. A value whose declared type is a recursion type gets its own snapshot.
5. Anything else is not literalizable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from snapgen.codegen.Statement import Statement
from snapgen.context.Context import Context, erase
from snapgen.errors import NotLiteralizable
from snapgen.snapshot.Session import SnapshotSession


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Canned:
    statement: Statement


@dataclass(frozen=True)
class Literal:
    pass


@dataclass(frozen=True)
class Recurse:
    target_type: type


type Classification = Null | Canned | Literal | Recurse


def classify(
    value: Any, declared_type: Any, context: Context, session: SnapshotSession
) -> Classification:
    """Classify a return value without touching session state.

    Args:
        value: The value the accessor returned
        declared_type: The accessor's declared return type. ``typing.Any``
            (no annotation) falls back to the value's runtime type.
        context: The context the enclosing node is rendered in
        session: The current invocation's session

    Raises:
        NotLiteralizable: If no representation applies
    """
    if value is None:
        return Null()

    existing = session.lookup(value)
    if existing is not None:
        return Canned(existing)

    if declared_type is Any:
        declared_type = type(value)

    if context.is_literalizable(declared_type):
        return Literal()

    target = session.recursion_target(erase(declared_type))
    if target is not None:
        return Recurse(target)

    raise NotLiteralizable(value, f"declared type {_type_name(declared_type)} is not literalizable")


def _type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)
