"""Renderable code fragments.

A Statement is anything that can be rendered to Python expression source in a
Context. Snapshot nodes are Statements, and so are the small fragments built
through ``Stmt``: loaded literals, variable references, raw source.
"""

from __future__ import annotations

import keyword
from typing import TYPE_CHECKING, Any

from snapgen.literal.LiteralEncoder import encode_literal

if TYPE_CHECKING:
    from snapgen.context.Context import Context


class Statement:
    def render(self, context: Context) -> str:
        raise NotImplementedError

    def described_type(self) -> Any:
        """The static type the rendered expression evaluates to, when known."""
        return Any


class Raw(Statement):
    """Source text used verbatim."""

    def __init__(self, source: str, described_type: Any = Any):
        self._source = source
        self._type = described_type

    def render(self, context: Context) -> str:
        return self._source

    def described_type(self) -> Any:
        return self._type

    def __repr__(self) -> str:
        return f"Raw({self._source!r})"


class LoadVariable(Raw):
    def __init__(self, name: str, described_type: Any = Any):
        if not name.isidentifier() or keyword.iskeyword(name):
            raise ValueError(f"{name!r} is not a valid variable name")
        super().__init__(name, described_type)


class NullLiteral(Statement):
    def render(self, context: Context) -> str:
        return "None"

    def described_type(self) -> Any:
        return type(None)

    def __repr__(self) -> str:
        return "NullLiteral()"


NULL = NullLiteral()


class LoadLiteral(Statement):
    """A value encoded as a literal at render time, in the render context."""

    def __init__(self, value: Any):
        self.value = value

    def render(self, context: Context) -> str:
        return encode_literal(self.value, context)

    def described_type(self) -> Any:
        return type(self.value)

    def __repr__(self) -> str:
        return f"LoadLiteral({self.value!r})"


class Stmt:
    """Factory helpers for building Statements."""

    @staticmethod
    def load(value: Any) -> Statement:
        if value is None:
            return NULL
        return LoadLiteral(value)

    @staticmethod
    def load_variable(name: str, described_type: Any = Any) -> Statement:
        return LoadVariable(name, described_type)

    @staticmethod
    def raw(source: str, described_type: Any = Any) -> Statement:
        return Raw(source, described_type)

    @staticmethod
    def null() -> Statement:
        return NULL
