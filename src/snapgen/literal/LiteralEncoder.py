"""Reduce live values to Python literal source.

Builtin scalars, containers, enum members and a handful of standard library
value types are encoded directly. Any other value is encoded only if its type
is registered as literalizable in the context, in which case it is snapshotted
through the nearest bound session (or a fresh one when the context has none).
"""

from __future__ import annotations

import datetime
import decimal
import math
import uuid
from enum import Enum
from typing import TYPE_CHECKING, Any

from snapgen.codegen.pretty import bracket
from snapgen.codegen.references import type_reference
from snapgen.context.Context import Context
from snapgen.errors import NotLiteralizable

if TYPE_CHECKING:
    from snapgen.snapshot.Session import SnapshotSession

_DATETIME_TYPES = (datetime.datetime, datetime.date, datetime.time, datetime.timedelta)


def encode_literal(value: Any, context: Context) -> str:
    """Encode a value as Python source that evaluates to an equivalent value.

    Raises:
        NotLiteralizable: If the value (or anything nested inside it) has no
            literal form in this context
    """
    return LiteralEncoder(context).encode(value)


class LiteralEncoder:
    _context: Context
    _session: SnapshotSession | None

    def __init__(self, context: Context):
        self._context = context
        self._session = None

    def _bracket(self, open_: str, items: list[str], close: str, single_comma: bool = False) -> str:
        render = self._context.config.render
        return bracket(
            open_, items, close,
            indent_width=render.indent,
            line_width=render.line_width,
            trailing_comma_single=single_comma,
        )

    def encode(self, value: Any) -> str:
        match value:
            case None:
                return "None"
            case Enum() if value.name is not None:
                return f"{type_reference(type(value), self._context)}.{value.name}"
            case bool():
                return repr(value)
            case int() | str() | bytes() if type(value) in (int, str, bytes):
                return repr(value)
            case float() if type(value) is float:
                return self._encode_float(value)
            case complex() if type(value) is complex:
                if math.isfinite(value.real) and math.isfinite(value.imag):
                    return repr(value)
                return f"complex({self._encode_float(value.real)}, {self._encode_float(value.imag)})"
            case list() if type(value) is list:
                return self._bracket("[", [self.encode(v) for v in value], "]")
            case tuple() if type(value) is tuple:
                return self._bracket("(", [self.encode(v) for v in value], ")", single_comma=True)
            case dict() if type(value) is dict:
                return self._bracket(
                    "{",
                    [f"{self.encode(k)}: {self.encode(v)}" for k, v in value.items()],
                    "}",
                )
            case set() | frozenset() if type(value) in (set, frozenset):
                return self._encode_set(value)
            case datetime.date() | datetime.time() | datetime.timedelta() if type(value) in _DATETIME_TYPES:
                if getattr(value, "tzinfo", None) is not None and not isinstance(value.tzinfo, datetime.timezone):
                    raise NotLiteralizable(value, "only naive or fixed-offset timezones are supported")
                self._context.require_import("datetime")
                return repr(value)
            case decimal.Decimal():
                self._context.require_import("decimal")
                return f"decimal.Decimal({str(value)!r})"
            case uuid.UUID():
                self._context.require_import("uuid")
                return f"uuid.UUID({str(value)!r})"
            case _:
                return self._encode_custom(value)

    def _encode_float(self, value: float) -> str:
        if math.isnan(value):
            return "float('nan')"
        if math.isinf(value):
            return "float('inf')" if value > 0 else "-float('inf')"
        return repr(value)

    def _encode_set(self, value: set[Any] | frozenset[Any]) -> str:
        # sets have no stable iteration order, so sort the rendered members
        items = sorted(self.encode(v) for v in value)
        if isinstance(value, frozenset):
            if not items:
                return "frozenset()"
            return f"frozenset({self._bracket('{', items, '}')})"
        if not items:
            return "set()"
        return self._bracket("{", items, "}")

    def _encode_custom(self, value: Any) -> str:
        target = self._context.literalizable_target(type(value))
        if target is None:
            raise NotLiteralizable(value)

        session = self._context.session or self._standalone_session()
        return session.expand(value, target).render(self._context)

    def _standalone_session(self) -> SnapshotSession:
        # one session per top-level encode, so shared objects are expanded once
        if self._session is None:
            from snapgen.snapshot.Session import SnapshotSession

            self._session = SnapshotSession(
                recursion_types=self._context.custom_types(),
                config=self._context.config,
            )
        return self._session
