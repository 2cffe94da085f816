"""Builder for anonymous subclass construction expressions.

Python has no anonymous class syntax, so the expression builds the class with
``type()`` and instantiates it on the spot:

    type(
        'Person',
        (model.Person,),
        {
            'get_age': lambda self: 5,
            'name': property(lambda self: 'kid'),
        },
    )()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from snapgen.codegen.pretty import indent
from snapgen.codegen.references import type_reference
from snapgen.codegen.Statement import NULL, Statement
from snapgen.errors import GenerationError
from snapgen.schema.Accessor import Accessor, AccessorKind

if TYPE_CHECKING:
    from snapgen.context.Context import Context


@dataclass(frozen=True)
class Override:
    accessor: Accessor
    body: Statement


class AnonymousSubclassBuilder:
    _target_type: type
    _overrides: list[Override]

    def __init__(self, target_type: type):
        self._target_type = target_type
        self._overrides = []

    def override(self, accessor: Accessor, body: Statement | None = None) -> AnonymousSubclassBuilder:
        """Add an override returning body. A missing body overrides with a no-op."""
        self._overrides.append(Override(accessor, body if body is not None else NULL))
        return self

    def finish(self) -> AnonymousSubclassExpr:
        return AnonymousSubclassExpr(self._target_type, tuple(self._overrides))


class AnonymousSubclassExpr(Statement):
    _target_type: type
    overrides: tuple[Override, ...]

    def __init__(self, target_type: type, overrides: tuple[Override, ...]):
        self._target_type = target_type
        self.overrides = overrides

    def described_type(self) -> Any:
        return self._target_type

    def render(self, context: Context) -> str:
        pad = " " * context.config.render.indent
        base = type_reference(self._target_type, context)

        lines = [
            "type(",
            f"{pad}{self._target_type.__name__!r},",
            f"{pad}({base},),",
        ]
        if not self.overrides:
            lines.append(f"{pad}{{}},")
        else:
            lines.append(f"{pad}{{")
            entry_pad = pad * 2
            for override in self.overrides:
                entry = f"{override.accessor.name!r}: {self._render_override(override, context)},"
                lines.append(f"{entry_pad}{indent(entry, entry_pad)}")
            lines.append(f"{pad}}},")
        lines.append(")()")
        return "\n".join(lines)

    def _render_override(self, override: Override, context: Context) -> str:
        try:
            body = override.body.render(context)
        except GenerationError as e:
            e.append_failure_info(
                f"While rendering override {override.accessor.name} of {self._target_type.__qualname__}"
            )
            raise

        function = f"lambda self: {body}"
        if override.accessor.kind is AccessorKind.PROPERTY:
            return f"property({function})"
        return function
