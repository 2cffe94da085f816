from __future__ import annotations

from snapgen.codegen.Statement import Statement
from snapgen.context.Context import Context
from snapgen.errors import GenerationError


class ModuleBuilder:
    """Assemble rendered statements into a Python module.

    Each declaration becomes a module-level assignment, in declaration order.
    Imports needed by any of them are collected and emitted first, sorted.

    Example:
        module = ModuleBuilder()
        module.declare("mom", snapshot(mom, Person, Person))
        module.declare("kid", snapshot(kid, Person, Person, canned={mom: Stmt.load_variable("mom")}))
        source = module.render()
    """

    _context: Context
    _declarations: list[tuple[str, Statement]]

    def __init__(self, context: Context | None = None):
        self._context = context if context is not None else Context.create()
        self._declarations = []

    @property
    def context(self) -> Context:
        return self._context

    def declare(self, name: str, statement: Statement) -> ModuleBuilder:
        if not name.isidentifier():
            raise ValueError(f"{name!r} is not a valid variable name")
        if any(existing == name for existing, _ in self._declarations):
            raise ValueError(f"Variable {name!r} is already declared")
        self._declarations.append((name, statement))
        return self

    def render(self) -> str:
        scope = self._context.scope()
        body: list[str] = []
        for name, statement in self._declarations:
            try:
                body.append(f"{name} = {statement.render(scope)}")
            except GenerationError as e:
                e.append_failure_info(f"While declaring module variable {name}")
                raise

        lines = [f"import {module}" for module in sorted(scope.imports)]
        if lines:
            lines.append("")
        lines.extend(body)
        return "\n".join(lines) + "\n"
