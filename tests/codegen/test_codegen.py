"""Tests for code fragments, layout helpers and the anonymous subclass expression."""

from __future__ import annotations

from types import NoneType
from typing import Any

import pytest

from sample_model import Person, Widget
from snapgen.codegen.AnonymousSubclass import AnonymousSubclassBuilder
from snapgen.codegen.pretty import bracket, finalize, indent
from snapgen.codegen.references import type_reference
from snapgen.codegen.Statement import NULL, LoadLiteral, Stmt
from snapgen.context.Context import Context
from snapgen.errors import GenerationFailure, NotLiteralizable
from snapgen.schema.Accessor import Accessor


class TestPretty:
    """Tests for indent(), bracket() and finalize()."""

    def test_indent_skips_first_and_blank_lines(self) -> None:
        assert indent("a\nb\n\nc", "  ") == "a\n  b\n\n  c"
        assert indent("single", "    ") == "single"

    def test_bracket_one_line(self) -> None:
        assert bracket("[", ["1", "2"], "]") == "[1, 2]"
        assert bracket("(", ["1"], ")", trailing_comma_single=True) == "(1,)"
        assert bracket("{", [], "}") == "{}"

    def test_bracket_multi_line_item_breaks(self) -> None:
        assert bracket("[", ["f(\n    x,\n)", "2"], "]") == (
            "[\n"
            "    f(\n"
            "        x,\n"
            "    ),\n"
            "    2,\n"
            "]"
        )

    def test_bracket_too_long_breaks(self) -> None:
        assert bracket("[", ["'abc'", "'def'"], "]", indent_width=2, line_width=10) == (
            "[\n  'abc',\n  'def',\n]"
        )

    def test_finalize_accepts_expression(self) -> None:
        assert finalize("[1, 2]") == "[1, 2]"

    def test_finalize_rejects_garbage(self) -> None:
        with pytest.raises(GenerationFailure, match="not a valid expression"):
            finalize("type(")


class TestTypeReference:
    """Tests for type_reference()."""

    def test_module_level_class(self) -> None:
        ctx = Context.create()
        assert type_reference(Person, ctx) == "sample_model.Person"
        assert ctx.imports == frozenset({"sample_model"})

    def test_builtin_needs_no_import(self) -> None:
        ctx = Context.create()
        assert type_reference(int, ctx) == "int"
        assert ctx.imports == frozenset()

    def test_local_class_rejected(self) -> None:
        class Local:
            pass

        with pytest.raises(GenerationFailure, match="inside a function"):
            type_reference(Local, Context.create())


class TestStatements:
    """Tests for the Stmt factory."""

    def test_load_none_is_null(self) -> None:
        assert Stmt.load(None) is NULL
        assert Stmt.null() is NULL
        assert NULL.render(Context.create()) == "None"
        assert NULL.described_type() is NoneType

    def test_load_literal(self) -> None:
        statement = Stmt.load({"a": 1})
        assert isinstance(statement, LoadLiteral)
        assert statement.render(Context.create()) == "{'a': 1}"
        assert statement.described_type() is dict

    def test_load_variable(self) -> None:
        statement = Stmt.load_variable("mom", Person)
        assert statement.render(Context.create()) == "mom"
        assert statement.described_type() is Person

    @pytest.mark.parametrize("name", ["", "not valid", "1abc", "class"])
    def test_load_variable_rejects_bad_names(self, name: str) -> None:
        with pytest.raises(ValueError):
            Stmt.load_variable(name)

    def test_raw(self) -> None:
        statement = Stmt.raw("make_thing()")
        assert statement.render(Context.create()) == "make_thing()"
        assert statement.described_type() is Any

    def test_literal_encoded_lazily(self) -> None:
        """Loading an unencodable value only fails once rendered."""
        statement = Stmt.load(Widget())
        with pytest.raises(NotLiteralizable):
            statement.render(Context.create())


class TestAnonymousSubclass:
    """Tests for the anonymous subclass expression."""

    def test_no_overrides(self) -> None:
        expression = AnonymousSubclassBuilder(Widget).finish()
        assert expression.render(Context.create()) == (
            "type(\n"
            "    'Widget',\n"
            "    (sample_model.Widget,),\n"
            "    {},\n"
            ")()"
        )

    def test_method_property_and_no_op(self) -> None:
        expression = (
            AnonymousSubclassBuilder(Widget)
            .override(Accessor.for_method("reset", None, Widget))
            .override(Accessor.for_property("size", int, Widget), Stmt.load(3))
            .finish()
        )

        assert expression.described_type() is Widget
        assert expression.render(Context.create()) == (
            "type(\n"
            "    'Widget',\n"
            "    (sample_model.Widget,),\n"
            "    {\n"
            "        'reset': lambda self: None,\n"
            "        'size': property(lambda self: 3),\n"
            "    },\n"
            ")()"
        )

    def test_rendered_expression_builds_subclass(self) -> None:
        import sample_model

        source = (
            AnonymousSubclassBuilder(Widget)
            .override(Accessor.for_method("label", str, Widget), Stmt.load("w"))
            .finish()
            .render(Context.create())
        )
        built = eval(source, {"sample_model": sample_model})

        assert isinstance(built, Widget)
        assert built.label() == "w"

    def test_body_failure_names_override(self) -> None:
        expression = (
            AnonymousSubclassBuilder(Widget)
            .override(Accessor.for_method("thing", Widget, Widget), Stmt.load(Widget()))
            .finish()
        )

        with pytest.raises(NotLiteralizable) as excinfo:
            expression.render(Context.create())

        assert excinfo.value.failure_info == ["While rendering override thing of Widget"]
