"""Tests for ModuleBuilder."""

from __future__ import annotations

import pytest

from sample_model import Person, PersonImpl, Widget
from snapgen.codegen.ModuleBuilder import ModuleBuilder
from snapgen.codegen.Statement import Stmt
from snapgen.errors import NotLiteralizable
from snapgen.snapshot.snapshot import snapshot


class TestModuleBuilder:
    """Tests for module assembly."""

    def test_canned_reference_to_declared_variable(self) -> None:
        """Children refer to a mother declared earlier in the same module."""
        mom = PersonImpl("mom", 30, None)
        kid = PersonImpl("kid1", 1, mom)

        module = ModuleBuilder()
        module.declare("mom", snapshot(mom, Person, Person))
        module.declare(
            "kid1", snapshot(kid, Person, Person, canned={mom: Stmt.load_variable("mom")})
        )

        assert module.render() == (
            "import sample_model\n"
            "\n"
            "mom = type(\n"
            "    'Person',\n"
            "    (sample_model.Person,),\n"
            "    {\n"
            "        'get_age': lambda self: 30,\n"
            "        'get_mother': lambda self: None,\n"
            "        'get_name': lambda self: 'mom',\n"
            "    },\n"
            ")()\n"
            "kid1 = type(\n"
            "    'Person',\n"
            "    (sample_model.Person,),\n"
            "    {\n"
            "        'get_age': lambda self: 1,\n"
            "        'get_mother': lambda self: mom,\n"
            "        'get_name': lambda self: 'kid1',\n"
            "    },\n"
            ")()\n"
        )

    def test_generated_module_executes(self) -> None:
        """Every child's mother is the very object bound to the module variable."""
        mom = PersonImpl("mom", 30, None)
        mom_reference = Stmt.load_variable("mom")

        module = ModuleBuilder()
        module.declare("mom", snapshot(mom, Person, Person))
        for i in (1, 2, 3):
            kid = PersonImpl(f"Kid {i}", i, mom)
            module.declare(f"kid{i}", snapshot(kid, Person, Person, canned={mom: mom_reference}))

        namespace: dict[str, object] = {}
        exec(module.render(), namespace)

        assert mom.calls == ["get_age", "get_mother", "get_name"]
        for i in (1, 2, 3):
            kid = namespace[f"kid{i}"]
            assert kid.get_name() == f"Kid {i}"  # type: ignore[attr-defined]
            assert kid.get_mother() is namespace["mom"]  # type: ignore[attr-defined]

    def test_imports_sorted_and_deduplicated(self) -> None:
        import decimal
        import uuid

        module = ModuleBuilder()
        module.declare("a", Stmt.load(uuid.UUID(int=1)))
        module.declare("b", Stmt.load(decimal.Decimal("2")))
        module.declare("c", Stmt.load(decimal.Decimal("3")))

        source = module.render()

        assert source.startswith("import decimal\nimport uuid\n\n")

    def test_no_imports(self) -> None:
        module = ModuleBuilder().declare("x", Stmt.load([1, 2]))
        assert module.render() == "x = [1, 2]\n"

    def test_rejects_bad_and_duplicate_names(self) -> None:
        module = ModuleBuilder().declare("x", Stmt.load(1))
        with pytest.raises(ValueError, match="not a valid variable name"):
            module.declare("not valid", Stmt.load(1))
        with pytest.raises(ValueError, match="already declared"):
            module.declare("x", Stmt.load(2))

    def test_failure_names_variable(self) -> None:
        module = ModuleBuilder().declare("broken", Stmt.load([Widget()]))

        with pytest.raises(NotLiteralizable) as excinfo:
            module.render()

        assert excinfo.value.failure_info[-1] == "While declaring module variable broken"

    def test_shared_context_registrations(self) -> None:
        """Types registered on the builder's context apply to every declaration."""
        module = ModuleBuilder()
        module.context.add_literalizable(Person)
        module.declare("people", Stmt.load([PersonImpl("solo", 40, None)]))

        source = module.render()

        assert source.startswith("import sample_model\n\npeople = [\n    type(\n")
        assert "'get_name': lambda self: 'solo'," in source
