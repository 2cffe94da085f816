"""Check that a snapshot reproduces the observable state of its source.

The observable state of an object is the tree of its accessor return values.
A snapshot is faithful when the object obtained by evaluating its source has
the same observable state as the original, which ``diff_snapshot`` reports as
a DeepDiff.
"""

from __future__ import annotations

import importlib
from typing import Any

from deepdiff import DeepDiff, parse_path
from glom import T, glom

from snapgen.codegen.Statement import Statement
from snapgen.context.Context import Context
from snapgen.errors import CycleDetected
from snapgen.schema.resolve import resolve_accessors
from snapgen.util.IdentityMap import IdentitySet


type ObservedValue = Any
type ObservedState = dict[str, ObservedValue]


def observable_state(
    obj: Any, target_type: type, *recursion_types: type
) -> ObservedState:
    """Read every accessor of obj into a nested dict.

    Values of a recursion type are read recursively. Lists, tuples, sets and
    dict values are walked so that recursion-typed objects inside them are
    read too. Void accessors are skipped.

    Raises:
        CycleDetected: If a recursion-typed object refers back to itself
    """
    return _Observer(recursion_types).observe(obj, target_type)


class _Observer:
    def __init__(self, recursion_types: tuple[type, ...]):
        self._recursion_types = recursion_types
        self._active: IdentitySet[Any] = IdentitySet()

    def observe(self, obj: Any, target_type: type) -> ObservedState:
        if obj in self._active:
            raise CycleDetected(list(self._active))
        self._active.add(obj)
        try:
            return {
                accessor.name: self._value(accessor.invoke(obj))
                for accessor in resolve_accessors(target_type)
                if not accessor.is_void
            }
        finally:
            self._active.discard(obj)

    def _value(self, value: Any) -> ObservedValue:
        match value:
            case list() | tuple():
                return [self._value(v) for v in value]
            case set() | frozenset():
                # observed members may be unhashable dicts
                return sorted((self._value(v) for v in value), key=repr)
            case dict():
                return {k: self._value(v) for k, v in value.items()}
        for tp in self._recursion_types:
            if isinstance(value, tp):
                return self.observe(value, tp)
        return value


def materialize(statement: Statement, context: Context | None = None) -> Any:
    """Render a statement and evaluate the generated source.

    The modules the rendered source refers to are imported into the evaluation
    namespace.
    """
    scope = (context or Context.create()).scope()
    source = statement.render(scope)

    namespace: dict[str, Any] = {}
    for module in scope.imports:
        importlib.import_module(module)
        root = module.split(".")[0]
        namespace[root] = importlib.import_module(root)
    return eval(source, namespace)


def diff_snapshot(
    original: Any,
    reconstructed: Any,
    target_type: type,
    *recursion_types: type,
    scope: str = ".",
) -> DeepDiff:
    """Diff the observable state of an original object and its reconstruction.

    Args:
        original: The live object that was snapshotted
        reconstructed: The object produced by evaluating the snapshot
        target_type: The type both objects are read as
        *recursion_types: Types whose values are compared recursively
        scope: Dot path into the observable state to compare, e.g.
            "get_mother.get_name". "." compares everything.

    Returns:
        An empty DeepDiff when the two agree within scope
    """
    spec = T if scope == "." else scope
    old_subtree = glom(observable_state(original, target_type, *recursion_types), spec)
    new_subtree = glom(observable_state(reconstructed, target_type, *recursion_types), spec)
    return DeepDiff(old_subtree, new_subtree)


def changed_paths(diff: DeepDiff) -> set[str]:
    """Dot-notation paths of every change in a diff, e.g. 'get_mother.get_age'."""
    paths: set[str] = set()
    for change_type in diff.values():
        # dict-valued reports key changes by path, set-valued ones list the paths
        for delta_path in change_type:
            paths.add(".".join(str(p) for p in parse_path(delta_path)))
    return paths
