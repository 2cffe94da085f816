"""Per-invocation bookkeeping for one top-level snapshot.

A session owns the two identity indexes that every node of one snapshot
shares:

- in progress: objects whose node is currently being rendered. Meeting one
  of these again means the object graph has a cycle.
- completed: objects whose expression has already been produced (or was
  supplied as a canned representation). Later references reuse that
  expression instead of walking the object again.

Sessions are created by ``snapshot()`` and threaded through every nested node.
They are not shared between top-level calls and are not thread safe.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from snapgen.codegen.Statement import LoadLiteral, Statement
from snapgen.config.SnapshotConfig import DEFAULT_CONFIG, SnapshotConfig
from snapgen.errors import CycleDetected
from snapgen.util.IdentityMap import IdentityMap, IdentitySet
from snapgen.util.logger import get_logger, log_debug

logger = get_logger(__name__)

type CannedRepresentations = Mapping[Any, Statement] | Iterable[tuple[Any, Statement]]
"""Objects mapped to the expression to use in their place. Keys match by identity."""


def canned_pairs(canned: CannedRepresentations | None) -> list[tuple[Any, Statement]]:
    if canned is None:
        return []
    if isinstance(canned, (IdentityMap, Mapping)):
        return list(canned.items())
    return list(canned)


class SnapshotSession:
    recursion_types: tuple[type, ...]
    config: SnapshotConfig
    _in_progress: IdentitySet[Any]
    _completed: IdentityMap[Any, Statement]

    def __init__(
        self,
        recursion_types: Iterable[type] = (),
        canned: CannedRepresentations | None = None,
        config: SnapshotConfig | None = None,
    ):
        self.recursion_types = tuple(recursion_types)
        self.config = config or DEFAULT_CONFIG
        self._in_progress = IdentitySet()
        self._completed = IdentityMap()
        for obj, statement in canned_pairs(canned):
            self._completed.put(obj, statement)

    # Cycle detection

    def guard(self, obj: Any) -> None:
        """Raise CycleDetected if obj is currently being expanded."""
        if obj in self._in_progress:
            raise CycleDetected(self.in_progress())

    def enter(self, obj: Any) -> None:
        self.guard(obj)
        self._in_progress.add(obj)

    def leave(self, obj: Any) -> None:
        self._in_progress.discard(obj)

    def in_progress(self) -> list[Any]:
        return list(self._in_progress)

    def is_in_progress(self, obj: Any) -> bool:
        return obj in self._in_progress

    # Memoization

    def lookup(self, obj: Any) -> Statement | None:
        return self._completed.get(obj)

    def record(self, obj: Any, statement: Statement) -> Statement:
        """Remember the expression produced for obj. The first one recorded wins."""
        return self._completed.put_if_absent(obj, statement)

    # Recursion

    def recursion_target(self, declared: Any) -> type | None:
        """The recursion type matching a declared (erased) return type, if any."""
        if not isinstance(declared, type):
            return None
        for tp in self.recursion_types:
            if issubclass(declared, tp):
                return declared
        return None

    def expand(self, obj: Any, target_type: type) -> Statement:
        """Expression for obj as target_type, reusing an earlier one when available."""
        existing = self.lookup(obj)
        # a literal of obj itself would hand straight back to this method
        if existing is not None and not (isinstance(existing, LoadLiteral) and existing.value is obj):
            log_debug(logger, "Using existing snapshot", object=repr(obj))
            return existing

        self.guard(obj)

        from snapgen.snapshot.SnapshotNode import SnapshotNode

        node = SnapshotNode(obj, target_type, self)
        self._completed.put(obj, node)
        return node
