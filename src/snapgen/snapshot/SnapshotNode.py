"""Snapshot of one object as one target type.

A node is built eagerly (target checks and accessor resolution happen in the
constructor, so contract violations surface before any accessor runs) and
rendered lazily. The first render walks the object's accessors and caches the
text; later renders return the cache without touching the object again.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from snapgen.codegen.AnonymousSubclass import AnonymousSubclassBuilder
from snapgen.codegen.pretty import finalize
from snapgen.codegen.Statement import NULL, Statement, Stmt
from snapgen.context.Context import Context
from snapgen.errors import (
    CycleDetected,
    GenerationError,
    GenerationFailure,
    InvalidArgument,
    NotLiteralizable,
)
from snapgen.schema.Accessor import Accessor
from snapgen.schema.resolve import resolve_accessors, validate_target
from snapgen.snapshot.DiagnosticTrail import DiagnosticTrail
from snapgen.snapshot.policy import Canned, Literal, Null, Recurse, classify
from snapgen.snapshot.Session import SnapshotSession
from snapgen.util.logger import get_logger, log_debug

logger = get_logger(__name__)


class NodeState(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    FAILED = "failed"


class SnapshotNode(Statement):
    _obj: Any
    _target_type: type
    _session: SnapshotSession
    _accessors: list[Accessor]
    _trail: DiagnosticTrail
    _state: NodeState
    _cache: str | None
    _imports: frozenset[str]
    _failure: GenerationError | None

    def __init__(self, obj: Any, target_type: type, session: SnapshotSession):
        validate_target(target_type)
        accessors = resolve_accessors(target_type, session.config.accessors.excluded)
        if not _is_assignable(obj, target_type, accessors):
            raise InvalidArgument(
                f"Given object (of type {type(obj).__module__}.{type(obj).__qualname__}) "
                f"is not an instance of requested type {target_type.__module__}.{target_type.__qualname__}"
            )

        self._obj = obj
        self._target_type = target_type
        self._session = session
        self._accessors = accessors
        self._trail = DiagnosticTrail()
        self._state = NodeState.PENDING
        self._cache = None
        self._imports = frozenset()
        self._failure = None

        log_debug(
            logger, "Created snapshot node",
            object=repr(obj), target=target_type.__qualname__,
            accessors=[a.name for a in accessors],
        )

    @property
    def state(self) -> NodeState:
        return self._state

    @property
    def accessors(self) -> list[Accessor]:
        return list(self._accessors)

    def described_type(self) -> type:
        return self._target_type

    def render(self, context: Context) -> str:
        match self._state:
            case NodeState.COMPLETE:
                if self._cache is None:
                    raise GenerationFailure(
                        f"Snapshot of {_describe(self._obj)} is marked complete but has no generated code"
                    )
                for module in self._imports:
                    context.require_import(module)
                return self._cache
            case NodeState.IN_PROGRESS:
                raise CycleDetected(self._session.in_progress() or [self._obj])
            case NodeState.FAILED:
                raise GenerationFailure(
                    f"Snapshot of {_describe(self._obj)} already failed and is not retried"
                ) from self._failure

        self._state = NodeState.IN_PROGRESS
        sub_context = context.scope(self._session.recursion_types, self._session)
        try:
            text = self._generate(context, sub_context)
        except GenerationError as e:
            self._fail(e)
            raise
        except Exception as e:
            failure = GenerationFailure(f"Failed to generate snapshot: {e}")
            self._fail(failure)
            raise failure from e

        self._cache = text
        self._imports = sub_context.imports
        self._state = NodeState.COMPLETE
        return text

    def _fail(self, error: GenerationError) -> None:
        self._state = NodeState.FAILED
        self._failure = error
        error.append_failure_info(
            f"While generating a snapshot of {_describe(self._obj)} "
            f"(actual type: {type(self._obj).__module__}.{type(self._obj).__qualname__}; "
            f"type to extend: {self._target_type.__module__}.{self._target_type.__qualname__})"
        )
        log_debug(logger, "Snapshot failed", object=_describe(self._obj), error=error.message)

    def _generate(self, context: Context, sub_context: Context) -> str:
        session = self._session
        session.enter(self._obj)
        try:
            builder = AnonymousSubclassBuilder(self._target_type)
            for accessor in self._accessors:
                if accessor.is_void:
                    builder.override(accessor)
                    continue
                try:
                    builder.override(accessor, self._body_for(accessor, context))
                except GenerationError as e:
                    if isinstance(e, NotLiteralizable):
                        self._trail.annotate(e)
                    e.append_failure_info(
                        f"In attempt to snapshot return value of {accessor.qualified_name}()"
                    )
                    raise

            expression = builder.finish()
            try:
                return finalize(expression.render(sub_context))
            except NotLiteralizable as e:
                self._trail.annotate(e)
                raise
        finally:
            session.leave(self._obj)

    def _body_for(self, accessor: Accessor, context: Context) -> Statement:
        try:
            retval = accessor.invoke(self._obj)
        except Exception as e:
            raise GenerationFailure(
                f"Failed to extract value for snapshot from {accessor.qualified_name}(): {e!r}"
            ) from e

        self._trail.record(retval, accessor)

        body: Statement
        match classify(retval, accessor.return_type, context, self._session):
            case Null():
                return NULL
            case Canned(statement=statement):
                log_debug(logger, "Using existing snapshot", accessor=accessor.name)
                body = statement
            case Literal():
                custom_target = context.literalizable_target(type(retval))
                if custom_target is not None:
                    # custom literalizable objects are memoized as nodes, never as literals
                    body = self._session.expand(retval, custom_target)
                else:
                    log_debug(logger, "Relying on literal encoder", accessor=accessor.name)
                    body = Stmt.load(retval)
            case Recurse(target_type=target_type):
                self._session.guard(retval)
                log_debug(
                    logger, "Recursing",
                    accessor=accessor.name, target=target_type.__qualname__,
                )
                body = SnapshotNode(retval, target_type, self._session)

        return self._session.record(retval, body)


def _is_assignable(obj: Any, target_type: type, accessors: list[Accessor]) -> bool:
    try:
        return isinstance(obj, target_type)
    except TypeError:
        # protocols that are not runtime checkable: check the accessors structurally
        return all(hasattr(obj, a.name) for a in accessors)


def _describe(obj: Any) -> str:
    try:
        return str(obj)
    except Exception:
        return object.__repr__(obj)
