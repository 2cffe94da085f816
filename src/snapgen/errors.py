"""Errors raised while generating snapshots.

Every generation error carries a list of failure info lines. Each frame of the
object graph walk that sees the error on its way out appends a line describing
where it was, so the final message reads like a trail from the offending value
back up to the top-level call.
"""

from __future__ import annotations

from typing import Any, Iterable


class GenerationError(Exception):
    """Base class for snapshot generation failures."""

    failure_info: list[str]

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.failure_info = []

    def append_failure_info(self, info: str) -> None:
        self.failure_info.append(info)
        self.add_note(info)

    def __str__(self) -> str:
        if not self.failure_info:
            return self.message
        return "\n".join([self.message, *self.failure_info])


class InvalidArgument(GenerationError, ValueError):
    """The object or target type cannot be snapshotted at all."""


class InvalidContract(InvalidArgument):
    """The target type exposes a public method that takes parameters."""


class CycleDetected(GenerationError):
    """An object reachable from the snapshot root refers back to an object still being expanded."""

    objects_involved: list[Any]

    def __init__(self, objects_involved: Iterable[Any]):
        self.objects_involved = list(objects_involved)
        super().__init__(
            "Cyclical object graph: "
            + ", ".join(_describe(o) for o in self.objects_involved)
            + ". Supply a canned representation for one of these objects to break the cycle."
        )

    def involves(self, obj: Any) -> bool:
        return any(o is obj for o in self.objects_involved)


class NotLiteralizable(GenerationError):
    """A value could not be reduced to a literal, canned, or recursive expression."""

    value: Any

    def __init__(self, value: Any, reason: str | None = None):
        self.value = value
        message = f"Not literalizable: {_describe(value)}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class GenerationFailure(GenerationError):
    """Unexpected failure while invoking an accessor or assembling generated code."""


class InvalidConfig(ValueError):
    """A snapshot configuration document failed validation."""


def _describe(obj: Any) -> str:
    try:
        text = repr(obj)
    except Exception:
        text = object.__repr__(obj)
    return f"{text} ({type(obj).__qualname__})"
