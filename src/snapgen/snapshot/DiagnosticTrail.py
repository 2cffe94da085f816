from __future__ import annotations

from typing import Any

from snapgen.errors import NotLiteralizable
from snapgen.schema.Accessor import Accessor
from snapgen.util.IdentityMap import IdentityMap


class DiagnosticTrail:
    """Remembers which accessor produced each return value of one node.

    When literal encoding fails on a value, the trail says where that value
    came from.
    """

    _origins: IdentityMap[Any, Accessor]

    def __init__(self) -> None:
        self._origins = IdentityMap()

    def record(self, value: Any, accessor: Accessor) -> None:
        self._origins.put(value, accessor)

    def origin(self, value: Any) -> Accessor | None:
        return self._origins.get(value)

    def annotate(self, error: NotLiteralizable) -> bool:
        """Append the origin of the offending value to the error. Returns whether one was known."""
        accessor = self.origin(error.value)
        if accessor is None:
            return False
        error.append_failure_info(
            f"This value came from method {accessor.qualified_name}, "
            f"which has return type {_describe_type(accessor.return_type)}"
        )
        return True


def _describe_type(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)
