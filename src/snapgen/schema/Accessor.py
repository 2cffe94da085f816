from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import NoneType
from typing import Any, Callable


class AccessorKind(Enum):
    METHOD = "method"
    """A zero-argument method, called as ``obj.name()``."""

    PROPERTY = "property"
    """A property, read as ``obj.name``."""


@dataclass(frozen=True)
class Accessor:
    """One observable piece of state on a target type.

    Attributes:
        name: Attribute name on the target type.
        return_type: Declared return annotation. ``typing.Any`` when the accessor
            carries no annotation.
        declaring_type: The class in the target's MRO that defines the accessor.
        kind: How the accessor is read and how its override is emitted.
        getter: Optional explicit read function. When omitted the accessor is
            read through normal attribute lookup on the live object.
    """

    name: str
    return_type: Any
    declaring_type: type
    kind: AccessorKind = AccessorKind.METHOD
    getter: Callable[[Any], Any] | None = None

    @classmethod
    def for_method(
        cls, name: str, return_type: Any, declaring_type: type,
        getter: Callable[[Any], Any] | None = None,
    ) -> Accessor:
        return cls(name, return_type, declaring_type, AccessorKind.METHOD, getter)

    @classmethod
    def for_property(
        cls, name: str, return_type: Any, declaring_type: type,
        getter: Callable[[Any], Any] | None = None,
    ) -> Accessor:
        return cls(name, return_type, declaring_type, AccessorKind.PROPERTY, getter)

    @property
    def is_void(self) -> bool:
        return self.kind is AccessorKind.METHOD and self.return_type in (None, NoneType)

    @property
    def qualified_name(self) -> str:
        return f"{self.declaring_type.__module__}.{self.declaring_type.__qualname__}.{self.name}"

    def invoke(self, obj: Any) -> Any:
        if self.getter is not None:
            return self.getter(obj)
        attr = getattr(obj, self.name)
        if self.kind is AccessorKind.PROPERTY:
            return attr
        return attr()
