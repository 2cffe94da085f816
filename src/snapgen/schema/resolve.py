"""Accessor schema resolution.

Turns a target type into the ordered list of accessors a snapshot overrides.
The order is by name so that generated code is reproducible across runs, no
matter how the target type declares its members.

Schemas come from one of two places:
- an explicit registration (``register_accessors`` / ``@accessor_schema``)
- reflection over the class, where public plain functions become method
  accessors and ``property`` objects become property accessors
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Iterable, Sequence
from typing import Any, Callable

from snapgen.errors import InvalidArgument, InvalidContract
from snapgen.schema.Accessor import Accessor, AccessorKind
from snapgen.util.logger import get_logger, log_warn

logger = get_logger(__name__)

# Equality and hash methods are dropped whatever their signature.
DEFAULT_EXCLUDED: frozenset[str] = frozenset({"equals", "hash_code"})

# Explicitly registered schemas, keyed by target type
SCHEMA_REGISTRY: dict[type, tuple[Accessor, ...]] = {}


def register_accessors(target_type: type, accessors: Iterable[Accessor]) -> None:
    """Register an explicit accessor list for a target type, replacing reflection."""
    SCHEMA_REGISTRY[target_type] = tuple(accessors)


def accessor_schema[T](*accessors: Accessor) -> Callable[[type[T]], type[T]]:
    """
    Decorator: @accessor_schema(Accessor.for_method("get_name", str, Named))
    Registers the given accessors as the schema of the decorated class.
    """

    def decorator(cls: type[T]) -> type[T]:
        register_accessors(cls, accessors)
        return cls

    return decorator


def unregister_accessors(target_type: type) -> None:
    SCHEMA_REGISTRY.pop(target_type, None)


def validate_target(target_type: Any) -> None:
    """Check that a snapshot can subclass and instantiate the target type.

    Raises:
        InvalidArgument: If the target is not a class, is marked @final, or
            cannot be constructed without arguments
    """
    if not isinstance(target_type, type):
        raise InvalidArgument(f"Type to extend must be a class, got {target_type!r}")

    if getattr(target_type, "__final__", False):
        raise InvalidArgument(
            f"Cannot snapshot as {target_type.__qualname__}: the class is marked final"
        )

    try:
        signature = inspect.signature(target_type)
    except (TypeError, ValueError):
        # builtins without introspectable signatures
        return

    try:
        signature.bind()
    except TypeError as e:
        raise InvalidArgument(
            f"Cannot snapshot as {target_type.__qualname__}: "
            f"it has no no-argument constructor ({e})"
        ) from e


def resolve_accessors(
    target_type: type, excluded: Iterable[str] = ()
) -> list[Accessor]:
    """Resolve the ordered accessor list of a target type.

    Args:
        target_type: The type the snapshot will extend
        excluded: Extra accessor names to drop, on top of DEFAULT_EXCLUDED

    Returns:
        Accessors sorted by name

    Raises:
        InvalidContract: If a remaining public method declares parameters, or
            an excluded name is abstract on the target (the snapshot could
            not be instantiated without overriding it)
    """
    skip = DEFAULT_EXCLUDED | frozenset(excluded)

    abstract_skipped = sorted(skip & frozenset(getattr(target_type, "__abstractmethods__", ())))
    if abstract_skipped:
        raise InvalidContract(
            f"Cannot snapshot {target_type.__qualname__}: excluded members "
            f"{', '.join(abstract_skipped)} are abstract and would be left unimplemented"
        )

    if target_type in SCHEMA_REGISTRY:
        accessors = [a for a in SCHEMA_REGISTRY[target_type] if a.name not in skip]
    else:
        accessors = _reflect_accessors(target_type, skip)

    return sorted(accessors, key=lambda a: a.name)


def _reflect_accessors(target_type: type, skip: frozenset[str]) -> list[Accessor]:
    accessors: list[Accessor] = []
    for name in dir(target_type):
        if name.startswith("_") or name in skip:
            continue

        attr = inspect.getattr_static(target_type, name)
        declaring = _declaring_type(target_type, name)

        match attr:
            case property(fget=fget):
                return_type = _return_type(fget) if fget is not None else Any
                accessors.append(
                    Accessor(name, return_type, declaring, AccessorKind.PROPERTY)
                )
            case staticmethod() | classmethod():
                continue
            case _ if inspect.isfunction(attr):
                _check_no_parameters(target_type, name, attr)
                accessors.append(
                    Accessor(name, _return_type(attr), declaring, AccessorKind.METHOD)
                )
            case _:
                continue
    return accessors


def _check_no_parameters(target_type: type, name: str, func: Callable[..., Any]) -> None:
    params: Sequence[inspect.Parameter] = list(
        inspect.signature(func).parameters.values()
    )[1:]
    if params:
        raise InvalidContract(
            f"Cannot snapshot {target_type.__qualname__}: public method {name}() "
            f"takes parameters ({', '.join(p.name for p in params)}). "
            "Only zero-argument accessors are supported."
        )


def _declaring_type(target_type: type, name: str) -> type:
    for klass in target_type.__mro__:
        if name in vars(klass):
            return klass
    return target_type


def _return_type(func: Callable[..., Any]) -> Any:
    try:
        hints = typing.get_type_hints(func)
    except (NameError, TypeError) as e:
        # unresolvable forward references behave like a missing annotation
        log_warn(
            logger, "Unresolvable return annotation, using runtime type",
            function=getattr(func, "__qualname__", repr(func)), error=str(e),
        )
        return Any
    return hints.get("return", Any)
