"""Code-generated snapshots of live objects.

``snapshot()`` returns a Statement that renders to a Python expression. Evaluating
that expression builds an object of the target type whose accessors return the
values the live object's accessors returned at render time.

The target type must be a class that can be instantiated with no arguments, is
not marked ``@final``, and whose public methods take no parameters (the
``equals`` and ``hash_code`` methods are ignored). Each accessor must return one
of:
- ``None``
- a value of a type that is literalizable in the render context
- a value of one of the recursion types, which is snapshotted the same way
- an object that has a canned representation (matched by identity)

Example:
    mom = PersonImpl("mom", 30, None)
    kid = PersonImpl("kid", 5, mom)
    source = snapshot(kid, Person, Person).render(Context.create())
"""

from __future__ import annotations

from typing import Any

from snapgen.config.SnapshotConfig import SnapshotConfig, load_config
from snapgen.errors import InvalidArgument
from snapgen.snapshot.Session import CannedRepresentations, SnapshotSession
from snapgen.snapshot.SnapshotNode import SnapshotNode
from snapgen.util.logger import configure_logging, get_logger, log_debug

logger = get_logger(__name__)


def snapshot(
    obj: Any,
    target_type: type,
    *recursion_types: type,
    canned: CannedRepresentations | None = None,
    config: SnapshotConfig | None = None,
) -> SnapshotNode:
    """Create a snapshot of obj as a subclass of target_type.

    Args:
        obj: The object to snapshot
        target_type: The type the snapshot will extend
        *recursion_types: Types whose values are snapshotted recursively
            rather than treated as opaque
        canned: Objects for which a pre-made expression should be used instead
            of a generated snapshot, e.g. a reference to an existing variable.
            Keys are matched by identity. Each expression is used verbatim as
            the body of every accessor that returns its key.
        config: Generation settings. Defaults to load_config(), i.e. the file
            named by SNAPGEN_CONFIG or the built-in defaults. Its logging
            section becomes the active logging config.

    Returns:
        A statement whose described type is target_type

    Raises:
        InvalidArgument: If obj is None or not an instance of target_type, or
            target_type cannot be snapshotted
        InvalidContract: If target_type has public methods with parameters
        InvalidConfig: If no config is given and SNAPGEN_CONFIG names an
            invalid file

    Rendering the returned statement can raise CycleDetected if objects
    reachable from obj form a reference cycle (a canned representation for
    one of them breaks the cycle), NotLiteralizable, or GenerationFailure.
    """
    if obj is None:
        raise InvalidArgument("Cannot snapshot None")

    if config is None:
        config = load_config()
    configure_logging(config.logging)

    session = SnapshotSession(recursion_types, canned=canned, config=config)
    log_debug(
        logger, "Making snapshot",
        object=repr(obj), target=getattr(target_type, "__qualname__", repr(target_type)),
        recursion_types=[t.__qualname__ for t in recursion_types],
    )
    return SnapshotNode(obj, target_type, session)
