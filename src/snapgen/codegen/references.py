from __future__ import annotations

import builtins
from typing import TYPE_CHECKING

from snapgen.errors import GenerationFailure

if TYPE_CHECKING:
    from snapgen.context.Context import Context


def type_reference(tp: type, context: Context) -> str:
    """Render a source reference to a class and record the import it needs.

    Raises:
        GenerationFailure: If the class is defined inside a function and so has
            no importable name
    """
    module = tp.__module__
    qualname = tp.__qualname__

    if "<locals>" in qualname:
        raise GenerationFailure(
            f"Cannot refer to {qualname} from generated code: it is defined inside a function"
        )

    if module == builtins.__name__:
        return qualname

    context.require_import(module)
    return f"{module}.{qualname}"
