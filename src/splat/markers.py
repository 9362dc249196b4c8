"""Runtime marker for classes that receive a flattened constructor."""

from __future__ import annotations

from typing import Callable, TypeVar, overload

ClassT = TypeVar("ClassT", bound=type)


@overload
def splat(cls: ClassT) -> ClassT: ...


@overload
def splat(
    *, property_name: str = "arguments", struct_name: str = "Arguments"
) -> Callable[[ClassT], ClassT]: ...


def splat(
    cls: ClassT | None = None,
    *,
    property_name: str = "arguments",
    struct_name: str = "Arguments",
):
    """Mark a class for ``splat expand``.

    The decorator does nothing at runtime; the expansion reads it from the
    source. ``property_name`` names the field holding the bundle and
    ``struct_name`` the nested bundle class.
    """

    def _mark(target: ClassT) -> ClassT:
        return target

    if cls is not None:
        return _mark(cls)
    return _mark
