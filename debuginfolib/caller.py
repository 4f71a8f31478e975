"""Caller identification by walking the active call stack.

``frames_to_skip`` counts frames upward from the resolver itself:

* ``0`` -- :func:`resolve_caller_name` (or :func:`resolve_caller`)
* ``1`` -- whoever called the resolver
* ``2`` -- whoever called a public wrapper that called the resolver

Every public accessor passes the depth that lands on *its* caller.
"""

from __future__ import annotations

import inspect
from types import FrameType

from .models import CallerIdentity, CallerNameFormat

# Resolver <- public wrapper <- caller of interest
CALLER_OF_WRAPPER = 2


def resolve_caller_name(fmt: CallerNameFormat | str, frames_to_skip: int = 1) -> str:
    """Render the identity of the frame *frames_to_skip* levels up."""
    fmt = CallerNameFormat.coerce(fmt)
    frame = inspect.currentframe()
    try:
        target = _walk(frame, frames_to_skip)
        return identify_frame(target).render(fmt)
    finally:
        del frame


def resolve_caller(frames_to_skip: int = 1) -> CallerIdentity:
    """Return the :class:`CallerIdentity` *frames_to_skip* levels up."""
    frame = inspect.currentframe()
    try:
        return identify_frame(_walk(frame, frames_to_skip))
    finally:
        del frame


def identify_frame(frame: FrameType) -> CallerIdentity:
    """Work out the declaring class and function name of *frame*.

    The class comes from the code object's qualified name when it has one,
    so inherited methods report the class that defines them.  Otherwise a
    ``self``/``cls`` local is used, and module-level code reports its
    module in place of a class.
    """
    code = frame.f_code
    module = frame.f_globals.get("__name__") or "?"

    owner = _owner_from_qualname(getattr(code, "co_qualname", None))
    if owner is None:
        owner = _owner_from_locals(frame)
    if owner is None:
        return CallerIdentity(module, module.rsplit(".", 1)[-1], code.co_name)

    owner_module, owner_qualname = owner
    return CallerIdentity(
        f"{owner_module or module}.{owner_qualname}",
        owner_qualname.rsplit(".", 1)[-1],
        code.co_name,
    )


def _walk(frame: FrameType | None, frames_to_skip: int) -> FrameType:
    if frames_to_skip < 0:
        raise ValueError(f"frames_to_skip must be >= 0, got {frames_to_skip}")
    target = frame
    for _ in range(frames_to_skip):
        if target is None:
            break
        target = target.f_back
    if target is None:
        raise ValueError(f"Call stack is not {frames_to_skip} frames deep")
    return target


def _owner_from_qualname(qualname: str | None) -> tuple[str | None, str] | None:
    if not qualname:
        return None
    parts = qualname.split(".")
    # "f.<locals>.g" is a nested function, not a method
    if len(parts) < 2 or parts[-2] == "<locals>":
        return None
    return None, ".".join(parts[:-1])


def _owner_from_locals(frame: FrameType) -> tuple[str | None, str] | None:
    f_locals = frame.f_locals
    self_obj = f_locals.get("self")
    if self_obj is not None:
        cls = type(self_obj)
    else:
        cls = f_locals.get("cls")
        if not isinstance(cls, type):
            return None
    return cls.__module__, cls.__qualname__
