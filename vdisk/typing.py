"""Certain types used across the package."""

from __future__ import annotations

from os import PathLike
from typing import TYPE_CHECKING, FrozenSet, Union

from typing_extensions import TypeAlias

__all__ = ["StrPath", "Handle", "VolumeSnapshot"]


# `PathLike` cannot be subscripted at runtime.
if TYPE_CHECKING:
    StrPath: TypeAlias = Union[str, PathLike[str]]

# Opaque value of a native handle as handed out by the host, `None` or 0 if null.
Handle: TypeAlias = Union[int, None]

# Drive letters visible on the host at one point in time, e.g. `{"C", "D"}`.
VolumeSnapshot: TypeAlias = FrozenSet[str]
