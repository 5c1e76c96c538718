"""Boundary to the virtual disk service of the host operating system.

``VirtDiskService`` lists the primitives ``vdisk`` needs from the host. Every
primitive returns the raw status code reported by the host; checking and
translating it is left to the caller. ``default_service()`` returns the
implementation for the running platform.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Protocol, Tuple

if TYPE_CHECKING:
    from .base import AccessFlag, AttachFlag, DetachFlag, DiskKind, InfoKind
    from .typing import Handle, StrPath

__all__ = ['VirtDiskService', 'default_service']


class VirtDiskService(Protocol):
    """Primitives of a host virtual disk service."""

    def open(
        self, kind: DiskKind, path: StrPath, access: AccessFlag
    ) -> Tuple[int, Handle]:
        """Open the virtual disk image at ``path``.

        Returns the status code and the native handle, which is only valid if the
        status code indicates success.
        """

    def attach(self, handle: Handle, flags: AttachFlag) -> int:
        """Attach the virtual disk opened as ``handle``. Returns the status code."""

    def detach(self, handle: Handle, flags: DetachFlag) -> int:
        """Detach the virtual disk opened as ``handle``. Returns the status code."""

    def get_info(self, handle: Handle, kind: InfoKind) -> Tuple[int, bytes]:
        """Query the information record of kind ``kind``.

        Returns the status code and the raw bytes of the record.
        """

    def close(self, handle: Handle) -> None:
        """Release the native handle ``handle``."""

    def logical_drive_strings(self) -> str:
        """Return the root paths of all drives as a sequence of null-terminated
        strings, terminated by an additional null character.
        """


def default_service() -> VirtDiskService:
    """Return the virtual disk service of the running host."""
    if sys.platform == 'win32':
        from .win32 import Win32Service

        return Win32Service()
    raise RuntimeError(f'Unsupported platform {sys.platform!r}')
