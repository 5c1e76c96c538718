"""Attaching virtual disks and detecting the drive letter assigned to them.

``AttachVirtualDisk()`` does not report which drive letter the host assigned to the
attached disk. The only observable effect is a new entry in the list of drive
letters, so the list is enumerated right before and right after attaching and the
two snapshots are compared. Other processes mounting or unmounting volumes in
between can make the result wrong; callers must treat the drive letter as a best
guess if such activity is possible.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .base import AccessMode, AttachFlag, MountDriveDetectionError
from .volumes import enumerate_volumes, new_volumes

if TYPE_CHECKING:
    from .disk import VirtualDisk

__all__ = ['attach_flags', 'attach']


log = logging.getLogger(__name__)


def attach_flags(access_mode: AccessMode, persistent: bool) -> AttachFlag:
    """Return the flags to attach a virtual disk opened in ``access_mode`` with.

    :param access_mode: Mode the virtual disk was opened in.
    :param persistent: Whether the virtual disk should stay attached after its
        handle is closed.
    """
    flags = AttachFlag.NONE
    if access_mode is AccessMode.READ_ONLY:
        flags |= AttachFlag.READ_ONLY
    if persistent:
        flags |= AttachFlag.PERMANENT_LIFETIME
    return flags


def attach(disk: VirtualDisk, *, persistent: bool = False) -> str:
    """Attach ``disk`` and return the drive letter the host assigned to it.

    If ``persistent`` is false, the host detaches the disk as soon as its handle is
    closed. Otherwise, it stays attached until it is detached explicitly, even
    after the process has exited.

    Raises ``StatusError`` if the host fails to attach the disk and
    ``MountDriveDetectionError`` if the disk was attached but no new drive letter
    showed up.
    """
    disk.check_closed()
    flags = attach_flags(disk.access_mode, persistent)

    # Nothing else may happen between the two snapshots.
    before = enumerate_volumes(disk.service)
    disk.attach_raw(flags)
    after = enumerate_volumes(disk.service)

    added = new_volumes(before, after)
    if not added:
        raise MountDriveDetectionError(before, after)
    if len(added) > 1:
        log.warning(
            f'{disk} - Several new drive letters appeared while attaching: {added}'
        )
    return added[0]
