"""Exception classes, enumerations and data structures used across ``vdisk``."""

from __future__ import annotations

from enum import Enum, Flag
from typing import NamedTuple

from .typing import VolumeSnapshot

__all__ = [
    'UnrecognizedFormatError',
    'MountDriveDetectionError',
    'InvalidHandleError',
    'DiskKind',
    'AccessMode',
    'AccessFlag',
    'AttachFlag',
    'DetachFlag',
    'InfoKind',
    'DiskInfo',
]


class UnrecognizedFormatError(ValueError):
    """Exception raised if the format of a virtual disk image can neither be derived
    from the extension of its path nor was it forced by the caller.
    """

    def __init__(self, extension: str):
        self.extension = extension
        if extension:
            message = f'Unrecognized virtual disk file extension {extension!r}'
        else:
            message = 'Virtual disk path has no file extension'
        super().__init__(message)


class MountDriveDetectionError(RuntimeError):
    """Exception raised if a virtual disk was attached successfully, but no new drive
    letter could be observed afterwards.

    This is not a failure reported by the host. The virtual disk is attached; only
    the drive letter assigned to it (if any) is unknown. This happens if the disk
    holds no file system the host can mount, or if the host had not yet assigned a
    drive letter when the volumes were enumerated.
    """

    def __init__(self, before: VolumeSnapshot, after: VolumeSnapshot):
        self.before = before
        self.after = after
        super().__init__(
            f'Virtual disk was attached, but no new drive letter was detected '
            f'(before: {sorted(before)}, after: {sorted(after)})'
        )


class InvalidHandleError(ValueError):
    """Exception raised if an operation is requested on a closed virtual disk."""


class DiskKind(Enum):
    """Container format of a virtual disk image.

    Values are the device identifiers of ``VIRTUAL_STORAGE_TYPE``.
    """

    VHD = 2
    VHDX = 3


class AccessMode(Enum):
    """Mode a virtual disk is opened and attached in."""

    READ_ONLY = 'ro'
    READ_WRITE = 'rw'


class AccessFlag(Flag):
    """Access rights requested when opening a virtual disk
    (``VIRTUAL_DISK_ACCESS_MASK``).
    """

    NONE = 0
    ATTACH_RO = 0x00010000
    ATTACH_RW = 0x00020000
    DETACH = 0x00040000
    GET_INFO = 0x00080000


class AttachFlag(Flag):
    """Options for attaching a virtual disk (``ATTACH_VIRTUAL_DISK_FLAG``)."""

    NONE = 0
    READ_ONLY = 0x00000001
    NO_DRIVE_LETTER = 0x00000002
    PERMANENT_LIFETIME = 0x00000004


class DetachFlag(Flag):
    """Options for detaching a virtual disk (``DETACH_VIRTUAL_DISK_FLAG``)."""

    NONE = 0


class InfoKind(Enum):
    """Record requested from ``GetVirtualDiskInformation()``
    (``GET_VIRTUAL_DISK_INFO_VERSION``).
    """

    SIZE = 1
    IDENTIFIER = 2


class DiskInfo(NamedTuple):
    """Size information of a virtual disk.

    - ``virtual_size``: Size of the virtual disk as seen by the guest, in bytes.
    - ``physical_size``: Size of the image file on the host, in bytes.
    - ``block_size``: Block size of the image format, in bytes.
    - ``sector_size``: Logical sector size of the virtual disk, in bytes.
    """

    virtual_size: int
    physical_size: int
    block_size: int
    sector_size: int
