"""Attaching and detaching virtual hard disk images (VHD, VHDX) on Windows."""

from .base import (
    AccessMode,
    DiskInfo,
    DiskKind,
    InvalidHandleError,
    MountDriveDetectionError,
    UnrecognizedFormatError,
)
from .disk import VirtualDisk
from .status import Status, StatusError, UnknownStatusError
from .volumes import enumerate_volumes

__all__ = [
    "VirtualDisk",
    "DiskKind",
    "AccessMode",
    "DiskInfo",
    "Status",
    "StatusError",
    "UnknownStatusError",
    "UnrecognizedFormatError",
    "MountDriveDetectionError",
    "InvalidHandleError",
    "enumerate_volumes",
]
