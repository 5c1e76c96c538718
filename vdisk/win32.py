"""Virtual disk service of Windows systems."""

from __future__ import annotations

import sys

assert sys.platform == 'win32'  # skipcq: BAN-B101

import os
from ctypes import WinError, byref, create_unicode_buffer, sizeof
from ctypes.wintypes import HANDLE, ULONG
from typing import TYPE_CHECKING, Tuple

from ._virtdisk import (
    ATTACH_VIRTUAL_DISK_PARAMETERS,
    ATTACH_VIRTUAL_DISK_VERSION_1,
    DRIVE_STRINGS_BUFFER_LENGTH,
    GET_VIRTUAL_DISK_INFO,
    OPEN_VIRTUAL_DISK_FLAG_NONE,
    VENDOR_MICROSOFT,
    VIRTUAL_STORAGE_TYPE,
    AttachVirtualDisk,
    CloseHandle,
    DetachVirtualDisk,
    GetLogicalDriveStringsW,
    GetVirtualDiskInformation,
    OpenVirtualDisk,
)

if TYPE_CHECKING:
    from .base import AccessFlag, AttachFlag, DetachFlag, DiskKind, InfoKind
    from .typing import Handle, StrPath

__all__ = ['Win32Service']


class Win32Service:
    """``VirtDiskService`` backed by ``virtdisk.dll``."""

    def open(
        self, kind: DiskKind, path: StrPath, access: AccessFlag
    ) -> Tuple[int, Handle]:
        storage_type = VIRTUAL_STORAGE_TYPE(
            DeviceId=kind.value, VendorId=VENDOR_MICROSOFT
        )
        handle = HANDLE()
        status = OpenVirtualDisk(
            byref(storage_type),
            os.fspath(path),
            access.value,
            OPEN_VIRTUAL_DISK_FLAG_NONE,
            None,
            byref(handle),
        )
        return status, handle.value

    def attach(self, handle: Handle, flags: AttachFlag) -> int:
        parameters = ATTACH_VIRTUAL_DISK_PARAMETERS(
            Version=ATTACH_VIRTUAL_DISK_VERSION_1, Reserved=0
        )
        return AttachVirtualDisk(handle, None, flags.value, 0, byref(parameters), None)

    def detach(self, handle: Handle, flags: DetachFlag) -> int:
        return DetachVirtualDisk(handle, flags.value, 0)

    def get_info(self, handle: Handle, kind: InfoKind) -> Tuple[int, bytes]:
        info = GET_VIRTUAL_DISK_INFO(Version=kind.value)
        info_size = ULONG(sizeof(info))
        status = GetVirtualDiskInformation(handle, byref(info_size), byref(info), None)
        # noinspection PyTypeChecker
        return status, bytes(info.Payload)

    def close(self, handle: Handle) -> None:
        if not CloseHandle(handle):
            raise WinError()

    def logical_drive_strings(self) -> str:
        buffer = create_unicode_buffer(DRIVE_STRINGS_BUFFER_LENGTH)
        length = GetLogicalDriveStringsW(DRIVE_STRINGS_BUFFER_LENGTH, buffer)
        if length == 0:
            raise WinError()
        if length > DRIVE_STRINGS_BUFFER_LENGTH:
            # the return value is the required buffer size if ours is too small
            raise RuntimeError(
                f'Drive strings do not fit into buffer (need {length} characters)'
            )
        return buffer[:length + 1]
