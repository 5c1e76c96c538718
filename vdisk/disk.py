"""Virtual disk access.

A virtual disk is an image file (VHD or VHDX) which the host can attach as a block
device.
"""

from __future__ import annotations

import logging
import os
import struct
from types import TracebackType
from typing import TYPE_CHECKING, Any
from uuid import UUID

from .attach import attach as attach_volume
from .base import (
    AccessFlag,
    AccessMode,
    AttachFlag,
    DetachFlag,
    DiskInfo,
    DiskKind,
    InfoKind,
    InvalidHandleError,
    UnrecognizedFormatError,
)
from .service import default_service
from .status import check_status

if TYPE_CHECKING:
    from .service import VirtDiskService
    from .typing import Handle, StrPath

__all__ = ['VirtualDisk', 'EXTENSIONS', 'resolve_kind', 'access_flags']


log = logging.getLogger(__name__)


EXTENSIONS = {
    '.vhd': DiskKind.VHD,
    '.avhd': DiskKind.VHD,
    '.vhdx': DiskKind.VHDX,
    '.avhdx': DiskKind.VHDX,
}

# VirtualSize, PhysicalSize, BlockSize, SectorSize
SIZE_INFO_FORMAT = struct.Struct('<QQII')
GUID_SIZE = 16


def resolve_kind(path: StrPath, kind: DiskKind = None) -> DiskKind:
    """Return the format of the virtual disk image at ``path``.

    ``kind`` takes precedence if specified. Otherwise, the format is derived from
    the file extension of ``path``, ignoring case.
    """
    if kind is not None:
        return kind
    extension = os.path.splitext(os.fspath(path))[1].lower()
    try:
        return EXTENSIONS[extension]
    except KeyError:
        raise UnrecognizedFormatError(extension) from None


def access_flags(access_mode: AccessMode) -> AccessFlag:
    """Return the access rights to open a virtual disk in ``access_mode`` with.

    Querying information and detaching are always allowed.
    """
    if access_mode is AccessMode.READ_ONLY:
        attach_right = AccessFlag.ATTACH_RO
    else:
        attach_right = AccessFlag.ATTACH_RW
    return attach_right | AccessFlag.GET_INFO | AccessFlag.DETACH


class VirtualDisk:
    """Virtual disk image opened on the host.

    Owns the native handle of the image, which is released exactly once: either by
    `close()`, on leaving a `with` block or, as a last resort, when the object is
    garbage collected. A virtual disk attached without `persistent=True` is
    detached by the host at that moment.

    A `VirtualDisk` must not be used by several threads at the same time.

    Do not use `__init__` directly, use `VirtualDisk.open()` instead.
    """

    def __init__(
        self,
        handle: Handle,
        path: StrPath,
        kind: DiskKind,
        access_mode: AccessMode,
        service: VirtDiskService,
    ):
        self._handle = handle
        self._path = os.fspath(path)
        self._kind = kind
        self._access_mode = access_mode
        self._service = service
        self._volume: str | None = None
        self._closed = False

    @classmethod
    def open(
        cls,
        path: StrPath,
        *,
        readonly: bool = True,
        kind: DiskKind = None,
        service: VirtDiskService = None,
    ) -> VirtualDisk:
        """Open the virtual disk image at `path`.

        :param path: Path of the image file.
        :param readonly: Whether to attach the virtual disk read-only.
        :param kind: Format of the image. Derived from the file extension of `path`
            if not specified.
        :param service: Virtual disk service of the host. Defaults to the service
            of the running platform.
        """
        access_mode = AccessMode.READ_ONLY if readonly else AccessMode.READ_WRITE
        return cls._open(path, access_flags(access_mode), access_mode, kind, service)

    @classmethod
    def _open(
        cls,
        path: StrPath,
        access: AccessFlag,
        access_mode: AccessMode,
        kind: DiskKind | None,
        service: VirtDiskService | None,
    ) -> VirtualDisk:
        kind = resolve_kind(path, kind)
        if service is None:
            service = default_service()

        log.debug(f'Opening {path} as {kind.name} with access rights {access}')
        status, handle = service.open(kind, path, access)
        check_status(status, 'open')

        try:
            disk = cls(handle, path, kind, access_mode, service)
        except BaseException:
            service.close(handle)
            raise
        log.info(f'Opened virtual disk {disk}')
        return disk

    def attach(self, *, persistent: bool = False) -> str:
        """Attach the virtual disk and return the drive letter assigned to it.

        See `vdisk.attach.attach()`.
        """
        self._volume = attach_volume(self, persistent=persistent)
        log.info(f'{self} - Attached as drive {self._volume}:')
        return self._volume

    def attach_raw(self, flags: AttachFlag) -> None:
        """Attach the virtual disk using `flags` without detecting the drive letter."""
        self.check_closed()
        log.debug(f'{self} - Attaching with flags {flags}')
        check_status(self._service.attach(self._handle, flags), 'attach')

    def detach(self) -> None:
        """Detach the virtual disk.

        The handle stays open. Raises `StatusError` with status `NOT_READY` if the
        virtual disk is not attached.
        """
        self.check_closed()
        check_status(self._service.detach(self._handle, DetachFlag.NONE), 'detach')
        self._volume = None
        log.info(f'{self} - Detached')

    @classmethod
    def detach_path(
        cls, path: StrPath, *, kind: DiskKind = None, service: VirtDiskService = None
    ) -> None:
        """Detach the virtual disk image at `path`.

        Opens a new handle with the right to detach only, which is closed again
        afterwards. Use this to detach virtual disks attached persistently by
        another handle or process.
        """
        with cls._open(
            path, AccessFlag.DETACH, AccessMode.READ_ONLY, kind, service
        ) as disk:
            disk.detach()

    def info(self) -> DiskInfo:
        """Query the virtual and physical size as well as block and sector size."""
        payload = self._get_info(InfoKind.SIZE)
        return DiskInfo(*SIZE_INFO_FORMAT.unpack_from(payload))

    def identifier(self) -> UUID:
        """Query the unique identifier of the virtual disk."""
        payload = self._get_info(InfoKind.IDENTIFIER)
        if len(payload) < GUID_SIZE:
            raise ValueError(
                f'Identifier record too short (expected {GUID_SIZE} bytes, got '
                f'{len(payload)} bytes)'
            )
        # Data1 to Data3 of a GUID are little-endian, Data4 is a plain byte string.
        return UUID(bytes_le=bytes(payload[:GUID_SIZE]))

    def _get_info(self, kind: InfoKind) -> bytes:
        self.check_closed()
        status, payload = self._service.get_info(self._handle, kind)
        check_status(status, 'get_info')
        return payload

    def close(self) -> None:
        """Release the native handle.

        This method has no effect if the handle is already released.
        """
        if self._closed:
            return
        handle, self._handle = self._handle, None
        self._closed = True
        self._volume = None
        self._service.close(handle)
        log.info(f'Closed virtual disk {self}')

    def __del__(self) -> None:
        if not getattr(self, '_closed', True):
            self.close()

    def __enter__(self) -> VirtualDisk:
        """Context management protocol."""
        self.check_closed()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType,
    ) -> None:
        """Context management protocol."""
        self.close()

    @property
    def path(self) -> str:
        """Path of the image file."""
        return self._path

    @property
    def kind(self) -> DiskKind:
        """Format of the image file."""
        return self._kind

    @property
    def access_mode(self) -> AccessMode:
        """Mode the virtual disk was opened in."""
        return self._access_mode

    @property
    def readonly(self) -> bool:
        """Whether the virtual disk is attached read-only."""
        return self._access_mode is AccessMode.READ_ONLY

    @property
    def volume(self) -> str | None:
        """Drive letter detected by the last successful `attach()`.

        `None` if the virtual disk was not attached using this object, has been
        detached since or the handle is closed.
        """
        return self._volume

    @property
    def service(self) -> VirtDiskService:
        """Virtual disk service of the host used by this object."""
        return self._service

    @property
    def closed(self) -> bool:
        """Whether the native handle is released."""
        return self._closed

    def check_closed(self) -> None:
        """Raise `InvalidHandleError` if the native handle is released."""
        if self._closed:
            raise InvalidHandleError('Operation on closed virtual disk')

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, VirtualDisk):
            return self._path == other._path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._path)

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return (
            f'{self.__class__.__name__}({self._path}, kind={self._kind.name}, '
            f'access_mode={self._access_mode.name})'
        )
