"""Fixtures used across the test suite."""

from __future__ import annotations

import os
import string
import struct
import subprocess
import sys
from pathlib import Path
from shutil import rmtree
from tempfile import mkdtemp
from typing import NamedTuple
from uuid import UUID

import pytest

from vdisk.base import AccessFlag, AttachFlag, InfoKind
from vdisk.status import Status


@pytest.fixture
def tempdir():
    """Fixture providing a new temporary directory for testing purposes.

    Returns a ``pathlib.Path`` object representing the path of the temporary directory.
    """
    path = Path(mkdtemp())
    yield path
    rmtree(path)  # clean up


# Fake virtual disk service


class FakeImage(NamedTuple):
    virtual_size: int
    physical_size: int
    block_size: int
    sector_size: int
    identifier: UUID


class FakeMount(NamedTuple):
    handle: int
    letter: str | None
    persistent: bool


class FakeService:
    """In-memory ``VirtDiskService`` simulating the host.

    Records every native call in ``calls`` and keeps the set of visible drive
    letters in ``drives``. Attaching an image assigns the lowest free drive letter
    from C onwards unless ``assign_letters`` is false. Closing a handle detaches
    images it attached without ``PERMANENT_LIFETIME``.
    """

    def __init__(self):
        self.calls: list[tuple] = []
        self.drives = {'C', 'D'}
        self.images: dict[str, FakeImage] = {}
        self.handles: dict[int, tuple[str, AccessFlag]] = {}
        self.mounts: dict[str, FakeMount] = {}
        self.assign_letters = True
        self.extra_letters: set[str] = set()  # appear on attach, mimicking others
        self.open_status = Status.SUCCESS
        self.attach_status = Status.SUCCESS
        self._next_handle = 0x100

    def add_image(
        self,
        path,
        *,
        virtual_size=3 * 1024 * 1024,
        physical_size=3 * 1024 * 1024 + 512,
        block_size=0,
        sector_size=512,
        identifier=UUID('12345678-9abc-def0-1122-334455667788'),
    ) -> str:
        path = os.fspath(path)
        self.images[path] = FakeImage(
            virtual_size, physical_size, block_size, sector_size, identifier
        )
        return path

    def open(self, kind, path, access):
        path = os.fspath(path)
        self.calls.append(('open', kind, path, access))
        if self.open_status != Status.SUCCESS:
            return int(self.open_status), None
        if path not in self.images:
            return int(Status.FILE_NOT_FOUND), None
        handle = self._next_handle
        self._next_handle += 4
        self.handles[handle] = (path, access)
        return int(Status.SUCCESS), handle

    def attach(self, handle, flags):
        self.calls.append(('attach', handle, flags))
        if handle not in self.handles:
            return int(Status.INVALID_HANDLE)
        path, access = self.handles[handle]
        if self.attach_status != Status.SUCCESS:
            return int(self.attach_status)

        if AttachFlag.READ_ONLY in flags:
            required = AccessFlag.ATTACH_RO | AccessFlag.ATTACH_RW
        else:
            required = AccessFlag.ATTACH_RW
        if not access & required:
            return int(Status.ACCESS_DENIED)
        if path in self.mounts:
            return int(Status.SHARING_VIOLATION)

        letter = None
        if self.assign_letters:
            # A and B are reserved for floppy drives
            letter = min(set(string.ascii_uppercase[2:]) - self.drives)
            self.drives.add(letter)
        self.drives |= self.extra_letters
        persistent = AttachFlag.PERMANENT_LIFETIME in flags
        self.mounts[path] = FakeMount(handle, letter, persistent)
        return int(Status.SUCCESS)

    def detach(self, handle, flags):
        self.calls.append(('detach', handle, flags))
        if handle not in self.handles:
            return int(Status.INVALID_HANDLE)
        path, access = self.handles[handle]
        if AccessFlag.DETACH not in access:
            return int(Status.ACCESS_DENIED)
        if path not in self.mounts:
            return int(Status.NOT_READY)
        self._unmount(path)
        return int(Status.SUCCESS)

    def get_info(self, handle, kind):
        self.calls.append(('get_info', handle, kind))
        if handle not in self.handles:
            return int(Status.INVALID_HANDLE), b''
        path, access = self.handles[handle]
        if AccessFlag.GET_INFO not in access:
            return int(Status.ACCESS_DENIED), b''

        image = self.images[path]
        if kind is InfoKind.SIZE:
            payload = struct.pack(
                '<QQII',
                image.virtual_size,
                image.physical_size,
                image.block_size,
                image.sector_size,
            )
        else:
            payload = image.identifier.bytes_le + bytes(8)
        return int(Status.SUCCESS), payload

    def close(self, handle):
        self.calls.append(('close', handle))
        self.handles.pop(handle)  # raises if closed twice
        for path, mount in list(self.mounts.items()):
            if mount.handle == handle and not mount.persistent:
                self._unmount(path)

    def logical_drive_strings(self):
        return ''.join(f'{letter}:\\\x00' for letter in sorted(self.drives)) + '\x00'

    def _unmount(self, path):
        mount = self.mounts.pop(path)
        self.drives.discard(mount.letter)

    def count(self, name: str) -> int:
        """Return how often the native primitive ``name`` was called."""
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def service():
    """Fixture providing a new ``FakeService`` without any images."""
    return FakeService()


@pytest.fixture
def image(service, tempdir):
    """Fixture providing the path of a VHDX image known to ``service``."""
    return service.add_image(tempdir / 'disk.vhdx')


# Platform-specific implementation

if sys.platform == 'win32':

    @pytest.fixture
    def vhd_file(tempdir):
        """Fixture providing a 3 MiB fixed VHD image holding an NTFS volume.

        Requires the Hyper-V PowerShell module and administrator rights.
        """
        path = (tempdir / 'test.vhd').absolute()
        create_command = (
            f'New-VHD -Path "{path}" -SizeBytes 3MB -Fixed | Mount-VHD -Passthru '
            f'| Initialize-Disk -PartitionStyle MBR -Passthru '
            f'| New-Partition -AssignDriveLetter -UseMaximumSize '
            f'| Format-Volume -FileSystem NTFS; '
            f'Dismount-VHD -Path "{path}"'
        )
        subprocess.run(
            ['powershell.exe', '-Command', create_command],
            capture_output=True,
            check=True,
            encoding='utf-8',
        )
        yield path

        # Clean up
        dismount_command = f'Dismount-VHD -Path "{path}" -ErrorAction Ignore'
        subprocess.run(['powershell.exe', '-Command', dismount_command])
