"""Tests for the ``attach`` module."""

import pytest

from vdisk.attach import attach, attach_flags
from vdisk.base import AccessMode, AttachFlag, MountDriveDetectionError
from vdisk.disk import VirtualDisk
from vdisk.status import Status, StatusError


@pytest.mark.parametrize(
    ['access_mode', 'persistent', 'expected'],
    [
        (AccessMode.READ_ONLY, False, AttachFlag.READ_ONLY),
        (
            AccessMode.READ_ONLY,
            True,
            AttachFlag.READ_ONLY | AttachFlag.PERMANENT_LIFETIME,
        ),
        (AccessMode.READ_WRITE, False, AttachFlag.NONE),
        (AccessMode.READ_WRITE, True, AttachFlag.PERMANENT_LIFETIME),
    ],
)
def test_attach_flags(access_mode, persistent, expected):
    assert attach_flags(access_mode, persistent) == expected


def test_attach_new_drive_letter(service, image):
    """Test that the drive letter appearing between both snapshots is returned."""
    service.drives = {'C', 'D'}
    with VirtualDisk.open(image, service=service) as disk:
        assert attach(disk) == 'E'
        assert service.drives == {'C', 'D', 'E'}


def test_attach_readonly_flags(service, image):
    """Test that attaching a read-only disk never requests write access."""
    with VirtualDisk.open(image, service=service) as disk:
        attach(disk, persistent=True)
    (_, _, flags), = [call for call in service.calls if call[0] == 'attach']
    assert flags == AttachFlag.READ_ONLY | AttachFlag.PERMANENT_LIFETIME


def test_attach_no_new_drive_letter(service, image):
    """Test that an attach without a new drive letter raises
    ``MountDriveDetectionError`` instead of a ``StatusError``.
    """
    service.assign_letters = False
    with VirtualDisk.open(image, service=service) as disk:
        with pytest.raises(MountDriveDetectionError) as exc_info:
            attach(disk)
    assert not isinstance(exc_info.value, StatusError)
    assert exc_info.value.before == exc_info.value.after == frozenset({'C', 'D'})
    assert service.count('attach') == 1


def test_attach_several_new_drive_letters(service, image):
    """Test that the alphabetically first new drive letter wins if others appear
    concurrently.
    """
    service.extra_letters = {'Q'}
    with VirtualDisk.open(image, service=service) as disk:
        assert attach(disk) == 'E'


def test_attach_host_failure(service, image):
    """Test that a failing attach raises the translated status and skips the second
    snapshot.
    """
    service.attach_status = Status.SHARING_VIOLATION
    service.logical_drive_strings_calls = 0
    original = service.logical_drive_strings

    def counting():
        service.logical_drive_strings_calls += 1
        return original()

    service.logical_drive_strings = counting

    with VirtualDisk.open(image, service=service) as disk:
        with pytest.raises(StatusError) as exc_info:
            attach(disk)
    assert exc_info.value.status is Status.SHARING_VIOLATION
    assert exc_info.value.operation == 'attach'
    assert service.logical_drive_strings_calls == 1


@pytest.mark.parametrize(
    ['drives', 'expected'],
    [({'C'}, 'D'), ({'C', 'D'}, 'E'), ({'C', 'D', 'F'}, 'E'), ({'A', 'C'}, 'D')],
)
def test_attach_returns_added_drive_letter(service, image, drives, expected):
    """Test that the drive letter added by the host is the one returned."""
    service.drives = set(drives)
    with VirtualDisk.open(image, service=service) as disk:
        assert disk.attach() == expected
    assert service.drives == set(drives)
