"""Tests for the ``base`` module."""

import pytest

from vdisk.base import (
    AccessFlag,
    AttachFlag,
    DiskKind,
    MountDriveDetectionError,
    UnrecognizedFormatError,
)


def test_unrecognized_format_error_is_value_error():
    """Test that ``UnrecognizedFormatError`` can be caught as ``ValueError`` and keeps
    the offending extension.
    """
    with pytest.raises(ValueError) as exc_info:
        raise UnrecognizedFormatError('.iso')
    assert exc_info.value.extension == '.iso'
    assert "'.iso'" in str(exc_info.value)


def test_unrecognized_format_error_without_extension():
    assert 'no file extension' in str(UnrecognizedFormatError(''))


def test_mount_drive_detection_error_snapshots():
    """Test that ``MountDriveDetectionError`` carries both snapshots and is not an
    ``OSError``, so it cannot be mistaken for a failure reported by the host.
    """
    error = MountDriveDetectionError(frozenset('CD'), frozenset('CD'))
    assert error.before == error.after == frozenset({'C', 'D'})
    assert not isinstance(error, OSError)
    assert "['C', 'D']" in str(error)


@pytest.mark.parametrize(
    ['flag', 'value'],
    [
        (AccessFlag.ATTACH_RO, 0x00010000),
        (AccessFlag.ATTACH_RW, 0x00020000),
        (AccessFlag.DETACH, 0x00040000),
        (AccessFlag.GET_INFO, 0x00080000),
        (AttachFlag.READ_ONLY, 0x1),
        (AttachFlag.NO_DRIVE_LETTER, 0x2),
        (AttachFlag.PERMANENT_LIFETIME, 0x4),
    ],
)
def test_flag_values(flag, value):
    """Test that flags match the values defined by the Windows SDK."""
    assert flag.value == value


def test_disk_kind_device_ids():
    assert DiskKind.VHD.value == 2
    assert DiskKind.VHDX.value == 3
