"""Wrapper module for types, functions and constants exported by ``virtdisk.dll`` and
``kernel32.dll``.
"""

import sys

assert sys.platform == 'win32'  # skipcq: BAN-B101

from ctypes import POINTER, Structure, Union, c_ubyte, c_uint, c_ulonglong, c_ushort
from ctypes import windll  # type: ignore[attr-defined]
from ctypes.wintypes import BOOL, DWORD, HANDLE, LPCWSTR, LPVOID, LPWSTR, ULONG

__all__ = [
    # Types
    'GUID',
    'VIRTUAL_STORAGE_TYPE',
    'ATTACH_VIRTUAL_DISK_PARAMETERS',
    'GET_VIRTUAL_DISK_INFO',
    # Functions
    'OpenVirtualDisk',
    'AttachVirtualDisk',
    'DetachVirtualDisk',
    'GetVirtualDiskInformation',
    'CloseHandle',
    'GetLogicalDriveStringsW',
    # Constants
    'VENDOR_MICROSOFT',
    'OPEN_VIRTUAL_DISK_FLAG_NONE',
    'ATTACH_VIRTUAL_DISK_VERSION_1',
    'DRIVE_STRINGS_BUFFER_LENGTH',
]


# Types

# noinspection PyPep8Naming
class GUID(Structure):
    """``GUID`` structure. ``Data1`` to ``Data3`` are stored in native (little-endian)
    byte order, ``Data4`` as plain bytes.
    """

    _fields_ = [
        ('Data1', DWORD),
        ('Data2', c_ushort),
        ('Data3', c_ushort),
        ('Data4', c_ubyte * 8),
    ]


# noinspection PyPep8Naming
class VIRTUAL_STORAGE_TYPE(Structure):
    """Device and vendor of a virtual storage device."""

    _fields_ = [
        ('DeviceId', ULONG),
        ('VendorId', GUID),
    ]


# noinspection PyPep8Naming
class ATTACH_VIRTUAL_DISK_PARAMETERS(Structure):
    """Input structure for ``AttachVirtualDisk()``, version 1."""

    _fields_ = [
        ('Version', c_uint),  # enum ATTACH_VIRTUAL_DISK_VERSION
        ('Reserved', ULONG),
    ]


# noinspection PyPep8Naming
class _GET_VIRTUAL_DISK_INFO_SIZE(Structure):
    _fields_ = [
        ('VirtualSize', c_ulonglong),
        ('PhysicalSize', c_ulonglong),
        ('BlockSize', ULONG),
        ('SectorSize', ULONG),
    ]


# noinspection PyPep8Naming
class _GET_VIRTUAL_DISK_INFO_UNION(Union):
    # Only the members requested by ``vdisk``; ``Size`` is the largest one anyway.
    _fields_ = [
        ('Size', _GET_VIRTUAL_DISK_INFO_SIZE),
        ('Identifier', GUID),
    ]


# noinspection PyPep8Naming
class GET_VIRTUAL_DISK_INFO(Structure):
    """Input and output structure for ``GetVirtualDiskInformation()``."""

    _fields_ = [
        ('Version', c_uint),  # enum GET_VIRTUAL_DISK_INFO_VERSION
        ('Payload', _GET_VIRTUAL_DISK_INFO_UNION),
    ]


# Constants

# {EC984AEC-A0F9-47E9-901F-71415A66345B}
VENDOR_MICROSOFT = GUID(
    0xEC984AEC,
    0xA0F9,
    0x47E9,
    (c_ubyte * 8)(0x90, 0x1F, 0x71, 0x41, 0x5A, 0x66, 0x34, 0x5B),
)

OPEN_VIRTUAL_DISK_FLAG_NONE = 0
ATTACH_VIRTUAL_DISK_VERSION_1 = 1

# At most 26 drive letters, each root path "X:\" followed by a null character,
# plus the null character terminating the whole sequence.
DRIVE_STRINGS_BUFFER_LENGTH = 26 * 4 + 1


# Functions

virtdisk = windll.virtdisk
kernel32 = windll.kernel32

OpenVirtualDisk = virtdisk.OpenVirtualDisk
OpenVirtualDisk.argtypes = [
    POINTER(VIRTUAL_STORAGE_TYPE),
    LPCWSTR,
    c_uint,  # enum VIRTUAL_DISK_ACCESS_MASK
    c_uint,  # enum OPEN_VIRTUAL_DISK_FLAG
    LPVOID,  # POPEN_VIRTUAL_DISK_PARAMETERS
    POINTER(HANDLE),
]
OpenVirtualDisk.restype = DWORD

AttachVirtualDisk = virtdisk.AttachVirtualDisk
# Second parameter is a PSECURITY_DESCRIPTOR, last one an LPOVERLAPPED; we pass
# `None` for both.
AttachVirtualDisk.argtypes = [
    HANDLE,
    LPVOID,
    c_uint,  # enum ATTACH_VIRTUAL_DISK_FLAG
    ULONG,
    POINTER(ATTACH_VIRTUAL_DISK_PARAMETERS),
    LPVOID,
]
AttachVirtualDisk.restype = DWORD

DetachVirtualDisk = virtdisk.DetachVirtualDisk
DetachVirtualDisk.argtypes = [HANDLE, c_uint, ULONG]  # enum DETACH_VIRTUAL_DISK_FLAG
DetachVirtualDisk.restype = DWORD

GetVirtualDiskInformation = virtdisk.GetVirtualDiskInformation
GetVirtualDiskInformation.argtypes = [
    HANDLE,
    POINTER(ULONG),
    POINTER(GET_VIRTUAL_DISK_INFO),
    POINTER(ULONG),
]
GetVirtualDiskInformation.restype = DWORD

CloseHandle = kernel32.CloseHandle
CloseHandle.argtypes = [HANDLE]
CloseHandle.restype = BOOL

GetLogicalDriveStringsW = kernel32.GetLogicalDriveStringsW
GetLogicalDriveStringsW.argtypes = [DWORD, LPWSTR]
GetLogicalDriveStringsW.restype = DWORD
