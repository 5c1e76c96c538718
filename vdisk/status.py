"""Translation of host status codes into exceptions.

Every native virtual disk call reports a Win32 status code. ``translate_status()``
turns a non-success code into a ``StatusError`` carrying the matching ``Status``
member and a human-readable message. Codes missing from the table below yield an
``UnknownStatusError`` instead, which still carries the raw code.

The table is a superset of what the virtual disk functions report in practice:
which codes are actually reachable from ``OpenVirtualDisk()`` or
``AttachVirtualDisk()`` is not documented, so no entry should be assumed to occur.
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Callable

__all__ = [
    'Status',
    'StatusError',
    'UnknownStatusError',
    'message',
    'translate_status',
    'check_status',
]


if sys.platform == 'win32':
    from ctypes import FormatError

    def _host_message(code: int) -> str | None:
        """Return the message the host system provides for ``code``, if any."""
        text = FormatError(code).strip()
        return text if text and not text.startswith('<no description') else None

else:
    # noinspection PyUnusedLocal
    def _host_message(code: int) -> str | None:  # skipcq: PYL-W0613
        return None


class Status(IntEnum):
    """Win32 status codes known to ``vdisk``."""

    SUCCESS = 0
    INVALID_FUNCTION = 1
    FILE_NOT_FOUND = 2
    PATH_NOT_FOUND = 3
    TOO_MANY_OPEN_FILES = 4
    ACCESS_DENIED = 5
    INVALID_HANDLE = 6
    ARENA_TRASHED = 7
    NOT_ENOUGH_MEMORY = 8
    INVALID_BLOCK = 9
    BAD_ENVIRONMENT = 10
    BAD_FORMAT = 11
    INVALID_ACCESS = 12
    INVALID_DATA = 13
    OUTOFMEMORY = 14
    INVALID_DRIVE = 15
    CURRENT_DIRECTORY = 16
    NOT_SAME_DEVICE = 17
    NO_MORE_FILES = 18
    WRITE_PROTECT = 19
    BAD_UNIT = 20
    NOT_READY = 21
    BAD_COMMAND = 22
    CRC = 23
    BAD_LENGTH = 24
    SEEK = 25
    NOT_DOS_DISK = 26
    SECTOR_NOT_FOUND = 27
    WRITE_FAULT = 29
    READ_FAULT = 30
    GEN_FAILURE = 31
    SHARING_VIOLATION = 32
    LOCK_VIOLATION = 33
    WRONG_DISK = 34
    SHARING_BUFFER_EXCEEDED = 36
    HANDLE_EOF = 38
    HANDLE_DISK_FULL = 39
    NOT_SUPPORTED = 50
    REM_NOT_LIST = 51
    BAD_NETPATH = 53
    NETWORK_BUSY = 54
    DEV_NOT_EXIST = 55
    UNEXP_NET_ERR = 59
    NETNAME_DELETED = 64
    NETWORK_ACCESS_DENIED = 65
    BAD_DEV_TYPE = 66
    BAD_NET_NAME = 67
    FILE_EXISTS = 80
    CANNOT_MAKE = 82
    OUT_OF_STRUCTURES = 84
    ALREADY_ASSIGNED = 85
    INVALID_PASSWORD = 86
    INVALID_PARAMETER = 87
    NET_WRITE_FAULT = 88
    DISK_CHANGE = 107
    DRIVE_LOCKED = 108
    BROKEN_PIPE = 109
    OPEN_FAILED = 110
    BUFFER_OVERFLOW = 111
    DISK_FULL = 112
    INVALID_TARGET_HANDLE = 114
    INVALID_CATEGORY = 117
    BAD_DRIVER_LEVEL = 119
    CALL_NOT_IMPLEMENTED = 120
    SEM_TIMEOUT = 121
    INSUFFICIENT_BUFFER = 122
    INVALID_NAME = 123
    INVALID_LEVEL = 124
    NO_VOLUME_LABEL = 125
    MOD_NOT_FOUND = 126
    PROC_NOT_FOUND = 127
    DIRECT_ACCESS_HANDLE = 130
    NEGATIVE_SEEK = 131
    SEEK_ON_DEVICE = 132
    BUSY_DRIVE = 142
    DIR_NOT_EMPTY = 145
    PATH_BUSY = 148
    LABEL_TOO_LONG = 154
    BAD_ARGUMENTS = 160
    BAD_PATHNAME = 161
    LOCK_FAILED = 167
    BUSY = 170
    DEVICE_SUPPORT_IN_PROGRESS = 171
    ALREADY_EXISTS = 183
    FILENAME_EXCED_RANGE = 206
    LOCKED = 212
    FILE_CHECKED_OUT = 220
    BAD_FILE_TYPE = 222
    FILE_TOO_LARGE = 223
    VIRUS_INFECTED = 225
    VIRUS_DELETED = 226
    MORE_DATA = 234
    WAIT_TIMEOUT = 258
    NO_MORE_ITEMS = 259
    DIRECTORY = 267
    NOT_OWNER = 288
    PARTIAL_COPY = 299
    OPLOCK_NOT_GRANTED = 300
    DISK_TOO_FRAGMENTED = 302
    DELETE_PENDING = 303
    INVALID_LOCK_RANGE = 307
    NOT_ALLOWED_ON_SYSTEM_FILE = 313
    DISK_RESOURCES_EXHAUSTED = 314
    INVALID_TOKEN = 315
    DEVICE_FEATURE_NOT_SUPPORTED = 316
    MR_MID_NOT_FOUND = 317
    DEVICE_UNREACHABLE = 321
    DEVICE_NO_RESOURCES = 322
    DATA_CHECKSUM_ERROR = 323
    OFFSET_ALIGNMENT_VIOLATION = 327
    OPERATION_IN_PROGRESS = 329
    BAD_DEVICE_PATH = 330
    NOT_REDUNDANT_STORAGE = 333
    COMPRESSED_FILE_NOT_SUPPORTED = 335
    DIRECTORY_NOT_SUPPORTED = 336
    INVALID_ADDRESS = 487
    NOT_FOUND = 1168
    PRIVILEGE_NOT_HELD = 1314
    FILE_CORRUPT = 1392
    DISK_CORRUPT = 1393
    VIRTDISK_PROVIDER_NOT_FOUND = 0xC03A0014
    VIRTDISK_NOT_VIRTUAL_DISK = 0xC03A0015


_MESSAGES: dict[Status, str] = {
    Status.INVALID_FUNCTION: "Incorrect function.",
    Status.FILE_NOT_FOUND: "The system cannot find the file specified.",
    Status.PATH_NOT_FOUND: "The system cannot find the path specified.",
    Status.TOO_MANY_OPEN_FILES: "The system cannot open the file.",
    Status.ACCESS_DENIED: "Access is denied.",
    Status.INVALID_HANDLE: "The handle is invalid.",
    Status.ARENA_TRASHED: "The storage control blocks were destroyed.",
    Status.NOT_ENOUGH_MEMORY: (
        "Not enough memory resources are available to process this command."
    ),
    Status.INVALID_BLOCK: "The storage control block address is invalid.",
    Status.BAD_ENVIRONMENT: "The environment is incorrect.",
    Status.BAD_FORMAT: (
        "An attempt was made to load a program with an incorrect format."
    ),
    Status.INVALID_ACCESS: "The access code is invalid.",
    Status.INVALID_DATA: "The data is invalid.",
    Status.OUTOFMEMORY: (
        "Not enough storage is available to complete this operation."
    ),
    Status.INVALID_DRIVE: "The system cannot find the drive specified.",
    Status.CURRENT_DIRECTORY: "The directory cannot be removed.",
    Status.NOT_SAME_DEVICE: (
        "The system cannot move the file to a different disk drive."
    ),
    Status.NO_MORE_FILES: "There are no more files.",
    Status.WRITE_PROTECT: "The media is write protected.",
    Status.BAD_UNIT: "The system cannot find the device specified.",
    Status.NOT_READY: "The device is not ready.",
    Status.BAD_COMMAND: "The device does not recognize the command.",
    Status.CRC: "Data error (cyclic redundancy check).",
    Status.BAD_LENGTH: (
        "The program issued a command but the command length is incorrect."
    ),
    Status.SEEK: (
        "The drive cannot locate a specific area or track on the disk."
    ),
    Status.NOT_DOS_DISK: "The specified disk or diskette cannot be accessed.",
    Status.SECTOR_NOT_FOUND: "The drive cannot find the sector requested.",
    Status.WRITE_FAULT: "The system cannot write to the specified device.",
    Status.READ_FAULT: "The system cannot read from the specified device.",
    Status.GEN_FAILURE: "A device attached to the system is not functioning.",
    Status.SHARING_VIOLATION: (
        "The process cannot access the file because it is being used by another "
        "process."
    ),
    Status.LOCK_VIOLATION: (
        "The process cannot access the file because another process has locked a "
        "portion of the file."
    ),
    Status.WRONG_DISK: "The wrong diskette is in the drive.",
    Status.SHARING_BUFFER_EXCEEDED: "Too many files opened for sharing.",
    Status.HANDLE_EOF: "Reached the end of the file.",
    Status.HANDLE_DISK_FULL: "The disk is full.",
    Status.NOT_SUPPORTED: "The request is not supported.",
    Status.REM_NOT_LIST: "Windows cannot find the network path.",
    Status.BAD_NETPATH: "The network path was not found.",
    Status.NETWORK_BUSY: "The network is busy.",
    Status.DEV_NOT_EXIST: (
        "The specified network resource or device is no longer available."
    ),
    Status.UNEXP_NET_ERR: "An unexpected network error occurred.",
    Status.NETNAME_DELETED: "The specified network name is no longer available.",
    Status.NETWORK_ACCESS_DENIED: "Network access is denied.",
    Status.BAD_DEV_TYPE: "The network resource type is not correct.",
    Status.BAD_NET_NAME: "The network name cannot be found.",
    Status.FILE_EXISTS: "The file exists.",
    Status.CANNOT_MAKE: "The directory or file cannot be created.",
    Status.OUT_OF_STRUCTURES: "Storage to process this request is not available.",
    Status.ALREADY_ASSIGNED: "The local device name is already in use.",
    Status.INVALID_PASSWORD: "The specified network password is not correct.",
    Status.INVALID_PARAMETER: "The parameter is incorrect.",
    Status.NET_WRITE_FAULT: "A write fault occurred on the network.",
    Status.DISK_CHANGE: (
        "The program stopped because an alternate diskette was not inserted."
    ),
    Status.DRIVE_LOCKED: "The disk is in use or locked by another process.",
    Status.BROKEN_PIPE: "The pipe has been ended.",
    Status.OPEN_FAILED: "The system cannot open the device or file specified.",
    Status.BUFFER_OVERFLOW: "The file name is too long.",
    Status.DISK_FULL: "There is not enough space on the disk.",
    Status.INVALID_TARGET_HANDLE: (
        "The target internal file identifier is incorrect."
    ),
    Status.INVALID_CATEGORY: (
        "The IOCTL call made by the application program is not correct."
    ),
    Status.BAD_DRIVER_LEVEL: "The system does not support the command requested.",
    Status.CALL_NOT_IMPLEMENTED: "This function is not supported on this system.",
    Status.SEM_TIMEOUT: "The semaphore timeout period has expired.",
    Status.INSUFFICIENT_BUFFER: (
        "The data area passed to a system call is too small."
    ),
    Status.INVALID_NAME: (
        "The filename, directory name, or volume label syntax is incorrect."
    ),
    Status.INVALID_LEVEL: "The system call level is not correct.",
    Status.NO_VOLUME_LABEL: "The disk has no volume label.",
    Status.MOD_NOT_FOUND: "The specified module could not be found.",
    Status.PROC_NOT_FOUND: "The specified procedure could not be found.",
    Status.DIRECT_ACCESS_HANDLE: (
        "Attempt to use a file handle to an open disk partition for an operation "
        "other than raw disk I/O."
    ),
    Status.NEGATIVE_SEEK: (
        "An attempt was made to move the file pointer before the beginning of the "
        "file."
    ),
    Status.SEEK_ON_DEVICE: (
        "The file pointer cannot be set on the specified device or file."
    ),
    Status.BUSY_DRIVE: "The system cannot perform a JOIN or SUBST at this time.",
    Status.DIR_NOT_EMPTY: "The directory is not empty.",
    Status.PATH_BUSY: "The path specified cannot be used at this time.",
    Status.LABEL_TOO_LONG: (
        "The volume label you entered exceeds the label character limit of the "
        "target file system."
    ),
    Status.BAD_ARGUMENTS: "One or more arguments are not correct.",
    Status.BAD_PATHNAME: "The specified path is invalid.",
    Status.LOCK_FAILED: "Unable to lock a region of a file.",
    Status.BUSY: "The requested resource is in use.",
    Status.DEVICE_SUPPORT_IN_PROGRESS: (
        "Device's command support detection is in progress."
    ),
    Status.ALREADY_EXISTS: "Cannot create a file when that file already exists.",
    Status.FILENAME_EXCED_RANGE: "The filename or extension is too long.",
    Status.LOCKED: "The segment is locked and cannot be reallocated.",
    Status.FILE_CHECKED_OUT: (
        "This file is checked out or locked for editing by another user."
    ),
    Status.BAD_FILE_TYPE: (
        "The file type being saved or retrieved has been blocked."
    ),
    Status.FILE_TOO_LARGE: (
        "The file size exceeds the limit allowed and cannot be saved."
    ),
    Status.VIRUS_INFECTED: (
        "Operation did not complete successfully because the file contains a "
        "virus or potentially unwanted software."
    ),
    Status.VIRUS_DELETED: (
        "This file contains a virus or potentially unwanted software and cannot "
        "be opened."
    ),
    Status.MORE_DATA: "More data is available.",
    Status.WAIT_TIMEOUT: "The wait operation timed out.",
    Status.NO_MORE_ITEMS: "No more data is available.",
    Status.DIRECTORY: "The directory name is invalid.",
    Status.NOT_OWNER: "Attempt to release mutex not owned by caller.",
    Status.PARTIAL_COPY: (
        "Only part of a ReadProcessMemory or WriteProcessMemory request was "
        "completed."
    ),
    Status.OPLOCK_NOT_GRANTED: "The oplock request is denied.",
    Status.DISK_TOO_FRAGMENTED: (
        "The volume is too fragmented to complete this operation."
    ),
    Status.DELETE_PENDING: (
        "The file cannot be opened because it is in the process of being deleted."
    ),
    Status.INVALID_LOCK_RANGE: (
        "A requested file lock operation cannot be processed due to an invalid "
        "byte range."
    ),
    Status.NOT_ALLOWED_ON_SYSTEM_FILE: (
        "Operation is not allowed on a file system internal file."
    ),
    Status.DISK_RESOURCES_EXHAUSTED: (
        "The physical resources of this disk have been exhausted."
    ),
    Status.INVALID_TOKEN: "The token representing the data is invalid.",
    Status.DEVICE_FEATURE_NOT_SUPPORTED: (
        "The device does not support the command feature."
    ),
    Status.MR_MID_NOT_FOUND: (
        "The system cannot find message text for the message number in the "
        "message file."
    ),
    Status.DEVICE_UNREACHABLE: "The device is unreachable.",
    Status.DEVICE_NO_RESOURCES: (
        "The target device has insufficient resources to complete the operation."
    ),
    Status.DATA_CHECKSUM_ERROR: (
        "A data integrity checksum error occurred. Data in the file stream is "
        "corrupt."
    ),
    Status.OFFSET_ALIGNMENT_VIOLATION: (
        "The command specified a data offset that does not align to the device's "
        "granularity/alignment."
    ),
    Status.OPERATION_IN_PROGRESS: (
        "An operation is currently in progress with the device."
    ),
    Status.BAD_DEVICE_PATH: (
        "An attempt was made to send down the command via an invalid path to the "
        "target device."
    ),
    Status.NOT_REDUNDANT_STORAGE: "The storage device does not provide redundancy.",
    Status.COMPRESSED_FILE_NOT_SUPPORTED: (
        "An operation is not supported on a compressed file."
    ),
    Status.DIRECTORY_NOT_SUPPORTED: "An operation is not supported on a directory.",
    Status.INVALID_ADDRESS: "Attempt to access invalid address.",
    Status.NOT_FOUND: "Element not found.",
    Status.PRIVILEGE_NOT_HELD: "A required privilege is not held by the client.",
    Status.FILE_CORRUPT: "The file or directory is corrupted and unreadable.",
    Status.DISK_CORRUPT: "The disk structure is corrupted and unreadable.",
    Status.VIRTDISK_PROVIDER_NOT_FOUND: (
        "A virtual disk support provider for the specified file was not found."
    ),
    Status.VIRTDISK_NOT_VIRTUAL_DISK: (
        "The specified disk is not a virtual disk."
    ),
}


class StatusError(OSError):
    """Exception raised if the host reports a failure for a virtual disk operation.

    - ``status``: Matching ``Status`` member, ``None`` for unknown codes.
    - ``code``: Raw status code as reported by the host.
    - ``operation``: Name of the failed operation (e.g. ``'attach'``), if known.
    """

    def __init__(self, code: int, message: str, operation: str | None = None):
        try:
            self.status: Status | None = Status(code)
        except ValueError:
            self.status = None
        self.code = code
        self.operation = operation
        super().__init__(message)
        self.winerror = code


class UnknownStatusError(StatusError):
    """``StatusError`` for a status code missing from the message table."""


def message(status: Status) -> str:
    """Return the description of the known status ``status``."""
    if status is Status.SUCCESS:
        return "The operation completed successfully."
    return _MESSAGES[status]


def translate_status(
    code: int,
    operation: str | None = None,
    *,
    describe: Callable[[int], str | None] = _host_message,
) -> StatusError:
    """Return the exception matching the non-success status code ``code``.

    :param code: Status code as reported by the host.
    :param operation: Name of the operation that failed, used in messages of unknown
        codes.
    :param describe: Callable looking up a message for codes missing from the table.
        Defaults to asking the host system, which is only possible on Windows.
    """
    if code == Status.SUCCESS:
        raise ValueError('Status code 0 does not indicate a failure')

    try:
        status = Status(code)
    except ValueError:
        text = describe(code)
        if text is None:
            action = operation or 'access'
            text = f'Failed to {action} virtual disk. Error code: {code}'
        return UnknownStatusError(code, text, operation)

    return StatusError(code, message(status), operation)


def check_status(code: int, operation: str) -> None:
    """Raise the exception matching ``code`` if it does not indicate success."""
    if code != Status.SUCCESS:
        raise translate_status(code, operation)
