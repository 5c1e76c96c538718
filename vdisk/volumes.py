"""Enumeration of the drive letters visible on the host."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .service import VirtDiskService
    from .typing import VolumeSnapshot

__all__ = ['parse_drive_strings', 'enumerate_volumes', 'new_volumes']


log = logging.getLogger(__name__)


def parse_drive_strings(drive_strings: str) -> VolumeSnapshot:
    """Parse the output of ``GetLogicalDriveStringsW()`` into a set of drive letters.

    ``drive_strings`` holds one root path per drive (e.g. ``'C:\\'``), each followed
    by a null character.
    """
    letters = set()
    for root in drive_strings.split('\x00'):
        if not root:
            continue
        letter = root[0].upper()
        if not ('A' <= letter <= 'Z' and root[1:2] == ':'):
            raise ValueError(f'Invalid drive root path {root!r}')
        letters.add(letter)
    return frozenset(letters)


def enumerate_volumes(service: VirtDiskService) -> VolumeSnapshot:
    """Return the drive letters currently visible on the host."""
    snapshot = parse_drive_strings(service.logical_drive_strings())
    log.debug(f'Visible drive letters: {sorted(snapshot)}')
    return snapshot


def new_volumes(before: VolumeSnapshot, after: VolumeSnapshot) -> list[str]:
    """Return the drive letters present in ``after`` but not in ``before``, sorted
    alphabetically.
    """
    return sorted(after - before)
