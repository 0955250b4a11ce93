"""Memory unit conversions between declared (GB) and reported (MB) sizes."""

from __future__ import annotations

from typing import Final

MB_PER_GB: Final[int] = 1024


def mb_to_gb(size_mb: int) -> int:
    """Convert a backend-reported size to whole GB, truncating any remainder."""

    return size_mb // MB_PER_GB


def gb_to_mb(size_gb: int) -> int:
    return size_gb * MB_PER_GB


def is_whole_gb(size_mb: int) -> bool:
    return gb_to_mb(mb_to_gb(size_mb)) == size_mb
