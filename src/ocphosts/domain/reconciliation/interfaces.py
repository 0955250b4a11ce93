"""One-way reconciliation of network interface declarations.

The platform cannot reliably tell static from DHCP addressing for every host
and interfaces are never updated in place. Reported interfaces therefore only
fill an empty local list (typically the first read after an import); a list the
operator already declared is kept as is, even when the backend disagrees.
"""

from __future__ import annotations

import ipaddress
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def reconcile_interfaces[TLocal, TReported](
    current: Sequence[TLocal],
    reported: Sequence[TReported],
    materialize: Callable[[TReported], TLocal],
) -> tuple[TLocal, ...]:
    if current:
        return tuple(current)
    return tuple(materialize(interface) for interface in reported)


def strip_prefix(address: str) -> str:
    """Drop a ``/prefixlen`` suffix, e.g. ``192.0.2.10/24`` -> ``192.0.2.10``."""

    try:
        return str(ipaddress.ip_interface(address.strip()).ip)
    except ValueError:
        return address.split("/", 1)[0].strip()
