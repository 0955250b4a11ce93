"""Change detection and the sizing/tier update constraint.

The backend runs resizes and tier moves as two separate asynchronous jobs and
cannot combine them in one request. A pass that touches both categories is
rejected here, before anything is sent.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from ocphosts.domain.errors import ConstraintRejectedError

if TYPE_CHECKING:
    from ocphosts.domain.model import HostSpec

SIZING_FIELDS: Final[frozenset[str]] = frozenset(
    {"cpu_count", "cores_per_socket", "memory_size_gb"}
)
TIER_FIELDS: Final[frozenset[str]] = frozenset({"tier_id"})


class ChangeCategory(StrEnum):
    SIZING = "sizing"
    TIER = "tier"


@dataclass(slots=True, frozen=True)
class ChangeSet:
    """Changed fields partitioned into the categories an update can apply."""

    sizing: frozenset[str] = frozenset()
    tier: frozenset[str] = frozenset()
    other: frozenset[str] = frozenset()

    @property
    def categories(self) -> tuple[ChangeCategory, ...]:
        found: list[ChangeCategory] = []
        if self.sizing:
            found.append(ChangeCategory.SIZING)
        if self.tier:
            found.append(ChangeCategory.TIER)
        return tuple(found)

    @property
    def is_empty(self) -> bool:
        return not self.categories


def changed_fields(prior: HostSpec, desired: HostSpec) -> frozenset[str]:
    """Names of the fields whose values differ between two specs of one kind.

    Fields the backend reports but never accepts as input are not compared.
    """

    if type(prior) is not type(desired):
        raise TypeError(
            f"Cannot compare {type(prior).__name__} with {type(desired).__name__}"
        )
    return frozenset(
        spec_field.name
        for spec_field in fields(desired)
        if spec_field.name not in desired.REPORTED_FIELDS
        and getattr(prior, spec_field.name) != getattr(desired, spec_field.name)
    )


def compute_change_set(prior: HostSpec, desired: HostSpec) -> ChangeSet:
    changed = changed_fields(prior, desired)
    return ChangeSet(
        sizing=changed & SIZING_FIELDS,
        tier=changed & TIER_FIELDS,
        other=changed - SIZING_FIELDS - TIER_FIELDS,
    )


def guard_change_set(change_set: ChangeSet, *, resource: str) -> ChangeCategory | None:
    """Return the single category to apply, ``None`` for no change.

    Raises ``ConstraintRejectedError`` when sizing and tier both changed.
    """

    categories = change_set.categories
    if len(categories) > 1:
        sizing = "/".join(sorted(change_set.sizing))
        raise ConstraintRejectedError(
            f"{resource}: simultaneous change of sizing ({sizing}) and tier_id in a single "
            "apply is not supported. Please apply sizing changes first, wait for the job to "
            "finish, and then apply the tier change in a separate apply."
        )
    return categories[0] if categories else None


def requires_replacement(prior: HostSpec, desired: HostSpec) -> frozenset[str]:
    """Changed fields that can only be applied by recreating the host."""

    return changed_fields(prior, desired) & frozenset(desired.REPLACEMENT_FIELDS)
