"""
Region scope resolution.

Every region-scoped read goes through ``resolve_region_scope``. The result
is a small filter object that can either be turned into a SQL predicate
(list queries) or asked about a single region (find-by-id checks).
Resolution fails closed: anything ambiguous becomes ``EmptyScope``.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from sqlalchemy import false

from app.models.admin.admin_model import AdminRole


class RegionFilter:
    is_empty = False

    def allows(self, region_id: Optional[int]) -> bool:
        raise NotImplementedError

    def clause(self, column):
        """SQL predicate for ``column``; None means no restriction."""
        raise NotImplementedError


@dataclass(frozen=True)
class Unrestricted(RegionFilter):
    def allows(self, region_id):
        return True

    def clause(self, column):
        return None


@dataclass(frozen=True)
class SingleRegion(RegionFilter):
    region_id: int

    def allows(self, region_id):
        return region_id == self.region_id

    def clause(self, column):
        return column == self.region_id


@dataclass(frozen=True)
class RegionSet(RegionFilter):
    region_ids: FrozenSet[int] = field(default_factory=frozenset)

    def allows(self, region_id):
        return region_id in self.region_ids

    def clause(self, column):
        return column.in_(sorted(self.region_ids))


@dataclass(frozen=True)
class EmptyScope(RegionFilter):
    is_empty = True

    def allows(self, region_id):
        return False

    def clause(self, column):
        return false()


def resolve_region_scope(
    role,
    allowed_regions: Optional[Iterable[int]],
    requested_region: Optional[int] = None,
) -> RegionFilter:
    if role == AdminRole.SUPER_ADMIN:
        if requested_region is not None:
            return SingleRegion(requested_region)
        return Unrestricted()

    if role != AdminRole.ADMIN:
        return EmptyScope()

    allowed = frozenset(allowed_regions or ())
    if not allowed:
        return EmptyScope()

    if requested_region is not None:
        if requested_region not in allowed:
            return EmptyScope()
        return SingleRegion(requested_region)

    return RegionSet(allowed)


def scope_for(current_admin, requested_region: Optional[int] = None) -> RegionFilter:
    """Resolve the scope of an authenticated caller (``CurrentAdmin``)."""
    if current_admin is None:
        return EmptyScope()
    return resolve_region_scope(current_admin.role, current_admin.allowed_regions, requested_region)
