from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class UnresolvedRegion:
    """A region id whose Region row is missing (deleted or never loaded)."""
    id: int


@dataclass(frozen=True)
class ResolvedRegion:
    id: int
    name: str


RegionRef = Union[UnresolvedRegion, ResolvedRegion]


def region_ref(region_id: int, name: Optional[str] = None) -> RegionRef:
    if name is None:
        return UnresolvedRegion(region_id)
    return ResolvedRegion(region_id, name)


def region_ref_id(ref: RegionRef) -> int:
    return ref.id


def region_ref_dict(ref: RegionRef) -> Optional[dict]:
    if isinstance(ref, ResolvedRegion):
        return {"id": ref.id, "name": ref.name}
    return None
