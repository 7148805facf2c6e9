"""
Core domain models for the campus coffee backend.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional

# postal codes are stored as signed 32-bit integers
POSTAL_CODE_MIN = -(2 ** 31)
POSTAL_CODE_MAX = 2 ** 31 - 1


class PosType(str, Enum):
    """Kind of point of sale."""
    CAFE = "CAFE"
    CAFETERIA = "CAFETERIA"
    BAKERY = "BAKERY"
    VENDING_MACHINE = "VENDING_MACHINE"


class CampusType(str, Enum):
    """Campus a point of sale belongs to."""
    ALTSTADT = "ALTSTADT"
    BERGHEIM = "BERGHEIM"
    INF = "INF"


@dataclass(frozen=True)
class OsmNode:
    """
    An OpenStreetMap node with the tags relevant for a point of sale.

    This is the raw shape before validation: every field except node_id
    may be missing or blank.
    """
    node_id: int
    name: Optional[str] = None
    description: Optional[str] = None
    amenity: Optional[str] = None
    shop: Optional[str] = None
    campus: Optional[str] = None
    street: Optional[str] = None
    house_number: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None


@dataclass
class Pos:
    """
    A point of sale on campus.

    `id` is None until the store assigns one; timestamps are managed by the store.
    """
    name: str
    description: str
    type: PosType
    campus: CampusType
    street: str
    house_number: str
    postal_code: int
    city: str
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def with_id(self, pos_id: Optional[int]) -> "Pos":
        return replace(self, id=pos_id)
