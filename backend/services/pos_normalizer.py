"""
Conversion of raw OpenStreetMap nodes into POS candidates.

Everything here is a pure function of the node: no logging, no storage.
Tag lookups are case-insensitive and whitespace-trimmed; unknown tags fall
through to defaults instead of failing.
"""
import re
from types import MappingProxyType
from typing import Mapping, Optional

from domain.exceptions import OsmNodeMissingFieldsError
from domain.models import POSTAL_CODE_MAX, POSTAL_CODE_MIN, CampusType, OsmNode, Pos, PosType


AMENITY_TO_POS_TYPE: Mapping[str, PosType] = MappingProxyType({
    "cafe": PosType.CAFE,
    "coffee_shop": PosType.CAFE,
    "cafeteria": PosType.CAFETERIA,
    "restaurant": PosType.CAFETERIA,
    "fast_food": PosType.CAFETERIA,
    "vending_machine": PosType.VENDING_MACHINE,
})

SHOP_TO_POS_TYPE: Mapping[str, PosType] = MappingProxyType({
    "bakery": PosType.BAKERY,
    "coffee": PosType.CAFE,
})

DEFAULT_POS_TYPE = PosType.CAFE
DEFAULT_CAMPUS = CampusType.ALTSTADT
INF_STREET_MARKER = "im neuenheimer feld"
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _normalize(value: Optional[str]) -> Optional[str]:
    return None if value is None else value.strip().lower()


def _require_text(value: Optional[str], node: OsmNode, field: str) -> str:
    if value is None or not value.strip():
        raise OsmNodeMissingFieldsError(node.node_id, field)
    return value.strip()


def _parse_postal_code(postal_code: str, node: OsmNode) -> int:
    # int() alone would also accept "69_117" and non-ASCII digits
    text = postal_code.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise OsmNodeMissingFieldsError(node.node_id, "postal_code")
    value = int(text)
    if not POSTAL_CODE_MIN <= value <= POSTAL_CODE_MAX:
        raise OsmNodeMissingFieldsError(node.node_id, "postal_code")
    return value


def resolve_description(node: OsmNode) -> str:
    if node.description and node.description.strip():
        return node.description.strip()
    return f"Imported from OpenStreetMap node {node.node_id}"


def resolve_pos_type(node: OsmNode) -> PosType:
    """Classify by amenity tag first, then shop tag, defaulting to CAFE."""
    amenity = _normalize(node.amenity)
    if amenity in AMENITY_TO_POS_TYPE:
        return AMENITY_TO_POS_TYPE[amenity]

    shop = _normalize(node.shop)
    if shop in SHOP_TO_POS_TYPE:
        return SHOP_TO_POS_TYPE[shop]

    return DEFAULT_POS_TYPE


def resolve_campus(node: OsmNode) -> CampusType:
    """Use an explicit campus tag if it names a campus, else infer from the street."""
    campus_tag = _normalize(node.campus)
    if campus_tag:
        for campus in CampusType:
            if campus.name.lower() == campus_tag:
                return campus

    street = _normalize(node.street)
    if street and INF_STREET_MARKER in street:
        return CampusType.INF

    return DEFAULT_CAMPUS


def convert_osm_node_to_pos(node: OsmNode) -> Pos:
    """
    Build a POS candidate (without id) from an OSM node.

    Raises:
        OsmNodeMissingFieldsError: if name, street, house number, postal code
            or city is missing/blank, or the postal code is not an integer.
    """
    name = _require_text(node.name, node, "name")
    street = _require_text(node.street, node, "street")
    house_number = _require_text(node.house_number, node, "house_number")
    postal_code = _require_text(node.postal_code, node, "postal_code")
    city = _require_text(node.city, node, "city")

    return Pos(
        name=name,
        description=resolve_description(node),
        type=resolve_pos_type(node),
        campus=resolve_campus(node),
        street=street,
        house_number=house_number,
        postal_code=_parse_postal_code(postal_code, node),
        city=city,
    )
