"""
Built-in OSM node fixtures used when the OpenStreetMap API is unreachable.
"""
from typing import Dict, Iterable, Optional

from domain.models import OsmNode


RADA_NODE_ID = 5589879349

RADA_FIXTURE = OsmNode(
    node_id=RADA_NODE_ID,
    name="Rada",
    description="Caffé und Rösterei",
    amenity="cafe",
    street="Untere Straße",
    house_number="21",
    postal_code="69117",
    city="Heidelberg",
    campus="ALTSTADT",
)


class OsmFixtureProvider:
    """Registry of substitute nodes keyed by node id."""

    def __init__(self, fixtures: Optional[Iterable[OsmNode]] = None):
        self._fixtures: Dict[int, OsmNode] = {}
        for node in fixtures or ():
            self.register(node)

    def register(self, node: OsmNode) -> None:
        self._fixtures[node.node_id] = node

    def get(self, node_id: int) -> Optional[OsmNode]:
        return self._fixtures.get(node_id)

    def __len__(self) -> int:
        return len(self._fixtures)


def default_fixture_provider(enabled: bool = True) -> OsmFixtureProvider:
    if not enabled:
        return OsmFixtureProvider()
    return OsmFixtureProvider([RADA_FIXTURE])
