"""
OpenStreetMap API client for fetching single nodes.

Only the node endpoint of the OSM API v0.6 is used. Failures are split into
"node does not exist" (any 4xx, or no elements in the payload) and everything
else; for the latter a registered fixture is returned when one exists.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import requests

from domain.exceptions import OsmFetchUnavailableError, OsmNodeNotFoundError
from domain.models import OsmNode
from services.osm_fixtures import OsmFixtureProvider, default_fixture_provider
from settings import settings

logger = logging.getLogger(__name__)


def _first_non_blank(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value is not None and value.strip():
            return value
    return None


def _tag(tags: Mapping[str, Any], key: str) -> Optional[str]:
    value = tags.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"OSM tag {key!r} is not a string: {value!r}")
    return value


def node_from_element(node_id: int, element: Mapping[str, Any]) -> OsmNode:
    """
    Map one element of an OSM API response onto an OsmNode.

    Raises ValueError if the element, its tags or a tag value has the wrong type.
    """
    if not isinstance(element, Mapping):
        raise ValueError(f"OSM element is not an object: {element!r}")
    tags = element.get("tags") or {}
    if not isinstance(tags, Mapping):
        raise ValueError(f"OSM tags are not an object: {tags!r}")
    return OsmNode(
        node_id=node_id,
        name=_tag(tags, "name"),
        description=_first_non_blank(_tag(tags, "description"), _tag(tags, "note")),
        amenity=_tag(tags, "amenity"),
        shop=_tag(tags, "shop"),
        campus=_tag(tags, "campus"),
        street=_first_non_blank(_tag(tags, "addr:street"), _tag(tags, "addr:road")),
        house_number=_tag(tags, "addr:housenumber"),
        postal_code=_tag(tags, "addr:postcode"),
        city=_tag(tags, "addr:city"),
    )


def _first_element(data: Any) -> Optional[Mapping[str, Any]]:
    """Return the first element of a node response, or None if there is none."""
    if not isinstance(data, Mapping):
        raise ValueError(f"OSM response is not an object: {data!r}")
    elements = data.get("elements")
    if not elements:
        return None
    if not isinstance(elements, list):
        raise ValueError(f"OSM elements is not a list: {elements!r}")
    return elements[0]


class OsmDataClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        fixtures: Optional[OsmFixtureProvider] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.OSM_API_BASE_URL).rstrip("/")
        timeout_s = timeout if timeout is not None else settings.OSM_TIMEOUT_SECONDS
        # (connect, read)
        self.timeout = (timeout_s, timeout_s)
        self.headers = {
            "Accept": "application/json",
            "User-Agent": user_agent or settings.OSM_USER_AGENT,
        }
        self.fixtures = fixtures if fixtures is not None else default_fixture_provider(
            settings.OSM_FIXTURES_ENABLED
        )
        self.session = session or requests.Session()

    def fetch_node(self, node_id: int) -> OsmNode:
        url = f"{self.base_url}/node/{node_id}.json"
        try:
            resp = self.session.get(url, headers=self.headers, timeout=self.timeout)
            resp.raise_for_status()
            element = _first_element(resp.json())
            node = node_from_element(node_id, element) if element is not None else None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            if status is not None and 400 <= status < 500:
                logger.warning("OSM node %s not found (status: %s)", node_id, status)
                raise OsmNodeNotFoundError(node_id) from exc
            logger.error("Error fetching OSM node %s: %s", node_id, exc)
            return self._fallback(node_id, exc)
        except Exception as exc:
            logger.error("Unexpected error fetching OSM node %s: %s", node_id, exc)
            return self._fallback(node_id, exc)

        if node is None:
            logger.warning("OSM response for node %s contained no elements", node_id)
            raise OsmNodeNotFoundError(node_id)
        return node

    def _fallback(self, node_id: int, exc: Exception) -> OsmNode:
        fixture = self.fixtures.get(node_id)
        if fixture is not None:
            logger.warning("Falling back to built-in OSM fixture for node %s", node_id)
            return fixture
        raise OsmFetchUnavailableError(node_id) from exc


_default_osm_client: Optional[OsmDataClient] = None


def get_default_osm_client() -> OsmDataClient:
    global _default_osm_client
    if _default_osm_client is None:
        _default_osm_client = OsmDataClient()
    return _default_osm_client
