from unittest.mock import MagicMock

import pytest
import requests

from domain.exceptions import OsmFetchUnavailableError, OsmNodeNotFoundError
from domain.models import OsmNode
from services.osm_client import OsmDataClient, node_from_element
from services.osm_fixtures import RADA_NODE_ID, OsmFixtureProvider, default_fixture_provider


def _json_response(payload):
    resp = MagicMock()
    resp.raise_for_status.return_value = None
    resp.json.return_value = payload
    return resp


def _status_response(status_code):
    resp = MagicMock()
    resp.status_code = status_code
    resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
    return resp


def _client(session, fixtures=None) -> OsmDataClient:
    return OsmDataClient(
        base_url="https://osm.example/api/0.6/",
        timeout=10.0,
        user_agent="test-agent",
        fixtures=fixtures if fixtures is not None else OsmFixtureProvider(),
        session=session,
    )


def test_fetch_node_maps_tags():
    session = MagicMock()
    session.get.return_value = _json_response({
        "version": "0.6",
        "elements": [
            {
                "type": "node",
                "id": 123,
                "tags": {
                    "name": "Café Frisch",
                    "note": "Self service",
                    "amenity": "cafe",
                    "addr:road": "Hauptstraße",
                    "addr:housenumber": "12",
                    "addr:postcode": "69117",
                    "addr:city": "Heidelberg",
                    "wheelchair": "yes",
                },
            }
        ],
    })

    node = _client(session).fetch_node(123)

    assert node == OsmNode(
        node_id=123,
        name="Café Frisch",
        description="Self service",
        amenity="cafe",
        street="Hauptstraße",
        house_number="12",
        postal_code="69117",
        city="Heidelberg",
    )
    url = session.get.call_args[0][0]
    kwargs = session.get.call_args[1]
    assert url == "https://osm.example/api/0.6/node/123.json"
    assert kwargs["timeout"] == (10.0, 10.0)
    assert kwargs["headers"]["Accept"] == "application/json"
    assert kwargs["headers"]["User-Agent"] == "test-agent"


def test_node_from_element_prefers_primary_tags():
    node = node_from_element(1, {
        "tags": {
            "description": "Main",
            "note": "Ignored",
            "addr:street": "Plöck",
            "addr:road": "Ignored",
        }
    })
    assert node.description == "Main"
    assert node.street == "Plöck"


def test_node_from_element_skips_blank_primary_tag():
    node = node_from_element(1, {"tags": {"description": "  ", "note": "Fallback"}})
    assert node.description == "Fallback"


def test_node_from_element_without_tags():
    assert node_from_element(7, {"id": 7}) == OsmNode(node_id=7)


@pytest.mark.parametrize("payload", [{"elements": []}, {"version": "0.6"}])
def test_empty_elements_is_not_found(payload):
    session = MagicMock()
    session.get.return_value = _json_response(payload)

    with pytest.raises(OsmNodeNotFoundError):
        _client(session).fetch_node(99)


@pytest.mark.parametrize("status", [404, 410])
def test_client_error_is_not_found_even_with_fixture(status):
    session = MagicMock()
    session.get.return_value = _status_response(status)

    with pytest.raises(OsmNodeNotFoundError) as exc_info:
        _client(session, default_fixture_provider()).fetch_node(RADA_NODE_ID)
    assert exc_info.value.node_id == RADA_NODE_ID


def test_server_error_without_fixture_is_unavailable():
    session = MagicMock()
    session.get.return_value = _status_response(503)

    with pytest.raises(OsmFetchUnavailableError) as exc_info:
        _client(session).fetch_node(99)
    assert isinstance(exc_info.value.__cause__, requests.HTTPError)


def test_timeout_without_fixture_is_unavailable():
    session = MagicMock()
    session.get.side_effect = requests.Timeout("read timed out")

    with pytest.raises(OsmFetchUnavailableError):
        _client(session).fetch_node(99)


def test_degraded_service_falls_back_to_fixture():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("unreachable")

    node = _client(session, default_fixture_provider()).fetch_node(RADA_NODE_ID)

    assert node.name == "Rada"
    assert node.amenity == "cafe"
    assert node.postal_code == "69117"
    assert node.campus == "ALTSTADT"


def test_invalid_json_falls_back_to_fixture():
    session = MagicMock()
    resp = MagicMock()
    resp.raise_for_status.return_value = None
    resp.json.side_effect = ValueError("not json")
    session.get.return_value = resp

    node = _client(session, default_fixture_provider()).fetch_node(RADA_NODE_ID)
    assert node.name == "Rada"


@pytest.mark.parametrize(
    "payload",
    [
        {"elements": ["x"]},
        {"elements": {"k": 1}},
        {"elements": [{"tags": ["a"]}]},
        {"elements": [{"tags": {"name": 7}}]},
        ["not", "an", "object"],
    ],
)
def test_malformed_payload_without_fixture_is_unavailable(payload):
    session = MagicMock()
    session.get.return_value = _json_response(payload)

    with pytest.raises(OsmFetchUnavailableError) as exc_info:
        _client(session).fetch_node(99)
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_malformed_payload_falls_back_to_fixture():
    session = MagicMock()
    session.get.return_value = _json_response({"elements": [{"tags": ["a"]}]})

    node = _client(session, default_fixture_provider()).fetch_node(RADA_NODE_ID)
    assert node.name == "Rada"


def test_fixture_provider_registration():
    provider = OsmFixtureProvider()
    assert provider.get(RADA_NODE_ID) is None
    provider.register(OsmNode(node_id=5, name="Kiosk"))
    assert provider.get(5).name == "Kiosk"
    assert len(provider) == 1
    assert len(default_fixture_provider(enabled=False)) == 0
