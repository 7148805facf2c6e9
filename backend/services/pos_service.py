"""
POS business logic: listing, upserting and importing points of sale.
"""
from __future__ import annotations

import logging
from typing import List, Protocol

from domain.exceptions import DuplicatePosNameError
from domain.models import OsmNode, Pos
from services.pos_normalizer import convert_osm_node_to_pos

logger = logging.getLogger(__name__)


class PosDataService(Protocol):
    def get_all(self) -> List[Pos]: ...

    def get_by_id(self, pos_id: int) -> Pos: ...

    def upsert(self, pos: Pos) -> Pos: ...

    def clear(self) -> None: ...


class OsmDataService(Protocol):
    def fetch_node(self, node_id: int) -> OsmNode: ...


class PosService:
    """
    Coordinates the POS store and the OSM client.

    Domain errors from either collaborator are re-raised unchanged so the API
    layer can map them to responses.
    """

    def __init__(self, pos_data: PosDataService, osm_data: OsmDataService):
        self.pos_data = pos_data
        self.osm_data = osm_data

    def clear(self) -> None:
        logger.warning("Clearing all POS data")
        self.pos_data.clear()

    def get_all(self) -> List[Pos]:
        logger.debug("Retrieving all POS")
        return self.pos_data.get_all()

    def get_by_id(self, pos_id: int) -> Pos:
        logger.debug("Retrieving POS with ID: %s", pos_id)
        return self.pos_data.get_by_id(pos_id)

    def upsert(self, pos: Pos) -> Pos:
        """
        Create `pos` if it has no id, otherwise update the existing record.

        Raises:
            PosNotFoundError: the id is set but no such POS exists; nothing is written.
            DuplicatePosNameError: another POS already uses the name.
        """
        if pos.id is None:
            logger.info("Creating new POS: %s", pos.name)
        else:
            logger.info("Updating POS with ID: %s", pos.id)
            # must exist before the update
            self.pos_data.get_by_id(pos.id)
        return self._perform_upsert(pos)

    def import_from_osm_node(self, node_id: int) -> Pos:
        """Fetch an OSM node, convert it and persist it as a new POS."""
        logger.info("Importing POS from OpenStreetMap node %s...", node_id)
        node = self.osm_data.fetch_node(node_id)
        saved = self.upsert(convert_osm_node_to_pos(node))
        logger.info("Successfully imported POS '%s' from OSM node %s", saved.name, node_id)
        return saved

    def _perform_upsert(self, pos: Pos) -> Pos:
        try:
            saved = self.pos_data.upsert(pos)
        except DuplicatePosNameError as exc:
            logger.error("Error upserting POS '%s': %s", pos.name, exc)
            raise
        logger.info("Successfully upserted POS with ID: %s", saved.id)
        return saved
