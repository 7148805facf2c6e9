"""
Domain errors raised by the POS services and repositories.

Routes translate these into HTTP responses; nothing below the API layer
swallows them.
"""
from typing import Optional


class PosDomainError(Exception):
    """Base class for all POS domain failures."""


class PosNotFoundError(PosDomainError):
    def __init__(self, pos_id: int):
        self.pos_id = pos_id
        super().__init__(f"POS with ID {pos_id} does not exist")


class DuplicatePosNameError(PosDomainError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"POS with name '{name}' already exists")


class OsmNodeNotFoundError(PosDomainError):
    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"OpenStreetMap node {node_id} not found")


class OsmNodeMissingFieldsError(PosDomainError):
    """A required attribute of an OSM node is missing, blank or malformed."""

    def __init__(self, node_id: int, field: Optional[str] = None):
        self.node_id = node_id
        self.field = field
        message = f"OpenStreetMap node {node_id} is missing required fields"
        if field:
            message += f" ({field})"
        super().__init__(message)


class OsmFetchUnavailableError(PosDomainError):
    """The OSM API failed for a reason other than a missing node and no fixture exists."""

    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"Failed to fetch OpenStreetMap node {node_id}")
