"""
POS API routes.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field, field_validator

from domain.exceptions import (
    DuplicatePosNameError,
    OsmFetchUnavailableError,
    OsmNodeMissingFieldsError,
    OsmNodeNotFoundError,
    PosNotFoundError,
)
from domain.models import POSTAL_CODE_MAX, POSTAL_CODE_MIN, CampusType, Pos, PosType
from repositories import PosRepository
from services.osm_client import get_default_osm_client
from services.pos_service import PosService

router = APIRouter()
logger = logging.getLogger(__name__)

_default_pos_service: Optional[PosService] = None


def get_pos_service() -> PosService:
    """Dependency providing the service wired to the default store and OSM client."""
    global _default_pos_service
    if _default_pos_service is None:
        _default_pos_service = PosService(PosRepository(), get_default_osm_client())
    return _default_pos_service


class PosDto(BaseModel):
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    name: str
    description: str = ""
    type: PosType
    campus: CampusType
    street: str
    house_number: str
    postal_code: int = Field(ge=POSTAL_CODE_MIN, le=POSTAL_CODE_MAX)
    city: str

    @field_validator("name", "street", "house_number", "city")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    def to_domain(self) -> Pos:
        return Pos(
            id=self.id,
            name=self.name,
            description=self.description.strip(),
            type=self.type,
            campus=self.campus,
            street=self.street,
            house_number=self.house_number,
            postal_code=self.postal_code,
            city=self.city,
        )


def pos_to_response(pos: Pos) -> PosDto:
    """Convert domain Pos to API response."""
    return PosDto(
        id=pos.id,
        created_at=pos.created_at.isoformat() if pos.created_at else None,
        updated_at=pos.updated_at.isoformat() if pos.updated_at else None,
        name=pos.name,
        description=pos.description,
        type=pos.type,
        campus=pos.campus,
        street=pos.street,
        house_number=pos.house_number,
        postal_code=pos.postal_code,
        city=pos.city,
    )


def _upsert(service: PosService, pos: Pos) -> PosDto:
    try:
        return pos_to_response(service.upsert(pos))
    except PosNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicatePosNameError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("", response_model=List[PosDto])
def list_pos(service: PosService = Depends(get_pos_service)):
    """List all points of sale."""
    return [pos_to_response(p) for p in service.get_all()]


@router.get("/{pos_id}", response_model=PosDto)
def get_pos(pos_id: int, service: PosService = Depends(get_pos_service)):
    try:
        return pos_to_response(service.get_by_id(pos_id))
    except PosNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=PosDto, status_code=201)
def create_pos(data: PosDto, service: PosService = Depends(get_pos_service)):
    """Create a new point of sale; the id is assigned by the store."""
    if data.id is not None:
        raise HTTPException(status_code=400, detail="POS ID must not be set on create")
    return _upsert(service, data.to_domain())


@router.put("/{pos_id}", response_model=PosDto)
def update_pos(pos_id: int, data: PosDto, service: PosService = Depends(get_pos_service)):
    if data.id is not None and data.id != pos_id:
        raise HTTPException(
            status_code=400,
            detail=f"POS ID in path ({pos_id}) does not match ID in body ({data.id})",
        )
    return _upsert(service, data.to_domain().with_id(pos_id))


@router.delete("", status_code=204)
def clear_pos(service: PosService = Depends(get_pos_service)):
    """Delete all points of sale."""
    service.clear()
    return Response(status_code=204)


@router.post("/import/osm/{node_id}", response_model=PosDto, status_code=201)
def import_from_osm(node_id: int, service: PosService = Depends(get_pos_service)):
    """Import a point of sale from an OpenStreetMap node."""
    try:
        return pos_to_response(service.import_from_osm_node(node_id))
    except OsmNodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OsmNodeMissingFieldsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicatePosNameError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OsmFetchUnavailableError as e:
        logger.error("OSM import of node %s failed: %s", node_id, e)
        raise HTTPException(status_code=503, detail=str(e))
