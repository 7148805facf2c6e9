"""
POS repository backed by SQLAlchemy/SQLite.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from domain.exceptions import DuplicatePosNameError, PosNotFoundError
from domain.models import CampusType, Pos, PosType
from repositories.models import PosORM

logger = logging.getLogger(__name__)


def _pos_from_orm(orm: PosORM) -> Pos:
    return Pos(
        id=orm.id,
        name=orm.name,
        description=orm.description,
        type=PosType(orm.type),
        campus=CampusType(orm.campus),
        street=orm.street,
        house_number=orm.house_number,
        postal_code=orm.postal_code,
        city=orm.city,
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


def _update_orm_from_pos(orm: PosORM, pos: Pos) -> None:
    orm.name = pos.name
    orm.description = pos.description
    orm.type = pos.type.value
    orm.campus = pos.campus.value
    orm.street = pos.street
    orm.house_number = pos.house_number
    orm.postal_code = pos.postal_code
    orm.city = pos.city


class PosRepository:
    """
    CRUD operations for points of sale.

    Each call opens its own session from the given factory and commits (or
    rolls back) before returning. Name uniqueness is checked up front and
    backed by the UNIQUE constraint on pos.name for concurrent writers.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        if session_factory is None:
            from db import SessionLocal

            session_factory = SessionLocal
        self.session_factory = session_factory

    def get_all(self) -> List[Pos]:
        with self.session_factory() as session:
            rows = session.query(PosORM).order_by(PosORM.id).all()
            return [_pos_from_orm(r) for r in rows]

    def get_by_id(self, pos_id: int) -> Pos:
        with self.session_factory() as session:
            orm = session.get(PosORM, pos_id)
            if orm is None:
                raise PosNotFoundError(pos_id)
            return _pos_from_orm(orm)

    def upsert(self, pos: Pos) -> Pos:
        with self.session_factory() as session:
            self._check_name_available(session, pos)
            now = datetime.utcnow()
            if pos.id is None:
                orm = PosORM(created_at=now)
            else:
                orm = session.get(PosORM, pos.id)
                if orm is None:
                    raise PosNotFoundError(pos.id)
            _update_orm_from_pos(orm, pos)
            orm.updated_at = now
            session.add(orm)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                logger.warning("Unique constraint violated while saving POS '%s': %s", pos.name, exc)
                raise DuplicatePosNameError(pos.name) from exc
            session.refresh(orm)
            return _pos_from_orm(orm)

    def clear(self) -> None:
        with self.session_factory() as session:
            deleted = session.query(PosORM).delete()
            session.commit()
            logger.debug("Deleted %d POS rows", deleted)

    @staticmethod
    def _check_name_available(session: Session, pos: Pos) -> None:
        query = session.query(PosORM.id).filter(PosORM.name == pos.name)
        if pos.id is not None:
            query = query.filter(PosORM.id != pos.id)
        if query.first() is not None:
            raise DuplicatePosNameError(pos.name)
