"""
Owner-Scoped Repository
=======================

Generic CRUD over SQLAlchemy models that carry an ``owner_id``.

Every lookup intersects the filter with the caller's user id, so a record
owned by someone else is indistinguishable from a missing one (NotFound).
Updates bump ``version``; an optional expected version turns a stale write
into ConflictError instead of a silent overwrite.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from .errors import ConflictError, NotFound

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class OwnedRepository(Generic[ModelT]):
    """CRUD for one model, restricted to one owner"""

    def __init__(self, db: Session, model: Type[ModelT], owner_id: str):
        self.db = db
        self.model = model
        self.owner_id = owner_id

    def query(self):
        return self.db.query(self.model).filter(self.model.owner_id == self.owner_id)

    def list(self, **filters: Any) -> List[ModelT]:
        """Owner's records, newest first. Keyword filters are equality matches."""
        q = self.query()
        for column, value in filters.items():
            q = q.filter(getattr(self.model, column) == value)
        return q.order_by(self.model.created_at.desc(), self.model.id).all()

    def find(self, record_id: Optional[str]) -> Optional[ModelT]:
        if not record_id:
            return None
        return self.query().filter(self.model.id == record_id).first()

    def get(self, record_id: str) -> ModelT:
        record = self.find(record_id)
        if record is None:
            raise NotFound()
        return record

    def create(self, data: Dict[str, Any]) -> ModelT:
        record = self.model(**data, owner_id=self.owner_id)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def update(self, record_id: str, data: Dict[str, Any], expected_version: Optional[int] = None) -> ModelT:
        record = self.get(record_id)
        if expected_version is not None and record.version != expected_version:
            logger.info(
                f"Stale write rejected for {self.model.__tablename__}/{record_id}: "
                f"expected v{expected_version}, current v{record.version}"
            )
            raise ConflictError()

        for field, value in data.items():
            setattr(record, field, value)
        record.version = (record.version or 1) + 1
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete(self, record_id: str) -> None:
        record = self.get(record_id)
        self.db.delete(record)
        self.db.commit()
