import logging
from contextlib import contextmanager
from typing import Any, Generic, Iterable, Optional, Sequence, TypeVar

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from wms.core.dates import utcnow
from wms.core.exceptions import ConstraintViolation, StorageFailure, WMSError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


@contextmanager
def committing(db: Session, action: str):
    """Commit the work done inside the block, translating store errors.

    The session is rolled back before the typed error propagates so the
    caller can keep using it.
    """
    try:
        yield
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation(
            "{} rejected by a store constraint: {}".format(action, exc.orig)
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s failed", action, exc_info=True)
        raise StorageFailure("{} failed: {}".format(action, exc)) from exc
    except WMSError:
        db.rollback()
        raise


class EntityStore(Generic[ModelT]):
    """Typed CRUD over one mapped model.

    Soft-deletable models keep their rows on delete and stamp ``deleted_at``;
    those rows are then invisible to every read below, so a deleted id and an
    unknown id look the same to callers.
    """

    def __init__(
        self,
        db: Session,
        model: type[ModelT],
        *,
        order_by: Sequence[Any] = (),
        unique_key: Optional[str] = None,
        search_fields: Iterable[str] = (),
        soft_delete: bool = True,
    ):
        self.db = db
        self.model = model
        self.order_by = tuple(order_by)
        self.unique_key = unique_key
        self.search_fields = tuple(search_fields)
        self.soft_delete = soft_delete

    @property
    def label(self) -> str:
        return self.model.__name__

    def _select(self):
        stmt = select(self.model)
        if self.soft_delete:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        return stmt

    def get(self, entity_id) -> Optional[ModelT]:
        if entity_id is None:
            return None
        return (
            self.db.execute(self._select().where(self.model.id == entity_id).limit(1))
            .scalars()
            .first()
        )

    def get_by(self, key) -> Optional[ModelT]:
        if self.unique_key is None:
            raise TypeError("{} has no unique business key".format(self.label))
        column = getattr(self.model, self.unique_key)
        return (
            self.db.execute(self._select().where(column == key).limit(1))
            .scalars()
            .first()
        )

    def create(self, fields: dict) -> ModelT:
        obj = self.model(**fields)
        with committing(self.db, "Create {}".format(self.label)):
            self.db.add(obj)
            self.db.flush()
        self.db.refresh(obj)
        return obj

    def update(self, entity_id, fields: dict) -> Optional[ModelT]:
        obj = self.get(entity_id)
        if obj is None:
            return None
        with committing(self.db, "Update {} {}".format(self.label, entity_id)):
            for name, value in fields.items():
                setattr(obj, name, value)
            if hasattr(self.model, "updated_at"):
                obj.updated_at = utcnow()
            self.db.flush()
        self.db.refresh(obj)
        return obj

    def delete(self, entity_id, *, deleted_by: Optional[int] = None) -> bool:
        if self.soft_delete:
            obj = self.get(entity_id)
            if obj is None:
                return False
            with committing(self.db, "Delete {} {}".format(self.label, entity_id)):
                obj.deleted_at = utcnow()
                if deleted_by is not None and hasattr(self.model, "deleted_by"):
                    obj.deleted_by = deleted_by
            return True

        with committing(self.db, "Delete {} {}".format(self.label, entity_id)):
            result = self.db.execute(delete(self.model).where(self.model.id == entity_id))
        return result.rowcount > 0

    def list_all(self) -> list[ModelT]:
        stmt = self._select().order_by(*self.order_by)
        return list(self.db.execute(stmt).scalars().all())

    def search(self, query: Optional[str]) -> list[ModelT]:
        text_value = (query or "").strip().lower()
        if not text_value or not self.search_fields:
            return self.list_all()
        clauses = [
            func.lower(getattr(self.model, field)).contains(text_value, autoescape=True)
            for field in self.search_fields
        ]
        stmt = self._select().where(or_(*clauses)).order_by(*self.order_by)
        return list(self.db.execute(stmt).scalars().all())


__all__ = ["EntityStore", "committing"]
