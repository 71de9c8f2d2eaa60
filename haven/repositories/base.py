# haven/repositories/base.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, Sequence, Type, TypeVar, Union

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, ProgrammingError, SQLAlchemyError
from sqlalchemy.orm import Session

from haven.core.exceptions import (
    ConflictError,
    OperationError,
    RelationMissing,
    ResourceNotFoundError,
    TransientStoreError,
    ValidationError,
)
from haven.models.base import BaseModel, new_id, utcnow

ModelType = TypeVar("ModelType", bound=BaseModel)

OrderSpec = Union[str, Any]

_MISSING_RELATION_MARKERS = ("no such table", "does not exist", "undefinedtable")
_UNIQUE_MARKERS = ("unique", "duplicate key")
_NOT_NULL_MARKERS = ("not null", "null value")
_FOREIGN_KEY_MARKERS = ("foreign key",)


def translate_store_error(exc: SQLAlchemyError, collection: str) -> Exception:
    """
    Map a SQLAlchemy/DBAPI failure onto the application error taxonomy.

    Missing relations are reported separately from transport failures so a
    misconfigured backend is distinguishable from a flaky network.
    """
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None)
    text = str(orig if orig is not None else exc).lower()

    if pgcode == "42P01" or any(marker in text for marker in _MISSING_RELATION_MARKERS):
        return RelationMissing(collection)

    if isinstance(exc, IntegrityError):
        if pgcode == "23505" or any(marker in text for marker in _UNIQUE_MARKERS):
            return ConflictError(f"Duplicate entry in {collection}", details={"collection": collection})
        if pgcode == "23503" or any(marker in text for marker in _FOREIGN_KEY_MARKERS):
            return ResourceNotFoundError(
                "Referenced record",
                message=f"A record referenced from {collection} no longer exists",
            )
        if pgcode == "23502" or any(marker in text for marker in _NOT_NULL_MARKERS):
            return ValidationError(f"Required field missing for {collection}")
        return ConflictError(
            f"Write rejected by {collection} constraints",
            details={"collection": collection, "reason": str(orig or exc)},
        )

    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return TransientStoreError(collection=collection)
    if isinstance(exc, OperationalError):
        return TransientStoreError(f"Record store operation failed: {orig or exc}", collection)
    if isinstance(exc, ProgrammingError):
        return OperationError(f"Malformed request against {collection}", {"reason": str(orig or exc)})
    return OperationError(f"Record store error on {collection}", {"reason": str(orig or exc)})


class BaseRepository(Generic[ModelType]):
    """
    Generic record-store access for one collection.

    Exposes the select/insert/update/delete/upsert contract.
    - Does not commit/rollback; caller manages transactions.
    - Store failures are re-raised as application exceptions.
    - An empty result is a normal return, never an error.
    """

    def __init__(self, session: Session, model: Type[ModelType]):
        self.session = session
        self.model = model

    @property
    def collection(self) -> str:
        return self.model.__tablename__

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    @contextmanager
    def _store_call(self) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            raise translate_store_error(exc, self.collection) from exc

    def _apply_filters(self, stmt: Select, filters: Optional[Dict[str, Any]] = None) -> Select:
        if not filters:
            return stmt

        for key, value in filters.items():
            column = getattr(self.model, key, None)
            if column is None:
                raise ValidationError(f"Unknown field '{key}' for {self.collection}", field=key)

            if value is None:
                stmt = stmt.where(column.is_(None))
            elif isinstance(value, (list, tuple, set)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        return stmt

    def _order_clauses(self, order_by: Optional[Iterable[OrderSpec]]) -> List[Any]:
        clauses: List[Any] = []
        for key in order_by or ():
            if isinstance(key, str):
                descending = key.startswith("-")
                column = getattr(self.model, key.lstrip("-"), None)
                if column is None:
                    raise ValidationError(f"Unknown sort field '{key}' for {self.collection}")
                clauses.append(column.desc() if descending else column.asc())
            else:
                clauses.append(key)
        return clauses

    def _prepare_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        prepared = dict(row)
        prepared.setdefault("id", new_id())
        if hasattr(self.model, "created_at"):
            prepared.setdefault("created_at", utcnow())
        return prepared

    # ------------------------------------------------------------------ #
    # Record store contract
    # ------------------------------------------------------------------ #
    def get(self, id_: str) -> Optional[ModelType]:
        with self._store_call():
            return self.session.get(self.model, id_)

    def get_or_raise(self, id_: str, resource_type: Optional[str] = None) -> ModelType:
        obj = self.get(id_)
        if obj is None:
            raise ResourceNotFoundError(resource_type or self.model.__name__, id_)
        return obj

    def select(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Iterable[OrderSpec]] = None,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        stmt = self._apply_filters(select(self.model), filters)
        clauses = self._order_clauses(order_by)
        if clauses:
            stmt = stmt.order_by(*clauses)
        if limit:
            stmt = stmt.limit(limit)
        with self._store_call():
            return list(self.session.execute(stmt).scalars().all())

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = self._apply_filters(select(func.count()).select_from(self.model), filters)
        with self._store_call():
            return self.session.execute(stmt).scalar_one()

    def insert(
        self,
        rows: Union[Dict[str, Any], Sequence[Dict[str, Any]]],
    ) -> Union[ModelType, List[ModelType]]:
        single = isinstance(rows, dict)
        payload = [rows] if single else list(rows)
        instances = [self.model(**self._prepare_row(row)) for row in payload]
        with self._store_call():
            self.session.add_all(instances)
            self.session.flush()
        return instances[0] if single else instances

    def update(self, patch: Dict[str, Any], match_id: str) -> ModelType:
        db_obj = self.get_or_raise(match_id)
        for field, value in patch.items():
            if field == "id" or not hasattr(db_obj, field):
                continue
            setattr(db_obj, field, value)
        with self._store_call():
            self.session.flush()
        return db_obj

    def delete(self, match_id: str) -> None:
        db_obj = self.get_or_raise(match_id)
        with self._store_call():
            self.session.delete(db_obj)
            self.session.flush()

    def upsert(
        self,
        rows: Sequence[Dict[str, Any]],
        conflict_keys: Sequence[str],
    ) -> List[ModelType]:
        """
        Insert rows, overwriting any existing row that matches on
        ``conflict_keys``. Returns the stored rows in input order.
        """
        if not rows:
            return []

        payload = [self._prepare_row(row) for row in rows]
        dialect = self.session.get_bind().dialect.name

        with self._store_call():
            if dialect in ("postgresql", "sqlite"):
                insert_fn = pg_insert if dialect == "postgresql" else sqlite_insert
                stmt = insert_fn(self.model).values(payload)
                updatable = [
                    key for key in payload[0]
                    if key not in conflict_keys and key not in ("id", "created_at")
                ]
                stmt = stmt.on_conflict_do_update(
                    index_elements=list(conflict_keys),
                    set_={key: stmt.excluded[key] for key in updatable},
                )
                self.session.execute(stmt)
            else:
                self._upsert_by_lookup(payload, conflict_keys)
            self.session.flush()

            match = or_(*[
                and_(*[getattr(self.model, key) == row[key] for key in conflict_keys])
                for row in payload
            ])
            stored = (
                self.session.execute(
                    select(self.model).where(match).execution_options(populate_existing=True)
                )
                .scalars()
                .all()
            )

        by_key = {tuple(getattr(obj, key) for key in conflict_keys): obj for obj in stored}
        return [by_key[tuple(row[key] for key in conflict_keys)] for row in payload]

    def _upsert_by_lookup(self, payload: List[Dict[str, Any]], conflict_keys: Sequence[str]) -> None:
        for row in payload:
            stmt = self._apply_filters(select(self.model), {key: row[key] for key in conflict_keys})
            existing = self.session.execute(stmt).scalar_one_or_none()
            if existing is None:
                self.session.add(self.model(**row))
                continue
            for field, value in row.items():
                if field not in ("id", "created_at") and field not in conflict_keys:
                    setattr(existing, field, value)
