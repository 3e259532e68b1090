"""
Table-scoped record store used by the webhook dispatcher.

Every operation returns a StoreResult instead of raising for expected
conditions. An update that matches no row is a successful no-op with
rowcount 0. There is no transaction spanning calls: each call commits its
own single-table operation.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import copy
import logging
import threading
import uuid
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from app.models import User, Store, Product, Order, Subscription

logger = logging.getLogger(__name__)

TABLE_MODELS = {
    "users": User,
    "stores": Store,
    "products": Product,
    "orders": Order,
    "subscriptions": Subscription,
}

MEMORY_URL = "memory://"


@dataclass
class StoreResult:
    ok: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    rowcount: int = 0

    @classmethod
    def failure(cls, error: str) -> "StoreResult":
        return cls(ok=False, error=error)


class RecordStore(ABC):
    @abstractmethod
    def insert(self, table: str, row: Dict[str, Any]) -> StoreResult: ...

    @abstractmethod
    def update(self, table: str, filter: Dict[str, Any], patch: Dict[str, Any]) -> StoreResult: ...

    @abstractmethod
    def select_one(self, table: str, filter: Dict[str, Any]) -> StoreResult: ...


def _row_to_dict(obj) -> Dict[str, Any]:
    return {c.name: getattr(obj, c.name) for c in obj.__table__.columns}


class SqlRecordStore(RecordStore):
    """SQLAlchemy-backed store. One session per call."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def _model(self, table: str):
        return TABLE_MODELS.get(table)

    def insert(self, table, row):
        model = self._model(table)
        if model is None:
            return StoreResult.failure(f"Unknown table: {table}")
        db = self.session_factory()
        try:
            obj = model(**row)
            db.add(obj)
            db.commit()
            return StoreResult(ok=True, data=_row_to_dict(obj), rowcount=1)
        except (SQLAlchemyError, TypeError) as e:
            db.rollback()
            logger.error(f"Insert into {table} failed: {e}")
            return StoreResult.failure(str(e))
        finally:
            db.close()

    def update(self, table, filter, patch):
        model = self._model(table)
        if model is None:
            return StoreResult.failure(f"Unknown table: {table}")
        db = self.session_factory()
        try:
            rowcount = db.query(model).filter_by(**filter).update(
                patch, synchronize_session=False
            )
            db.commit()
            return StoreResult(ok=True, rowcount=rowcount)
        except (SQLAlchemyError, AttributeError) as e:
            db.rollback()
            logger.error(f"Update of {table} failed: {e}")
            return StoreResult.failure(str(e))
        finally:
            db.close()

    def select_one(self, table, filter):
        model = self._model(table)
        if model is None:
            return StoreResult.failure(f"Unknown table: {table}")
        db = self.session_factory()
        try:
            obj = db.query(model).filter_by(**filter).first()
            if obj is None:
                return StoreResult(ok=True, data=None, rowcount=0)
            return StoreResult(ok=True, data=_row_to_dict(obj), rowcount=1)
        except (SQLAlchemyError, AttributeError) as e:
            logger.error(f"Select from {table} failed: {e}")
            return StoreResult.failure(str(e))
        finally:
            db.close()

    def rows(self, table: str) -> List[Dict[str, Any]]:
        """All rows of table, oldest first."""
        model = self._model(table)
        if model is None:
            return []
        db = self.session_factory()
        try:
            return [_row_to_dict(obj) for obj in db.query(model).order_by(model.created_at).all()]
        finally:
            db.close()


class InMemoryRecordStore(RecordStore):
    """Dict-of-lists store for tests and local runs without a database."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLE_MODELS}
        self._lock = threading.Lock()

    @staticmethod
    def _matches(row: Dict[str, Any], filter: Dict[str, Any]) -> bool:
        return all(row.get(k) == v for k, v in filter.items())

    def insert(self, table, row):
        if table not in self.tables:
            return StoreResult.failure(f"Unknown table: {table}")
        record = dict(row)
        record.setdefault("id", str(uuid.uuid4()))
        record.setdefault("created_at", datetime.utcnow())
        with self._lock:
            self.tables[table].append(record)
        return StoreResult(ok=True, data=copy.deepcopy(record), rowcount=1)

    def update(self, table, filter, patch):
        if table not in self.tables:
            return StoreResult.failure(f"Unknown table: {table}")
        count = 0
        with self._lock:
            for record in self.tables[table]:
                if self._matches(record, filter):
                    record.update(patch)
                    count += 1
        return StoreResult(ok=True, rowcount=count)

    def select_one(self, table, filter):
        if table not in self.tables:
            return StoreResult.failure(f"Unknown table: {table}")
        with self._lock:
            for record in self.tables[table]:
                if self._matches(record, filter):
                    return StoreResult(ok=True, data=copy.deepcopy(record), rowcount=1)
        return StoreResult(ok=True, data=None, rowcount=0)

    def rows(self, table: str) -> List[Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self.tables.get(table, []))


def build_record_store(settings) -> Optional[RecordStore]:
    """Pick the store implementation from DATABASE_URL. None means unconfigured."""
    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL not configured; webhook fulfillment is disabled")
        return None
    if settings.DATABASE_URL == MEMORY_URL:
        logger.info("Using in-memory record store")
        return InMemoryRecordStore()

    from app.db.session import make_engine, make_session_factory, create_schema

    engine = make_engine(settings.DATABASE_URL, settings.DATABASE_KEY)
    if engine.dialect.name == "sqlite":
        create_schema(engine)
    logger.info(f"Using SQL record store ({engine.dialect.name})")
    return SqlRecordStore(make_session_factory(engine))
