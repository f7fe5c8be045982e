"""Database connection, schema upgrades and keyed collections."""

import functools
import logging
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from aapda_mitra.config import DATABASE_URL, DATA_DIR
from aapda_mitra.errors import StorageError
from .schema import (
    Base,
    SchemaVersion,
    PersonalContact,
    UserProfile,
    Alert,
    Shelter,
    SurvivalGuideCache,
    COLLECTIONS,
    SCHEMA_GENERATIONS,
    LATEST_SCHEMA_VERSION,
)

logger = logging.getLogger(__name__)


def _storage_call(method):
    """Convert SQLAlchemy failures raised by a collection call into StorageError."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            raise StorageError(f"{method.__name__} on '{self.name}' failed: {e}") from e

    return wrapper


def _normalize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class Collection:
    """
    Keyed records of one table, exposed as plain dicts.

    Auto-keyed collections assign integer keys on insert; fixed-key
    collections (profile, guide cache) require the caller to supply the key.
    """

    def __init__(self, database: "Database", model: type):
        self._db = database
        self.model = model
        self.name: str = model.__tablename__
        key_column = model.__table__.primary_key.columns.values()[0]
        self.key_name: str = key_column.key
        self.auto_keyed: bool = key_column.autoincrement is True
        self._fields = {column.key for column in model.__table__.columns}

    def _prepare(self, record: dict) -> dict:
        unknown = set(record) - self._fields
        if unknown:
            raise StorageError(
                f"Unknown field(s) for '{self.name}': {', '.join(sorted(unknown))}"
            )
        return {field: _normalize(value) for field, value in record.items()}

    @_storage_call
    def count(self) -> int:
        """Number of records in the collection."""
        with self._db.session() as session:
            return session.query(self.model).count()

    @_storage_call
    def bulk_seed(self, records: list[dict]) -> None:
        """
        Insert all records in one transaction.

        There is no dedup guard: callers check ``count() == 0`` first.
        """
        rows = [self.model(**self._prepare(record)) for record in records]
        with self._db.session() as session:
            session.add_all(rows)
        logger.debug("Seeded %d record(s) into %s", len(rows), self.name)

    @_storage_call
    def get_all(self, order_by: str | None = None, reverse: bool = False) -> list[dict]:
        """
        Return every record, ordered by a field (primary key by default).

        Ties are broken by primary key so equal sort keys keep insertion order.
        """
        key_column = getattr(self.model, self.key_name)
        if order_by is None:
            columns = [key_column]
        elif order_by in self._fields:
            columns = [getattr(self.model, order_by), key_column]
        else:
            raise StorageError(f"Cannot order '{self.name}' by unknown field '{order_by}'")

        if reverse:
            columns = [column.desc() for column in columns]

        with self._db.session() as session:
            rows = session.query(self.model).order_by(*columns).all()
            return [row.to_dict() for row in rows]

    @_storage_call
    def get(self, key: Any) -> dict | None:
        """Look up one record by primary key."""
        with self._db.session() as session:
            row = session.get(self.model, _normalize(key))
            return row.to_dict() if row is not None else None

    @_storage_call
    def put(self, record: dict) -> Any:
        """
        Insert or fully replace a record.

        Returns the resolved primary key.
        """
        data = self._prepare(record)
        key = data.get(self.key_name)

        with self._db.session() as session:
            if key is None:
                if not self.auto_keyed:
                    raise StorageError(
                        f"Records in '{self.name}' need a '{self.key_name}' key"
                    )
                data.pop(self.key_name, None)
                row = self.model(**data)
                session.add(row)
                session.flush()
                key = getattr(row, self.key_name)
            else:
                existing = session.get(self.model, key)
                if existing is not None:
                    session.delete(existing)
                    session.flush()
                session.add(self.model(**data))
        return key

    @_storage_call
    def delete(self, key: Any) -> None:
        """Remove a record. Missing keys are ignored."""
        key_column = getattr(self.model, self.key_name)
        with self._db.session() as session:
            session.query(self.model).filter(key_column == _normalize(key)).delete()

    def __repr__(self) -> str:
        return f"Collection(name='{self.name}', key='{self.key_name}')"


class Database:
    """Local persistent store for offline-available data."""

    def __init__(self, db_url: str | None = None):
        """
        Initialize database connection.

        Args:
            db_url: SQLAlchemy database URL. Defaults to SQLite in data directory.
        """
        if db_url is None:
            DATA_DIR.mkdir(parents=True, exist_ok=True)
            db_url = DATABASE_URL

        connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

        self.db_url = db_url
        self.engine = create_engine(db_url, echo=False, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine)

        self.personal_contacts = Collection(self, PersonalContact)
        self.user_profile = Collection(self, UserProfile)
        self.alerts = Collection(self, Alert)
        self.shelters = Collection(self, Shelter)
        self.survival_guides = Collection(self, SurvivalGuideCache)

    def collection(self, name: str) -> Collection:
        """Look up a collection by its name."""
        if name not in COLLECTIONS:
            raise StorageError(f"Unknown collection '{name}'")
        return getattr(self, name)

    # Schema management
    def current_version(self) -> int:
        """Applied schema generation, 0 for a fresh database."""
        try:
            SchemaVersion.__table__.create(self.engine, checkfirst=True)
            with self.session() as session:
                row = session.get(SchemaVersion, 1)
                return row.version if row is not None else 0
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read schema version: {e}") from e

    def upgrade(self, target_version: int = LATEST_SCHEMA_VERSION) -> int:
        """
        Apply schema generations up to ``target_version``.

        Only tables introduced by newer generations are created; tables and
        data of already-applied generations are left untouched.

        Returns:
            The schema version in effect after the call.
        """
        if target_version not in SCHEMA_GENERATIONS:
            raise ValueError(f"Unknown schema version {target_version}")

        current = self.current_version()
        if target_version <= current:
            return current

        try:
            for generation in range(current + 1, target_version + 1):
                Base.metadata.create_all(self.engine, tables=SCHEMA_GENERATIONS[generation])
                logger.info("Applied schema generation %d", generation)

            with self.session() as session:
                row = session.get(SchemaVersion, 1)
                if row is None:
                    row = SchemaVersion(id=1)
                    session.add(row)
                row.version = target_version
                row.upgraded_at = datetime.utcnow()
        except SQLAlchemyError as e:
            raise StorageError(f"Schema upgrade to version {target_version} failed: {e}") from e

        return target_version

    def create_tables(self) -> None:
        """Bring the schema up to the latest generation."""
        self.upgrade(LATEST_SCHEMA_VERSION)

    def drop_tables(self) -> None:
        """Drop all tables from the database."""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def session(self):
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    def __repr__(self) -> str:
        return f"Database(url='{self.db_url}')"
