"""
SQLite record store.

Uses SQLite with SQLAlchemy. Every record lives in a single ``records``
table as a JSON payload keyed by (collection, record_id).
"""

import copy
from datetime import datetime
from pathlib import Path

from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint, create_engine, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from .errors import PersistenceError
from .logger import get_logger
from .retry import RetryError, call_with_backoff
from .storage import RecordStore

Base = declarative_base()


class Record(Base):
    """One stored document."""

    __tablename__ = "records"
    __table_args__ = (UniqueConstraint("collection", "record_id", name="uq_collection_record"),)

    seq = Column(Integer, primary_key=True, autoincrement=True)  # insertion order
    collection = Column(String, nullable=False, index=True)
    record_id = Column(String, nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


def init_database(db_path: Path):
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy engine bound to the database
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    return engine


class SqlRecordStore(RecordStore):
    """RecordStore backed by SQLite; writes optionally retried on OperationalError."""

    def __init__(self, db_path: Path, max_retries: int = 0):
        self.db_path = Path(db_path)
        self.max_retries = max_retries
        try:
            self._engine = init_database(self.db_path)
        except (OSError, SQLAlchemyError) as e:
            raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e
        self._Session = sessionmaker(bind=self._engine)

    def _query(self, collection: str, record_id: str):
        return select(Record).filter_by(collection=collection, record_id=str(record_id))

    def get(self, collection, record_id):
        try:
            with self._Session() as session:
                row = session.execute(self._query(collection, record_id)).scalar_one_or_none()
                return copy.deepcopy(row.payload) if row is not None else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Read failed for {collection}/{record_id}: {e}") from e

    def list(self, collection):
        try:
            with self._Session() as session:
                rows = session.execute(
                    select(Record).filter_by(collection=collection).order_by(Record.seq)
                ).scalars().all()
                return [copy.deepcopy(r.payload) for r in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Read failed for {collection}: {e}") from e

    def put(self, collection, record_id, record):
        def write():
            with self._Session() as session:
                row = session.execute(self._query(collection, record_id)).scalar_one_or_none()
                if row is None:
                    session.add(Record(
                        collection=collection,
                        record_id=str(record_id),
                        payload=copy.deepcopy(record),
                    ))
                else:
                    row.payload = copy.deepcopy(record)
                session.commit()

        def on_retry(attempt, exc, delay):
            get_logger().warning(
                "Database write failed, retrying",
                collection=collection, record_id=str(record_id), attempt=attempt, delay=delay,
            )

        try:
            call_with_backoff(
                write,
                max_retries=self.max_retries,
                exceptions=(OperationalError,),
                on_retry=on_retry,
            )
        except RetryError as e:
            raise PersistenceError(f"Write failed for {collection}/{record_id}: {e}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Write failed for {collection}/{record_id}: {e}") from e
