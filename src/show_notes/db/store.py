"""Show note store backed by SQLAlchemy (SQLite by default).

Sessions follow a session-per-operation pattern: every public method opens a
session, commits or rolls back, and closes it before returning.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from ..exceptions import PersistenceError
from ..models import ShowNoteMetadata, ShowNoteRecord
from .models import Base, ShowNote

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_MS = 30000


def _optimize_sqlite_connection(dbapi_connection, connection_record):  # type: ignore
    """Apply SQLite settings when a connection is created."""
    cursor = dbapi_connection.cursor()
    cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _to_row(record: ShowNoteRecord) -> ShowNote:
    meta = record.metadata
    return ShowNote(
        show_link=meta.show_link,
        channel=meta.channel,
        channel_url=meta.channel_url,
        title=meta.title,
        description=meta.description,
        publish_date=meta.publish_date,
        cover_image=meta.cover_image,
        frontmatter=record.frontmatter,
        prompt=record.prompt,
        transcript=record.transcript,
        llm_output=record.llm_output,
        llm_service=record.llm_service,
        llm_model=record.llm_model,
        llm_cost=record.llm_cost,
        transcription_service=record.transcription_service,
        transcription_model=record.transcription_model,
        transcription_cost=record.transcription_cost,
        final_cost=record.final_cost,
    )


def _to_record(row: ShowNote) -> ShowNoteRecord:
    return ShowNoteRecord(
        id=row.id,
        metadata=ShowNoteMetadata(
            show_link=row.show_link,
            channel=row.channel,
            channel_url=row.channel_url,
            title=row.title,
            description=row.description,
            publish_date=row.publish_date,
            cover_image=row.cover_image,
        ),
        frontmatter=row.frontmatter,
        prompt=row.prompt,
        transcript=row.transcript,
        llm_output=row.llm_output,
        llm_service=row.llm_service,
        llm_model=row.llm_model,
        llm_cost=row.llm_cost,
        transcription_service=row.transcription_service,
        transcription_model=row.transcription_model,
        transcription_cost=row.transcription_cost,
        final_cost=row.final_cost,
    )


class ShowNoteStore:
    """Insert and read show note records.

    Tables are created on first use. For SQLite URLs the parent directory of
    the database file is created as well.

    Args:
        database_url: SQLAlchemy database URL (e.g. ``sqlite:///show_notes.db``)

    Raises:
        PersistenceError: If the engine cannot be created

    Example:
        >>> store = ShowNoteStore("sqlite:///:memory:")
        >>> store.list_all()
        []
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        try:
            url = make_url(database_url)
            engine_kwargs: Dict[str, Any] = {}
            if url.get_backend_name() == "sqlite":
                if url.database and url.database != ":memory:":
                    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
                    # Avoid connection pooling issues with file-backed SQLite
                    engine_kwargs["poolclass"] = NullPool
                engine_kwargs["connect_args"] = {"check_same_thread": False}
            self.engine = create_engine(database_url, **engine_kwargs)
            if url.get_backend_name() == "sqlite":
                event.listen(self.engine, "connect", _optimize_sqlite_connection)
            Base.metadata.create_all(bind=self.engine)
        except (SQLAlchemyError, OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to open show note store {database_url}: {exc}") from exc
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.debug("Show note store ready: %s", database_url)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(f"Database error: {exc}")
            raise PersistenceError(f"Show note store operation failed: {exc}") from exc
        finally:
            session.close()

    def insert(self, record: ShowNoteRecord) -> int:
        """Persist ``record`` and return its new id.

        Raises:
            PersistenceError: If the insert fails
        """
        with self._session() as session:
            row = _to_row(record)
            session.add(row)
            session.commit()
            new_id = int(row.id)
        logger.info("Show note saved with id %d", new_id)
        return new_id

    def get_by_id(self, note_id: int) -> Optional[ShowNoteRecord]:
        """Return the record with ``note_id``, or None if there is none."""
        with self._session() as session:
            row = session.get(ShowNote, note_id)
            return _to_record(row) if row is not None else None

    def list_all(self) -> List[ShowNoteRecord]:
        """Return every record, newest publish date first."""
        with self._session() as session:
            rows = (
                session.query(ShowNote)
                .order_by(ShowNote.publish_date.desc(), ShowNote.id.desc())
                .all()
            )
            return [_to_record(row) for row in rows]

    def close(self) -> None:
        self.engine.dispose()
