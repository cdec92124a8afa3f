"""
Database wiring: engine, bounded connection pool, sessions and startup reconciliation.

A `Database` is constructed explicitly by the application factory and shared by
reference; nothing here is a module-level singleton.
"""

from contextlib import contextmanager
from typing import Iterator, List

import structlog
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import QueuePool
from sqlalchemy.schema import Column, Table

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


class Database:
    """Owns the engine and its pool for the lifetime of the process."""

    def __init__(
        self,
        url: str,
        pool_max: int = 2,
        acquire_timeout: float = 30.0,
        idle_seconds: int = 10,
    ):
        self.url = url
        engine_kwargs: dict = {"pool_pre_ping": True}
        if make_url(url).get_backend_name() == "sqlite":
            # Sync routes run on a threadpool; pooled connections move between threads.
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        if not _is_memory_sqlite(url):
            engine_kwargs.update(
                poolclass=QueuePool,
                pool_size=pool_max,
                max_overflow=0,
                pool_timeout=acquire_timeout,
                pool_recycle=idle_seconds,
            )
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False)
        self.reconciled = False

    @contextmanager
    def session(self) -> Iterator[Session]:
        """One pool slot per unit of work, released on exit."""
        db = self.SessionLocal()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def ping(self) -> bool:
        """Check database connectivity (for the readiness check)."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.error("Database health check failed", error=str(exc))
            return False

    def reconcile(self) -> bool:
        """Ensure declared tables exist and carry every declared column.

        Additive only: missing tables are created and missing columns added,
        and declared indexes (the unique one on users.email included) are
        created when missing. Nothing is dropped or narrowed. Failures are
        logged and reported through the return value; the process keeps serving.
        """
        try:
            with self.engine.begin() as conn:
                Base.metadata.create_all(bind=conn, checkfirst=True)
                added = self._add_missing_columns(conn)
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            indexes = self._add_missing_indexes()
        except SQLAlchemyError as exc:
            logger.error("Unable to connect to the database", error=str(exc))
            return False

        self.reconciled = True
        logger.info("Database synchronized successfully", added_columns=added, added_indexes=indexes)
        return True

    def _add_missing_columns(self, conn: Connection) -> List[str]:
        inspector = inspect(conn)
        added: List[str] = []
        for table in Base.metadata.sorted_tables:
            existing = {col["name"] for col in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in existing or column.primary_key:
                    continue
                conn.execute(text(self._add_column_ddl(conn, table, column)))
                added.append(f"{table.name}.{column.name}")
        return added

    def _add_missing_indexes(self) -> List[str]:
        """Create declared indexes no existing index or unique constraint covers.

        Each index gets its own transaction so rows that violate one (duplicate
        emails in a legacy table) only skip that index.
        """
        with self.engine.connect() as conn:
            inspector = inspect(conn)
            existing = {
                table.name: [
                    (frozenset(ix["column_names"]), bool(ix["unique"]))
                    for ix in inspector.get_indexes(table.name)
                ]
                + [
                    (frozenset(uq["column_names"]), True)
                    for uq in inspector.get_unique_constraints(table.name)
                ]
                for table in Base.metadata.sorted_tables
            }

        added: List[str] = []
        for table in Base.metadata.sorted_tables:
            for index in sorted(table.indexes, key=lambda ix: ix.name or ""):
                columns = frozenset(col.name for col in index.columns)
                if any(cols == columns and (unique or not index.unique) for cols, unique in existing[table.name]):
                    continue
                try:
                    with self.engine.begin() as conn:
                        index.create(bind=conn)
                except SQLAlchemyError as exc:
                    logger.warning(
                        "Could not create declared index",
                        table=table.name,
                        index=index.name,
                        error=str(exc),
                    )
                    continue
                added.append(index.name)
        return added

    @staticmethod
    def _add_column_ddl(conn: Connection, table: Table, column: Column) -> str:
        preparer = conn.dialect.identifier_preparer
        ddl = "ALTER TABLE {} ADD COLUMN {} {}".format(
            preparer.format_table(table),
            preparer.format_column(column),
            column.type.compile(dialect=conn.dialect),
        )
        # Existing rows have no value for a new column; NOT NULL only when the
        # database can backfill it.
        if column.server_default is not None:
            default = column.server_default.arg
            if isinstance(default, str):
                default = "'{}'".format(default.replace("'", "''"))
            else:
                default = default.compile(dialect=conn.dialect)
            ddl += f" DEFAULT {default} NOT NULL"
        elif not column.nullable:
            logger.warning(
                "Adding required column as nullable; existing rows have no value",
                table=table.name,
                column=column.name,
            )
        return ddl

    def dispose(self) -> None:
        self.engine.dispose()
