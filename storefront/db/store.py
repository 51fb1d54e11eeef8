# storefront/db/store.py
# Relational store: one execute() contract over SQLite (embedded file) and MySQL (connection pool).
# Statements use positional "?" placeholders; results are normalized to one shape for both backends.

import logging
import re
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Sequence

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine

from storefront.core.errors import ConfigurationError
from storefront.db.base import Base

# Register models so Base.metadata holds all six tables
import storefront.models.user  # noqa: F401
import storefront.models.product  # noqa: F401
import storefront.models.cart  # noqa: F401
import storefront.models.order  # noqa: F401
import storefront.models.review  # noqa: F401

logger = logging.getLogger(__name__)

# Quoted literals are matched first so a "?" inside them is left alone
_PLACEHOLDER_RE = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|`[^`]*`|\?")

QUERY_KEYWORDS = ("SELECT", "WITH")


def statement_kind(statement: str) -> str:
    """Classifies a statement by its leading keyword: "query", "insert" or "write"."""
    head = statement.lstrip().upper()
    if head.startswith(QUERY_KEYWORDS):
        return "query"
    if head.startswith("INSERT"):
        return "insert"
    return "write"


def bind_positional(statement: str, parameters: Sequence[Any]) -> tuple[str, dict]:
    """
    Rewrites "?" placeholders as named binds (:p0, :p1, ...) for sqlalchemy.text().

    Raises:
        ValueError: if the number of placeholders and parameters differ
    """
    names = []

    def _replace(match: re.Match) -> str:
        token = match.group(0)
        if token != "?":
            return token
        names.append(f"p{len(names)}")
        return f":{names[-1]}"

    rewritten = _PLACEHOLDER_RE.sub(_replace, statement)
    used = len(names)
    if used != len(parameters):
        raise ValueError(f"Statement expects {used} parameters, got {len(parameters)}")
    return rewritten, {f"p{i}": value for i, value in enumerate(parameters)}


class RelationalStore(ABC):
    """Parameterized SQL execution with normalized results.

    - SELECT / WITH -> list of row dicts keyed by output column name
    - INSERT        -> {"insert_id": int, "changes": int}
    - anything else -> {"changes": int}
    """

    name = "abstract"

    def __init__(self, engine: Engine):
        self.engine = engine

    def init_schema(self) -> None:
        """Creates the six tables if missing. Safe to call repeatedly."""
        Base.metadata.create_all(bind=self.engine, checkfirst=True)
        logger.info(f"[DB] {self.name} schema ready ({', '.join(sorted(Base.metadata.tables))})")

    def execute(self, statement: str, parameters: Sequence[Any] = ()) -> Any:
        sql, binds = bind_positional(statement, list(parameters))
        kind = statement_kind(statement)
        if kind == "query":
            with self.engine.connect() as conn:
                result = conn.execute(text(sql), binds)
                return [dict(row) for row in result.mappings()]
        with self._write_scope() as conn:
            result = conn.execute(text(sql), binds)
            changes = self._affected_rows(result)
            if kind == "insert":
                return {"insert_id": result.lastrowid, "changes": changes}
            return {"changes": changes}

    @abstractmethod
    def _write_scope(self):
        """Context manager yielding a connection that commits on exit."""

    def _affected_rows(self, result) -> int:
        # drivers report -1 for statements without a row count (DDL)
        return max(result.rowcount, 0)

    def dispose(self) -> None:
        self.engine.dispose()


class EmbeddedStore(RelationalStore):
    """
    Single-file SQLite database.

    Every mutating statement runs in its own transaction and is committed to the
    file before execute() returns. Writers are serialized with a process-wide lock.
    """

    name = "sqlite"

    def __init__(self, path: str):
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        super().__init__(engine)
        self.path = path
        self._lock = threading.RLock()

    @contextmanager
    def _write_scope(self):
        with self._lock, self.engine.begin() as conn:
            yield conn


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class NetworkedStore(RelationalStore):
    """Connection-pooled server database (MySQL in deployment). Durability is the server's job."""

    name = "mysql"

    def __init__(self, url: str, pool_size: int = 10):
        options = {"pool_pre_ping": True}
        if not url.startswith("sqlite"):
            options.update(pool_size=pool_size, max_overflow=0, pool_recycle=3600)
            # CURRENT_TIMESTAMP defaults are read back as UTC
            options["connect_args"] = {"init_command": "SET time_zone = '+00:00'"}
        super().__init__(create_engine(url, **options))

    def _write_scope(self):
        return self.engine.begin()


def create_store(settings) -> RelationalStore:
    """Builds the relational store named by settings.DB_TYPE."""
    if settings.DB_TYPE == "sqlite":
        store = EmbeddedStore(settings.SQLITE_PATH)
    elif settings.DB_TYPE == "mysql":
        store = NetworkedStore(settings.mysql_url, pool_size=settings.DB_POOL_SIZE)
    else:
        raise ConfigurationError(f"Unsupported DB_TYPE: {settings.DB_TYPE!r}")
    logger.info(f"[DB] Using {store.name} relational store")
    return store
