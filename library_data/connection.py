from __future__ import annotations

import logging
import threading
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

from library_data.config import DEFAULT_CONNECTION_NAME, Settings, settings as default_settings
from library_data.database import enable_sqlite_foreign_keys

logger = logging.getLogger(__name__)


class ConnectionFactory:
    """Shared raw connection for queries that bypass the ORM session.

    The first ``create_connection()`` resolves the named connection string and
    opens one connection; every later call returns that same object until
    ``close()`` is called. There is no reconnection: a bad URL or an
    unreachable database raises from the first call.
    """

    def __init__(self, settings: Optional[Settings] = None, name: str = DEFAULT_CONNECTION_NAME):
        self._settings = settings or default_settings
        self._name = name
        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def create_connection(self) -> Connection:
        if self._connection is not None:
            return self._connection
        with self._lock:
            if self._connection is None:
                url = self._settings.get_connection_string(self._name)
                engine = enable_sqlite_foreign_keys(create_engine(url, **self._settings.engine_options(url)))
                try:
                    connection = engine.connect()
                except Exception:
                    engine.dispose()
                    raise
                self._engine = engine
                self._connection = connection
                logger.info("Opened shared connection %s (%s)", self._name, engine.url.render_as_string(hide_password=True))
        return self._connection

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                logger.info("Closed shared connection %s", self._name)
