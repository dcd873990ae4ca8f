"""PostgreSQL access — connection-string parsing and a one-shot query executor."""

from __future__ import annotations

from types import TracebackType
from urllib.parse import unquote

import psycopg
import structlog
from psycopg.conninfo import make_conninfo

from pgcheck.core.config import DatabaseConfig, get_settings
from pgcheck.core.types import Column, ConnectionDescriptor
from pgcheck.probe.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    QueryError,
)

logger = structlog.stdlib.get_logger()

ResultRow = list[Column]

_URL_PREFIXES = ("postgresql://", "postgres://")


def _split_host_port(hostport: str) -> tuple[str, int | None]:
    if hostport.startswith("["):
        host, sep, rest = hostport[1:].partition("]")
        if not sep or (rest and not rest.startswith(":")):
            raise ConfigurationError(f"Invalid host in connection string: '{hostport}'")
        port_text = rest[1:] if rest else ""
    else:
        host, _, port_text = hostport.partition(":")
    if not host:
        raise ConfigurationError("Connection string is missing a host")
    if not port_text:
        return host, None
    if not port_text.isdigit() or not 0 < int(port_text) < 65536:
        raise ConfigurationError(f"Invalid port in connection string: '{port_text}'")
    return host, int(port_text)


def parse_connection_string(text: str) -> ConnectionDescriptor:
    """Parse ``user[:password]@host[:port][/database]``.

    A ``postgresql://`` prefix is tolerated. User and password are
    percent-decoded, so ``@`` or ``:`` in a password may be written
    as ``%40`` / ``%3A``.

    Raises:
        ConfigurationError: The string does not have the expected shape.
    """
    for prefix in _URL_PREFIXES:
        if text.startswith(prefix):
            text = text[len(prefix):]
            break

    userinfo, sep, location = text.rpartition("@")
    if not sep or not userinfo:
        raise ConfigurationError(
            "Connection string must look like user[:password]@host[:port][/database]"
        )

    user, has_password, password = userinfo.partition(":")
    if not user:
        raise ConfigurationError("Connection string is missing a user")

    hostport, _, database = location.partition("/")
    host, port = _split_host_port(hostport)

    return ConnectionDescriptor(
        user=unquote(user),
        password=unquote(password) if has_password else None,  # type: ignore[arg-type]
        host=host,
        port=port,
        database=unquote(database) or None,
    )


def build_conninfo(descriptor: ConnectionDescriptor, config: DatabaseConfig) -> str:
    """Render a libpq conninfo string for *descriptor* with *config* limits applied."""
    params: dict[str, object] = {
        "user": descriptor.user,
        "host": descriptor.host,
        "port": descriptor.port,
        "dbname": descriptor.database,
        "sslmode": config.sslmode,
        "application_name": config.application_name,
    }
    if descriptor.password is not None:
        params["password"] = descriptor.password.get_secret_value()
    if config.connect_timeout_secs > 0:
        params["connect_timeout"] = config.connect_timeout_secs
    if config.statement_timeout_ms > 0:
        params["options"] = f"-c statement_timeout={config.statement_timeout_ms}"
    return make_conninfo(**{k: v for k, v in params.items() if v is not None})


class PostgresExecutor:
    """Owns one connection for the lifetime of a probe run.

    Usage::

        with PostgresExecutor(descriptor) as executor:
            rows = executor.execute("SELECT count(*) FROM pg_stat_activity")
    """

    def __init__(
        self,
        descriptor: ConnectionDescriptor,
        config: DatabaseConfig | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._config = config or get_settings().database
        self._conn: psycopg.Connection | None = None

    def connect(self) -> None:
        """Open the connection."""
        try:
            self._conn = psycopg.connect(
                build_conninfo(self._descriptor, self._config),
                autocommit=True,
            )
        except psycopg.Error as exc:
            raise DatabaseConnectionError(str(exc).strip()) from exc
        logger.info(
            "database_connected",
            host=self._descriptor.host,
            port=self._descriptor.port,
            database=self._descriptor.database,
        )

    def close(self) -> None:
        """Close the connection if open. Safe to call more than once."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        conn.close()
        logger.info("database_closed")

    def __enter__(self) -> PostgresExecutor:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def connection(self) -> psycopg.Connection:
        if self._conn is None:
            raise DatabaseConnectionError("Executor not connected. Call connect() first.")
        return self._conn

    def execute(self, query: str) -> list[ResultRow]:
        """Run *query* and return its rows as binary-format columns.

        Statements that produce no result set return no rows.

        Raises:
            QueryError: The server or driver reported an error.
        """
        try:
            with self.connection.cursor() as cur:
                cur.execute(query, binary=True)
                result = cur.pgresult
                if cur.description is None or result is None:
                    return []
                names = [_field_name(result.fname(i)) for i in range(result.nfields)]
                rows = [
                    [
                        Column(
                            type_oid=result.ftype(col),
                            raw=_raw_value(result.get_value(row, col)),
                            name=names[col],
                        )
                        for col in range(result.nfields)
                    ]
                    for row in range(result.ntuples)
                ]
        except psycopg.Error as exc:
            raise QueryError(str(exc).strip()) from exc

        logger.info("query_executed", rows=len(rows))
        return rows


def _field_name(raw: bytes | None) -> str:
    return raw.decode("utf-8", "replace") if raw is not None else ""


def _raw_value(raw: bytes | memoryview | None) -> bytes | None:
    return bytes(raw) if raw is not None else None
