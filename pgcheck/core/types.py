"""Domain types for the probe — statuses, reports, columns and connection targets."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, SecretStr

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Severity(IntEnum):
    """Plugin status. The value doubles as the process exit code.

    OK < WARNING < CRITICAL is the escalation order; UNKNOWN marks
    operational failures rather than a threshold outcome.
    """

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


class Report(BaseModel):
    """The single status line produced by one probe run."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    description: str

    @classmethod
    def unknown(cls, description: str) -> Report:
        return cls(severity=Severity.UNKNOWN, description=description)

    @property
    def exit_code(self) -> int:
        return int(self.severity)

    def render(self) -> str:
        """Format as ``<SEVERITY>|<description>``.

        Multi-line descriptions (driver errors often are) are folded onto
        one line.
        """
        lines = (line.strip() for line in self.description.splitlines())
        return f"{self.severity.name}|{' '.join(line for line in lines if line)}"


class PgType(IntEnum):
    """PostgreSQL type OIDs accepted as integer columns."""

    CHAR = 18  # "char", single signed byte
    INT8 = 20
    INT2 = 21
    INT4 = 23
    OID = 26


class Column(BaseModel):
    """One column of a result row as received in binary wire format."""

    model_config = ConfigDict(frozen=True)

    type_oid: int
    raw: bytes | None
    name: str = ""


class ConnectionDescriptor(BaseModel):
    """Target parsed from ``user[:password]@host[:port][/database]``."""

    model_config = ConfigDict(frozen=True)

    user: str
    password: SecretStr | None = None
    host: str
    port: int | None = None
    database: str | None = None
