"""Decode PostgreSQL integer-family columns into one canonical integer."""

from __future__ import annotations

from collections.abc import Sequence

from pgcheck.core.types import Column, PgType
from pgcheck.probe.exceptions import CoercionError, UnsupportedTypeError

# (byte width, signed) per accepted type; values arrive big-endian
_DECODERS: dict[PgType, tuple[int, bool]] = {
    PgType.CHAR: (1, True),
    PgType.INT2: (2, True),
    PgType.INT4: (4, True),
    PgType.INT8: (8, True),
    PgType.OID: (4, False),
}


def _label(column: Column, index: int | None) -> str:
    if column.name:
        return f"'{column.name}'"
    return str(index) if index is not None else "?"


def coerce_column(column: Column, index: int | None = None) -> int:
    """Convert one binary column value to a signed 64-bit integer.

    Raises:
        UnsupportedTypeError: The column type is not an accepted integer type.
        CoercionError: The value is NULL or has the wrong byte width.
    """
    try:
        pg_type = PgType(column.type_oid)
    except ValueError:
        raise UnsupportedTypeError(
            f"Unsupported column type (oid {column.type_oid})"
            f" in column {_label(column, index)}"
        ) from None

    width, signed = _DECODERS[pg_type]
    if column.raw is None:
        raise CoercionError(f"NULL value in column {_label(column, index)}")
    if len(column.raw) != width:
        raise CoercionError(
            f"Expected {width} bytes for {pg_type.name.lower()}"
            f" in column {_label(column, index)}, got {len(column.raw)}"
        )
    return int.from_bytes(column.raw, "big", signed=signed)


def coerce_row(columns: Sequence[Column]) -> list[int]:
    """Coerce every column of a row, in order."""
    return [coerce_column(col, i) for i, col in enumerate(columns)]
