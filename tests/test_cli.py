"""Tests for the command-line entry point — stdout line and exit codes."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import psycopg
import pytest
import yaml

from pgcheck.cli import build_parser, main
from pgcheck.core.config import reset_settings
from pgcheck.core.types import PgType


@pytest.fixture(autouse=True)
def _clean_settings() -> None:
    reset_settings()


class FakePGResult:
    def __init__(self, oids: list[int], rows: list[list[bytes | None]]) -> None:
        self.nfields = len(oids)
        self.ntuples = len(rows)
        self._oids = oids
        self._rows = rows

    def fname(self, col: int) -> bytes:
        return f"c{col}".encode()

    def ftype(self, col: int) -> int:
        return self._oids[col]

    def get_value(self, row: int, col: int) -> bytes | None:
        return self._rows[row][col]


def _conn(oids: list[int], rows: list[list[bytes | None]]) -> MagicMock:
    cur = MagicMock()
    cur.pgresult = FakePGResult(oids, rows)
    cur.description = [object()] * len(oids)
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    return conn


def _int4(value: int) -> bytes:
    return value.to_bytes(4, "big", signed=True)


def _args(*extra: str) -> list[str]:
    return ["-d", "monitor:pw@db1/app", "-q", "SELECT n FROM t", *extra]


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args(_args())
        assert args.conn == "monitor:pw@db1/app"
        assert args.query == "SELECT n FROM t"
        assert args.warn is None
        assert args.crit is None

    def test_long_flags(self) -> None:
        args = build_parser().parse_args(
            [
                "--db-connection-string", "u@h",
                "--query", "SELECT 1",
                "--warn", "5,5",
                "--critical", "10,10",
            ]
        )
        assert args.warn == "5,5"
        assert args.crit == "10,10"


class TestMain:
    def test_ok(self, capsys: pytest.CaptureFixture[str]) -> None:
        conn = _conn([PgType.INT4], [[_int4(0)]])
        with patch("pgcheck.probe.database.psycopg.connect", return_value=conn):
            code = main(_args())
        assert code == 0
        assert capsys.readouterr().out == "OK|Result:(0)"
        conn.close.assert_called_once()

    def test_warning_two_columns(self, capsys: pytest.CaptureFixture[str]) -> None:
        conn = _conn([PgType.INT4, PgType.INT2], [[_int4(6), b"\x00\x01"]])
        with patch("pgcheck.probe.database.psycopg.connect", return_value=conn):
            code = main(_args("-w", "5,5", "-c", "10,10"))
        assert code == 1
        assert capsys.readouterr().out == "WARNING|Result:(6,1)"

    def test_critical(self, capsys: pytest.CaptureFixture[str]) -> None:
        conn = _conn([PgType.INT8], [[(2).to_bytes(8, "big")]])
        with patch("pgcheck.probe.database.psycopg.connect", return_value=conn):
            code = main(_args())
        assert code == 2
        assert capsys.readouterr().out == "CRITICAL|Result:(2)"

    def test_mismatched_vectors(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("pgcheck.probe.database.psycopg.connect") as connect:
            code = main(_args("-w", "1,2", "-c", "3"))
        assert code == 3
        assert capsys.readouterr().out == "UNKNOWN|Size of integer arrays need to match"
        connect.assert_not_called()

    def test_connection_failure(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch(
            "pgcheck.probe.database.psycopg.connect",
            side_effect=psycopg.OperationalError("connection refused\n\tIs the server running?"),
        ):
            code = main(_args())
        assert code == 3
        assert capsys.readouterr().out == "UNKNOWN|connection refused Is the server running?"

    def test_unsupported_type(self, capsys: pytest.CaptureFixture[str]) -> None:
        conn = _conn([25], [[b"text"]])
        with patch("pgcheck.probe.database.psycopg.connect", return_value=conn):
            code = main(_args())
        assert code == 3
        out = capsys.readouterr().out
        assert out.startswith("UNKNOWN|Unsupported column type (oid 25)")
        conn.close.assert_called_once()

    def test_missing_required_argument(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["-d", "u@h"])
        assert code == 3
        out = capsys.readouterr().out
        assert out.startswith("UNKNOWN|")
        assert "--query" in out

    def test_invalid_timeout_argument(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(_args("--connect-timeout", "soon"))
        assert code == 3
        assert capsys.readouterr().out.startswith("UNKNOWN|")

    def test_logs_stay_off_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        conn = _conn([PgType.INT4], [[_int4(0)]])
        with patch("pgcheck.probe.database.psycopg.connect", return_value=conn):
            main(_args("--log-level", "DEBUG"))
        captured = capsys.readouterr()
        assert captured.out == "OK|Result:(0)"
        assert "check_completed" in captured.err

    def test_unexpected_error_is_unknown(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("pgcheck.cli.run_check", side_effect=RuntimeError("kaboom")):
            code = main(_args())
        assert code == 3
        assert capsys.readouterr().out == "UNKNOWN|Internal error: kaboom"


class TestSettingsFile:
    def test_thresholds_and_timeouts_from_yaml(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "thresholds": {"warning": "50", "critical": "100"},
                    "database": {"connect_timeout_secs": 4},
                }
            )
        )
        conn = _conn([PgType.INT4], [[_int4(60)]])
        with patch("pgcheck.probe.database.psycopg.connect", return_value=conn) as connect:
            code = main(_args("--config", str(config_file), "--statement-timeout", "250"))
        assert code == 1
        assert capsys.readouterr().out == "WARNING|Result:(60)"
        conninfo = connect.call_args.args[0]
        assert "connect_timeout=4" in conninfo
        assert "statement_timeout=250" in conninfo

    def test_cli_thresholds_override_yaml(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"thresholds": {"warning": "50", "critical": "100"}}))
        conn = _conn([PgType.INT4], [[_int4(60)]])
        with patch("pgcheck.probe.database.psycopg.connect", return_value=conn):
            code = main(_args("--config", str(config_file), "-w", "70", "-c", "80"))
        assert code == 0
        assert capsys.readouterr().out == "OK|Result:(60)"

    def test_invalid_yaml_is_unknown(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"database": {"connect_timeout_secs": "never"}}))
        code = main(_args("--config", str(config_file)))
        assert code == 3
        out = capsys.readouterr().out
        assert out.startswith("UNKNOWN|Invalid settings file")
        assert "\n" not in out
