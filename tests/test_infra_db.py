"""Tests for database layer."""

import os
from unittest.mock import MagicMock, patch

import psycopg2
import pytest

_DEFAULT_KWARGS = {"connect_timeout": 5, "options": "-c statement_timeout=5000"}


class TestGetConnPasswordFallback:
    """Tests for DB_PASSWORD fallback in get_conn(); no real DB needed."""

    def test_db_password_fallback_dsn_without_password(self):
        from horizontas.infra.db import get_conn

        env = {"DATABASE_URL": "dbname=db user=u host=h port=5432", "DB_PASSWORD": "from-env"}
        with patch.dict(os.environ, env, clear=True), \
             patch("horizontas.infra.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn()
            mock_connect.assert_called_once_with(
                "dbname=db user=u host=h port=5432",
                password="from-env",
                **_DEFAULT_KWARGS,
            )

    def test_db_password_not_used_when_dsn_has_password(self):
        from horizontas.infra.db import get_conn

        env = {"DATABASE_URL": "dbname=db user=u password=from-dsn host=h", "DB_PASSWORD": "from-env"}
        with patch.dict(os.environ, env, clear=True), \
             patch("horizontas.infra.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn()
            mock_connect.assert_called_once_with(
                "dbname=db user=u password=from-dsn host=h",
                **_DEFAULT_KWARGS,
            )

    def test_db_password_fallback_url_without_password(self):
        from horizontas.infra.db import get_conn

        env = {"DATABASE_URL": "postgres://u@h/db", "DB_PASSWORD": "from-env"}
        with patch.dict(os.environ, env, clear=True), \
             patch("horizontas.infra.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn()
            mock_connect.assert_called_once_with(
                "postgres://u@h/db",
                password="from-env",
                **_DEFAULT_KWARGS,
            )

    def test_db_password_not_used_when_url_has_password(self):
        from horizontas.infra.db import get_conn

        env = {"DATABASE_URL": "postgres://u:p@h/db", "DB_PASSWORD": "from-env"}
        with patch.dict(os.environ, env, clear=True), \
             patch("horizontas.infra.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn()
            mock_connect.assert_called_once_with("postgres://u:p@h/db", **_DEFAULT_KWARGS)


class TestTimeouts:
    def test_timeouts_from_env(self):
        from horizontas.infra.db import get_conn

        env = {
            "DATABASE_URL": "dbname=db",
            "DB_CONNECT_TIMEOUT_SECONDS": "2",
            "DB_STATEMENT_TIMEOUT_MS": "750",
        }
        with patch.dict(os.environ, env, clear=True), \
             patch("horizontas.infra.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn()
            mock_connect.assert_called_once_with(
                "dbname=db",
                connect_timeout=2,
                options="-c statement_timeout=750",
            )

    def test_raises_without_database_url(self):
        from horizontas.infra.db import get_conn

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(RuntimeError, match="DATABASE_URL"):
                get_conn()


class TestTxn:
    """Tests for txn() context manager with a mocked connection."""

    def _conn(self):
        conn = MagicMock()
        cur = MagicMock()
        conn.cursor.return_value.__enter__.return_value = cur
        return conn, cur

    def test_commits_on_success(self):
        from horizontas.infra.db import txn

        conn, cur = self._conn()
        with txn(conn) as got:
            got.execute("SELECT 1")

        assert got is cur
        conn.commit.assert_called_once()
        conn.rollback.assert_not_called()
        conn.close.assert_not_called()

    def test_rollback_on_exception(self):
        from horizontas.infra.db import txn

        conn, _ = self._conn()
        with pytest.raises(ValueError):
            with txn(conn):
                raise ValueError("rollback test")

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()

    def test_owned_connection_closed(self):
        from horizontas.infra.db import txn

        conn, _ = self._conn()
        with patch("horizontas.infra.db.get_conn", return_value=conn):
            with txn():
                pass
        conn.close.assert_called_once()

    def test_connect_failure_propagates(self):
        from horizontas.infra.db import txn

        with patch(
            "horizontas.infra.db.get_conn",
            side_effect=psycopg2.OperationalError("timeout expired"),
        ):
            with pytest.raises(psycopg2.OperationalError):
                with txn():
                    pass


# Skip integration tests if DATABASE_URL is not set
_skip_no_db = pytest.mark.skipif(
    not os.environ.get("DATABASE_URL"),
    reason="DATABASE_URL not set - skipping DB integration tests",
)


@_skip_no_db
class TestGetConn:
    def test_returns_connection(self):
        from horizontas.infra.db import get_conn

        conn = get_conn()
        try:
            assert conn is not None
            assert not conn.closed
        finally:
            conn.close()

    def test_creates_conn_if_none(self):
        from horizontas.infra.db import txn

        with txn() as cur:
            cur.execute("SELECT 1")
            row = cur.fetchone()
            assert row[0] == 1
