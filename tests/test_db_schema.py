"""Tests for database schema creation and migration."""

from inventarioti.db.schema import _SCHEMA_VERSION, ensure_schema


def test_ensure_schema_creates_tables(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")

    tables = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    ).fetchall()
    table_names = {row["name"] for row in tables}

    assert "preferences" in table_names
    assert "schema_version" in table_names

    conn.close()


def test_ensure_schema_creates_parent_dirs(tmp_path):
    db_path = tmp_path / "sub" / "dir" / "test.db"
    conn = ensure_schema(db_path)
    assert db_path.exists()
    conn.close()


def test_ensure_schema_idempotent(tmp_path):
    """Calling ensure_schema twice doesn't error."""
    db_path = tmp_path / "test.db"
    ensure_schema(db_path).close()

    conn = ensure_schema(db_path)
    row = conn.execute("SELECT version FROM schema_version").fetchone()
    assert row["version"] == _SCHEMA_VERSION
    conn.close()


def test_ensure_schema_wal_mode(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    mode = conn.execute("PRAGMA journal_mode").fetchone()
    assert mode[0] == "wal"
    conn.close()


def test_preferences_columns(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    info = conn.execute("PRAGMA table_info(preferences)").fetchall()
    col_names = {row["name"] for row in info}
    assert {"store", "key", "value", "updated_at"}.issubset(col_names)
    conn.close()
