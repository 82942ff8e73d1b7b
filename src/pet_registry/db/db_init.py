"""Database initialization helpers."""

from __future__ import annotations

from sqlalchemy import event, text
from sqlalchemy.engine import Engine

from .db_models import Base

REASSIGN_GUARD_MESSAGE = "microchip already assigned to this pet; clear it before assigning another"

_SQLITE_GUARD = [
    "DROP TRIGGER IF EXISTS trg_pets_no_reassign_microchip",
    f"""
    CREATE TRIGGER trg_pets_no_reassign_microchip
    BEFORE UPDATE OF microchip_id ON pets
    FOR EACH ROW
    WHEN OLD.microchip_id IS NOT NULL
     AND NEW.microchip_id IS NOT NULL
     AND NEW.microchip_id <> OLD.microchip_id
    BEGIN
        SELECT RAISE(ABORT, '{REASSIGN_GUARD_MESSAGE}');
    END
    """,
]

_POSTGRES_GUARD = [
    f"""
    CREATE OR REPLACE FUNCTION pets_no_reassign_microchip() RETURNS trigger AS $$
    BEGIN
        IF OLD.microchip_id IS NOT NULL
           AND NEW.microchip_id IS NOT NULL
           AND NEW.microchip_id <> OLD.microchip_id THEN
            RAISE EXCEPTION '{REASSIGN_GUARD_MESSAGE}' USING ERRCODE = '23514';
        END IF;
        RETURN NEW;
    END;
    $$ LANGUAGE plpgsql
    """,
    "DROP TRIGGER IF EXISTS trg_pets_no_reassign_microchip ON pets",
    """
    CREATE TRIGGER trg_pets_no_reassign_microchip
    BEFORE UPDATE ON pets
    FOR EACH ROW EXECUTE FUNCTION pets_no_reassign_microchip()
    """,
]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def install_connection_hooks(engine: Engine) -> None:
    """Turn on FK enforcement for every SQLite connection the engine opens."""
    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _enable_sqlite_foreign_keys):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)


def init_db(engine: Engine) -> None:
    """Create tables and install the microchip reassignment guard."""
    install_connection_hooks(engine)
    Base.metadata.create_all(engine)
    _install_reassign_guard(engine)


def _install_reassign_guard(engine: Engine) -> None:
    statements = _POSTGRES_GUARD if engine.dialect.name == "postgresql" else _SQLITE_GUARD
    with engine.begin() as conn:
        for ddl in statements:
            conn.execute(text(ddl))
