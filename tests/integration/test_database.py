"""Integration tests for engine setup, schema creation and catalog seeding.

Each test runs against a throwaway SQLite file under ``tmp_path``.
"""

import pytest
from sqlalchemy.orm import sessionmaker

from mundamanager.config import Settings
from mundamanager.database import (
    check_database_health,
    count_rows,
    create_db_engine,
    get_table_names,
    init_db,
)
from mundamanager.models.seed_data import seed_catalog


@pytest.fixture
def file_engine(tmp_path):
    engine = create_db_engine(Settings(database_url=f"sqlite:///{tmp_path}/munda.db"))
    init_db(engine)
    yield engine
    engine.dispose()


def test_schema_created(file_engine):
    tables = set(get_table_names(file_engine))

    assert {
        "profiles",
        "gangs",
        "gang_logs",
        "fighters",
        "fighter_equipment",
        "vehicles",
        "campaigns",
        "campaign_battles",
    } <= tables
    assert check_database_health(file_engine)


def test_foreign_keys_enforced(file_engine):
    with file_engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1


def test_seed_catalog_is_idempotent(file_engine):
    factory = sessionmaker(bind=file_engine)

    with factory() as session:
        seed_catalog(session)
        first = {name: count_rows(session, name) for name in ("gang_types", "equipment")}
        seed_catalog(session)
        second = {name: count_rows(session, name) for name in ("gang_types", "equipment")}

    assert first == second
    assert first["gang_types"] == 3


def test_count_rows_rejects_unknown_table(file_engine):
    with sessionmaker(bind=file_engine)() as session, pytest.raises(ValueError, match="Invalid"):
        count_rows(session, "armies")
