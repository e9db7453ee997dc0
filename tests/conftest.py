"""Pytest configuration to ensure the `src` package layout is importable.

This adds the `src/` directory to `sys.path` so tests can import the
`mundamanager` package (e.g., `from mundamanager.api.app import create_app`)
without requiring an editable install in CI. It also provides the shared
database, cache and catalog fixtures used by the service tests.
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from sqlalchemy import create_engine, select  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from mundamanager.cache import TagCache  # noqa: E402
from mundamanager.config import Settings  # noqa: E402
from mundamanager.domain.enums import UserRole  # noqa: E402
from mundamanager.factory import create_all_services  # noqa: E402
from mundamanager.models import (  # noqa: E402
    Base,
    EffectType,
    Equipment,
    FighterType,
    GangType,
    Skill,
    Territory,
    VehicleType,
)
from mundamanager.models.seed_data import seed_catalog  # noqa: E402
from mundamanager.services.financials import recalculate_gang_financials  # noqa: E402
from mundamanager.services.permissions import register_profile  # noqa: E402


class CatalogLookup:
    """Resolve seeded catalog rows to ids by name."""

    def __init__(self, session):
        self.session = session

    def _id(self, column, name):
        return self.session.execute(select(column.class_.id).where(column == name)).scalar_one()

    def gang_type(self, name):
        return self._id(GangType.name, name)

    def fighter_type(self, name):
        return self._id(FighterType.name, name)

    def equipment(self, name):
        return self._id(Equipment.equipment_name, name)

    def vehicle_type(self, name):
        return self._id(VehicleType.vehicle_type, name)

    def skill(self, name):
        return self._id(Skill.name, name)

    def effect_type(self, name):
        return self._id(EffectType.effect_name, name)

    def territory(self, name):
        return self._id(Territory.territory_name, name)


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Create a new database session for testing."""
    sessionmaker_class = sessionmaker(bind=engine)
    session = sessionmaker_class()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def cache():
    return TagCache()


@pytest.fixture
def settings():
    return Settings(starting_credits=1000, starting_reputation=1)


@pytest.fixture
def catalog(session):
    """Seed the starter catalog and return a name -> id lookup."""
    seed_catalog(session)
    return CatalogLookup(session)


@pytest.fixture
def profiles(session, cache):
    """Two players and an admin."""
    register_profile(session, cache, "user-1", "Alice")
    register_profile(session, cache, "user-2", "Bob")
    register_profile(session, cache, "admin-1", "Root", user_role=UserRole.ADMIN)
    return ["user-1", "user-2", "admin-1"]


@pytest.fixture
def services(session, cache, settings, catalog, profiles):  # noqa: ARG001
    return create_all_services(session, cache, settings)


@pytest.fixture
def gang(services, catalog):
    """A fresh House Goliath gang owned by user-1 with 1000 credits."""
    return services["gangs"].create_gang(
        "user-1", "Iron Fists", catalog.gang_type("House Goliath")
    )


@pytest.fixture
def assert_balanced(session, cache):
    """Return a checker that the stored rating and wealth match a full rebuild."""

    def check(gang_id):
        session.expire_all()
        result = recalculate_gang_financials(session, cache, gang_id, persist=False)
        assert result.rating_drift == 0, result
        assert result.wealth_drift == 0, result
        return result

    return check
