"""Runtime primitives backing the Munda Manager HTTP API."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session, sessionmaker

from mundamanager.cache import TagCache, get_cache
from mundamanager.config import Settings, get_settings
from mundamanager.database import check_database_health, create_db_engine, init_db
from mundamanager.models.seed_data import seed_catalog

logger = logging.getLogger(__name__)


class ApiState:
    """Engine, session factory and cache shared by the FastAPI layer."""

    def __init__(
        self, *, settings: Settings | None = None, cache: TagCache | None = None
    ) -> None:
        self.settings = settings or get_settings()
        self.engine = create_db_engine(self.settings)
        self.session_factory: sessionmaker[Session] = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )
        self.cache = cache if cache is not None else get_cache()

    def startup(self) -> None:
        """Create missing tables and, when enabled, seed the catalog."""

        init_db(self.engine)
        if self.settings.seed_catalog:
            with self.session_factory() as session:
                seed_catalog(session)
        logger.info("api state ready on %s", self.engine.url.render_as_string())

    def healthy(self) -> bool:
        return check_database_health(self.engine)

    async def shutdown(self) -> None:
        self.engine.dispose()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
