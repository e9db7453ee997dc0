"""Catalog Service for Munda Manager.

Read-only access to the seeded reference data. Every listing is cached under
its ``global-*`` tag as plain dictionaries so cached values never hold on to
a database session.
"""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from mundamanager.cache import CacheTag, TagCache
from mundamanager.models import (
    EffectType,
    Equipment,
    FighterType,
    GangType,
    Skill,
    Territory,
    VehicleType,
)
from mundamanager.schemas.catalog import (
    EffectTypeRead,
    EquipmentRead,
    FighterTypeRead,
    GangTypeRead,
    SkillRead,
    TerritoryRead,
    VehicleTypeRead,
)


class CatalogService:
    """Cached catalog listings."""

    def __init__(self, session: Session, cache: TagCache):
        self.session = session
        self.cache = cache

    def _cached(
        self, key: str, tag: CacheTag, schema: type[BaseModel], query: Callable[[], Any]
    ) -> list[dict[str, Any]]:
        def build() -> list[dict[str, Any]]:
            rows = self.session.execute(query()).scalars()
            return [schema.model_validate(row).model_dump() for row in rows]

        return self.cache.get_or_set(key, [tag.tag()], build)

    def list_gang_types(self) -> list[dict[str, Any]]:
        return self._cached(
            "catalog:gang-types",
            CacheTag.GLOBAL_GANG_TYPES,
            GangTypeRead,
            lambda: select(GangType).order_by(GangType.name),
        )

    def list_fighter_types(self, gang_type_id: int | None = None) -> list[dict[str, Any]]:
        """Fighter types; for a gang type, its own plus those any gang can recruit."""

        def query():
            stmt = select(FighterType).order_by(FighterType.cost.desc(), FighterType.name)
            if gang_type_id is not None:
                stmt = stmt.where(
                    or_(
                        FighterType.gang_type_id == gang_type_id,
                        FighterType.gang_type_id.is_(None),
                    )
                )
            return stmt

        return self._cached(
            f"catalog:fighter-types:{gang_type_id if gang_type_id is not None else 'all'}",
            CacheTag.GLOBAL_FIGHTER_TYPES,
            FighterTypeRead,
            query,
        )

    def list_equipment(self, equipment_type: str | None = None) -> list[dict[str, Any]]:
        def query():
            stmt = select(Equipment).order_by(Equipment.equipment_type, Equipment.equipment_name)
            if equipment_type is not None:
                stmt = stmt.where(Equipment.equipment_type == equipment_type)
            return stmt

        return self._cached(
            f"catalog:equipment:{equipment_type or 'all'}",
            CacheTag.GLOBAL_EQUIPMENT_CATALOG,
            EquipmentRead,
            query,
        )

    def list_vehicle_types(self) -> list[dict[str, Any]]:
        return self._cached(
            "catalog:vehicle-types",
            CacheTag.GLOBAL_VEHICLE_TYPES,
            VehicleTypeRead,
            lambda: select(VehicleType).order_by(VehicleType.vehicle_type),
        )

    def list_skills(self) -> list[dict[str, Any]]:
        return self._cached(
            "catalog:skills",
            CacheTag.GLOBAL_SKILL_CATEGORIES,
            SkillRead,
            lambda: select(Skill).order_by(Skill.skill_type, Skill.name),
        )

    def list_effect_types(self, category: str | None = None) -> list[dict[str, Any]]:
        def query():
            stmt = select(EffectType).order_by(EffectType.category, EffectType.effect_name)
            if category is not None:
                stmt = stmt.where(EffectType.category == category)
            return stmt

        return self._cached(
            f"catalog:effect-types:{category or 'all'}",
            CacheTag.GLOBAL_EFFECT_TYPES,
            EffectTypeRead,
            query,
        )

    def list_territories(self) -> list[dict[str, Any]]:
        return self._cached(
            "catalog:territories",
            CacheTag.GLOBAL_TERRITORIES_LIST,
            TerritoryRead,
            lambda: select(Territory).order_by(Territory.territory_name),
        )
