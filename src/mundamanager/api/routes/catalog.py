"""Read-only catalog listings."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from mundamanager.api.dependencies import CatalogServiceDep
from mundamanager.schemas import (
    EffectTypeRead,
    EquipmentRead,
    FighterTypeRead,
    GangTypeRead,
    SkillRead,
    TerritoryRead,
    VehicleTypeRead,
)

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/gang-types", response_model=list[GangTypeRead])
def list_gang_types(catalog: CatalogServiceDep) -> list[dict[str, Any]]:
    return catalog.list_gang_types()


@router.get("/fighter-types", response_model=list[FighterTypeRead])
def list_fighter_types(
    catalog: CatalogServiceDep, gang_type_id: int | None = None
) -> list[dict[str, Any]]:
    return catalog.list_fighter_types(gang_type_id)


@router.get("/equipment", response_model=list[EquipmentRead])
def list_equipment(
    catalog: CatalogServiceDep, equipment_type: str | None = None
) -> list[dict[str, Any]]:
    return catalog.list_equipment(equipment_type)


@router.get("/vehicle-types", response_model=list[VehicleTypeRead])
def list_vehicle_types(catalog: CatalogServiceDep) -> list[dict[str, Any]]:
    return catalog.list_vehicle_types()


@router.get("/skills", response_model=list[SkillRead])
def list_skills(catalog: CatalogServiceDep) -> list[dict[str, Any]]:
    return catalog.list_skills()


@router.get("/effect-types", response_model=list[EffectTypeRead])
def list_effect_types(
    catalog: CatalogServiceDep, category: str | None = None
) -> list[dict[str, Any]]:
    return catalog.list_effect_types(category)


@router.get("/territories", response_model=list[TerritoryRead])
def list_territories(catalog: CatalogServiceDep) -> list[dict[str, Any]]:
    return catalog.list_territories()
