from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GangTypeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    alignment: str | None = None


class FighterTypeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    gang_type_id: int | None = None
    name: str
    fighter_class: str
    cost: int
    is_exotic_beast: bool
    stats: dict[str, Any] = Field(default_factory=dict)
    special_rules: list[str] = Field(default_factory=list)


class EquipmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    equipment_name: str
    equipment_type: str
    cost: int
    grants_beast_type_id: int | None = None


class VehicleTypeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    vehicle_type: str
    cost: int
    movement: int
    front: int
    side: int
    rear: int
    hull_points: int
    handling: int
    save: int
    body_slots: int
    drive_slots: int
    engine_slots: int
    special_rules: list[str] = Field(default_factory=list)


class SkillRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    skill_type: str


class EffectTypeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    effect_name: str
    category: str
    credits_increase: int
    modifiers: dict[str, int] = Field(default_factory=dict)
    sends_to_recovery: bool


class TerritoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    territory_name: str
