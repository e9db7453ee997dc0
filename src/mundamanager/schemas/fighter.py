from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mundamanager.domain.enums import FighterStatusAction
from mundamanager.schemas.gang import FinancialUpdateRead


class FighterCreate(BaseModel):
    fighter_type_id: int = Field(..., description="Foreign key to the fighter type")
    fighter_name: str = Field(..., min_length=1, max_length=100, description="Fighter name")
    cost: int | None = Field(None, ge=0, description="Credits paid; defaults to the type cost")
    use_base_cost_for_rating: bool = Field(
        default=True, description="Count the type cost toward rating instead of the payment"
    )


class FighterCopy(BaseModel):
    target_gang_id: int | None = Field(None, description="Receiving gang; defaults to its own")
    new_name: str | None = Field(None, max_length=100, description="Name of the copy")
    charge_credits: bool = Field(default=False, description="Pay for the copy from credits")


class FighterUpdate(BaseModel):
    fighter_name: str | None = Field(None, max_length=100)
    label: str | None = Field(None, max_length=5)
    kills: int | None = Field(None, ge=0)
    cost_adjustment: int | None = None
    note: str | None = None
    special_rules: list[str] | None = None


class FighterXpUpdate(BaseModel):
    xp_to_add: int = Field(..., description="XP to add (negative to remove)")
    ooa_count: int = Field(default=0, ge=0, description="Out-of-action results added to kills")


class FighterStatusUpdate(BaseModel):
    action: FighterStatusAction
    sell_value: int | None = Field(None, ge=0, description="Credits received when selling")


class FighterRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Primary key")
    gang_id: int
    fighter_type_id: int
    fighter_name: str
    label: str | None = None
    fighter_class: str
    credits: int
    cost_adjustment: int
    xp: int
    kills: int
    killed: bool
    retired: bool
    enslaved: bool
    starved: bool
    recovery: bool
    captured: bool
    note: str | None = None
    special_rules: list[str] = Field(default_factory=list)
    stats: dict[str, Any] = Field(default_factory=dict)


class FighterEquipmentRead(BaseModel):
    id: int
    equipment_id: int
    equipment_name: str
    equipment_type: str
    purchase_cost: int
    is_master_crafted: bool


class FighterSkillRead(BaseModel):
    id: int
    skill_id: int
    skill_name: str
    xp_cost: int
    credits_increase: int
    is_advance: bool


class FighterEffectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    effect_name: str
    category: str
    credits_increase: int
    xp_cost: int
    fighter_equipment_id: int | None = None
    modifiers: dict[str, int] = Field(default_factory=dict)


class OwnedBeastRead(BaseModel):
    beast_id: int
    fighter_name: str
    fighter_equipment_id: int
    cost: int


class FighterDetail(FighterRead):
    total_cost: int
    effective_stats: dict[str, Any]
    is_owned_beast: bool
    owner_id: int | None = None
    vehicle_id: int | None = None
    equipment: list[FighterEquipmentRead] = Field(default_factory=list)
    skills: list[FighterSkillRead] = Field(default_factory=list)
    effects: list[FighterEffectRead] = Field(default_factory=list)
    owned_beasts: list[OwnedBeastRead] = Field(default_factory=list)


class AddFighterRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fighter: FighterRead
    financials: FinancialUpdateRead


class XpChangeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fighter_id: int
    old_xp: int
    new_xp: int
    old_kills: int
    new_kills: int


class StatusChangeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fighter_id: int
    action: FighterStatusAction
    deleted: bool
    fighter: FighterRead | None = None
    financials: FinancialUpdateRead


class SkillCreate(BaseModel):
    skill_id: int
    xp_cost: int = Field(default=0, ge=0)
    credits_increase: int = 0
    is_advance: bool = False


class CharacteristicAdvancementCreate(BaseModel):
    stat: str = Field(..., description="Characteristic to improve, e.g. 'weapon_skill'")
    xp_cost: int = Field(default=0, ge=0)
    credits_increase: int = 0


class InjuryCreate(BaseModel):
    effect_type_id: int
    send_to_recovery: bool | None = Field(
        None, description="Override the injury type's recovery behaviour"
    )


class EffectCreate(BaseModel):
    effect_type_id: int
    fighter_equipment_id: int | None = Field(
        None, description="Attach the effect to one of the fighter's items"
    )


class AdvancementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fighter_id: int
    record_id: int = Field(..., description="Skill or effect row added or removed")
    advancement_type: str
    xp_remaining: int
    recovery: bool = False
    financials: FinancialUpdateRead


class LoadoutCreate(BaseModel):
    loadout_name: str = Field(..., min_length=1, max_length=100)
    equipment_ids: list[int] = Field(default_factory=list)


class ActiveLoadoutUpdate(BaseModel):
    loadout_id: int | None = Field(None, description="Loadout to activate; None clears it")


class LoadoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    fighter_id: int
    loadout_name: str
    is_active: bool
    equipment_ids: list[int]
    loadout_cost: int = Field(..., description="Display cost counting only this loadout")
