from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mundamanager.domain.enums import CreditsOperation


class GangCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Gang name")
    gang_type_id: int = Field(..., description="Foreign key to the gang type")
    gang_colour: str | None = Field(None, max_length=20, description="Display colour")
    alignment: str | None = Field(
        None, description="'Law Abiding' or 'Outlaw'; defaults to the gang type's alignment"
    )


class GangCopy(BaseModel):
    new_name: str | None = Field(None, max_length=100, description="Name of the new gang")


class GangUpdate(BaseModel):
    name: str | None = Field(None, max_length=100)
    note: str | None = None
    gang_colour: str | None = Field(None, max_length=20)
    alignment: str | None = None
    meat: int | None = Field(None, ge=0)
    scavenging_rolls: int | None = Field(None, ge=0)
    exploration_points: int | None = Field(None, ge=0)
    credits: int | None = Field(None, ge=0, description="Amount to add or subtract")
    credits_operation: CreditsOperation | None = None
    reputation: int | None = Field(None, ge=0, description="Amount to add or subtract")
    reputation_operation: CreditsOperation | None = None


class GangRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Primary key")
    user_id: str = Field(..., description="Owning user")
    name: str
    gang_type_id: int
    gang_colour: str | None = None
    alignment: str | None = None
    credits: int = Field(..., description="Unspent credits")
    reputation: int
    rating: int = Field(..., description="Summed cost of fighters counting toward rating")
    wealth: int = Field(..., description="Rating + credits + stash + unassigned vehicles")
    meat: int
    scavenging_rolls: int
    exploration_points: int
    note: str | None = None
    positioning: dict[str, Any] = Field(default_factory=dict)


class GangFighterSummary(BaseModel):
    id: int
    fighter_name: str
    label: str | None = None
    fighter_class: str
    fighter_type_id: int
    xp: int
    kills: int
    killed: bool
    retired: bool
    enslaved: bool
    starved: bool
    recovery: bool
    captured: bool
    is_owned_beast: bool
    total_cost: int


class GangVehicleSummary(BaseModel):
    id: int
    vehicle_name: str
    fighter_id: int | None = None
    total_cost: int


class StashItemSummary(BaseModel):
    id: int
    equipment_id: int
    equipment_name: str
    purchase_cost: int


class GangCampaignSummary(BaseModel):
    campaign_id: int
    campaign_name: str
    status: str
    allegiance: str | None = None


class GangDetail(GangRead):
    gang_type: str
    stash_value: int
    fighters: list[GangFighterSummary] = Field(default_factory=list)
    vehicles: list[GangVehicleSummary] = Field(default_factory=list)
    stash: list[StashItemSummary] = Field(default_factory=list)
    campaigns: list[GangCampaignSummary] = Field(default_factory=list)


class PositioningUpdate(BaseModel):
    positions: dict[int, int] = Field(..., description="Slot index -> fighter id")


class FinancialsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    credits: int
    rating: int
    wealth: int


class FinancialUpdateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    old_values: FinancialsRead | None = None
    new_values: FinancialsRead | None = None


class RecalculationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stored: FinancialsRead
    recalculated: FinancialsRead
    rating_drift: int
    wealth_drift: int


class GangUpdateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gang: GangRead
    changed_fields: list[str]
    financials: FinancialUpdateRead


class GangLogCreate(BaseModel):
    description: str = Field(..., min_length=1, description="Free-text log entry")


class GangLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    gang_id: int
    user_id: str | None = None
    action_type: str
    description: str
    fighter_id: int | None = None
    vehicle_id: int | None = None
    created_at: datetime
