from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mundamanager.schemas.gang import FinancialUpdateRead


class VehicleCreate(BaseModel):
    vehicle_type_id: int = Field(..., description="Foreign key to the vehicle type")
    cost: int | None = Field(None, ge=0, description="Credits paid; defaults to the type cost")
    vehicle_name: str | None = Field(None, max_length=100)
    base_cost: int | None = Field(
        None, ge=0, description="Value counted for the vehicle; defaults to the payment"
    )


class VehicleUpdate(BaseModel):
    vehicle_name: str | None = Field(None, max_length=100)
    special_rules: list[str] | None = None


class VehicleAssignment(BaseModel):
    fighter_id: int


class VehicleSale(BaseModel):
    manual_cost: int | None = Field(None, ge=0)


class VehicleDamageCreate(BaseModel):
    effect_type_id: int


class VehicleRepair(BaseModel):
    effect_ids: list[int] = Field(..., min_length=1)
    repair_cost: int = Field(default=0, ge=0)


class VehicleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    gang_id: int
    fighter_id: int | None = None
    vehicle_type_id: int
    vehicle_name: str
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


class VehicleEffectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    effect_name: str
    category: str
    credits_increase: int
    modifiers: dict[str, int] = Field(default_factory=dict)


class VehicleDetail(VehicleRead):
    total_cost: int
    effective_stats: dict[str, Any]
    equipment_ids: list[int] = Field(default_factory=list)
    effects: list[VehicleEffectRead] = Field(default_factory=list)


class VehiclePurchaseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    vehicle: VehicleRead
    financials: FinancialUpdateRead


class AssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    vehicle_id: int
    fighter_id: int | None = None
    previous_fighter_id: int | None = None
    displaced_vehicle_id: int | None = None
    financials: FinancialUpdateRead


class VehicleChangeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    vehicle_id: int
    effect_ids: list[int] = Field(default_factory=list)
    credits_delta: int = 0
    financials: FinancialUpdateRead
