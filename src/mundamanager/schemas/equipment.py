from pydantic import BaseModel, ConfigDict, Field

from mundamanager.schemas.gang import FinancialUpdateRead


class EquipmentPurchase(BaseModel):
    gang_id: int = Field(..., description="Buying gang")
    equipment_id: int = Field(..., description="Catalog item")
    fighter_id: int | None = Field(None, description="Fighter receiving the item")
    vehicle_id: int | None = Field(None, description="Vehicle receiving the item")
    manual_cost: int | None = Field(None, ge=0, description="Credits paid instead of the list cost")
    master_crafted: bool = False
    use_base_cost_for_rating: bool = True


class EquipmentSale(BaseModel):
    manual_cost: int | None = Field(None, ge=0, description="Credits received")


class StashMove(BaseModel):
    fighter_id: int | None = None
    vehicle_id: int | None = None


class OwnedEquipmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    gang_id: int
    fighter_id: int | None = None
    vehicle_id: int | None = None
    gang_stash: bool
    equipment_id: int
    purchase_cost: int
    original_cost: int
    is_master_crafted: bool


class PurchaseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item: OwnedEquipmentRead
    created_beast_ids: list[int] = Field(default_factory=list)
    financials: FinancialUpdateRead


class EquipmentChangeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    equipment_id: int
    credits_received: int = 0
    deleted_beast_ids: list[int] = Field(default_factory=list)
    created_beast_ids: list[int] = Field(default_factory=list)
    financials: FinancialUpdateRead
