"""Trading post and stash routes."""

from __future__ import annotations

from fastapi import APIRouter, status

from mundamanager.api.dependencies import CurrentUser, EquipmentServiceDep
from mundamanager.schemas import (
    EquipmentChangeRead,
    EquipmentPurchase,
    EquipmentSale,
    PurchaseRead,
    StashMove,
)

router = APIRouter(prefix="/equipment", tags=["equipment"])


@router.post("", response_model=PurchaseRead, status_code=status.HTTP_201_CREATED)
def buy_equipment(
    request: EquipmentPurchase, user_id: CurrentUser, equipment: EquipmentServiceDep
) -> PurchaseRead:
    result = equipment.buy_equipment(
        request.gang_id,
        user_id,
        request.equipment_id,
        fighter_id=request.fighter_id,
        vehicle_id=request.vehicle_id,
        manual_cost=request.manual_cost,
        master_crafted=request.master_crafted,
        use_base_cost_for_rating=request.use_base_cost_for_rating,
    )
    return PurchaseRead.model_validate(result)


@router.post("/{item_id}/sell", response_model=EquipmentChangeRead)
def sell_equipment(
    item_id: int, request: EquipmentSale, user_id: CurrentUser, equipment: EquipmentServiceDep
) -> EquipmentChangeRead:
    result = equipment.sell_equipment(item_id, user_id, request.manual_cost)
    return EquipmentChangeRead.model_validate(result)


@router.delete("/{item_id}", response_model=EquipmentChangeRead)
def delete_equipment(
    item_id: int, user_id: CurrentUser, equipment: EquipmentServiceDep
) -> EquipmentChangeRead:
    return EquipmentChangeRead.model_validate(equipment.delete_equipment(item_id, user_id))


@router.post("/{item_id}/stash", response_model=EquipmentChangeRead)
def move_to_stash(
    item_id: int, user_id: CurrentUser, equipment: EquipmentServiceDep
) -> EquipmentChangeRead:
    return EquipmentChangeRead.model_validate(equipment.move_to_stash(item_id, user_id))


@router.post("/{item_id}/unstash", response_model=EquipmentChangeRead)
def move_from_stash(
    item_id: int, request: StashMove, user_id: CurrentUser, equipment: EquipmentServiceDep
) -> EquipmentChangeRead:
    result = equipment.move_from_stash(
        item_id, user_id, fighter_id=request.fighter_id, vehicle_id=request.vehicle_id
    )
    return EquipmentChangeRead.model_validate(result)
