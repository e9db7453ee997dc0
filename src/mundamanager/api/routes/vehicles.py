"""Vehicle routes: purchase, crew, damage and repairs."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from mundamanager.api.dependencies import CurrentUser, VehicleServiceDep
from mundamanager.schemas import (
    AssignmentRead,
    VehicleAssignment,
    VehicleChangeRead,
    VehicleCreate,
    VehicleDamageCreate,
    VehicleDetail,
    VehiclePurchaseRead,
    VehicleRead,
    VehicleRepair,
    VehicleSale,
    VehicleUpdate,
)

router = APIRouter(tags=["vehicles"])


@router.post(
    "/gangs/{gang_id}/vehicles",
    response_model=VehiclePurchaseRead,
    status_code=status.HTTP_201_CREATED,
)
def add_vehicle(
    gang_id: int, request: VehicleCreate, user_id: CurrentUser, vehicles: VehicleServiceDep
) -> VehiclePurchaseRead:
    result = vehicles.add_gang_vehicle(
        gang_id,
        user_id,
        request.vehicle_type_id,
        cost=request.cost,
        vehicle_name=request.vehicle_name,
        base_cost=request.base_cost,
    )
    return VehiclePurchaseRead.model_validate(result)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleDetail)
def get_vehicle(vehicle_id: int, vehicles: VehicleServiceDep) -> dict[str, Any]:
    return vehicles.detail(vehicle_id)


@router.patch("/vehicles/{vehicle_id}", response_model=VehicleRead)
def update_vehicle(
    vehicle_id: int, request: VehicleUpdate, user_id: CurrentUser, vehicles: VehicleServiceDep
) -> VehicleRead:
    vehicle = vehicles.update_vehicle(
        vehicle_id,
        user_id,
        vehicle_name=request.vehicle_name,
        special_rules=request.special_rules,
    )
    return VehicleRead.model_validate(vehicle)


@router.put("/vehicles/{vehicle_id}/crew", response_model=AssignmentRead)
def assign_crew(
    vehicle_id: int,
    request: VehicleAssignment,
    user_id: CurrentUser,
    vehicles: VehicleServiceDep,
) -> AssignmentRead:
    result = vehicles.assign_vehicle_to_fighter(vehicle_id, request.fighter_id, user_id)
    return AssignmentRead.model_validate(result)


@router.delete("/vehicles/{vehicle_id}/crew", response_model=AssignmentRead)
def unassign_crew(
    vehicle_id: int, user_id: CurrentUser, vehicles: VehicleServiceDep
) -> AssignmentRead:
    return AssignmentRead.model_validate(vehicles.unassign_vehicle(vehicle_id, user_id))


@router.post("/vehicles/{vehicle_id}/sell", response_model=VehicleChangeRead)
def sell_vehicle(
    vehicle_id: int, request: VehicleSale, user_id: CurrentUser, vehicles: VehicleServiceDep
) -> VehicleChangeRead:
    result = vehicles.sell_vehicle(vehicle_id, user_id, request.manual_cost)
    return VehicleChangeRead.model_validate(result)


@router.delete("/vehicles/{vehicle_id}", response_model=VehicleChangeRead)
def delete_vehicle(
    vehicle_id: int, user_id: CurrentUser, vehicles: VehicleServiceDep
) -> VehicleChangeRead:
    return VehicleChangeRead.model_validate(vehicles.delete_vehicle(vehicle_id, user_id))


@router.post(
    "/vehicles/{vehicle_id}/damages",
    response_model=VehicleChangeRead,
    status_code=status.HTTP_201_CREATED,
)
def add_damage(
    vehicle_id: int,
    request: VehicleDamageCreate,
    user_id: CurrentUser,
    vehicles: VehicleServiceDep,
) -> VehicleChangeRead:
    result = vehicles.add_vehicle_damage(vehicle_id, user_id, request.effect_type_id)
    return VehicleChangeRead.model_validate(result)


@router.delete("/vehicle-damages/{effect_id}", response_model=VehicleChangeRead)
def remove_damage(
    effect_id: int, user_id: CurrentUser, vehicles: VehicleServiceDep
) -> VehicleChangeRead:
    return VehicleChangeRead.model_validate(vehicles.remove_vehicle_damage(effect_id, user_id))


@router.post("/vehicles/{vehicle_id}/repairs", response_model=VehicleChangeRead)
def repair_damage(
    vehicle_id: int, request: VehicleRepair, user_id: CurrentUser, vehicles: VehicleServiceDep
) -> VehicleChangeRead:
    result = vehicles.repair_vehicle_damage(
        vehicle_id, user_id, request.effect_ids, request.repair_cost
    )
    return VehicleChangeRead.model_validate(result)
