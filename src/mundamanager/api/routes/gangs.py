"""Gang routes: lifecycle, resources, logs and stash."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, status

from mundamanager.api.dependencies import CurrentUser, EquipmentServiceDep, GangServiceDep
from mundamanager.schemas import (
    GangCopy,
    GangCreate,
    GangDetail,
    GangLogCreate,
    GangLogRead,
    GangRead,
    GangUpdate,
    GangUpdateRead,
    OwnedEquipmentRead,
    PositioningUpdate,
    RecalculationRead,
)

router = APIRouter(prefix="/gangs", tags=["gangs"])


@router.get("", response_model=list[GangRead])
def list_my_gangs(user_id: CurrentUser, gangs: GangServiceDep) -> list[GangRead]:
    return [GangRead.model_validate(gang) for gang in gangs.list_user_gangs(user_id)]


@router.post("", response_model=GangRead, status_code=status.HTTP_201_CREATED)
def create_gang(request: GangCreate, user_id: CurrentUser, gangs: GangServiceDep) -> GangRead:
    gang = gangs.create_gang(
        user_id,
        request.name,
        request.gang_type_id,
        gang_colour=request.gang_colour,
        alignment=request.alignment,
    )
    return GangRead.model_validate(gang)


@router.post("/{gang_id}/copy", response_model=GangRead, status_code=status.HTTP_201_CREATED)
def copy_gang(
    gang_id: int, request: GangCopy, user_id: CurrentUser, gangs: GangServiceDep
) -> GangRead:
    return GangRead.model_validate(gangs.copy_gang(gang_id, user_id, request.new_name))


@router.get("/{gang_id}", response_model=GangDetail)
def get_gang(gang_id: int, gangs: GangServiceDep) -> dict[str, Any]:
    return gangs.overview(gang_id)


@router.patch("/{gang_id}", response_model=GangUpdateRead)
def update_gang(
    gang_id: int, request: GangUpdate, user_id: CurrentUser, gangs: GangServiceDep
) -> GangUpdateRead:
    result = gangs.update_gang(gang_id, user_id, request)
    return GangUpdateRead.model_validate(result)


@router.put("/{gang_id}/positioning", response_model=GangRead)
def update_positioning(
    gang_id: int, request: PositioningUpdate, user_id: CurrentUser, gangs: GangServiceDep
) -> GangRead:
    gang = gangs.update_positioning(gang_id, user_id, request.positions)
    return GangRead.model_validate(gang)


@router.delete("/{gang_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_gang(gang_id: int, user_id: CurrentUser, gangs: GangServiceDep) -> None:
    gangs.delete_gang(gang_id, user_id)


@router.post("/{gang_id}/recalculate", response_model=RecalculationRead)
def recalculate(gang_id: int, user_id: CurrentUser, gangs: GangServiceDep) -> RecalculationRead:
    return RecalculationRead.model_validate(gangs.recalculate_financials(gang_id, user_id))


@router.get("/{gang_id}/logs", response_model=list[GangLogRead])
def list_logs(
    gang_id: int,
    gangs: GangServiceDep,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[GangLogRead]:
    entries = gangs.list_logs(gang_id, limit=limit, offset=offset)
    return [GangLogRead.model_validate(entry) for entry in entries]


@router.post("/{gang_id}/logs", response_model=GangLogRead, status_code=status.HTTP_201_CREATED)
def add_log(
    gang_id: int, request: GangLogCreate, user_id: CurrentUser, gangs: GangServiceDep
) -> GangLogRead:
    entry = gangs.add_custom_log(gang_id, user_id, request.description)
    return GangLogRead.model_validate(entry)


@router.get("/{gang_id}/stash", response_model=list[OwnedEquipmentRead])
def list_stash(gang_id: int, equipment: EquipmentServiceDep) -> list[OwnedEquipmentRead]:
    return [OwnedEquipmentRead.model_validate(item) for item in equipment.list_stash(gang_id)]
