"""Fighter routes: recruitment, details, XP, status, advancements and loadouts."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from mundamanager.api.dependencies import (
    AdvancementServiceDep,
    CurrentUser,
    FighterServiceDep,
    LoadoutServiceDep,
)
from mundamanager.schemas import (
    ActiveLoadoutUpdate,
    AddFighterRead,
    AdvancementRead,
    CharacteristicAdvancementCreate,
    EffectCreate,
    FighterCopy,
    FighterCreate,
    FighterDetail,
    FighterRead,
    FighterStatusUpdate,
    FighterUpdate,
    FighterXpUpdate,
    InjuryCreate,
    LoadoutCreate,
    LoadoutRead,
    SkillCreate,
    StatusChangeRead,
    XpChangeRead,
)

router = APIRouter(tags=["fighters"])


@router.post(
    "/gangs/{gang_id}/fighters",
    response_model=AddFighterRead,
    status_code=status.HTTP_201_CREATED,
)
def add_fighter(
    gang_id: int, request: FighterCreate, user_id: CurrentUser, fighters: FighterServiceDep
) -> AddFighterRead:
    result = fighters.add_fighter(
        gang_id,
        user_id,
        request.fighter_type_id,
        request.fighter_name,
        cost=request.cost,
        use_base_cost_for_rating=request.use_base_cost_for_rating,
    )
    return AddFighterRead.model_validate(result)


@router.post(
    "/fighters/{fighter_id}/copy",
    response_model=AddFighterRead,
    status_code=status.HTTP_201_CREATED,
)
def copy_fighter(
    fighter_id: int, request: FighterCopy, user_id: CurrentUser, fighters: FighterServiceDep
) -> AddFighterRead:
    result = fighters.copy_fighter(
        fighter_id,
        user_id,
        target_gang_id=request.target_gang_id,
        new_name=request.new_name,
        charge_credits=request.charge_credits,
    )
    return AddFighterRead.model_validate(result)


@router.get("/fighters/{fighter_id}", response_model=FighterDetail)
def get_fighter(fighter_id: int, fighters: FighterServiceDep) -> dict[str, Any]:
    return fighters.detail(fighter_id)


@router.patch("/fighters/{fighter_id}", response_model=FighterRead)
def update_fighter(
    fighter_id: int, request: FighterUpdate, user_id: CurrentUser, fighters: FighterServiceDep
) -> FighterRead:
    fighter = fighters.update_details(fighter_id, user_id, request)
    return FighterRead.model_validate(fighter)


@router.post("/fighters/{fighter_id}/xp", response_model=XpChangeRead)
def update_xp(
    fighter_id: int, request: FighterXpUpdate, user_id: CurrentUser, fighters: FighterServiceDep
) -> XpChangeRead:
    result = fighters.update_xp(fighter_id, user_id, request.xp_to_add, request.ooa_count)
    return XpChangeRead.model_validate(result)


@router.post("/fighters/{fighter_id}/status", response_model=StatusChangeRead)
def change_status(
    fighter_id: int,
    request: FighterStatusUpdate,
    user_id: CurrentUser,
    fighters: FighterServiceDep,
) -> StatusChangeRead:
    result = fighters.change_status(
        fighter_id, user_id, request.action, sell_value=request.sell_value
    )
    return StatusChangeRead.model_validate(result)


@router.post(
    "/fighters/{fighter_id}/skills",
    response_model=AdvancementRead,
    status_code=status.HTTP_201_CREATED,
)
def add_skill(
    fighter_id: int,
    request: SkillCreate,
    user_id: CurrentUser,
    advancements: AdvancementServiceDep,
) -> AdvancementRead:
    result = advancements.add_skill(
        fighter_id,
        user_id,
        request.skill_id,
        xp_cost=request.xp_cost,
        credits_increase=request.credits_increase,
        is_advance=request.is_advance,
    )
    return AdvancementRead.model_validate(result)


@router.delete("/fighter-skills/{fighter_skill_id}", response_model=AdvancementRead)
def remove_skill(
    fighter_skill_id: int, user_id: CurrentUser, advancements: AdvancementServiceDep
) -> AdvancementRead:
    return AdvancementRead.model_validate(advancements.remove_skill(fighter_skill_id, user_id))


@router.post(
    "/fighters/{fighter_id}/characteristics",
    response_model=AdvancementRead,
    status_code=status.HTTP_201_CREATED,
)
def add_characteristic(
    fighter_id: int,
    request: CharacteristicAdvancementCreate,
    user_id: CurrentUser,
    advancements: AdvancementServiceDep,
) -> AdvancementRead:
    result = advancements.add_characteristic_advancement(
        fighter_id,
        user_id,
        request.stat,
        xp_cost=request.xp_cost,
        credits_increase=request.credits_increase,
    )
    return AdvancementRead.model_validate(result)


@router.post(
    "/fighters/{fighter_id}/effects",
    response_model=AdvancementRead,
    status_code=status.HTTP_201_CREATED,
)
def add_effect(
    fighter_id: int,
    request: EffectCreate,
    user_id: CurrentUser,
    advancements: AdvancementServiceDep,
) -> AdvancementRead:
    result = advancements.add_effect(
        fighter_id,
        user_id,
        request.effect_type_id,
        fighter_equipment_id=request.fighter_equipment_id,
    )
    return AdvancementRead.model_validate(result)


@router.post(
    "/fighters/{fighter_id}/injuries",
    response_model=AdvancementRead,
    status_code=status.HTTP_201_CREATED,
)
def add_injury(
    fighter_id: int,
    request: InjuryCreate,
    user_id: CurrentUser,
    advancements: AdvancementServiceDep,
) -> AdvancementRead:
    result = advancements.add_injury(
        fighter_id, user_id, request.effect_type_id, send_to_recovery=request.send_to_recovery
    )
    return AdvancementRead.model_validate(result)


@router.delete("/fighter-effects/{effect_id}", response_model=AdvancementRead)
def remove_effect(
    effect_id: int, user_id: CurrentUser, advancements: AdvancementServiceDep
) -> AdvancementRead:
    return AdvancementRead.model_validate(advancements.remove_effect(effect_id, user_id))


@router.get("/fighters/{fighter_id}/loadouts", response_model=list[LoadoutRead])
def list_loadouts(fighter_id: int, loadouts: LoadoutServiceDep) -> list[LoadoutRead]:
    return [LoadoutRead.model_validate(row) for row in loadouts.list_loadouts(fighter_id)]


@router.post(
    "/fighters/{fighter_id}/loadouts",
    response_model=LoadoutRead,
    status_code=status.HTTP_201_CREATED,
)
def create_loadout(
    fighter_id: int, request: LoadoutCreate, user_id: CurrentUser, loadouts: LoadoutServiceDep
) -> LoadoutRead:
    loadout = loadouts.create_loadout(
        fighter_id, user_id, request.loadout_name, request.equipment_ids
    )
    summary = next(row for row in loadouts.list_loadouts(fighter_id) if row.id == loadout.id)
    return LoadoutRead.model_validate(summary)


@router.put("/fighters/{fighter_id}/active-loadout", response_model=list[LoadoutRead])
def set_active_loadout(
    fighter_id: int,
    request: ActiveLoadoutUpdate,
    user_id: CurrentUser,
    loadouts: LoadoutServiceDep,
) -> list[LoadoutRead]:
    loadouts.set_active_loadout(fighter_id, user_id, request.loadout_id)
    return [LoadoutRead.model_validate(row) for row in loadouts.list_loadouts(fighter_id)]


@router.delete("/loadouts/{loadout_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_loadout(loadout_id: int, user_id: CurrentUser, loadouts: LoadoutServiceDep) -> None:
    loadouts.delete_loadout(loadout_id, user_id)
