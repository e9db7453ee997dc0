"""Request-scoped dependencies: state, session, acting user and services."""

from __future__ import annotations

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from mundamanager.api.runtime import ApiState
from mundamanager.factory import (
    create_advancement_service,
    create_campaign_service,
    create_catalog_service,
    create_equipment_service,
    create_fighter_service,
    create_gang_service,
    create_loadout_service,
    create_vehicle_service,
)
from mundamanager.services import (
    AdvancementService,
    CampaignService,
    CatalogService,
    EquipmentService,
    FighterService,
    GangService,
    LoadoutService,
    VehicleService,
)


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


def get_session(state: ApiStateDep) -> Generator[Session]:
    session = state.session_factory()
    try:
        yield session
    finally:
        session.close()


SessionDep = Annotated[Session, Depends(get_session)]


def get_current_user(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """The authenticated user's id, forwarded by the auth proxy."""

    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header"
        )
    return x_user_id


CurrentUser = Annotated[str, Depends(get_current_user)]


def gang_service(session: SessionDep, state: ApiStateDep) -> GangService:
    return create_gang_service(session, state.cache, state.settings)


def fighter_service(session: SessionDep, state: ApiStateDep) -> FighterService:
    return create_fighter_service(session, state.cache)


def equipment_service(session: SessionDep, state: ApiStateDep) -> EquipmentService:
    return create_equipment_service(session, state.cache)


def vehicle_service(session: SessionDep, state: ApiStateDep) -> VehicleService:
    return create_vehicle_service(session, state.cache)


def advancement_service(session: SessionDep, state: ApiStateDep) -> AdvancementService:
    return create_advancement_service(session, state.cache)


def loadout_service(session: SessionDep, state: ApiStateDep) -> LoadoutService:
    return create_loadout_service(session, state.cache)


def campaign_service(session: SessionDep, state: ApiStateDep) -> CampaignService:
    return create_campaign_service(session, state.cache)


def catalog_service(session: SessionDep, state: ApiStateDep) -> CatalogService:
    return create_catalog_service(session, state.cache)


GangServiceDep = Annotated[GangService, Depends(gang_service)]
FighterServiceDep = Annotated[FighterService, Depends(fighter_service)]
EquipmentServiceDep = Annotated[EquipmentService, Depends(equipment_service)]
VehicleServiceDep = Annotated[VehicleService, Depends(vehicle_service)]
AdvancementServiceDep = Annotated[AdvancementService, Depends(advancement_service)]
LoadoutServiceDep = Annotated[LoadoutService, Depends(loadout_service)]
CampaignServiceDep = Annotated[CampaignService, Depends(campaign_service)]
CatalogServiceDep = Annotated[CatalogService, Depends(catalog_service)]
