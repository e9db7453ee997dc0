"""Campaign routes: membership, gangs, territories, battles and standings."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from mundamanager.api.dependencies import CampaignServiceDep, CurrentUser
from mundamanager.schemas import (
    BattleCreate,
    BattleRead,
    BattleUpdate,
    CampaignCreate,
    CampaignDetail,
    CampaignGangCreate,
    CampaignGangRead,
    CampaignRead,
    CampaignTerritoryRead,
    CampaignUpdate,
    LeaderboardEntry,
    MemberCreate,
    MemberRead,
    MemberRoleUpdate,
    TerritoryAssignment,
    TerritoryCreate,
    TerritoryStatusUpdate,
)

router = APIRouter(tags=["campaigns"])


@router.get("/campaigns", response_model=list[CampaignRead])
def list_my_campaigns(user_id: CurrentUser, campaigns: CampaignServiceDep) -> list[CampaignRead]:
    return [CampaignRead.model_validate(c) for c in campaigns.list_user_campaigns(user_id)]


@router.post("/campaigns", response_model=CampaignRead, status_code=status.HTTP_201_CREATED)
def create_campaign(
    request: CampaignCreate, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> CampaignRead:
    campaign = campaigns.create_campaign(user_id, request.campaign_name, request.description)
    return CampaignRead.model_validate(campaign)


@router.get("/campaigns/{campaign_id}", response_model=CampaignDetail)
def get_campaign(campaign_id: int, campaigns: CampaignServiceDep) -> dict[str, Any]:
    return campaigns.detail(campaign_id)


@router.patch("/campaigns/{campaign_id}", response_model=CampaignRead)
def update_campaign(
    campaign_id: int, request: CampaignUpdate, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> CampaignRead:
    return CampaignRead.model_validate(campaigns.update_campaign(campaign_id, user_id, request))


@router.delete("/campaigns/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_campaign(campaign_id: int, user_id: CurrentUser, campaigns: CampaignServiceDep) -> None:
    campaigns.delete_campaign(campaign_id, user_id)


@router.post(
    "/campaigns/{campaign_id}/members",
    response_model=MemberRead,
    status_code=status.HTTP_201_CREATED,
)
def add_member(
    campaign_id: int, request: MemberCreate, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> MemberRead:
    member = campaigns.add_member(campaign_id, user_id, request.user_id, request.role)
    return MemberRead.model_validate(member)


@router.patch("/campaigns/{campaign_id}/members/{member_user_id}", response_model=MemberRead)
def change_member_role(
    campaign_id: int,
    member_user_id: str,
    request: MemberRoleUpdate,
    user_id: CurrentUser,
    campaigns: CampaignServiceDep,
) -> MemberRead:
    member = campaigns.change_member_role(campaign_id, user_id, member_user_id, request.role)
    return MemberRead.model_validate(member)


@router.delete(
    "/campaigns/{campaign_id}/members/{member_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remove_member(
    campaign_id: int, member_user_id: str, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> None:
    campaigns.remove_member(campaign_id, user_id, member_user_id)


@router.post(
    "/campaigns/{campaign_id}/gangs",
    response_model=CampaignGangRead,
    status_code=status.HTTP_201_CREATED,
)
def add_gang(
    campaign_id: int,
    request: CampaignGangCreate,
    user_id: CurrentUser,
    campaigns: CampaignServiceDep,
) -> CampaignGangRead:
    entry = campaigns.add_gang_to_campaign(
        campaign_id, user_id, request.gang_id, request.allegiance
    )
    return CampaignGangRead.model_validate(entry)


@router.post("/campaign-gangs/{campaign_gang_id}/accept", response_model=CampaignGangRead)
def accept_invite(
    campaign_gang_id: int, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> CampaignGangRead:
    entry = campaigns.accept_campaign_invite(campaign_gang_id, user_id)
    return CampaignGangRead.model_validate(entry)


@router.delete("/campaign-gangs/{campaign_gang_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_gang(
    campaign_gang_id: int, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> None:
    campaigns.remove_gang_from_campaign(campaign_gang_id, user_id)


@router.post(
    "/campaigns/{campaign_id}/territories",
    response_model=CampaignTerritoryRead,
    status_code=status.HTTP_201_CREATED,
)
def add_territory(
    campaign_id: int,
    request: TerritoryCreate,
    user_id: CurrentUser,
    campaigns: CampaignServiceDep,
) -> CampaignTerritoryRead:
    territory = campaigns.add_territory(
        campaign_id,
        user_id,
        territory_id=request.territory_id,
        territory_name=request.territory_name,
    )
    return CampaignTerritoryRead.model_validate(territory)


@router.patch("/campaign-territories/{territory_id}", response_model=CampaignTerritoryRead)
def update_territory(
    territory_id: int,
    request: TerritoryStatusUpdate,
    user_id: CurrentUser,
    campaigns: CampaignServiceDep,
) -> CampaignTerritoryRead:
    territory = campaigns.update_territory_status(
        territory_id,
        user_id,
        ruined=request.ruined,
        default_gang_territory=request.default_gang_territory,
    )
    return CampaignTerritoryRead.model_validate(territory)


@router.delete("/campaign-territories/{territory_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_territory(
    territory_id: int, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> None:
    campaigns.remove_territory(territory_id, user_id)


@router.put("/campaign-territories/{territory_id}/gang", response_model=CampaignTerritoryRead)
def assign_territory(
    territory_id: int,
    request: TerritoryAssignment,
    user_id: CurrentUser,
    campaigns: CampaignServiceDep,
) -> CampaignTerritoryRead:
    territory = campaigns.assign_territory(territory_id, user_id, request.gang_id)
    return CampaignTerritoryRead.model_validate(territory)


@router.delete("/campaign-territories/{territory_id}/gang", response_model=CampaignTerritoryRead)
def unassign_territory(
    territory_id: int, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> CampaignTerritoryRead:
    territory = campaigns.unassign_territory(territory_id, user_id)
    return CampaignTerritoryRead.model_validate(territory)


@router.get("/campaigns/{campaign_id}/battles", response_model=list[BattleRead])
def list_battles(campaign_id: int, campaigns: CampaignServiceDep) -> list[BattleRead]:
    return [BattleRead.model_validate(b) for b in campaigns.list_battles(campaign_id)]


@router.post(
    "/campaigns/{campaign_id}/battles",
    response_model=BattleRead,
    status_code=status.HTTP_201_CREATED,
)
def create_battle(
    campaign_id: int, request: BattleCreate, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> BattleRead:
    return BattleRead.model_validate(campaigns.create_battle(campaign_id, user_id, request))


@router.patch("/battles/{battle_id}", response_model=BattleRead)
def update_battle(
    battle_id: int, request: BattleUpdate, user_id: CurrentUser, campaigns: CampaignServiceDep
) -> BattleRead:
    return BattleRead.model_validate(campaigns.update_battle(battle_id, user_id, request))


@router.delete("/battles/{battle_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_battle(battle_id: int, user_id: CurrentUser, campaigns: CampaignServiceDep) -> None:
    campaigns.delete_battle(battle_id, user_id)


@router.get("/campaigns/{campaign_id}/leaderboard", response_model=list[LeaderboardEntry])
def leaderboard(campaign_id: int, campaigns: CampaignServiceDep) -> list[LeaderboardEntry]:
    return [LeaderboardEntry.model_validate(row) for row in campaigns.leaderboard(campaign_id)]
