"""Campaign Service for Munda Manager.

This module handles campaigns and everything inside them:

- the campaign itself and its members with their roles
- gangs entered into the campaign, either directly or by invite
- territories and which gang holds them
- battle logs, whose winner claims territories
- the leaderboard

Territory and battle changes are written to the gang log of every gang
they affect.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mundamanager.cache import CacheTag, TagCache
from mundamanager.cache.invalidation import (
    invalidate_campaign_basic,
    invalidate_campaign_count,
    invalidate_campaign_member_permissions,
    invalidate_campaign_membership,
    invalidate_campaign_territory,
    invalidate_gang_permissions_for_user,
)
from mundamanager.domain.enums import (
    BattleResult,
    CampaignGangStatus,
    CampaignRole,
    CampaignStatus,
)
from mundamanager.exceptions import PermissionDeniedError
from mundamanager.models import (
    Campaign,
    CampaignBattle,
    CampaignGang,
    CampaignMember,
    CampaignTerritory,
    Gang,
    Profile,
    Territory,
)
from mundamanager.schemas.campaign import (
    BattleCreate,
    BattleUpdate,
    CampaignDetail,
    CampaignUpdate,
)
from mundamanager.services.gang_logs import create_gang_log
from mundamanager.services.lookups import get_or_raise
from mundamanager.services.permissions import (
    require_campaign_manager,
    require_campaign_member,
    require_campaign_owner,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LeaderboardRow:
    gang_id: int
    gang_name: str
    user_id: str
    rating: int
    territories: int
    battles_won: int


class CampaignService:
    """Campaigns, members, gangs, territories and battles."""

    def __init__(self, session: Session, cache: TagCache):
        self.session = session
        self.cache = cache

    # Campaigns

    def get_campaign(self, campaign_id: int) -> Campaign:
        return get_or_raise(self.session, Campaign, campaign_id, "Campaign")

    def list_user_campaigns(self, user_id: str) -> list[Campaign]:
        stmt = (
            select(Campaign)
            .join(CampaignMember, CampaignMember.campaign_id == Campaign.id)
            .where(CampaignMember.user_id == user_id)
            .order_by(Campaign.campaign_name, Campaign.id)
        )
        return list(self.session.execute(stmt).scalars())

    def create_campaign(
        self, user_id: str, campaign_name: str, description: str | None = None
    ) -> Campaign:
        """Create a campaign owned by ``user_id``."""
        try:
            get_or_raise(self.session, Profile, user_id, "Profile")
            name = campaign_name.rstrip()
            if not name:
                raise ValueError("Campaign name cannot be empty")

            campaign = Campaign(
                campaign_name=name,
                description=description,
                status=CampaignStatus.ACTIVE.value,
            )
            campaign.members.append(CampaignMember(user_id=user_id, role=CampaignRole.OWNER.value))
            self.session.add(campaign)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("user %s created campaign %s (%s)", user_id, campaign.id, name)
        invalidate_campaign_member_permissions(self.cache, campaign.id, user_id)
        invalidate_campaign_count(self.cache)
        return campaign

    def update_campaign(self, campaign_id: int, user_id: str, changes: CampaignUpdate) -> Campaign:
        try:
            campaign = self.get_campaign(campaign_id)
            require_campaign_manager(self.session, campaign, user_id)
            fields = changes.model_fields_set

            if "campaign_name" in fields and changes.campaign_name is not None:
                name = changes.campaign_name.rstrip()
                if not name:
                    raise ValueError("Campaign name cannot be empty")
                campaign.campaign_name = name
            if "description" in fields:
                campaign.description = changes.description
            if "status" in fields and changes.status is not None:
                campaign.status = changes.status.value
            if "note" in fields:
                campaign.note = changes.note
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_basic(self.cache, campaign_id)
        return campaign

    def delete_campaign(self, campaign_id: int, user_id: str) -> None:
        try:
            campaign = self.get_campaign(campaign_id)
            require_campaign_owner(self.session, campaign, user_id)
            member_ids = [member.user_id for member in campaign.members]
            gang_ids = [entry.gang_id for entry in campaign.gangs]
            self.session.delete(campaign)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("user %s deleted campaign %s", user_id, campaign_id)
        invalidate_campaign_basic(self.cache, campaign_id)
        invalidate_campaign_territory(self.cache, campaign_id)
        for gang_id in gang_ids:
            self.cache.invalidate_tag(CacheTag.COMPOSITE_GANG_CAMPAIGNS.tag(gang_id))
        for member_id in member_ids:
            invalidate_campaign_member_permissions(self.cache, campaign_id, member_id)
        invalidate_campaign_count(self.cache)

    # Members

    def _member(self, campaign_id: int, user_id: str) -> CampaignMember | None:
        return self.session.execute(
            select(CampaignMember).where(
                CampaignMember.campaign_id == campaign_id, CampaignMember.user_id == user_id
            )
        ).scalar_one_or_none()

    def _owner_count(self, campaign_id: int) -> int:
        return self.session.execute(
            select(func.count(CampaignMember.id)).where(
                CampaignMember.campaign_id == campaign_id,
                CampaignMember.role == CampaignRole.OWNER.value,
            )
        ).scalar_one()

    def _require_role_grant(self, campaign: Campaign, user_id: str, role: CampaignRole) -> None:
        if role is CampaignRole.OWNER:
            require_campaign_owner(self.session, campaign, user_id)
        else:
            require_campaign_manager(self.session, campaign, user_id)

    def add_member(
        self,
        campaign_id: int,
        user_id: str,
        member_user_id: str,
        role: CampaignRole = CampaignRole.MEMBER,
    ) -> CampaignMember:
        """Add a user to the campaign. Only owners can add another owner."""
        try:
            campaign = self.get_campaign(campaign_id)
            role = CampaignRole(role)
            self._require_role_grant(campaign, user_id, role)
            get_or_raise(self.session, Profile, member_user_id, "Profile")
            if self._member(campaign_id, member_user_id) is not None:
                raise ValueError("User is already a member of this campaign")

            member = CampaignMember(
                campaign=campaign, user_id=member_user_id, role=role.value
            )
            self.session.add(member)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_membership(self.cache, campaign_id, None, member_user_id)
        return member

    def remove_member(self, campaign_id: int, user_id: str, member_user_id: str) -> None:
        """Remove a member and take their gangs out of the campaign.

        Members may remove themselves; removing anyone else needs the owner
        or an arbitrator. The only owner cannot be removed.
        """
        try:
            campaign = self.get_campaign(campaign_id)
            if member_user_id != user_id:
                require_campaign_manager(self.session, campaign, user_id)
            member = self._member(campaign_id, member_user_id)
            if member is None:
                raise ValueError("Campaign member not found")
            if member.role == CampaignRole.OWNER and self._owner_count(campaign_id) <= 1:
                raise ValueError("Cannot remove the only owner of a campaign")

            removed_gangs = [
                entry for entry in campaign.gangs if entry.user_id == member_user_id
            ]
            gang_ids = [entry.gang_id for entry in removed_gangs]
            for entry in removed_gangs:
                self._withdraw_gang(entry, user_id)
            self.session.delete(member)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("user %s removed from campaign %s", member_user_id, campaign_id)
        invalidate_campaign_membership(self.cache, campaign_id, None, member_user_id)
        invalidate_campaign_member_permissions(self.cache, campaign_id, member_user_id)
        for gang_id in gang_ids:
            invalidate_campaign_membership(self.cache, campaign_id, gang_id, member_user_id)
            invalidate_campaign_territory(self.cache, campaign_id, gang_id)

    def change_member_role(
        self, campaign_id: int, user_id: str, member_user_id: str, role: CampaignRole
    ) -> CampaignMember:
        try:
            campaign = self.get_campaign(campaign_id)
            role = CampaignRole(role)
            self._require_role_grant(campaign, user_id, role)
            member = self._member(campaign_id, member_user_id)
            if member is None:
                raise ValueError("Campaign member not found")
            if (
                member.role == CampaignRole.OWNER
                and role is not CampaignRole.OWNER
                and self._owner_count(campaign_id) <= 1
            ):
                raise ValueError("Cannot demote the only owner of a campaign")

            member.role = role.value
            gang_ids = [
                entry.gang_id for entry in campaign.gangs if entry.user_id == member_user_id
            ]
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_member_permissions(self.cache, campaign_id, member_user_id)
        for gang_id in gang_ids:
            invalidate_gang_permissions_for_user(self.cache, member_user_id, gang_id)
        return member

    # Gangs

    def _campaign_gang(self, campaign_id: int, gang_id: int) -> CampaignGang | None:
        return self.session.execute(
            select(CampaignGang).where(
                CampaignGang.campaign_id == campaign_id, CampaignGang.gang_id == gang_id
            )
        ).scalar_one_or_none()

    def _accepted_gang(self, campaign_id: int, gang_id: int) -> Gang:
        entry = self._campaign_gang(campaign_id, gang_id)
        if entry is None or entry.status != CampaignGangStatus.ACCEPTED:
            raise ValueError(f"Gang {gang_id} is not an accepted gang in this campaign")
        return entry.gang

    def add_gang_to_campaign(
        self, campaign_id: int, user_id: str, gang_id: int, allegiance: str | None = None
    ) -> CampaignGang:
        """Enter a gang into a campaign.

        Gang owners entering their own gang are accepted straight away. The
        campaign owner or an arbitrator may invite anyone else's gang, which
        stays pending until the gang's owner accepts.
        """
        try:
            campaign = self.get_campaign(campaign_id)
            gang = get_or_raise(self.session, Gang, gang_id, "Gang")
            owns_gang = gang.user_id == user_id
            if owns_gang:
                require_campaign_member(self.session, campaign, user_id)
            else:
                require_campaign_manager(self.session, campaign, user_id)
            if self._campaign_gang(campaign_id, gang_id) is not None:
                raise ValueError("Gang is already in this campaign")

            if self._member(campaign_id, gang.user_id) is None:
                self.session.add(
                    CampaignMember(
                        campaign=campaign, user_id=gang.user_id, role=CampaignRole.MEMBER.value
                    )
                )
            status = CampaignGangStatus.ACCEPTED if owns_gang else CampaignGangStatus.PENDING
            entry = CampaignGang(
                campaign=campaign,
                gang=gang,
                user_id=gang.user_id,
                status=status.value,
                allegiance=allegiance,
            )
            self.session.add(entry)
            if owns_gang:
                create_gang_log(
                    self.session,
                    gang.id,
                    "campaign_joined",
                    f'Gang joined campaign "{campaign.campaign_name}"',
                    user_id=user_id,
                )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("gang %s entered campaign %s (%s)", gang_id, campaign_id, status.value)
        invalidate_campaign_membership(self.cache, campaign_id, gang_id, entry.user_id)
        return entry

    def accept_campaign_invite(self, campaign_gang_id: int, user_id: str) -> CampaignGang:
        try:
            entry = get_or_raise(self.session, CampaignGang, campaign_gang_id, "Campaign gang")
            if entry.gang.user_id != user_id:
                raise PermissionDeniedError("Only the gang owner can accept this invite")
            if entry.status != CampaignGangStatus.PENDING:
                raise ValueError("Invite has already been accepted")

            entry.status = CampaignGangStatus.ACCEPTED.value
            create_gang_log(
                self.session,
                entry.gang_id,
                "campaign_joined",
                f'Gang joined campaign "{entry.campaign.campaign_name}"',
                user_id=user_id,
            )
            campaign_id, gang_id = entry.campaign_id, entry.gang_id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_membership(self.cache, campaign_id, gang_id, user_id)
        return entry

    def _withdraw_gang(self, entry: CampaignGang, user_id: str) -> None:
        held = self.session.execute(
            select(CampaignTerritory).where(
                CampaignTerritory.campaign_id == entry.campaign_id,
                CampaignTerritory.gang_id == entry.gang_id,
            )
        ).scalars().all()
        for territory in held:
            self._release(territory, user_id)
        if entry.status == CampaignGangStatus.ACCEPTED:
            create_gang_log(
                self.session,
                entry.gang_id,
                "campaign_left",
                f'Gang left campaign "{entry.campaign.campaign_name}"',
                user_id=user_id,
            )
        self.session.delete(entry)

    def remove_gang_from_campaign(self, campaign_gang_id: int, user_id: str) -> None:
        """Take a gang out of a campaign, releasing the territories it holds."""
        try:
            entry = get_or_raise(self.session, CampaignGang, campaign_gang_id, "Campaign gang")
            if entry.gang.user_id != user_id:
                require_campaign_manager(self.session, entry.campaign, user_id)
            campaign_id, gang_id, owner_id = entry.campaign_id, entry.gang_id, entry.user_id
            self._withdraw_gang(entry, user_id)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_membership(self.cache, campaign_id, gang_id, owner_id)
        invalidate_campaign_territory(self.cache, campaign_id, gang_id)

    # Territories

    def _territory(self, campaign_territory_id: int) -> CampaignTerritory:
        return get_or_raise(
            self.session, CampaignTerritory, campaign_territory_id, "Campaign territory"
        )

    def _claim(self, territory: CampaignTerritory, gang: Gang, user_id: str) -> int | None:
        """Give ``territory`` to ``gang``. Returns the gang that lost it, if any."""
        previous_id = territory.gang_id
        if previous_id == gang.id:
            return None
        if previous_id is not None:
            self._release(territory, user_id)
        territory.gang = gang
        create_gang_log(
            self.session,
            gang.id,
            "territory_claimed",
            f'Claimed territory "{territory.territory_name}"',
            user_id=user_id,
        )
        return previous_id

    def _release(self, territory: CampaignTerritory, user_id: str) -> None:
        if territory.gang_id is None:
            return
        create_gang_log(
            self.session,
            territory.gang_id,
            "territory_lost",
            f'Lost territory "{territory.territory_name}"',
            user_id=user_id,
        )
        territory.gang = None
        territory.gang_id = None

    def add_territory(
        self,
        campaign_id: int,
        user_id: str,
        *,
        territory_id: int | None = None,
        territory_name: str | None = None,
    ) -> CampaignTerritory:
        """Add a catalog territory, or a custom one by name."""
        try:
            campaign = self.get_campaign(campaign_id)
            require_campaign_manager(self.session, campaign, user_id)
            if territory_id is not None:
                catalog = get_or_raise(self.session, Territory, territory_id, "Territory")
                name = (territory_name or "").strip() or catalog.territory_name
            else:
                name = (territory_name or "").strip()
                if not name:
                    raise ValueError("Either territory_id or territory_name must be provided")

            territory = CampaignTerritory(
                campaign=campaign, territory_id=territory_id, territory_name=name
            )
            self.session.add(territory)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_territory(self.cache, campaign_id)
        return territory

    def remove_territory(self, campaign_territory_id: int, user_id: str) -> None:
        try:
            territory = self._territory(campaign_territory_id)
            campaign = territory.campaign
            require_campaign_manager(self.session, campaign, user_id)
            gang_id = territory.gang_id
            self._release(territory, user_id)
            campaign.territories.remove(territory)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_territory(self.cache, campaign.id, gang_id)

    def assign_territory(
        self, campaign_territory_id: int, user_id: str, gang_id: int
    ) -> CampaignTerritory:
        try:
            territory = self._territory(campaign_territory_id)
            require_campaign_manager(self.session, territory.campaign, user_id)
            gang = self._accepted_gang(territory.campaign_id, gang_id)
            previous_id = self._claim(territory, gang, user_id)
            campaign_id = territory.campaign_id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_territory(self.cache, campaign_id, gang_id)
        if previous_id is not None:
            invalidate_campaign_territory(self.cache, campaign_id, previous_id)
        return territory

    def unassign_territory(self, campaign_territory_id: int, user_id: str) -> CampaignTerritory:
        try:
            territory = self._territory(campaign_territory_id)
            require_campaign_manager(self.session, territory.campaign, user_id)
            previous_id = territory.gang_id
            self._release(territory, user_id)
            campaign_id = territory.campaign_id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_territory(self.cache, campaign_id, previous_id)
        return territory

    def update_territory_status(
        self,
        campaign_territory_id: int,
        user_id: str,
        *,
        ruined: bool | None = None,
        default_gang_territory: bool | None = None,
    ) -> CampaignTerritory:
        try:
            territory = self._territory(campaign_territory_id)
            require_campaign_manager(self.session, territory.campaign, user_id)
            if ruined is not None:
                territory.ruined = ruined
            if default_gang_territory is not None:
                territory.default_gang_territory = default_gang_territory
            campaign_id, gang_id = territory.campaign_id, territory.gang_id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_territory(self.cache, campaign_id, gang_id)
        return territory

    # Battles

    @staticmethod
    def _battle_gangs(battle: CampaignBattle) -> list[int]:
        gang_ids = [battle.attacker_id, battle.defender_id]
        gang_ids += [entry["gang_id"] for entry in battle.participants]
        return [gang_id for gang_id in dict.fromkeys(gang_ids) if gang_id is not None]

    @staticmethod
    def _result_for(battle: CampaignBattle, gang_id: int) -> BattleResult:
        if battle.winner_id is None:
            return BattleResult.DRAW
        return BattleResult.WON if battle.winner_id == gang_id else BattleResult.LOST

    def _log_results(self, battle: CampaignBattle, user_id: str) -> None:
        for gang_id in self._battle_gangs(battle):
            result = self._result_for(battle, gang_id)
            create_gang_log(
                self.session,
                gang_id,
                f"battle_{result.value}",
                f'Battle "{battle.scenario}": {result.value}',
                user_id=user_id,
            )

    def _check_battle_gangs(self, battle: CampaignBattle, campaign_id: int) -> None:
        gang_ids = self._battle_gangs(battle)
        if not gang_ids:
            raise ValueError("A battle needs at least one gang")
        for gang_id in gang_ids:
            self._accepted_gang(campaign_id, gang_id)
        if battle.winner_id is not None and battle.winner_id not in gang_ids:
            raise ValueError("The winner must have taken part in the battle")

    def create_battle(self, campaign_id: int, user_id: str, data: BattleCreate) -> CampaignBattle:
        """Record a battle and hand the claimed territories to the winner.

        Raises:
            ValueError: If a gang is not in the campaign, the winner did not
                fight, or territories are claimed without a winner
        """
        try:
            campaign = self.get_campaign(campaign_id)
            require_campaign_member(self.session, campaign, user_id)
            scenario = data.scenario.strip()
            if not scenario:
                raise ValueError("Scenario cannot be empty")
            if data.claimed_territories and data.winner_id is None:
                raise ValueError("Only a winner can claim territories")

            battle = CampaignBattle(
                campaign_id=campaign.id,
                scenario=scenario,
                attacker_id=data.attacker_id,
                defender_id=data.defender_id,
                winner_id=data.winner_id,
                note=data.note,
                participants=[
                    {"role": participant.role.value, "gang_id": participant.gang_id}
                    for participant in data.participants
                ],
                claimed_territories=list(dict.fromkeys(data.claimed_territories)),
            )
            self._check_battle_gangs(battle, campaign.id)
            self.session.add(battle)

            touched = set(self._battle_gangs(battle))
            if battle.winner_id is not None:
                winner = self.session.get(Gang, battle.winner_id)
                for territory_id in battle.claimed_territories:
                    territory = self._territory(territory_id)
                    if territory.campaign_id != campaign_id:
                        raise ValueError(f"Territory {territory_id} is not in this campaign")
                    previous_id = self._claim(territory, winner, user_id)
                    if previous_id is not None:
                        touched.add(previous_id)
            self._log_results(battle, user_id)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("campaign %s battle %s recorded (%s)", campaign_id, battle.id, scenario)
        invalidate_campaign_basic(self.cache, campaign_id)
        if battle.claimed_territories:
            invalidate_campaign_territory(self.cache, campaign_id)
        for gang_id in touched:
            self.cache.invalidate_tag(CacheTag.COMPOSITE_GANG_CAMPAIGNS.tag(gang_id))
        return battle

    def _battle(self, battle_id: int, user_id: str) -> CampaignBattle:
        battle = get_or_raise(self.session, CampaignBattle, battle_id, "Battle")
        require_campaign_manager(self.session, battle.campaign, user_id)
        return battle

    def update_battle(self, battle_id: int, user_id: str, changes: BattleUpdate) -> CampaignBattle:
        """Edit a battle's scenario, note or winner. Claimed territories are not revisited."""
        try:
            battle = self._battle(battle_id, user_id)
            fields = changes.model_fields_set
            if "scenario" in fields and changes.scenario is not None:
                scenario = changes.scenario.strip()
                if not scenario:
                    raise ValueError("Scenario cannot be empty")
                battle.scenario = scenario
            if "note" in fields:
                battle.note = changes.note
            if "winner_id" in fields and changes.winner_id != battle.winner_id:
                if changes.winner_id is None and battle.claimed_territories:
                    raise ValueError("A battle with claimed territories needs a winner")
                battle.winner_id = changes.winner_id
                self._check_battle_gangs(battle, battle.campaign_id)
                self._log_results(battle, user_id)
            campaign_id = battle.campaign_id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_basic(self.cache, campaign_id)
        return battle

    def delete_battle(self, battle_id: int, user_id: str) -> None:
        try:
            battle = self._battle(battle_id, user_id)
            campaign = battle.campaign
            campaign.battles.remove(battle)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_campaign_basic(self.cache, campaign.id)

    def list_battles(self, campaign_id: int) -> list[CampaignBattle]:
        self.get_campaign(campaign_id)
        stmt = (
            select(CampaignBattle)
            .where(CampaignBattle.campaign_id == campaign_id)
            .order_by(CampaignBattle.created_at.desc(), CampaignBattle.id.desc())
        )
        return list(self.session.execute(stmt).scalars())

    # Leaderboard

    def leaderboard(self, campaign_id: int) -> list[LeaderboardRow]:
        """Accepted gangs by rating, then territories held, then battles won."""
        campaign = self.get_campaign(campaign_id)
        gang_ids = [
            entry.gang_id
            for entry in campaign.gangs
            if entry.status == CampaignGangStatus.ACCEPTED
        ]
        tags = [
            CacheTag.COMPUTED_CAMPAIGN_LEADERBOARD.tag(campaign_id),
            CacheTag.SHARED_CAMPAIGN_GANG_LIST.tag(campaign_id),
            CacheTag.BASE_CAMPAIGN_TERRITORIES.tag(campaign_id),
            *(CacheTag.SHARED_GANG_RATING.tag(gang_id) for gang_id in gang_ids),
        ]
        return self.cache.get_or_set(
            f"campaign-leaderboard:{campaign_id}",
            tags,
            lambda: self._build_leaderboard(campaign_id, gang_ids),
        )

    def _build_leaderboard(self, campaign_id: int, gang_ids: list[int]) -> list[LeaderboardRow]:
        if not gang_ids:
            return []
        territories = dict(
            self.session.execute(
                select(CampaignTerritory.gang_id, func.count(CampaignTerritory.id))
                .where(
                    CampaignTerritory.campaign_id == campaign_id,
                    CampaignTerritory.gang_id.in_(gang_ids),
                )
                .group_by(CampaignTerritory.gang_id)
            ).all()
        )
        wins = dict(
            self.session.execute(
                select(CampaignBattle.winner_id, func.count(CampaignBattle.id))
                .where(
                    CampaignBattle.campaign_id == campaign_id,
                    CampaignBattle.winner_id.in_(gang_ids),
                )
                .group_by(CampaignBattle.winner_id)
            ).all()
        )
        gangs = self.session.execute(select(Gang).where(Gang.id.in_(gang_ids))).scalars()
        rows = [
            LeaderboardRow(
                gang_id=gang.id,
                gang_name=gang.name,
                user_id=gang.user_id,
                rating=gang.rating,
                territories=territories.get(gang.id, 0),
                battles_won=wins.get(gang.id, 0),
            )
            for gang in gangs
        ]
        rows.sort(key=lambda row: (-row.rating, -row.territories, -row.battles_won, row.gang_id))
        return rows

    def detail(self, campaign_id: int) -> dict[str, Any]:
        """Campaign overview with members, gangs, territories and battles."""
        campaign = self.get_campaign(campaign_id)

        def build() -> dict[str, Any]:
            data = CampaignDetail.model_validate(campaign).model_dump()
            for key in ("members", "gangs", "territories", "battles"):
                data[key].sort(key=lambda row: row["id"])
            return data

        return self.cache.get_or_set(
            f"campaign-overview:{campaign_id}",
            [
                CacheTag.COMPOSITE_CAMPAIGN_OVERVIEW.tag(campaign_id),
                CacheTag.BASE_CAMPAIGN_BASIC.tag(campaign_id),
                CacheTag.BASE_CAMPAIGN_MEMBERS.tag(campaign_id),
                CacheTag.BASE_CAMPAIGN_TERRITORIES.tag(campaign_id),
            ],
            build,
        )

