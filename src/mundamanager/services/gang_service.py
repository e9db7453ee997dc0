"""Gang Service for Munda Manager.

This module handles the gang lifecycle: creation with starting resources,
edits to details and resources, fighter positioning, deletion, the gang
history log, and rebuilding rating and wealth from the owned rows.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from mundamanager.cache import CacheTag, TagCache
from mundamanager.cache.invalidation import (
    invalidate_gang_basic,
    invalidate_gang_count,
    invalidate_gang_creation,
    invalidate_gang_deletion,
    invalidate_gang_positioning,
)
from mundamanager.config import Settings, get_settings
from mundamanager.domain.costs import fighter_total_cost, stash_value, vehicle_total_cost
from mundamanager.domain.enums import Alignment, CreditsOperation
from mundamanager.models import (
    CampaignBattle,
    CampaignGang,
    CampaignTerritory,
    Gang,
    GangLog,
    GangType,
)
from mundamanager.schemas.gang import GangUpdate
from mundamanager.services.copying import RowCloner
from mundamanager.services.financials import (
    FinancialUpdateResult,
    RecalculationResult,
    recalculate_gang_financials,
    update_gang_financials,
)
from mundamanager.services.gang_logs import CUSTOM_ACTION_TYPE, create_gang_log, list_gang_logs
from mundamanager.services.lookups import get_or_raise
from mundamanager.services.permissions import get_profile, require_gang_owner

logger = logging.getLogger(__name__)

INVALID_ALIGNMENT_MESSAGE = "Invalid alignment value. Must be 'Law Abiding' or 'Outlaw'"
VALID_ALIGNMENTS = frozenset(alignment.value for alignment in Alignment)
RESOURCE_FIELDS = (
    ("meat", "Meat"),
    ("scavenging_rolls", "Scavenging rolls"),
    ("exploration_points", "Exploration points"),
)


@dataclass(frozen=True, slots=True)
class GangUpdateResult:
    """Outcome of :meth:`GangService.update_gang`."""

    gang: Gang
    changed_fields: list[str] = field(default_factory=list)
    financials: FinancialUpdateResult = field(default_factory=FinancialUpdateResult)


class GangService:
    """Gang lifecycle and resources."""

    def __init__(self, session: Session, cache: TagCache, settings: Settings | None = None):
        self.session = session
        self.cache = cache
        self.settings = settings or get_settings()

    def get_gang(self, gang_id: int) -> Gang:
        return get_or_raise(self.session, Gang, gang_id, "Gang")

    def list_user_gangs(self, user_id: str) -> list[Gang]:
        stmt = select(Gang).where(Gang.user_id == user_id).order_by(Gang.name, Gang.id)
        return list(self.session.execute(stmt).scalars())

    def create_gang(
        self,
        user_id: str,
        name: str,
        gang_type_id: int,
        *,
        gang_colour: str | None = None,
        alignment: str | None = None,
    ) -> Gang:
        """Create a gang with the configured starting credits and reputation.

        Args:
            user_id: Owner of the new gang
            name: Gang name (trailing whitespace is dropped)
            gang_type_id: Catalog gang type
            gang_colour: Display colour
            alignment: Starting alignment; defaults to the gang type's

        Returns:
            The new gang

        Raises:
            ValueError: If the name is empty or the alignment is invalid
            NotFoundError: If the gang type does not exist
        """
        try:
            get_profile(self.session, user_id)
            gang_type = get_or_raise(self.session, GangType, gang_type_id, "Gang type")

            name = name.rstrip()
            if not name:
                raise ValueError("Gang name cannot be empty")

            alignment = alignment if alignment is not None else gang_type.alignment
            if alignment is not None and alignment not in VALID_ALIGNMENTS:
                raise ValueError(INVALID_ALIGNMENT_MESSAGE)

            credits = self.settings.starting_credits
            gang = Gang(
                user_id=user_id,
                gang_type=gang_type,
                name=name,
                gang_colour=gang_colour,
                alignment=alignment,
                credits=credits,
                reputation=self.settings.starting_reputation,
                rating=0,
                wealth=credits,
                positioning={},
            )
            self.session.add(gang)
            self.session.flush()

            create_gang_log(
                self.session,
                gang.id,
                "gang_created",
                f'Created gang "{name}" ({gang_type.name}) with {credits} credits',
                user_id=user_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("user %s created gang %s (%s)", user_id, gang.id, name)
        invalidate_gang_creation(self.cache, gang.id, user_id)
        invalidate_gang_count(self.cache)
        return gang

    def copy_gang(self, gang_id: int, user_id: str, new_name: str | None = None) -> Gang:
        """Duplicate a gang, roster and all, as a new gang owned by ``user_id``.

        Fighters keep their status, vehicles keep their crew and exotic beasts
        stay linked to their copied owners. Campaign membership, logs and
        territories are not copied. Rating and wealth are rebuilt from the
        copied rows.
        """
        try:
            source = self.get_gang(gang_id)
            require_gang_owner(self.session, source, user_id)
            get_profile(self.session, user_id)

            name = (new_name or f"{source.name} (Copy)").rstrip()
            if not name:
                raise ValueError("Gang name cannot be empty")

            gang = Gang(
                user_id=user_id,
                gang_type_id=source.gang_type_id,
                name=name,
                gang_colour=source.gang_colour,
                alignment=source.alignment,
                credits=source.credits,
                reputation=source.reputation,
                rating=source.rating,
                wealth=source.wealth,
                meat=source.meat,
                scavenging_rolls=source.scavenging_rolls,
                exploration_points=source.exploration_points,
                note=source.note,
                positioning={},
            )
            self.session.add(gang)

            cloner = RowCloner(self.session, gang)
            for fighter in source.fighters:
                cloner.fighter(fighter)
            for vehicle in source.vehicles:
                crew = cloner.fighters.get(vehicle.fighter_id) if vehicle.fighter_id else None
                cloner.vehicle(vehicle, crew=crew)
            for item in source.equipment:
                if item.gang_stash:
                    cloner.item(item)
            for fighter in source.fighters:
                for link in fighter.owned_beasts:
                    cloner.beast_link(link)
            cloner.finish()

            gang.positioning = {
                slot: cloner.fighters[fighter_id].id
                for slot, fighter_id in (source.positioning or {}).items()
                if fighter_id in cloner.fighters
            }
            recalculate_gang_financials(self.session, self.cache, gang.id)
            create_gang_log(
                self.session,
                gang.id,
                "gang_copied",
                f'Copied gang "{source.name}" as "{name}" with {len(cloner.fighters)} fighters',
                user_id=user_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("user %s copied gang %s as %s", user_id, gang_id, gang.id)
        invalidate_gang_creation(self.cache, gang.id, user_id)
        invalidate_gang_count(self.cache)
        return gang

    def _campaign_ids(self, gang_id: int) -> list[int]:
        stmt = select(CampaignGang.campaign_id).where(CampaignGang.gang_id == gang_id)
        return list(self.session.execute(stmt).scalars())

    def update_gang(self, gang_id: int, user_id: str, changes: GangUpdate) -> GangUpdateResult:
        """Apply edits to a gang's details and resources.

        Only the fields present in ``changes`` are touched. Credits and
        reputation are added or subtracted according to their operation and
        never drop below zero.

        Raises:
            ValueError: On an empty name, bad alignment or missing operation
            PermissionDeniedError: If the user does not own the gang
        """
        provided = changes.model_fields_set
        changed: list[str] = []
        financials = FinancialUpdateResult()

        try:
            gang = self.get_gang(gang_id)
            require_gang_owner(self.session, gang, user_id)

            if "name" in provided and changes.name is not None:
                new_name = changes.name.rstrip()
                if not new_name:
                    raise ValueError("Gang name cannot be empty")
                if new_name != gang.name:
                    self._log(
                        gang,
                        user_id,
                        "gang_name_changed",
                        f'Gang renamed from "{gang.name}" to "{new_name}"',
                    )
                    gang.name = new_name
                    changed.append("name")

            if "alignment" in provided and changes.alignment is not None:
                if changes.alignment not in VALID_ALIGNMENTS:
                    raise ValueError(INVALID_ALIGNMENT_MESSAGE)
                if changes.alignment != gang.alignment:
                    self._log(
                        gang,
                        user_id,
                        "gang_alignment_changed",
                        f"Alignment changed from {gang.alignment or 'none'} "
                        f"to {changes.alignment}",
                    )
                    gang.alignment = changes.alignment
                    changed.append("alignment")

            if "note" in provided and changes.note != gang.note:
                gang.note = changes.note
                self._log(gang, user_id, "gang_note_changed", "Gang note updated")
                changed.append("note")

            if "gang_colour" in provided and changes.gang_colour != gang.gang_colour:
                gang.gang_colour = changes.gang_colour
                self._log(
                    gang,
                    user_id,
                    "gang_colour_changed",
                    f"Gang colour changed to {changes.gang_colour or 'none'}",
                )
                changed.append("gang_colour")

            for resource, label in RESOURCE_FIELDS:
                value = getattr(changes, resource)
                if resource not in provided or value is None:
                    continue
                old = getattr(gang, resource)
                if value != old:
                    setattr(gang, resource, value)
                    self._log(
                        gang,
                        user_id,
                        f"gang_{resource}_changed",
                        f"{label} changed from {old} to {value}",
                    )
                    changed.append(resource)

            if changes.reputation:
                delta = self._signed(
                    changes.reputation, changes.reputation_operation, "reputation"
                )
                old = gang.reputation
                gang.reputation = max(0, old + delta)
                self._log(
                    gang,
                    user_id,
                    "gang_reputation_changed",
                    f"Reputation {self._direction(delta)} by {abs(delta)} "
                    f"({old} -> {gang.reputation})",
                )
                changed.append("reputation")

            if changes.credits:
                delta = self._signed(changes.credits, changes.credits_operation, "credits")
                old = gang.credits
                financials = update_gang_financials(
                    self.session, self.cache, gang.id, credits_delta=delta
                )
                self._log(
                    gang,
                    user_id,
                    "gang_credits_changed",
                    f"Credits {self._direction(delta)} by {abs(delta)} "
                    f"({old} -> {gang.credits})",
                )
                changed.append("credits")

            campaign_ids = self._campaign_ids(gang.id)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        if changed:
            invalidate_gang_basic(self.cache, gang_id, campaign_ids)
        else:
            logger.debug("gang %s update changed nothing", gang_id)
        return GangUpdateResult(gang=gang, changed_fields=changed, financials=financials)

    @staticmethod
    def _signed(amount: int, operation: CreditsOperation | None, field_name: str) -> int:
        if operation is None:
            raise ValueError(f"{field_name}_operation is required when {field_name} is provided")
        return amount if CreditsOperation(operation) is CreditsOperation.ADD else -amount

    @staticmethod
    def _direction(delta: int) -> str:
        return "increased" if delta >= 0 else "decreased"

    def _log(self, gang: Gang, user_id: str, action_type: str, description: str) -> None:
        create_gang_log(self.session, gang.id, action_type, description, user_id=user_id)

    def update_positioning(self, gang_id: int, user_id: str, positions: dict[int, int]) -> Gang:
        """Store the display order of the gang's fighters.

        Args:
            positions: Slot index -> fighter id
        """
        try:
            gang = self.get_gang(gang_id)
            require_gang_owner(self.session, gang, user_id)

            roster = {fighter.id for fighter in gang.fighters}
            unknown = sorted(set(positions.values()) - roster)
            if unknown:
                raise ValueError(f"Fighters {unknown} do not belong to this gang")
            if len(set(positions.values())) != len(positions):
                raise ValueError("A fighter can only hold one position")

            gang.positioning = {
                str(slot): fighter_id for slot, fighter_id in sorted(positions.items())
            }
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_gang_positioning(self.cache, gang_id)
        return gang

    def delete_gang(self, gang_id: int, user_id: str) -> None:
        """Delete a gang and everything it owns.

        Territories it holds are released and its battle records keep the
        battle but lose the reference to the gang.
        """
        try:
            gang = self.get_gang(gang_id)
            require_gang_owner(self.session, gang, user_id)
            owner_id = gang.user_id
            campaign_ids = self._campaign_ids(gang_id)

            self.session.execute(
                update(CampaignTerritory)
                .where(CampaignTerritory.gang_id == gang_id)
                .values(gang_id=None)
            )
            for column in (
                CampaignBattle.attacker_id,
                CampaignBattle.defender_id,
                CampaignBattle.winner_id,
            ):
                self.session.execute(
                    update(CampaignBattle).where(column == gang_id).values({column.key: None})
                )

            self.session.delete(gang)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("user %s deleted gang %s", user_id, gang_id)
        invalidate_gang_deletion(self.cache, gang_id, owner_id, campaign_ids)

    def recalculate_financials(self, gang_id: int, user_id: str) -> RecalculationResult:
        """Rebuild rating and wealth from the gang's rows and store them."""
        try:
            gang = self.get_gang(gang_id)
            require_gang_owner(self.session, gang, user_id)
            result = recalculate_gang_financials(self.session, self.cache, gang_id)
            if result.rating_drift or result.wealth_drift:
                create_gang_log(
                    self.session,
                    gang_id,
                    "gang_financials_recalculated",
                    f"Rating corrected from {result.stored.rating} to "
                    f"{result.recalculated.rating}, wealth from {result.stored.wealth} "
                    f"to {result.recalculated.wealth}",
                    user_id=user_id,
                )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result

    def list_logs(self, gang_id: int, *, limit: int = 50, offset: int = 0) -> list[GangLog]:
        self.get_gang(gang_id)
        return list_gang_logs(self.session, gang_id, limit=limit, offset=offset)

    def add_custom_log(self, gang_id: int, user_id: str, description: str) -> GangLog:
        """Let the gang owner write a free-text entry into the gang log."""
        try:
            gang = self.get_gang(gang_id)
            require_gang_owner(self.session, gang, user_id)
            description = description.strip()
            if not description:
                raise ValueError("Log description cannot be empty")
            entry = create_gang_log(
                self.session, gang_id, CUSTOM_ACTION_TYPE, description, user_id=user_id
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return entry

    def overview(self, gang_id: int) -> dict[str, Any]:
        """Gang page data: details, roster with costs, vehicles, stash, campaigns.

        Cached until any of the gang's basic, financial, roster, stash,
        vehicle or positioning tags is invalidated.
        """
        tags = [
            CacheTag.BASE_GANG_BASIC.tag(gang_id),
            CacheTag.SHARED_GANG_BASIC_INFO.tag(gang_id),
            CacheTag.BASE_GANG_CREDITS.tag(gang_id),
            CacheTag.COMPUTED_GANG_RATING.tag(gang_id),
            CacheTag.SHARED_GANG_RATING.tag(gang_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
            CacheTag.BASE_GANG_STASH.tag(gang_id),
            CacheTag.BASE_GANG_VEHICLES.tag(gang_id),
            CacheTag.BASE_GANG_POSITIONING.tag(gang_id),
            CacheTag.COMPOSITE_GANG_CAMPAIGNS.tag(gang_id),
        ]
        return self.cache.get_or_set(
            f"gang-overview:{gang_id}", tags, lambda: self._build_overview(gang_id)
        )

    def _build_overview(self, gang_id: int) -> dict[str, Any]:
        gang = self.get_gang(gang_id)
        fighters = [
            {
                "id": fighter.id,
                "fighter_name": fighter.fighter_name,
                "label": fighter.label,
                "fighter_class": fighter.fighter_class,
                "fighter_type_id": fighter.fighter_type_id,
                "xp": fighter.xp,
                "kills": fighter.kills,
                "killed": fighter.killed,
                "retired": fighter.retired,
                "enslaved": fighter.enslaved,
                "starved": fighter.starved,
                "recovery": fighter.recovery,
                "captured": fighter.captured,
                "is_owned_beast": fighter.is_owned_beast,
                "total_cost": fighter_total_cost(fighter),
            }
            for fighter in sorted(gang.fighters, key=lambda f: f.id)
        ]
        vehicles = [
            {
                "id": vehicle.id,
                "vehicle_name": vehicle.vehicle_name,
                "fighter_id": vehicle.fighter_id,
                "total_cost": vehicle_total_cost(vehicle),
            }
            for vehicle in sorted(gang.vehicles, key=lambda v: v.id)
        ]
        stash = [
            {
                "id": item.id,
                "equipment_id": item.equipment_id,
                "equipment_name": item.equipment.equipment_name,
                "purchase_cost": item.purchase_cost,
            }
            for item in gang.stash
        ]
        campaigns = [
            {
                "campaign_id": entry.campaign_id,
                "campaign_name": entry.campaign.campaign_name,
                "status": entry.status,
                "allegiance": entry.allegiance,
            }
            for entry in gang.campaign_gangs
        ]
        return {
            "id": gang.id,
            "user_id": gang.user_id,
            "name": gang.name,
            "gang_type_id": gang.gang_type_id,
            "gang_type": gang.gang_type.name,
            "gang_colour": gang.gang_colour,
            "alignment": gang.alignment,
            "credits": gang.credits,
            "reputation": gang.reputation,
            "rating": gang.rating,
            "wealth": gang.wealth,
            "meat": gang.meat,
            "scavenging_rolls": gang.scavenging_rolls,
            "exploration_points": gang.exploration_points,
            "note": gang.note,
            "positioning": dict(gang.positioning or {}),
            "stash_value": stash_value(gang),
            "fighters": fighters,
            "vehicles": vehicles,
            "stash": stash,
            "campaigns": campaigns,
        }
