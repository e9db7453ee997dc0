"""Fighter Service for Munda Manager.

Recruitment, detail edits, experience and status changes. Every change that
moves a fighter into or out of the active roster is translated into a rating
delta equal to the difference in what the fighter contributes before and
after the change.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from mundamanager.cache import CacheTag, TagCache
from mundamanager.cache.invalidation import (
    invalidate_fighter_addition,
    invalidate_fighter_data,
    invalidate_fighter_data_with_financials,
    invalidate_fighter_owned_beasts,
    invalidate_fighter_vehicle_data,
    invalidate_fighter_xp,
    invalidate_gang_basic,
)
from mundamanager.domain.costs import (
    beast_cost,
    effective_stats,
    fighter_bucket,
    fighter_total_cost,
    rating_contribution,
    vehicle_total_cost,
)
from mundamanager.domain.enums import FighterStatusAction, ValueBucket
from mundamanager.domain.fighter_status import is_status_incompatible
from mundamanager.domain.rules_config import DEFAULT_RULES, RulesConfig
from mundamanager.domain.valuation import FinancialDelta
from mundamanager.models import CampaignGang, Fighter, FighterType, Gang
from mundamanager.schemas.fighter import FighterUpdate
from mundamanager.services.copying import RowCloner
from mundamanager.services.financials import (
    FinancialUpdateResult,
    apply_financial_delta,
    update_gang_financials,
)
from mundamanager.services.gang_logs import create_gang_log
from mundamanager.services.lookups import get_or_raise
from mundamanager.services.permissions import require_gang_owner

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AddFighterResult:
    fighter: Fighter
    financials: FinancialUpdateResult


@dataclass(frozen=True, slots=True)
class XpChangeResult:
    fighter_id: int
    old_xp: int
    new_xp: int
    old_kills: int
    new_kills: int


@dataclass(frozen=True, slots=True)
class StatusChangeResult:
    """Outcome of a status action. ``fighter`` is None once deleted."""

    fighter_id: int
    action: FighterStatusAction
    deleted: bool
    fighter: Fighter | None
    financials: FinancialUpdateResult


class FighterService:
    """Gang roster management."""

    def __init__(self, session: Session, cache: TagCache, rules: RulesConfig = DEFAULT_RULES):
        self.session = session
        self.cache = cache
        self.rules = rules

    def get_fighter(self, fighter_id: int) -> Fighter:
        return get_or_raise(self.session, Fighter, fighter_id, "Fighter")

    def _owned_fighter(self, fighter_id: int, user_id: str) -> Fighter:
        fighter = self.get_fighter(fighter_id)
        require_gang_owner(self.session, fighter.gang, user_id)
        return fighter

    def _clean_name(self, name: str) -> str:
        name = name.rstrip()
        if not name:
            raise ValueError("Fighter name cannot be empty")
        if len(name) > self.rules.fighters.name_max_length:
            raise ValueError(
                f"Fighter name cannot exceed {self.rules.fighters.name_max_length} characters"
            )
        return name

    def add_fighter(
        self,
        gang_id: int,
        user_id: str,
        fighter_type_id: int,
        fighter_name: str,
        *,
        cost: int | None = None,
        use_base_cost_for_rating: bool = True,
    ) -> AddFighterResult:
        """Recruit a fighter into a gang.

        Args:
            gang_id: Recruiting gang
            user_id: Acting user
            fighter_type_id: Catalog profile
            fighter_name: Name (trailing whitespace is dropped)
            cost: Credits paid; defaults to the fighter type's cost
            use_base_cost_for_rating: Count the type cost toward rating
                rather than the amount paid

        Returns:
            AddFighterResult with the fighter and the financial change

        Raises:
            ValueError: If the type is not available to the gang or credits
                are insufficient
        """
        try:
            gang = get_or_raise(self.session, Gang, gang_id, "Gang")
            require_gang_owner(self.session, gang, user_id)
            fighter_type = get_or_raise(
                self.session, FighterType, fighter_type_id, "Fighter type"
            )

            if fighter_type.is_exotic_beast:
                raise ValueError("Exotic beasts can only be gained through equipment")
            if fighter_type.gang_type_id not in (None, gang.gang_type_id):
                raise ValueError(f"{fighter_type.name} cannot be recruited by this gang")

            name = self._clean_name(fighter_name)
            if cost is not None and cost < 0:
                raise ValueError("Fighter cost cannot be negative")
            payment = fighter_type.cost if cost is None else cost
            rating_cost = fighter_type.cost if use_base_cost_for_rating else payment
            if payment > gang.credits:
                raise ValueError(
                    f"Gang has insufficient credits. Required: {payment}, "
                    f"Available: {gang.credits}"
                )

            fighter = Fighter(
                gang=gang,
                fighter_type=fighter_type,
                fighter_name=name,
                fighter_class=fighter_type.fighter_class,
                credits=rating_cost,
                stats=dict(fighter_type.stats),
                special_rules=list(fighter_type.special_rules),
            )
            self.session.add(fighter)
            self.session.flush()

            financials = update_gang_financials(
                self.session,
                self.cache,
                gang.id,
                rating_delta=rating_cost,
                credits_delta=-payment,
            )
            create_gang_log(
                self.session,
                gang.id,
                "fighter_added",
                f'Added fighter "{name}" ({payment} credits). New gang rating: {gang.rating}',
                user_id=user_id,
                fighter_id=fighter.id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("gang %s recruited fighter %s (%s)", gang_id, fighter.id, name)
        invalidate_fighter_addition(self.cache, fighter.id, gang_id, user_id)
        return AddFighterResult(fighter=fighter, financials=financials)

    def copy_fighter(
        self,
        fighter_id: int,
        user_id: str,
        *,
        target_gang_id: int | None = None,
        new_name: str | None = None,
        charge_credits: bool = False,
    ) -> AddFighterResult:
        """Copy a fighter, with its equipment, skills and effects, into a gang.

        Status flags start cleared. Vehicles and owned exotic beasts stay
        with the source fighter. The copy's total cost goes onto the target gang's
        rating and, with ``charge_credits``, is also paid from its credits.

        Args:
            fighter_id: Fighter to copy
            user_id: Acting user; must be allowed to modify both gangs
            target_gang_id: Receiving gang; defaults to the fighter's own
            new_name: Name of the copy; defaults to "<name> (Copy)"
            charge_credits: Pay for the copy

        Raises:
            ValueError: If the fighter is an owned beast, the gangs are in
                different campaigns, or credits are insufficient
        """
        try:
            source = self._owned_fighter(fighter_id, user_id)
            if source.is_owned_beast:
                raise ValueError("Exotic beasts can only be gained through equipment")

            gang = source.gang
            if target_gang_id is not None and target_gang_id != gang.id:
                gang = get_or_raise(self.session, Gang, target_gang_id, "Gang")
                require_gang_owner(self.session, gang, user_id)
                self._check_shared_campaign(source.gang_id, gang.id)

            name = self._clean_name(new_name or f"{source.fighter_name} (Copy)")
            cloner = RowCloner(self.session, gang)
            fighter = cloner.fighter(source, name=name, keep_status=False)
            cloner.finish()

            cost = fighter_total_cost(fighter)
            delta = FinancialDelta().add(fighter_bucket(fighter), cost)
            if charge_credits:
                if cost > gang.credits:
                    raise ValueError(
                        f"Gang has insufficient credits. Required: {cost}, "
                        f"Available: {gang.credits}"
                    )
                delta.credits = -cost

            financials = apply_financial_delta(self.session, self.cache, gang.id, delta)
            create_gang_log(
                self.session,
                gang.id,
                "fighter_copied",
                f'Copied fighter "{source.fighter_name}" as "{name}" ({cost} credits). '
                f"New gang rating: {gang.rating}",
                user_id=user_id,
                fighter_id=fighter.id,
            )
            gang_id = gang.id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("fighter %s copied to gang %s as %s", fighter_id, gang_id, fighter.id)
        invalidate_fighter_addition(self.cache, fighter.id, gang_id, user_id)
        return AddFighterResult(fighter=fighter, financials=financials)

    def _check_shared_campaign(self, source_gang_id: int, target_gang_id: int) -> None:
        source, target = (
            set(
                self.session.execute(
                    select(CampaignGang.campaign_id).where(CampaignGang.gang_id == gang_id)
                ).scalars()
            )
            for gang_id in (source_gang_id, target_gang_id)
        )
        if source and target and not source & target:
            raise ValueError("Gangs must be in the same campaign")

    def update_details(self, fighter_id: int, user_id: str, changes: FighterUpdate) -> Fighter:
        """Edit a fighter's name, label, kills, cost adjustment, note and rules.

        A cost adjustment on a fighter whose value counts toward the rating
        moves the rating by the difference.
        """
        provided = changes.model_fields_set
        try:
            fighter = self._owned_fighter(fighter_id, user_id)
            gang_id = fighter.gang_id

            if "fighter_name" in provided and changes.fighter_name is not None:
                new_name = self._clean_name(changes.fighter_name)
                if new_name != fighter.fighter_name:
                    create_gang_log(
                        self.session,
                        gang_id,
                        "fighter_renamed",
                        f'Fighter "{fighter.fighter_name}" renamed to "{new_name}"',
                        user_id=user_id,
                        fighter_id=fighter.id,
                    )
                    fighter.fighter_name = new_name

            if "label" in provided:
                label = (changes.label or "").strip() or None
                if label is not None and len(label) > self.rules.fighters.label_max_length:
                    raise ValueError(
                        f"Label cannot exceed {self.rules.fighters.label_max_length} characters"
                    )
                fighter.label = label

            if "kills" in provided and changes.kills is not None:
                if changes.kills < 0:
                    raise ValueError("Kills cannot be negative")
                if changes.kills != fighter.kills:
                    create_gang_log(
                        self.session,
                        gang_id,
                        "fighter_kills_changed",
                        f'Fighter "{fighter.fighter_name}" kills changed from '
                        f"{fighter.kills} to {changes.kills}",
                        user_id=user_id,
                        fighter_id=fighter.id,
                    )
                    fighter.kills = changes.kills

            if "note" in provided:
                fighter.note = changes.note
            if "special_rules" in provided and changes.special_rules is not None:
                fighter.special_rules = list(changes.special_rules)

            if "cost_adjustment" in provided and changes.cost_adjustment is not None:
                old_adjustment = fighter.cost_adjustment
                difference = changes.cost_adjustment - old_adjustment
                if difference:
                    fighter.cost_adjustment = changes.cost_adjustment
                    delta = FinancialDelta().add(fighter_bucket(fighter), difference)
                    apply_financial_delta(self.session, self.cache, gang_id, delta)
                    gang = fighter.gang
                    create_gang_log(
                        self.session,
                        gang_id,
                        "fighter_cost_adjusted",
                        f'Fighter "{fighter.fighter_name}" cost adjustment changed from '
                        f"{old_adjustment} to {changes.cost_adjustment}. "
                        f"New gang rating: {gang.rating}",
                        user_id=user_id,
                        fighter_id=fighter.id,
                    )

            owner_id = fighter.beast_owner_link.owner_id if fighter.is_owned_beast else None
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_fighter_data(self.cache, fighter_id, gang_id)
        if owner_id is not None:
            invalidate_fighter_owned_beasts(self.cache, owner_id, gang_id)
        return fighter

    def update_xp(
        self, fighter_id: int, user_id: str, xp_to_add: int, ooa_count: int = 0
    ) -> XpChangeResult:
        """Add (or remove) experience and record out-of-action results as kills.

        Raises:
            ValueError: If the fighter's XP would drop below zero
        """
        try:
            fighter = self._owned_fighter(fighter_id, user_id)
            if ooa_count < 0:
                raise ValueError("Out-of-action count cannot be negative")
            old_xp, old_kills = fighter.xp, fighter.kills
            new_xp = old_xp + xp_to_add
            if new_xp < 0:
                raise ValueError(
                    f"XP cannot be negative. Current: {old_xp}, change: {xp_to_add}"
                )

            fighter.xp = new_xp
            fighter.kills = old_kills + ooa_count
            if new_xp != old_xp:
                create_gang_log(
                    self.session,
                    fighter.gang_id,
                    "fighter_xp_changed",
                    f'Fighter "{fighter.fighter_name}" XP changed from {old_xp} to {new_xp}',
                    user_id=user_id,
                    fighter_id=fighter.id,
                )
            if ooa_count:
                create_gang_log(
                    self.session,
                    fighter.gang_id,
                    "fighter_kills_changed",
                    f'Fighter "{fighter.fighter_name}" kills changed from {old_kills} '
                    f"to {fighter.kills}",
                    user_id=user_id,
                    fighter_id=fighter.id,
                )
            gang_id = fighter.gang_id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_fighter_xp(self.cache, fighter_id, gang_id)
        return XpChangeResult(
            fighter_id=fighter_id,
            old_xp=old_xp,
            new_xp=new_xp,
            old_kills=old_kills,
            new_kills=old_kills + ooa_count,
        )

    def change_status(
        self,
        fighter_id: int,
        user_id: str,
        action: FighterStatusAction | str,
        *,
        sell_value: int | None = None,
    ) -> StatusChangeResult:
        """Apply a status action to a fighter.

        The rating moves by the fighter's contribution after the action minus
        its contribution before. Selling credits the gang; feeding a starving
        fighter consumes meat; deleting releases the fighter's vehicle into
        unassigned-vehicle wealth.

        Raises:
            ValueError: If the action conflicts with the fighter's state or its
                inputs are invalid
        """
        action = FighterStatusAction(action)
        try:
            fighter = self._owned_fighter(fighter_id, user_id)
            gang = fighter.gang
            gang_id = gang.id

            if is_status_incompatible(fighter, action):
                raise ValueError(
                    f'Cannot {action} fighter "{fighter.fighter_name}" in its current state'
                )

            owner_id = fighter.beast_owner_link.owner_id if fighter.is_owned_beast else None
            vehicle = fighter.vehicle
            before = rating_contribution(fighter)
            delta = FinancialDelta()

            if action is FighterStatusAction.DELETE:
                action_type, description, delta = self._delete_fighter(fighter, before)
            else:
                action_type, description = self._apply_action(fighter, gang, action, sell_value)
                delta.rating = rating_contribution(fighter) - before
                if action is FighterStatusAction.SELL:
                    delta.credits = sell_value or 0

            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                action_type,
                f"{description}. New gang rating: {gang.rating}",
                user_id=user_id,
                fighter_id=fighter_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("fighter %s status action %s (%s)", fighter_id, action, action_type)
        invalidate_fighter_data_with_financials(self.cache, fighter_id, gang_id)
        if vehicle is not None:
            invalidate_fighter_vehicle_data(self.cache, fighter_id, gang_id)
        if owner_id is not None:
            invalidate_fighter_owned_beasts(self.cache, owner_id, gang_id)
        if action is FighterStatusAction.STARVE:
            invalidate_gang_basic(self.cache, gang_id)

        deleted = action is FighterStatusAction.DELETE
        return StatusChangeResult(
            fighter_id=fighter_id,
            action=action,
            deleted=deleted,
            fighter=None if deleted else fighter,
            financials=financials,
        )

    def _apply_action(
        self,
        fighter: Fighter,
        gang: Gang,
        action: FighterStatusAction,
        sell_value: int | None,
    ) -> tuple[str, str]:
        name = fighter.fighter_name

        if action is FighterStatusAction.KILL:
            if fighter.killed:
                fighter.killed = False
                return "fighter_resurrected", f'Fighter "{name}" was resurrected'
            fighter.killed = True
            fighter.recovery = False
            return "fighter_killed", f'Fighter "{name}" was killed'

        if action is FighterStatusAction.RETIRE:
            if fighter.retired:
                fighter.retired = False
                return "fighter_unretired", f'Fighter "{name}" came out of retirement'
            fighter.retired = True
            fighter.recovery = False
            return "fighter_retired", f'Fighter "{name}" retired'

        if action is FighterStatusAction.CAPTURE:
            if fighter.captured:
                fighter.captured = False
                return "fighter_released", f'Fighter "{name}" was released from captivity'
            fighter.captured = True
            fighter.recovery = False
            return "fighter_captured", f'Fighter "{name}" was captured'

        if action is FighterStatusAction.SELL:
            if sell_value is None or sell_value < 0:
                raise ValueError("Sell value must be a non-negative number")
            if fighter.enslaved:
                raise ValueError(f'Fighter "{name}" has already been sold')
            fighter.enslaved = True
            fighter.recovery = False
            return (
                "fighter_enslaved",
                f'Fighter "{name}" was sold to the guilders for {sell_value} credits',
            )

        if action is FighterStatusAction.RESCUE:
            if not fighter.enslaved:
                raise ValueError(f'Fighter "{name}" is not enslaved')
            fighter.enslaved = False
            return "fighter_rescued", f'Fighter "{name}" was rescued from slavery'

        if action is FighterStatusAction.STARVE:
            if fighter.starved:
                meat_needed = self.rules.economy.meat_per_feeding
                if gang.meat < meat_needed:
                    raise ValueError("Not enough meat to feed fighter")
                gang.meat -= meat_needed
                fighter.starved = False
                return (
                    "fighter_fed",
                    f'Fighter "{name}" was fed ({meat_needed} meat consumed)',
                )
            fighter.starved = True
            return "fighter_starved", f'Fighter "{name}" is starving'

        # RECOVER
        if fighter.recovery:
            fighter.recovery = False
            return "fighter_recovered", f'Fighter "{name}" returned from recovery'
        fighter.recovery = True
        return "fighter_sent_to_recovery", f'Fighter "{name}" was sent to recovery'

    def _delete_fighter(self, fighter: Fighter, before: int) -> tuple[str, str, FinancialDelta]:
        """Remove a fighter with everything it carries.

        Owned beasts are deleted with their owner. An assigned vehicle stays
        with the gang, unassigned.
        """
        delta = FinancialDelta(rating=-before)

        vehicle = fighter.vehicle
        if vehicle is not None:
            delta.add(ValueBucket.UNASSIGNED_VEHICLE, vehicle_total_cost(vehicle))
            vehicle.fighter = None

        for link in list(fighter.owned_beasts):
            self.session.delete(link.beast)

        self.session.delete(fighter)
        self.session.flush()
        return (
            "fighter_removed",
            f'Fighter "{fighter.fighter_name}" was removed from the gang',
            delta,
        )

    def total_cost(self, fighter_id: int) -> int:
        """Fighter total cost, cached until the fighter's cost tags are evicted."""
        tags = [
            CacheTag.COMPUTED_FIGHTER_TOTAL_COST.tag(fighter_id),
            CacheTag.SHARED_FIGHTER_COST.tag(fighter_id),
            CacheTag.COMPUTED_FIGHTER_BEAST_COSTS.tag(fighter_id),
            CacheTag.BASE_FIGHTER_VEHICLES.tag(fighter_id),
        ]
        return self.cache.get_or_set(
            f"fighter-total-cost:{fighter_id}",
            tags,
            lambda: fighter_total_cost(self.get_fighter(fighter_id)),
        )

    def detail(self, fighter_id: int) -> dict[str, Any]:
        """Fighter card data: record, carried items, total cost and effective stats."""
        fighter = self.get_fighter(fighter_id)
        owner_link = fighter.beast_owner_link
        vehicle = fighter.vehicle
        return {
            **{column: getattr(fighter, column) for column in _FIGHTER_COLUMNS},
            "total_cost": self.total_cost(fighter_id),
            "effective_stats": effective_stats(fighter.stats, fighter.effects),
            "is_owned_beast": owner_link is not None,
            "owner_id": owner_link.owner_id if owner_link is not None else None,
            "vehicle_id": vehicle.id if vehicle is not None else None,
            "equipment": [
                {
                    "id": item.id,
                    "equipment_id": item.equipment_id,
                    "equipment_name": item.equipment.equipment_name,
                    "equipment_type": item.equipment.equipment_type,
                    "purchase_cost": item.purchase_cost,
                    "is_master_crafted": item.is_master_crafted,
                }
                for item in fighter.equipment
            ],
            "skills": [
                {
                    "id": skill.id,
                    "skill_id": skill.skill_id,
                    "skill_name": skill.skill.name,
                    "xp_cost": skill.xp_cost,
                    "credits_increase": skill.credits_increase,
                    "is_advance": skill.is_advance,
                }
                for skill in fighter.skills
            ],
            "effects": [
                {
                    "id": effect.id,
                    "effect_name": effect.effect_name,
                    "category": effect.category,
                    "credits_increase": effect.credits_increase,
                    "xp_cost": effect.xp_cost,
                    "fighter_equipment_id": effect.fighter_equipment_id,
                    "modifiers": dict(effect.modifiers or {}),
                }
                for effect in fighter.effects
            ],
            "owned_beasts": [
                {
                    "beast_id": link.beast_id,
                    "fighter_name": link.beast.fighter_name,
                    "fighter_equipment_id": link.fighter_equipment_id,
                    "cost": beast_cost(link.beast),
                }
                for link in fighter.owned_beasts
            ],
        }


_FIGHTER_COLUMNS = (
    "id",
    "gang_id",
    "fighter_type_id",
    "fighter_name",
    "label",
    "fighter_class",
    "credits",
    "cost_adjustment",
    "xp",
    "kills",
    "killed",
    "retired",
    "enslaved",
    "starved",
    "recovery",
    "captured",
    "note",
    "special_rules",
    "stats",
)
