"""Advancement Service for Munda Manager.

Skills, characteristic advancements, user effects and injuries. XP spent on
an advancement is refunded when it is removed, and its credits increase is
counted wherever the fighter's own value is counted.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from mundamanager.cache import TagCache
from mundamanager.cache.invalidation import (
    invalidate_fighter_advancement,
    invalidate_fighter_owned_beasts,
    invalidate_fighter_xp,
)
from mundamanager.domain.costs import fighter_bucket
from mundamanager.domain.enums import AdvancementType, EffectCategory
from mundamanager.domain.fighter_status import can_be_in_recovery
from mundamanager.domain.valuation import FinancialDelta
from mundamanager.models import (
    EffectType,
    Fighter,
    FighterEffect,
    FighterEquipment,
    FighterSkill,
    Skill,
)
from mundamanager.services.financials import FinancialUpdateResult, apply_financial_delta
from mundamanager.services.gang_logs import create_gang_log
from mundamanager.services.lookups import get_or_raise
from mundamanager.services.permissions import require_gang_owner

logger = logging.getLogger(__name__)

FIGHTER_EFFECT_CATEGORIES = frozenset(
    {EffectCategory.INJURIES.value, EffectCategory.ADVANCEMENTS.value, EffectCategory.USER.value}
)


@dataclass(frozen=True, slots=True)
class AdvancementResult:
    """Outcome of adding or removing a skill or effect."""

    fighter_id: int
    record_id: int
    advancement_type: AdvancementType
    xp_remaining: int
    financials: FinancialUpdateResult
    recovery: bool = False


class AdvancementService:
    """Fighter skills, advancements and injuries."""

    def __init__(self, session: Session, cache: TagCache):
        self.session = session
        self.cache = cache

    def _owned_fighter(self, fighter_id: int, user_id: str) -> Fighter:
        fighter = get_or_raise(self.session, Fighter, fighter_id, "Fighter")
        require_gang_owner(self.session, fighter.gang, user_id)
        return fighter

    @staticmethod
    def _spend_xp(fighter: Fighter, xp_cost: int) -> None:
        if xp_cost < 0:
            raise ValueError("XP cost cannot be negative")
        if fighter.xp < xp_cost:
            raise ValueError(
                f"Fighter has insufficient XP. Required: {xp_cost}, Available: {fighter.xp}"
            )
        fighter.xp -= xp_cost

    def _invalidate(
        self,
        fighter_id: int,
        gang_id: int,
        advancement_type: AdvancementType,
        owner_id: int | None,
        xp_changed: bool,
    ) -> None:
        invalidate_fighter_advancement(self.cache, fighter_id, gang_id, advancement_type)
        if xp_changed:
            invalidate_fighter_xp(self.cache, fighter_id, gang_id)
        if owner_id is not None:
            invalidate_fighter_owned_beasts(self.cache, owner_id, gang_id)

    @staticmethod
    def _owner_id(fighter: Fighter) -> int | None:
        link = fighter.beast_owner_link
        return link.owner_id if link is not None else None

    def add_skill(
        self,
        fighter_id: int,
        user_id: str,
        skill_id: int,
        *,
        xp_cost: int = 0,
        credits_increase: int = 0,
        is_advance: bool = False,
    ) -> AdvancementResult:
        """Teach a fighter a skill.

        Raises:
            ValueError: If the fighter already has the skill or lacks the XP
        """
        try:
            fighter = self._owned_fighter(fighter_id, user_id)
            skill = get_or_raise(self.session, Skill, skill_id, "Skill")
            existing = self.session.execute(
                select(FighterSkill.id).where(
                    FighterSkill.fighter_id == fighter.id, FighterSkill.skill_id == skill.id
                )
            ).scalar_one_or_none()
            if existing is not None:
                raise ValueError(f'Fighter already has the skill "{skill.name}"')
            self._spend_xp(fighter, xp_cost)

            fighter_skill = FighterSkill(
                fighter=fighter,
                skill=skill,
                xp_cost=xp_cost,
                credits_increase=credits_increase,
                is_advance=is_advance,
            )
            self.session.add(fighter_skill)
            self.session.flush()

            gang_id, owner_id = fighter.gang_id, self._owner_id(fighter)
            delta = FinancialDelta().add(fighter_bucket(fighter), credits_increase)
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "fighter_advancement_added",
                f'Fighter "{fighter.fighter_name}" gained skill "{skill.name}" '
                f"({xp_cost} XP, {credits_increase} credits)",
                user_id=user_id,
                fighter_id=fighter.id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate(fighter_id, gang_id, AdvancementType.SKILL, owner_id, xp_cost > 0)
        return AdvancementResult(
            fighter_id=fighter_id,
            record_id=fighter_skill.id,
            advancement_type=AdvancementType.SKILL,
            xp_remaining=fighter.xp,
            financials=financials,
        )

    def remove_skill(self, fighter_skill_id: int, user_id: str) -> AdvancementResult:
        """Remove a skill, refunding its XP cost."""
        try:
            fighter_skill = get_or_raise(self.session, FighterSkill, fighter_skill_id, "Skill")
            fighter = self._owned_fighter(fighter_skill.fighter_id, user_id)

            gang_id, owner_id = fighter.gang_id, self._owner_id(fighter)
            refund = fighter_skill.xp_cost
            skill_name = fighter_skill.skill.name
            delta = FinancialDelta().add(fighter_bucket(fighter), -fighter_skill.credits_increase)
            fighter.xp += refund
            fighter.skills.remove(fighter_skill)
            self.session.flush()

            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "fighter_advancement_removed",
                f'Fighter "{fighter.fighter_name}" lost skill "{skill_name}" '
                f"({refund} XP refunded)",
                user_id=user_id,
                fighter_id=fighter.id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate(fighter.id, gang_id, AdvancementType.SKILL, owner_id, refund > 0)
        return AdvancementResult(
            fighter_id=fighter.id,
            record_id=fighter_skill_id,
            advancement_type=AdvancementType.SKILL,
            xp_remaining=fighter.xp,
            financials=financials,
        )

    def add_characteristic_advancement(
        self,
        fighter_id: int,
        user_id: str,
        stat: str,
        *,
        xp_cost: int,
        credits_increase: int = 0,
    ) -> AdvancementResult:
        """Improve one characteristic by one step."""
        try:
            fighter = self._owned_fighter(fighter_id, user_id)
            if stat not in fighter.stats:
                raise ValueError(f'Unknown characteristic "{stat}"')
            self._spend_xp(fighter, xp_cost)

            effect = FighterEffect(
                fighter=fighter,
                effect_name=stat.replace("_", " ").title(),
                category=EffectCategory.ADVANCEMENTS,
                credits_increase=credits_increase,
                xp_cost=xp_cost,
                modifiers={stat: 1},
            )
            self.session.add(effect)
            self.session.flush()

            gang_id, owner_id = fighter.gang_id, self._owner_id(fighter)
            delta = FinancialDelta().add(fighter_bucket(fighter), credits_increase)
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "fighter_advancement_added",
                f'Fighter "{fighter.fighter_name}" advanced {effect.effect_name} '
                f"({xp_cost} XP, {credits_increase} credits)",
                user_id=user_id,
                fighter_id=fighter.id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate(fighter_id, gang_id, AdvancementType.STAT, owner_id, xp_cost > 0)
        return AdvancementResult(
            fighter_id=fighter_id,
            record_id=effect.id,
            advancement_type=AdvancementType.STAT,
            xp_remaining=fighter.xp,
            financials=financials,
        )

    def add_effect(
        self,
        fighter_id: int,
        user_id: str,
        effect_type_id: int,
        *,
        xp_cost: int = 0,
        fighter_equipment_id: int | None = None,
    ) -> AdvancementResult:
        """Apply a catalog advancement or user effect, optionally attached to carried equipment."""
        try:
            fighter = self._owned_fighter(fighter_id, user_id)
            effect_type = get_or_raise(self.session, EffectType, effect_type_id, "Effect type")
            if effect_type.category not in (
                EffectCategory.ADVANCEMENTS.value,
                EffectCategory.USER.value,
            ):
                raise ValueError(f'"{effect_type.effect_name}" cannot be applied as an advancement')
            item = None
            if fighter_equipment_id is not None:
                item = get_or_raise(
                    self.session, FighterEquipment, fighter_equipment_id, "Equipment"
                )
                if item.fighter_id != fighter.id:
                    raise ValueError("Equipment is not carried by this fighter")
            self._spend_xp(fighter, xp_cost)

            effect = FighterEffect(
                fighter=fighter,
                fighter_equipment=item,
                effect_type=effect_type,
                effect_name=effect_type.effect_name,
                category=effect_type.category,
                credits_increase=effect_type.credits_increase,
                xp_cost=xp_cost,
                modifiers=dict(effect_type.modifiers),
            )
            self.session.add(effect)
            self.session.flush()

            gang_id, owner_id = fighter.gang_id, self._owner_id(fighter)
            delta = FinancialDelta().add(fighter_bucket(fighter), effect.credits_increase)
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "fighter_advancement_added",
                f'Fighter "{fighter.fighter_name}" gained "{effect.effect_name}"',
                user_id=user_id,
                fighter_id=fighter.id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate(fighter_id, gang_id, AdvancementType.EFFECT, owner_id, xp_cost > 0)
        return AdvancementResult(
            fighter_id=fighter_id,
            record_id=effect.id,
            advancement_type=AdvancementType.EFFECT,
            xp_remaining=fighter.xp,
            financials=financials,
        )

    def add_injury(
        self,
        fighter_id: int,
        user_id: str,
        effect_type_id: int,
        *,
        send_to_recovery: bool | None = None,
    ) -> AdvancementResult:
        """Record a lasting injury.

        The fighter goes into recovery when asked to, or when the injury type
        says so and the caller did not override it, provided the fighter is
        still on the roster.
        """
        try:
            fighter = self._owned_fighter(fighter_id, user_id)
            effect_type = get_or_raise(self.session, EffectType, effect_type_id, "Effect type")
            if effect_type.category != EffectCategory.INJURIES:
                raise ValueError(f'"{effect_type.effect_name}" is not an injury')

            injury = FighterEffect(
                fighter=fighter,
                effect_type=effect_type,
                effect_name=effect_type.effect_name,
                category=effect_type.category,
                credits_increase=effect_type.credits_increase,
                modifiers=dict(effect_type.modifiers),
            )
            self.session.add(injury)

            wants_recovery = (
                effect_type.sends_to_recovery if send_to_recovery is None else send_to_recovery
            )
            if wants_recovery and can_be_in_recovery(fighter):
                fighter.recovery = True
            self.session.flush()

            gang_id, owner_id = fighter.gang_id, self._owner_id(fighter)
            delta = FinancialDelta().add(fighter_bucket(fighter), injury.credits_increase)
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            suffix = " and was sent to recovery" if fighter.recovery and wants_recovery else ""
            create_gang_log(
                self.session,
                gang_id,
                "fighter_injury_added",
                f'Fighter "{fighter.fighter_name}" suffered "{injury.effect_name}"{suffix}',
                user_id=user_id,
                fighter_id=fighter.id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("fighter %s injured: %s", fighter_id, injury.effect_name)
        self._invalidate(fighter_id, gang_id, AdvancementType.INJURY, owner_id, False)
        return AdvancementResult(
            fighter_id=fighter_id,
            record_id=injury.id,
            advancement_type=AdvancementType.INJURY,
            xp_remaining=fighter.xp,
            financials=financials,
            recovery=fighter.recovery,
        )

    def remove_effect(self, effect_id: int, user_id: str) -> AdvancementResult:
        """Remove an advancement, user effect or injury from a fighter, refunding spent XP."""
        try:
            effect = get_or_raise(self.session, FighterEffect, effect_id, "Effect")
            if effect.fighter_id is None or effect.category not in FIGHTER_EFFECT_CATEGORIES:
                raise ValueError(f"Effect {effect_id} is not a fighter effect")
            fighter = self._owned_fighter(effect.fighter_id, user_id)

            is_injury = effect.category == EffectCategory.INJURIES
            advancement_type = AdvancementType.INJURY if is_injury else AdvancementType.EFFECT
            gang_id, owner_id = fighter.gang_id, self._owner_id(fighter)
            refund = effect.xp_cost
            name = effect.effect_name
            delta = FinancialDelta().add(fighter_bucket(fighter), -effect.credits_increase)
            fighter.xp += refund
            self.session.delete(effect)
            self.session.flush()

            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            if is_injury:
                action_type = "fighter_injury_removed"
                description = f'Removed injury "{name}" from fighter "{fighter.fighter_name}"'
            else:
                action_type = "fighter_advancement_removed"
                description = (
                    f'Removed "{name}" from fighter "{fighter.fighter_name}" '
                    f"({refund} XP refunded)"
                )
            create_gang_log(
                self.session,
                gang_id,
                action_type,
                description,
                user_id=user_id,
                fighter_id=fighter.id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate(fighter.id, gang_id, advancement_type, owner_id, refund > 0)
        return AdvancementResult(
            fighter_id=fighter.id,
            record_id=effect_id,
            advancement_type=advancement_type,
            xp_remaining=fighter.xp,
            financials=financials,
            recovery=fighter.recovery,
        )
