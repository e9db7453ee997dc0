"""Vehicle Service for Munda Manager.

Vehicles are bought unassigned and may then be crewed by one fighter. A
vehicle's value is counted in the gang rating while its crew is on the
active roster, in wealth as unassigned-vehicle value while it has no crew,
and nowhere while its crew is out of action for good.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from mundamanager.cache import TagCache
from mundamanager.cache.invalidation import (
    invalidate_fighter_vehicle_data,
    invalidate_gang_vehicles,
    invalidate_vehicle_data,
    invalidate_vehicle_effects,
    invalidate_vehicle_repair,
)
from mundamanager.domain.costs import effective_stats, vehicle_bucket, vehicle_total_cost
from mundamanager.domain.enums import EffectCategory, ValueBucket
from mundamanager.domain.valuation import FinancialDelta
from mundamanager.models import EffectType, Fighter, FighterEffect, Gang, Vehicle, VehicleType
from mundamanager.services.financials import FinancialUpdateResult, apply_financial_delta
from mundamanager.services.gang_logs import create_gang_log
from mundamanager.services.lookups import get_or_raise
from mundamanager.services.permissions import require_gang_owner

logger = logging.getLogger(__name__)

VEHICLE_STAT_FIELDS = (
    "movement",
    "front",
    "side",
    "rear",
    "hull_points",
    "handling",
    "save",
    "body_slots",
    "drive_slots",
    "engine_slots",
)


@dataclass(frozen=True, slots=True)
class VehiclePurchaseResult:
    vehicle: Vehicle
    financials: FinancialUpdateResult


@dataclass(frozen=True, slots=True)
class AssignmentResult:
    """Crew change. ``previous_fighter_id`` is None when nothing changed hands."""

    vehicle_id: int
    fighter_id: int | None
    previous_fighter_id: int | None
    financials: FinancialUpdateResult
    displaced_vehicle_id: int | None = None


@dataclass(frozen=True, slots=True)
class VehicleChangeResult:
    vehicle_id: int
    financials: FinancialUpdateResult
    effect_ids: list[int] = field(default_factory=list)
    credits_delta: int = 0


def vehicle_stats(vehicle: Vehicle) -> dict[str, Any]:
    """Vehicle profile with damage modifiers applied."""
    base = {name: getattr(vehicle, name) for name in VEHICLE_STAT_FIELDS}
    return effective_stats(base, vehicle.effects)


class VehicleService:
    """Gang vehicles, crews and damage."""

    def __init__(self, session: Session, cache: TagCache):
        self.session = session
        self.cache = cache

    def get_vehicle(self, vehicle_id: int) -> Vehicle:
        return get_or_raise(self.session, Vehicle, vehicle_id, "Vehicle")

    def _owned_vehicle(self, vehicle_id: int, user_id: str) -> Vehicle:
        vehicle = self.get_vehicle(vehicle_id)
        require_gang_owner(self.session, vehicle.gang, user_id)
        return vehicle

    def _invalidate_crew(self, vehicle_id: int, gang_id: int, *crew_ids: int | None) -> None:
        invalidate_vehicle_data(self.cache, vehicle_id)
        for crew_id in crew_ids:
            if crew_id is not None:
                invalidate_fighter_vehicle_data(self.cache, crew_id, gang_id)

    def add_gang_vehicle(
        self,
        gang_id: int,
        user_id: str,
        vehicle_type_id: int,
        *,
        cost: int | None = None,
        vehicle_name: str | None = None,
        base_cost: int | None = None,
    ) -> VehiclePurchaseResult:
        """Buy a vehicle for the gang. It starts without a crew.

        Args:
            gang_id: Buying gang
            user_id: Acting user
            vehicle_type_id: Catalog profile
            cost: Credits paid (0 allowed); defaults to the type cost
            vehicle_name: Name; defaults to the type name
            base_cost: Value recorded for the vehicle; defaults to the payment

        Raises:
            ValueError: If the gang cannot afford the payment
        """
        try:
            gang = get_or_raise(self.session, Gang, gang_id, "Gang")
            require_gang_owner(self.session, gang, user_id)
            vehicle_type = get_or_raise(self.session, VehicleType, vehicle_type_id, "Vehicle type")

            payment = vehicle_type.cost if cost is None else cost
            if payment < 0 or (base_cost is not None and base_cost < 0):
                raise ValueError("Vehicle cost cannot be negative")
            if gang.credits < payment:
                raise ValueError("Not enough credits")
            value = payment if base_cost is None else base_cost

            name = (vehicle_name or "").rstrip() or vehicle_type.vehicle_type
            vehicle = Vehicle(
                gang=gang,
                vehicle_type=vehicle_type,
                vehicle_name=name,
                cost=value,
                special_rules=list(vehicle_type.special_rules),
                **{stat: getattr(vehicle_type, stat) for stat in VEHICLE_STAT_FIELDS},
            )
            self.session.add(vehicle)
            self.session.flush()

            delta = FinancialDelta(credits=-payment).add(ValueBucket.UNASSIGNED_VEHICLE, value)
            financials = apply_financial_delta(self.session, self.cache, gang.id, delta)
            create_gang_log(
                self.session,
                gang.id,
                "vehicle_added",
                f'Added vehicle "{name}" ({payment} credits)',
                user_id=user_id,
                vehicle_id=vehicle.id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("gang %s bought vehicle %s", gang_id, vehicle.id)
        invalidate_gang_vehicles(self.cache, gang_id)
        return VehiclePurchaseResult(vehicle=vehicle, financials=financials)

    def assign_vehicle_to_fighter(
        self, vehicle_id: int, fighter_id: int, user_id: str
    ) -> AssignmentResult:
        """Make ``fighter_id`` the vehicle's crew.

        A vehicle the fighter already crewed becomes unassigned. The value of
        both vehicles moves between buckets accordingly.
        """
        try:
            vehicle = self._owned_vehicle(vehicle_id, user_id)
            fighter = get_or_raise(self.session, Fighter, fighter_id, "Fighter")
            if fighter.gang_id != vehicle.gang_id:
                raise ValueError("Fighter does not belong to this gang")
            if fighter.is_owned_beast:
                raise ValueError("Exotic beasts cannot crew vehicles")

            gang_id = vehicle.gang_id
            previous = vehicle.fighter
            previous_id = previous.id if previous is not None else None
            if previous_id == fighter_id:
                logger.debug("vehicle %s already crewed by fighter %s", vehicle_id, fighter_id)
                return AssignmentResult(
                    vehicle_id=vehicle_id,
                    fighter_id=fighter_id,
                    previous_fighter_id=fighter_id,
                    financials=FinancialUpdateResult(),
                )

            delta = FinancialDelta()
            displaced = fighter.vehicle
            displaced_id = displaced.id if displaced is not None else None
            if displaced is not None:
                delta.move(
                    vehicle_bucket(displaced),
                    ValueBucket.UNASSIGNED_VEHICLE,
                    vehicle_total_cost(displaced),
                )
                displaced.fighter = None
                self.session.flush()

            value = vehicle_total_cost(vehicle)
            source = vehicle_bucket(vehicle)
            vehicle.fighter = fighter
            self.session.flush()
            delta.move(source, vehicle_bucket(vehicle), value)

            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "vehicle_assigned",
                f'Vehicle "{vehicle.vehicle_name}" assigned to fighter "{fighter.fighter_name}"',
                user_id=user_id,
                fighter_id=fighter_id,
                vehicle_id=vehicle_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate_crew(vehicle_id, gang_id, fighter_id, previous_id)
        if displaced_id is not None:
            invalidate_vehicle_data(self.cache, displaced_id)
        return AssignmentResult(
            vehicle_id=vehicle_id,
            fighter_id=fighter_id,
            previous_fighter_id=previous_id,
            financials=financials,
            displaced_vehicle_id=displaced_id,
        )

    def unassign_vehicle(self, vehicle_id: int, user_id: str) -> AssignmentResult:
        """Take the crew off a vehicle. A vehicle without crew is left as it is."""
        try:
            vehicle = self._owned_vehicle(vehicle_id, user_id)
            gang_id = vehicle.gang_id
            previous = vehicle.fighter
            if previous is None:
                logger.debug("vehicle %s already unassigned", vehicle_id)
                return AssignmentResult(
                    vehicle_id=vehicle_id,
                    fighter_id=None,
                    previous_fighter_id=None,
                    financials=FinancialUpdateResult(),
                )

            previous_id = previous.id
            delta = FinancialDelta().move(
                vehicle_bucket(vehicle),
                ValueBucket.UNASSIGNED_VEHICLE,
                vehicle_total_cost(vehicle),
            )
            vehicle.fighter = None
            self.session.flush()

            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "vehicle_unassigned",
                f'Vehicle "{vehicle.vehicle_name}" unassigned from fighter '
                f'"{previous.fighter_name}"',
                user_id=user_id,
                fighter_id=previous_id,
                vehicle_id=vehicle_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate_crew(vehicle_id, gang_id, previous_id)
        return AssignmentResult(
            vehicle_id=vehicle_id,
            fighter_id=None,
            previous_fighter_id=previous_id,
            financials=financials,
        )

    def update_vehicle(
        self,
        vehicle_id: int,
        user_id: str,
        *,
        vehicle_name: str | None = None,
        special_rules: list[str] | None = None,
    ) -> Vehicle:
        try:
            vehicle = self._owned_vehicle(vehicle_id, user_id)
            if vehicle_name is not None:
                name = vehicle_name.rstrip()
                if not name:
                    raise ValueError("Vehicle name cannot be empty")
                if name != vehicle.vehicle_name:
                    create_gang_log(
                        self.session,
                        vehicle.gang_id,
                        "vehicle_renamed",
                        f'Vehicle "{vehicle.vehicle_name}" renamed to "{name}"',
                        user_id=user_id,
                        vehicle_id=vehicle_id,
                    )
                    vehicle.vehicle_name = name
            if special_rules is not None:
                vehicle.special_rules = list(special_rules)
            gang_id, crew_id = vehicle.gang_id, vehicle.fighter_id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate_crew(vehicle_id, gang_id, crew_id)
        return vehicle

    def sell_vehicle(
        self, vehicle_id: int, user_id: str, manual_cost: int | None = None
    ) -> VehicleChangeResult:
        """Sell a vehicle with its equipment and damage for ``manual_cost`` or its base cost."""
        return self._remove(vehicle_id, user_id, sell=True, manual_cost=manual_cost)

    def delete_vehicle(self, vehicle_id: int, user_id: str) -> VehicleChangeResult:
        return self._remove(vehicle_id, user_id, sell=False)

    def _remove(
        self, vehicle_id: int, user_id: str, *, sell: bool, manual_cost: int | None = None
    ) -> VehicleChangeResult:
        try:
            vehicle = self._owned_vehicle(vehicle_id, user_id)
            if manual_cost is not None and manual_cost < 0:
                raise ValueError("Sale value cannot be negative")

            gang_id = vehicle.gang_id
            crew_id = vehicle.fighter_id
            name = vehicle.vehicle_name
            credits = (vehicle.cost if manual_cost is None else manual_cost) if sell else 0
            delta = FinancialDelta(credits=credits).add(
                vehicle_bucket(vehicle), -vehicle_total_cost(vehicle)
            )

            self.session.delete(vehicle)
            self.session.flush()
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            if sell:
                action_type = "vehicle_sold"
                description = f'Sold vehicle "{name}" for {credits} credits'
            else:
                action_type = "vehicle_removed"
                description = f'Removed vehicle "{name}"'
            create_gang_log(
                self.session,
                gang_id,
                action_type,
                description,
                user_id=user_id,
                fighter_id=crew_id,
                vehicle_id=vehicle_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate_crew(vehicle_id, gang_id, crew_id)
        invalidate_gang_vehicles(self.cache, gang_id)
        return VehicleChangeResult(
            vehicle_id=vehicle_id, financials=financials, credits_delta=credits
        )

    def add_vehicle_damage(
        self, vehicle_id: int, user_id: str, effect_type_id: int
    ) -> VehicleChangeResult:
        try:
            vehicle = self._owned_vehicle(vehicle_id, user_id)
            effect_type = get_or_raise(self.session, EffectType, effect_type_id, "Effect type")
            if effect_type.category != EffectCategory.VEHICLE_DAMAGES:
                raise ValueError(f'"{effect_type.effect_name}" is not a vehicle damage')

            damage = FighterEffect(
                vehicle=vehicle,
                effect_type=effect_type,
                effect_name=effect_type.effect_name,
                category=effect_type.category,
                credits_increase=effect_type.credits_increase,
                modifiers=dict(effect_type.modifiers),
            )
            self.session.add(damage)
            self.session.flush()

            gang_id, crew_id = vehicle.gang_id, vehicle.fighter_id
            delta = FinancialDelta().add(vehicle_bucket(vehicle), damage.credits_increase)
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "vehicle_damage_added",
                f'Vehicle "{vehicle.vehicle_name}" suffered "{damage.effect_name}"',
                user_id=user_id,
                vehicle_id=vehicle_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_vehicle_effects(self.cache, vehicle_id, crew_id, gang_id)
        if crew_id is not None:
            invalidate_fighter_vehicle_data(self.cache, crew_id, gang_id)
        return VehicleChangeResult(
            vehicle_id=vehicle_id, financials=financials, effect_ids=[damage.id]
        )

    def _vehicle_damage(self, vehicle: Vehicle, effect_id: int) -> FighterEffect:
        damage = get_or_raise(self.session, FighterEffect, effect_id, "Effect")
        if damage.vehicle_id != vehicle.id or damage.category != EffectCategory.VEHICLE_DAMAGES:
            raise ValueError(f"Effect {effect_id} is not damage on this vehicle")
        return damage

    def remove_vehicle_damage(self, effect_id: int, user_id: str) -> VehicleChangeResult:
        try:
            damage = get_or_raise(self.session, FighterEffect, effect_id, "Effect")
            if damage.vehicle is None:
                raise ValueError(f"Effect {effect_id} is not vehicle damage")
            vehicle = self._owned_vehicle(damage.vehicle_id, user_id)
            self._vehicle_damage(vehicle, effect_id)

            gang_id, crew_id, vehicle_id = vehicle.gang_id, vehicle.fighter_id, vehicle.id
            delta = FinancialDelta().add(vehicle_bucket(vehicle), -damage.credits_increase)
            name = damage.effect_name
            self.session.delete(damage)
            self.session.flush()

            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "vehicle_damage_removed",
                f'Removed "{name}" from vehicle "{vehicle.vehicle_name}"',
                user_id=user_id,
                vehicle_id=vehicle_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_vehicle_effects(self.cache, vehicle_id, crew_id, gang_id)
        if crew_id is not None:
            invalidate_fighter_vehicle_data(self.cache, crew_id, gang_id)
        return VehicleChangeResult(
            vehicle_id=vehicle_id, financials=financials, effect_ids=[effect_id]
        )

    def repair_vehicle_damage(
        self, vehicle_id: int, user_id: str, effect_ids: list[int], repair_cost: int
    ) -> VehicleChangeResult:
        """Remove several damages from a vehicle and pay for the repair.

        Raises:
            ValueError: If an effect is not damage on this vehicle or the gang
                cannot pay ``repair_cost``
        """
        try:
            vehicle = self._owned_vehicle(vehicle_id, user_id)
            if not effect_ids:
                raise ValueError("Select at least one damage to repair")
            if repair_cost < 0:
                raise ValueError("Repair cost cannot be negative")
            gang = vehicle.gang
            if gang.credits < repair_cost:
                raise ValueError(
                    f"Gang has insufficient credits. Required: {repair_cost}, "
                    f"Available: {gang.credits}"
                )

            damages = [self._vehicle_damage(vehicle, effect_id) for effect_id in set(effect_ids)]
            gang_id, crew_id = gang.id, vehicle.fighter_id
            delta = FinancialDelta(credits=-repair_cost).add(
                vehicle_bucket(vehicle), -sum(damage.credits_increase for damage in damages)
            )
            for damage in damages:
                self.session.delete(damage)
            self.session.flush()

            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "vehicle_damage_repaired",
                f'Repaired {len(damages)} damage(s) on vehicle "{vehicle.vehicle_name}" '
                f"for {repair_cost} credits",
                user_id=user_id,
                vehicle_id=vehicle_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_vehicle_repair(self.cache, vehicle_id, crew_id, gang_id)
        if crew_id is not None:
            invalidate_fighter_vehicle_data(self.cache, crew_id, gang_id)
        return VehicleChangeResult(
            vehicle_id=vehicle_id,
            financials=financials,
            effect_ids=sorted({damage.id for damage in damages}),
            credits_delta=-repair_cost,
        )

    def detail(self, vehicle_id: int) -> dict[str, Any]:
        vehicle = self.get_vehicle(vehicle_id)
        return {
            "id": vehicle.id,
            "gang_id": vehicle.gang_id,
            "fighter_id": vehicle.fighter_id,
            "vehicle_type_id": vehicle.vehicle_type_id,
            "vehicle_name": vehicle.vehicle_name,
            "cost": vehicle.cost,
            "special_rules": list(vehicle.special_rules),
            **{stat: getattr(vehicle, stat) for stat in VEHICLE_STAT_FIELDS},
            "total_cost": vehicle_total_cost(vehicle),
            "effective_stats": vehicle_stats(vehicle),
            "equipment_ids": [item.id for item in vehicle.equipment],
            "effects": [
                {
                    "id": effect.id,
                    "effect_name": effect.effect_name,
                    "category": effect.category,
                    "credits_increase": effect.credits_increase,
                    "modifiers": dict(effect.modifiers or {}),
                }
                for effect in vehicle.effects
            ],
        }
