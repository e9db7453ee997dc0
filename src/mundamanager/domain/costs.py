"""Cost calculations for fighters, vehicles and gangs.

Every function reads already-loaded ORM objects and returns credits as an
int. The same functions back both the incremental rating bookkeeping and the
full recalculation, so the two always agree.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from mundamanager.domain.enums import ValueBucket
from mundamanager.domain.fighter_status import counts_toward_rating
from mundamanager.domain.rules_config import DEFAULT_RULES, EconomyRules

if TYPE_CHECKING:
    from mundamanager.models import Fighter, FighterEquipment, FighterLoadout, Gang, Vehicle


def _effects_total(effects: Iterable[Any]) -> int:
    return sum(effect.credits_increase for effect in effects)


def equipment_value(item: FighterEquipment) -> int:
    """Purchase cost of an item plus the value of effects attached to it."""

    return item.purchase_cost + _effects_total(item.effects)


def vehicle_total_cost(vehicle: Vehicle) -> int:
    """Base cost plus equipment and effect value of a vehicle."""

    equipment = sum(item.purchase_cost for item in vehicle.equipment)
    return vehicle.cost + equipment + _effects_total(vehicle.effects)


def beast_cost(beast: Fighter) -> int:
    """Value an owned exotic beast adds to its owner.

    The beast's purchase price is carried by the equipment that granted it,
    so only what the beast acquired afterwards is counted here.
    """

    return (
        beast.credits
        + beast.cost_adjustment
        + sum(item.purchase_cost for item in beast.equipment)
        + sum(skill.credits_increase for skill in beast.skills)
        + _effects_total(beast.effects)
    )


def owned_beasts_cost(owner: Fighter) -> int:
    """Summed cost of the owner's beasts that are still on the roster."""

    return sum(
        beast_cost(link.beast) for link in owner.owned_beasts if counts_toward_rating(link.beast)
    )


def fighter_total_cost(fighter: Fighter) -> int:
    """Total cost of a fighter as shown on its card.

    Owned exotic beasts report 0; their value is included in the owner's cost.
    """

    if fighter.is_owned_beast:
        return 0

    return (
        fighter.credits
        + fighter.cost_adjustment
        + sum(item.purchase_cost for item in fighter.equipment)
        + sum(skill.credits_increase for skill in fighter.skills)
        + _effects_total(fighter.effects)
        + sum(vehicle_total_cost(vehicle) for vehicle in fighter.vehicles)
        + owned_beasts_cost(fighter)
    )


def loadout_cost(fighter: Fighter, loadout: FighterLoadout) -> int:
    """Fighter cost counting only the equipment in ``loadout``. Display only."""

    return (
        fighter.credits
        + fighter.cost_adjustment
        + sum(item.purchase_cost for item in loadout.equipment)
        + sum(skill.credits_increase for skill in fighter.skills)
        + _effects_total(fighter.effects)
    )


def fighter_bucket(fighter: Fighter) -> ValueBucket:
    """Bucket that value carried by ``fighter`` is counted in."""

    if fighter.is_owned_beast:
        owner = fighter.beast_owner_link.owner
        if counts_toward_rating(owner) and counts_toward_rating(fighter):
            return ValueBucket.RATING
        return ValueBucket.UNCOUNTED
    return ValueBucket.RATING if counts_toward_rating(fighter) else ValueBucket.UNCOUNTED


def vehicle_bucket(vehicle: Vehicle) -> ValueBucket:
    """Bucket that a vehicle's value is counted in."""

    if vehicle.fighter is None:
        return ValueBucket.UNASSIGNED_VEHICLE
    return fighter_bucket(vehicle.fighter)


def equipment_bucket(item: FighterEquipment) -> ValueBucket:
    """Bucket that an equipment item's value is counted in."""

    if item.gang_stash:
        return ValueBucket.STASH
    if item.fighter is not None:
        return fighter_bucket(item.fighter)
    if item.vehicle is not None:
        return vehicle_bucket(item.vehicle)
    return ValueBucket.UNCOUNTED


def rating_contribution(fighter: Fighter) -> int:
    """How much of the gang rating this fighter currently accounts for."""

    if fighter.is_owned_beast:
        return beast_cost(fighter) if fighter_bucket(fighter) is ValueBucket.RATING else 0
    return fighter_total_cost(fighter) if counts_toward_rating(fighter) else 0


def calculate_gang_rating(gang: Gang) -> int:
    """Rating rebuilt from the gang's fighters."""

    return sum(
        fighter_total_cost(fighter)
        for fighter in gang.fighters
        if counts_toward_rating(fighter) and not fighter.is_owned_beast
    )


def stash_value(gang: Gang) -> int:
    return sum(item.purchase_cost for item in gang.equipment if item.gang_stash)


def unassigned_vehicle_value(gang: Gang) -> int:
    return sum(vehicle_total_cost(v) for v in gang.vehicles if v.fighter is None)


def calculate_gang_wealth(gang: Gang, rating: int | None = None) -> int:
    """Wealth rebuilt from rating, credits, stash and unassigned vehicles."""

    if rating is None:
        rating = calculate_gang_rating(gang)
    return rating + gang.credits + stash_value(gang) + unassigned_vehicle_value(gang)


def master_crafted_cost(rating_cost: int, rules: EconomyRules = DEFAULT_RULES.economy) -> int:
    """Raise a weapon's cost for master-crafting, rounded up to the next step."""

    step = rules.master_crafted_rounding
    return math.ceil(rating_cost * rules.master_crafted_multiplier / step) * step


def stash_sell_value(
    purchase_cost: int,
    manual_cost: float | None = None,
    rules: EconomyRules = DEFAULT_RULES.economy,
) -> int:
    """Credits received for selling a stash item, never below the minimum."""

    value = manual_cost if manual_cost is not None else purchase_cost
    return max(rules.min_stash_sell_value, math.floor(value))


def effective_stats(base: dict[str, Any], effects: Iterable[Any]) -> dict[str, Any]:
    """Apply every effect's modifiers to a base characteristic profile."""

    stats = dict(base)
    for effect in effects:
        for stat, delta in (effect.modifiers or {}).items():
            stats[stat] = stats.get(stat, 0) + delta
    return stats
