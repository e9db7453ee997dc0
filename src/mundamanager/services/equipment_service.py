"""Equipment Service for Munda Manager.

This module handles the trading post and the gang stash: buying equipment
for a fighter, a vehicle or the stash, selling and deleting it, and moving
it between the stash and the roster.

Every operation works out which value bucket an item leaves and which it
enters (rating, stash, unassigned vehicle, or nowhere) and hands the
resulting delta to the financials service, so rating and wealth always
match what a full recalculation would produce.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from mundamanager.cache import TagCache
from mundamanager.cache.invalidation import (
    add_beast_to_gang_cache,
    invalidate_equipment_deletion,
    invalidate_equipment_purchase,
    invalidate_fighter_owned_beasts,
    invalidate_fighter_vehicle_data,
    invalidate_gang_stash,
    invalidate_vehicle_data,
)
from mundamanager.domain.costs import (
    equipment_bucket,
    equipment_value,
    master_crafted_cost,
    rating_contribution,
    stash_sell_value,
)
from mundamanager.domain.enums import EquipmentType, ValueBucket
from mundamanager.domain.rules_config import DEFAULT_RULES, RulesConfig
from mundamanager.domain.valuation import FinancialDelta
from mundamanager.models import (
    Equipment,
    Fighter,
    FighterEquipment,
    FighterExoticBeast,
    Gang,
    Vehicle,
)
from mundamanager.services.financials import FinancialUpdateResult, apply_financial_delta
from mundamanager.services.gang_logs import create_gang_log
from mundamanager.services.lookups import get_or_raise
from mundamanager.services.permissions import require_gang_owner

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PurchaseResult:
    item: FighterEquipment
    financials: FinancialUpdateResult
    created_beast_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class EquipmentChangeResult:
    """Outcome of selling, deleting or moving an item."""

    equipment_id: int
    financials: FinancialUpdateResult
    credits_received: int = 0
    deleted_beast_ids: list[int] = field(default_factory=list)
    created_beast_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class _Holder:
    """Where an item sat, captured before it is changed."""

    fighter_id: int | None
    vehicle_id: int | None
    vehicle_crew_id: int | None
    owner_id: int | None

    @classmethod
    def of(cls, item: FighterEquipment) -> "_Holder":
        fighter = item.fighter
        vehicle = item.vehicle
        owner_link = fighter.beast_owner_link if fighter is not None else None
        return cls(
            fighter_id=fighter.id if fighter is not None else None,
            vehicle_id=vehicle.id if vehicle is not None else None,
            vehicle_crew_id=vehicle.fighter_id if vehicle is not None else None,
            owner_id=owner_link.owner_id if owner_link is not None else None,
        )


class EquipmentService:
    """Trading post and stash operations."""

    def __init__(self, session: Session, cache: TagCache, rules: RulesConfig = DEFAULT_RULES):
        self.session = session
        self.cache = cache
        self.rules = rules

    def get_item(self, item_id: int) -> FighterEquipment:
        return get_or_raise(self.session, FighterEquipment, item_id, "Equipment")

    def _owned_item(self, item_id: int, user_id: str) -> FighterEquipment:
        item = self.get_item(item_id)
        require_gang_owner(self.session, item.gang, user_id)
        return item

    def _resolve_target(
        self, gang: Gang, fighter_id: int | None, vehicle_id: int | None, *, required: bool
    ) -> tuple[Fighter | None, Vehicle | None]:
        if fighter_id is not None and vehicle_id is not None:
            raise ValueError("Cannot provide both fighter_id and vehicle_id")
        if required and fighter_id is None and vehicle_id is None:
            raise ValueError("Either fighter_id or vehicle_id must be provided")

        fighter = vehicle = None
        if fighter_id is not None:
            fighter = get_or_raise(self.session, Fighter, fighter_id, "Fighter")
            if fighter.gang_id != gang.id:
                raise ValueError("Fighter does not belong to this gang")
        if vehicle_id is not None:
            vehicle = get_or_raise(self.session, Vehicle, vehicle_id, "Vehicle")
            if vehicle.gang_id != gang.id:
                raise ValueError("Vehicle does not belong to this gang")
        return fighter, vehicle

    def _create_beasts(self, item: FighterEquipment, owner: Fighter) -> list[Fighter]:
        """Create the exotic beasts granted by ``item`` for ``owner``."""
        beast_type = item.equipment.grants_beast_type
        if beast_type is None:
            return []
        if owner.is_owned_beast:
            raise ValueError("Exotic beasts cannot own other exotic beasts")

        beast = Fighter(
            gang=owner.gang,
            fighter_type=beast_type,
            fighter_name=beast_type.name,
            fighter_class=beast_type.fighter_class,
            credits=0,
            stats=dict(beast_type.stats),
            special_rules=list(beast_type.special_rules),
        )
        self.session.add(beast)
        self.session.add(FighterExoticBeast(owner=owner, beast=beast, fighter_equipment=item))
        self.session.flush()
        logger.info("fighter %s gained exotic beast %s", owner.id, beast.id)
        return [beast]

    def _remove_beasts(self, item: FighterEquipment, delta: FinancialDelta) -> list[int]:
        """Delete the beasts granted by ``item``, taking their value out of ``delta``'s rating."""
        removed = []
        for link in list(item.granted_beasts):
            beast = link.beast
            delta.rating -= rating_contribution(beast)
            removed.append(beast.id)
            self.session.delete(beast)
        return removed

    @staticmethod
    def _check_beast_target(equipment: Equipment, fighter: Fighter | None) -> None:
        if equipment.grants_beast_type_id is not None and fighter is None:
            raise ValueError(
                f'"{equipment.equipment_name}" grants exotic beasts and must go to a fighter'
            )

    @staticmethod
    def _location(fighter: Fighter | None, vehicle: Vehicle | None) -> str:
        if fighter is not None:
            return f'fighter "{fighter.fighter_name}"'
        if vehicle is not None:
            return f'vehicle "{vehicle.vehicle_name}"'
        return "the gang stash"

    def buy_equipment(
        self,
        gang_id: int,
        user_id: str,
        equipment_id: int,
        *,
        fighter_id: int | None = None,
        vehicle_id: int | None = None,
        manual_cost: int | None = None,
        master_crafted: bool = False,
        use_base_cost_for_rating: bool = True,
    ) -> PurchaseResult:
        """Buy an item for a fighter, a vehicle, or the stash.

        Args:
            gang_id: Buying gang
            user_id: Acting user
            equipment_id: Catalog item
            fighter_id: Fighter receiving the item
            vehicle_id: Vehicle receiving the item; with neither target the
                item goes to the stash
            manual_cost: Credits paid instead of the catalog cost
            master_crafted: Master-crafted weapon (raises the rating cost)
            use_base_cost_for_rating: Count the catalog cost rather than the
                amount paid

        Returns:
            PurchaseResult with the new item, any beasts it created, and the
            financial change

        Raises:
            ValueError: On an invalid target or insufficient credits
        """
        try:
            gang = get_or_raise(self.session, Gang, gang_id, "Gang")
            require_gang_owner(self.session, gang, user_id)
            equipment = get_or_raise(self.session, Equipment, equipment_id, "Equipment")
            fighter, vehicle = self._resolve_target(gang, fighter_id, vehicle_id, required=False)
            self._check_beast_target(equipment, fighter)

            if master_crafted and equipment.equipment_type != EquipmentType.WEAPON:
                raise ValueError("Only weapons can be master-crafted")
            if manual_cost is not None and manual_cost < 0:
                raise ValueError("Cost cannot be negative")

            payment = equipment.cost if manual_cost is None else manual_cost
            rating_cost = equipment.cost if use_base_cost_for_rating else payment
            if master_crafted:
                rating_cost = master_crafted_cost(rating_cost, self.rules.economy)
            if payment > 0 and gang.credits < payment:
                raise ValueError(
                    f"Gang has insufficient credits. Required: {payment}, "
                    f"Available: {gang.credits}"
                )

            item = FighterEquipment(
                gang=gang,
                fighter=fighter,
                vehicle=vehicle,
                gang_stash=fighter is None and vehicle is None,
                equipment=equipment,
                purchase_cost=rating_cost,
                original_cost=equipment.cost,
                is_master_crafted=master_crafted,
            )
            self.session.add(item)
            self.session.flush()

            delta = FinancialDelta(credits=-payment).add(equipment_bucket(item), rating_cost)
            beasts = self._create_beasts(item, fighter) if fighter is not None else []
            financials = apply_financial_delta(self.session, self.cache, gang.id, delta)

            description = (
                f'Purchased "{equipment.equipment_name}" for {payment} credits '
                f"({self._location(fighter, vehicle)})"
            )
            if beasts:
                description += f"; gained exotic beast {', '.join(b.fighter_name for b in beasts)}"
            create_gang_log(
                self.session,
                gang.id,
                "equipment_purchased",
                description,
                user_id=user_id,
                fighter_id=fighter.id if fighter is not None else None,
                vehicle_id=vehicle.id if vehicle is not None else None,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        beast_ids = [beast.id for beast in beasts]
        self._invalidate_purchase(item, gang_id, beast_ids)
        return PurchaseResult(item=item, financials=financials, created_beast_ids=beast_ids)

    def _invalidate_purchase(
        self, item: FighterEquipment, gang_id: int, beast_ids: list[int]
    ) -> None:
        if item.fighter_id is not None:
            invalidate_equipment_purchase(self.cache, item.fighter_id, gang_id, beast_ids)
            for beast_id in beast_ids:
                add_beast_to_gang_cache(self.cache, beast_id, gang_id)
            owner_link = item.fighter.beast_owner_link
            if owner_link is not None:
                invalidate_fighter_owned_beasts(self.cache, owner_link.owner_id, gang_id)
        elif item.vehicle_id is not None:
            invalidate_vehicle_data(self.cache, item.vehicle_id)
            crew_id = item.vehicle.fighter_id
            if crew_id is not None:
                invalidate_fighter_vehicle_data(self.cache, crew_id, gang_id)
        else:
            invalidate_gang_stash(self.cache, gang_id)

    def _invalidate_removal(
        self, holder: _Holder, gang_id: int, deleted_beast_ids: list[int]
    ) -> None:
        if holder.fighter_id is not None:
            invalidate_equipment_deletion(
                self.cache, holder.fighter_id, gang_id, deleted_beast_ids
            )
            if holder.owner_id is not None:
                invalidate_fighter_owned_beasts(self.cache, holder.owner_id, gang_id)
        elif holder.vehicle_id is not None:
            invalidate_vehicle_data(self.cache, holder.vehicle_id)
            if holder.vehicle_crew_id is not None:
                invalidate_fighter_vehicle_data(self.cache, holder.vehicle_crew_id, gang_id)
        invalidate_gang_stash(self.cache, gang_id)

    def sell_equipment(
        self, item_id: int, user_id: str, manual_cost: int | None = None
    ) -> EquipmentChangeResult:
        """Sell a carried item. Stash items go through :meth:`sell_from_stash`.

        The sale credits ``manual_cost`` (default: the purchase cost); the
        item's value, including effects attached to it, leaves the bucket it
        was counted in. Attached effects and granted beasts are deleted.
        """
        return self._remove(item_id, user_id, sell=True, manual_cost=manual_cost)

    def delete_equipment(self, item_id: int, user_id: str) -> EquipmentChangeResult:
        """Remove a carried item without any credits in return."""
        return self._remove(item_id, user_id, sell=False)

    def _remove(
        self, item_id: int, user_id: str, *, sell: bool, manual_cost: int | None = None
    ) -> EquipmentChangeResult:
        item = self.get_item(item_id)
        if item.gang_stash:
            if sell:
                return self.sell_from_stash(item_id, user_id, manual_cost)
            return self.delete_from_stash(item_id, user_id)

        try:
            require_gang_owner(self.session, item.gang, user_id)
            if manual_cost is not None and manual_cost < 0:
                raise ValueError("Sale value cannot be negative")

            gang_id = item.gang_id
            holder = _Holder.of(item)
            name = item.equipment.equipment_name
            location = self._location(item.fighter, item.vehicle)
            credits = (item.purchase_cost if manual_cost is None else manual_cost) if sell else 0

            delta = FinancialDelta(credits=credits).add(
                equipment_bucket(item), -equipment_value(item)
            )
            deleted_beast_ids = self._remove_beasts(item, delta)
            self.session.delete(item)
            self.session.flush()
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)

            if sell:
                action_type = "equipment_sold"
                description = f'Sold "{name}" from {location} for {credits} credits'
            else:
                action_type = "equipment_deleted"
                description = f'Removed "{name}" from {location}'
            create_gang_log(
                self.session,
                gang_id,
                action_type,
                description,
                user_id=user_id,
                fighter_id=holder.fighter_id,
                vehicle_id=holder.vehicle_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate_removal(holder, gang_id, deleted_beast_ids)
        return EquipmentChangeResult(
            equipment_id=item_id,
            financials=financials,
            credits_received=credits,
            deleted_beast_ids=deleted_beast_ids,
        )

    def move_to_stash(self, item_id: int, user_id: str) -> EquipmentChangeResult:
        """Move a carried item into the gang stash.

        Effects attached to the item are discarded and the item drops out of
        every loadout.

        Raises:
            ValueError: If the item is already stashed or still has beasts
        """
        try:
            item = self._owned_item(item_id, user_id)
            if item.gang_stash:
                raise ValueError("Equipment is already in gang stash")
            if item.granted_beasts:
                raise ValueError(
                    "Equipment with exotic beasts cannot be moved to the gang stash"
                )

            gang_id = item.gang_id
            holder = _Holder.of(item)
            location = self._location(item.fighter, item.vehicle)
            delta = FinancialDelta().add(equipment_bucket(item), -equipment_value(item))
            delta.add(ValueBucket.STASH, item.purchase_cost)

            for effect in list(item.effects):
                self.session.delete(effect)
            item.loadouts.clear()
            item.fighter = None
            item.vehicle = None
            item.gang_stash = True
            self.session.flush()

            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "equipment_moved_to_stash",
                f'Moved "{item.equipment.equipment_name}" from {location} to the gang stash',
                user_id=user_id,
                fighter_id=holder.fighter_id,
                vehicle_id=holder.vehicle_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self._invalidate_removal(holder, gang_id, [])
        return EquipmentChangeResult(equipment_id=item_id, financials=financials)

    def move_from_stash(
        self,
        item_id: int,
        user_id: str,
        *,
        fighter_id: int | None = None,
        vehicle_id: int | None = None,
    ) -> EquipmentChangeResult:
        """Give a stashed item to a fighter or a vehicle of the same gang.

        Beast-granting equipment creates its beasts when given to a fighter.
        """
        try:
            item = self._owned_item(item_id, user_id)
            if not item.gang_stash:
                raise ValueError("Equipment is not in the gang stash")
            fighter, vehicle = self._resolve_target(
                item.gang, fighter_id, vehicle_id, required=True
            )
            self._check_beast_target(item.equipment, fighter)

            gang_id = item.gang_id
            item.gang_stash = False
            item.fighter = fighter
            item.vehicle = vehicle
            self.session.flush()

            delta = FinancialDelta().move(
                ValueBucket.STASH, equipment_bucket(item), item.purchase_cost
            )
            beasts = self._create_beasts(item, fighter) if fighter is not None else []
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "equipment_moved_from_stash",
                f'Moved "{item.equipment.equipment_name}" from the gang stash to '
                f"{self._location(fighter, vehicle)}",
                user_id=user_id,
                fighter_id=fighter_id,
                vehicle_id=vehicle_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        beast_ids = [beast.id for beast in beasts]
        self._invalidate_purchase(item, gang_id, beast_ids)
        invalidate_gang_stash(self.cache, gang_id)
        return EquipmentChangeResult(
            equipment_id=item_id, financials=financials, created_beast_ids=beast_ids
        )

    def sell_from_stash(
        self, item_id: int, user_id: str, manual_cost: int | None = None
    ) -> EquipmentChangeResult:
        """Sell a stashed item for ``max(5, floor(manual_cost or purchase_cost))``."""
        try:
            item = self._owned_item(item_id, user_id)
            if not item.gang_stash:
                raise ValueError("Equipment is not in the gang stash")
            if manual_cost is not None and manual_cost < 0:
                raise ValueError("Sale value cannot be negative")

            gang_id = item.gang_id
            name = item.equipment.equipment_name
            credits = stash_sell_value(item.purchase_cost, manual_cost, self.rules.economy)
            delta = FinancialDelta(credits=credits).add(ValueBucket.STASH, -item.purchase_cost)

            self.session.delete(item)
            self.session.flush()
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "equipment_sold",
                f'Sold "{name}" from the gang stash for {credits} credits',
                user_id=user_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_gang_stash(self.cache, gang_id)
        return EquipmentChangeResult(
            equipment_id=item_id, financials=financials, credits_received=credits
        )

    def delete_from_stash(self, item_id: int, user_id: str) -> EquipmentChangeResult:
        try:
            item = self._owned_item(item_id, user_id)
            if not item.gang_stash:
                raise ValueError("Equipment is not in the gang stash")

            gang_id = item.gang_id
            name = item.equipment.equipment_name
            delta = FinancialDelta().add(ValueBucket.STASH, -item.purchase_cost)

            self.session.delete(item)
            self.session.flush()
            financials = apply_financial_delta(self.session, self.cache, gang_id, delta)
            create_gang_log(
                self.session,
                gang_id,
                "equipment_deleted",
                f'Removed "{name}" from the gang stash',
                user_id=user_id,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_gang_stash(self.cache, gang_id)
        return EquipmentChangeResult(equipment_id=item_id, financials=financials)

    def list_stash(self, gang_id: int) -> list[FighterEquipment]:
        get_or_raise(self.session, Gang, gang_id, "Gang")
        stmt = (
            select(FighterEquipment)
            .where(FighterEquipment.gang_id == gang_id, FighterEquipment.gang_stash.is_(True))
            .order_by(FighterEquipment.id)
        )
        return list(self.session.execute(stmt).scalars())
