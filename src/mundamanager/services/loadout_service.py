"""Loadout Service for Munda Manager.

Loadouts are named subsets of what a fighter carries. They change what the
fighter card shows and nothing else: the gang rating keeps counting every
carried item, so no operation here touches gang financials.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from mundamanager.cache import CacheTag, TagCache
from mundamanager.cache.invalidation import invalidate_fighter_loadouts
from mundamanager.domain.costs import loadout_cost
from mundamanager.models import Fighter, FighterEquipment, FighterLoadout
from mundamanager.services.gang_logs import create_gang_log
from mundamanager.services.lookups import get_or_raise
from mundamanager.services.permissions import require_gang_owner

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadoutSummary:
    id: int
    fighter_id: int
    loadout_name: str
    is_active: bool
    equipment_ids: list[int]
    loadout_cost: int


class LoadoutService:
    """Display-only equipment loadouts."""

    def __init__(self, session: Session, cache: TagCache):
        self.session = session
        self.cache = cache

    def _owned_fighter(self, fighter_id: int, user_id: str) -> Fighter:
        fighter = get_or_raise(self.session, Fighter, fighter_id, "Fighter")
        require_gang_owner(self.session, fighter.gang, user_id)
        return fighter

    def _carried_items(self, fighter: Fighter, equipment_ids: list[int]) -> list[FighterEquipment]:
        carried = {item.id: item for item in fighter.equipment}
        missing = sorted(set(equipment_ids) - carried.keys())
        if missing:
            raise ValueError(f"Equipment not carried by this fighter: {missing}")
        return [carried[item_id] for item_id in dict.fromkeys(equipment_ids)]

    def create_loadout(
        self, fighter_id: int, user_id: str, loadout_name: str, equipment_ids: list[int]
    ) -> FighterLoadout:
        """Save a named loadout from items the fighter carries.

        Raises:
            ValueError: If the name is empty or taken, or an item is not carried
        """
        try:
            fighter = self._owned_fighter(fighter_id, user_id)
            name = loadout_name.strip()
            if not name:
                raise ValueError("Loadout name cannot be empty")
            taken = self.session.execute(
                select(FighterLoadout.id).where(
                    FighterLoadout.fighter_id == fighter.id, FighterLoadout.loadout_name == name
                )
            ).scalar_one_or_none()
            if taken is not None:
                raise ValueError(f'Fighter already has a loadout named "{name}"')

            loadout = FighterLoadout(
                fighter=fighter,
                loadout_name=name,
                equipment=self._carried_items(fighter, equipment_ids),
            )
            self.session.add(loadout)
            create_gang_log(
                self.session,
                fighter.gang_id,
                "loadout_created",
                f'Created loadout "{name}" for fighter "{fighter.fighter_name}"',
                user_id=user_id,
                fighter_id=fighter.id,
            )
            gang_id = fighter.gang_id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_fighter_loadouts(self.cache, fighter_id, gang_id)
        return loadout

    def delete_loadout(self, loadout_id: int, user_id: str) -> None:
        try:
            loadout = get_or_raise(self.session, FighterLoadout, loadout_id, "Loadout")
            fighter = self._owned_fighter(loadout.fighter_id, user_id)
            create_gang_log(
                self.session,
                fighter.gang_id,
                "loadout_deleted",
                f'Deleted loadout "{loadout.loadout_name}" of fighter "{fighter.fighter_name}"',
                user_id=user_id,
                fighter_id=fighter.id,
            )
            fighter_id, gang_id = fighter.id, fighter.gang_id
            fighter.loadouts.remove(loadout)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        invalidate_fighter_loadouts(self.cache, fighter_id, gang_id)

    def set_active_loadout(
        self, fighter_id: int, user_id: str, loadout_id: int | None
    ) -> FighterLoadout | None:
        """Activate one of the fighter's loadouts, or clear the active one with None."""
        try:
            fighter = self._owned_fighter(fighter_id, user_id)
            selected = None
            if loadout_id is not None:
                selected = get_or_raise(self.session, FighterLoadout, loadout_id, "Loadout")
                if selected.fighter_id != fighter.id:
                    raise ValueError("Loadout does not belong to this fighter")
            for loadout in fighter.loadouts:
                loadout.is_active = loadout is selected
            gang_id = fighter.gang_id
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.debug("fighter %s active loadout set to %s", fighter_id, loadout_id)
        invalidate_fighter_loadouts(self.cache, fighter_id, gang_id)
        return selected

    def list_loadouts(self, fighter_id: int) -> list[LoadoutSummary]:
        fighter = get_or_raise(self.session, Fighter, fighter_id, "Fighter")

        def build() -> list[LoadoutSummary]:
            return [
                LoadoutSummary(
                    id=loadout.id,
                    fighter_id=fighter.id,
                    loadout_name=loadout.loadout_name,
                    is_active=loadout.is_active,
                    equipment_ids=[item.id for item in loadout.equipment],
                    loadout_cost=loadout_cost(fighter, loadout),
                )
                for loadout in sorted(fighter.loadouts, key=lambda row: row.id)
            ]

        return self.cache.get_or_set(
            f"fighter-loadouts:{fighter_id}",
            [
                CacheTag.BASE_FIGHTER_LOADOUTS.tag(fighter_id),
                CacheTag.BASE_FIGHTER_EQUIPMENT.tag(fighter_id),
                CacheTag.BASE_FIGHTER_SKILLS.tag(fighter_id),
                CacheTag.BASE_FIGHTER_EFFECTS.tag(fighter_id),
                CacheTag.BASE_FIGHTER_BASIC.tag(fighter_id),
            ],
            build,
        )
