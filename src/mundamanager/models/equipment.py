"""Owned equipment model.

One row per purchased item. An item sits in exactly one place: on a fighter,
on a vehicle, or in its gang's stash.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin
from .loadout import loadout_equipment

if TYPE_CHECKING:
    from .catalog import Equipment
    from .effect import FighterEffect
    from .fighter import Fighter, FighterExoticBeast
    from .gang import Gang
    from .loadout import FighterLoadout
    from .vehicle import Vehicle


class FighterEquipment(Base, TimestampCreatedMixin):
    """An equipment item owned by a gang.

    Attributes:
        id: Primary key
        gang_id: Owning gang
        fighter_id: Carrying fighter, if any
        vehicle_id: Carrying vehicle, if any
        gang_stash: True when the item is held in the stash
        equipment_id: Catalog item
        purchase_cost: Value counted toward rating or wealth
        original_cost: Catalog cost at the time of purchase
        is_master_crafted: Master-crafted weapon flag
    """

    __tablename__ = "fighter_equipment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_id: Mapped[int] = mapped_column(Integer, ForeignKey("gangs.id"), nullable=False)
    fighter_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighters.id"), nullable=True
    )
    vehicle_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vehicles.id"), nullable=True
    )
    gang_stash: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    equipment_id: Mapped[int] = mapped_column(Integer, ForeignKey("equipment.id"), nullable=False)
    purchase_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    original_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_master_crafted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    gang: Mapped["Gang"] = relationship("Gang", back_populates="equipment")
    fighter: Mapped[Optional["Fighter"]] = relationship("Fighter", back_populates="equipment")
    vehicle: Mapped[Optional["Vehicle"]] = relationship("Vehicle", back_populates="equipment")
    equipment: Mapped["Equipment"] = relationship("Equipment")
    effects: Mapped[list["FighterEffect"]] = relationship(
        "FighterEffect", back_populates="fighter_equipment", cascade="all, delete"
    )
    granted_beasts: Mapped[list["FighterExoticBeast"]] = relationship(
        "FighterExoticBeast", back_populates="fighter_equipment", cascade="all, delete"
    )
    loadouts: Mapped[list["FighterLoadout"]] = relationship(
        "FighterLoadout", secondary=loadout_equipment, back_populates="equipment"
    )

    __table_args__ = (
        CheckConstraint("purchase_cost >= 0", name="ck_fighter_equipment_cost"),
        CheckConstraint(
            "(CASE WHEN fighter_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN vehicle_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN gang_stash THEN 1 ELSE 0 END) = 1",
            name="ck_fighter_equipment_location",
        ),
        Index("idx_fighter_equipment_gang", "gang_id"),
        Index("idx_fighter_equipment_fighter", "fighter_id"),
        Index("idx_fighter_equipment_vehicle", "vehicle_id"),
    )

    @property
    def effects_value(self) -> int:
        return sum(effect.credits_increase for effect in self.effects)

    def __repr__(self) -> str:
        return (
            f"<FighterEquipment(id={self.id}, equipment_id={self.equipment_id}, "
            f"purchase_cost={self.purchase_cost})>"
        )
