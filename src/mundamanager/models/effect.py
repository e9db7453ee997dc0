"""Fighter and vehicle effects: injuries, advancements, vehicle damage."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin

if TYPE_CHECKING:
    from .catalog import EffectType
    from .equipment import FighterEquipment
    from .fighter import Fighter
    from .vehicle import Vehicle


class FighterEffect(Base, TimestampCreatedMixin):
    """An effect applied to a fighter or a vehicle.

    Attributes:
        id: Primary key
        fighter_id: Affected fighter (fighter effects)
        vehicle_id: Affected vehicle (vehicle damage)
        fighter_equipment_id: Equipment the effect is attached to, if any
        effect_type_id: Catalog template, None for ad-hoc advancements
        effect_name: Display name
        category: 'injuries', 'advancements', 'vehicle_damages' or 'user'
        credits_increase: Value added to the carrier's cost
        xp_cost: XP spent on the effect (refunded on removal)
        modifiers: Characteristic changes keyed by stat name
    """

    __tablename__ = "fighter_effects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=True
    )
    vehicle_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=True
    )
    fighter_equipment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighter_equipment.id", ondelete="CASCADE"), nullable=True
    )
    effect_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("effect_types.id"), nullable=True
    )
    effect_name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    credits_increase: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    xp_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    modifiers: Mapped[dict[str, int]] = mapped_column(JSON, nullable=False, default=dict)

    fighter: Mapped[Optional["Fighter"]] = relationship("Fighter", back_populates="effects")
    vehicle: Mapped[Optional["Vehicle"]] = relationship("Vehicle", back_populates="effects")
    fighter_equipment: Mapped[Optional["FighterEquipment"]] = relationship(
        "FighterEquipment", back_populates="effects"
    )
    effect_type: Mapped[Optional["EffectType"]] = relationship("EffectType")

    __table_args__ = (
        CheckConstraint(
            "fighter_id IS NOT NULL OR vehicle_id IS NOT NULL", name="ck_effect_carrier"
        ),
        Index("idx_effect_fighter", "fighter_id"),
        Index("idx_effect_vehicle", "vehicle_id"),
    )

    def __repr__(self) -> str:
        return f"<FighterEffect(id={self.id}, name='{self.effect_name}')>"
