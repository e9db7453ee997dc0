"""Fighter equipment loadouts."""

from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin

if TYPE_CHECKING:
    from .equipment import FighterEquipment
    from .fighter import Fighter


loadout_equipment = Table(
    "fighter_loadout_equipment",
    Base.metadata,
    Column(
        "loadout_id",
        Integer,
        ForeignKey("fighter_loadouts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "fighter_equipment_id",
        Integer,
        ForeignKey("fighter_equipment.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class FighterLoadout(Base, TimestampCreatedMixin):
    """A named subset of a fighter's equipment.

    Loadouts only change what is displayed; the gang rating always counts
    every item the fighter carries.
    """

    __tablename__ = "fighter_loadouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=False
    )
    loadout_name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    fighter: Mapped["Fighter"] = relationship("Fighter", back_populates="loadouts")
    equipment: Mapped[list["FighterEquipment"]] = relationship(
        "FighterEquipment", secondary=loadout_equipment, back_populates="loadouts"
    )

    __table_args__ = (
        UniqueConstraint("fighter_id", "loadout_name", name="uq_fighter_loadout_name"),
    )

    def __repr__(self) -> str:
        return f"<FighterLoadout(id={self.id}, name='{self.loadout_name}')>"
