"""Gang vehicle model."""

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

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .catalog import VehicleType
    from .effect import FighterEffect
    from .equipment import FighterEquipment
    from .fighter import Fighter
    from .gang import Gang


class Vehicle(Base, TimestampMixin):
    """A vehicle owned by a gang, optionally crewed by one fighter.

    The stat profile is copied from the vehicle type when the vehicle is
    bought so later catalog changes do not alter existing vehicles.

    Attributes:
        id: Primary key
        gang_id: Owning gang
        fighter_id: Crew fighter (None while unassigned)
        vehicle_type_id: Catalog profile
        vehicle_name: Name
        cost: Base cost of the vehicle
    """

    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_id: Mapped[int] = mapped_column(Integer, ForeignKey("gangs.id"), nullable=False)
    fighter_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="SET NULL"), nullable=True, unique=True
    )
    vehicle_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("vehicle_types.id"), nullable=False
    )

    vehicle_name: Mapped[str] = mapped_column(String(100), nullable=False)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    movement: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    front: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    side: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rear: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hull_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    handling: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    save: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    body_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    drive_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    engine_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    special_rules: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    gang: Mapped["Gang"] = relationship("Gang", back_populates="vehicles")
    fighter: Mapped[Optional["Fighter"]] = relationship("Fighter", back_populates="vehicles")
    vehicle_type: Mapped["VehicleType"] = relationship("VehicleType")
    equipment: Mapped[list["FighterEquipment"]] = relationship(
        "FighterEquipment", back_populates="vehicle", cascade="all, delete"
    )
    effects: Mapped[list["FighterEffect"]] = relationship(
        "FighterEffect", back_populates="vehicle", cascade="all, delete"
    )

    __table_args__ = (
        CheckConstraint("cost >= 0", name="ck_vehicle_cost"),
        Index("idx_vehicle_gang", "gang_id"),
    )

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, name='{self.vehicle_name}', fighter_id={self.fighter_id})>"
