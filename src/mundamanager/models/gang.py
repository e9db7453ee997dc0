"""Gang and gang log models.

A gang owns fighters, vehicles and stash equipment. Its ``rating`` and
``wealth`` columns are maintained incrementally by the financials service
and can be rebuilt from the owned rows at any time.
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin, TimestampMixin

if TYPE_CHECKING:
    from .campaign import CampaignGang
    from .catalog import GangType
    from .equipment import FighterEquipment
    from .fighter import Fighter
    from .user import Profile
    from .vehicle import Vehicle


class Gang(Base, TimestampMixin):
    """A user's gang.

    Attributes:
        id: Primary key
        user_id: Owning profile
        gang_type_id: Gang type from the catalog
        name: Gang name
        gang_colour: Display colour
        alignment: 'Law Abiding', 'Outlaw' or None
        credits: Unspent credits
        reputation: Reputation points
        rating: Summed cost of fighters that count toward rating
        wealth: rating + credits + stash value + unassigned vehicle value
        meat: Meat available to feed starving fighters
        scavenging_rolls: Scavenging rolls available
        exploration_points: Exploration points
        note: Free text
        positioning: Fighter display order, slot -> fighter id
    """

    __tablename__ = "gangs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), nullable=False)
    gang_type_id: Mapped[int] = mapped_column(Integer, ForeignKey("gang_types.id"), nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    gang_colour: Mapped[str | None] = mapped_column(String(20), nullable=True)
    alignment: Mapped[str | None] = mapped_column(String(20), nullable=True)
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reputation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wealth: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    meat: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    scavenging_rolls: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    exploration_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    positioning: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    owner: Mapped["Profile"] = relationship("Profile", back_populates="gangs")
    gang_type: Mapped["GangType"] = relationship("GangType")
    fighters: Mapped[list["Fighter"]] = relationship(
        "Fighter", back_populates="gang", cascade="all, delete-orphan"
    )
    vehicles: Mapped[list["Vehicle"]] = relationship(
        "Vehicle", back_populates="gang", cascade="all, delete-orphan"
    )
    equipment: Mapped[list["FighterEquipment"]] = relationship(
        "FighterEquipment", back_populates="gang", cascade="all, delete"
    )
    logs: Mapped[list["GangLog"]] = relationship(
        "GangLog", back_populates="gang", cascade="all, delete"
    )
    campaign_gangs: Mapped[list["CampaignGang"]] = relationship(
        "CampaignGang", back_populates="gang", cascade="all, delete"
    )

    __table_args__ = (
        CheckConstraint("credits >= 0", name="ck_gang_credits"),
        CheckConstraint("rating >= 0", name="ck_gang_rating"),
        CheckConstraint("wealth >= 0", name="ck_gang_wealth"),
        CheckConstraint(
            "alignment IS NULL OR alignment IN ('Law Abiding', 'Outlaw')",
            name="ck_gang_alignment",
        ),
        Index("idx_gang_user", "user_id"),
    )

    @property
    def stash(self) -> list["FighterEquipment"]:
        return [item for item in self.equipment if item.gang_stash]

    def __repr__(self) -> str:
        return f"<Gang(id={self.id}, name='{self.name}', rating={self.rating})>"


class GangLog(Base, TimestampCreatedMixin):
    """Append-only history entry shown on the gang page.

    Attributes:
        id: Primary key
        gang_id: Gang the entry belongs to
        user_id: User who performed the action (None for system entries)
        action_type: Machine-readable action, e.g. 'fighter_killed'
        description: Human-readable description
        fighter_id: Fighter involved, if any
        vehicle_id: Vehicle involved, if any
    """

    __tablename__ = "gang_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("profiles.id"), nullable=True
    )
    action_type: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    fighter_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    vehicle_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    gang: Mapped[Optional["Gang"]] = relationship("Gang", back_populates="logs")

    __table_args__ = (Index("idx_gang_log_gang_created", "gang_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<GangLog(id={self.id}, gang_id={self.gang_id}, action='{self.action_type}')>"
