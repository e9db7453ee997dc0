"""Fighter models.

This module contains models for:
- Fighters (gang members, including owned exotic beasts)
- FighterSkills (skills a fighter has learned)
- FighterExoticBeasts (owner -> beast links created by beast-granting equipment)
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin, TimestampMixin

if TYPE_CHECKING:
    from .catalog import FighterType, Skill
    from .effect import FighterEffect
    from .equipment import FighterEquipment
    from .gang import Gang
    from .loadout import FighterLoadout
    from .vehicle import Vehicle


class Fighter(Base, TimestampMixin):
    """A fighter in a gang.

    Attributes:
        id: Primary key
        gang_id: Owning gang
        fighter_type_id: Catalog profile the fighter was recruited from
        fighter_name: Name
        label: Short label shown on cards (max 5 characters)
        fighter_class: Copied from the fighter type
        credits: Base cost counted toward rating
        cost_adjustment: Manual adjustment added to the fighter's cost
        xp: Unspent experience
        kills: Recorded kills
        killed, retired, enslaved, starved, recovery, captured: Status flags
        note: Free text
        special_rules: List of rule names
        stats: Characteristic profile keyed by stat name
    """

    __tablename__ = "fighters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_id: Mapped[int] = mapped_column(Integer, ForeignKey("gangs.id"), nullable=False)
    fighter_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighter_types.id"), nullable=False
    )

    fighter_name: Mapped[str] = mapped_column(String(100), nullable=False)
    label: Mapped[str | None] = mapped_column(String(5), nullable=True)
    fighter_class: Mapped[str] = mapped_column(String(50), nullable=False)
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cost_adjustment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    kills: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    killed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    retired: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    enslaved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    starved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recovery: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    captured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    special_rules: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    stats: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    gang: Mapped["Gang"] = relationship("Gang", back_populates="fighters")
    fighter_type: Mapped["FighterType"] = relationship("FighterType")
    equipment: Mapped[list["FighterEquipment"]] = relationship(
        "FighterEquipment", back_populates="fighter", cascade="all, delete"
    )
    skills: Mapped[list["FighterSkill"]] = relationship(
        "FighterSkill", back_populates="fighter", cascade="all, delete-orphan"
    )
    effects: Mapped[list["FighterEffect"]] = relationship(
        "FighterEffect", back_populates="fighter", cascade="all, delete"
    )
    vehicles: Mapped[list["Vehicle"]] = relationship("Vehicle", back_populates="fighter")
    loadouts: Mapped[list["FighterLoadout"]] = relationship(
        "FighterLoadout", back_populates="fighter", cascade="all, delete-orphan"
    )
    owned_beasts: Mapped[list["FighterExoticBeast"]] = relationship(
        "FighterExoticBeast",
        back_populates="owner",
        foreign_keys="FighterExoticBeast.owner_id",
        cascade="all, delete",
    )
    beast_owner_link: Mapped[Optional["FighterExoticBeast"]] = relationship(
        "FighterExoticBeast",
        back_populates="beast",
        foreign_keys="FighterExoticBeast.beast_id",
        uselist=False,
        cascade="all, delete",
    )

    __table_args__ = (
        CheckConstraint("xp >= 0", name="ck_fighter_xp"),
        CheckConstraint("kills >= 0", name="ck_fighter_kills"),
        Index("idx_fighter_gang", "gang_id"),
    )

    @property
    def is_owned_beast(self) -> bool:
        return self.beast_owner_link is not None

    @property
    def vehicle(self) -> Optional["Vehicle"]:
        return self.vehicles[0] if self.vehicles else None

    def __repr__(self) -> str:
        return f"<Fighter(id={self.id}, name='{self.fighter_name}', gang_id={self.gang_id})>"


class FighterSkill(Base, TimestampCreatedMixin):
    """A skill learned by a fighter.

    Attributes:
        id: Primary key
        fighter_id: Fighter who has the skill
        skill_id: Catalog skill
        xp_cost: XP spent to gain it (refunded on removal)
        credits_increase: Value added to the fighter's cost
        is_advance: Whether it was bought as an advancement
    """

    __tablename__ = "fighter_skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    fighter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=False
    )
    skill_id: Mapped[int] = mapped_column(Integer, ForeignKey("skills.id"), nullable=False)
    xp_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    credits_increase: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_advance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    fighter: Mapped["Fighter"] = relationship("Fighter", back_populates="skills")
    skill: Mapped["Skill"] = relationship("Skill")

    __table_args__ = (UniqueConstraint("fighter_id", "skill_id", name="uq_fighter_skill"),)

    def __repr__(self) -> str:
        return f"<FighterSkill(fighter_id={self.fighter_id}, skill_id={self.skill_id})>"


class FighterExoticBeast(Base, TimestampCreatedMixin):
    """Ownership link between a fighter and an exotic beast fighter.

    Attributes:
        id: Primary key
        owner_id: Fighter that owns the beast
        beast_id: The beast's own fighter row
        fighter_equipment_id: Equipment purchase that granted the beast
    """

    __tablename__ = "exotic_beasts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=False
    )
    beast_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighters.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    fighter_equipment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fighter_equipment.id", ondelete="CASCADE"), nullable=False
    )

    owner: Mapped["Fighter"] = relationship(
        "Fighter", back_populates="owned_beasts", foreign_keys=[owner_id]
    )
    beast: Mapped["Fighter"] = relationship(
        "Fighter", back_populates="beast_owner_link", foreign_keys=[beast_id]
    )
    fighter_equipment: Mapped["FighterEquipment"] = relationship(
        "FighterEquipment", back_populates="granted_beasts"
    )

    def __repr__(self) -> str:
        return f"<FighterExoticBeast(owner_id={self.owner_id}, beast_id={self.beast_id})>"
