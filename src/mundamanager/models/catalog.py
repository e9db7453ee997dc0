"""Reference catalog models.

This module contains the read-mostly tables every gang draws from:
- GangTypes and FighterTypes (what a gang can recruit)
- Equipment (weapons, wargear, vehicle upgrades)
- VehicleTypes (vehicle stat profiles)
- Skills and EffectTypes (advancements, injuries, vehicle damage)
- Territories (campaign territory names)
"""

from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class GangType(Base):
    """A gang faction such as House Goliath.

    Attributes:
        id: Primary key
        name: Unique gang type name
        alignment: Default alignment for gangs of this type, if any
    """

    __tablename__ = "gang_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    alignment: Mapped[str | None] = mapped_column(String(20), nullable=True)

    fighter_types: Mapped[list["FighterType"]] = relationship(
        "FighterType", back_populates="gang_type"
    )

    def __repr__(self) -> str:
        return f"<GangType(id={self.id}, name='{self.name}')>"


class FighterType(Base):
    """A recruitable fighter profile.

    Attributes:
        id: Primary key
        gang_type_id: Gang type allowed to recruit it (None means any gang)
        name: Fighter type name
        fighter_class: Leader, Champion, Ganger, Juve, Exotic Beast, ...
        cost: Recruitment cost in credits
        is_exotic_beast: Whether this type can only exist as an owned beast
        stats: Base characteristic profile keyed by stat name
        special_rules: List of rule names
    """

    __tablename__ = "fighter_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    gang_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gang_types.id"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    fighter_class: Mapped[str] = mapped_column(String(50), nullable=False)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_exotic_beast: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    stats: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    special_rules: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    gang_type: Mapped[Optional["GangType"]] = relationship(
        "GangType", back_populates="fighter_types"
    )

    __table_args__ = (CheckConstraint("cost >= 0", name="ck_fighter_type_cost"),)

    def __repr__(self) -> str:
        return f"<FighterType(id={self.id}, name='{self.name}', cost={self.cost})>"


class Equipment(Base):
    """Catalog equipment item.

    Attributes:
        id: Primary key
        equipment_name: Display name
        equipment_type: 'weapon', 'wargear' or 'vehicle_upgrade'
        cost: Listed trading post cost
        grants_beast_type_id: Exotic beast fighter type granted on purchase
    """

    __tablename__ = "equipment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    equipment_name: Mapped[str] = mapped_column(String(100), nullable=False)
    equipment_type: Mapped[str] = mapped_column(String(30), nullable=False)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    grants_beast_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fighter_types.id"), nullable=True
    )

    grants_beast_type: Mapped[Optional["FighterType"]] = relationship("FighterType")

    __table_args__ = (
        CheckConstraint("cost >= 0", name="ck_equipment_cost"),
        CheckConstraint(
            "equipment_type IN ('weapon', 'wargear', 'vehicle_upgrade')",
            name="ck_equipment_type",
        ),
    )

    def __repr__(self) -> str:
        return f"<Equipment(id={self.id}, name='{self.equipment_name}', cost={self.cost})>"


class VehicleType(Base):
    """Vehicle profile that gang vehicles copy their stats from."""

    __tablename__ = "vehicle_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    vehicle_type: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
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

    def __repr__(self) -> str:
        return f"<VehicleType(id={self.id}, type='{self.vehicle_type}', cost={self.cost})>"


class Skill(Base):
    """Catalog skill, grouped by skill type (Agility, Brawn, ...)."""

    __tablename__ = "skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    skill_type: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<Skill(id={self.id}, name='{self.name}')>"


class EffectType(Base):
    """Template for a fighter or vehicle effect.

    Attributes:
        id: Primary key
        effect_name: Display name
        category: 'injuries', 'advancements', 'vehicle_damages' or 'user'
        credits_increase: Value added to the carrier's cost
        modifiers: Characteristic changes keyed by stat name
        sends_to_recovery: Whether applying it puts the fighter into recovery
    """

    __tablename__ = "effect_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    effect_name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    credits_increase: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    modifiers: Mapped[dict[str, int]] = mapped_column(JSON, nullable=False, default=dict)
    sends_to_recovery: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<EffectType(id={self.id}, name='{self.effect_name}')>"


class Territory(Base):
    """Catalog territory that campaigns can add."""

    __tablename__ = "territories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    territory_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Territory(id={self.id}, name='{self.territory_name}')>"
