"""Campaign models.

This module contains models for:
- Campaigns (a league of gangs run by an owner)
- CampaignMembers (users taking part, with a role)
- CampaignGangs (gangs entered into a campaign)
- CampaignTerritories (territories gangs can hold)
- CampaignBattles (recorded battle results)
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

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .catalog import Territory
    from .gang import Gang
    from .user import Profile


class Campaign(Base, TimestampMixin):
    """A campaign.

    Attributes:
        id: Primary key
        campaign_name: Name
        description: Public description
        status: 'Active' or 'Completed'
        note: Arbitrator notes
    """

    __tablename__ = "campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Active")
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    members: Mapped[list["CampaignMember"]] = relationship(
        "CampaignMember", back_populates="campaign", cascade="all, delete-orphan"
    )
    gangs: Mapped[list["CampaignGang"]] = relationship(
        "CampaignGang", back_populates="campaign", cascade="all, delete-orphan"
    )
    territories: Mapped[list["CampaignTerritory"]] = relationship(
        "CampaignTerritory", back_populates="campaign", cascade="all, delete-orphan"
    )
    battles: Mapped[list["CampaignBattle"]] = relationship(
        "CampaignBattle", back_populates="campaign", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("status IN ('Active', 'Completed')", name="ck_campaign_status"),
    )

    def __repr__(self) -> str:
        return f"<Campaign(id={self.id}, name='{self.campaign_name}')>"


class CampaignMember(Base, TimestampMixin):
    """A user's membership and role in a campaign."""

    __tablename__ = "campaign_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="MEMBER")

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="members")
    user: Mapped["Profile"] = relationship("Profile")

    __table_args__ = (
        UniqueConstraint("campaign_id", "user_id", name="uq_campaign_member"),
        CheckConstraint("role IN ('OWNER', 'ARBITRATOR', 'MEMBER')", name="ck_member_role"),
    )

    def __repr__(self) -> str:
        return f"<CampaignMember(campaign_id={self.campaign_id}, user_id={self.user_id!r})>"


class CampaignGang(Base, TimestampMixin):
    """A gang entered into a campaign.

    Attributes:
        campaign_id: Campaign
        gang_id: Gang
        user_id: Member the gang was entered under
        status: 'ACCEPTED' or 'PENDING' (invite awaiting the gang owner)
        allegiance: Free-text allegiance
    """

    __tablename__ = "campaign_gangs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )
    gang_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    allegiance: Mapped[str | None] = mapped_column(String(100), nullable=True)

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="gangs")
    gang: Mapped["Gang"] = relationship("Gang", back_populates="campaign_gangs")

    __table_args__ = (
        UniqueConstraint("campaign_id", "gang_id", name="uq_campaign_gang"),
        CheckConstraint("status IN ('ACCEPTED', 'PENDING')", name="ck_campaign_gang_status"),
    )

    def __repr__(self) -> str:
        return f"<CampaignGang(campaign_id={self.campaign_id}, gang_id={self.gang_id})>"


class CampaignTerritory(Base, TimestampMixin):
    """A territory in a campaign, optionally held by a gang."""

    __tablename__ = "campaign_territories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )
    territory_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("territories.id"), nullable=True
    )
    territory_name: Mapped[str] = mapped_column(String(100), nullable=False)
    gang_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="SET NULL"), nullable=True
    )
    ruined: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    default_gang_territory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="territories")
    territory: Mapped[Optional["Territory"]] = relationship("Territory")
    gang: Mapped[Optional["Gang"]] = relationship("Gang")

    __table_args__ = (Index("idx_campaign_territory_gang", "gang_id"),)

    def __repr__(self) -> str:
        return f"<CampaignTerritory(id={self.id}, name='{self.territory_name}')>"


class CampaignBattle(Base, TimestampMixin):
    """A recorded battle between campaign gangs.

    Attributes:
        scenario: Scenario played
        attacker_id: Attacking gang
        defender_id: Defending gang
        winner_id: Winning gang (None for a draw)
        note: Battle report
        participants: List of {"role": "attacker"|"defender"|"none", "gang_id": int}
        claimed_territories: Campaign territory ids claimed by the winner
    """

    __tablename__ = "campaign_battles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )
    scenario: Mapped[str] = mapped_column(String(100), nullable=False)
    attacker_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="SET NULL"), nullable=True
    )
    defender_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="SET NULL"), nullable=True
    )
    winner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("gangs.id", ondelete="SET NULL"), nullable=True
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    participants: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    claimed_territories: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="battles")

    __table_args__ = (Index("idx_campaign_battle_campaign", "campaign_id"),)

    def __repr__(self) -> str:
        return f"<CampaignBattle(id={self.id}, scenario='{self.scenario}')>"
