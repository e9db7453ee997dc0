"""Enumerations shared by the domain, services and API layers."""

from __future__ import annotations

from enum import StrEnum


class Alignment(StrEnum):
    """Gang alignment."""

    LAW_ABIDING = "Law Abiding"
    OUTLAW = "Outlaw"


class UserRole(StrEnum):
    """Profile role."""

    USER = "user"
    ADMIN = "admin"


class FighterStatusAction(StrEnum):
    """Status actions a gang owner can apply to a fighter."""

    KILL = "kill"
    RETIRE = "retire"
    SELL = "sell"
    RESCUE = "rescue"
    STARVE = "starve"
    RECOVER = "recover"
    CAPTURE = "capture"
    DELETE = "delete"


class EquipmentType(StrEnum):
    """Catalog equipment categories."""

    WEAPON = "weapon"
    WARGEAR = "wargear"
    VEHICLE_UPGRADE = "vehicle_upgrade"


class EffectCategory(StrEnum):
    """Effect categories stored on fighter and vehicle effects."""

    INJURIES = "injuries"
    ADVANCEMENTS = "advancements"
    VEHICLE_DAMAGES = "vehicle_damages"
    USER = "user"


class AdvancementType(StrEnum):
    """What kind of fighter data an advancement touched."""

    SKILL = "skill"
    EFFECT = "effect"
    INJURY = "injury"
    STAT = "stat"


class CreditsOperation(StrEnum):
    """Direction of a manual credits or reputation change."""

    ADD = "add"
    SUBTRACT = "subtract"


class CampaignStatus(StrEnum):
    """Campaign lifecycle state."""

    ACTIVE = "Active"
    COMPLETED = "Completed"


class CampaignRole(StrEnum):
    """Role of a user inside a campaign."""

    OWNER = "OWNER"
    ARBITRATOR = "ARBITRATOR"
    MEMBER = "MEMBER"


class CampaignGangStatus(StrEnum):
    """Whether a gang's entry into a campaign has been accepted."""

    ACCEPTED = "ACCEPTED"
    PENDING = "PENDING"


class BattleRole(StrEnum):
    """Side a gang fought on in a campaign battle."""

    ATTACKER = "attacker"
    DEFENDER = "defender"
    NONE = "none"


class BattleResult(StrEnum):
    """Per-gang outcome of a battle."""

    WON = "won"
    LOST = "lost"
    DRAW = "draw"


class ValueBucket(StrEnum):
    """Where an item's value is counted in a gang's finances."""

    RATING = "rating"
    STASH = "stash"
    UNASSIGNED_VEHICLE = "unassigned_vehicle"
    UNCOUNTED = "uncounted"
