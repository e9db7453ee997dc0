"""SQLAlchemy models for the Munda Manager backend.

This module exports all database models and provides access to the
declarative base and seed data functions.
"""

# Base classes
from .base import Base, TimestampCreatedMixin, TimestampMixin, utc_now

# Campaign models
from .campaign import (
    Campaign,
    CampaignBattle,
    CampaignGang,
    CampaignMember,
    CampaignTerritory,
)

# Catalog models
from .catalog import EffectType, Equipment, FighterType, GangType, Skill, Territory, VehicleType

# Fighter effects
from .effect import FighterEffect

# Owned equipment
from .equipment import FighterEquipment

# Fighter models
from .fighter import Fighter, FighterExoticBeast, FighterSkill

# Gang models
from .gang import Gang, GangLog

# Loadouts
from .loadout import FighterLoadout, loadout_equipment

# Seed data
from .seed_data import seed_catalog

# Users
from .user import Profile

# Vehicles
from .vehicle import Vehicle

__all__ = [
    "Base",
    "Campaign",
    "CampaignBattle",
    "CampaignGang",
    "CampaignMember",
    "CampaignTerritory",
    "EffectType",
    "Equipment",
    "Fighter",
    "FighterEffect",
    "FighterEquipment",
    "FighterExoticBeast",
    "FighterLoadout",
    "FighterSkill",
    "FighterType",
    "Gang",
    "GangLog",
    "GangType",
    "Profile",
    "Skill",
    "Territory",
    "TimestampCreatedMixin",
    "TimestampMixin",
    "Vehicle",
    "VehicleType",
    "loadout_equipment",
    "seed_catalog",
    "utc_now",
]
