"""Service layer for Munda Manager.

Every mutating call runs as one unit of work: it validates, changes rows,
applies the gang financial delta, writes the gang log, commits, and finally
evicts the cache tags whose data changed.

Architecture:
    - financials: update_gang_financials, the single writer of rating/wealth
    - gang_logs: append-only gang history
    - permissions: ownership and campaign role checks
    - GangService: gang lifecycle, resources, positioning, recalculation
    - FighterService: recruitment, details, XP, status changes
    - EquipmentService: trading post purchases, selling, stash moves
    - VehicleService: vehicles, crew assignment, damage and repairs
    - AdvancementService: skills, characteristic advances, injuries
    - LoadoutService: display-only equipment loadouts
    - CampaignService: campaigns, members, gangs, territories, battles
    - CatalogService: cached reference data

Production Usage:
    from mundamanager.factory import create_fighter_service
    fighters = create_fighter_service(session)
    fighters.change_status(fighter_id, "kill", user_id=user_id)
"""

from mundamanager.services.advancement_service import AdvancementService
from mundamanager.services.campaign_service import CampaignService
from mundamanager.services.catalog_service import CatalogService
from mundamanager.services.equipment_service import EquipmentService
from mundamanager.services.fighter_service import FighterService
from mundamanager.services.gang_service import GangService
from mundamanager.services.loadout_service import LoadoutService
from mundamanager.services.vehicle_service import VehicleService

__all__ = [
    "AdvancementService",
    "CampaignService",
    "CatalogService",
    "EquipmentService",
    "FighterService",
    "GangService",
    "LoadoutService",
    "VehicleService",
]
