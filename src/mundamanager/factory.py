"""Service Factory for Munda Manager.

This module provides factory functions for creating service instances with
their dependencies wired. Every service shares the process-wide tag cache
unless another one is passed in.

Example:
    # Production usage
    from mundamanager.factory import create_equipment_service
    equipment = create_equipment_service(session)

    # Testing usage
    from mundamanager.cache import TagCache
    from mundamanager.services.equipment_service import EquipmentService

    equipment = EquipmentService(session, TagCache())
"""

from sqlalchemy.orm import Session

from mundamanager.cache import TagCache, get_cache
from mundamanager.config import Settings
from mundamanager.services.advancement_service import AdvancementService
from mundamanager.services.campaign_service import CampaignService
from mundamanager.services.catalog_service import CatalogService
from mundamanager.services.equipment_service import EquipmentService
from mundamanager.services.fighter_service import FighterService
from mundamanager.services.gang_service import GangService
from mundamanager.services.loadout_service import LoadoutService
from mundamanager.services.vehicle_service import VehicleService


def _cache(cache: TagCache | None) -> TagCache:
    # an empty TagCache is falsy, so test against None
    return cache if cache is not None else get_cache()


def create_gang_service(
    session: Session, cache: TagCache | None = None, settings: Settings | None = None
) -> GangService:
    """Create a GangService.

    Args:
        session: Database session
        cache: Tag cache (defaults to the process-wide cache)
        settings: Settings for starting credits and reputation

    Returns:
        Fully initialized GangService
    """
    return GangService(session, _cache(cache), settings)


def create_fighter_service(session: Session, cache: TagCache | None = None) -> FighterService:
    return FighterService(session, _cache(cache))


def create_equipment_service(session: Session, cache: TagCache | None = None) -> EquipmentService:
    return EquipmentService(session, _cache(cache))


def create_vehicle_service(session: Session, cache: TagCache | None = None) -> VehicleService:
    return VehicleService(session, _cache(cache))


def create_advancement_service(
    session: Session, cache: TagCache | None = None
) -> AdvancementService:
    return AdvancementService(session, _cache(cache))


def create_loadout_service(session: Session, cache: TagCache | None = None) -> LoadoutService:
    return LoadoutService(session, _cache(cache))


def create_campaign_service(session: Session, cache: TagCache | None = None) -> CampaignService:
    return CampaignService(session, _cache(cache))


def create_catalog_service(session: Session, cache: TagCache | None = None) -> CatalogService:
    return CatalogService(session, _cache(cache))


def create_all_services(
    session: Session, cache: TagCache | None = None, settings: Settings | None = None
) -> dict:
    """Create every service on one session and cache.

    Returns:
        Dictionary keyed by area: gangs, fighters, equipment, vehicles,
        advancements, loadouts, campaigns, catalog
    """
    cache = _cache(cache)
    return {
        "gangs": create_gang_service(session, cache, settings),
        "fighters": create_fighter_service(session, cache),
        "equipment": create_equipment_service(session, cache),
        "vehicles": create_vehicle_service(session, cache),
        "advancements": create_advancement_service(session, cache),
        "loadouts": create_loadout_service(session, cache),
        "campaigns": create_campaign_service(session, cache),
        "catalog": create_catalog_service(session, cache),
    }
