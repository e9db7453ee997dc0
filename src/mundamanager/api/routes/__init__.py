"""HTTP routes for the Munda Manager API, grouped by area."""

from fastapi import APIRouter

from mundamanager.api.routes import campaigns, catalog, equipment, fighters, gangs, health, vehicles

router = APIRouter()
for module in (health, catalog, gangs, fighters, equipment, vehicles, campaigns):
    router.include_router(module.router)

__all__ = ["router"]
