"""Cache tag templates.

Tags are grouped by the kind of data they guard:

- ``base-*``: raw rows (gang basics, fighter equipment, campaign members, ...)
- ``computed-*``: values derived from rows (fighter cost, gang rating, ...)
- ``composite-*``: multi-entity page aggregates
- ``user-*``: per-user collections and permissions
- ``shared-*``: values shown on several pages at once
- ``global-*`` and ``gang-*``: reference data
"""

from __future__ import annotations

from enum import StrEnum


class CacheTag(StrEnum):
    """A cache tag template. Call :meth:`tag` with the ids to render it."""

    BASE_GANG_BASIC = "base-gang-basic-{0}"
    BASE_GANG_CREDITS = "base-gang-credits-{0}"
    BASE_GANG_STASH = "base-gang-stash-{0}"
    BASE_GANG_VEHICLES = "base-gang-vehicles-{0}"
    BASE_GANG_POSITIONING = "base-gang-positioning-{0}"

    BASE_FIGHTER_BASIC = "base-fighter-basic-{0}"
    BASE_FIGHTER_EQUIPMENT = "base-fighter-equipment-{0}"
    BASE_FIGHTER_SKILLS = "base-fighter-skills-{0}"
    BASE_FIGHTER_EFFECTS = "base-fighter-effects-{0}"
    BASE_FIGHTER_VEHICLES = "base-fighter-vehicles-{0}"
    BASE_FIGHTER_OWNED_BEASTS = "base-fighter-owned-beasts-{0}"
    BASE_FIGHTER_LOADOUTS = "base-fighter-loadouts-{0}"

    BASE_CAMPAIGN_BASIC = "base-campaign-basic-{0}"
    BASE_CAMPAIGN_MEMBERS = "base-campaign-members-{0}"
    BASE_CAMPAIGN_TERRITORIES = "base-campaign-territories-{0}"
    BASE_CAMPAIGN_ALLEGIANCES = "base-campaign-allegiances-{0}"

    BASE_VEHICLE_BASIC = "base-vehicle-basic-{0}"
    BASE_VEHICLE_EQUIPMENT = "base-vehicle-equipment-{0}"
    BASE_VEHICLE_EFFECTS = "base-vehicle-effects-{0}"

    BASE_USER_PROFILE = "base-user-profile-{0}"

    COMPUTED_FIGHTER_TOTAL_COST = "computed-fighter-cost-{0}"
    COMPUTED_FIGHTER_BEAST_COSTS = "computed-fighter-beasts-{0}"
    COMPUTED_FIGHTER_ADVANCEMENT_XP = "computed-fighter-xp-{0}"

    COMPUTED_GANG_RATING = "computed-gang-rating-{0}"
    COMPUTED_GANG_FIGHTER_COUNT = "computed-gang-fighter-count-{0}"
    COMPUTED_GANG_VEHICLE_COUNT = "computed-gang-vehicle-count-{0}"
    COMPUTED_GANG_BEAST_COUNT = "computed-gang-beast-count-{0}"

    COMPUTED_CAMPAIGN_LEADERBOARD = "computed-campaign-leaderboard-{0}"
    COMPUTED_CAMPAIGN_STATISTICS = "computed-campaign-stats-{0}"

    COMPOSITE_GANG_FIGHTERS_LIST = "composite-gang-fighters-{0}"
    COMPOSITE_CAMPAIGN_OVERVIEW = "composite-campaign-overview-{0}"
    COMPOSITE_VEHICLE_PAGE = "composite-vehicle-page-{0}"
    COMPOSITE_GANG_CAMPAIGNS = "composite-gang-campaigns-{0}"
    COMPOSITE_FIGHTER_GANG_DATA = "composite-fighter-gang-{0}"
    COMPOSITE_CAMPAIGN_GANG_DATA = "composite-campaign-{0}-gang-{1}"

    USER_GANGS = "user-gangs-{0}"
    USER_CAMPAIGNS = "user-campaigns-{0}"
    USER_CUSTOMIZATIONS = "user-custom-{0}"
    USER_NOTIFICATIONS = "user-notifications-{0}"
    USER_GANG_PERMISSIONS = "user-{0}-gang-{1}-permissions"
    USER_DASHBOARD = "user-dashboard-{0}"
    USER_ACTIVITY_FEED = "user-activity-{0}"

    SHARED_GANG_RATING = "shared-gang-rating-{0}"
    SHARED_FIGHTER_COST = "shared-fighter-cost-{0}"
    SHARED_CAMPAIGN_GANG_LIST = "shared-campaign-gangs-{0}"
    SHARED_GANG_BASIC_INFO = "shared-gang-basic-{0}"

    GLOBAL_GANG_TYPES = "global-gang-types"
    GLOBAL_EQUIPMENT_CATALOG = "global-equipment-catalog"
    GLOBAL_FIGHTER_TYPES = "global-fighter-types"
    GLOBAL_VEHICLE_TYPES = "global-vehicle-types"
    GLOBAL_TERRITORIES_LIST = "global-territories-list"
    GLOBAL_SKILL_CATEGORIES = "global-skill-categories"
    GLOBAL_EFFECT_TYPES = "global-effect-types"
    GLOBAL_USER_COUNT = "global-user-count"
    GLOBAL_GANG_COUNT = "global-gang-count"
    GLOBAL_CAMPAIGN_COUNT = "global-campaign-count"

    GANG_FIGHTER_TYPES = "gang-fighter-types-{0}"
    GANG_EQUIPMENT_OPTIONS = "gang-equipment-options-{0}"

    def tag(self, *ids: object) -> str:
        """Render the template, e.g. ``CacheTag.BASE_GANG_BASIC.tag(7)``."""

        expected = self.value.count("{")
        if len(ids) != expected:
            raise ValueError(f"{self.name} takes {expected} id(s), got {len(ids)}")
        return self.value.format(*ids)
