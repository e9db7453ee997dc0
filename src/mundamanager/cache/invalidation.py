"""Cache invalidation patterns.

Each function names a kind of mutation and evicts exactly the tags whose
data that mutation changes. Every function returns the tags it invalidated,
in order, so callers and tests can see what was touched.
"""

from __future__ import annotations

from collections.abc import Iterable

from mundamanager.cache.store import TagCache
from mundamanager.cache.tags import CacheTag
from mundamanager.domain.enums import AdvancementType


def _apply(cache: TagCache, tags: list[str]) -> list[str]:
    cache.invalidate_tags(tags)
    return tags


def gang_credits_tags(gang_id: int) -> list[str]:
    return [CacheTag.BASE_GANG_CREDITS.tag(gang_id)]


def gang_rating_tags(gang_id: int) -> list[str]:
    return [CacheTag.COMPUTED_GANG_RATING.tag(gang_id), CacheTag.SHARED_GANG_RATING.tag(gang_id)]


def invalidate_gang_credits(cache: TagCache, gang_id: int) -> list[str]:
    return _apply(cache, gang_credits_tags(gang_id))


def invalidate_gang_rating(cache: TagCache, gang_id: int) -> list[str]:
    return _apply(cache, gang_rating_tags(gang_id))


def invalidate_gang_financials(cache: TagCache, gang_id: int) -> list[str]:
    """Credits, rating and the gang page."""

    return _apply(
        cache,
        [
            *gang_credits_tags(gang_id),
            *gang_rating_tags(gang_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
            CacheTag.GANG_FIGHTER_TYPES.tag(gang_id),
        ],
    )


def invalidate_gang_data(cache: TagCache, gang_id: int) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
            CacheTag.GANG_FIGHTER_TYPES.tag(gang_id),
        ],
    )


def invalidate_equipment_purchase(
    cache: TagCache,
    fighter_id: int,
    gang_id: int,
    created_beast_ids: Iterable[int] = (),
) -> list[str]:
    """Equipment bought for a fighter."""

    tags = [
        CacheTag.BASE_FIGHTER_EQUIPMENT.tag(fighter_id),
        *gang_credits_tags(gang_id),
        CacheTag.COMPUTED_FIGHTER_TOTAL_COST.tag(fighter_id),
        CacheTag.COMPUTED_GANG_RATING.tag(gang_id),
        CacheTag.SHARED_GANG_RATING.tag(gang_id),
        CacheTag.SHARED_FIGHTER_COST.tag(fighter_id),
        CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
    ]
    beast_ids = list(created_beast_ids)
    if beast_ids:
        tags.extend(CacheTag.BASE_FIGHTER_BASIC.tag(beast_id) for beast_id in beast_ids)
        tags.append(CacheTag.COMPUTED_FIGHTER_BEAST_COSTS.tag(fighter_id))
        tags.append(CacheTag.COMPUTED_GANG_FIGHTER_COUNT.tag(gang_id))
    return _apply(cache, tags)


def invalidate_equipment_deletion(
    cache: TagCache,
    fighter_id: int,
    gang_id: int,
    deleted_beast_ids: Iterable[int] = (),
) -> list[str]:
    """Equipment sold, deleted or moved off a fighter."""

    tags = [
        CacheTag.BASE_FIGHTER_EQUIPMENT.tag(fighter_id),
        *gang_credits_tags(gang_id),
        CacheTag.COMPUTED_FIGHTER_TOTAL_COST.tag(fighter_id),
        CacheTag.COMPUTED_GANG_RATING.tag(gang_id),
        CacheTag.SHARED_FIGHTER_COST.tag(fighter_id),
        CacheTag.SHARED_GANG_RATING.tag(gang_id),
        CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
    ]
    if list(deleted_beast_ids):
        tags.append(CacheTag.COMPUTED_FIGHTER_BEAST_COSTS.tag(fighter_id))
        tags.append(CacheTag.COMPUTED_GANG_FIGHTER_COUNT.tag(gang_id))
        tags.append(CacheTag.COMPUTED_GANG_BEAST_COUNT.tag(gang_id))
    return _apply(cache, tags)


def invalidate_fighter_equipment(
    cache: TagCache, fighter_id: int, gang_id: int | None = None
) -> list[str]:
    if gang_id is not None:
        return invalidate_equipment_purchase(cache, fighter_id, gang_id)
    return _apply(cache, [CacheTag.BASE_FIGHTER_EQUIPMENT.tag(fighter_id)])


def invalidate_fighter_advancement(
    cache: TagCache,
    fighter_id: int,
    gang_id: int,
    advancement_type: AdvancementType | str,
) -> list[str]:
    """Skill, effect, injury or characteristic change on a fighter."""

    advancement_type = AdvancementType(advancement_type)
    if advancement_type is AdvancementType.SKILL:
        base = CacheTag.BASE_FIGHTER_SKILLS.tag(fighter_id)
    elif advancement_type in (AdvancementType.EFFECT, AdvancementType.INJURY):
        base = CacheTag.BASE_FIGHTER_EFFECTS.tag(fighter_id)
    else:
        base = CacheTag.BASE_FIGHTER_BASIC.tag(fighter_id)

    return _apply(
        cache,
        [
            base,
            CacheTag.COMPUTED_FIGHTER_TOTAL_COST.tag(fighter_id),
            CacheTag.COMPUTED_GANG_RATING.tag(gang_id),
            CacheTag.SHARED_GANG_RATING.tag(gang_id),
            CacheTag.SHARED_FIGHTER_COST.tag(fighter_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )


def invalidate_fighter_data(cache: TagCache, fighter_id: int, gang_id: int) -> list[str]:
    return invalidate_fighter_advancement(cache, fighter_id, gang_id, AdvancementType.STAT)


def invalidate_fighter_data_with_financials(
    cache: TagCache, fighter_id: int, gang_id: int
) -> list[str]:
    return invalidate_fighter_data(cache, fighter_id, gang_id) + invalidate_gang_financials(
        cache, gang_id
    )


def invalidate_fighter_addition(
    cache: TagCache, fighter_id: int, gang_id: int, user_id: str | None = None  # noqa: ARG001
) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.BASE_FIGHTER_BASIC.tag(fighter_id),
            CacheTag.BASE_FIGHTER_EQUIPMENT.tag(fighter_id),
            *gang_credits_tags(gang_id),
            CacheTag.COMPUTED_FIGHTER_TOTAL_COST.tag(fighter_id),
            CacheTag.COMPUTED_GANG_RATING.tag(gang_id),
            CacheTag.COMPUTED_GANG_FIGHTER_COUNT.tag(gang_id),
            CacheTag.SHARED_GANG_RATING.tag(gang_id),
            CacheTag.SHARED_FIGHTER_COST.tag(fighter_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )


def invalidate_gang_creation(cache: TagCache, gang_id: int, user_id: str) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.BASE_GANG_BASIC.tag(gang_id),
            *gang_credits_tags(gang_id),
            CacheTag.USER_GANGS.tag(user_id),
            CacheTag.USER_DASHBOARD.tag(user_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )


def invalidate_gang_stash(
    cache: TagCache, gang_id: int, user_id: str | None = None  # noqa: ARG001
) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.BASE_GANG_STASH.tag(gang_id),
            *gang_credits_tags(gang_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )


def invalidate_campaign_membership(
    cache: TagCache, campaign_id: int, gang_id: int | None, user_id: str
) -> list[str]:
    """Gang joined or left a campaign, or a member's role changed."""

    tags = [CacheTag.BASE_CAMPAIGN_MEMBERS.tag(campaign_id)]
    if gang_id is not None:
        tags.append(CacheTag.COMPOSITE_GANG_CAMPAIGNS.tag(gang_id))
    tags.extend(
        [
            CacheTag.COMPUTED_CAMPAIGN_LEADERBOARD.tag(campaign_id),
            CacheTag.SHARED_CAMPAIGN_GANG_LIST.tag(campaign_id),
            CacheTag.COMPOSITE_CAMPAIGN_OVERVIEW.tag(campaign_id),
        ]
    )
    if gang_id is not None:
        tags.append(CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id))
    tags.extend([CacheTag.USER_CAMPAIGNS.tag(user_id), CacheTag.USER_DASHBOARD.tag(user_id)])
    return _apply(cache, tags)


def invalidate_campaign_territory(
    cache: TagCache, campaign_id: int, gang_id: int | None = None
) -> list[str]:
    tags = [
        CacheTag.BASE_CAMPAIGN_TERRITORIES.tag(campaign_id),
        CacheTag.COMPOSITE_CAMPAIGN_OVERVIEW.tag(campaign_id),
    ]
    if gang_id is not None:
        tags.append(CacheTag.COMPOSITE_GANG_CAMPAIGNS.tag(gang_id))
        tags.append(CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id))
    return _apply(cache, tags)


def invalidate_campaign_basic(cache: TagCache, campaign_id: int) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.BASE_CAMPAIGN_BASIC.tag(campaign_id),
            CacheTag.COMPOSITE_CAMPAIGN_OVERVIEW.tag(campaign_id),
            CacheTag.COMPUTED_CAMPAIGN_LEADERBOARD.tag(campaign_id),
            CacheTag.COMPUTED_CAMPAIGN_STATISTICS.tag(campaign_id),
        ],
    )


def invalidate_user_customizations(cache: TagCache, user_id: str) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.USER_CUSTOMIZATIONS.tag(user_id),
            CacheTag.GLOBAL_EQUIPMENT_CATALOG.tag(),
            CacheTag.GLOBAL_TERRITORIES_LIST.tag(),
        ],
    )


def invalidate_campaign_member_permissions(
    cache: TagCache, campaign_id: int, user_id: str  # noqa: ARG001
) -> list[str]:
    return _apply(
        cache, [CacheTag.USER_DASHBOARD.tag(user_id), CacheTag.USER_CAMPAIGNS.tag(user_id)]
    )


def invalidate_gang_permissions_for_user(cache: TagCache, user_id: str, gang_id: int) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.USER_GANG_PERMISSIONS.tag(user_id, gang_id),
            CacheTag.USER_DASHBOARD.tag(user_id),
        ],
    )


def invalidate_vehicle_data(cache: TagCache, vehicle_id: int) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.BASE_VEHICLE_EQUIPMENT.tag(vehicle_id),
            CacheTag.BASE_VEHICLE_BASIC.tag(vehicle_id),
            CacheTag.COMPOSITE_VEHICLE_PAGE.tag(vehicle_id),
        ],
    )


def invalidate_fighter_vehicle_data(cache: TagCache, fighter_id: int, gang_id: int) -> list[str]:
    """A fighter's vehicle assignment or the value of that vehicle changed."""

    return _apply(
        cache,
        [
            CacheTag.BASE_FIGHTER_VEHICLES.tag(fighter_id),
            CacheTag.BASE_GANG_VEHICLES.tag(gang_id),
            CacheTag.COMPUTED_FIGHTER_TOTAL_COST.tag(fighter_id),
            CacheTag.SHARED_FIGHTER_COST.tag(fighter_id),
            *gang_rating_tags(gang_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )


def invalidate_vehicle_effects(
    cache: TagCache, vehicle_id: int, fighter_id: int | None, gang_id: int
) -> list[str]:
    tags = [CacheTag.BASE_VEHICLE_EFFECTS.tag(vehicle_id)]
    if fighter_id is not None:
        tags.append(CacheTag.BASE_FIGHTER_VEHICLES.tag(fighter_id))
    tags.append(CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id))
    return _apply(cache, tags)


def invalidate_vehicle_repair(
    cache: TagCache, vehicle_id: int, fighter_id: int | None, gang_id: int
) -> list[str]:
    return invalidate_vehicle_effects(cache, vehicle_id, fighter_id, gang_id) + (
        invalidate_gang_credits(cache, gang_id)
    )


def add_beast_to_gang_cache(cache: TagCache, beast_id: int, gang_id: int) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.BASE_FIGHTER_BASIC.tag(beast_id),
            CacheTag.COMPUTED_GANG_FIGHTER_COUNT.tag(gang_id),
            CacheTag.COMPUTED_GANG_BEAST_COUNT.tag(gang_id),
            CacheTag.COMPUTED_GANG_RATING.tag(gang_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )


def invalidate_fighter_owned_beasts(cache: TagCache, owner_id: int, gang_id: int) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.COMPUTED_FIGHTER_BEAST_COSTS.tag(owner_id),
            CacheTag.BASE_FIGHTER_BASIC.tag(owner_id),
            CacheTag.COMPUTED_GANG_RATING.tag(gang_id),
        ],
    )


def invalidate_fighter_loadouts(cache: TagCache, fighter_id: int, gang_id: int) -> list[str]:
    """Loadout changes are display-only and never touch rating tags."""

    return _apply(
        cache,
        [
            CacheTag.BASE_FIGHTER_LOADOUTS.tag(fighter_id),
            CacheTag.BASE_FIGHTER_BASIC.tag(fighter_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )


def invalidate_user_count(cache: TagCache) -> list[str]:
    return _apply(cache, [CacheTag.GLOBAL_USER_COUNT.tag()])


def invalidate_gang_count(cache: TagCache) -> list[str]:
    return _apply(cache, [CacheTag.GLOBAL_GANG_COUNT.tag()])


def invalidate_campaign_count(cache: TagCache) -> list[str]:
    return _apply(cache, [CacheTag.GLOBAL_CAMPAIGN_COUNT.tag()])


def invalidate_gang_basic(
    cache: TagCache, gang_id: int, campaign_ids: Iterable[int] = ()
) -> list[str]:
    """Gang details edited; every campaign showing the gang is refreshed too."""

    tags = [
        CacheTag.BASE_GANG_BASIC.tag(gang_id),
        CacheTag.SHARED_GANG_BASIC_INFO.tag(gang_id),
        *gang_credits_tags(gang_id),
        CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
    ]
    for campaign_id in campaign_ids:
        tags.extend(
            [
                CacheTag.COMPOSITE_CAMPAIGN_OVERVIEW.tag(campaign_id),
                CacheTag.SHARED_CAMPAIGN_GANG_LIST.tag(campaign_id),
                CacheTag.COMPUTED_CAMPAIGN_LEADERBOARD.tag(campaign_id),
                CacheTag.COMPOSITE_CAMPAIGN_GANG_DATA.tag(campaign_id, gang_id),
            ]
        )
    return _apply(cache, tags)


def invalidate_gang_positioning(cache: TagCache, gang_id: int) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.BASE_GANG_POSITIONING.tag(gang_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )


def invalidate_gang_deletion(
    cache: TagCache, gang_id: int, user_id: str, campaign_ids: Iterable[int] = ()
) -> list[str]:
    tags = invalidate_gang_basic(cache, gang_id, campaign_ids)
    tags += _apply(
        cache,
        [
            *gang_rating_tags(gang_id),
            CacheTag.USER_GANGS.tag(user_id),
            CacheTag.USER_DASHBOARD.tag(user_id),
        ],
    )
    for campaign_id in campaign_ids:
        tags += invalidate_campaign_territory(cache, campaign_id)
    return tags + invalidate_gang_count(cache)


def invalidate_gang_vehicles(cache: TagCache, gang_id: int) -> list[str]:
    """Vehicle bought, sold or removed from the gang."""

    return _apply(
        cache,
        [
            CacheTag.BASE_GANG_VEHICLES.tag(gang_id),
            CacheTag.COMPUTED_GANG_VEHICLE_COUNT.tag(gang_id),
            *gang_credits_tags(gang_id),
            *gang_rating_tags(gang_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )


def invalidate_fighter_xp(cache: TagCache, fighter_id: int, gang_id: int) -> list[str]:
    return _apply(
        cache,
        [
            CacheTag.COMPUTED_FIGHTER_ADVANCEMENT_XP.tag(fighter_id),
            CacheTag.BASE_FIGHTER_BASIC.tag(fighter_id),
            CacheTag.COMPOSITE_GANG_FIGHTERS_LIST.tag(gang_id),
        ],
    )
