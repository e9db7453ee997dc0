"""Unit tests for the tag cache and its invalidation patterns."""

import pytest

from mundamanager.cache import CacheTag, TagCache
from mundamanager.cache.invalidation import (
    invalidate_equipment_purchase,
    invalidate_fighter_advancement,
    invalidate_gang_basic,
    invalidate_gang_financials,
)
from mundamanager.domain.enums import AdvancementType


class TestTagCache:
    def test_set_and_get(self):
        cache = TagCache()
        cache.set("gang:1", {"name": "Iron Fists"}, ["base-gang-basic-1"])

        assert "gang:1" in cache
        assert len(cache) == 1
        assert cache.get("gang:1") == {"name": "Iron Fists"}
        assert cache.get("missing", "default") == "default"

    def test_get_or_set_counts_hits_and_misses(self):
        cache = TagCache()
        calls = []

        def factory():
            calls.append(1)
            return 42

        assert cache.get_or_set("answer", ["t"], factory) == 42
        assert cache.get_or_set("answer", ["t"], factory) == 42
        assert len(calls) == 1
        assert (cache.hits, cache.misses) == (1, 1)

    def test_invalidate_tag_evicts_every_tagged_entry(self):
        cache = TagCache()
        cache.set("a", 1, ["shared", "only-a"])
        cache.set("b", 2, ["shared"])
        cache.set("c", 3, ["other"])

        assert cache.invalidate_tag("shared") == 2
        assert "a" not in cache
        assert "b" not in cache
        assert cache.get("c") == 3
        assert cache.invalidate_tag("only-a") == 0
        assert list(cache.invalidated) == ["shared", "only-a"]

    def test_overwrite_replaces_tags(self):
        cache = TagCache()
        cache.set("a", 1, ["old"])
        cache.set("a", 2, ["new"])

        assert cache.invalidate_tag("old") == 0
        assert cache.get("a") == 2
        assert cache.invalidate_tag("new") == 1

    def test_clear(self):
        cache = TagCache()
        cache.get_or_set("a", ["t"], lambda: 1)
        cache.clear()

        assert len(cache) == 0
        assert cache.misses == 0
        assert not cache.invalidated


class TestCacheTag:
    def test_renders_ids(self):
        assert CacheTag.BASE_GANG_BASIC.tag(7) == "base-gang-basic-7"
        assert CacheTag.COMPOSITE_CAMPAIGN_GANG_DATA.tag(3, 9) == "composite-campaign-3-gang-9"
        assert CacheTag.GLOBAL_GANG_TYPES.tag() == "global-gang-types"

    def test_wrong_id_count_rejected(self):
        with pytest.raises(ValueError, match="takes 1 id"):
            CacheTag.BASE_GANG_BASIC.tag()
        with pytest.raises(ValueError, match="takes 2 id"):
            CacheTag.USER_GANG_PERMISSIONS.tag("user-1")


class TestInvalidation:
    def test_gang_financials_touch_credits_and_rating(self):
        cache = TagCache()
        cache.set("rating", 100, [CacheTag.COMPUTED_GANG_RATING.tag(5)])
        cache.set("other-gang", 100, [CacheTag.COMPUTED_GANG_RATING.tag(6)])

        tags = invalidate_gang_financials(cache, 5)

        assert CacheTag.BASE_GANG_CREDITS.tag(5) in tags
        assert CacheTag.SHARED_GANG_RATING.tag(5) in tags
        assert "rating" not in cache
        assert "other-gang" in cache

    def test_purchase_with_beasts_adds_beast_tags(self):
        cache = TagCache()

        plain = invalidate_equipment_purchase(cache, fighter_id=1, gang_id=2)
        with_beast = invalidate_equipment_purchase(
            cache, fighter_id=1, gang_id=2, created_beast_ids=[10]
        )

        assert CacheTag.BASE_FIGHTER_BASIC.tag(10) not in plain
        assert CacheTag.BASE_FIGHTER_BASIC.tag(10) in with_beast
        assert CacheTag.COMPUTED_FIGHTER_BEAST_COSTS.tag(1) in with_beast

    @pytest.mark.parametrize(
        ("advancement_type", "base_tag"),
        [
            (AdvancementType.SKILL, CacheTag.BASE_FIGHTER_SKILLS),
            (AdvancementType.EFFECT, CacheTag.BASE_FIGHTER_EFFECTS),
            (AdvancementType.INJURY, CacheTag.BASE_FIGHTER_EFFECTS),
            (AdvancementType.STAT, CacheTag.BASE_FIGHTER_BASIC),
        ],
    )
    def test_advancement_base_tag(self, advancement_type, base_tag):
        tags = invalidate_fighter_advancement(TagCache(), 4, 2, advancement_type)

        assert tags[0] == base_tag.tag(4)
        assert CacheTag.COMPUTED_GANG_RATING.tag(2) in tags

    def test_gang_basic_reaches_campaigns(self):
        tags = invalidate_gang_basic(TagCache(), 3, campaign_ids=[8])

        assert CacheTag.COMPOSITE_CAMPAIGN_OVERVIEW.tag(8) in tags
        assert CacheTag.COMPOSITE_CAMPAIGN_GANG_DATA.tag(8, 3) in tags
