"""Unit tests for the cost and valuation rules.

These work on plain namespaces standing in for ORM rows so the arithmetic
can be checked without a database.
"""

from types import SimpleNamespace

import pytest

from mundamanager.domain.costs import (
    beast_cost,
    calculate_gang_rating,
    calculate_gang_wealth,
    effective_stats,
    equipment_bucket,
    fighter_bucket,
    fighter_total_cost,
    loadout_cost,
    master_crafted_cost,
    rating_contribution,
    stash_sell_value,
    vehicle_bucket,
    vehicle_total_cost,
)
from mundamanager.domain.enums import ValueBucket
from mundamanager.domain.valuation import FinancialDelta


def _item(cost, effects=()):
    return SimpleNamespace(
        purchase_cost=cost,
        effects=[SimpleNamespace(credits_increase=c) for c in effects],
        gang_stash=False,
        fighter=None,
        vehicle=None,
    )


def _vehicle(cost, equipment=(), damages=(), fighter=None):
    return SimpleNamespace(
        cost=cost,
        equipment=[_item(c) for c in equipment],
        effects=[SimpleNamespace(credits_increase=c) for c in damages],
        fighter=fighter,
    )


def _fighter(credits=100, **overrides):
    fields = {
        "credits": credits,
        "cost_adjustment": 0,
        "equipment": [],
        "skills": [],
        "effects": [],
        "vehicles": [],
        "owned_beasts": [],
        "beast_owner_link": None,
        "killed": False,
        "retired": False,
        "enslaved": False,
        "captured": False,
        "recovery": False,
        "starved": False,
    }
    fields.update(overrides)
    fighter = SimpleNamespace(**fields)
    fighter.is_owned_beast = fighter.beast_owner_link is not None
    return fighter


def _own(owner, beast):
    link = SimpleNamespace(owner=owner, beast=beast)
    beast.beast_owner_link = link
    beast.is_owned_beast = True
    owner.owned_beasts.append(link)
    return link


class TestFighterCost:
    def test_sums_every_component(self):
        fighter = _fighter(
            credits=100,
            cost_adjustment=-5,
            equipment=[_item(15), _item(55)],
            skills=[SimpleNamespace(credits_increase=20)],
            effects=[SimpleNamespace(credits_increase=10)],
            vehicles=[_vehicle(125, equipment=[35], damages=[-10])],
        )

        assert vehicle_total_cost(fighter.vehicles[0]) == 150
        assert fighter_total_cost(fighter) == 100 - 5 + 70 + 20 + 10 + 150

    def test_owned_beast_reports_zero_and_is_carried_by_owner(self):
        owner = _fighter(credits=100, equipment=[_item(100)])
        beast = _fighter(credits=0, equipment=[_item(10)])
        _own(owner, beast)

        assert fighter_total_cost(beast) == 0
        assert beast_cost(beast) == 10
        assert fighter_total_cost(owner) == 100 + 100 + 10

    def test_inactive_beast_not_counted_for_owner(self):
        owner = _fighter(credits=100)
        beast = _fighter(credits=0, equipment=[_item(10)], killed=True)
        _own(owner, beast)

        assert fighter_total_cost(owner) == 100
        assert rating_contribution(beast) == 0

    def test_loadout_cost_counts_only_loadout_items(self):
        autogun, boltgun = _item(15), _item(55)
        fighter = _fighter(credits=100, equipment=[autogun, boltgun])
        loadout = SimpleNamespace(equipment=[autogun])

        assert loadout_cost(fighter, loadout) == 115


class TestBuckets:
    def test_active_fighter_counts_toward_rating(self):
        assert fighter_bucket(_fighter()) is ValueBucket.RATING

    @pytest.mark.parametrize("flag", ["killed", "retired", "enslaved", "captured"])
    def test_inactive_fighter_uncounted(self, flag):
        assert fighter_bucket(_fighter(**{flag: True})) is ValueBucket.UNCOUNTED

    def test_recovery_and_starving_still_count(self):
        assert fighter_bucket(_fighter(recovery=True, starved=True)) is ValueBucket.RATING

    def test_beast_follows_inactive_owner(self):
        owner = _fighter(retired=True)
        beast = _fighter(credits=0)
        _own(owner, beast)

        assert fighter_bucket(beast) is ValueBucket.UNCOUNTED

    def test_vehicle_bucket_follows_crew(self):
        assert vehicle_bucket(_vehicle(100)) is ValueBucket.UNASSIGNED_VEHICLE
        assert vehicle_bucket(_vehicle(100, fighter=_fighter())) is ValueBucket.RATING
        dead_crew = _fighter(killed=True)
        assert vehicle_bucket(_vehicle(100, fighter=dead_crew)) is ValueBucket.UNCOUNTED

    def test_equipment_bucket_by_location(self):
        stashed = _item(10)
        stashed.gang_stash = True
        on_vehicle = _item(10)
        on_vehicle.vehicle = _vehicle(100)
        on_fighter = _item(10)
        on_fighter.fighter = _fighter()

        assert equipment_bucket(stashed) is ValueBucket.STASH
        assert equipment_bucket(on_vehicle) is ValueBucket.UNASSIGNED_VEHICLE
        assert equipment_bucket(on_fighter) is ValueBucket.RATING


class TestGangTotals:
    def test_rating_and_wealth(self):
        leader = _fighter(credits=135, vehicles=[_vehicle(125)])
        dead = _fighter(credits=60, killed=True)
        stashed = _item(15)
        stashed.gang_stash = True
        spare = _vehicle(250)
        gang = SimpleNamespace(
            fighters=[leader, dead],
            credits=400,
            equipment=[stashed],
            vehicles=[leader.vehicles[0], spare],
        )
        leader.vehicles[0].fighter = leader

        assert calculate_gang_rating(gang) == 260
        assert calculate_gang_wealth(gang) == 260 + 400 + 15 + 250


class TestEconomy:
    @pytest.mark.parametrize(
        ("cost", "expected"),
        [(55, 70), (15, 20), (40, 50), (100, 125)],
    )
    def test_master_crafted_rounds_up_to_five(self, cost, expected):
        assert master_crafted_cost(cost) == expected

    def test_stash_sell_value(self):
        assert stash_sell_value(12) == 12
        assert stash_sell_value(12, 7.9) == 7
        assert stash_sell_value(3) == 5
        assert stash_sell_value(40, 0) == 5

    def test_effective_stats(self):
        base = {"toughness": 4, "ballistic_skill": 4}
        effects = [
            SimpleNamespace(modifiers={"toughness": 1}),
            SimpleNamespace(modifiers={"ballistic_skill": 1, "cool": 1}),
            SimpleNamespace(modifiers=None),
        ]

        stats = effective_stats(base, effects)

        assert stats == {"toughness": 5, "ballistic_skill": 5, "cool": 1}
        assert base == {"toughness": 4, "ballistic_skill": 4}


class TestFinancialDelta:
    def test_buckets_map_to_deltas(self):
        delta = FinancialDelta(credits=-50)
        delta.add(ValueBucket.RATING, 30)
        delta.add(ValueBucket.STASH, 15)
        delta.add(ValueBucket.UNASSIGNED_VEHICLE, 5)
        delta.add(ValueBucket.UNCOUNTED, 999)

        assert (delta.rating, delta.credits, delta.stash_value) == (30, -50, 20)
        assert delta.wealth == 0

    def test_move_between_buckets(self):
        delta = FinancialDelta().move(ValueBucket.STASH, ValueBucket.RATING, 15)

        assert delta.rating == 15
        assert delta.stash_value == -15
        assert delta.wealth == 0

    def test_move_into_uncounted_drops_value(self):
        delta = FinancialDelta().move(ValueBucket.RATING, ValueBucket.UNCOUNTED, 40)

        assert delta.rating == -40
        assert delta.wealth == -40

    def test_zero_and_sum(self):
        assert FinancialDelta().is_zero()
        total = FinancialDelta(rating=5) + FinancialDelta(credits=-5, stash_value=2)
        assert total == FinancialDelta(rating=5, credits=-5, stash_value=2)
