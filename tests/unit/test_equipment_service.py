"""Unit tests for the equipment service (trading post and stash)."""

import pytest

from mundamanager.exceptions import PermissionDeniedError
from mundamanager.models import Fighter, FighterEquipment


@pytest.fixture
def equipment(services):
    return services["equipment"]


@pytest.fixture
def tyrant(services, gang, catalog):
    return services["fighters"].add_fighter(
        gang.id, "user-1", catalog.fighter_type("Forge Tyrant"), "Brakk"
    ).fighter


class TestBuyEquipment:
    def test_fighter_purchase_adds_to_rating(self, equipment, gang, tyrant, catalog,
                                             assert_balanced):
        result = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Autogun"), fighter_id=tyrant.id
        )

        assert result.item.fighter_id == tyrant.id
        assert result.item.purchase_cost == 15
        assert result.created_beast_ids == []
        assert (gang.credits, gang.rating, gang.wealth) == (850, 150, 1000)
        assert_balanced(gang.id)

    def test_master_crafted_rates_higher_than_paid(self, equipment, gang, tyrant, catalog,
                                                   assert_balanced):
        result = equipment.buy_equipment(
            gang.id,
            "user-1",
            catalog.equipment("Boltgun"),
            fighter_id=tyrant.id,
            master_crafted=True,
        )

        assert result.item.is_master_crafted
        assert result.item.purchase_cost == 70
        assert result.item.original_cost == 55
        assert gang.credits == 865 - 55
        assert gang.rating == 135 + 70
        assert_balanced(gang.id)

    def test_only_weapons_master_crafted(self, equipment, gang, tyrant, catalog):
        with pytest.raises(ValueError, match="Only weapons"):
            equipment.buy_equipment(
                gang.id,
                "user-1",
                catalog.equipment("Flak armour"),
                fighter_id=tyrant.id,
                master_crafted=True,
            )

    def test_manual_cost_paid_base_cost_rated(self, equipment, gang, tyrant, catalog):
        equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Boltgun"), fighter_id=tyrant.id, manual_cost=40
        )

        assert gang.credits == 825
        assert gang.rating == 190

    def test_stash_purchase(self, equipment, gang, catalog, assert_balanced):
        result = equipment.buy_equipment(gang.id, "user-1", catalog.equipment("Lasgun"))

        assert result.item.gang_stash
        assert gang.credits == 985
        assert gang.rating == 0
        assert gang.wealth == 1000
        assert [item.id for item in equipment.list_stash(gang.id)] == [result.item.id]
        assert_balanced(gang.id)

    def test_both_targets_refused(self, services, equipment, gang, tyrant, catalog):
        vehicle = services["vehicles"].add_gang_vehicle(
            gang.id, "user-1", catalog.vehicle_type("Outrider Quad")
        ).vehicle

        with pytest.raises(ValueError, match="Cannot provide both"):
            equipment.buy_equipment(
                gang.id,
                "user-1",
                catalog.equipment("Ram"),
                fighter_id=tyrant.id,
                vehicle_id=vehicle.id,
            )

    def test_insufficient_credits(self, equipment, gang, catalog):
        with pytest.raises(ValueError, match="insufficient credits"):
            equipment.buy_equipment(
                gang.id, "user-1", catalog.equipment("Lasgun"), manual_cost=5000
            )
        assert gang.credits == 1000

    def test_dead_fighter_equipment_is_uncounted(self, services, equipment, gang, tyrant,
                                                 catalog, assert_balanced):
        services["fighters"].change_status(tyrant.id, "user-1", "kill")

        equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Autogun"), fighter_id=tyrant.id
        )

        assert gang.rating == 0
        assert gang.credits == 850
        assert gang.wealth == 850
        assert_balanced(gang.id)


class TestExoticBeasts:
    def test_beast_granted_with_equipment(self, session, equipment, gang, tyrant, catalog,
                                          assert_balanced):
        result = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Cyber-mastiff"), fighter_id=tyrant.id
        )

        [beast_id] = result.created_beast_ids
        beast = session.get(Fighter, beast_id)
        assert beast.is_owned_beast
        assert beast.beast_owner_link.owner_id == tyrant.id
        assert beast.credits == 0
        assert (gang.credits, gang.rating) == (765, 235)
        assert_balanced(gang.id)

    def test_beast_equipment_counts_for_owner(self, services, equipment, gang, tyrant,
                                              catalog, assert_balanced):
        [beast_id] = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Cyber-mastiff"), fighter_id=tyrant.id
        ).created_beast_ids

        equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Mesh armour"), fighter_id=beast_id
        )

        fighters = services["fighters"]
        assert fighters.total_cost(beast_id) == 0
        assert fighters.total_cost(tyrant.id) == 135 + 100 + 15
        assert gang.rating == 250
        assert_balanced(gang.id)

    def test_beasts_cannot_own_beasts(self, equipment, gang, tyrant, catalog):
        [beast_id] = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Cyber-mastiff"), fighter_id=tyrant.id
        ).created_beast_ids

        with pytest.raises(ValueError, match="cannot own other exotic beasts"):
            equipment.buy_equipment(
                gang.id, "user-1", catalog.equipment("Cyber-mastiff"), fighter_id=beast_id
            )

    def test_beast_equipment_cannot_be_stashed(self, equipment, gang, tyrant, catalog):
        item = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Cyber-mastiff"), fighter_id=tyrant.id
        ).item

        with pytest.raises(ValueError, match="exotic beasts cannot be moved"):
            equipment.move_to_stash(item.id, "user-1")

    def test_beast_equipment_needs_a_fighter(self, services, equipment, gang, catalog):
        vehicle = services["vehicles"].add_gang_vehicle(
            gang.id, "user-1", catalog.vehicle_type("Outrider Quad")
        ).vehicle
        credits = gang.credits

        with pytest.raises(ValueError, match="grants exotic beasts and must go to a fighter"):
            equipment.buy_equipment(gang.id, "user-1", catalog.equipment("Cyber-mastiff"))
        with pytest.raises(ValueError, match="grants exotic beasts and must go to a fighter"):
            equipment.buy_equipment(
                gang.id, "user-1", catalog.equipment("Cyber-mastiff"), vehicle_id=vehicle.id
            )
        assert gang.credits == credits
        assert equipment.list_stash(gang.id) == []

    def test_selling_beast_equipment_removes_beast(self, session, equipment, gang, tyrant,
                                                   catalog, assert_balanced):
        purchase = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Cyber-mastiff"), fighter_id=tyrant.id
        )
        [beast_id] = purchase.created_beast_ids
        item_id = purchase.item.id

        result = equipment.sell_equipment(item_id, "user-1")

        assert result.deleted_beast_ids == [beast_id]
        assert result.credits_received == 100
        assert session.get(Fighter, beast_id) is None
        assert (gang.credits, gang.rating, gang.wealth) == (865, 135, 1000)
        assert_balanced(gang.id)


class TestSellAndDelete:
    def test_sell_for_manual_value(self, equipment, gang, tyrant, catalog,
                                            assert_balanced):
        item_id = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Plasma pistol"), fighter_id=tyrant.id
        ).item.id

        result = equipment.sell_equipment(item_id, "user-1", manual_cost=30)

        assert result.credits_received == 30
        assert gang.credits == 865 - 50 + 30
        assert gang.rating == 135
        assert_balanced(gang.id)

    def test_delete_gives_nothing_back(self, session, equipment, gang, tyrant, catalog):
        item_id = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Autogun"), fighter_id=tyrant.id
        ).item.id

        result = equipment.delete_equipment(item_id, "user-1")

        assert result.credits_received == 0
        assert session.get(FighterEquipment, item_id) is None
        assert (gang.credits, gang.rating) == (850, 135)

    def test_only_owner_can_sell(self, equipment, gang, tyrant, catalog):
        item_id = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Autogun"), fighter_id=tyrant.id
        ).item.id

        with pytest.raises(PermissionDeniedError):
            equipment.sell_equipment(item_id, "user-2")


class TestStash:
    def test_move_to_and_from_stash(self, equipment, gang, tyrant, catalog, assert_balanced):
        item = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Autogun"), fighter_id=tyrant.id
        ).item

        equipment.move_to_stash(item.id, "user-1")
        assert item.gang_stash
        assert item.fighter_id is None
        assert (gang.rating, gang.wealth) == (135, 1000)
        assert_balanced(gang.id)

        with pytest.raises(ValueError, match="already in gang stash"):
            equipment.move_to_stash(item.id, "user-1")

        equipment.move_from_stash(item.id, "user-1", fighter_id=tyrant.id)
        assert not item.gang_stash
        assert (gang.rating, gang.wealth) == (150, 1000)
        assert_balanced(gang.id)

    def test_move_from_stash_needs_target(self, equipment, gang, catalog):
        item_id = equipment.buy_equipment(gang.id, "user-1", catalog.equipment("Lasgun")).item.id

        with pytest.raises(ValueError, match="Either fighter_id or vehicle_id"):
            equipment.move_from_stash(item_id, "user-1")

    def test_move_from_stash_requires_stashed_item(self, equipment, gang, tyrant, catalog):
        item_id = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Autogun"), fighter_id=tyrant.id
        ).item.id

        with pytest.raises(ValueError, match="not in the gang stash"):
            equipment.move_from_stash(item_id, "user-1", fighter_id=tyrant.id)

    def test_stash_sale_has_minimum_value(self, equipment, gang, catalog, assert_balanced):
        item_id = equipment.buy_equipment(gang.id, "user-1", catalog.equipment("Lasgun")).item.id

        result = equipment.sell_from_stash(item_id, "user-1", manual_cost=2)

        assert result.credits_received == 5
        assert gang.credits == 990
        assert gang.wealth == 990
        assert equipment.list_stash(gang.id) == []
        assert_balanced(gang.id)

    def test_sell_routes_stash_items(self, equipment, gang, catalog):
        item_id = equipment.buy_equipment(gang.id, "user-1", catalog.equipment("Lasgun")).item.id

        result = equipment.sell_equipment(item_id, "user-1", manual_cost=12.7)

        assert result.credits_received == 12

    def test_delete_from_stash(self, equipment, gang, catalog, assert_balanced):
        item_id = equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Mesh armour")
        ).item.id

        equipment.delete_equipment(item_id, "user-1")

        assert gang.credits == 985
        assert gang.wealth == 985
        assert_balanced(gang.id)


class TestVehicleEquipment:
    def test_upgrade_on_unassigned_vehicle_keeps_wealth(self, services, equipment, gang,
                                                        catalog, assert_balanced):
        vehicle = services["vehicles"].add_gang_vehicle(
            gang.id, "user-1", catalog.vehicle_type("Outrider Quad")
        ).vehicle

        equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Ram"), vehicle_id=vehicle.id
        )

        assert gang.credits == 1000 - 125 - 35
        assert gang.rating == 0
        assert gang.wealth == 1000
        assert_balanced(gang.id)

    def test_upgrade_on_crewed_vehicle_adds_rating(self, services, equipment, gang, tyrant,
                                                   catalog, assert_balanced):
        vehicles = services["vehicles"]
        vehicle = vehicles.add_gang_vehicle(
            gang.id, "user-1", catalog.vehicle_type("Outrider Quad")
        ).vehicle
        vehicles.assign_vehicle_to_fighter(vehicle.id, tyrant.id, "user-1")

        equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Wheel Spikes"), vehicle_id=vehicle.id
        )

        assert gang.rating == 135 + 125 + 10
        assert services["fighters"].total_cost(tyrant.id) == 270
        assert_balanced(gang.id)
