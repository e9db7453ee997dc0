"""Unit tests for the vehicle service."""

import pytest

from mundamanager.models import Vehicle


@pytest.fixture
def vehicles(services):
    return services["vehicles"]


@pytest.fixture
def tyrant(services, gang, catalog):
    return services["fighters"].add_fighter(
        gang.id, "user-1", catalog.fighter_type("Forge Tyrant"), "Brakk"
    ).fighter


@pytest.fixture
def hauler(vehicles, gang, catalog):
    return vehicles.add_gang_vehicle(
        gang.id, "user-1", catalog.vehicle_type("Cargo-8 Ridgehauler")
    ).vehicle


class TestPurchase:
    def test_bought_unassigned(self, gang, hauler, assert_balanced):
        assert hauler.vehicle_name == "Cargo-8 Ridgehauler"
        assert hauler.fighter_id is None
        assert hauler.cost == 250
        assert hauler.movement == 8
        assert hauler.special_rules == ["Rough Terrain Modifications"]
        assert (gang.credits, gang.rating, gang.wealth) == (750, 0, 1000)
        assert_balanced(gang.id)

    def test_custom_name_and_free_vehicle(self, vehicles, gang, catalog, assert_balanced):
        result = vehicles.add_gang_vehicle(
            gang.id,
            "user-1",
            catalog.vehicle_type("Outrider Quad"),
            cost=0,
            vehicle_name="Dust Runner  ",
            base_cost=125,
        )

        assert result.vehicle.vehicle_name == "Dust Runner"
        assert result.vehicle.cost == 125
        assert gang.credits == 1000
        assert gang.wealth == 1125
        assert_balanced(gang.id)

    def test_not_enough_credits(self, vehicles, gang, catalog):
        with pytest.raises(ValueError, match="Not enough credits"):
            vehicles.add_gang_vehicle(
                gang.id, "user-1", catalog.vehicle_type("Outrider Quad"), cost=1001
            )


class TestCrew:
    def test_assignment_moves_value_into_rating(self, vehicles, gang, tyrant, hauler,
                                                assert_balanced):
        result = vehicles.assign_vehicle_to_fighter(hauler.id, tyrant.id, "user-1")

        assert result.previous_fighter_id is None
        assert hauler.fighter_id == tyrant.id
        assert (gang.credits, gang.rating, gang.wealth) == (615, 385, 1000)
        assert_balanced(gang.id)

    def test_same_crew_is_a_no_op(self, vehicles, tyrant, hauler):
        vehicles.assign_vehicle_to_fighter(hauler.id, tyrant.id, "user-1")

        result = vehicles.assign_vehicle_to_fighter(hauler.id, tyrant.id, "user-1")

        assert result.previous_fighter_id == tyrant.id
        assert not result.financials.changed

    def test_second_vehicle_displaces_first(self, vehicles, gang, tyrant, hauler, catalog,
                                            assert_balanced):
        vehicles.assign_vehicle_to_fighter(hauler.id, tyrant.id, "user-1")
        quad = vehicles.add_gang_vehicle(
            gang.id, "user-1", catalog.vehicle_type("Outrider Quad")
        ).vehicle

        result = vehicles.assign_vehicle_to_fighter(quad.id, tyrant.id, "user-1")

        assert result.displaced_vehicle_id == hauler.id
        assert hauler.fighter_id is None
        assert gang.rating == 135 + 125
        assert_balanced(gang.id)

    def test_crew_swap_between_fighters(self, services, vehicles, gang, tyrant, hauler,
                                        catalog, assert_balanced):
        bully = services["fighters"].add_fighter(
            gang.id, "user-1", catalog.fighter_type("Bully"), "Grub"
        ).fighter
        vehicles.assign_vehicle_to_fighter(hauler.id, tyrant.id, "user-1")

        result = vehicles.assign_vehicle_to_fighter(hauler.id, bully.id, "user-1")

        assert result.previous_fighter_id == tyrant.id
        assert services["fighters"].total_cost(tyrant.id) == 135
        assert services["fighters"].total_cost(bully.id) == 60 + 250
        assert_balanced(gang.id)

    def test_unassign(self, vehicles, gang, tyrant, hauler, assert_balanced):
        vehicles.assign_vehicle_to_fighter(hauler.id, tyrant.id, "user-1")

        result = vehicles.unassign_vehicle(hauler.id, "user-1")

        assert result.previous_fighter_id == tyrant.id
        assert (gang.rating, gang.wealth) == (135, 1000)
        assert_balanced(gang.id)
        assert vehicles.unassign_vehicle(hauler.id, "user-1").previous_fighter_id is None

    def test_beasts_cannot_crew(self, services, vehicles, gang, tyrant, hauler, catalog):
        [beast_id] = services["equipment"].buy_equipment(
            gang.id, "user-1", catalog.equipment("Cyber-mastiff"), fighter_id=tyrant.id
        ).created_beast_ids

        with pytest.raises(ValueError, match="Exotic beasts cannot crew vehicles"):
            vehicles.assign_vehicle_to_fighter(hauler.id, beast_id, "user-1")

    def test_dead_crew_takes_vehicle_out_of_rating(self, services, vehicles, gang, tyrant,
                                                   hauler, assert_balanced):
        vehicles.assign_vehicle_to_fighter(hauler.id, tyrant.id, "user-1")

        services["fighters"].change_status(tyrant.id, "user-1", "kill")

        assert gang.rating == 0
        assert gang.wealth == 615
        assert_balanced(gang.id)

        vehicles.unassign_vehicle(hauler.id, "user-1")
        assert gang.wealth == 865
        assert_balanced(gang.id)


class TestDamage:
    def test_damage_lowers_crewed_value(self, vehicles, gang, tyrant, hauler, catalog,
                                        assert_balanced):
        vehicles.assign_vehicle_to_fighter(hauler.id, tyrant.id, "user-1")

        result = vehicles.add_vehicle_damage(
            hauler.id, "user-1", catalog.effect_type("Damaged Bodywork")
        )

        assert len(result.effect_ids) == 1
        assert gang.rating == 375
        assert vehicles.detail(hauler.id)["effective_stats"]["front"] == 5
        assert_balanced(gang.id)

        vehicles.remove_vehicle_damage(result.effect_ids[0], "user-1")
        assert gang.rating == 385
        assert_balanced(gang.id)

    def test_damage_on_unassigned_vehicle_moves_wealth(self, vehicles, gang, hauler, catalog,
                                                       assert_balanced):
        vehicles.add_vehicle_damage(hauler.id, "user-1", catalog.effect_type("Damaged Bodywork"))

        assert gang.rating == 0
        assert gang.wealth == 990
        assert_balanced(gang.id)

    def test_only_vehicle_damage_accepted(self, vehicles, hauler, catalog):
        with pytest.raises(ValueError, match="is not a vehicle damage"):
            vehicles.add_vehicle_damage(hauler.id, "user-1", catalog.effect_type("Head Injury"))

    def test_repair(self, vehicles, gang, hauler, catalog, assert_balanced):
        first = vehicles.add_vehicle_damage(
            hauler.id, "user-1", catalog.effect_type("Damaged Bodywork")
        ).effect_ids[0]
        second = vehicles.add_vehicle_damage(
            hauler.id, "user-1", catalog.effect_type("Persistent Rattle")
        ).effect_ids[0]

        result = vehicles.repair_vehicle_damage(hauler.id, "user-1", [first, second], 20)

        assert result.effect_ids == sorted([first, second])
        assert result.credits_delta == -20
        assert gang.credits == 730
        assert gang.wealth == 980
        assert vehicles.detail(hauler.id)["effects"] == []
        assert_balanced(gang.id)

    def test_repair_validation(self, vehicles, gang, hauler, catalog):
        damage_id = vehicles.add_vehicle_damage(
            hauler.id, "user-1", catalog.effect_type("Persistent Rattle")
        ).effect_ids[0]

        with pytest.raises(ValueError, match="Select at least one damage"):
            vehicles.repair_vehicle_damage(hauler.id, "user-1", [], 0)
        with pytest.raises(ValueError, match="insufficient credits"):
            vehicles.repair_vehicle_damage(hauler.id, "user-1", [damage_id], 5000)
        assert len(vehicles.detail(hauler.id)["effects"]) == 1


class TestSellAndDelete:
    def test_sell_defaults_to_base_cost(self, session, vehicles, gang, tyrant, hauler,
                                        assert_balanced):
        vehicles.assign_vehicle_to_fighter(hauler.id, tyrant.id, "user-1")
        vehicle_id = hauler.id

        result = vehicles.sell_vehicle(vehicle_id, "user-1")

        assert result.credits_delta == 250
        assert session.get(Vehicle, vehicle_id) is None
        assert (gang.credits, gang.rating, gang.wealth) == (865, 135, 1000)
        assert_balanced(gang.id)

    def test_delete_takes_equipment_with_it(self, services, vehicles, gang, hauler, catalog,
                                            assert_balanced):
        services["equipment"].buy_equipment(
            gang.id, "user-1", catalog.equipment("Ram"), vehicle_id=hauler.id
        )

        vehicles.delete_vehicle(hauler.id, "user-1")

        assert gang.credits == 715
        assert gang.wealth == 715
        assert_balanced(gang.id)

    def test_rename(self, vehicles, hauler):
        vehicle = vehicles.update_vehicle(hauler.id, "user-1", vehicle_name="Big Bertha")

        assert vehicle.vehicle_name == "Big Bertha"
        with pytest.raises(ValueError, match="cannot be empty"):
            vehicles.update_vehicle(hauler.id, "user-1", vehicle_name="   ")
