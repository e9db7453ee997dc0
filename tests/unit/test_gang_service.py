"""Unit tests for the gang service."""

import pytest

from mundamanager.cache import CacheTag
from mundamanager.domain.enums import CreditsOperation
from mundamanager.exceptions import NotFoundError, PermissionDeniedError
from mundamanager.models import Gang, GangLog
from mundamanager.schemas.gang import GangUpdate
from mundamanager.services.gang_service import INVALID_ALIGNMENT_MESSAGE


class TestCreateGang:
    def test_starting_resources(self, session, gang):
        assert gang.credits == 1000
        assert gang.reputation == 1
        assert gang.rating == 0
        assert gang.wealth == 1000
        assert gang.alignment is None

        log = session.query(GangLog).filter_by(gang_id=gang.id).one()
        assert log.action_type == "gang_created"
        assert "1000 credits" in log.description

    def test_alignment_defaults_to_gang_type(self, services, catalog):
        gang = services["gangs"].create_gang(
            "user-2", "Precinct 9", catalog.gang_type("Palanite Enforcers")
        )

        assert gang.alignment == "Law Abiding"

    def test_name_is_right_trimmed(self, services, catalog):
        gang = services["gangs"].create_gang(
            "user-1", "  Spaced Out   ", catalog.gang_type("House Escher")
        )

        assert gang.name == "  Spaced Out"

    def test_invalid_alignment(self, services, catalog):
        with pytest.raises(ValueError, match="Invalid alignment value"):
            services["gangs"].create_gang(
                "user-1", "Bad", catalog.gang_type("House Goliath"), alignment="Chaotic"
            )

    def test_requires_profile(self, services, catalog):
        with pytest.raises(PermissionDeniedError):
            services["gangs"].create_gang("nobody", "Ghosts", catalog.gang_type("House Goliath"))

    def test_unknown_gang_type(self, services):
        with pytest.raises(NotFoundError, match="Gang type 999"):
            services["gangs"].create_gang("user-1", "Nowhere", 999)

    def test_creation_invalidates_user_gangs(self, cache, services, catalog):
        cache.set("my-gangs", [], [CacheTag.USER_GANGS.tag("user-1")])

        services["gangs"].create_gang("user-1", "Second", catalog.gang_type("House Goliath"))

        assert "my-gangs" not in cache


class TestUpdateGang:
    def test_credits_added_and_subtracted(self, services, gang, assert_balanced):
        gangs = services["gangs"]

        result = gangs.update_gang(
            gang.id,
            "user-1",
            GangUpdate(credits=200, credits_operation=CreditsOperation.ADD),
        )
        assert result.changed_fields == ["credits"]
        assert result.financials.new_values.credits == 1200
        assert gang.wealth == 1200

        gangs.update_gang(
            gang.id,
            "user-1",
            GangUpdate(credits=150, credits_operation=CreditsOperation.SUBTRACT),
        )
        assert gang.credits == 1050
        assert_balanced(gang.id)

    def test_credits_never_negative(self, services, gang):
        services["gangs"].update_gang(
            gang.id, "user-1", GangUpdate(credits=5000, credits_operation="subtract")
        )

        assert gang.credits == 0
        assert gang.wealth == 0

    def test_operation_required(self, services, gang):
        with pytest.raises(ValueError, match="credits_operation is required"):
            services["gangs"].update_gang(gang.id, "user-1", GangUpdate(credits=10))

    def test_reputation_clamps_at_zero(self, services, gang):
        services["gangs"].update_gang(
            gang.id, "user-1", GangUpdate(reputation=5, reputation_operation="subtract")
        )

        assert gang.reputation == 0

    def test_details_and_resources_logged(self, session, services, gang):
        result = services["gangs"].update_gang(
            gang.id,
            "user-1",
            GangUpdate(name="Iron Fists II", meat=3, alignment="Outlaw", note="Hive scum"),
        )

        assert set(result.changed_fields) == {"name", "meat", "alignment", "note"}
        assert gang.meat == 3
        assert gang.alignment == "Outlaw"
        actions = {
            entry.action_type for entry in session.query(GangLog).filter_by(gang_id=gang.id)
        }
        assert {"gang_name_changed", "gang_meat_changed", "gang_alignment_changed"} <= actions

    def test_none_alignment_leaves_it(self, services, gang):
        result = services["gangs"].update_gang(gang.id, "user-1", GangUpdate(alignment=None))

        assert result.changed_fields == []

    def test_bad_alignment_rolls_back(self, session, services, gang):
        with pytest.raises(ValueError) as excinfo:
            services["gangs"].update_gang(
                gang.id, "user-1", GangUpdate(name="Renamed", alignment="Neutral")
            )

        assert str(excinfo.value) == INVALID_ALIGNMENT_MESSAGE
        assert session.get(Gang, gang.id).name == "Iron Fists"

    def test_other_user_denied_admin_allowed(self, services, gang):
        with pytest.raises(PermissionDeniedError):
            services["gangs"].update_gang(gang.id, "user-2", GangUpdate(meat=1))

        services["gangs"].update_gang(gang.id, "admin-1", GangUpdate(meat=1))
        assert gang.meat == 1

    def test_update_refreshes_overview(self, services, gang):
        gangs = services["gangs"]
        assert gangs.overview(gang.id)["credits"] == 1000

        gangs.update_gang(gang.id, "user-1", GangUpdate(credits=5, credits_operation="add"))

        assert gangs.overview(gang.id)["credits"] == 1005


class TestPositioningAndLogs:
    def test_positioning_stored_with_string_slots(self, services, gang, catalog):
        fighters = services["fighters"]
        first = fighters.add_fighter(gang.id, "user-1", catalog.fighter_type("Bully"), "A").fighter
        second = fighters.add_fighter(gang.id, "user-1", catalog.fighter_type("Bully"), "B").fighter

        services["gangs"].update_positioning(gang.id, "user-1", {1: first.id, 0: second.id})

        assert gang.positioning == {"0": second.id, "1": first.id}

    def test_positioning_rejects_strangers(self, services, gang):
        with pytest.raises(ValueError, match="do not belong"):
            services["gangs"].update_positioning(gang.id, "user-1", {0: 12345})

    def test_custom_log_and_paging(self, services, gang):
        gangs = services["gangs"]
        gangs.add_custom_log(gang.id, "user-1", "Found a stash of rat meat")

        newest = gangs.list_logs(gang.id, limit=1)
        assert [entry.action_type for entry in newest] == ["custom"]
        assert len(gangs.list_logs(gang.id, limit=10)) == 2

        with pytest.raises(ValueError, match="limit"):
            gangs.list_logs(gang.id, limit=0)
        with pytest.raises(ValueError, match="cannot be empty"):
            gangs.add_custom_log(gang.id, "user-1", "   ")


class TestRecalculateAndDelete:
    def test_recalculate_logs_correction(self, session, services, gang):
        gang.rating = 77
        session.commit()

        result = services["gangs"].recalculate_financials(gang.id, "user-1")

        assert result.rating_drift == 77
        assert gang.rating == 0
        assert services["gangs"].list_logs(gang.id, limit=1)[0].action_type == (
            "gang_financials_recalculated"
        )

    def test_recalculate_without_drift_writes_nothing(self, services, gang):
        result = services["gangs"].recalculate_financials(gang.id, "user-1")

        assert result.rating_drift == 0
        assert len(services["gangs"].list_logs(gang.id)) == 1

    def test_delete_gang(self, session, services, gang, catalog):
        services["fighters"].add_fighter(gang.id, "user-1", catalog.fighter_type("Bully"), "A")
        services["equipment"].buy_equipment(gang.id, "user-1", catalog.equipment("Lasgun"))

        gang_id = gang.id
        with pytest.raises(PermissionDeniedError):
            services["gangs"].delete_gang(gang_id, "user-2")
        services["gangs"].delete_gang(gang_id, "user-1")

        assert session.get(Gang, gang_id) is None
        assert services["gangs"].list_user_gangs("user-1") == []


class TestCopyGang:
    @pytest.fixture
    def outfitted(self, services, gang, catalog):
        """Iron Fists with a crewed quad, a beast, a stash item and a dead Bully."""
        fighters, equipment, vehicles = (
            services["fighters"],
            services["equipment"],
            services["vehicles"],
        )
        tyrant = fighters.add_fighter(
            gang.id, "user-1", catalog.fighter_type("Forge Tyrant"), "Brakk"
        ).fighter
        bully = fighters.add_fighter(
            gang.id, "user-1", catalog.fighter_type("Bully"), "Grub"
        ).fighter
        fighters.change_status(bully.id, "user-1", "kill")
        equipment.buy_equipment(
            gang.id, "user-1", catalog.equipment("Cyber-mastiff"), fighter_id=tyrant.id
        )
        quad = vehicles.add_gang_vehicle(
            gang.id, "user-1", catalog.vehicle_type("Outrider Quad")
        ).vehicle
        vehicles.assign_vehicle_to_fighter(quad.id, tyrant.id, "user-1")
        equipment.buy_equipment(gang.id, "user-1", catalog.equipment("Ram"), vehicle_id=quad.id)
        equipment.buy_equipment(gang.id, "user-1", catalog.equipment("Lasgun"))
        services["gangs"].update_positioning(gang.id, "user-1", {0: tyrant.id, 1: bully.id})
        return gang

    def test_copy_duplicates_roster(self, services, outfitted, assert_balanced):
        source = outfitted
        copy = services["gangs"].copy_gang(source.id, "user-1")

        assert copy.id != source.id
        assert copy.name == "Iron Fists (Copy)"
        assert copy.user_id == "user-1"
        assert (copy.credits, copy.rating, copy.wealth) == (
            source.credits,
            source.rating,
            source.wealth,
        )

        by_name = {fighter.fighter_name: fighter for fighter in copy.fighters}
        assert set(by_name) == {"Brakk", "Grub", "Cyber-mastiff"}
        brakk = by_name["Brakk"]
        assert by_name["Grub"].killed
        assert [link.beast for link in brakk.owned_beasts] == [by_name["Cyber-mastiff"]]
        assert brakk.owned_beasts[0].fighter_equipment.fighter is brakk
        assert [vehicle.fighter for vehicle in copy.vehicles] == [brakk]
        assert [item.equipment.equipment_name for item in copy.vehicles[0].equipment] == ["Ram"]
        assert [item.equipment.equipment_name for item in copy.equipment if item.gang_stash] == [
            "Lasgun"
        ]
        assert copy.positioning == {"0": brakk.id, "1": by_name["Grub"].id}
        assert services["gangs"].list_logs(copy.id, limit=1)[0].action_type == "gang_copied"
        assert_balanced(source.id)
        assert_balanced(copy.id)

    def test_copy_is_independent(self, session, services, outfitted, assert_balanced):
        copy = services["gangs"].copy_gang(outfitted.id, "user-1", new_name="Anvil Boys")
        rating = outfitted.rating

        [brakk] = [fighter for fighter in copy.fighters if fighter.fighter_name == "Brakk"]
        services["fighters"].change_status(brakk.id, "user-1", "retire")

        assert copy.name == "Anvil Boys"
        assert outfitted.rating == rating
        assert copy.rating < rating
        assert_balanced(copy.id)

    def test_copy_rebuilds_drifted_rating(self, session, services, gang):
        gang.rating = 77
        session.commit()

        copy = services["gangs"].copy_gang(gang.id, "user-1")

        assert (copy.rating, copy.wealth) == (0, 1000)

    def test_only_owner_or_admin_copies(self, services, gang):
        with pytest.raises(PermissionDeniedError):
            services["gangs"].copy_gang(gang.id, "user-2")

        copy = services["gangs"].copy_gang(gang.id, "admin-1")
        assert copy.user_id == "admin-1"
        assert [g.id for g in services["gangs"].list_user_gangs("admin-1")] == [copy.id]

    def test_unknown_gang(self, services):
        with pytest.raises(NotFoundError):
            services["gangs"].copy_gang(4242, "user-1")
