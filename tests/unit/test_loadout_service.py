"""Unit tests for fighter loadouts."""

import pytest


@pytest.fixture
def loadouts(services):
    return services["loadouts"]


@pytest.fixture
def armed(services, gang, catalog):
    """A Forge Boss carrying an Autogun and a Boltgun; returns (fighter, autogun, boltgun)."""
    boss = services["fighters"].add_fighter(
        gang.id, "user-1", catalog.fighter_type("Forge Boss"), "Krug"
    ).fighter
    equipment = services["equipment"]
    autogun = equipment.buy_equipment(
        gang.id, "user-1", catalog.equipment("Autogun"), fighter_id=boss.id
    ).item
    boltgun = equipment.buy_equipment(
        gang.id, "user-1", catalog.equipment("Boltgun"), fighter_id=boss.id
    ).item
    return boss, autogun, boltgun


def test_loadout_cost_counts_only_its_items(loadouts, gang, armed):
    boss, autogun, _ = armed
    rating = gang.rating

    loadout = loadouts.create_loadout(boss.id, "user-1", " Sniper ", [autogun.id])

    assert loadout.loadout_name == "Sniper"
    [summary] = loadouts.list_loadouts(boss.id)
    assert summary.equipment_ids == [autogun.id]
    assert summary.loadout_cost == 115
    assert not summary.is_active
    assert gang.rating == rating


def test_name_validation(loadouts, armed):
    boss, autogun, _ = armed
    loadouts.create_loadout(boss.id, "user-1", "Assault", [autogun.id])

    with pytest.raises(ValueError, match="cannot be empty"):
        loadouts.create_loadout(boss.id, "user-1", "  ", [])
    with pytest.raises(ValueError, match='already has a loadout named "Assault"'):
        loadouts.create_loadout(boss.id, "user-1", "Assault", [])


def test_items_must_be_carried(services, loadouts, gang, armed, catalog):
    boss, _, _ = armed
    stashed = services["equipment"].buy_equipment(
        gang.id, "user-1", catalog.equipment("Lasgun")
    ).item

    with pytest.raises(ValueError, match=rf"not carried by this fighter: \[{stashed.id}\]"):
        loadouts.create_loadout(boss.id, "user-1", "Borrowed", [stashed.id])


def test_single_active_loadout(loadouts, armed):
    boss, autogun, boltgun = armed
    first = loadouts.create_loadout(boss.id, "user-1", "Light", [autogun.id])
    second = loadouts.create_loadout(boss.id, "user-1", "Heavy", [boltgun.id])

    loadouts.set_active_loadout(boss.id, "user-1", first.id)
    loadouts.set_active_loadout(boss.id, "user-1", second.id)

    active = {row.loadout_name: row.is_active for row in loadouts.list_loadouts(boss.id)}
    assert active == {"Light": False, "Heavy": True}

    assert loadouts.set_active_loadout(boss.id, "user-1", None) is None
    assert not any(row.is_active for row in loadouts.list_loadouts(boss.id))


def test_foreign_loadout_refused(services, loadouts, gang, armed, catalog):
    boss, autogun, _ = armed
    other = services["fighters"].add_fighter(
        gang.id, "user-1", catalog.fighter_type("Bully"), "Grub"
    ).fighter
    loadout = loadouts.create_loadout(boss.id, "user-1", "Mine", [autogun.id])

    with pytest.raises(ValueError, match="does not belong to this fighter"):
        loadouts.set_active_loadout(other.id, "user-1", loadout.id)


def test_stashing_an_item_drops_it_from_loadouts(services, loadouts, armed):
    boss, autogun, boltgun = armed
    loadouts.create_loadout(boss.id, "user-1", "Both", [autogun.id, boltgun.id])

    services["equipment"].move_to_stash(autogun.id, "user-1")

    [summary] = loadouts.list_loadouts(boss.id)
    assert summary.equipment_ids == [boltgun.id]


def test_delete_loadout(loadouts, armed):
    boss, autogun, _ = armed
    loadout = loadouts.create_loadout(boss.id, "user-1", "Gone", [autogun.id])
    assert len(loadouts.list_loadouts(boss.id)) == 1

    loadouts.delete_loadout(loadout.id, "user-1")

    assert loadouts.list_loadouts(boss.id) == []
