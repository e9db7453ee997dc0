import pytest
from pydantic import ValidationError

from mundamanager.domain.enums import BattleRole, CreditsOperation
from mundamanager.schemas import (
    BattleCreate,
    EquipmentPurchase,
    FighterCreate,
    GangCreate,
    GangUpdate,
    ProfileCreate,
)


def test_gang_create():
    gang = GangCreate(name="Iron Fists", gang_type_id=1)
    assert gang.alignment is None
    json_data = gang.model_dump()
    assert "name" in json_data
    assert "id" not in json_data


def test_gang_create_requires_name():
    with pytest.raises(ValidationError):
        GangCreate(name="", gang_type_id=1)


def test_gang_update_only_dumps_set_fields():
    update = GangUpdate(credits=50, credits_operation="subtract")
    assert update.credits_operation is CreditsOperation.SUBTRACT
    assert update.model_dump(exclude_unset=True) == {
        "credits": 50,
        "credits_operation": CreditsOperation.SUBTRACT,
    }


def test_gang_update_rejects_negative_amounts():
    with pytest.raises(ValidationError):
        GangUpdate(meat=-1)


def test_fighter_create_defaults():
    fighter = FighterCreate(fighter_type_id=3, fighter_name="Brakk")
    assert fighter.cost is None
    assert fighter.use_base_cost_for_rating


def test_equipment_purchase_defaults():
    purchase = EquipmentPurchase(gang_id=1, equipment_id=2)
    assert purchase.fighter_id is None
    assert purchase.vehicle_id is None
    assert not purchase.master_crafted
    with pytest.raises(ValidationError):
        EquipmentPurchase(gang_id=1, equipment_id=2, manual_cost=-5)


def test_battle_create_participants():
    battle = BattleCreate(
        scenario="Stand-off", participants=[{"role": "attacker", "gang_id": 4}, {"gang_id": 5}]
    )
    assert [row.role for row in battle.participants] == [BattleRole.ATTACKER, BattleRole.NONE]
    assert battle.winner_id is None
    assert battle.claimed_territories == []


def test_profile_create_limits():
    with pytest.raises(ValidationError):
        ProfileCreate(id="", username="Alice")
