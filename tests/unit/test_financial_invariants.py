"""Property-based checks that incremental rating and wealth match a full rebuild.

Each example plays a random sequence of gang operations against a fresh
database. Refused operations (``ValueError``) must leave the books untouched;
accepted ones must keep stored and recomputed financials equal.
"""

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from mundamanager.cache import TagCache
from mundamanager.config import Settings
from mundamanager.factory import create_all_services
from mundamanager.models import (
    Base,
    EffectType,
    Equipment,
    Fighter,
    FighterEquipment,
    FighterType,
    GangType,
    Skill,
    Vehicle,
    VehicleType,
)
from mundamanager.models.seed_data import seed_catalog
from mundamanager.services.financials import recalculate_gang_financials
from mundamanager.services.permissions import register_profile

USER = "user-1"
FIGHTER_TYPES = ("Forge Tyrant", "Forge Boss", "Bully", "Forge-born")
EQUIPMENT = ("Autogun", "Boltgun", "Mesh armour", "Cyber-mastiff", "Ram")
STATUS_ACTIONS = ("kill", "retire", "capture", "sell", "rescue", "recover", "starve", "delete")
SKILLS = ("Iron Jaw", "Sprint", "Fast Shot")

OPERATIONS = (
    "add_fighter",
    "buy",
    "status",
    "add_vehicle",
    "assign",
    "unassign",
    "to_stash",
    "from_stash",
    "sell_item",
    "skill",
    "characteristic",
    "damage",
    "sell_vehicle",
    "copy_fighter",
)

steps = st.lists(
    st.tuples(
        st.sampled_from(OPERATIONS),
        st.integers(min_value=0, max_value=20),
        st.integers(min_value=0, max_value=20),
    ),
    min_size=1,
    max_size=25,
)


class GangBook:
    """A seeded database with one gang and helpers to pick rows by index."""

    def __init__(self):
        self.engine = create_engine("sqlite:///:memory:")
        Base.metadata.create_all(self.engine)
        self.session = sessionmaker(bind=self.engine)()
        self.cache = TagCache()
        seed_catalog(self.session)
        register_profile(self.session, self.cache, USER, "Alice")
        self.services = create_all_services(
            self.session, self.cache, Settings(starting_credits=5000)
        )
        self.gang_id = (
            self.services["gangs"]
            .create_gang(USER, "Iron Fists", self._id(GangType.name, "House Goliath"))
            .id
        )

    def close(self):
        self.session.close()
        self.engine.dispose()

    def _id(self, column, name):
        return self.session.execute(select(column.class_.id).where(column == name)).scalar_one()

    def _pick(self, model, index):
        ids = list(
            self.session.execute(
                select(model.id).where(model.gang_id == self.gang_id).order_by(model.id)
            ).scalars()
        )
        return ids[index % len(ids)] if ids else None

    def fighter(self, index):
        return self._pick(Fighter, index)

    def vehicle(self, index):
        return self._pick(Vehicle, index)

    def item(self, index):
        return self._pick(FighterEquipment, index)

    def apply(self, operation, a, b):
        services = self.services
        fighter_id, vehicle_id, item_id = self.fighter(a), self.vehicle(a), self.item(a)

        if operation == "add_fighter":
            type_id = self._id(FighterType.name, FIGHTER_TYPES[a % len(FIGHTER_TYPES)])
            services["fighters"].add_fighter(self.gang_id, USER, type_id, f"Ganger {a}")
        elif operation == "buy":
            equipment_id = self._id(Equipment.equipment_name, EQUIPMENT[b % len(EQUIPMENT)])
            target = {}
            if b % 3 == 0 and fighter_id is not None:
                target["fighter_id"] = fighter_id
            elif b % 3 == 1 and vehicle_id is not None:
                target["vehicle_id"] = vehicle_id
            services["equipment"].buy_equipment(
                self.gang_id, USER, equipment_id, master_crafted=b % 5 == 0, **target
            )
        elif operation == "status" and fighter_id is not None:
            action = STATUS_ACTIONS[b % len(STATUS_ACTIONS)]
            sell_value = 10 * b if action == "sell" else None
            services["fighters"].change_status(fighter_id, USER, action, sell_value=sell_value)
        elif operation == "add_vehicle":
            type_name = ("Outrider Quad", "Cargo-8 Ridgehauler")[b % 2]
            services["vehicles"].add_gang_vehicle(
                self.gang_id, USER, self._id(VehicleType.vehicle_type, type_name)
            )
        elif operation == "assign" and vehicle_id is not None:
            crew_id = self.fighter(b)
            if crew_id is not None:
                services["vehicles"].assign_vehicle_to_fighter(vehicle_id, crew_id, USER)
        elif operation == "unassign" and vehicle_id is not None:
            services["vehicles"].unassign_vehicle(vehicle_id, USER)
        elif operation == "to_stash" and item_id is not None:
            services["equipment"].move_to_stash(item_id, USER)
        elif operation == "from_stash" and item_id is not None:
            target_id = self.fighter(b)
            if target_id is not None:
                services["equipment"].move_from_stash(item_id, USER, fighter_id=target_id)
        elif operation == "sell_item" and item_id is not None:
            services["equipment"].sell_equipment(item_id, USER, manual_cost=b or None)
        elif operation == "skill" and fighter_id is not None:
            skill_id = self._id(Skill.name, SKILLS[b % len(SKILLS)])
            services["advancements"].add_skill(
                fighter_id, USER, skill_id, credits_increase=5 * b
            )
        elif operation == "characteristic" and fighter_id is not None:
            services["advancements"].add_characteristic_advancement(
                fighter_id, USER, "toughness", xp_cost=0, credits_increase=5 * b
            )
        elif operation == "damage" and vehicle_id is not None:
            damage_id = self._id(EffectType.effect_name, "Damaged Bodywork")
            services["vehicles"].add_vehicle_damage(vehicle_id, USER, damage_id)
        elif operation == "sell_vehicle" and vehicle_id is not None:
            services["vehicles"].sell_vehicle(vehicle_id, USER)
        elif operation == "copy_fighter" and fighter_id is not None:
            services["fighters"].copy_fighter(fighter_id, USER, charge_credits=b % 2 == 0)

    def drift(self):
        self.session.expire_all()
        result = recalculate_gang_financials(
            self.session, self.cache, self.gang_id, persist=False
        )
        return result.rating_drift, result.wealth_drift


@settings(max_examples=40, deadline=None, suppress_health_check=[HealthCheck.too_slow])
@given(sequence=steps)
def test_rating_and_wealth_never_drift(sequence):
    book = GangBook()
    try:
        for step, (operation, a, b) in enumerate(sequence):
            try:
                book.apply(operation, a, b)
            except ValueError:
                pass
            assert book.drift() == (0, 0), (step, operation, a, b)
    finally:
        book.close()


@settings(max_examples=25, deadline=None, suppress_health_check=[HealthCheck.too_slow])
@given(
    fighters=st.lists(st.sampled_from(FIGHTER_TYPES), min_size=1, max_size=6),
    action=st.sampled_from(("kill", "retire", "capture")),
)
def test_status_toggle_restores_rating(fighters, action):
    book = GangBook()
    try:
        for index, name in enumerate(fighters):
            book.services["fighters"].add_fighter(
                book.gang_id, USER, book._id(FighterType.name, name), f"Ganger {index}"
            )
        gang = book.services["gangs"].get_gang(book.gang_id)
        rating = gang.rating
        fighter_id = book.fighter(0)

        book.services["fighters"].change_status(fighter_id, USER, action)
        assert gang.rating < rating
        book.services["fighters"].change_status(fighter_id, USER, action)

        assert gang.rating == rating
        assert book.drift() == (0, 0)
    finally:
        book.close()
