from .campaign import (
    BattleCreate,
    BattleRead,
    BattleUpdate,
    CampaignCreate,
    CampaignDetail,
    CampaignGangCreate,
    CampaignGangRead,
    CampaignRead,
    CampaignTerritoryRead,
    CampaignUpdate,
    LeaderboardEntry,
    MemberCreate,
    MemberRead,
    MemberRoleUpdate,
    TerritoryAssignment,
    TerritoryCreate,
    TerritoryStatusUpdate,
)
from .catalog import (
    EffectTypeRead,
    EquipmentRead,
    FighterTypeRead,
    GangTypeRead,
    SkillRead,
    TerritoryRead,
    VehicleTypeRead,
)
from .equipment import (
    EquipmentChangeRead,
    EquipmentPurchase,
    EquipmentSale,
    OwnedEquipmentRead,
    PurchaseRead,
    StashMove,
)
from .fighter import (
    ActiveLoadoutUpdate,
    AddFighterRead,
    AdvancementRead,
    CharacteristicAdvancementCreate,
    EffectCreate,
    FighterCopy,
    FighterCreate,
    FighterDetail,
    FighterRead,
    FighterStatusUpdate,
    FighterUpdate,
    FighterXpUpdate,
    InjuryCreate,
    LoadoutCreate,
    LoadoutRead,
    SkillCreate,
    StatusChangeRead,
    XpChangeRead,
)
from .gang import (
    GangCopy,
    GangCreate,
    GangDetail,
    GangLogCreate,
    GangLogRead,
    GangRead,
    GangUpdate,
    GangUpdateRead,
    PositioningUpdate,
    RecalculationRead,
)
from .profile import ProfileCreate, ProfileRead
from .vehicle import (
    AssignmentRead,
    VehicleAssignment,
    VehicleChangeRead,
    VehicleCreate,
    VehicleDamageCreate,
    VehicleDetail,
    VehiclePurchaseRead,
    VehicleRead,
    VehicleRepair,
    VehicleSale,
    VehicleUpdate,
)

__all__ = [
    "ActiveLoadoutUpdate",
    "AddFighterRead",
    "AdvancementRead",
    "AssignmentRead",
    "BattleCreate",
    "BattleRead",
    "BattleUpdate",
    "CampaignCreate",
    "CampaignDetail",
    "CampaignGangCreate",
    "CampaignGangRead",
    "CampaignRead",
    "CampaignTerritoryRead",
    "CampaignUpdate",
    "CharacteristicAdvancementCreate",
    "EffectCreate",
    "EffectTypeRead",
    "EquipmentChangeRead",
    "EquipmentPurchase",
    "EquipmentRead",
    "EquipmentSale",
    "FighterCopy",
    "FighterCreate",
    "FighterDetail",
    "FighterRead",
    "FighterStatusUpdate",
    "FighterTypeRead",
    "FighterUpdate",
    "FighterXpUpdate",
    "GangCopy",
    "GangCreate",
    "GangDetail",
    "GangLogCreate",
    "GangLogRead",
    "GangRead",
    "GangTypeRead",
    "GangUpdate",
    "GangUpdateRead",
    "InjuryCreate",
    "LeaderboardEntry",
    "LoadoutCreate",
    "LoadoutRead",
    "MemberCreate",
    "MemberRead",
    "MemberRoleUpdate",
    "OwnedEquipmentRead",
    "PositioningUpdate",
    "ProfileCreate",
    "ProfileRead",
    "PurchaseRead",
    "RecalculationRead",
    "SkillCreate",
    "SkillRead",
    "StashMove",
    "StatusChangeRead",
    "TerritoryAssignment",
    "TerritoryCreate",
    "TerritoryRead",
    "TerritoryStatusUpdate",
    "VehicleAssignment",
    "VehicleChangeRead",
    "VehicleCreate",
    "VehicleDamageCreate",
    "VehicleDetail",
    "VehiclePurchaseRead",
    "VehicleRead",
    "VehicleRepair",
    "VehicleSale",
    "VehicleTypeRead",
    "VehicleUpdate",
    "XpChangeRead",
]
