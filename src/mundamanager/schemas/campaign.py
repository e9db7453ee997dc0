from pydantic import BaseModel, ConfigDict, Field

from mundamanager.domain.enums import BattleRole, CampaignRole, CampaignStatus


class CampaignCreate(BaseModel):
    campaign_name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class CampaignUpdate(BaseModel):
    campaign_name: str | None = Field(None, max_length=100)
    description: str | None = None
    status: CampaignStatus | None = None
    note: str | None = None


class CampaignRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_name: str
    description: str | None = None
    status: str
    note: str | None = None


class MemberCreate(BaseModel):
    user_id: str = Field(..., description="Profile to add")
    role: CampaignRole = CampaignRole.MEMBER


class MemberRoleUpdate(BaseModel):
    role: CampaignRole


class MemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: int
    user_id: str
    role: str


class CampaignGangCreate(BaseModel):
    gang_id: int
    allegiance: str | None = Field(None, max_length=100)


class CampaignGangRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: int
    gang_id: int
    user_id: str
    status: str
    allegiance: str | None = None


class TerritoryCreate(BaseModel):
    territory_id: int | None = Field(None, description="Catalog territory")
    territory_name: str | None = Field(None, max_length=100, description="Custom territory name")


class TerritoryAssignment(BaseModel):
    gang_id: int


class TerritoryStatusUpdate(BaseModel):
    ruined: bool | None = None
    default_gang_territory: bool | None = None


class CampaignTerritoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: int
    territory_id: int | None = None
    territory_name: str
    gang_id: int | None = None
    ruined: bool
    default_gang_territory: bool


class BattleParticipant(BaseModel):
    role: BattleRole = BattleRole.NONE
    gang_id: int


class BattleCreate(BaseModel):
    scenario: str = Field(..., min_length=1, max_length=100)
    attacker_id: int | None = None
    defender_id: int | None = None
    winner_id: int | None = Field(None, description="Winning gang; None records a draw")
    note: str | None = None
    participants: list[BattleParticipant] = Field(default_factory=list)
    claimed_territories: list[int] = Field(
        default_factory=list, description="Campaign territory ids the winner claims"
    )


class BattleUpdate(BaseModel):
    scenario: str | None = Field(None, max_length=100)
    winner_id: int | None = None
    note: str | None = None


class BattleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: int
    scenario: str
    attacker_id: int | None = None
    defender_id: int | None = None
    winner_id: int | None = None
    note: str | None = None
    participants: list[BattleParticipant] = Field(default_factory=list)
    claimed_territories: list[int] = Field(default_factory=list)


class CampaignDetail(CampaignRead):
    members: list[MemberRead] = Field(default_factory=list)
    gangs: list[CampaignGangRead] = Field(default_factory=list)
    territories: list[CampaignTerritoryRead] = Field(default_factory=list)
    battles: list[BattleRead] = Field(default_factory=list)


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gang_id: int
    gang_name: str
    user_id: str
    rating: int
    territories: int
    battles_won: int
