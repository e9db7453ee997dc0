from pydantic import BaseModel, ConfigDict, Field


class ProfileCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=64, description="User id from the auth provider")
    username: str = Field(..., min_length=1, max_length=100)


class ProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    user_role: str
