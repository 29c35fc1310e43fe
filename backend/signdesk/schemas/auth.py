from pydantic import BaseModel, ConfigDict, Field


class DemoUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    is_admin: bool = Field(default=False, alias="isAdmin")


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str
    user: DemoUser
