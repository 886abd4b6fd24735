import uuid
from pydantic import BaseModel, ConfigDict, EmailStr

from fintrack.models.user import Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

class MeResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: Role

    model_config = ConfigDict(from_attributes=True)
