import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from fintrack.models.user import Role
from fintrack.models.role_log import RoleAction


# 🔹 명시적 role 지정 요청용 (ADMIN / USER 외 값은 400)
class RoleUpdate(BaseModel):
    role: Role


# 🔹 role 변경 결과 응답
class RoleChangeResponse(BaseModel):
    id: uuid.UUID
    role: Role

    model_config = ConfigDict(from_attributes=True)


class UserCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8, max_length=64)
    phone: str | None = Field(default=None, max_length=30)
    role: Role = Role.USER


class UserUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    role: Role | None = None


# 🔹 유저 응답용 (필요한 필드만)
class UserResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str | None
    role: Role
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoleLogResponse(BaseModel):
    id: uuid.UUID
    actor_id: uuid.UUID
    target_user_id: uuid.UUID | None
    action: RoleAction
    before_role: str | None
    after_role: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
