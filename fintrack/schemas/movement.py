import re
import uuid
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fintrack.models.movement import MovementType


_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# "12,50" / "12.50" / 12.5 → Decimal("12.50")
def _parse_amount(value):
    if isinstance(value, str):
        try:
            return Decimal(value.strip().replace(",", "."))
        except InvalidOperation:
            raise ValueError("amount must be a number")
    return value


# 'YYYY-MM-DD'만 들어오면 UTC 자정으로 해석
def _parse_date(value):
    if isinstance(value, str) and _DAY_RE.match(value):
        return f"{value}T00:00:00+00:00"
    return value


class MovementCreateRequest(BaseModel):
    type: MovementType
    concept: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, examples=["12,50"])
    date: datetime = Field(..., examples=["2025-08-17"])

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, v):
        return _parse_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v):
        return _parse_date(v)


class MovementUpdateRequest(BaseModel):
    type: Optional[MovementType] = None
    concept: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    date: Optional[datetime] = None

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, v):
        return _parse_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v):
        return _parse_date(v)


class MovementOwner(BaseModel):
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class MovementResponse(BaseModel):
    id: uuid.UUID
    type: MovementType
    concept: str
    amount: float
    date: datetime
    user_id: uuid.UUID
    user: Optional[MovementOwner] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
