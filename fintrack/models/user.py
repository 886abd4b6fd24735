"""
user.py

사용자(User) 및 권한(Role) 모델 정의 파일.

모든 인증, 권한, 거래 내역(Movement) 소유권의 기준이 되는 핵심 모델이다.

"""

import uuid
import datetime
from enum import Enum

from sqlalchemy import String, DateTime, Uuid, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from fintrack.db.base import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


"""
사용자 권한(Role) 정의

- ADMIN : 사용자 / 거래 내역 / 리포트 전체 읽기·쓰기 권한
- USER  : 본인 거래 내역만 조회 가능

시스템에는 항상 최소 한 명의 ADMIN이 존재해야 한다.

"""

class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


"""
사용자(User) 모델

- email 은 고유 식별자
- role을 통해 접근 권한 제어 (요청마다 DB에서 다시 읽음)

"""

class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="user_role"), nullable=False, default=Role.USER, index=True
    )

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
