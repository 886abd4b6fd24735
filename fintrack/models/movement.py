import uuid
import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Uuid, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fintrack.models.user import User, _utcnow
from fintrack.db.base import Base


class MovementType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Movement(Base):
    """수입/지출 거래 내역 레코드.

    - user_id: 거래를 등록한 소유자. 사용자 삭제 시 연쇄 삭제하지 않음
    - amount: 항상 양수, 소수점 2자리
    """

    __tablename__ = "movements"
    __table_args__ = (
        Index("ix_movements_user_id", "user_id"),
        Index("ix_movements_date", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    type: Mapped[MovementType] = mapped_column(SAEnum(MovementType, name="movement_type"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    concept: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    # 응답에 소유자 이름/이메일을 포함하기 위해 항상 함께 로드
    user: Mapped[User] = relationship(lazy="joined")

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
