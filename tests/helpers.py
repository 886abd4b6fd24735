# tests/helpers.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from fintrack.core.security import get_password_hash, create_access_token
from fintrack.models.user import User, Role
from fintrack.models.movement import Movement, MovementType

DEFAULT_PASSWORD = "Passw0rd!23"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_user_in_db(
    db: Session,
    *,
    role: Role = Role.USER,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
    name: str = "Test User",
) -> User:
    user = User(
        email=email or f"{role.value.lower()}_{uuid.uuid4().hex[:8]}@test.com",
        password_hash=get_password_hash(password),
        name=name,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def headers_for(user: User) -> dict:
    # 로그인 API를 거치지 않고 바로 access token 발급
    return auth_header(create_access_token(subject=str(user.id)))


def create_movement_in_db(
    db: Session,
    *,
    owner: User,
    movement_type: MovementType = MovementType.INCOME,
    amount: str = "100.00",
    concept: str = "Test movement",
    date: datetime | None = None,
) -> Movement:
    movement = Movement(
        type=movement_type,
        amount=Decimal(amount),
        concept=concept,
        date=date or datetime(2025, 8, 17, 12, 0, tzinfo=timezone.utc),
        user_id=owner.id,
    )
    db.add(movement)
    db.commit()
    db.refresh(movement)
    return movement


def role_of(db: Session, user_id) -> Role | None:
    # identity map 캐시를 거치지 않고 DB 값을 직접 조회
    if isinstance(user_id, str):
        user_id = uuid.UUID(user_id)
    return db.scalar(select(User.role).where(User.id == user_id))
