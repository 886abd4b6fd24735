"""
services/movements.py

거래 내역(Movement) 도메인의 비즈니스 로직 모음.

라우터는 이 파일의 함수를 호출하여
조회 범위(RBAC) 판단, 날짜 필터 변환, 생성/수정/삭제를 위임한다.

설계 원칙:
- ADMIN은 모든 거래 내역, USER는 본인 거래 내역만 조회
- 날짜 필터(YYYY-MM-DD)는 UTC 하루 경계로 변환 (from 00:00:00 ~ to 23:59:59.999999)
- 생성/수정은 flush까지만 수행하고 커밋은 라우터에서 수행

관련 파일:
- fintrack.models.movement   : Movement / MovementType 모델
- fintrack.routers.movements : 거래 내역 API

"""

import uuid
from datetime import datetime, time, timezone
from decimal import Decimal

from sqlalchemy import select, desc
from sqlalchemy.orm import Session

from fintrack.core.errors import AppError
from fintrack.models.movement import Movement, MovementType
from fintrack.models.user import User, Role


class MovementNotFoundError(AppError):
    status_code = 404
    default_detail = "Movement not found"


class MovementForbiddenError(AppError):
    status_code = 403
    default_detail = "Forbidden"


"""
날짜 필터 문자열을 UTC 경계 시각으로 변환

- 'YYYY-MM-DD' 형식만 허용
- 존재하지 않는 날짜(2025-02-30 등)면 ValueError 발생

"""

def day_start(value: str) -> datetime:
    day = datetime.strptime(value, "%Y-%m-%d").date()
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def day_end(value: str) -> datetime:
    day = datetime.strptime(value, "%Y-%m-%d").date()
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def to_utc(value: datetime) -> datetime:
    # naive 값은 UTC로 간주
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


"""
거래 내역 목록 조회

- viewer가 ADMIN이 아니면 본인(user_id) 거래만
- type / from / to 필터는 선택
- 날짜 내림차순 정렬

"""

def list_movements(
    db: Session,
    *,
    viewer: User,
    movement_type: MovementType | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
) -> list[Movement]:
    stmt = select(Movement)

    if movement_type:
        stmt = stmt.where(Movement.type == movement_type)
    if date_from:
        stmt = stmt.where(Movement.date >= day_start(date_from))
    if date_to:
        stmt = stmt.where(Movement.date <= day_end(date_to))

    if viewer.role != Role.ADMIN:
        stmt = stmt.where(Movement.user_id == viewer.id)

    return list(db.scalars(stmt.order_by(desc(Movement.date))))


def create_movement(
    db: Session,
    *,
    owner_id: uuid.UUID,
    movement_type: MovementType,
    concept: str,
    amount: Decimal,
    date: datetime,
) -> Movement:
    movement = Movement(
        type=movement_type,
        concept=concept,
        amount=amount,
        date=to_utc(date),
        user_id=owner_id,
    )
    db.add(movement)
    db.flush()
    return movement


def get_movement(db: Session, movement_id: uuid.UUID) -> Movement:
    movement = db.get(Movement, movement_id)
    if not movement:
        raise MovementNotFoundError()
    return movement


# ADMIN은 전체, USER는 본인 소유만 조회 가능
def get_movement_for(db: Session, movement_id: uuid.UUID, viewer: User) -> Movement:
    movement = get_movement(db, movement_id)
    if viewer.role != Role.ADMIN and movement.user_id != viewer.id:
        raise MovementForbiddenError()
    return movement


"""
거래 내역 부분 수정

- None인 필드는 기존 값 유지

"""

def update_movement(
    db: Session,
    movement_id: uuid.UUID,
    *,
    movement_type: MovementType | None = None,
    concept: str | None = None,
    amount: Decimal | None = None,
    date: datetime | None = None,
) -> Movement:
    movement = get_movement(db, movement_id)

    if movement_type is not None:
        movement.type = movement_type
    if concept is not None:
        movement.concept = concept
    if amount is not None:
        movement.amount = amount
    if date is not None:
        movement.date = to_utc(date)

    db.flush()
    return movement


def delete_movement(db: Session, movement_id: uuid.UUID) -> None:
    movement = get_movement(db, movement_id)
    db.delete(movement)
    db.flush()
