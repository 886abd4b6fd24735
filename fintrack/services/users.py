"""
services/users.py

관리자용 사용자 관리 비즈니스 로직 모음.

사용자 생성 / 수정 / 삭제 시에도 권한 변경과 동일한
"마지막 ADMIN 보호" 가드를 적용한다.

설계 원칙:
- 권한 변경은 반드시 services.roles의 apply_role_transition을 거침
- 삭제 시 연쇄 삭제 없음: 거래 내역이 남아 있는 사용자는 삭제 불가
- 트랜잭션 커밋/롤백은 이 계층에서 수행

관련 파일:
- fintrack.services.roles    : Role Guard
- fintrack.routers.users     : 사용자 관리 API

"""

import logging
import uuid

from sqlalchemy import select, func, delete, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack.core.errors import AppError
from fintrack.core.security import get_password_hash
from fintrack.models.user import User, Role
from fintrack.models.movement import Movement
from fintrack.models.role_log import RoleAction
from fintrack.services.role_log import write_role_log
from fintrack.services.roles import (
    UserNotFoundError,
    LastAdminError,
    admin_count_subquery,
    apply_role_transition,
    ensure_admin,
    lock_admin_set,
    parse_role,
)

logger = logging.getLogger(__name__)

# update_user에서 "필드 미전송"과 "null 전송"을 구분하기 위한 표식
UNSET = object()


class EmailTakenError(AppError):
    status_code = 409
    default_detail = "Email already registered"


class UserHasMovementsError(AppError):
    status_code = 409
    default_detail = "User still owns movements"


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(desc(User.created_at))))


def get_user(db: Session, user_id: uuid.UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise UserNotFoundError()
    return user


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    phone: str | None = None,
    role: Role | str = Role.USER,
    actor: User,
) -> User:
    ensure_admin(actor)
    role = parse_role(role)

    if db.scalar(select(User.id).where(User.email == email)):
        raise EmailTakenError()

    user = User(
        name=name,
        email=email,
        phone=phone,
        role=role,
        password_hash=get_password_hash(password),
    )
    try:
        db.add(user)
        db.flush()
        write_role_log(
            db,
            actor_id=actor.id,
            action=RoleAction.CREATE_USER,
            target_user_id=user.id,
            after_role=role.value,
        )
        db.commit()
    except IntegrityError:
        # 동시 가입으로 unique 제약에 걸린 경우
        db.rollback()
        raise EmailTakenError()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("user created id=%s role=%s", user.id, role.value)
    return user


"""
사용자 정보 부분 수정

- name: None이면 기존 값 유지
- phone: UNSET이면 기존 값 유지, None이면 삭제
- role: 지정되면 Role Guard를 거쳐 변경 (마지막 ADMIN 강등 시 LastAdminError)
- 모든 변경은 하나의 트랜잭션으로 커밋 (가드 거부 시 아무것도 반영되지 않음)

"""

def update_user(
    db: Session,
    *,
    user_id: uuid.UUID,
    actor: User,
    name: str | None = None,
    phone: str | None | object = UNSET,
    role: Role | str | None = None,
) -> User:
    ensure_admin(actor)
    requested = parse_role(role) if role is not None else None

    try:
        if requested is not None:
            apply_role_transition(db, target_user_id=user_id, requested=requested, actor=actor)

        user = db.get(User, user_id)
        if not user:
            raise UserNotFoundError()
        if name is not None:
            user.name = name
        if phone is not UNSET:
            user.phone = phone

        db.commit()
    except AppError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(user)
    return user


"""
사용자 삭제

- 거래 내역이 남아 있으면 삭제 불가 (연쇄 삭제 없음)
- ADMIN 삭제는 "현재 ADMIN 수 > 1" 조건부 DELETE로 마지막 ADMIN 보호

"""

def delete_user(db: Session, *, user_id: uuid.UUID, actor: User) -> None:
    ensure_admin(actor)
    actor_id = actor.id

    try:
        lock_admin_set(db)

        current = db.scalar(select(User.role).where(User.id == user_id))
        if current is None:
            raise UserNotFoundError()

        owned = db.scalar(
            select(func.count()).select_from(Movement).where(Movement.user_id == user_id)
        ) or 0
        if owned:
            raise UserHasMovementsError()

        stmt = delete(User).where(User.id == user_id)
        if current == Role.ADMIN:
            stmt = stmt.where(User.role == Role.ADMIN, admin_count_subquery() > 1)

        result = db.execute(stmt.execution_options(synchronize_session=False))
        if result.rowcount != 1:
            if current == Role.ADMIN:
                raise LastAdminError("Cannot delete the last ADMIN")
            raise UserNotFoundError()

        write_role_log(
            db,
            actor_id=actor_id,
            action=RoleAction.DELETE_USER,
            target_user_id=user_id,
            before_role=current.value,
        )
        db.commit()
    except AppError as e:
        db.rollback()
        logger.warning("user delete rejected target=%s actor=%s: %s", user_id, actor_id, e.detail)
        raise
    except IntegrityError:
        db.rollback()
        raise UserHasMovementsError()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("user deleted target=%s actor=%s", user_id, actor_id)
