"""
services/roles.py

권한(Role) 변경 가드(Role Guard) 비즈니스 로직.

사용자 권한 변경(지정 / 토글)이 가능한지 판단하고,
가능하면 하나의 트랜잭션 안에서 적용한다.

핵심 불변식:
- 시스템의 ADMIN 수는 권한 변경 / 사용자 삭제로 인해 0명이 될 수 없다.

동시성 처리:
- ADMIN 행 전체에 행 잠금(SELECT ... FOR UPDATE)을 먼저 건다.
  (PostgreSQL: 두 번째 요청은 첫 트랜잭션 커밋까지 대기 후 최신 값을 다시 읽음)
- 강등은 "대상이 아직 ADMIN이고 현재 ADMIN 수 > 1" 조건을 WHERE에 포함한
  단일 UPDATE 문으로 수행한다.
  (SQLite: FOR UPDATE는 무시되지만 쓰기 문장은 DB 단위로 직렬화됨)
- 영향받은 행이 0이면 마지막 ADMIN으로 판단하고 변경 없이 거부한다.

설계 원칙:
- HTTP / FastAPI 의존성 없음 (라우터가 예외를 HTTP 상태 코드로 변환)
- 검증 실패 시 DB 변경 0건, 성공 시 사용자 행 변경 정확히 1건

관련 파일:
- fintrack.models.user       : User / Role 모델
- fintrack.services.users    : 사용자 수정 / 삭제 시 같은 가드 사용
- fintrack.routers.users     : PUT / POST /users/{id}/role

"""

import logging
import uuid

from sqlalchemy import select, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from fintrack.core.errors import AppError
from fintrack.models.user import User, Role, _utcnow
from fintrack.models.role_log import RoleAction
from fintrack.services.role_log import write_role_log

logger = logging.getLogger(__name__)


class RoleGuardError(AppError):
    """권한 관련 도메인 예외의 공통 부모."""


class InvalidRoleError(RoleGuardError):
    status_code = 400
    default_detail = "Invalid role"


class ForbiddenError(RoleGuardError):
    status_code = 403
    default_detail = "Requires role ADMIN"


class UserNotFoundError(RoleGuardError):
    status_code = 404
    default_detail = "User not found"


class LastAdminError(RoleGuardError):
    status_code = 409
    default_detail = "Cannot demote the last ADMIN"


def parse_role(value: Role | str) -> Role:
    # ADMIN / USER 두 값만 허용하는 닫힌 enum
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        raise InvalidRoleError(f"Invalid role: {value!r}")


def opposite_role(role: Role) -> Role:
    return Role.USER if role == Role.ADMIN else Role.ADMIN


def count_admins(db: Session) -> int:
    return db.scalar(
        select(func.count()).select_from(User).where(User.role == Role.ADMIN)
    ) or 0


def ensure_admin(actor: User) -> None:
    if actor.role != Role.ADMIN:
        raise ForbiddenError()


def lock_admin_set(db: Session) -> list[uuid.UUID]:
    """현재 ADMIN 행 전체에 행 잠금을 건다. (FOR UPDATE 미지원 DB에서는 일반 SELECT)"""
    return list(db.scalars(select(User.id).where(User.role == Role.ADMIN).with_for_update()))


def admin_count_subquery():
    # UPDATE/DELETE 대상 테이블과 상관(correlate)되지 않도록 별칭 사용
    other = aliased(User)
    return (
        select(func.count())
        .select_from(other)
        .where(other.role == Role.ADMIN)
        .scalar_subquery()
    )


"""
권한 전이 적용 (커밋 없음)

- 대상 사용자의 현재 권한 조회 (없으면 UserNotFoundError)
- next_role 계산: requested가 None이면 토글
- ADMIN → USER 강등은 조건부 UPDATE로 마지막 ADMIN 보호
- 감사 로그까지 같은 트랜잭션에 추가

NOTE:
- db.commit() / rollback()은 호출 측에서 수행

"""

def apply_role_transition(
    db: Session,
    *,
    target_user_id: uuid.UUID,
    requested: Role | None,
    actor: User,
) -> tuple[Role, Role]:
    lock_admin_set(db)

    current = db.scalar(select(User.role).where(User.id == target_user_id))
    if current is None:
        raise UserNotFoundError()

    next_role = requested if requested is not None else opposite_role(current)

    if current == Role.ADMIN and next_role == Role.USER:
        stmt = (
            update(User)
            .where(
                User.id == target_user_id,
                User.role == Role.ADMIN,
                admin_count_subquery() > 1,
            )
            .values(role=Role.USER, updated_at=_utcnow())
            .execution_options(synchronize_session=False)
        )
    else:
        stmt = (
            update(User)
            .where(User.id == target_user_id)
            .values(role=next_role, updated_at=_utcnow())
            .execution_options(synchronize_session=False)
        )

    result = db.execute(stmt)
    if result.rowcount != 1:
        if current == Role.ADMIN and next_role == Role.USER:
            raise LastAdminError()
        raise UserNotFoundError()

    write_role_log(
        db,
        actor_id=actor.id,
        action=RoleAction.TOGGLE_ROLE if requested is None else RoleAction.SET_ROLE,
        target_user_id=target_user_id,
        before_role=current.value,
        after_role=next_role.value,
    )
    return current, next_role


"""
권한 변경 (Role Guard 진입점)

- requested: Role 또는 문자열이면 명시적 지정, None이면 토글
- actor: 요청한 사용자 (요청 시점에 DB에서 다시 읽은 값)
- 성공 시 커밋 후 최신 User 반환
- 실패 시 rollback 후 예외 전파 (RoleGuardError / SQLAlchemyError)

"""

def change_role(
    db: Session,
    *,
    target_user_id: uuid.UUID,
    requested: Role | str | None = None,
    actor: User,
) -> User:
    ensure_admin(actor)
    next_requested = parse_role(requested) if requested is not None else None
    actor_id = actor.id

    try:
        before, after = apply_role_transition(
            db, target_user_id=target_user_id, requested=next_requested, actor=actor
        )
        db.commit()
    except RoleGuardError as e:
        db.rollback()
        logger.warning("role change rejected target=%s actor=%s: %s", target_user_id, actor_id, e.detail)
        raise
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("role changed target=%s actor=%s %s -> %s", target_user_id, actor_id, before.value, after.value)
    return db.get(User, target_user_id)
