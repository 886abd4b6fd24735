"""

Role Guard 서비스 단위 테스트.
- 토글 / 명시적 지정, 마지막 ADMIN 보호(409), 잘못된 role(400),
  권한 없음(403), 대상 없음(404), 감사 로그 기록,
  무작위 연산 시퀀스 및 동시 강등 요청에서도 ADMIN이 0명이 되지 않음을 검증한다.

"""

import random
import threading
import uuid

import pytest
from sqlalchemy import select, func

from fintrack.models.user import User, Role
from fintrack.models.role_log import RoleChangeLog, RoleAction
from fintrack.services.roles import (
    ForbiddenError,
    InvalidRoleError,
    LastAdminError,
    UserNotFoundError,
    change_role,
    count_admins,
    opposite_role,
    parse_role,
)

from tests.helpers import create_user_in_db, role_of


def _log_count(db) -> int:
    return db.scalar(select(func.count()).select_from(RoleChangeLog))


def test_opposite_role_and_parse_role():
    assert opposite_role(Role.ADMIN) == Role.USER
    assert opposite_role(Role.USER) == Role.ADMIN
    assert parse_role("ADMIN") == Role.ADMIN
    assert parse_role(Role.USER) == Role.USER
    with pytest.raises(InvalidRoleError):
        parse_role("SUPER")
    with pytest.raises(InvalidRoleError):
        parse_role("admin")


def test_toggle_twice_restores_original_role(db):
    admin = create_user_in_db(db, role=Role.ADMIN)
    member = create_user_in_db(db)

    updated = change_role(db, target_user_id=member.id, actor=admin)
    assert updated.role == Role.ADMIN

    updated = change_role(db, target_user_id=member.id, actor=admin)
    assert updated.role == Role.USER
    assert role_of(db, member.id) == Role.USER


def test_single_admin_cannot_be_demoted_explicitly_or_by_toggle(db):
    admin = create_user_in_db(db, role=Role.ADMIN)

    with pytest.raises(LastAdminError):
        change_role(db, target_user_id=admin.id, requested=Role.USER, actor=admin)
    with pytest.raises(LastAdminError) as exc:
        change_role(db, target_user_id=admin.id, actor=admin)

    assert exc.value.status_code == 409
    assert role_of(db, admin.id) == Role.ADMIN
    assert count_admins(db) == 1
    assert _log_count(db) == 0


def test_demoting_one_of_two_admins_decrements_count_by_one(db):
    a1 = create_user_in_db(db, role=Role.ADMIN)
    a2 = create_user_in_db(db, role=Role.ADMIN)
    assert count_admins(db) == 2

    updated = change_role(db, target_user_id=a2.id, requested=Role.USER, actor=a1)

    assert updated.role == Role.USER
    assert count_admins(db) == 1

    # 이제 a1이 마지막 ADMIN
    with pytest.raises(LastAdminError):
        change_role(db, target_user_id=a1.id, requested="USER", actor=a1)


def test_admin_can_demote_self_when_another_admin_exists(db):
    a1 = create_user_in_db(db, role=Role.ADMIN)
    create_user_in_db(db, role=Role.ADMIN)

    updated = change_role(db, target_user_id=a1.id, actor=a1)

    assert updated.role == Role.USER
    assert count_admins(db) == 1


def test_invalid_role_is_rejected_without_mutation(db):
    admin = create_user_in_db(db, role=Role.ADMIN)
    member = create_user_in_db(db)

    with pytest.raises(InvalidRoleError) as exc:
        change_role(db, target_user_id=member.id, requested="SUPERADMIN", actor=admin)

    assert exc.value.status_code == 400
    assert role_of(db, member.id) == Role.USER
    assert _log_count(db) == 0


def test_non_admin_actor_is_forbidden(db):
    create_user_in_db(db, role=Role.ADMIN)
    member = create_user_in_db(db)

    with pytest.raises(ForbiddenError):
        change_role(db, target_user_id=member.id, actor=member)

    assert role_of(db, member.id) == Role.USER


def test_missing_target_is_not_found(db):
    admin = create_user_in_db(db, role=Role.ADMIN)

    with pytest.raises(UserNotFoundError):
        change_role(db, target_user_id=uuid.uuid4(), requested=Role.ADMIN, actor=admin)


def test_successful_change_writes_one_audit_log(db):
    admin = create_user_in_db(db, role=Role.ADMIN)
    member = create_user_in_db(db)

    change_role(db, target_user_id=member.id, requested=Role.ADMIN, actor=admin)
    change_role(db, target_user_id=member.id, actor=admin)

    logs = db.scalars(select(RoleChangeLog).order_by(RoleChangeLog.created_at)).all()
    assert [log.action for log in logs] == [RoleAction.SET_ROLE, RoleAction.TOGGLE_ROLE]
    assert [(log.before_role, log.after_role) for log in logs] == [("USER", "ADMIN"), ("ADMIN", "USER")]
    assert all(log.actor_id == admin.id and log.target_user_id == member.id for log in logs)


def test_random_sequences_never_leave_zero_admins(db):
    rng = random.Random(486)
    users = [create_user_in_db(db, role=Role.ADMIN)] + [create_user_in_db(db) for _ in range(3)]
    ids = [u.id for u in users]

    for _ in range(60):
        actor = db.scalars(select(User).where(User.role == Role.ADMIN)).first()
        target = rng.choice(ids)
        requested = rng.choice([None, Role.ADMIN, Role.USER])
        before = role_of(db, target)
        try:
            change_role(db, target_user_id=target, requested=requested, actor=actor)
        except LastAdminError:
            # 거부되면 아무것도 바뀌지 않음
            assert role_of(db, target) == before == Role.ADMIN
        assert count_admins(db) >= 1


def test_concurrent_demotions_of_last_two_admins(session_factory):
    with session_factory() as setup:
        a1 = create_user_in_db(setup, role=Role.ADMIN)
        a2 = create_user_in_db(setup, role=Role.ADMIN)
        a1_id, a2_id = a1.id, a2.id

    barrier = threading.Barrier(2)
    outcomes = []
    errors = []

    # 서로가 서로를 강등
    def demote(target_id, actor_id):
        db = session_factory()
        try:
            actor = db.get(User, actor_id)
            barrier.wait()
            change_role(db, target_user_id=target_id, requested=Role.USER, actor=actor)
            outcomes.append("ok")
        except LastAdminError:
            outcomes.append("conflict")
        except Exception as e:  # 스레드 안 예외는 메인에서 확인
            errors.append(e)
        finally:
            db.close()

    threads = [
        threading.Thread(target=demote, args=(a1_id, a2_id)),
        threading.Thread(target=demote, args=(a2_id, a1_id)),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert errors == []
    assert sorted(outcomes) == ["conflict", "ok"]

    with session_factory() as check:
        assert count_admins(check) == 1
