"""
services/role_log.py

관리자 행위 로그 기록 서비스.

관리자가 수행한 사용자 생성/삭제, 권한 변경 행위를
RoleChangeLog 테이블에 기록한다.

설계 원칙:
- 로그 기록은 실제 변경과 같은 트랜잭션에 포함 (rollback 시 함께 취소)
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계

"""

import uuid

from sqlalchemy.orm import Session
from fintrack.models.role_log import RoleChangeLog, RoleAction


"""
관리자 행위 로그 기록 함수

- actor_id       : 행위를 수행한 관리자 ID
- action         : 수행된 관리자 행위 유형
- target_user_id : 행위 대상 사용자 ID
- before_role    : 변경 전 권한 (선택)
- after_role     : 변경 후 권한 (선택)

NOTE:
- db.commit()은 호출 측(서비스/라우터)에서 수행

"""
def write_role_log(
    db: Session,
    *,
    actor_id: uuid.UUID,
    action: RoleAction,
    target_user_id: uuid.UUID | None = None,
    before_role: str | None = None,
    after_role: str | None = None,
) -> RoleChangeLog:
    log = RoleChangeLog(
        actor_id=actor_id,
        action=action,
        target_user_id=target_user_id,
        before_role=before_role,
        after_role=after_role,
    )
    db.add(log)
    return log
