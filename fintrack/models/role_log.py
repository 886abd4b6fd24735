"""

role_log.py

권한 변경 / 사용자 관리 행위 기록(Audit Log) 모델 정의 파일.

관리자에 의해 수행된 주요 관리 행위
(사용자 생성, 삭제, 권한 지정, 권한 토글)를
DB에 영구적으로 기록하기 위한 로그 테이블을 정의한다.

설계 원칙:
- 실제 데이터 변경과 같은 트랜잭션에서 기록
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계
- actor(행위자)와 target(대상 사용자)을 명확히 구분
- 사용자가 삭제되어도 로그는 남도록 actor_id / target_user_id 에 FK를 걸지 않음

"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fintrack.db.base import Base
from fintrack.models.user import _utcnow


#  관리자 행위 유형 Enum

class RoleAction(str, Enum):
    CREATE_USER = "CREATE_USER"
    DELETE_USER = "DELETE_USER"
    SET_ROLE = "SET_ROLE"
    TOGGLE_ROLE = "TOGGLE_ROLE"


"""
관리자 행위 로그 모델

- actor_id       : 행위를 수행한 관리자 ID
- target_user_id : 행위 대상 사용자 ID
- action         : 수행된 관리자 행위 유형
- before_role    : 변경 전 권한 (생성 시 없음)
- after_role     : 변경 후 권한 (삭제 시 없음)
- created_at     : 행위 발생 시각 (UTC)

"""

class RoleChangeLog(Base):
    __tablename__ = "role_change_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    actor_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    target_user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    action: Mapped[RoleAction] = mapped_column(SAEnum(RoleAction, name="role_action"), nullable=False)

    before_role: Mapped[str | None] = mapped_column(String(20), nullable=True)
    after_role: Mapped[str | None] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
