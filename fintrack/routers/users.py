"""
users.py

관리자(ADMIN) 전용 사용자 관리 API 모음.

주요 기능:
- 사용자 목록 / 상세 조회
- 사용자 생성 / 부분 수정 / 삭제
- 권한 명시적 지정 (PUT /users/{id}/role) 및 토글 (POST /users/{id}/role)
- 권한 변경 감사 로그 조회

설계 원칙:
- 모든 엔드포인트는 ADMIN 권한 필요 (셀프 토글 없음)
- 권한이 바뀌는 모든 경로는 services.roles의 Role Guard를 거침
- 서비스 예외(AppError)는 상태 코드 그대로 HTTPException으로 변환
- 예상하지 못한 DB 오류는 rollback 후 500

관련 파일:
- fintrack.services.roles    : Role Guard (마지막 ADMIN 보호)
- fintrack.services.users    : 사용자 생성 / 수정 / 삭제
- fintrack.core.deps         : 관리자 권한 인증(get_current_admin)

"""

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack.core.deps import get_db, get_current_admin
from fintrack.core.errors import AppError, database_error
from fintrack.models.user import User
from fintrack.models.role_log import RoleChangeLog
from fintrack.schemas.user import (
    RoleUpdate,
    RoleChangeResponse,
    RoleLogResponse,
    UserCreateRequest,
    UserUpdateRequest,
    UserResponse,
)
from fintrack.services import users as user_service
from fintrack.services.roles import change_role

router = APIRouter(prefix="/users", tags=["users"])


# 전체 사용자 목록 (최근 생성 순)
@router.get("", response_model=list[UserResponse])
def list_users(
    response: Response,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    response.headers["Cache-Control"] = "no-store"
    try:
        return user_service.list_users(db)
    except SQLAlchemyError as e:
        raise database_error(e)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    try:
        return user_service.create_user(
            db,
            name=body.name,
            email=body.email,
            password=body.password,
            phone=body.phone,
            role=body.role,
            actor=admin,
        )
    except AppError as e:
        raise e.to_http()
    except SQLAlchemyError as e:
        raise database_error(e)


# 권한 변경 감사 로그 조회 (/users/{user_id} 보다 먼저 등록)
@router.get("/logs", response_model=list[RoleLogResponse])
def list_role_logs(
    limit: int = 50,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    limit = max(1, min(limit, 200))
    try:
        return db.scalars(
            select(RoleChangeLog).order_by(desc(RoleChangeLog.created_at)).limit(limit)
        ).all()
    except SQLAlchemyError as e:
        raise database_error(e)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: uuid.UUID,
    response: Response,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    response.headers["Cache-Control"] = "no-store"
    try:
        return user_service.get_user(db, user_id)
    except AppError as e:
        raise e.to_http()
    except SQLAlchemyError as e:
        raise database_error(e)


# 이름 / 전화번호 / 권한 부분 수정 (권한은 Role Guard 경유, phone: null 이면 삭제)
@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: uuid.UUID,
    body: UserUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    try:
        return user_service.update_user(
            db,
            user_id=user_id,
            actor=admin,
            name=body.name,
            phone=body.phone if "phone" in body.model_fields_set else user_service.UNSET,
            role=body.role,
        )
    except AppError as e:
        raise e.to_http()
    except SQLAlchemyError as e:
        raise database_error(e)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    try:
        user_service.delete_user(db, user_id=user_id, actor=admin)
    except AppError as e:
        raise e.to_http()
    except SQLAlchemyError as e:
        raise database_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# 권한 명시적 지정
@router.put("/{user_id}/role", response_model=RoleChangeResponse)
def set_role(
    user_id: uuid.UUID,
    data: RoleUpdate,
    response: Response,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    response.headers["Cache-Control"] = "no-store"
    try:
        return change_role(db, target_user_id=user_id, requested=data.role, actor=admin)
    except AppError as e:
        raise e.to_http()
    except SQLAlchemyError as e:
        raise database_error(e)


# 권한 토글 (ADMIN ↔ USER)
@router.post("/{user_id}/role", response_model=RoleChangeResponse)
def toggle_role(
    user_id: uuid.UUID,
    response: Response,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    response.headers["Cache-Control"] = "no-store"
    try:
        return change_role(db, target_user_id=user_id, requested=None, actor=admin)
    except AppError as e:
        raise e.to_http()
    except SQLAlchemyError as e:
        raise database_error(e)
