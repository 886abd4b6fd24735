"""
movements.py

거래 내역(Movement) API 모음.

주요 기능:
- 거래 내역 목록 조회 (type / from / to 필터)
- 거래 내역 단건 조회
- 거래 내역 생성 / 수정 / 삭제 (ADMIN 전용)

설계 원칙:
- 조회는 로그인 사용자 누구나, 단 USER는 본인 거래만
- 생성 / 수정 / 삭제는 ADMIN만 가능
- 비즈니스 로직은 service 계층(fintrack.services.movements)에 위임
- 날짜 필터 형식 오류는 400, 예상하지 못한 DB 오류는 500

관련 파일:
- fintrack.services.movements : 조회 범위 / 필터 / CRUD
- fintrack.schemas.movement   : 요청/응답 스키마

"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack.core.deps import get_db, get_current_user, get_current_admin
from fintrack.core.errors import AppError, database_error
from fintrack.models.movement import MovementType
from fintrack.models.user import User
from fintrack.schemas.movement import MovementCreateRequest, MovementUpdateRequest, MovementResponse
from fintrack.services import movements as movement_service

router = APIRouter(prefix="/movements", tags=["movements"])

DAY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


@router.get("", response_model=list[MovementResponse])
def list_movements(
    type: MovementType | None = Query(default=None),
    date_from: str | None = Query(default=None, alias="from", pattern=DAY_PATTERN, description="예: 2025-08-01"),
    date_to: str | None = Query(default=None, alias="to", pattern=DAY_PATTERN, description="예: 2025-08-31"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return movement_service.list_movements(
            db,
            viewer=current_user,
            movement_type=type,
            date_from=date_from,
            date_to=date_to,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise database_error(e)


@router.post("", response_model=MovementResponse, status_code=status.HTTP_201_CREATED)
def create_movement(
    body: MovementCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    try:
        movement = movement_service.create_movement(
            db,
            owner_id=admin.id,
            movement_type=body.type,
            concept=body.concept,
            amount=body.amount,
            date=body.date,
        )
        db.commit()
        db.refresh(movement)
        return movement
    except SQLAlchemyError as e:
        db.rollback()
        raise database_error(e)
    except Exception:
        db.rollback()
        raise


@router.get("/{movement_id}", response_model=MovementResponse)
def get_movement(
    movement_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return movement_service.get_movement_for(db, movement_id, current_user)
    except AppError as e:
        raise e.to_http()
    except SQLAlchemyError as e:
        raise database_error(e)


@router.put("/{movement_id}", response_model=MovementResponse)
def update_movement(
    movement_id: uuid.UUID,
    body: MovementUpdateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    try:
        movement = movement_service.update_movement(
            db,
            movement_id,
            movement_type=body.type,
            concept=body.concept,
            amount=body.amount,
            date=body.date,
        )
        db.commit()
        db.refresh(movement)
        return movement
    except AppError as e:
        db.rollback()
        raise e.to_http()
    except SQLAlchemyError as e:
        db.rollback()
        raise database_error(e)
    except Exception:
        db.rollback()
        raise


@router.delete("/{movement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_movement(
    movement_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    try:
        movement_service.delete_movement(db, movement_id)
        db.commit()
    except AppError as e:
        db.rollback()
        raise e.to_http()
    except SQLAlchemyError as e:
        db.rollback()
        raise database_error(e)
    except Exception:
        db.rollback()
        raise
    return Response(status_code=status.HTTP_204_NO_CONTENT)
