"""
auth.py

인증(Authentication) API 모음.

이메일 / 비밀번호로 로그인하여 JWT Access Token을 발급하고,
현재 로그인한 사용자의 정보를 조회한다.

설계 원칙:
- Access Token은 Authorization Header(Bearer)로 전달
- 토큰에는 사용자 ID만 담고, 권한은 요청마다 DB에서 조회
- 로그인 실패 사유(이메일 없음 / 비밀번호 불일치)는 구분하지 않음

관련 파일:
- fintrack.core.security    : 비밀번호 검증 / JWT 생성
- fintrack.core.deps        : 인증 의존성(get_current_user)

"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from fintrack.core.deps import get_db, get_current_user
from fintrack.core.security import verify_password, create_access_token
from fintrack.models.user import User
from fintrack.schemas.auth import LoginRequest, TokenResponse, MeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = db.scalar(select(User).where(User.email == data.email))

    if not user or not verify_password(data.password, user.password_hash):
        logger.info("login failed email=%s", data.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return TokenResponse(access_token=create_access_token(subject=str(user.id)))


# 로그인한 사용자 본인 정보 (role 포함)
@router.get("/me", response_model=MeResponse)
def me(response: Response, current_user: User = Depends(get_current_user)):
    response.headers["Cache-Control"] = "no-store"
    return current_user
