"""
main.py

FastAPI 애플리케이션 진입점(Entry Point).

주요 역할:
- FastAPI 앱 인스턴스 생성
- 로깅 / CORS 미들웨어 설정
- 요청 검증 실패(422)를 400으로 통일
- 각 도메인별 라우터(auth, users, movements, reports) 등록
- 헬스 체크 및 DB 연결 상태 확인용 엔드포인트 제공

설계 원칙:
- 비즈니스 로직은 포함하지 않고 설정/조립 역할만 수행
- 실제 기능은 routers / services 계층에 위임

관련 파일:
- fintrack.core.config        : 환경 변수 및 설정 로드
- fintrack.core.deps          : DB 세션 의존성
- fintrack.routers.*          : 기능별 API 라우터

"""

import logging

from fastapi import FastAPI, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from fintrack.core.config import settings
from fintrack.core.deps import get_db
from fintrack.routers import auth, users, movements, reports

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Finance Tracker Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 본문 / 쿼리 / 경로 파라미터 검증 실패는 모두 400 (잘못된 role 값 포함)
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(movements.router)
app.include_router(reports.router)


@app.get("/health")
def health():
    return {"status": "ok"}

"""
데이터베이스 연결 상태 확인 엔드포인트

- 간단한 SELECT 1 쿼리를 통해 DB 연결 여부 확인

"""
@app.get("/db-ping")
def db_ping(db: Session = Depends(get_db)):
    value = db.execute(text("SELECT 1")).scalar_one()
    return {"db": "ok", "value": value}
