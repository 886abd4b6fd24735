"""
session.py

데이터베이스 엔진 및 세션(Session) 관리 파일.

SQLAlchemy Engine과 SessionLocal을 생성하여
애플리케이션 전반에서 공통으로 사용하는 DB 연결을 관리한다.
FastAPI 의존성(get_db)을 통해 요청 단위로 세션을 생성/종료한다.

설계 원칙:
- DB 연결 설정은 한 곳에서만 정의
- pool_pre_ping=True로 유휴 연결 오류 방지
- SQLite는 스레드 간 커넥션 공유를 허용 (TestClient / 로컬 개발용)

관련 파일:
- fintrack.core.config      : DATABASE_URL 설정
- fintrack.core.deps        : get_db 의존성

"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from fintrack.core.config import settings


def build_engine(url: str) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    # pool_pre_ping=True:
    #   장시간 idle 후 끊어진 DB 커넥션을 자동으로 감지/재연결
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)

# 요청 단위로 사용할 세션 팩토리
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)
