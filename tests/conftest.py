import os

# 앱 import 전에 설정 기본값 주입 (.env 없이도 테스트 가능하도록)
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from fintrack.main import app as fastapi_app  # noqa: E402
from fintrack.core.config import settings  # noqa: E402
from fintrack.core.deps import get_db  # noqa: E402
from fintrack.db.base import Base  # noqa: E402
from fintrack.db.session import build_engine  # noqa: E402

# ✅ 모델 import (Base.metadata에 테이블 등록)
from fintrack.models import user, movement, role_log  # noqa: E402,F401


TEST_DB_URL = settings.TEST_DATABASE_URL or os.getenv("TEST_DATABASE_URL")
if not TEST_DB_URL:
    raise RuntimeError("TEST_DATABASE_URL is not set. Add it to .env or env var for tests.")

engine = build_engine(TEST_DB_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """테스트 전체 시작/종료 때만 스키마 생성/삭제"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables():
    """각 테스트마다 데이터 초기화 (테이블은 유지, row만 삭제)"""
    # FK 의존성 역순으로 삭제
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def session_factory():
    return TestingSessionLocal


@pytest.fixture()
def db():
    """테스트에서 직접 DB 조작할 때 쓰는 세션"""
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client():
    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()
