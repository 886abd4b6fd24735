"""
config.py

애플리케이션 전역 설정(Configuration) 관리 파일.

.env 환경 변수들을 Pydantic BaseSettings를 통해 로드하여
애플리케이션 전반에서 공통으로 사용하는 설정 값을 제공한다.

주요 설정 항목:
- 데이터베이스 연결 정보
- JWT 인증 관련 시크릿 및 만료 정책
- CORS 허용 도메인 목록
- 로그 레벨

설계 원칙:
- 모든 환경 변수는 이 파일을 통해서만 접근
- 로컬 / 테스트 / 운영 환경을 .env로 분리하여 관리

관련 파일:
- fintrack.main             : CORS / 로깅 초기화 시 설정 사용
- fintrack.core.security    : JWT 시크릿 / 만료 설정 사용
- fintrack.db.session       : DATABASE_URL 사용

"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


# .env 파일의 환경 변수를 로드, 정의되지 않은 변수는 무시
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str
    TEST_DATABASE_URL: str | None = None

    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # CORS 허용 도메인 (프론트엔드 주소)
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    LOG_LEVEL: str = "INFO"


# 애플리케이션 전역에서 import하여 사용하는 Settings 인스턴스
settings = Settings()
