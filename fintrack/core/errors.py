"""
errors.py

서비스 계층 도메인 예외 정의.

서비스는 HTTP를 모르고 이 예외만 발생시키며,
라우터가 status_code / detail을 HTTPException으로 변환한다.
예상하지 못한 DB 오류는 database_error()로 500 응답을 만든다.

"""

import logging

from fastapi import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 400
    default_detail = "Bad request"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_http(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.detail)


# SQLAlchemyError → 500 (예외 타입 이름만 노출)
def database_error(e: Exception) -> HTTPException:
    logger.exception("database error")
    return HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")
