from fastapi import APIRouter, Depends, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack.core.deps import get_db, get_current_admin
from fintrack.core.errors import database_error
from fintrack.models.user import User
from fintrack.schemas.report import SummaryResponse
from fintrack.services.reports import summary

router = APIRouter(prefix="/reports", tags=["reports"])


# 관리자 전용 수입 / 지출 / 잔액 합계 및 월별 추이
@router.get("/summary", response_model=SummaryResponse)
def report_summary(
    response: Response,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    response.headers["Cache-Control"] = "no-store"
    try:
        return summary(db)
    except SQLAlchemyError as e:
        raise database_error(e)
