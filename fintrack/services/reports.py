"""
services/reports.py

관리자용 집계 리포트 계산.

- 전체 수입 / 지출 / 잔액 합계
- 월별(YYYY-MM) 수입 / 지출 / 잔액 시계열 (오름차순)

금액 합산은 Decimal로 수행하고 응답 직전에만 변환한다.

"""

from collections import defaultdict
from datetime import timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from fintrack.models.movement import Movement, MovementType


def month_key(value) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value.year:04d}-{value.month:02d}"


def summary(db: Session) -> dict:
    rows = db.execute(
        select(Movement.type, Movement.amount, Movement.date).order_by(Movement.date)
    ).all()

    income = Decimal("0")
    expense = Decimal("0")
    monthly: dict[str, dict[str, Decimal]] = defaultdict(
        lambda: {"income": Decimal("0"), "expense": Decimal("0")}
    )

    for movement_type, amount, date in rows:
        amount = Decimal(amount)
        bucket = monthly[month_key(date)]
        if movement_type == MovementType.INCOME:
            income += amount
            bucket["income"] += amount
        else:
            expense += amount
            bucket["expense"] += amount

    series = [
        {
            "month": month,
            "income": values["income"],
            "expense": values["expense"],
            "balance": values["income"] - values["expense"],
        }
        for month, values in sorted(monthly.items())
    ]

    return {
        "income": income,
        "expense": expense,
        "balance": income - expense,
        "series": series,
    }
