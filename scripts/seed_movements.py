"""

데모용 거래 내역 시드 스크립트.

- ADMIN_EMAIL 계정(없으면 생성) 소유로 올해 12개월치
  수입 / 지출 거래 내역을 무작위로 생성한다.
- 재실행 시 중복을 막기 위해 해당 사용자의 올해 거래 내역을 먼저 지운다.

사용 방법
- (.venv) ~$ python -m scripts.seed_movements

"""

import calendar
import os
import random
from datetime import datetime, timezone
from decimal import Decimal

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select, delete, func
from fintrack.db.session import SessionLocal
from fintrack.models.user import User, Role
from fintrack.models.movement import Movement, MovementType
from fintrack.core.security import get_password_hash


def random_date_in_month(year: int, month: int) -> datetime:
    day = random.randint(1, calendar.monthrange(year, month)[1])
    return datetime(year, month, day, random.randint(8, 20), random.randint(0, 59), tzinfo=timezone.utc)


def build_movements(user_id, year: int) -> list[Movement]:
    rows = []
    for month in range(1, 13):
        for i in range(random.randint(15, 30)):
            rows.append(Movement(
                type=MovementType.INCOME,
                concept=f"Sale {month}-{i + 1}",
                amount=Decimal(random.randint(50_000, 900_000)),
                date=random_date_in_month(year, month),
                user_id=user_id,
            ))
        for i in range(random.randint(10, 25)):
            rows.append(Movement(
                type=MovementType.EXPENSE,
                concept=f"Expense {month}-{i + 1}",
                amount=Decimal(random.randint(20_000, 600_000)),
                date=random_date_in_month(year, month),
                user_id=user_id,
            ))
    return rows


def main():
    email = os.environ["ADMIN_EMAIL"]
    year = datetime.now(timezone.utc).year

    db = SessionLocal()
    try:
        user = db.scalar(select(User).where(User.email == email))
        if not user:
            user = User(
                email=email,
                name=os.environ.get("ADMIN_NAME", "Admin Demo"),
                password_hash=get_password_hash(os.environ.get("ADMIN_PASSWORD", "ChangeMe123!")),
                role=Role.ADMIN,
            )
            db.add(user)
            db.flush()
        print(f"👤 User: {user.email}")

        db.execute(
            delete(Movement).where(
                Movement.user_id == user.id,
                Movement.date >= datetime(year, 1, 1, tzinfo=timezone.utc),
                Movement.date < datetime(year + 1, 1, 1, tzinfo=timezone.utc),
            )
        )

        movements = build_movements(user.id, year)
        db.add_all(movements)
        db.commit()
        print(f"💾 Movements inserted: {len(movements)}")

        users = db.scalar(select(func.count()).select_from(User))
        total = db.scalar(select(func.count()).select_from(Movement))
        print(f"✅ Totals: users={users} movements={total}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
