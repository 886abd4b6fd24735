"""

관리자 리포트(/reports/summary) 테스트.

"""

from datetime import datetime, timezone

from sqlalchemy.exc import OperationalError

from fintrack.models.movement import MovementType
from fintrack.models.user import Role
from fintrack.services.reports import month_key

from tests.helpers import create_movement_in_db, create_user_in_db, headers_for


def test_month_key_uses_utc():
    assert month_key(datetime(2025, 8, 17, 12, 0)) == "2025-08"
    assert month_key(datetime(2025, 9, 1, 0, 30, tzinfo=timezone.utc)) == "2025-09"


def test_summary_totals_and_monthly_series(client, db):
    admin = create_user_in_db(db, role=Role.ADMIN)
    member = create_user_in_db(db)

    create_movement_in_db(db, owner=admin, amount="1000.00", date=datetime(2025, 7, 5, tzinfo=timezone.utc))
    create_movement_in_db(
        db, owner=admin, movement_type=MovementType.EXPENSE, amount="250.50",
        date=datetime(2025, 7, 20, tzinfo=timezone.utc),
    )
    create_movement_in_db(
        db, owner=member, movement_type=MovementType.EXPENSE, amount="100.25",
        date=datetime(2025, 8, 2, tzinfo=timezone.utc),
    )

    r = client.get("/reports/summary", headers=headers_for(admin))

    assert r.status_code == 200, r.text
    body = r.json()
    assert body["income"] == 1000.0
    assert body["expense"] == 350.75
    assert body["balance"] == 649.25
    assert body["series"] == [
        {"month": "2025-07", "income": 1000.0, "expense": 250.5, "balance": 749.5},
        {"month": "2025-08", "income": 0.0, "expense": 100.25, "balance": -100.25},
    ]


def test_summary_empty(client, db):
    admin = create_user_in_db(db, role=Role.ADMIN)

    r = client.get("/reports/summary", headers=headers_for(admin))

    assert r.status_code == 200
    assert r.json() == {"income": 0.0, "expense": 0.0, "balance": 0.0, "series": []}


def test_summary_requires_admin(client, db):
    member = create_user_in_db(db)

    assert client.get("/reports/summary", headers=headers_for(member)).status_code == 403
    assert client.get("/reports/summary").status_code == 401


def test_summary_database_error_500(client, db, monkeypatch):
    admin = create_user_in_db(db, role=Role.ADMIN)

    def broken_summary(db):
        raise OperationalError("SELECT movements", {}, Exception("connection lost"))

    monkeypatch.setattr("fintrack.routers.reports.summary", broken_summary)

    r = client.get("/reports/summary", headers=headers_for(admin))
    assert r.status_code == 500
    assert r.json() == {"detail": "Database error: OperationalError"}
