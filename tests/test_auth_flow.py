"""

인증 기본 플로우 테스트.
- 로그인 성공 / 실패, /auth/me 조회,
  토큰 누락 / 위조 / 삭제된 사용자 토큰 → 401 을 검증한다.

"""

import uuid

from fintrack.core.security import create_access_token
from fintrack.models.user import Role

from tests.helpers import auth_header, create_user_in_db, DEFAULT_PASSWORD


def test_login_and_me_returns_current_role(client, db):
    admin = create_user_in_db(db, role=Role.ADMIN, email="boss@test.com", name="Boss")

    login = client.post("/auth/login", json={"email": "boss@test.com", "password": DEFAULT_PASSWORD})
    assert login.status_code == 200, login.text
    body = login.json()
    assert body["token_type"] == "bearer"

    me = client.get("/auth/me", headers=auth_header(body["access_token"]))
    assert me.status_code == 200, me.text
    assert me.json() == {
        "id": str(admin.id),
        "name": "Boss",
        "email": "boss@test.com",
        "role": "ADMIN",
    }
    assert me.headers["cache-control"] == "no-store"


def test_login_wrong_password_401(client, db):
    create_user_in_db(db, email="someone@test.com")

    r = client.post("/auth/login", json={"email": "someone@test.com", "password": "wrong-password"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"

    unknown = client.post("/auth/login", json={"email": "nobody@test.com", "password": "whatever"})
    assert unknown.status_code == 401


def test_me_without_token_401(client):
    r = client.get("/auth/me")
    assert r.status_code == 401
    assert r.json()["detail"] == "Not authenticated"


def test_me_with_garbage_token_401(client):
    r = client.get("/auth/me", headers=auth_header("not-a-jwt"))
    assert r.status_code == 401
    assert r.json()["detail"] == "Could not validate credentials"


def test_token_for_unknown_user_401(client):
    token = create_access_token(subject=str(uuid.uuid4()))
    r = client.get("/auth/me", headers=auth_header(token))
    assert r.status_code == 401
    assert r.json()["detail"] == "User not found"


def test_role_is_read_from_db_not_token(client, db):
    # 토큰 발급 이후 권한이 바뀌면 다음 요청부터 바로 반영
    user = create_user_in_db(db, role=Role.ADMIN)
    create_user_in_db(db, role=Role.ADMIN)
    token = create_access_token(subject=str(user.id))

    assert client.get("/users", headers=auth_header(token)).status_code == 200

    user.role = Role.USER
    db.commit()

    assert client.get("/users", headers=auth_header(token)).status_code == 403
    assert client.get("/auth/me", headers=auth_header(token)).json()["role"] == "USER"
