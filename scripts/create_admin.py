"""

최초 ADMIN 계정 생성 스크립트.

- 서버 최초 세팅 시 단 한 번 실행하는 용도
- .env에 정의된 ADMIN_* 환경 변수를 읽어 ADMIN 계정을 생성한다.
- 이미 ADMIN 계정이 존재하면 생성하지 않고 종료한다.

사용 목적:
- 사용자 / 권한 관리 API는 ADMIN만 호출할 수 있으므로
  시스템에 최소 한 명의 ADMIN을 만들어 두기 위함

사용 방법
- 가상환경 접속
- (.venv) ~$ python -m scripts.create_admin

"""

import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from fintrack.db.session import SessionLocal
from fintrack.models.user import User, Role
from fintrack.core.security import get_password_hash


def main():
    db = SessionLocal()
    try:
        exists = db.scalar(select(User).where(User.role == Role.ADMIN))
        if exists:
            print(f"✅ ADMIN already exists ({exists.email}). Skip creation.")
            return

        email = os.environ["ADMIN_EMAIL"]
        password = os.environ["ADMIN_PASSWORD"]
        name = os.environ.get("ADMIN_NAME", "Admin")

        email_exists = db.scalar(select(User).where(User.email == email))
        if email_exists:
            raise RuntimeError("Email already exists but is not ADMIN")

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            name=name,
            role=Role.ADMIN,
        )

        db.add(user)
        db.commit()

        print(f"🚀 ADMIN created: {email}")

    finally:
        db.close()


if __name__ == "__main__":
    main()
