#!/usr/bin/env python3
"""
Create an ADMIN user, or promote an existing one.
There is no public registration endpoint; this is how admins are made.

    python create_admin.py <login> <password>
"""
import argparse
import sys

from sqlmodel import Session

from menu_backend.core.config import get_settings
from menu_backend.db.session import build_engine, create_db_and_tables
from menu_backend.exceptions import ApiError
from menu_backend.services.auth.auth_service import ADMIN_ROLE, AuthService, hash_password, validate_password


def create_admin(login: str, password: str) -> None:
    settings = get_settings()
    engine = build_engine(settings)
    create_db_and_tables(engine)

    with Session(engine) as session:
        service = AuthService(session, settings)
        user = service.get_by_login(login)
        if user:
            if not validate_password(password):
                raise ApiError.bad_request("Invalid password format")
            user.role = ADMIN_ROLE
            user.password = hash_password(password)
            session.add(user)
            session.commit()
            print(f"✓ User {login} promoted to {ADMIN_ROLE}")
        else:
            service.create_user(login, password, role=ADMIN_ROLE)
            print(f"✓ Admin {login} created")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote an admin user")
    parser.add_argument("login")
    parser.add_argument("password")
    args = parser.parse_args()
    try:
        create_admin(args.login, args.password)
    except ApiError as e:
        print(f"❌ {e.detail}")
        sys.exit(1)
