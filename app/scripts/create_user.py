"""
Create a panel account from the shell (e.g. a second admin). Run from project root
after `python -m app.seed` so that roles exist:
  python -m app.scripts.create_user EMAIL NAME PASSWORD [--role admin|user] [--inactive]
Example:
  python -m app.scripts.create_user ops@example.com "Ops Team" your-secure-password --role admin
"""
import argparse
import sys

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy import select

from app.core.database import session_scope
from app.core.permissions import BUILTIN_ROLES, ROLE_USER
from app.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
)
from app.models.user import User
from app.services.permissions import RoleNotFoundError, assign_role


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a back-office user account.")
    parser.add_argument("email", help=f"Email (unique, at most {EMAIL_MAX_LEN} chars)")
    parser.add_argument("name", help=f"Display name (1-{NAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--role", default=ROLE_USER, choices=list(BUILTIN_ROLES))
    parser.add_argument("--inactive", action="store_true", help="Create the account disabled")
    args = parser.parse_args(argv)

    email = args.email.strip()
    name = args.name.strip()
    if not name or len(name) > NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1
    try:
        TypeAdapter(EmailStr).validate_python(email)
    except ValidationError:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if len(email) > EMAIL_MAX_LEN:
        print("Invalid email length.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    with session_scope() as db:
        existing = db.scalar(select(User).where(User.email == email))
        if existing:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(args.password),
            is_active=not args.inactive,
        )
        db.add(user)
        db.flush()
        try:
            assign_role(db, user, args.role)
        except RoleNotFoundError as e:
            db.rollback()
            print(f"{e.message} Run `python -m app.seed` first.", file=sys.stderr)
            return 1
        db.commit()
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
