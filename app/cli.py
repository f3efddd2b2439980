"""Command line helpers for provisioning API users."""

from __future__ import annotations

import argparse
import getpass

from sqlalchemy.exc import IntegrityError

from app.core.security import hash_password
from app.db.base import session_scope
from app.db.repository.users import create_user


def _cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user able to request API tokens.")
    parser.add_argument("--email", required=True, help="Login email of the new user")
    parser.add_argument(
        "--password",
        default=None,
        help="Plaintext password; prompted for when omitted",
    )
    args = parser.parse_args(argv)

    password = args.password if args.password is not None else getpass.getpass("Password: ")
    if not password:
        print("password must not be empty")
        return 1

    try:
        with session_scope() as session:
            user = create_user(session, email=args.email, password_hash=hash_password(password))
            user_id = user.id
    except IntegrityError:
        print(f"user already exists: {args.email}")
        return 1

    print(f"created user {user_id}: {args.email}")
    return 0


def main() -> None:
    """CLI entrypoint."""
    raise SystemExit(_cli())


if __name__ == "__main__":
    main()
