#!/usr/bin/env python3
"""
Audit stored password hashes.

Lists accounts whose password hash is missing or is not a bcrypt hash.
Exits with status 1 when any are found, so it can gate deployments.
"""

import argparse
from typing import List, Tuple

BCRYPT_PREFIX = "$2"


def find_bad_hashes(users) -> List[Tuple[str, str, str]]:
    """(user id, email, problem) for every account that cannot log in with bcrypt"""
    problems = []
    for user in users:
        if not user.password_hash:
            problems.append((user.id, user.email, "missing password hash"))
        elif not user.password_hash.startswith(BCRYPT_PREFIX):
            problems.append((user.id, user.email, "not a bcrypt hash"))
    return problems


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="List users with missing or non-bcrypt password hashes.")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    if args.database_url:
        import os
        os.environ["DATABASE_URL"] = args.database_url

    from legalpro_lite.db.session import get_db_session, init_db
    from legalpro_lite.db.models import User

    init_db()

    with get_db_session() as db:
        users = db.query(User).order_by(User.email).all()
        problems = find_bad_hashes(users)
        total = len(users)

    for user_id, email, problem in problems:
        print(f"{email} ({user_id}): {problem}")

    print(f"Checked {total} user(s): {len(problems)} with problems")
    return 1 if problems else 0


if __name__ == "__main__":
    raise SystemExit(main())
