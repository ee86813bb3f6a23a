"""Create missing tables and register an admin account.

The admin is created without a password; the first login goes through the
password-code reset flow.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(BASE_DIR))

from housedesk.core.logging import setup_logging  # noqa: E402
from housedesk.core.sanitize import clean_email  # noqa: E402
from housedesk.db.session import SessionLocal, init_db  # noqa: E402
from housedesk.models.account import Admin  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create tables and an admin account")
    parser.add_argument("email", help="Admin login email")
    parser.add_argument("--skip-tables", action="store_true", help="Do not create missing tables")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    setup_logging()
    if not args.skip_tables:
        init_db()

    email = clean_email(args.email)
    if "@" not in email:
        print(f"Not an email address: {args.email}")
        return 1

    db = SessionLocal()
    try:
        if db.query(Admin).filter(Admin.email == email).first():
            print(f"Admin already exists: {email}")
            return 0
        db.add(Admin(email=email))
        db.commit()
    finally:
        db.close()
    print(f"Admin created: {email} (request a password code to set the password)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
