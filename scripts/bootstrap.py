"""Create the database tables and seed the superAdmin account.

Run from the project root any time after configuring your .env, e.g.:
    python -m scripts.bootstrap --username superadmin --email admin@example.com

Flags fall back to ADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD. You will be
prompted for a password if none is supplied.
"""

from __future__ import annotations

import argparse
from getpass import getpass

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.db.models import Base
from app.db.session import Database
from app.services.users import ensure_super_admin


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Setup database tables and seed the superAdmin user.")
    parser.add_argument("--username", default=None, help="Username for the superAdmin account.")
    parser.add_argument("--email", default=None, help="Email for the superAdmin account.")
    parser.add_argument(
        "--password",
        help="Password for the superAdmin account (omit to receive an interactive prompt).",
    )
    parser.add_argument(
        "--skip-tables",
        action="store_true",
        help="Skip creating tables (useful when migrations manage the schema).",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    # Ensure settings are loaded so environment variables are validated early.
    settings = get_settings()
    configure_logging(settings.log_level)
    database = Database(settings.database_url)
    print(f"Using database: {settings.database_url}")

    if not args.skip_tables:
        print("Creating database tables (no-op if already present)...")
        Base.metadata.create_all(bind=database.engine)
        print("Tables ensured.")
    else:
        print("Skipping table creation.")

    username = args.username or settings.admin_username
    email = args.email or settings.admin_email
    if not username or not email:
        print("Error: a username and email are required (flags or ADMIN_USERNAME / ADMIN_EMAIL).")
        return 1

    password = args.password or settings.admin_password
    if password is None:
        password = getpass("superAdmin password (leave blank to keep current if account exists): ").strip() or None

    try:
        with database.session() as session:
            user, created = ensure_super_admin(session, username, email, password)
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1
    finally:
        database.close()

    if created:
        print(f"superAdmin created with username: {user.username}")
    else:
        print(f"superAdmin {user.username} refreshed.")

    print("Bootstrap complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
