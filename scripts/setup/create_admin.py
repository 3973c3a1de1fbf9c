# scripts/setup/create_admin.py
"""
Provision an administrator account. Public signup only offers client and driver.
Usage: python scripts/setup/create_admin.py --email admin@jrdriving.fr --name "Ops Team"
"""

import argparse
import getpass
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from jrdriving.config import Settings
from jrdriving.database import build_engine, build_session_factory, create_tables
from jrdriving.errors import Conflict
from jrdriving.models.user import Role
from jrdriving.services.auth_service import provision_account


def main():
    parser = argparse.ArgumentParser(description="Create a JR Driving admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", required=True, help="Display name")
    parser.add_argument("--phone", default=None)
    parser.add_argument("--password", default=None, help="Prompted when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password (min 8 chars): ")
    if len(password) < 8:
        print("❌ Password must be at least 8 characters")
        sys.exit(1)

    engine = build_engine(Settings())
    create_tables(engine)
    db = build_session_factory(engine)()
    try:
        profile = provision_account(db, args.email, password, args.name, Role.ADMIN, phone=args.phone)
    except Conflict as e:
        print(f"❌ {e.message}")
        sys.exit(1)
    finally:
        db.close()

    print(f"✅ Admin profile {profile.id} created for {args.email}")


if __name__ == "__main__":
    main()
