import argparse
import getpass

from dotenv import load_dotenv
from sqlalchemy import select

from checkout_admin.config import settings
from checkout_admin.db import Database
from checkout_admin.models import AdminUser
from checkout_admin.services.auth import hash_password


def parse_args():
    parser = argparse.ArgumentParser(description="Create or reset a dashboard admin.")
    parser.add_argument("--email", required=True, help="Admin login email.")
    parser.add_argument("--name", help="Display name.")
    parser.add_argument("--username", help="Name recorded on audit comments.")
    parser.add_argument(
        "--password",
        help="Password; prompted for when omitted.",
    )
    return parser.parse_args()


def ensure_admin(db, email, password, name=None, username=None):
    user = db.scalars(select(AdminUser).where(AdminUser.email == email)).first()
    if not user:
        user = AdminUser(email=email, password=hash_password(password))
        db.add(user)
    else:
        user.password = hash_password(password)
    if name:
        user.name = name
    if username:
        user.username = username
    db.commit()
    return user


def main():
    load_dotenv()
    args = parse_args()
    password = args.password or getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password must not be empty.")
    database = Database.from_settings(settings)
    db = database.session()
    try:
        user = ensure_admin(db, args.email, password, args.name, args.username)
        print(f"Admin {user.email} ready (id={user.id}).")
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
