"""
Super Admin Setup Script
Creates (or reuses) the auth user for the given email and grants it the
super_admin role. Safe to run repeatedly.

Usage:
    python -m seatfinder.scripts.setup_admin --email admin@example.com --password secret
Credentials may also come from SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD.
"""

import argparse
import os
import sys

from seatfinder.database.supabase_client import get_service_supabase
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SUPER_ADMIN_ROLE = "super_admin"


def find_user_id(supabase: Client, email: str):
    """Return the id of the auth user with this email, or None"""
    for user in supabase.auth.admin.list_users():
        if (user.email or "").lower() == email.lower():
            return user.id
    return None


def setup_super_admin(supabase: Client, email: str, password: str) -> str:
    """Find or create the user, then upsert its super_admin role. Returns the user id."""
    user_id = find_user_id(supabase, email)
    if user_id:
        logger.info(f"Found existing user {email}")
    else:
        response = supabase.auth.admin.create_user({
            "email": email,
            "password": password,
            "email_confirm": True,
        })
        user_id = response.user.id
        logger.info(f"Created user {email}")

    supabase.table("user_roles")\
        .upsert({"user_id": user_id, "role": SUPER_ADMIN_ROLE}, on_conflict="user_id,role")\
        .execute()
    logger.info(f"Granted {SUPER_ADMIN_ROLE} to {email}")
    return user_id


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create or promote the super admin account")
    parser.add_argument("--email", default=os.environ.get("SUPER_ADMIN_EMAIL"))
    parser.add_argument("--password", default=os.environ.get("SUPER_ADMIN_PASSWORD"))
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if not args.email or not args.password:
        logger.error("Email and password are required (--email/--password or SUPER_ADMIN_EMAIL/SUPER_ADMIN_PASSWORD)")
        sys.exit(2)

    try:
        user_id = setup_super_admin(get_service_supabase(), args.email, args.password)
        logger.info(f"Super admin setup complete: {user_id}")
    except Exception as e:
        logger.error(f"Error during super admin setup: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
