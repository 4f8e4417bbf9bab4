#!/usr/bin/env python3
"""
Create an ADMIN account

Public registration never grants ADMIN; use this tool instead.

    python scripts/create_admin.py admin@example.com 'long-password' --display-name admin
"""

import sys
import argparse
import asyncio
from pathlib import Path

# project root on sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.api.services import validators
from app.api.services.user_manager import UserManager
from app.core.async_database import get_async_db_manager
from app.core.error_handling import FishSpotError
from app.core.logger import configure_logging, get_logger
from app.models import UserRole

logger = get_logger(__name__)


async def main() -> int:
    parser = argparse.ArgumentParser(description="Create an ADMIN user")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--display-name", help="public display name")
    args = parser.parse_args()

    configure_logging()
    db_manager = get_async_db_manager()
    try:
        email = validators.normalize_email(args.email)
        password = validators.validate_password(args.password)
        display_name = validators.validate_display_name(args.display_name)

        async with db_manager.get_session() as session:
            user = await UserManager().create_user(
                session, email, password, UserRole.ADMIN, display_name
            )
        logger.info(f"Admin {user.id} created ({user.email})")
        print(f"admin created: id={user.id} email={user.email}")
        return 0
    except FishSpotError as e:
        logger.error(f"Admin creation failed: [{e.error_code}] {e.message}")
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await db_manager.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
