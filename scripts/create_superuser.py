"""
Grant admin rights to an account.

Run this after deploying to give the first administrator access to the
``/api/v1/admin`` endpoints. The account must already be registered.

Usage:
    python scripts/create_superuser.py --email admin@example.com
    python scripts/create_superuser.py --email admin@example.com --revoke
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fishlog.database import async_session
from fishlog.crud.user import user as crud_user
from fishlog.utils.logging_config import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


async def set_superuser(email: str, grant: bool = True) -> bool:
    """
    Set the superuser flag on the account registered with ``email``.

    Returns:
        False if no such account exists
    """
    async with async_session() as db:
        user_obj = await crud_user.get_by_email(db, email=email)
        if not user_obj:
            logger.error(f"No user registered with email {email}")
            return False

        await crud_user.update(db, db_obj=user_obj, obj_in={"is_superuser": grant})

    print("=" * 60)
    print(f"✅ {email} is {'now' if grant else 'no longer'} an administrator")
    print("=" * 60)
    return True


def main():
    parser = argparse.ArgumentParser(description="Grant or revoke admin rights")
    parser.add_argument('--email', required=True, help='Email of the account')
    parser.add_argument('--revoke', action='store_true', help='Remove admin rights instead')

    args = parser.parse_args()
    if not asyncio.run(set_superuser(args.email, grant=not args.revoke)):
        sys.exit(1)


if __name__ == "__main__":
    main()
