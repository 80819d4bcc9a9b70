"""Seed the first super admin on app startup."""

import logging
from app.core.config import settings
from app.core.database import async_session
from app.core.permissions import Role
from app.models.user import User
from app.services.auth import hash_password, get_user_by_email

logger = logging.getLogger(__name__)


async def seed_super_admin():
    """Create the super admin from SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD if missing."""
    if not settings.SEED_ADMIN_EMAIL or not settings.SEED_ADMIN_PASSWORD:
        logger.info("No seed admin configured, skipping")
        return

    async with async_session() as db:
        try:
            existing_user = await get_user_by_email(db, settings.SEED_ADMIN_EMAIL)
            if existing_user:
                logger.info("Seed admin already exists: %s", settings.SEED_ADMIN_EMAIL)
                return

            user = User(
                email=settings.SEED_ADMIN_EMAIL.lower(),
                hashed_password=hash_password(settings.SEED_ADMIN_PASSWORD),
                full_name="Super Admin",
                role=Role.SUPER_ADMIN.value,
                business_id=None,
                is_active=True,
            )
            db.add(user)
            await db.commit()
            logger.info("Seed admin created: %s", settings.SEED_ADMIN_EMAIL)

        except Exception as e:
            logger.error("Failed to seed admin account: %s", e)
            await db.rollback()
