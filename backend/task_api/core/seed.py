import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.core.config import settings
from task_api.core.permissions import ADMIN_ROLE, DEFAULT_ROLES
from task_api.models.user import Role
from task_api.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)

async def seed_roles(db: AsyncSession) -> None:
    result = await db.execute(select(Role.name))
    existing = set(result.scalars().all())
    for name in DEFAULT_ROLES:
        if name not in existing:
            db.add(Role(name=name))
            logger.info("Seeding role %s", name)
    await db.commit()

async def seed_admin(db: AsyncSession) -> None:
    """Create the configured administrator once; no-op without ADMIN_EMAIL/ADMIN_PASSWORD."""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return

    store = CredentialStore(db)
    user = await store.find_by_email(settings.ADMIN_EMAIL)
    if user is None:
        result = await store.create_user(
            email=settings.ADMIN_EMAIL,
            username=settings.ADMIN_USERNAME,
            password=settings.ADMIN_PASSWORD,
        )
        if not result.succeeded:
            logger.error("Could not create admin user: %s", ", ".join(result.errors))
            return
        user = result.user
        logger.info("Created admin user %s", settings.ADMIN_EMAIL)
    await store.add_to_role(user, ADMIN_ROLE)
