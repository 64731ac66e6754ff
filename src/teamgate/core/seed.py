"""Seed the permission catalog and role templates.

Usage: python -m src.teamgate.core.seed
"""

import asyncio

from src.teamgate.core.config import get_settings
from src.teamgate.core.db import dispose_engine, get_session
from src.teamgate.core.logging import get_logger, setup_logging
from src.teamgate.repositories import (
    AuditLogRepository,
    AuthorizationStore,
    MembershipRepository,
    PermissionRepository,
    RoleRepository,
    RoleTemplateRepository,
    UserRepository,
)
from src.teamgate.services import AuditService, PermissionEvaluator, RoleService

logger = get_logger(__name__)


async def seed_catalog() -> None:
    async with get_session() as session:
        role_service = RoleService(
            RoleRepository(session),
            PermissionRepository(session),
            RoleTemplateRepository(session),
            UserRepository(session),
            MembershipRepository(session),
            PermissionEvaluator(AuthorizationStore(session)),
            AuditService(AuditLogRepository(session), session),
            session,
        )
        await role_service.seed_catalog()


async def main() -> None:
    setup_logging(get_settings().debug)
    try:
        await seed_catalog()
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
