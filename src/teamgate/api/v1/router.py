from fastapi import APIRouter

from src.teamgate.api.v1 import (
    admin,
    audit,
    me,
    members,
    memberships,
    onboarding,
    permissions,
    roles,
    tenants,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(me.router)
api_router.include_router(onboarding.router)
api_router.include_router(tenants.router)
api_router.include_router(memberships.router)
api_router.include_router(roles.router)
api_router.include_router(members.router)
api_router.include_router(permissions.router)
api_router.include_router(audit.router)
api_router.include_router(admin.router)
