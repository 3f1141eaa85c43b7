"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.access_grants import me_router, trips_router, users_router
from api.v1.routes.access_grants import router as access_grants_router
from api.v1.routes.invitations import router as invitations_router

router = APIRouter()
router.include_router(invitations_router)
router.include_router(access_grants_router)
router.include_router(trips_router)
router.include_router(me_router)
router.include_router(users_router)
