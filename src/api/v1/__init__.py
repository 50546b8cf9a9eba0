"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.chats import router as chats_router
from api.v1.routes.discovery import router as discovery_router
from api.v1.routes.matches import likes_router
from api.v1.routes.matches import router as matches_router
from api.v1.routes.realtime import router as realtime_router

router = APIRouter()
router.include_router(discovery_router)
router.include_router(likes_router)
router.include_router(matches_router)
router.include_router(chats_router)
router.include_router(realtime_router)
