from fastapi import APIRouter
from . import notifications, poller, session

router = APIRouter(prefix="/api/v1", tags=["v1"])

router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
router.include_router(poller.router, prefix="/poller", tags=["poller"])
router.include_router(session.router, prefix="/session", tags=["session"])
