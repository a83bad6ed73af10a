import logging
from http import HTTPStatus

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from src.tracking.database.database import db

logger = logging.getLogger(__name__)

health_router = APIRouter(prefix="/health", tags=["Health Check"])


@health_router.get("")
async def health_check():
    """Report liveness and whether the database pool is connected."""
    logger.debug("Health check requested")
    return JSONResponse(
        status_code=HTTPStatus.OK,
        content={
            "status": "ok",
            "database": "connected" if db.is_connected else "disconnected",
        },
    )
