import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.config import get_settings
from src.tracking.position_ingest.exceptions import (
    PositionDatabaseException,
    PositionDecodeException,
    PositionRedisException,
    PositionRedisNotInitializedException,
)
from src.tracking.position_ingest.schemas import PositionEventCreate
from src.tracking.positions.models import PositionModel
from src.tracking.positions.repositories import IPositionRepository
from src.tracking.redis.redis import redis_manager

logger = logging.getLogger(__name__)


async def decode_payload(payload: str) -> PositionEventCreate | dict:
    try:
        return PositionEventCreate.from_base64(payload)
    except PositionDecodeException as e:
        return {"error": str(e)}


async def check_duplicate_event(event: PositionEventCreate) -> dict | None:
    if not redis_manager.is_ready:
        logger.error("Redis client is not initialized")
        return {"error": str(PositionRedisNotInitializedException("check_duplicate"))}

    key = event.dedup_key()
    try:
        is_new = await redis_manager.claim_key(
            key, get_settings().POSITION_DEDUP_TTL_SECONDS
        )
        if not is_new:
            logger.info(
                f"Duplicate position: vehicle {event.vehicle_id} at {event.timestamp}"
            )
            return {"error": "Duplicate event"}
    except Exception as e:
        logger.error(f"Redis error: {e}")
        return {"error": str(PositionRedisException("set", key, str(e)))}
    return None


async def release_duplicate_claim(event: PositionEventCreate):
    """Forget the dedup key so a redelivered event can be stored."""
    if not redis_manager.is_ready:
        return
    key = event.dedup_key()
    try:
        await redis_manager.release_key(key)
    except Exception as e:
        logger.error(f"Failed to release dedup key {key}: {e}")


async def persist_position_event(
    db: AsyncSession, repo: IPositionRepository, event: PositionEventCreate
) -> PositionModel:
    logger.info(f"Saving position for vehicle: {event.vehicle_id}")
    try:
        position = await repo.create_position(db, event)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error saving position event: {str(e)}")
        raise PositionDatabaseException(event.vehicle_id, str(event.timestamp), str(e))
    logger.info(f"Position stored with ID: {position.id}")
    return position
