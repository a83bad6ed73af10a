import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.position_ingest.exceptions import PositionDatabaseException
from src.tracking.position_ingest.utils import (
    check_duplicate_event,
    decode_payload,
    persist_position_event,
    release_duplicate_claim,
)
from src.tracking.positions.repositories import (
    IPositionRepository,
    PositionRepository,
)
from src.tracking.positions.schemas import PositionResponse

logger = logging.getLogger(__name__)
position_repo: IPositionRepository = PositionRepository()


async def handle_position_event(db: AsyncSession, payload: str) -> dict:
    event_or_error = await decode_payload(payload)
    if isinstance(event_or_error, dict):
        return event_or_error
    event = event_or_error

    duplicate_check = await check_duplicate_event(event)
    if duplicate_check:
        return duplicate_check

    try:
        position = await persist_position_event(db, position_repo, event)
    except PositionDatabaseException:
        await release_duplicate_claim(event)
        raise

    return PositionResponse.model_validate(position).model_dump()
