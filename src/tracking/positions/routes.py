import logging
from http import HTTPStatus
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.config import get_settings
from src.tracking.customers.models import CustomerModel
from src.tracking.database.dependencies import verify_database
from src.tracking.middleware.auth import authenticate_customer
from src.tracking.middleware.ownership import (
    check_vehicle_ownership,
    ensure_vehicle_access,
)
from src.tracking.positions.exceptions import PositionNotFoundException
from src.tracking.positions.repositories import PositionRepository
from src.tracking.positions.schemas import (
    PositionCreate,
    PositionEnvelope,
    PositionListResponse,
    PositionResponse,
    VehiclePositionResponse,
)
from src.tracking.vehicles.models import VehicleModel

logger = logging.getLogger(__name__)
position_router = APIRouter(prefix="/positions", tags=["Positions"])

position_repo = PositionRepository()


@position_router.get("", response_model=List[VehiclePositionResponse])
async def get_current_positions(
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
):
    return await position_repo.get_current_positions_by_customer_id(
        db_session, customer.id
    )


@position_router.get("/vehicle/{vehicle_id}", response_model=PositionListResponse)
async def get_vehicle_positions(
    limit: Optional[int] = Query(
        None, ge=1, le=1000, description="Maximum number of positions, newest first"
    ),
    vehicle: VehicleModel = Depends(check_vehicle_ownership),
    db_session: AsyncSession = Depends(verify_database),
):
    positions = await position_repo.get_positions_by_vehicle_id(
        db_session, vehicle.id, limit or get_settings().DEFAULT_POSITION_LIMIT
    )
    return PositionListResponse(
        data=[PositionResponse.model_validate(p) for p in positions]
    )


@position_router.get("/vehicle/{vehicle_id}/latest", response_model=PositionEnvelope)
async def get_latest_vehicle_position(
    vehicle: VehicleModel = Depends(check_vehicle_ownership),
    db_session: AsyncSession = Depends(verify_database),
):
    position = await position_repo.get_last_position(db_session, vehicle.id)
    if position is None:
        raise PositionNotFoundException(vehicle.id)
    return PositionEnvelope(data=PositionResponse.model_validate(position))


@position_router.post(
    "", response_model=PositionResponse, status_code=HTTPStatus.CREATED
)
async def create_position(
    data: PositionCreate,
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
):
    await ensure_vehicle_access(db_session, data.vehicle_id, customer.id)
    position = await position_repo.create_position(db_session, data)
    logger.info(f"Position {position.id} recorded for vehicle {data.vehicle_id}")
    return position
