import logging
from http import HTTPStatus
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.customers.models import CustomerModel
from src.tracking.database.dependencies import verify_database
from src.tracking.middleware.auth import authenticate_customer
from src.tracking.middleware.ownership import (
    check_trip_ownership,
    check_vehicle_ownership,
    ensure_driver_access,
    ensure_vehicle_access,
)
from src.tracking.trips.dependencies import get_trip_repository, get_trip_service
from src.tracking.trips.exceptions import (
    TripAlreadyEndedException,
    TripInvalidRangeException,
    TripNotFoundException,
)
from src.tracking.trips.models import TripModel
from src.tracking.trips.repositories import TripRepository
from src.tracking.trips.schemas import (
    TripCreate,
    TripDetailsEnvelope,
    TripDetailsResponse,
    TripEndRequest,
    TripResponse,
    TripUpdate,
)
from src.tracking.trips.services import TripLifecycleService
from src.tracking.utils import to_utc, utcnow
from src.tracking.vehicles.models import VehicleModel

logger = logging.getLogger(__name__)
trip_router = APIRouter(prefix="/trips", tags=["Trips"])


@trip_router.get("", response_model=List[TripDetailsResponse])
async def list_trips(
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
    repo: TripRepository = Depends(get_trip_repository),
):
    return await repo.find_by_customer_id(db_session, customer.id)


@trip_router.get("/vehicle/{vehicle_id}", response_model=List[TripResponse])
async def list_vehicle_trips(
    vehicle: VehicleModel = Depends(check_vehicle_ownership),
    db_session: AsyncSession = Depends(verify_database),
    repo: TripRepository = Depends(get_trip_repository),
):
    return await repo.find_by_vehicle_id(db_session, vehicle.id)


@trip_router.get("/{trip_id}", response_model=TripDetailsEnvelope)
async def get_trip(
    trip: TripModel = Depends(check_trip_ownership),
    db_session: AsyncSession = Depends(verify_database),
    repo: TripRepository = Depends(get_trip_repository),
):
    details = await repo.get_trip_details(db_session, trip.id)
    if details is None:
        raise TripNotFoundException(trip.id)
    return TripDetailsEnvelope(data=details)


@trip_router.post("", response_model=TripResponse, status_code=HTTPStatus.CREATED)
async def start_trip(
    data: TripCreate,
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
    service: TripLifecycleService = Depends(get_trip_service),
):
    await ensure_vehicle_access(db_session, data.vehicle_id, customer.id)
    await ensure_driver_access(db_session, data.driver_id, customer.id)
    return await service.start_trip(db_session, data)


@trip_router.post("/{trip_id}/end", response_model=TripResponse)
async def end_trip(
    request: Optional[TripEndRequest] = Body(None),
    trip: TripModel = Depends(check_trip_ownership),
    db_session: AsyncSession = Depends(verify_database),
    service: TripLifecycleService = Depends(get_trip_service),
):
    # The service overwrites unconditionally, so a closed trip stops here.
    if trip.end_time is not None:
        raise TripAlreadyEndedException(trip.id)

    end_time = request.end_time if request and request.end_time else utcnow()
    if end_time < to_utc(trip.start_time):
        raise TripInvalidRangeException(trip.start_time, end_time)

    updated_trip = await service.end_trip(db_session, trip.id, end_time)
    if updated_trip is None:
        raise TripNotFoundException(trip.id)
    return updated_trip


@trip_router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    data: TripUpdate,
    trip: TripModel = Depends(check_trip_ownership),
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
    repo: TripRepository = Depends(get_trip_repository),
):
    await ensure_vehicle_access(db_session, data.vehicle_id, customer.id)
    await ensure_driver_access(db_session, data.driver_id, customer.id)
    updated_trip = await repo.update_trip(db_session, trip.id, data)
    if updated_trip is None:
        raise TripNotFoundException(trip.id)
    return updated_trip


@trip_router.delete("/{trip_id}", status_code=HTTPStatus.NO_CONTENT)
async def delete_trip(
    trip: TripModel = Depends(check_trip_ownership),
    db_session: AsyncSession = Depends(verify_database),
    repo: TripRepository = Depends(get_trip_repository),
):
    if not await repo.delete_trip(db_session, trip.id):
        raise TripNotFoundException(trip.id)
    logger.info(f"Trip {trip.id} deleted")
    return Response(status_code=HTTPStatus.NO_CONTENT)
