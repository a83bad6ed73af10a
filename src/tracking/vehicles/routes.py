import logging
from http import HTTPStatus
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.customers.models import CustomerModel
from src.tracking.database.dependencies import verify_database
from src.tracking.middleware.auth import authenticate_customer
from src.tracking.middleware.ownership import check_vehicle_ownership, vehicle_repo
from src.tracking.vehicles.models import VehicleModel
from src.tracking.vehicles.schemas import VehicleCreate, VehicleResponse, VehicleUpdate

logger = logging.getLogger(__name__)
vehicle_router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


@vehicle_router.get("", response_model=List[VehicleResponse])
async def list_vehicles(
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
):
    return await vehicle_repo.find_by_customer_id(db_session, customer.id)


@vehicle_router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(vehicle: VehicleModel = Depends(check_vehicle_ownership)):
    return vehicle


@vehicle_router.post(
    "", response_model=VehicleResponse, status_code=HTTPStatus.CREATED
)
async def create_vehicle(
    data: VehicleCreate,
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
):
    vehicle = await vehicle_repo.create(db_session, customer.id, data)
    logger.info(f"Vehicle {vehicle.id} created for customer {customer.id}")
    return vehicle


@vehicle_router.put("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    data: VehicleUpdate,
    vehicle: VehicleModel = Depends(check_vehicle_ownership),
    db_session: AsyncSession = Depends(verify_database),
):
    return await vehicle_repo.update(db_session, vehicle, data)


@vehicle_router.delete("/{vehicle_id}", status_code=HTTPStatus.NO_CONTENT)
async def delete_vehicle(
    vehicle: VehicleModel = Depends(check_vehicle_ownership),
    db_session: AsyncSession = Depends(verify_database),
):
    await vehicle_repo.delete(db_session, vehicle)
    logger.info(f"Vehicle {vehicle.id} deleted")
    return Response(status_code=HTTPStatus.NO_CONTENT)
