import logging
from http import HTTPStatus
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.customers.models import CustomerModel
from src.tracking.database.dependencies import verify_database
from src.tracking.drivers.models import DriverModel
from src.tracking.drivers.schemas import DriverCreate, DriverResponse, DriverUpdate
from src.tracking.middleware.auth import authenticate_customer
from src.tracking.middleware.ownership import (
    check_driver_ownership,
    driver_repo,
    ensure_vehicle_access,
)

logger = logging.getLogger(__name__)
driver_router = APIRouter(prefix="/drivers", tags=["Drivers"])


@driver_router.get("", response_model=List[DriverResponse])
async def list_drivers(
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
):
    return await driver_repo.find_by_customer_id(db_session, customer.id)


@driver_router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(driver: DriverModel = Depends(check_driver_ownership)):
    return driver


@driver_router.post("", response_model=DriverResponse, status_code=HTTPStatus.CREATED)
async def create_driver(
    data: DriverCreate,
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
):
    if data.vehicle_id is not None:
        await ensure_vehicle_access(db_session, data.vehicle_id, customer.id)
    driver = await driver_repo.create(db_session, customer.id, data)
    logger.info(f"Driver {driver.id} created for customer {customer.id}")
    return driver


@driver_router.put("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    data: DriverUpdate,
    driver: DriverModel = Depends(check_driver_ownership),
    db_session: AsyncSession = Depends(verify_database),
):
    if data.vehicle_id is not None:
        await ensure_vehicle_access(db_session, data.vehicle_id, driver.customer_id)
    return await driver_repo.update(db_session, driver, data)


@driver_router.delete("/{driver_id}", status_code=HTTPStatus.NO_CONTENT)
async def delete_driver(
    driver: DriverModel = Depends(check_driver_ownership),
    db_session: AsyncSession = Depends(verify_database),
):
    await driver_repo.delete(db_session, driver)
    logger.info(f"Driver {driver.id} deleted")
    return Response(status_code=HTTPStatus.NO_CONTENT)
