"""
Tenant ownership checks. Every vehicle, driver and trip reachable through
the API must belong to the customer resolved by authenticate_customer.
"""

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.customers.models import CustomerModel
from src.tracking.database.dependencies import verify_database
from src.tracking.drivers.exceptions import DriverNotFoundException
from src.tracking.drivers.models import DriverModel
from src.tracking.drivers.repositories import DriverRepository
from src.tracking.middleware.auth import authenticate_customer
from src.tracking.middleware.exceptions import AccessDeniedError
from src.tracking.trips.dependencies import trip_repo
from src.tracking.trips.exceptions import TripNotFoundException
from src.tracking.trips.models import TripModel
from src.tracking.vehicles.exceptions import VehicleNotFoundException
from src.tracking.vehicles.models import VehicleModel
from src.tracking.vehicles.repositories import VehicleRepository

logger = logging.getLogger(__name__)
vehicle_repo = VehicleRepository()
driver_repo = DriverRepository()


async def ensure_vehicle_access(
    db_session: AsyncSession, vehicle_id: int, customer_id: int
) -> None:
    if not await vehicle_repo.belongs_to_customer(db_session, vehicle_id, customer_id):
        logger.warning(f"Customer {customer_id} denied access to vehicle {vehicle_id}")
        raise AccessDeniedError("vehicle")


async def ensure_driver_access(
    db_session: AsyncSession, driver_id: int, customer_id: int
) -> None:
    if not await driver_repo.belongs_to_customer(db_session, driver_id, customer_id):
        logger.warning(f"Customer {customer_id} denied access to driver {driver_id}")
        raise AccessDeniedError("driver")


async def check_vehicle_ownership(
    vehicle_id: int,
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
) -> VehicleModel:
    vehicle = await vehicle_repo.get_by_id(db_session, vehicle_id)
    if vehicle is None:
        raise VehicleNotFoundException(vehicle_id)
    if vehicle.customer_id != customer.id:
        logger.warning(f"Customer {customer.id} denied access to vehicle {vehicle_id}")
        raise AccessDeniedError("vehicle")
    return vehicle


async def check_driver_ownership(
    driver_id: int,
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
) -> DriverModel:
    driver = await driver_repo.get_by_id(db_session, driver_id)
    if driver is None:
        raise DriverNotFoundException(driver_id)
    if driver.customer_id != customer.id:
        logger.warning(f"Customer {customer.id} denied access to driver {driver_id}")
        raise AccessDeniedError("driver")
    return driver


async def check_trip_ownership(
    trip_id: int,
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
) -> TripModel:
    trip = await trip_repo.get_trip_by_id(db_session, trip_id)
    if trip is None:
        raise TripNotFoundException(trip_id)
    if not await trip_repo.belongs_to_customer(db_session, trip_id, customer.id):
        logger.warning(f"Customer {customer.id} denied access to trip {trip_id}")
        raise AccessDeniedError("trip")
    return trip
