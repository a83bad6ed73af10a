import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.drivers.models import DriverModel
from src.tracking.trips.models import TripModel
from src.tracking.trips.schemas import (
    TripCreate,
    TripDetailsResponse,
    TripResponse,
    TripUpdate,
)
from src.tracking.utils import utcnow
from src.tracking.vehicles.models import VehicleModel

logger = logging.getLogger(__name__)


class ITripRepository(ABC):
    @abstractmethod
    async def get_trip_by_id(
        self, db: AsyncSession, trip_id: int
    ) -> Optional[TripModel]:
        pass

    @abstractmethod
    async def get_active_trip_for_vehicle(
        self, db: AsyncSession, vehicle_id: int
    ) -> Optional[TripModel]:
        pass

    @abstractmethod
    async def create_trip(self, db: AsyncSession, trip_data: TripCreate) -> TripModel:
        pass

    @abstractmethod
    async def set_trip_end_time(
        self, db: AsyncSession, trip_id: int, end_time: datetime
    ) -> Optional[TripModel]:
        pass

    @abstractmethod
    async def update_trip_distance(
        self, db: AsyncSession, trip_id: int, distance: float
    ) -> Optional[TripModel]:
        pass


class TripRepository(ITripRepository):
    async def get_trip_by_id(
        self, db: AsyncSession, trip_id: int
    ) -> Optional[TripModel]:
        q = await db.execute(select(TripModel).where(TripModel.id == trip_id))
        return q.scalars().first()

    async def get_active_trip_for_vehicle(
        self, db: AsyncSession, vehicle_id: int
    ) -> Optional[TripModel]:
        q = await db.execute(
            select(TripModel)
            .where(TripModel.vehicle_id == vehicle_id, TripModel.end_time.is_(None))
            .order_by(TripModel.start_time.desc())
            .limit(1)
        )
        return q.scalars().first()

    async def create_trip(self, db: AsyncSession, trip_data: TripCreate) -> TripModel:
        model = TripModel(
            vehicle_id=trip_data.vehicle_id,
            driver_id=trip_data.driver_id,
            start_time=trip_data.start_time or utcnow(),
            end_time=trip_data.end_time,
            distance=trip_data.distance,
        )
        db.add(model)
        await db.commit()
        await db.refresh(model)
        logger.info(f"Trip created with ID: {model.id}")
        return model

    async def set_trip_end_time(
        self, db: AsyncSession, trip_id: int, end_time: datetime
    ) -> Optional[TripModel]:
        trip = await self.get_trip_by_id(db, trip_id)
        if trip is None:
            return None
        trip.end_time = end_time
        await db.commit()
        await db.refresh(trip)
        return trip

    async def update_trip_distance(
        self, db: AsyncSession, trip_id: int, distance: float
    ) -> Optional[TripModel]:
        trip = await self.get_trip_by_id(db, trip_id)
        if trip is None:
            return None
        trip.distance = distance
        await db.commit()
        await db.refresh(trip)
        return trip

    async def update_trip(
        self, db: AsyncSession, trip_id: int, trip_data: TripUpdate
    ) -> Optional[TripModel]:
        trip = await self.get_trip_by_id(db, trip_id)
        if trip is None:
            return None
        trip.vehicle_id = trip_data.vehicle_id
        trip.driver_id = trip_data.driver_id
        trip.start_time = trip_data.start_time
        trip.end_time = trip_data.end_time
        trip.distance = trip_data.distance
        await db.commit()
        await db.refresh(trip)
        return trip

    async def delete_trip(self, db: AsyncSession, trip_id: int) -> bool:
        trip = await self.get_trip_by_id(db, trip_id)
        if trip is None:
            return False
        await db.delete(trip)
        await db.commit()
        return True

    async def get_trip_details(
        self, db: AsyncSession, trip_id: int
    ) -> Optional[TripDetailsResponse]:
        q = await db.execute(self._details_query().where(TripModel.id == trip_id))
        row = q.first()
        return self._to_details(row) if row else None

    async def find_by_customer_id(
        self, db: AsyncSession, customer_id: int
    ) -> List[TripDetailsResponse]:
        q = await db.execute(
            self._details_query()
            .where(VehicleModel.customer_id == customer_id)
            .order_by(TripModel.start_time.desc())
        )
        return [self._to_details(row) for row in q.all()]

    async def find_by_vehicle_id(
        self, db: AsyncSession, vehicle_id: int
    ) -> List[TripModel]:
        q = await db.execute(
            select(TripModel)
            .where(TripModel.vehicle_id == vehicle_id)
            .order_by(TripModel.start_time.desc())
        )
        return list(q.scalars().all())

    async def belongs_to_customer(
        self, db: AsyncSession, trip_id: int, customer_id: int
    ) -> bool:
        q = await db.execute(
            select(TripModel.id)
            .join(VehicleModel, TripModel.vehicle_id == VehicleModel.id)
            .where(TripModel.id == trip_id, VehicleModel.customer_id == customer_id)
            .limit(1)
        )
        return q.scalars().first() is not None

    @staticmethod
    def _details_query():
        return (
            select(
                TripModel,
                VehicleModel.license_plate,
                DriverModel.first_name,
                DriverModel.last_name,
            )
            .join(VehicleModel, TripModel.vehicle_id == VehicleModel.id)
            .join(DriverModel, TripModel.driver_id == DriverModel.id)
        )

    @staticmethod
    def _to_details(row) -> TripDetailsResponse:
        trip, license_plate, first_name, last_name = row
        return TripDetailsResponse(
            **TripResponse.model_validate(trip).model_dump(),
            license_plate=license_plate,
            driver_first_name=first_name,
            driver_last_name=last_name,
        )
