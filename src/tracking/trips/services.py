import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.positions.models import PositionModel
from src.tracking.positions.repositories import IPositionRepository
from src.tracking.trips.distance import accumulate_distance_km, sample_time
from src.tracking.trips.models import TripModel
from src.tracking.trips.repositories import ITripRepository
from src.tracking.trips.schemas import TripCreate
from src.tracking.utils import to_utc, utcnow

logger = logging.getLogger(__name__)


def positions_in_window(
    positions: Iterable[PositionModel],
    start_time: datetime,
    end_time: Optional[datetime],
) -> List[PositionModel]:
    """
    Keep the positions captured within [start_time, end_time], both inclusive.

    A missing end_time means the window is still open and ends now.
    """
    start = to_utc(start_time)
    end = to_utc(end_time) if end_time is not None else utcnow()
    return [p for p in positions if start <= sample_time(p) <= end]


class ITripLifecycleService(ABC):
    @abstractmethod
    async def start_trip(self, db: AsyncSession, trip_data: TripCreate) -> TripModel:
        pass

    @abstractmethod
    async def end_trip(
        self, db: AsyncSession, trip_id: int, end_time: datetime
    ) -> Optional[TripModel]:
        pass


class TripLifecycleService(ITripLifecycleService):
    """
    Opens and closes trips and back-fills the travelled distance.

    Nothing here locks or wraps the steps of end_trip in a transaction. A
    position stored after the window is read is not counted, and concurrent
    end_trip calls on the same trip are last-write-wins. If the process dies
    between the two writes the trip stays closed with its old distance;
    calling end_trip again recomputes it.
    """

    def __init__(
        self, position_repo: IPositionRepository, trip_repo: ITripRepository
    ):
        self._position_repo = position_repo
        self._trip_repo = trip_repo

    async def start_trip(self, db: AsyncSession, trip_data: TripCreate) -> TripModel:
        active_trip = await self._trip_repo.get_active_trip_for_vehicle(
            db, trip_data.vehicle_id
        )
        if active_trip is not None and trip_data.end_time is None:
            logger.warning(
                f"Vehicle {trip_data.vehicle_id} already has an active trip: "
                f"{active_trip.id}"
            )
            return active_trip

        return await self._trip_repo.create_trip(db, trip_data)

    async def end_trip(
        self, db: AsyncSession, trip_id: int, end_time: datetime
    ) -> Optional[TripModel]:
        logger.info(f"Ending trip {trip_id} at {end_time.isoformat()}")

        trip = await self._trip_repo.set_trip_end_time(db, trip_id, end_time)
        if trip is None:
            logger.error(f"Trip {trip_id} not found")
            return None

        # All positions for the vehicle; the window is applied here.
        positions = await self._position_repo.get_positions_by_vehicle_id(
            db, trip.vehicle_id
        )
        trip_positions = positions_in_window(positions, trip.start_time, trip.end_time)
        logger.info(
            f"Trip {trip_id}: {len(trip_positions)} of {len(positions)} positions "
            f"for vehicle {trip.vehicle_id} fall within the trip"
        )

        distance = accumulate_distance_km(trip_positions)
        logger.info(f"Calculated distance for trip {trip_id}: {distance} km")

        updated_trip = await self._trip_repo.update_trip_distance(db, trip_id, distance)
        if updated_trip is None:
            logger.error(f"Trip {trip_id} disappeared before its distance was saved")
        return updated_trip
