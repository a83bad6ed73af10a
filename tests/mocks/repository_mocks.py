"""In-memory stand-ins for the position and trip repositories."""

from types import SimpleNamespace
from typing import List, Optional

from src.tracking.positions.repositories import IPositionRepository
from src.tracking.trips.repositories import ITripRepository
from src.tracking.utils import to_utc, utcnow


def make_position(position_id, vehicle_id, latitude, longitude, timestamp):
    return SimpleNamespace(
        id=position_id,
        vehicle_id=vehicle_id,
        latitude=latitude,
        longitude=longitude,
        speed=None,
        ignition=None,
        timestamp=timestamp,
    )


class FakePositionRepository(IPositionRepository):
    def __init__(self, positions=None):
        self.positions = list(positions or [])
        self.requested_limits = []

    async def get_positions_by_vehicle_id(self, db, vehicle_id, limit=None):
        self.requested_limits.append(limit)
        rows = [p for p in self.positions if p.vehicle_id == vehicle_id]
        rows.sort(key=lambda p: p.timestamp, reverse=True)
        return rows if limit is None else rows[:limit]

    async def create_position(self, db, position):
        model = make_position(
            len(self.positions) + 1,
            position.vehicle_id,
            position.latitude,
            position.longitude,
            position.timestamp or utcnow(),
        )
        self.positions.append(model)
        return model

    async def get_last_position(self, db, vehicle_id):
        rows = await self.get_positions_by_vehicle_id(db, vehicle_id, 1)
        return rows[0] if rows else None

    async def get_current_positions_by_customer_id(self, db, customer_id):
        return []


class FakeTripRepository(ITripRepository):
    def __init__(self, trips=None):
        self.trips = {t.id: t for t in (trips or [])}
        self.distance_writes: List[float] = []
        self.end_time_writes = []

    async def get_trip_by_id(self, db, trip_id) -> Optional[SimpleNamespace]:
        return self.trips.get(trip_id)

    async def get_active_trip_for_vehicle(self, db, vehicle_id):
        active = [
            t
            for t in self.trips.values()
            if t.vehicle_id == vehicle_id and t.end_time is None
        ]
        active.sort(key=lambda t: t.start_time, reverse=True)
        return active[0] if active else None

    async def create_trip(self, db, trip_data):
        trip = SimpleNamespace(
            id=max(self.trips, default=0) + 1,
            vehicle_id=trip_data.vehicle_id,
            driver_id=trip_data.driver_id,
            start_time=trip_data.start_time or utcnow(),
            end_time=trip_data.end_time,
            distance=trip_data.distance,
        )
        self.trips[trip.id] = trip
        return trip

    async def set_trip_end_time(self, db, trip_id, end_time):
        trip = self.trips.get(trip_id)
        if trip is None:
            return None
        trip.end_time = to_utc(end_time)
        self.end_time_writes.append(trip.end_time)
        return trip

    async def update_trip_distance(self, db, trip_id, distance):
        trip = self.trips.get(trip_id)
        if trip is None:
            return None
        trip.distance = distance
        self.distance_writes.append(distance)
        return trip
