from src.tracking.positions.repositories import PositionRepository
from src.tracking.trips.repositories import TripRepository
from src.tracking.trips.services import TripLifecycleService

trip_repo: TripRepository = TripRepository()
trip_service: TripLifecycleService = TripLifecycleService(
    PositionRepository(), trip_repo
)


def get_trip_repository() -> TripRepository:
    return trip_repo


def get_trip_service() -> TripLifecycleService:
    return trip_service
