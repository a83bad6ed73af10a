from datetime import datetime
from http import HTTPStatus

from fastapi import HTTPException


class TripException(HTTPException):
    """Base exception class for trip-related errors."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "An error occurred in trip processing."

    def __init__(
        self,
        status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        message: str = "An error occurred in trip processing.",
    ):
        self.status_code = status_code
        self.message = message or self.message
        super().__init__(status_code=status_code, detail=self.message)


class TripNotFoundException(TripException):
    """Raised when the trip does not exist."""

    status_code = HTTPStatus.NOT_FOUND
    message = "Trip not found."

    def __init__(self, trip_id: int):
        self.trip_id = trip_id
        message = f"{self.message} Trip ID: {trip_id}"
        super().__init__(status_code=self.status_code, message=message)


class TripAlreadyEndedException(TripException):
    """Raised when ending a trip whose end time is already set."""

    status_code = HTTPStatus.BAD_REQUEST
    message = "Trip has already been ended."

    def __init__(self, trip_id: int):
        self.trip_id = trip_id
        message = f"{self.message} Trip ID: {trip_id}"
        super().__init__(status_code=self.status_code, message=message)


class TripInvalidRangeException(TripException):
    """Raised when a trip would end before it started."""

    status_code = HTTPStatus.BAD_REQUEST
    message = "end_time must be after or equal to start_time."

    def __init__(self, start_time: datetime, end_time: datetime):
        self.start_time = start_time
        self.end_time = end_time
        message = (
            f"{self.message} Start: {start_time.isoformat()}, "
            f"End: {end_time.isoformat()}"
        )
        super().__init__(status_code=self.status_code, message=message)
