from http import HTTPStatus

from fastapi import HTTPException


class PositionNotFoundException(HTTPException):
    """Raised when a vehicle has no recorded position yet."""

    status_code = HTTPStatus.NOT_FOUND
    message = "No position data found for vehicle."

    def __init__(self, vehicle_id: int):
        self.vehicle_id = vehicle_id
        self.message = f"{self.message} Vehicle ID: {vehicle_id}"
        super().__init__(status_code=self.status_code, detail=self.message)
