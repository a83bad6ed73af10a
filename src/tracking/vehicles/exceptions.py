from http import HTTPStatus

from fastapi import HTTPException


class VehicleNotFoundException(HTTPException):
    """Raised when the vehicle does not exist."""

    status_code = HTTPStatus.NOT_FOUND
    message = "Vehicle not found."

    def __init__(self, vehicle_id: int):
        self.vehicle_id = vehicle_id
        self.message = f"{self.message} Vehicle ID: {vehicle_id}"
        super().__init__(status_code=self.status_code, detail=self.message)
