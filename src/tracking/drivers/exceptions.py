from http import HTTPStatus

from fastapi import HTTPException


class DriverNotFoundException(HTTPException):
    """Raised when the driver does not exist."""

    status_code = HTTPStatus.NOT_FOUND
    message = "Driver not found."

    def __init__(self, driver_id: int):
        self.driver_id = driver_id
        self.message = f"{self.message} Driver ID: {driver_id}"
        super().__init__(status_code=self.status_code, detail=self.message)
