from http import HTTPStatus
from typing import Optional

from fastapi import HTTPException


class MiddlewareException(HTTPException):
    """Base exception class for middleware errors."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "An error occurred."

    def __init__(
        self,
        status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        message: str = "An error occurred.",
    ):
        self.status_code = status_code
        self.message = message
        super().__init__(status_code, message)


class MissingCustomerIdError(MiddlewareException):
    """Raised when the customer id header is missing."""

    status_code = HTTPStatus.UNAUTHORIZED
    message = "Customer ID is required."

    def __init__(self):
        super().__init__(self.status_code, self.message)


class InvalidCustomerIdError(MiddlewareException):
    """Raised when the customer id header names no known customer."""

    status_code = HTTPStatus.UNAUTHORIZED
    message = "Invalid customer ID."

    def __init__(self, customer_id: Optional[str] = None):
        message = self.message
        if customer_id:
            message += f" ID: {customer_id}"
        super().__init__(self.status_code, message)


class AccessDeniedError(MiddlewareException):
    """Raised when a resource belongs to another customer."""

    status_code = HTTPStatus.FORBIDDEN
    message = "Access denied"

    def __init__(self, resource: str = ""):
        message = self.message
        if resource:
            message += f" - {resource} does not belong to customer"
        super().__init__(self.status_code, message)
