from http import HTTPStatus

from fastapi import HTTPException


class CustomerException(HTTPException):
    """Base exception class for customer errors."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "An error occurred while handling the customer."

    def __init__(
        self,
        status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        message: str = "An error occurred while handling the customer.",
    ):
        self.status_code = status_code
        self.message = message or self.message
        super().__init__(status_code=status_code, detail=self.message)


class InvalidCredentialsException(CustomerException):
    """Raised when login names an unknown customer."""

    status_code = HTTPStatus.UNAUTHORIZED
    message = "Invalid credentials."

    def __init__(self, identifier: str):
        self.identifier = identifier
        message = f"{self.message} Identifier: {identifier}"
        super().__init__(status_code=self.status_code, message=message)


class EmailAlreadyRegisteredException(CustomerException):
    """Raised when signing up with an email that is taken."""

    status_code = HTTPStatus.CONFLICT
    message = "Email is already registered."

    def __init__(self, email: str):
        self.email = email
        message = f"{self.message} Email: {email}"
        super().__init__(status_code=self.status_code, message=message)


class MissingLoginIdentifierException(CustomerException):
    """Raised when login carries neither a customer id nor an email."""

    status_code = HTTPStatus.BAD_REQUEST
    message = "Customer ID or email is required."

    def __init__(self):
        super().__init__(status_code=self.status_code, message=self.message)
