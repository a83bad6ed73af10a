class PositionEventException(Exception):
    """Base exception class for queued position processing errors."""

    message = "An error occurred during position event processing."

    def __init__(
        self, message: str = "An error occurred during position event processing."
    ):
        self.message = message or self.message
        super().__init__(self.message)


class PositionDecodeException(PositionEventException):
    """Exception for payloads that cannot be decoded."""

    message = "Failed to decode base64 position event."

    def __init__(self, payload: str, details: str = ""):
        self.payload = payload
        self.details = details
        message = f"{self.message} Payload: {payload}"
        if details != "":
            message += f" Details: {details}"
        super().__init__(message)


class PositionRedisException(PositionEventException):
    """Exception for Redis operation errors."""

    message = "Failed to perform Redis operation."

    def __init__(self, operation: str, key: str, details: str = ""):
        self.operation = operation
        self.key = key
        self.details = details
        message = f"{self.message} Operation: {operation}, Key: {key}"
        if details != "":
            message += f" Details: {details}"
        super().__init__(message)


class PositionRedisNotInitializedException(PositionEventException):
    """Exception for Redis client not initialized."""

    message = "Redis client is not initialized."

    def __init__(self, operation: str):
        self.operation = operation
        message = f"{self.message} Attempted operation: {operation}"
        super().__init__(message)


class PositionDatabaseException(PositionEventException):
    """Exception for database operation errors."""

    message = "Failed to save position event to database."

    def __init__(self, vehicle_id: int, timestamp: str, details: str = ""):
        self.vehicle_id = vehicle_id
        self.timestamp = timestamp
        self.details = details
        message = f"{self.message} Vehicle ID: {vehicle_id}, Timestamp: {timestamp}"
        if details != "":
            message += f" Details: {details}"
        super().__init__(message)
