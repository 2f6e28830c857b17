class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(AppError):
    """Raised for missing, malformed or mutually incompatible input."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class InvalidReferenceError(ValidationError):
    """Raised when an id supplied by the caller does not resolve to a stored record."""
    def __init__(self, resource_type: str, resource_id):
        super().__init__(
            f"Invalid {resource_type} id: {resource_id}",
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )

class ConflictError(AppError):
    """Raised when a room or teacher is already booked for the requested period."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class ConstraintError(AppError):
    """Raised when a section quota or a teacher workload ceiling would be exceeded."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class NotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )
