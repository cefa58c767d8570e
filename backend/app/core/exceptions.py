class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )

class ConflictError(AppError):
    """Raised when a write would violate a uniqueness rule."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class PermissionDeniedError(AppError):
    """Raised when a role may read a record but not modify it."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=403, details=details)

class ImportFormatError(AppError):
    """Raised when an import payload has no recognizable record list."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)

class InvalidInputError(AppError):
    """Raised when a value fails a domain rule that schemas cannot express."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)
