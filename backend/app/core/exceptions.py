class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SchedulingBlockedError(AppError):
    """Raised when a write is refused because blocking conflicts were detected."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class GroupIdAllocationError(AppError):
    """Raised when no unused joint/split group identifier could be drawn."""
    def __init__(self, group_type: str, attempts: int):
        super().__init__(
            f"Could not allocate a unique {group_type} group id after {attempts} attempts",
            status_code=500,
            details={"group_type": group_type, "attempts": attempts},
        )
