class RescueError(Exception):
    """Base for domain errors. Rendered as {"message": ...} with status_code."""

    status_code = 500
    default_message = "Operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(RescueError):
    status_code = 400
    default_message = "Invalid input"


class NotFound(RescueError):
    status_code = 404
    default_message = "Not found"


class PermissionDenied(RescueError):
    status_code = 403
    default_message = "Permission denied"


class AlreadyExists(RescueError):
    status_code = 409
    default_message = "Already exists"


class TransitionRejected(RescueError):
    status_code = 409

    def __init__(self, current: str, operation: str):
        self.current = current
        self.operation = operation
        super().__init__(f"Cannot {operation} a request that is {current}")


class VersionConflict(RescueError):
    status_code = 409
    default_message = "Version conflict. Refresh and retry."
