"""Exceptions raised by the flow engine."""

REMEDIATION_MESSAGE = (
    "Save failed. Please ensure every step has text + at least 1 option, and root exists."
)


class FlowError(Exception):
    """Base exception for flow engine errors."""


class ValidationError(FlowError):
    """Raised when a graph cannot be cleaned into a savable flow."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
        self.remediation = REMEDIATION_MESSAGE


class PersistenceError(FlowError):
    """Raised when a flow or config store call fails."""

    def __init__(self, message: str, operation: str, status_code: int | None = None):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code


class NavigationError(FlowError):
    """Raised when a non-sentinel option points at a missing step."""

    def __init__(self, next_id: str):
        super().__init__(f'Step not found: "{next_id}"')
        self.next_id = next_id
