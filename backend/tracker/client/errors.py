# tracker/client/errors.py
from typing import Dict, Optional

class TrackerError(Exception):
    """Base class for client-side tracker errors."""
    pass

class ValidationError(TrackerError):
    """Raised when the assignment form fails client-side checks. Never sent to the server."""
    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(self.errors.values()) or "Invalid assignment")

class TransportError(TrackerError):
    """Raised on a network failure or a non-2xx response. status is None for network failures."""
    def __init__(self, status: Optional[int], message: str):
        self.status = status
        self.message = message
        super().__init__(message)

class NotFoundError(TransportError):
    """Raised on a 404: the referenced id no longer exists server-side."""
    def __init__(self, message: str = "Not found"):
        super().__init__(404, message)
