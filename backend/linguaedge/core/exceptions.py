"""Exception types raised inside the edge and engine boundaries.

Every boundary catches these and converts them into its fall-back
outcome; none of them ever reaches the end user.
"""

from typing import Optional


class LinguaEdgeError(Exception):
    """Base exception for all LinguaEdge errors."""
    pass


class CollaboratorError(LinguaEdgeError):
    """Raised when a remote collaborator call fails or returns garbage.

    Attributes:
        endpoint: URL that was called
        status_code: HTTP status, when a response was received
    """
    def __init__(self, message: str, endpoint: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


class OriginError(LinguaEdgeError):
    """Raised when the origin site cannot be reached."""
    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url
