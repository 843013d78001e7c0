"""
Shared errors for script evaluation.
"""


class EvaluationError(Exception):
    """Base exception for every failure surfaced by an evaluation."""

    pass


class ValidationError(EvaluationError):
    """Raised when an evaluation request is missing or has malformed fields."""

    pass


class RemoteCallError(EvaluationError):
    """Raised when the remote text-generation call fails or returns an error status."""

    pass


class MalformedPayloadError(EvaluationError):
    """Raised when a remote response cannot be parsed into the expected shape."""

    def __init__(self, message: str, payload: str = ""):
        super().__init__(message)
        self.payload = payload
