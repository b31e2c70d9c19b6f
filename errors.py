"""Error taxonomy for the analysis gateway.

Every error here is terminal for the request and is reported to the caller as
``{"error": <message>}`` with the carried status code.
"""
from typing import Optional


class AnalysisError(Exception):
    """Base exception for the analysis gateway"""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InvalidInput(AnalysisError):
    def __init__(self, message: str = "No image data provided"):
        super().__init__(message)


class ConfigError(AnalysisError):
    def __init__(self, message: str = "FLOWCHART_API_KEY is not configured"):
        super().__init__(message)


class UpstreamError(AnalysisError):
    """Provider answered with a non-2xx status, or could not be reached (status None)."""

    def __init__(self, status: Optional[int], reason: Optional[str] = None):
        self.status = status
        if status is not None:
            message = f"Upstream error: {status}"
        else:
            message = f"Upstream request failed: {reason or 'unknown error'}"
        super().__init__(message)


class EmptyResponse(AnalysisError):
    def __init__(self, message: str = "No content in AI response"):
        super().__init__(message)
