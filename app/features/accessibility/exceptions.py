"""
Scan error taxonomy.

Every failure aborts the whole request with a single error response;
nothing here is retried.
"""
from typing import Optional

from app.platform.exceptions import AppError


class ScanError(AppError):
    """A scan that could not produce a result."""

    prefix = "Failed to analyze"

    def __init__(self, reason: str, *, url: str = "", stage: str = ""):
        super().__init__(f"{self.prefix}: {reason}")
        self.reason = reason
        self.url = url
        self.stage = stage


class LaunchError(ScanError):
    """The browser process or its session could not be created."""


class NavigationError(ScanError):
    """A remote-control call failed (navigation, evaluate, wait)."""


class EngineLoadTimeout(ScanError):
    """The accessibility engine never became callable in the page."""


class AnalysisTimeout(ScanError):
    """The engine did not finish its run in time."""


class SessionTimeout(ScanError):
    """The overall per-request deadline elapsed."""


class AnalysisEngineError(ScanError):
    """The engine itself rejected while running inside the page."""


class ResultParseError(ScanError):
    """The serialized violations could not be decoded."""

    prefix = "Failed to parse results"

    def __init__(self, reason: str, *, raw: Optional[str] = None, url: str = "", stage: str = "parse"):
        super().__init__(reason, url=url, stage=stage)
        self.raw = raw


class ResponseEncodingError(ScanError):
    """The final JSON body could not be produced."""

    def __init__(self, reason: str, *, url: str = "", stage: str = "encode"):
        super().__init__(reason, url=url, stage=stage)
        self.message = "Failed to encode response"
