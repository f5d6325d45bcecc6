from __future__ import annotations

from typing import Optional

STAGE_EXTRACTION = "extraction"
STAGE_REPORT_LOAD = "report load"
STAGE_CLASSIFICATION = "classification"
STAGE_RENDER = "render"
STAGE_CONFIGURATION = "configuration"


class FeatureStatusError(Exception):
    """
    Base of every fatal error raised by a run.

    `stage` says which part of the run failed, `subject` names the input
    (version, network, path) when there is one.
    """

    stage: str = ""

    def __init__(self, message: str, *, subject: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.subject = subject

    def __str__(self) -> str:
        if self.subject:
            return f"{self.message} ({self.subject})"
        return self.message


class SourceUnavailable(FeatureStatusError):
    """Upstream definition text or a network status document could not be obtained."""

    stage = STAGE_REPORT_LOAD

    def __init__(
        self, message: str, *, subject: Optional[str] = None, stage: Optional[str] = None
    ) -> None:
        super().__init__(message, subject=subject)
        if stage is not None:
            self.stage = stage


class ParseError(FeatureStatusError):
    stage = STAGE_EXTRACTION


class FormatError(FeatureStatusError):
    stage = STAGE_REPORT_LOAD


class ConfigurationError(FeatureStatusError):
    stage = STAGE_CLASSIFICATION

    def __init__(
        self, message: str, *, subject: Optional[str] = None, stage: Optional[str] = None
    ) -> None:
        super().__init__(message, subject=subject)
        if stage is not None:
            self.stage = stage


class WriteError(FeatureStatusError):
    stage = STAGE_RENDER
