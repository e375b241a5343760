"""Error types raised by the meeting-promo pipeline.

Every error is fatal for the run: callers add context once and re-raise.
"""

from __future__ import annotations

from typing import List, Optional


class PromoError(Exception):
    """Base class for all meeting-promo failures."""


class MissingInputError(PromoError):
    """No input file was given, or a template could not be found."""


class SchemaValidationError(PromoError):
    """Input (or an API response) does not match the expected structure."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: " + "; ".join(self.errors)
        super().__init__(message)


class MissingCredentialError(PromoError):
    """The API key environment variable is not set."""


class GenerationContractViolation(PromoError):
    """The generative API did not return the required structured result."""

    def __init__(self, message: str, stage: Optional[str] = None):
        self.stage = stage
        if stage:
            message = f"[{stage}] {message}"
        super().__init__(message)


class IoError(PromoError, OSError):
    """Reading input or writing output failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)
