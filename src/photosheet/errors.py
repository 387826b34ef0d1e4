"""
Module: errors

Purpose:
    Exception taxonomy shared by every PhotoSheet layer.

    - ValidationError: bad input caught locally, never sent to the collaborator
    - CollaboratorError: a remote call failed; recoverable and retryable
    - PrintEnvironmentError: the machine cannot print; a fallback exists
    - TransitionError: the workflow refused a step change

Used By:
    - photosheet.viewport: crop normalisation failures
    - photosheet.captions: caption field failures
    - photosheet.workflow: guards and in-flight checks
    - photosheet.client: transport failures
    - photosheet.gui: surfaced to the user
"""

from __future__ import annotations

from typing import Dict, Optional


class PhotoSheetError(Exception):
    """Base error for the package."""
    pass


# =============================================================================
# Validation (local, before any network call)
# =============================================================================

class ValidationError(PhotoSheetError):
    """Input rejected before reaching the collaborator."""
    pass


class InvalidImageFileError(ValidationError):
    """Upload candidate has the wrong type or is too large."""
    pass


class InvalidCropError(ValidationError):
    """Crop rectangle is degenerate or falls outside the image."""
    pass


class ImageNotLoadedError(ValidationError):
    """Natural image dimensions are not known yet."""
    pass


class UnknownPaperTypeError(ValidationError):
    """Paper layout key is not in the layout table."""
    pass


class UnknownFontError(ValidationError):
    """Caption font is not in the font catalogue."""
    pass


class CaptionValidationError(ValidationError):
    """
    One or both captions failed validation.

    Attributes:
        issues: Mapping of field name ("text1"/"text2") to CaptionIssue
    """

    def __init__(self, issues: Dict[str, object]) -> None:
        self.issues = dict(issues)
        detail = ", ".join(f"{name}: {issue}" for name, issue in sorted(self.issues.items()))
        super().__init__(f"Invalid caption ({detail})")


# =============================================================================
# Collaborator (remote) failures
# =============================================================================

class CollaboratorError(PhotoSheetError):
    """
    Remote processing call failed.

    The workflow never advances on this error and keeps no partial state,
    so the same action can be retried.

    Attributes:
        operation: Collaborator operation name (e.g. "upload_image")
        status: HTTP status code when one was received
        retryable: Always True for now; kept for the UI's retry affordance
    """

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        status: Optional[int] = None,
        retryable: bool = True,
    ) -> None:
        self.operation = operation
        self.message = message
        self.status = status
        self.retryable = retryable
        super().__init__(f"{operation} failed: {message}")


class PrintEnvironmentError(PhotoSheetError):
    """Local printing environment cannot complete the request."""
    pass


class PrinterUnavailableError(PrintEnvironmentError):
    """
    No printer could take the job.

    Attributes:
        fallback: Suggested recovery path ("download" then print manually)
    """

    def __init__(self, message: str = "No printer available", fallback: str = "download") -> None:
        self.fallback = fallback
        super().__init__(message)


# =============================================================================
# Workflow
# =============================================================================

class TransitionError(PhotoSheetError):
    """Requested transition is not allowed from the current step."""
    pass


class BusyError(TransitionError):
    """A collaborator call is already in flight for this session."""
    pass
