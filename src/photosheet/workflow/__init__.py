"""
Module: workflow

Purpose:
    Step-based workflow for building a photo sheet: upload, paper type,
    crop, enhancement or captions, layout, preview, download/print.

Key Classes:
    - WorkflowMachine: Finite-state machine over (step, variant)
    - WorkflowSession: Session aggregate, replaced on reset
    - PendingCall: Collaborator call captured by WorkflowMachine.fire()
    - Step / Variant: Workflow steps and paper-type variants
"""

from .states import (
    DEFAULT_ENHANCE_LEVEL,
    DEFAULT_PROCESSING_MODE,
    PROCESSING_MODES,
    STEP_SEQUENCES,
    Step,
    Variant,
)
from .session import WorkflowSession
from .uploads import UploadCandidate, validate_upload_file
from .transitions import PREVIEW_FALLBACK_WARNING, TRANSITIONS, Transition
from .machine import PendingCall, WorkflowMachine, fetch_printers

__all__ = [
    "DEFAULT_ENHANCE_LEVEL",
    "DEFAULT_PROCESSING_MODE",
    "PROCESSING_MODES",
    "STEP_SEQUENCES",
    "Step",
    "Variant",
    "WorkflowSession",
    "UploadCandidate",
    "validate_upload_file",
    "PREVIEW_FALLBACK_WARNING",
    "TRANSITIONS",
    "Transition",
    "PendingCall",
    "WorkflowMachine",
    "fetch_printers",
]
