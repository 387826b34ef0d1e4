"""
Caption validation for caption-bearing prints.

Key Functions:
    - validate(): Check one caption
    - validate_caption_set(): Check both captions and the font
    - copy_first_to_second(): Convenience copy that re-validates
"""

from .validator import (
    MAX_CAPTION_LENGTH,
    CaptionIssue,
    copy_first_to_second,
    field_errors,
    validate,
    validate_caption_set,
)

__all__ = [
    "MAX_CAPTION_LENGTH",
    "CaptionIssue",
    "copy_first_to_second",
    "field_errors",
    "validate",
    "validate_caption_set",
]
