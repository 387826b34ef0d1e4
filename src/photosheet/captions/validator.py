"""
Module: captions.validator

Purpose:
    Validate caption strings for caption prints. Each field is validated
    independently; an empty caption is valid because captions are optional.

Key Functions:
    - validate(text): Return a CaptionIssue or None
    - field_errors(captions): Per-field issues for a CaptionSet
    - validate_caption_set(captions): Raise on any issue
    - copy_first_to_second(captions): Copy text1 to text2 and re-validate

Used By:
    - workflow.transitions: submit_captions guard
    - gui.pages.caption_page: live per-field feedback
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from photosheet.core.models.captions import AVAILABLE_FONTS, CaptionSet
from photosheet.errors import CaptionValidationError, UnknownFontError

MAX_CAPTION_LENGTH = 50
FORBIDDEN_CHARACTERS = ("\n", "\r", "\t")


class CaptionIssue(Enum):
    """Why a caption was rejected."""

    TOO_LONG = "too_long"
    INVALID_CHARACTER = "invalid_character"

    @property
    def message(self) -> str:
        if self is CaptionIssue.TOO_LONG:
            return f"Text must be {MAX_CAPTION_LENGTH} characters or less"
        return "Text cannot contain line breaks or tabs"

    def __str__(self) -> str:
        return self.value


def validate(text: str) -> Optional[CaptionIssue]:
    """
    Validate a single caption.

    Length is checked before characters, so a 60-character string with
    a tab reports TOO_LONG.

    Args:
        text: Caption text

    Returns:
        None when valid, otherwise the first issue found

    Example:
        >>> validate("a" * 50) is None
        True
        >>> validate("a" * 51)
        <CaptionIssue.TOO_LONG: 'too_long'>
    """
    if len(text) > MAX_CAPTION_LENGTH:
        return CaptionIssue.TOO_LONG
    if any(ch in text for ch in FORBIDDEN_CHARACTERS):
        return CaptionIssue.INVALID_CHARACTER
    return None


def field_errors(captions: CaptionSet) -> Dict[str, CaptionIssue]:
    """Map of field name to issue, only for fields that failed."""
    issues: Dict[str, CaptionIssue] = {}
    for name, text in (("text1", captions.text1), ("text2", captions.text2)):
        issue = validate(text)
        if issue is not None:
            issues[name] = issue
    return issues


def validate_caption_set(captions: CaptionSet) -> None:
    """
    Validate both captions and the font.

    Raises:
        CaptionValidationError: If either caption fails (carries per-field issues)
        UnknownFontError: If font_id is not in the catalogue
    """
    issues = field_errors(captions)
    if issues:
        raise CaptionValidationError(issues)
    if captions.font_id not in AVAILABLE_FONTS:
        raise UnknownFontError(f"Unknown font: {captions.font_id!r}")


def copy_first_to_second(captions: CaptionSet) -> Tuple[CaptionSet, Optional[CaptionIssue]]:
    """
    Copy the first caption into the second.

    Returns:
        (updated CaptionSet, issue for the copied text2 or None)
    """
    updated = captions.with_second_from_first()
    return updated, validate(updated.text2)
