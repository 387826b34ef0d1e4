"""
Module: captions

Purpose:
    CaptionSet - the two captions and font printed under caption-style
    (polaroid) photos, plus the fixed font catalogue.

Used By:
    - captions.validator: validates a CaptionSet field by field
    - workflow.transitions: previewCaptionSheet request
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

DEFAULT_FONT_ID = "default"

# Font id -> display name. Font files live with the collaborator.
AVAILABLE_FONTS: Dict[str, str] = {
    "default": "Default",
    "handwriting_01": "Handwriting 1",
    "handwriting_02": "Handwriting 2",
    "script_01": "Script 1",
    "script_02": "Script 2",
    "elegant_01": "Elegant",
    "playful_01": "Playful",
    "vintage_01": "Vintage",
    "modern_01": "Modern",
    "casual_01": "Casual",
    "artistic_01": "Artistic",
}


@dataclass(frozen=True, slots=True)
class CaptionSet:
    """
    Captions for a caption print (immutable).

    Construction does not validate the text; run
    captions.validator.validate_caption_set() before submitting.

    Attributes:
        text1: Caption under the first photo (may be empty)
        text2: Caption under the second photo (may be empty)
        font_id: Key into AVAILABLE_FONTS
    """

    text1: str = ""
    text2: str = ""
    font_id: str = DEFAULT_FONT_ID

    @property
    def texts(self) -> Tuple[str, str]:
        return (self.text1, self.text2)

    @property
    def is_blank(self) -> bool:
        """True when neither caption has text."""
        return not self.text1 and not self.text2

    def with_second_from_first(self) -> "CaptionSet":
        """Copy text1 into text2."""
        return CaptionSet(self.text1, self.text1, self.font_id)

    def cleared(self) -> "CaptionSet":
        """Empty both captions, keep the font."""
        return CaptionSet("", "", self.font_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"text1": self.text1, "text2": self.text2, "font_name": self.font_id}
