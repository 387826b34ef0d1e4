"""
Module: workflow.uploads

Purpose:
    Local upload guard: the file must exist, be at most the configured
    size and be a JPEG or PNG. The format is sniffed with Pillow from the
    file contents, never trusted from the suffix.

Key Functions:
    - validate_upload_file(): Check a candidate file

Dependencies:
    - Pillow: Format detection

Used By:
    - workflow.transitions: upload guard
    - gui.pages.upload_page: Early feedback before firing the upload
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from photosheet.client.config import ClientConfig
from photosheet.errors import InvalidImageFileError

logger = logging.getLogger(__name__)

# Phone cameras write JPEGs with a multi-picture extension, reported as MPO
FORMAT_ALIASES = {"MPO": "JPEG"}


@dataclass(frozen=True)
class UploadCandidate:
    """A file that passed the upload guard."""

    path: Path
    format: str
    size_bytes: int
    width: int
    height: int


def _format_size(size_bytes: int) -> str:
    return f"{size_bytes / (1024 * 1024):.1f}MB"


def validate_upload_file(
    path: Union[str, Path],
    config: Optional[ClientConfig] = None,
) -> UploadCandidate:
    """
    Validate a file before it is sent to the collaborator.

    Args:
        path: Candidate image file
        config: Limits to apply (defaults to ClientConfig())

    Returns:
        UploadCandidate with the detected format and size

    Raises:
        InvalidImageFileError: Missing file, too large, unreadable, or
            not an accepted format
    """
    config = config or ClientConfig()
    path = Path(path)

    if not path.is_file():
        raise InvalidImageFileError(f"File not found: {path}")

    size = path.stat().st_size
    if size == 0:
        raise InvalidImageFileError(f"{path.name} is empty")
    if size > config.max_upload_bytes:
        raise InvalidImageFileError(
            f"{path.name} is {_format_size(size)}; "
            f"the limit is {_format_size(config.max_upload_bytes)}"
        )

    try:
        with Image.open(path) as img:
            fmt = (img.format or "").upper()
            width, height = img.size
            img.verify()
    except Image.DecompressionBombError as e:
        raise InvalidImageFileError(f"{path.name} has too many pixels to process: {e}") from e
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImageFileError(f"{path.name} is not a readable image: {e}") from e

    fmt = FORMAT_ALIASES.get(fmt, fmt)

    if fmt not in config.accepted_formats:
        accepted = "/".join(sorted(config.accepted_formats))
        raise InvalidImageFileError(f"{path.name} is {fmt or 'unknown'}; please use {accepted}")

    logger.debug(f"Upload candidate {path.name}: {fmt} {width}x{height} {size} bytes")
    return UploadCandidate(path=path, format=fmt, size_bytes=size, width=width, height=height)
