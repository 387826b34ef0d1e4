"""
PhotoSheet Core Package

Shared, immutable data models passed between the viewport engine, the
layout calculator, the workflow machine and the collaborator client.

Models are frozen dataclasses: a new instance is created for any change,
so a value captured for a worker thread can never be mutated under it.
"""

from .models import CaptionSet, CropRegion, ImageAsset

__all__ = [
    "CaptionSet",
    "CropRegion",
    "ImageAsset",
]
