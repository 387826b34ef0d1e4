"""
Core Models Package

| Model | Produced by | Consumed by |
|-------|-------------|-------------|
| `ImageAsset` | upload transition | viewport engine, GUI |
| `CropRegion` | viewport engine | workflow, collaborator |
| `CaptionSet` | caption step | workflow, collaborator |
"""

from .image import ImageAsset
from .crop import CropRegion
from .captions import CaptionSet

__all__ = [
    "ImageAsset",
    "CropRegion",
    "CaptionSet",
]
