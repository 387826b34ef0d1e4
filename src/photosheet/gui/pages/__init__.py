"""
One page per workflow step, shown by MainWindow in a QStackedWidget.
"""
from .base import StepPage
from .upload_page import UploadPage
from .paper_page import PaperPage
from .crop_page import CropPage
from .enhance_page import EnhancePage
from .caption_page import CaptionPage
from .layout_page import LayoutPage
from .processing_page import ProcessingPage
from .preview_page import PreviewPage
from .done_page import DonePage

__all__ = [
    "StepPage",
    "UploadPage",
    "PaperPage",
    "CropPage",
    "EnhancePage",
    "CaptionPage",
    "LayoutPage",
    "ProcessingPage",
    "PreviewPage",
    "DonePage",
]
