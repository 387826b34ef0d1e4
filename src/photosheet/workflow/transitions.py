"""
Module: workflow.transitions

Purpose:
    Transition table for the workflow state machine.

    Every transition is declared once, keyed by (source step, variant).
    A transition carries:
    - prepare: guard that validates parameters and returns the immutable
      arguments captured for the call (raises ValidationError)
    - request: the collaborator call, run on a worker thread
    - apply: commits the call's result (or the local change) to a session

    Adding a paper-type variant means adding rows here; nothing else in
    the machine branches on the variant.

Key Classes:
    - Transition: One table row

Key Functions:
    - lookup(): Transition by name for a step/variant
    - available(): All transitions allowed for a step/variant
    - back_target(): Step reached by back-navigation

Used By:
    - workflow.machine: WorkflowMachine
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from photosheet.captions import validate_caption_set
from photosheet.client.config import ClientConfig
from photosheet.client.http import save_sheet
from photosheet.client.interface import ProcessingClient
from photosheet.core.models import CaptionSet, CropRegion, ImageAsset
from photosheet.errors import (
    ImageNotLoadedError,
    InvalidCropError,
    TransitionError,
    UnknownPaperTypeError,
    ValidationError,
)
from photosheet.layout import PaperType, available_layouts, layout_for

from .session import WorkflowSession
from .states import PROCESSING_MODES, Step, Variant
from .uploads import validate_upload_file

logger = logging.getLogger(__name__)

Args = Mapping[str, Any]
Prepare = Callable[[WorkflowSession, ClientConfig, Dict[str, Any]], Dict[str, Any]]
Request = Callable[[ProcessingClient, Args], Any]
Apply = Callable[[WorkflowSession, Args, Any], None]

PREVIEW_FALLBACK_WARNING = "Sheet preview unavailable; showing the processed photo instead."

# Mode sent with applyCrop for caption prints (no background replacement)
CAPTION_PRINT_MODE = "studio"

# Transitions whose failure can fall back to showing the processed photo
PREVIEW_TRANSITIONS = ("choose_layout", "submit_captions")


@dataclass(frozen=True)
class Transition:
    """
    One row of the transition table.

    Attributes:
        name: Transition name passed to WorkflowMachine.fire()
        source: Step the transition starts from
        target: Step reached when it succeeds
        variant: Variant it applies to (None = any)
        prepare: Parameter guard returning captured arguments
        request: Collaborator call (None for local transitions)
        apply: Commit function
        operation: Collaborator operation name, for logs and errors
        via_processing: Show PROCESSING while the call is in flight
    """

    name: str
    source: Step
    target: Step
    variant: Optional[Variant]
    prepare: Prepare
    apply: Apply
    request: Optional[Request] = None
    operation: str = ""
    via_processing: bool = False

    @property
    def is_remote(self) -> bool:
        return self.request is not None

    def capture(self, session: WorkflowSession, config: ClientConfig, params: Dict[str, Any]) -> Args:
        """Run the guard and freeze the arguments it returns."""
        return MappingProxyType(dict(self.prepare(session, config, params)))


# =============================================================================
# Guards
# =============================================================================

def _no_params(session: WorkflowSession, config: ClientConfig, params: Dict[str, Any]) -> Dict[str, Any]:
    return {}


def _require_image(session: WorkflowSession) -> ImageAsset:
    if session.image is None:
        raise ImageNotLoadedError("No image has been uploaded")
    return session.image


def _require_processed(session: WorkflowSession) -> str:
    if not session.processed_image_id:
        raise ValidationError("The photo has not been processed yet")
    return session.processed_image_id


def _processing_options(session: WorkflowSession, params: Dict[str, Any]) -> Tuple[str, float]:
    mode = str(params.get("mode", session.processing_mode))
    if mode not in PROCESSING_MODES:
        raise ValidationError(f"Unknown processing mode {mode!r}")
    try:
        level = float(params.get("enhance_level", session.enhance_level))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid enhancement level {params.get('enhance_level')!r}") from None
    if not 0.0 <= level <= 1.0:
        raise ValidationError(f"Enhancement level must be between 0 and 1: {level}")
    return mode, level


def _prepare_upload(session, config, params):
    path = params.get("path")
    if path is None:
        raise ValidationError("No file selected")
    candidate = validate_upload_file(path, config)
    return {"path": candidate.path, "format": candidate.format, "size_bytes": candidate.size_bytes}


def _prepare_paper(session, config, params):
    raw = params.get("variant")
    try:
        variant = raw if isinstance(raw, Variant) else Variant(str(raw).strip().lower())
    except ValueError:
        raise UnknownPaperTypeError(f"Unknown paper type {raw!r}") from None
    return {"variant": variant}


def _prepare_crop(session, config, params):
    image = _require_image(session)
    crop = params.get("crop")
    if not isinstance(crop, CropRegion):
        raise InvalidCropError("No crop region was provided")
    if (crop.natural_width, crop.natural_height) != (image.natural_width, image.natural_height):
        raise InvalidCropError(
            f"Crop was computed for {crop.natural_width}x{crop.natural_height}, "
            f"image is {image.natural_width}x{image.natural_height}"
        )
    if session.variant is Variant.POLAROID:
        mode, level = CAPTION_PRINT_MODE, session.enhance_level
    else:
        mode, level = _processing_options(session, params)
    return {"image_id": image.id, "crop": crop, "mode": mode, "enhance_level": level}


def _prepare_reapply(session, config, params):
    image = _require_image(session)
    if session.crop is None:
        raise InvalidCropError("No crop has been confirmed")
    mode, level = _processing_options(session, params)
    return {"image_id": image.id, "crop": session.crop, "mode": mode, "enhance_level": level}


def _prepare_accept(session, config, params):
    _require_processed(session)
    return {}


def _prepare_layout(session, config, params):
    image_id = _require_processed(session)
    raw = params.get("layout")
    offered = {spec.type: spec for spec in available_layouts(caption_print=False)}
    try:
        key = raw if isinstance(raw, PaperType) else PaperType(str(raw).strip().lower())
    except ValueError:
        key = None
    if key not in offered:
        names = ", ".join(t.value for t in offered)
        raise UnknownPaperTypeError(f"Unknown layout {raw!r} (expected one of: {names})")
    return {"image_id": image_id, "layout": offered[key]}


def _prepare_captions(session, config, params):
    image_id = _require_processed(session)
    captions = params.get("captions", session.captions)
    if not isinstance(captions, CaptionSet):
        raise ValidationError("Captions must be a CaptionSet")
    validate_caption_set(captions)
    return {"image_id": image_id, "captions": captions, "layout": layout_for(PaperType.POLAROID)}


def _sheet_args(session: WorkflowSession) -> Dict[str, Any]:
    image_id = _require_processed(session)
    if session.layout is None:
        raise ValidationError("No sheet layout has been chosen")
    captions = session.captions if session.variant is Variant.POLAROID else None
    return {"image_id": image_id, "layout": session.layout, "captions": captions}


def _prepare_download(session, config, params):
    args = _sheet_args(session)
    folder = params.get("folder")
    args["folder"] = Path(folder) if folder else None
    args["timeout"] = config.timeout_seconds
    return args


def _prepare_print(session, config, params):
    args = _sheet_args(session)
    try:
        copies = int(params.get("copies", 1))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid copy count {params.get('copies')!r}") from None
    if copies < 1:
        raise ValidationError(f"Copies must be at least 1: {copies}")
    args["copies"] = copies
    args["printer_id"] = params.get("printer_id")
    return args


def _prepare_fallback(session, config, params):
    if session.failed_transition not in PREVIEW_TRANSITIONS or session.failed_args is None:
        raise TransitionError("No sheet preview has failed")
    if not session.processed_image:
        raise ValidationError("No processed photo is available to show")
    failed = session.failed_args
    return {"layout": failed["layout"], "captions": failed.get("captions")}


# =============================================================================
# Requests (worker thread)
# =============================================================================

def _request_upload(client: ProcessingClient, args: Args) -> Any:
    return client.upload_image(args["path"])


def _request_crop(client: ProcessingClient, args: Args) -> Any:
    return client.apply_crop(args["image_id"], args["crop"], args["mode"], args["enhance_level"])


def _request_preview(client: ProcessingClient, args: Args) -> Any:
    return client.preview_sheet(args["image_id"], args["layout"])


def _request_caption_preview(client: ProcessingClient, args: Args) -> Any:
    return client.preview_caption_sheet(args["image_id"], args["captions"])


def _request_download(client: ProcessingClient, args: Args) -> Any:
    if args["captions"] is not None:
        sheet = client.download_caption_sheet(args["image_id"], args["captions"])
    else:
        sheet = client.download_sheet(args["image_id"], args["layout"])
    saved = None
    if args["folder"] is not None:
        saved = save_sheet(sheet, args["folder"], timeout=args["timeout"])
    return (sheet, saved)


def _request_print(client: ProcessingClient, args: Args) -> Any:
    return client.print_sheet(
        args["image_id"],
        args["layout"],
        printer_id=args["printer_id"],
        copies=args["copies"],
        captions=args["captions"],
    )


# =============================================================================
# Apply (UI thread, on a draft session)
# =============================================================================

def _apply_upload(session: WorkflowSession, args: Args, result: Any) -> None:
    path: Path = args["path"]
    session.source_path = path
    session.image = ImageAsset(
        id=result.image_id,
        display_url=result.display_url or path.resolve().as_uri(),
        natural_width=result.natural_width,
        natural_height=result.natural_height,
    )
    session.face_detected = result.face_detected


def _apply_paper(session: WorkflowSession, args: Args, result: Any) -> None:
    if session.variant is not args["variant"]:
        session.crop = None
        session.layout = None
        session.clear_results()
    session.variant = args["variant"]


def _apply_crop(session: WorkflowSession, args: Args, result: Any) -> None:
    session.clear_results()
    session.crop = args["crop"]
    session.processing_mode = args["mode"]
    session.enhance_level = args["enhance_level"]
    session.processed_image_id = result.processed_image_id
    session.processed_image = result.processed_image or None
    session.before_image = result.before_image
    session.after_image = result.after_image
    session.face_confidence = result.face_confidence


def _apply_nothing(session: WorkflowSession, args: Args, result: Any) -> None:
    pass


def _apply_preview(session: WorkflowSession, args: Args, result: Any) -> None:
    session.clear_sheet()
    session.layout = args["layout"]
    if "captions" in args:
        session.captions = args["captions"]
    session.preview_image = result.preview_image


def _apply_download(session: WorkflowSession, args: Args, result: Any) -> None:
    sheet, saved = result
    session.sheet_file = sheet
    session.saved_path = saved


def _apply_print(session: WorkflowSession, args: Args, result: Any) -> None:
    session.print_result = result


def _apply_fallback(session: WorkflowSession, args: Args, result: Any) -> None:
    session.clear_sheet()
    session.layout = args["layout"]
    if args["captions"] is not None:
        session.captions = args["captions"]
    session.preview_image = session.processed_image
    session.preview_warning = PREVIEW_FALLBACK_WARNING
    logger.warning(PREVIEW_FALLBACK_WARNING)


# =============================================================================
# Table
# =============================================================================

def _sheet_rows(variant: Variant, preview_source: Step) -> List[Transition]:
    return [
        Transition(
            "download", Step.PREVIEW, Step.DONE, variant,
            prepare=_prepare_download, request=_request_download, apply=_apply_download,
            operation="download_sheet",
        ),
        Transition(
            "print", Step.PREVIEW, Step.DONE, variant,
            prepare=_prepare_print, request=_request_print, apply=_apply_print,
            operation="print_sheet",
        ),
        Transition(
            "use_processed_photo", preview_source, Step.PREVIEW, variant,
            prepare=_prepare_fallback, apply=_apply_fallback,
        ),
    ]


TRANSITIONS: Tuple[Transition, ...] = (
    Transition(
        "upload", Step.UPLOAD, Step.PAPER_TYPE, None,
        prepare=_prepare_upload, request=_request_upload, apply=_apply_upload,
        operation="upload_image",
    ),
    Transition(
        "choose_paper", Step.PAPER_TYPE, Step.CROP, None,
        prepare=_prepare_paper, apply=_apply_paper,
    ),
    # Identity photos
    Transition(
        "confirm_crop", Step.CROP, Step.ENHANCE, Variant.PASSPORT,
        prepare=_prepare_crop, request=_request_crop, apply=_apply_crop,
        operation="apply_crop",
    ),
    Transition(
        "reapply_enhancement", Step.ENHANCE, Step.ENHANCE, Variant.PASSPORT,
        prepare=_prepare_reapply, request=_request_crop, apply=_apply_crop,
        operation="apply_crop",
    ),
    Transition(
        "accept_enhancement", Step.ENHANCE, Step.LAYOUT_SELECT, Variant.PASSPORT,
        prepare=_prepare_accept, apply=_apply_nothing,
    ),
    Transition(
        "choose_layout", Step.LAYOUT_SELECT, Step.PREVIEW, Variant.PASSPORT,
        prepare=_prepare_layout, request=_request_preview, apply=_apply_preview,
        operation="preview_sheet", via_processing=True,
    ),
    *_sheet_rows(Variant.PASSPORT, Step.LAYOUT_SELECT),
    # Caption prints
    Transition(
        "confirm_crop", Step.CROP, Step.CAPTION_TEXT, Variant.POLAROID,
        prepare=_prepare_crop, request=_request_crop, apply=_apply_crop,
        operation="apply_crop",
    ),
    Transition(
        "submit_captions", Step.CAPTION_TEXT, Step.PREVIEW, Variant.POLAROID,
        prepare=_prepare_captions, request=_request_caption_preview, apply=_apply_preview,
        operation="preview_caption_sheet", via_processing=True,
    ),
    *_sheet_rows(Variant.POLAROID, Step.CAPTION_TEXT),
)


def _index(rows: Tuple[Transition, ...]) -> Dict[Tuple[Step, Optional[Variant]], Dict[str, Transition]]:
    table: Dict[Tuple[Step, Optional[Variant]], Dict[str, Transition]] = {}
    for row in rows:
        bucket = table.setdefault((row.source, row.variant), {})
        if row.name in bucket:
            raise ValueError(f"Duplicate transition {row.name!r} from {row.source.value}")
        bucket[row.name] = row
    return table


_TABLE = _index(TRANSITIONS)

# Back-navigation: (step, variant) -> previous data-bearing step
BACK_TARGETS: Dict[Tuple[Step, Optional[Variant]], Step] = {
    (Step.CROP, None): Step.PAPER_TYPE,
    (Step.ENHANCE, Variant.PASSPORT): Step.CROP,
    (Step.CAPTION_TEXT, Variant.POLAROID): Step.CROP,
    (Step.LAYOUT_SELECT, Variant.PASSPORT): Step.ENHANCE,
    (Step.PREVIEW, Variant.PASSPORT): Step.LAYOUT_SELECT,
    (Step.PREVIEW, Variant.POLAROID): Step.CAPTION_TEXT,
    (Step.DONE, None): Step.PREVIEW,
}


def available(step: Step, variant: Optional[Variant]) -> Dict[str, Transition]:
    """Transitions allowed from a step for a variant."""
    allowed = dict(_TABLE.get((step, None), {}))
    if variant is not None:
        allowed.update(_TABLE.get((step, variant), {}))
    return allowed


def lookup(name: str, step: Step, variant: Optional[Variant]) -> Transition:
    """
    Find a transition.

    Raises:
        TransitionError: If the transition is not allowed from this step
    """
    transition = available(step, variant).get(name)
    if transition is None:
        where = step.value if variant is None else f"{step.value} ({variant.value})"
        raise TransitionError(f"{name!r} is not allowed from {where}")
    return transition


def back_target(step: Step, variant: Optional[Variant]) -> Optional[Step]:
    """Previous step for back-navigation, or None when there is none."""
    if variant is not None and (step, variant) in BACK_TARGETS:
        return BACK_TARGETS[(step, variant)]
    return BACK_TARGETS.get((step, None))
