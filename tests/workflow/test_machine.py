"""
Unit Tests for the Workflow State Machine

Drives WorkflowMachine against the in-memory FakeClient from conftest.
"""

import pytest

from photosheet.core.models import CaptionSet, CropRegion
from photosheet.errors import (
    BusyError,
    CaptionValidationError,
    CollaboratorError,
    InvalidCropError,
    InvalidImageFileError,
    PrinterUnavailableError,
    TransitionError,
    UnknownPaperTypeError,
    ValidationError,
)
from photosheet.layout import PaperType
from photosheet.viewport import ViewportEngine
from photosheet.workflow import (
    PREVIEW_FALLBACK_WARNING,
    Step,
    Variant,
    WorkflowMachine,
    fetch_printers,
)


def crop_for(machine: WorkflowMachine) -> CropRegion:
    image = machine.session.image
    engine = ViewportEngine(machine.variant.frame)
    engine.set_image(image.natural_width, image.natural_height)
    return engine.compute_crop_region()


def advance(machine, client, sample_image, variant="passport", until=Step.PREVIEW):
    """Walk a fresh machine forward to `until`."""
    machine.run(client, "upload", path=sample_image)
    if until is Step.PAPER_TYPE:
        return
    machine.run(client, "choose_paper", variant=variant)
    if until is Step.CROP:
        return
    machine.run(client, "confirm_crop", crop=crop_for(machine))
    if until in (Step.ENHANCE, Step.CAPTION_TEXT):
        return
    if variant == "passport":
        machine.run(client, "accept_enhancement")
        if until is Step.LAYOUT_SELECT:
            return
        machine.run(client, "choose_layout", layout="standard")
    else:
        machine.run(client, "submit_captions", captions=CaptionSet("Hi", "There"))
    if until is Step.PREVIEW:
        return
    machine.run(client, "download")


@pytest.fixture
def machine() -> WorkflowMachine:
    return WorkflowMachine()


class TestHappyPath:
    def test_passport_flow(self, machine, fake_client, sample_image, tmp_path):
        assert machine.step is Step.UPLOAD
        assert machine.allowed_transitions() == ["upload"]

        machine.run(fake_client, "upload", path=sample_image)
        assert machine.step is Step.PAPER_TYPE
        assert machine.session.image.natural_width == 1200
        assert machine.session.face_detected is True

        machine.run(fake_client, "choose_paper", variant="passport")
        assert machine.step is Step.CROP
        assert machine.variant is Variant.PASSPORT

        machine.run(fake_client, "confirm_crop", crop=crop_for(machine))
        assert machine.step is Step.ENHANCE
        assert machine.session.processed_image_id == "img-1-p1"
        assert machine.session.before_image is not None

        machine.run(fake_client, "reapply_enhancement", mode="studio", enhance_level=0.7)
        assert machine.step is Step.ENHANCE
        assert machine.session.processed_image_id == "img-1-p2"
        assert machine.session.processing_mode == "studio"
        assert machine.session.enhance_level == 0.7

        machine.run(fake_client, "accept_enhancement")
        assert machine.step is Step.LAYOUT_SELECT

        machine.run(fake_client, "choose_layout", layout="custom")
        assert machine.step is Step.PREVIEW
        assert machine.session.layout.photo_count == 12
        assert machine.session.preview_image is not None
        assert machine.session.preview_warning is None

        machine.run(fake_client, "download", folder=tmp_path / "sheets")
        assert machine.step is Step.DONE
        saved = machine.session.saved_path
        assert saved.exists()
        assert saved.read_bytes().startswith(b"\x89PNG")

    def test_apply_crop_options_sent(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.CROP)
        machine.run(fake_client, "confirm_crop", crop=crop_for(machine), mode="studio", enhance_level=0.25)
        name, image_id, crop, mode, level = fake_client.calls[-1]
        assert (name, image_id, mode, level) == ("apply_crop", "img-1", "studio", 0.25)

    def test_polaroid_flow(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, variant="polaroid", until=Step.CAPTION_TEXT)
        assert machine.step is Step.CAPTION_TEXT
        assert fake_client.calls[-1][3] == "studio"

        captions = CaptionSet("Summer", "2024", "script_01")
        machine.run(fake_client, "submit_captions", captions=captions)
        assert machine.step is Step.PREVIEW
        assert machine.session.captions == captions
        assert machine.session.layout.type is PaperType.POLAROID

        machine.run(fake_client, "download")
        assert machine.step is Step.DONE
        assert fake_client.called("download_caption_sheet") == 1
        assert fake_client.called("download_sheet") == 0
        assert machine.session.saved_path is None

    def test_print(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image)
        machine.run(fake_client, "print", printer_id="office", copies=2)
        assert machine.step is Step.DONE
        assert machine.session.print_result.printer_used == "office"
        assert fake_client.calls[-1][3:5] == ("office", 2)


class TestGuards:
    def test_upload_rejects_non_image(self, machine, fake_client, tmp_path):
        bogus = tmp_path / "notes.jpg"
        bogus.write_text("not an image")
        with pytest.raises(InvalidImageFileError):
            machine.run(fake_client, "upload", path=bogus)
        assert machine.step is Step.UPLOAD
        assert fake_client.called("upload_image") == 0

    def test_unknown_paper_type(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.PAPER_TYPE)
        with pytest.raises(UnknownPaperTypeError):
            machine.fire("choose_paper", variant="wallet")
        assert machine.step is Step.PAPER_TYPE

    def test_crop_required(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.CROP)
        with pytest.raises(InvalidCropError):
            machine.fire("confirm_crop")
        stale = CropRegion(0, 0, 0.5, 0.5, 600, 800)
        with pytest.raises(InvalidCropError):
            machine.fire("confirm_crop", crop=stale)
        assert fake_client.called("apply_crop") == 0

    def test_layout_must_belong_to_variant(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.LAYOUT_SELECT)
        with pytest.raises(UnknownPaperTypeError):
            machine.fire("choose_layout", layout="polaroid")
        assert machine.step is Step.LAYOUT_SELECT

    def test_invalid_captions_never_sent(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, variant="polaroid", until=Step.CAPTION_TEXT)
        with pytest.raises(CaptionValidationError):
            machine.fire("submit_captions", captions=CaptionSet("x" * 51, ""))
        assert fake_client.called("preview_caption_sheet") == 0
        assert machine.step is Step.CAPTION_TEXT

    def test_copies_must_be_positive(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image)
        with pytest.raises(ValidationError, match="at least 1"):
            machine.fire("print", copies=0)

    def test_transition_not_allowed_here(self, machine):
        with pytest.raises(TransitionError):
            machine.fire("choose_layout", layout="standard")

    def test_variant_rows_are_separate(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, variant="polaroid", until=Step.CAPTION_TEXT)
        with pytest.raises(TransitionError):
            machine.fire("accept_enhancement")


class TestConcurrency:
    def test_busy_rejects_second_call(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.LAYOUT_SELECT)
        pending = machine.fire("choose_layout", layout="standard")
        assert machine.busy
        assert machine.step is Step.PROCESSING
        assert machine.allowed_transitions() == []

        with pytest.raises(BusyError):
            machine.fire("choose_layout", layout="standard")
        assert fake_client.called("preview_sheet") == 0

        result = pending.execute(fake_client)
        assert machine.complete(pending, result) is True
        assert fake_client.called("preview_sheet") == 1
        assert machine.step is Step.PREVIEW
        assert not machine.busy

    def test_busy_rejects_local_transitions(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.ENHANCE)
        machine.fire("reapply_enhancement", enhance_level=0.5)
        with pytest.raises(BusyError):
            machine.fire("accept_enhancement")

    def test_preview_not_sent_while_crop_pending(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.ENHANCE)
        crops_before = fake_client.called("apply_crop")
        pending = machine.fire("reapply_enhancement", enhance_level=0.6)

        with pytest.raises(BusyError):
            machine.fire("choose_layout", layout="standard")
        assert fake_client.called("preview_sheet") == 0
        assert machine.in_flight is pending

        assert machine.complete(pending, pending.execute(fake_client)) is True
        assert fake_client.called("apply_crop") == crops_before + 1
        assert fake_client.called("preview_sheet") == 0
        assert machine.step is Step.ENHANCE

    def test_result_after_reset_is_discarded(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.CROP)
        pending = machine.fire("confirm_crop", crop=crop_for(machine))
        machine.reset()
        result = pending.execute(fake_client)

        assert machine.complete(pending, result) is False
        assert machine.step is Step.UPLOAD
        assert machine.session.processed_image_id is None
        assert machine.session.is_empty

    def test_result_after_back_is_discarded(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.LAYOUT_SELECT)
        pending = machine.fire("choose_layout", layout="standard")
        assert machine.back() is Step.LAYOUT_SELECT
        result = pending.execute(fake_client)

        assert machine.complete(pending, result) is False
        assert machine.step is Step.LAYOUT_SELECT
        assert machine.session.preview_image is None

    def test_failure_after_reset_is_ignored(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.CROP)
        pending = machine.fire("confirm_crop", crop=crop_for(machine))
        machine.reset()
        assert machine.fail(pending, CollaboratorError("apply_crop", "late")) is False
        assert machine.session.last_error is None

    def test_stale_result_logged(self, machine, fake_client, sample_image, caplog):
        advance(machine, fake_client, sample_image, until=Step.CROP)
        pending = machine.fire("confirm_crop", crop=crop_for(machine))
        machine.reset()
        with caplog.at_level("WARNING", logger="photosheet.workflow.machine"):
            machine.complete(pending, pending.execute(fake_client))
        assert "Discarding stale result" in caplog.text


class TestFailures:
    def test_failure_keeps_step(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.LAYOUT_SELECT)
        fake_client.fail_with["preview_sheet"] = CollaboratorError("preview_sheet", "boom", status=500)

        with pytest.raises(CollaboratorError):
            machine.run(fake_client, "choose_layout", layout="standard")

        assert machine.step is Step.LAYOUT_SELECT
        assert not machine.busy
        assert machine.session.layout is None
        assert machine.session.preview_image is None
        assert isinstance(machine.session.last_error, CollaboratorError)
        assert machine.session.failed_transition == "choose_layout"

    def test_retry_reuses_arguments(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.LAYOUT_SELECT)
        fake_client.fail_with["preview_sheet"] = CollaboratorError("preview_sheet", "boom")
        with pytest.raises(CollaboratorError):
            machine.run(fake_client, "choose_layout", layout="custom")

        del fake_client.fail_with["preview_sheet"]
        pending = machine.retry()
        machine.complete(pending, pending.execute(fake_client))
        assert machine.step is Step.PREVIEW
        assert machine.session.layout.type is PaperType.CUSTOM
        assert machine.session.last_error is None

    def test_nothing_to_retry(self, machine):
        with pytest.raises(TransitionError):
            machine.retry()

    def test_unexpected_exception_is_wrapped(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.CROP)
        fake_client.fail_with["apply_crop"] = RuntimeError("socket closed")
        with pytest.raises(CollaboratorError) as info:
            machine.run(fake_client, "confirm_crop", crop=crop_for(machine))
        assert info.value.operation == "apply_crop"
        assert machine.step is Step.CROP

    def test_unusable_response_fails_call(self, machine, sample_image):
        pending = machine.fire("upload", path=sample_image)
        with pytest.raises(CollaboratorError):
            machine.complete(pending, None)
        assert machine.step is Step.UPLOAD
        assert machine.session.image is None
        assert not machine.busy

    def test_preview_fallback(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.LAYOUT_SELECT)
        fake_client.fail_with["preview_sheet"] = CollaboratorError("preview_sheet", "boom")
        with pytest.raises(CollaboratorError):
            machine.run(fake_client, "choose_layout", layout="standard")

        machine.run(fake_client, "use_processed_photo")
        session = machine.session
        assert machine.step is Step.PREVIEW
        assert session.preview_warning == PREVIEW_FALLBACK_WARNING
        assert session.preview_image == session.processed_image
        assert session.layout.type is PaperType.STANDARD

    def test_fallback_needs_a_failed_preview(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.LAYOUT_SELECT)
        with pytest.raises(TransitionError):
            machine.fire("use_processed_photo")

    def test_printer_unavailable_offers_download(self, machine, fake_client, sample_image, tmp_path):
        advance(machine, fake_client, sample_image)
        fake_client.fail_with["print_sheet"] = PrinterUnavailableError()
        with pytest.raises(PrinterUnavailableError) as info:
            machine.run(fake_client, "print")
        assert machine.step is Step.PREVIEW
        assert info.value.fallback == "download"

        machine.run(fake_client, info.value.fallback, folder=tmp_path)
        assert machine.step is Step.DONE
        assert machine.session.saved_path.parent == tmp_path


class TestNavigation:
    @pytest.mark.parametrize(
        "variant, until",
        [
            ("passport", Step.PAPER_TYPE),
            ("passport", Step.CROP),
            ("passport", Step.ENHANCE),
            ("passport", Step.LAYOUT_SELECT),
            ("passport", Step.PREVIEW),
            ("passport", Step.DONE),
            ("polaroid", Step.CAPTION_TEXT),
            ("polaroid", Step.DONE),
        ],
    )
    def test_reset_from_any_step(self, machine, fake_client, sample_image, variant, until):
        advance(machine, fake_client, sample_image, variant=variant, until=until)
        generation = machine.session.generation
        session = machine.reset()
        assert session.step is Step.UPLOAD
        assert session.is_empty
        assert session.variant is None
        assert session.generation > generation

    def test_reset_keeps_default_enhance_level(self, fake_client, sample_image):
        machine = WorkflowMachine(enhance_level=0.8)
        assert machine.session.enhance_level == 0.8
        advance(machine, fake_client, sample_image, until=Step.ENHANCE)
        assert fake_client.calls[-1][0] == "apply_crop"
        assert fake_client.calls[-1][4] == 0.8
        machine.default_enhance_level = 0.2
        assert machine.reset().enhance_level == 0.2

    def test_reset_while_busy(self, machine, fake_client, sample_image):
        machine.fire("upload", path=sample_image)
        machine.reset()
        assert not machine.busy
        assert machine.step is Step.UPLOAD

    @pytest.mark.parametrize(
        "variant, until, expected",
        [
            ("passport", Step.CROP, Step.PAPER_TYPE),
            ("passport", Step.ENHANCE, Step.CROP),
            ("passport", Step.LAYOUT_SELECT, Step.ENHANCE),
            ("passport", Step.PREVIEW, Step.LAYOUT_SELECT),
            ("passport", Step.DONE, Step.PREVIEW),
            ("polaroid", Step.CAPTION_TEXT, Step.CROP),
            ("polaroid", Step.PREVIEW, Step.CAPTION_TEXT),
        ],
    )
    def test_back_targets(self, machine, fake_client, sample_image, variant, until, expected):
        advance(machine, fake_client, sample_image, variant=variant, until=until)
        assert machine.back() is expected
        assert machine.step is expected

    def test_back_keeps_data(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.ENHANCE)
        machine.back()
        assert machine.session.crop is not None
        assert machine.session.processed_image_id is not None

    def test_no_back_from_upload(self, machine, fake_client, sample_image):
        assert not machine.can_go_back()
        with pytest.raises(TransitionError):
            machine.back()
        machine.run(fake_client, "upload", path=sample_image)
        with pytest.raises(TransitionError):
            machine.back()

    def test_changing_paper_type_clears_results(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.ENHANCE)
        machine.back()
        machine.back()
        machine.run(fake_client, "choose_paper", variant="polaroid")
        assert machine.session.crop is None
        assert machine.session.processed_image_id is None
        assert machine.session.image is not None

    def test_same_paper_type_keeps_results(self, machine, fake_client, sample_image):
        advance(machine, fake_client, sample_image, until=Step.ENHANCE)
        machine.back()
        machine.back()
        machine.run(fake_client, "choose_paper", variant="passport")
        assert machine.session.processed_image_id is not None


class TestPrinters:
    def test_listing(self, fake_client):
        from photosheet.client import PrinterInfo

        fake_client.printers = [PrinterInfo(id="office", name="Office", is_default=True)]
        assert [p.id for p in fetch_printers(fake_client)] == ["office"]

    def test_listing_failure_is_ignored(self, fake_client):
        fake_client.fail_with["list_printers"] = CollaboratorError("list_printers", "down")
        assert fetch_printers(fake_client) == []
