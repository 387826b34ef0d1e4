"""Tests for the transition table and step sequences."""

import pytest

from photosheet.errors import TransitionError
from photosheet.workflow import STEP_SEQUENCES, TRANSITIONS, Step, Variant
from photosheet.workflow.transitions import available, back_target, lookup


class TestTable:
    def test_upload_is_only_start(self):
        assert list(available(Step.UPLOAD, None)) == ["upload"]

    def test_choose_paper_shared(self):
        assert "choose_paper" in available(Step.PAPER_TYPE, None)
        assert "choose_paper" in available(Step.PAPER_TYPE, Variant.POLAROID)

    def test_variant_specific_crop_targets(self):
        assert lookup("confirm_crop", Step.CROP, Variant.PASSPORT).target is Step.ENHANCE
        assert lookup("confirm_crop", Step.CROP, Variant.POLAROID).target is Step.CAPTION_TEXT

    def test_crop_needs_variant(self):
        with pytest.raises(TransitionError):
            lookup("confirm_crop", Step.CROP, None)

    def test_preview_steps(self):
        for variant in Variant:
            names = set(available(Step.PREVIEW, variant))
            assert names == {"download", "print"}

    def test_remote_rows_name_an_operation(self):
        for row in TRANSITIONS:
            if row.is_remote:
                assert row.operation
            else:
                assert not row.via_processing

    def test_sheet_previews_go_through_processing(self):
        processing = {row.name for row in TRANSITIONS if row.via_processing}
        assert processing == {"choose_layout", "submit_captions"}

    def test_every_transition_follows_sequence(self):
        for row in TRANSITIONS:
            variants = [row.variant] if row.variant else list(Variant)
            for variant in variants:
                sequence = STEP_SEQUENCES[variant]
                assert row.source in sequence
                assert sequence.index(row.target) >= sequence.index(row.source)


class TestBackTargets:
    @pytest.mark.parametrize("variant", list(Variant))
    def test_back_walks_sequence(self, variant):
        sequence = STEP_SEQUENCES[variant]
        for previous, step in zip(sequence[1:], sequence[2:]):
            assert back_target(step, variant) is previous

    def test_nothing_before_paper_type(self):
        assert back_target(Step.UPLOAD, None) is None
        assert back_target(Step.PAPER_TYPE, Variant.PASSPORT) is None
