"""
Tests for the pre-network checks on save and reset.
"""

import pytest

from ricemill_admin.models import BagSize, RiceTypeRef, SeasonBagRate, SeasonCode
from ricemill_admin.ui_logic.rate_matrix import RateMatrix
from ricemill_admin.ui_logic.validation_manager import (
    ValidationError,
    ValidationManager,
    ValidationResult,
)


def _entry(code, kg_40, kg_75, kg_100):
    return SeasonBagRate(
        crop_year_start_year=2024,
        season_code=SeasonCode.KHARIF,
        rice_type=RiceTypeRef(code=code, name=code),
        rates={BagSize.KG_40: kg_40, BagSize.KG_75: kg_75, BagSize.KG_100: kg_100},
    )


class TestValidateSave:
    def setup_method(self):
        self.manager = ValidationManager()

    def test_requires_crop_year(self):
        matrix = RateMatrix.seed(["SONA"], [_entry("SONA", 4.0, 7.5, 10.0)])
        result = self.manager.validate_save(None, matrix, ["SONA"])
        assert not result.is_valid
        assert result.first_message == "Select a crop year."

    def test_complete_matrix_is_valid(self):
        matrix = RateMatrix.seed(["SONA", "BPT"], [_entry("SONA", 4.0, 7.5, 10.0), _entry("BPT", 0.0, 0.0, 0.0)])
        result = self.manager.validate_save(2024, matrix, ["SONA", "BPT"])
        assert result.is_valid
        assert result.errors == []

    def test_reports_first_empty_cell_only(self):
        matrix = RateMatrix.seed(["SONA", "BPT", "IR64"], [_entry("SONA", 4.0, 7.5, 10.0)])
        result = self.manager.validate_save(2024, matrix, ["SONA", "BPT", "IR64"])
        assert len(result.errors) == 1
        assert result.first_message == "Enter a rate for BPT (100 kg)."
        assert result.errors[0].field == "rates.BPT.KG_100"

    def test_missing_cell_in_a_row_is_reported_before_its_negative_cell(self):
        matrix = RateMatrix.seed(["SONA"], [_entry("SONA", None, -3.75, -5.0)])
        result = self.manager.validate_save(2024, matrix, ["SONA"])
        assert result.first_message == "Enter a rate for SONA (40 kg)."

    def test_earlier_row_negative_beats_later_row_missing(self):
        matrix = RateMatrix.seed(["SONA", "BPT"], [])
        matrix.on_base_edit("SONA", "-5")
        result = self.manager.validate_save(2024, matrix, ["SONA", "BPT"])
        assert result.first_message == "Enter a valid rate for SONA (100 kg)."

    def test_earlier_row_missing_derived_cell_beats_later_row_missing_base(self):
        # First row loaded with only KG_40 absent; second row untouched
        matrix = RateMatrix.seed(["SONA", "BPT"], [_entry("SONA", None, 750.0, 1000.0)])
        result = self.manager.validate_save(2024, matrix, ["SONA", "BPT"])
        assert len(result.errors) == 1
        assert result.first_message == "Enter a rate for SONA (40 kg)."
        assert result.errors[0].field == "rates.SONA.KG_40"

    def test_unparseable_base_is_a_missing_rate(self):
        matrix = RateMatrix.seed(["SONA"], [])
        matrix.on_base_edit("SONA", "12abc")
        result = self.manager.validate_save(2024, matrix, ["SONA"])
        assert result.first_message == "Enter a rate for SONA (100 kg)."


class TestValidateReset:
    def setup_method(self):
        self.manager = ValidationManager()

    def test_exact_token_passes(self):
        assert self.manager.validate_reset("RESET", 2024, 2).is_valid

    @pytest.mark.parametrize("text", ["", "reset", "RESET!", " RESET"])
    def test_other_text_fails(self, text):
        result = self.manager.validate_reset(text, 2024, 2)
        assert not result.is_valid
        assert result.first_message == "Type RESET to confirm."

    def test_collects_every_reason(self):
        result = self.manager.validate_reset("", None, 0)
        assert [e.field for e in result.errors] == ["cropYearStartYear", "riceTypes", "confirm"]


def test_validation_result_to_dict():
    result = ValidationResult()
    result.add_error(ValidationError("confirm", "Type RESET to confirm.", context={"value": "x"}))
    assert result.to_dict() == {
        "is_valid": False,
        "errors": [
            {"field": "confirm", "message": "Type RESET to confirm.", "context": {"value": "x"}}
        ],
    }
    assert str(result.errors[0]) == "confirm: Type RESET to confirm."
