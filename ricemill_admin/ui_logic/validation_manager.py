"""
Framework-agnostic validation for the bag-rates page.

Save validation fails fast: rows are checked in display order and the first
missing or invalid cell is the only error reported, so the message always
points at one concrete cell. Reset validation reports every reason the reset
action is unavailable.
"""

from typing import Dict, List, Optional, Any
import logging

from ..models import DISPLAY_SIZES, BagSize
from ..money import format_bag_size_label, parse_decimal_or_null
from ..season_bag_rates import RESET_CONFIRMATION_TOKEN
from .rate_matrix import RateMatrix

logger = logging.getLogger(__name__)

# Order in which the cells of one row are checked
SAVE_CHECK_ORDER = DISPLAY_SIZES


class ValidationError:
    """One failed check, pointing at a rate cell or a form control.

    `field` uses the request's naming, e.g. `rates.SONA.KG_100` for a cell,
    `cropYearStartYear` or `confirm` for the selection and the reset token.
    """

    def __init__(self, field: str, message: str, context: Optional[Dict] = None):
        self.field = field
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"

    def to_dict(self) -> Dict:
        return {'field': self.field, 'message': self.message, 'context': self.context}


class ValidationResult:
    """Outcome of a save or reset check; valid until the first error is added."""

    def __init__(self, errors: Optional[List[ValidationError]] = None):
        self.errors: List[ValidationError] = list(errors or [])

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, error: ValidationError) -> None:
        self.errors.append(error)

    @property
    def first_message(self) -> Optional[str]:
        return self.errors[0].message if self.errors else None

    def to_dict(self) -> Dict:
        return {
            'is_valid': self.is_valid,
            'errors': [e.to_dict() for e in self.errors],
        }


def cell_field(code: str, size: BagSize) -> str:
    return f"rates.{code}.{size.value}"


class ValidationManager:
    """Checks that run before any bag-rate request is sent."""

    def validate_save(
        self,
        crop_year_start_year: Optional[int],
        matrix: RateMatrix,
        active_codes: List[str],
    ) -> ValidationResult:
        """Validate the matrix for saving; stops at the first failure.

        Args:
            crop_year_start_year: Selected crop year, or None
            matrix: Current rate cells
            active_codes: Active rice-type codes in display order

        Returns:
            ValidationResult with at most one error
        """
        result = ValidationResult()

        if not isinstance(crop_year_start_year, int):
            result.add_error(ValidationError('cropYearStartYear', 'Select a crop year.'))
            return result

        for code in active_codes:
            parsed: Dict[BagSize, Any] = {}
            for size in SAVE_CHECK_ORDER:
                value = parse_decimal_or_null(matrix.cell(code, size))
                if value is None:
                    result.add_error(ValidationError(
                        cell_field(code, size),
                        f"Enter a rate for {code} ({format_bag_size_label(size)}).",
                        context={'value': matrix.cell(code, size)}
                    ))
                    return result
                parsed[size] = value
            for size in SAVE_CHECK_ORDER:
                if parsed[size] < 0:
                    result.add_error(ValidationError(
                        cell_field(code, size),
                        f"Enter a valid rate for {code} ({format_bag_size_label(size)}).",
                        context={'value': parsed[size]}
                    ))
                    return result

        return result

    def validate_reset(
        self,
        confirm_text: str,
        crop_year_start_year: Optional[int],
        active_rice_type_count: int,
    ) -> ValidationResult:
        """Check the reset gate. The confirmation must match exactly, case included."""
        result = ValidationResult()
        if not isinstance(crop_year_start_year, int):
            result.add_error(ValidationError('cropYearStartYear', 'Select a crop year.'))
        if active_rice_type_count <= 0:
            result.add_error(ValidationError(
                'riceTypes',
                'No active rice types found. Create rice types first.'
            ))
        if confirm_text != RESET_CONFIRMATION_TOKEN:
            result.add_error(ValidationError(
                'confirm',
                f'Type {RESET_CONFIRMATION_TOKEN} to confirm.',
                context={'value': confirm_text}
            ))
        if not result.is_valid:
            logger.debug("Reset unavailable: %s", "; ".join(str(e) for e in result.errors))
        return result
