from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import SalaryCalculationMode
from ..core.exceptions import ValidationError
from .calculator.base import PayrollCalculator
from .calculator.check_in_out_calculator import CheckInOutCalculator
from .calculator.hourly_deduction_calculator import HourlyDeductionCalculator


@dataclass
class PayrollCalculatorFactory:
    """Factory Pattern: choose the salary policy configured for a company."""

    def for_mode(self, mode: SalaryCalculationMode | str) -> PayrollCalculator:
        try:
            mode = SalaryCalculationMode(mode)
        except ValueError:
            raise ValidationError(f"Unknown salary calculation mode: {mode!r}")

        if mode == SalaryCalculationMode.CHECK_IN_OUT:
            return CheckInOutCalculator()
        return HourlyDeductionCalculator()
