"""Flat-rate set-aside estimate used for income entries and monthly records."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TaxResult:
    """Set-aside breakdown for a gross income amount."""

    taxable_income: float
    estimated_tax: float
    reserve_extra: float
    total_set_aside: float


def estimate(
    gross_income: float,
    deductions: float,
    tax_rate: float,
    extra_reserve_rate: float,
) -> TaxResult:
    """Estimate tax and extra reserve on income after deductions.

    All inputs are clamped to zero, so the result is never negative.
    """
    safe_income = max(0.0, gross_income)
    safe_deductions = max(0.0, deductions)
    taxable = max(0.0, safe_income - safe_deductions)
    tax = taxable * max(0.0, tax_rate)
    extra = taxable * max(0.0, extra_reserve_rate)
    return TaxResult(
        taxable_income=taxable,
        estimated_tax=tax,
        reserve_extra=extra,
        total_set_aside=tax + extra,
    )
