"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to tax parameters like the SS wage cap, standard deductions and brackets.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


FilingStatus = Literal["single", "mfj", "hoh"]


class BracketRule(BaseModel):
    """Single tax bracket entry as written in the YAML file."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    up_to: Optional[float] = Field(default=None, gt=0, description="Upper bound (None if 'over' bracket)")
    over: Optional[float] = Field(default=None, ge=0, description="Lower bound for top bracket")
    rate: float = Field(..., ge=0, le=1, description="Tax rate as decimal")

    @model_validator(mode="after")
    def _one_bound(self):
        if (self.up_to is None) == (self.over is None):
            raise ValueError("bracket needs exactly one of 'up_to' or 'over'")
        return self


class FilingStatusRules(BaseModel):
    """Tax rules for a filing status (single, MFJ, HOH)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    standard_deduction: float = Field(..., ge=0)
    tax_brackets: list[BracketRule] = Field(..., min_length=1)


class SelfEmploymentRules(BaseModel):
    """Self-employment (SECA) tax rules: both halves of FICA."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    net_earnings_factor: float = Field(0.9235, gt=0, le=1)
    social_security_rate: float = Field(0.124, ge=0, le=1)
    social_security_wage_cap: float = Field(..., gt=0, description="SS wage base (max taxable)")
    medicare_rate: float = Field(0.029, ge=0, le=1)
    additional_medicare_rate: float = Field(0.009, ge=0, le=1)
    additional_medicare_threshold: float = Field(200000, ge=0)


class SafeHarborRules(BaseModel):
    """Estimated tax safe harbor parameters."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    current_year_fraction: float = Field(0.90, gt=0, le=1)
    high_income_agi: float = Field(150000, ge=0)
    high_income_multiplier: float = Field(1.10, ge=1)


class TaxRules(BaseModel):
    """Complete tax rules for a year."""
    model_config = ConfigDict(extra="ignore", frozen=True)  # Allow unknown fields for forward compat

    year: Optional[int] = None
    single: FilingStatusRules
    mfj: FilingStatusRules
    hoh: Optional[FilingStatusRules] = None
    self_employment: SelfEmploymentRules
    safe_harbor: SafeHarborRules = Field(default_factory=SafeHarborRules)
    underpayment_penalty_rate: float = Field(0.08, ge=0, le=1)

    def for_status(self, filing_status: FilingStatus) -> FilingStatusRules:
        """Return rules for a filing status, falling back to single."""
        rules = getattr(self, filing_status, None)
        return rules if rules is not None else self.single
