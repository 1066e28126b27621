"""Self-employment tax (Social Security + Medicare on net SE earnings)."""

from dataclasses import dataclass

from .schemas import TaxRules


@dataclass(frozen=True)
class SelfEmploymentTax:
    """Result of a self-employment tax computation."""

    adjusted_earnings: float  # net earnings x 92.35%
    social_security: float
    medicare: float  # includes Additional Medicare Tax

    @property
    def total(self) -> float:
        return self.social_security + self.medicare

    @property
    def deductible_half(self) -> float:
        """Half of SE tax, deductible as an adjustment to income."""
        return self.total / 2


class SelfEmploymentTaxCalculator:
    """Computes SE tax with the SS wage cap and Additional Medicare surtax.

    Defaults are the 2023 statutory values; use from_rules() for other years.
    """

    def __init__(
        self,
        wage_cap: float = 160200,
        net_earnings_factor: float = 0.9235,
        social_security_rate: float = 0.124,
        medicare_rate: float = 0.029,
        additional_medicare_rate: float = 0.009,
        additional_medicare_threshold: float = 200000,
    ):
        self.wage_cap = wage_cap
        self.net_earnings_factor = net_earnings_factor
        self.social_security_rate = social_security_rate
        self.medicare_rate = medicare_rate
        self.additional_medicare_rate = additional_medicare_rate
        self.additional_medicare_threshold = additional_medicare_threshold

    @classmethod
    def from_rules(cls, rules: TaxRules) -> "SelfEmploymentTaxCalculator":
        se = rules.self_employment
        return cls(
            wage_cap=se.social_security_wage_cap,
            net_earnings_factor=se.net_earnings_factor,
            social_security_rate=se.social_security_rate,
            medicare_rate=se.medicare_rate,
            additional_medicare_rate=se.additional_medicare_rate,
            additional_medicare_threshold=se.additional_medicare_threshold,
        )

    def compute(self, net_earnings: float) -> SelfEmploymentTax:
        adjusted = max(0.0, net_earnings) * self.net_earnings_factor

        ss_tax = min(adjusted, self.wage_cap) * self.social_security_rate

        medicare_tax = adjusted * self.medicare_rate
        if adjusted > self.additional_medicare_threshold:
            medicare_tax += (adjusted - self.additional_medicare_threshold) * self.additional_medicare_rate

        return SelfEmploymentTax(
            adjusted_earnings=adjusted,
            social_security=ss_tax,
            medicare=medicare_tax,
        )
