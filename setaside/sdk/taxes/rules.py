"""Tax rules loading from setaside/tax_rules/YYYY.yaml."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Union

import yaml

from .schemas import TaxRules

logger = logging.getLogger(__name__)


def _get_tax_rules_dir() -> Path:
    """Get the tax_rules directory path."""
    return Path(__file__).parent.parent.parent / "tax_rules"  # taxes -> sdk -> setaside


def get_available_years() -> list[int]:
    """Get sorted list of available tax rule years (descending)."""
    rules_dir = _get_tax_rules_dir()
    years = [int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


def resolve_rules_year(year: Union[int, str]) -> int:
    """Pick the rules year to use for a requested tax year.

    Uses the requested year if a file exists, otherwise the latest earlier
    year. Years before the earliest file use the earliest file.

    Raises:
        FileNotFoundError: If no tax rules files exist at all
    """
    available = get_available_years()
    if not available:
        raise FileNotFoundError(f"No tax rules found in {_get_tax_rules_dir()}")

    target = int(year)
    candidates = [y for y in available if y <= target]
    if candidates:
        return candidates[0]
    return available[-1]


@lru_cache(maxsize=None)
def _load_rules_file(year: int) -> TaxRules:
    config_file = _get_tax_rules_dir() / f"{year}.yaml"
    if not config_file.exists():
        raise FileNotFoundError(f"Tax rules file not found for year {year}: {config_file}")

    with open(config_file, "r") as f:
        raw = yaml.safe_load(f) or {}

    raw.setdefault("year", year)
    return TaxRules.model_validate(raw)


def load_tax_rules(year: Union[int, str]) -> TaxRules:
    """Load validated tax rules for a tax year, with fallback to prior years."""
    rules_year = resolve_rules_year(year)
    if rules_year != int(year):
        logger.debug(f"No tax rules for {year}, using {rules_year}")
    return _load_rules_file(rules_year)
