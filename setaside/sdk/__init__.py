"""Set-aside SDK - Core functionality for income tracking and tax set-asides."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    load_profile_dict,
    save_profile,
    get_profile_value,
    set_profile_value,
    validate_profile,
    ProfileNotFoundError,
    ProfileValidationError,
    get_data_path,
    get_store_path,
)

from .schemas import (
    IncomeRecord,
    ReminderSettings,
    Snapshot,
    StoreDocument,
    TaxationMode,
    TaxPaymentRecord,
    TaxProfile,
)

from .regenerate import regenerate_tax_records, month_start, period_label
from .periods import PeriodFilter, StatusFilter, filter_income, filter_tax_records
from .reminders import next_reminder
from .summary import (
    IncomeProjection,
    TaxYearSummary,
    WithholdingAdjustment,
    paid_to_date,
    summarize_snapshot,
    summarize_year,
    ytd_income_by_period,
)

from . import store
from . import taxes

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "load_profile_dict",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "validate_profile",
    "ProfileNotFoundError",
    "ProfileValidationError",
    "get_data_path",
    "get_store_path",
    # Schemas
    "IncomeRecord",
    "ReminderSettings",
    "Snapshot",
    "StoreDocument",
    "TaxationMode",
    "TaxPaymentRecord",
    "TaxProfile",
    # Regeneration
    "regenerate_tax_records",
    "month_start",
    "period_label",
    # Filters
    "PeriodFilter",
    "StatusFilter",
    "filter_income",
    "filter_tax_records",
    # Reminders
    "next_reminder",
    # Summaries
    "IncomeProjection",
    "TaxYearSummary",
    "WithholdingAdjustment",
    "paid_to_date",
    "summarize_snapshot",
    "summarize_year",
    "ytd_income_by_period",
    # Modules
    "store",
    "taxes",
]
