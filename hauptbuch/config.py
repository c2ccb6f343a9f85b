"""Engine configuration using pydantic-settings."""
from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Configuration values for the ledger engine."""

    model_config = SettingsConfigDict(
        env_prefix="HAUPTBUCH_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    fiscal_year_start_month: int = Field(default=1, ge=1, le=12)
    chart: str = Field(default="skr03", description="Chart of accounts used for classification.")
    depreciation_expense_code: str = Field(default="4830")
    balance_tolerance: Decimal = Field(default=Decimal("0.01"))
    payment_tolerance: Decimal = Field(default=Decimal("0.05"))
    legacy_opening_detection: bool = Field(
        default=True,
        description="Detect untyped opening transactions from their reference and description.",
    )
    opening_reference_prefix: str = Field(default="EB")
    opening_keywords: List[str] = Field(
        default_factory=lambda: ["saldovortrag", "eröffnungsbilanz", "startkapital", "vortrag"]
    )
    vat_standard_prefix: str = Field(default="84")
    vat_reduced_prefix: str = Field(default="83")
    vat_exempt_prefix: str = Field(default="81")
    input_tax_prefix: str = Field(default="157")
    vat_standard_rate: Decimal = Field(default=Decimal("0.19"))
    vat_reduced_rate: Decimal = Field(default=Decimal("0.07"))

    @field_validator("chart")
    @classmethod
    def _lowercase_chart(cls, value: str) -> str:
        return value.lower()

    @field_validator("opening_keywords")
    @classmethod
    def _lowercase_keywords(cls, value: List[str]) -> List[str]:
        return [keyword.lower() for keyword in value]


_settings: LedgerSettings | None = None


def get_settings() -> LedgerSettings:
    """Return a cached instance of the engine settings."""

    global _settings
    if _settings is None:
        _settings = LedgerSettings()
    return _settings


__all__ = ["LedgerSettings", "get_settings"]
