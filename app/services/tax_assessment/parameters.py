"""
TaxReturn Assessment - Assessment Year Parameters

Fixed parameters for one assessment year: progressive slab table, personal
relief cap, rental relief rate, withholding rate table and qualifying-payment
caps. These are data, loaded from settings and swappable per year without a
code change.

Default (2025-26) table:
- 6%:  ≤1,000,000
- 18%: 1,000,001 - 1,500,000
- 24%: 1,500,001 - 2,000,000
- 30%: 2,000,001 - 2,500,000
- 36%: >2,500,000
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from functools import lru_cache
from typing import Dict, List, Optional

from app.config import Settings, get_settings
from app.models.tax_return import InvestmentType, QualifyingPaymentType
from app.utils.error_handling import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxSlab:
    """Slab definition; `upper` is None for the final, unbounded slab."""
    upper: Optional[Decimal]
    rate: Decimal

    @property
    def is_unbounded(self) -> bool:
        return self.upper is None


@dataclass(frozen=True)
class AssessmentParameters:
    """Configuration consumed by the assessment engine."""
    tax_year: str
    personal_relief_cap: Decimal
    rental_relief_rate: Decimal
    slabs: List[TaxSlab]
    withholding_rates: Dict[InvestmentType, Decimal] = field(default_factory=dict)
    qualifying_payment_caps: Dict[QualifyingPaymentType, Optional[Decimal]] = field(default_factory=dict)
    currency_code: str = "LKR"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AssessmentParameters":
        """
        Build parameters from application settings.

        Unknown keys in the rate/cap tables are a configuration mistake and
        raise ConfigurationError rather than being ignored.
        """
        try:
            withholding_rates = {
                InvestmentType(key): Decimal(rate)
                for key, rate in settings.withholding_rates.items()
            }
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown investment type in withholding rate table: {e}",
                field="withholding_rates",
            )

        try:
            caps = {
                QualifyingPaymentType(key): (Decimal(cap) if cap is not None else None)
                for key, cap in settings.qualifying_payment_caps.items()
            }
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown qualifying payment type in cap table: {e}",
                field="qualifying_payment_caps",
            )

        return cls(
            tax_year=settings.tax_year,
            personal_relief_cap=Decimal(settings.personal_relief_cap),
            rental_relief_rate=Decimal(settings.rental_relief_rate),
            slabs=[TaxSlab(upper=s.upper, rate=s.rate) for s in settings.tax_slabs],
            withholding_rates=withholding_rates,
            qualifying_payment_caps=caps,
            currency_code=settings.currency_code,
        )

    def withholding_rate(self, investment_type: InvestmentType) -> Decimal:
        """Rate for a type; types missing from the table withhold nothing."""
        return self.withholding_rates.get(investment_type, Decimal("0"))

    def qualifying_payment_cap(self, payment_type: QualifyingPaymentType) -> Optional[Decimal]:
        """Cap for a type; None means uncapped."""
        return self.qualifying_payment_caps.get(payment_type)

    def validate(self) -> "AssessmentParameters":
        """
        Check the parameters are well-formed.

        Raises:
            ConfigurationError: empty or non-increasing slab table, a bounded
                final slab, an unbounded slab before the last, any rate
                outside [0, 1], or a negative cap/bound.
        """
        if not self.slabs:
            raise ConfigurationError("Slab table is empty", field="tax_slabs")

        previous_upper = Decimal("0")
        last_index = len(self.slabs) - 1
        for index, slab in enumerate(self.slabs):
            _check_rate(slab.rate, f"tax_slabs[{index}].rate")

            if slab.is_unbounded:
                if index != last_index:
                    raise ConfigurationError(
                        "Only the final slab may be unbounded",
                        field=f"tax_slabs[{index}].upper",
                    )
                continue

            if index == last_index:
                raise ConfigurationError(
                    "Final slab must be unbounded",
                    field=f"tax_slabs[{index}].upper",
                )
            if slab.upper <= previous_upper:
                raise ConfigurationError(
                    "Slab upper bounds must be positive and strictly increasing",
                    field=f"tax_slabs[{index}].upper",
                    details={"upper": str(slab.upper), "previous_upper": str(previous_upper)},
                )
            previous_upper = slab.upper

        _check_rate(self.rental_relief_rate, "rental_relief_rate")
        for investment_type, rate in self.withholding_rates.items():
            _check_rate(rate, f"withholding_rates.{investment_type.value}")

        if self.personal_relief_cap < 0:
            raise ConfigurationError("Personal relief cap cannot be negative", field="personal_relief_cap")
        for payment_type, cap in self.qualifying_payment_caps.items():
            if cap is not None and cap < 0:
                raise ConfigurationError(
                    "Qualifying payment cap cannot be negative",
                    field=f"qualifying_payment_caps.{payment_type.value}",
                )

        return self


def _check_rate(rate: Decimal, field_name: str) -> None:
    if rate < 0 or rate > 1:
        raise ConfigurationError(
            f"Rate {rate} is outside [0, 1]",
            field=field_name,
            details={"rate": str(rate)},
        )


def load_parameters(settings: Optional[Settings] = None) -> AssessmentParameters:
    """Build and validate parameters; fails loudly on a bad deployment."""
    parameters = AssessmentParameters.from_settings(settings or get_settings()).validate()
    logger.info(
        f"Assessment parameters loaded for {parameters.tax_year}: "
        f"{len(parameters.slabs)} slabs, personal relief cap {parameters.personal_relief_cap}"
    )
    return parameters


@lru_cache()
def get_default_parameters() -> AssessmentParameters:
    """
    Get cached parameters built from the cached settings.
    Used wherever no parameters are passed explicitly.
    """
    return load_parameters()
