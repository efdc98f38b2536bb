"""
TaxReturn Assessment - Progressive Tax Calculator

Apportions taxable income across an ordered slab table and sums the liability.

Every configured slab is reported in the breakdown, including slabs the income
never reaches (as zero-amount bands), so the return can show the full table.
Band amounts always sum to the taxable income; no rounding is applied here.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from app.services.tax_assessment.parameters import TaxSlab

ZERO = Decimal("0")


@dataclass(frozen=True)
class SlabBand:
    """One slab's share of the taxable income."""
    lower: Decimal
    upper: Optional[Decimal]
    rate: Decimal
    band_amount: Decimal
    band_tax: Decimal

    @property
    def is_empty(self) -> bool:
        return self.band_amount == 0

    @property
    def label(self) -> str:
        upper = "∞" if self.upper is None else f"{self.upper:,.0f}"
        return f"{self.lower:,.0f} – {upper} @ {self.rate * 100:.0f}%"


class ProgressiveTaxCalculator:
    """
    Progressive (slab) income tax calculator.

    Walks the slabs in ascending order keeping `remaining` income and the
    running lower bound; each slab takes min(remaining, width).
    """

    def __init__(self, slabs: Sequence[TaxSlab]):
        self.slabs = list(slabs)

    def calculate_tax(self, taxable_income: Decimal) -> Tuple[Decimal, List[SlabBand]]:
        """
        Calculate tax on taxable income.

        Returns:
            Tuple of (total_tax, band_breakdown)
        """
        if taxable_income < 0:
            raise ValueError(f"Taxable income cannot be negative: {taxable_income}")

        total_tax = ZERO
        bands = []
        remaining = taxable_income
        lower = ZERO

        for slab in self.slabs:
            if remaining <= 0:
                band_amount = ZERO
            elif slab.upper is None:
                band_amount = remaining
            else:
                band_amount = min(remaining, slab.upper - lower)

            band_tax = band_amount * slab.rate
            bands.append(SlabBand(
                lower=lower,
                upper=slab.upper,
                rate=slab.rate,
                band_amount=band_amount,
                band_tax=band_tax,
            ))

            total_tax += band_tax
            remaining -= band_amount
            if slab.upper is not None:
                lower = slab.upper

        return total_tax, bands
