"""
TaxReturn Assessment - Progressive Tax Tests

Unit tests for slab apportionment.
"""

import pytest
from decimal import Decimal

from app.services.tax_assessment import ProgressiveTaxCalculator


@pytest.fixture
def calculator(parameters) -> ProgressiveTaxCalculator:
    return ProgressiveTaxCalculator(parameters.slabs)


class TestProgressiveTax:
    """Test liability and band breakdown for the 2025-26 slabs."""

    def test_income_within_second_slab(self, calculator):
        """1,200,000 taxable: 1,000,000 @ 6% + 200,000 @ 18%."""
        total, bands = calculator.calculate_tax(Decimal("1200000"))

        assert total == Decimal("96000")
        assert bands[0].band_amount == Decimal("1000000")
        assert bands[1].band_amount == Decimal("200000")
        assert bands[0].band_tax == Decimal("60000")
        assert bands[1].band_tax == Decimal("36000")

    def test_every_slab_reported(self, calculator):
        """Slabs above the income appear as empty bands."""
        total, bands = calculator.calculate_tax(Decimal("1200000"))

        assert len(bands) == 5
        assert [band.is_empty for band in bands] == [False, False, True, True, True]
        assert all(band.band_tax == 0 for band in bands[2:])

    def test_zero_income(self, calculator):
        total, bands = calculator.calculate_tax(Decimal("0"))

        assert total == 0
        assert len(bands) == 5
        assert all(band.is_empty for band in bands)

    def test_income_in_top_slab(self, calculator):
        """3,000,000 reaches the unbounded 36% slab."""
        total, bands = calculator.calculate_tax(Decimal("3000000"))

        # 60,000 + 90,000 + 120,000 + 150,000 + 180,000
        assert total == Decimal("600000")
        assert bands[-1].upper is None
        assert bands[-1].band_amount == Decimal("500000")

    def test_income_on_slab_boundary(self, calculator):
        total, bands = calculator.calculate_tax(Decimal("1000000"))

        assert total == Decimal("60000")
        assert bands[1].is_empty

    @pytest.mark.parametrize("income", ["0", "1", "999999.99", "1000000", "1750000", "2500001", "12345678"])
    def test_band_amounts_sum_to_income(self, calculator, income):
        taxable = Decimal(income)
        total, bands = calculator.calculate_tax(taxable)

        assert sum(band.band_amount for band in bands) == taxable
        assert sum(band.band_tax for band in bands) == total

    def test_liability_is_monotonic(self, calculator):
        incomes = [Decimal(i) * 250000 for i in range(0, 20)]
        liabilities = [calculator.calculate_tax(i)[0] for i in incomes]

        assert liabilities == sorted(liabilities)

    def test_lower_bounds_are_previous_uppers(self, calculator):
        _, bands = calculator.calculate_tax(Decimal("5000000"))

        assert bands[0].lower == 0
        for previous, band in zip(bands, bands[1:]):
            assert band.lower == previous.upper

    def test_negative_income_rejected(self, calculator):
        with pytest.raises(ValueError):
            calculator.calculate_tax(Decimal("-1"))


class TestSlabLabels:
    """Test the display labels of bands."""

    def test_bounded_label(self, calculator):
        _, bands = calculator.calculate_tax(Decimal("0"))

        assert bands[0].label == "0 – 1,000,000 @ 6%"
        assert bands[1].label == "1,000,000 – 1,500,000 @ 18%"

    def test_unbounded_label(self, calculator):
        _, bands = calculator.calculate_tax(Decimal("0"))

        assert bands[-1].label == "2,500,000 – ∞ @ 36%"
