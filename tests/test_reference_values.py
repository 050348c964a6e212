"""
Reference Value Tests

These tests pin engine outputs to values computed independently (bank
amortization tables, hand interpolation of the life table, and the web
calculator's default viager form).
"""

import pytest
from immosim.calculations.amortization import calculate_payment
from immosim.calculations.life_expectancy import life_expectancy
from immosim.calculations.rental import notary_fees
from immosim.calculations.viager import value_viager


# =============================================================================
# BENCHMARK DATA
# =============================================================================

# Monthly payment excluding insurance: (principal, annual rate %, years) -> payment
REFERENCE_PAYMENTS = {
    (200000, 4, 30): 954.83,
    (100000, 6, 30): 599.55,
    (1000000, 5, 30): 5368.22,
    (100000, 5, 15): 790.79,
    (150000, 6, 15): 1265.79,
    (120000, 0, 10): 1000.00,
}

# Remaining years: (sex, age) -> years
REFERENCE_LIFE_EXPECTANCY = {
    ("Femme", 45): 36.0,  # below the table
    ("Femme", 71): 18.34,  # 19.1 + (15.3 - 19.1) * 1/5
    ("Femme", 87.5): 7.3,  # halfway between 8.6 and 6.0
    ("Homme", 62): 21.36,  # 22.8 + (19.2 - 22.8) * 2/5
    ("Homme", 100): 2.4,
    ("Homme", 104): 2.4,  # above the table
}

# Notary fees at 7.5%: price -> fees
REFERENCE_NOTARY_FEES = {
    300000: 22500.0,
    155000: 11625.0,
    0: 0.0,
    -1000: 0.0,
}


# =============================================================================
# TESTS
# =============================================================================

class TestReferencePayments:
    """Monthly payments match published amortization tables."""

    @pytest.mark.parametrize("inputs,expected", REFERENCE_PAYMENTS.items())
    def test_payment(self, inputs, expected):
        assert calculate_payment(*inputs) == pytest.approx(expected, abs=0.01)


class TestReferenceLifeExpectancy:
    """Life table lookups match hand interpolation."""

    @pytest.mark.parametrize("inputs,expected", REFERENCE_LIFE_EXPECTANCY.items())
    def test_life_expectancy(self, inputs, expected):
        sex, age = inputs
        assert life_expectancy(age, sex) == pytest.approx(expected)


class TestReferenceNotaryFees:
    """Flat notary fees."""

    @pytest.mark.parametrize("price,expected", REFERENCE_NOTARY_FEES.items())
    def test_notary_fees(self, price, expected):
        assert notary_fees(price) == pytest.approx(expected)


class TestDefaultViagerForm:
    """The calculator's default form: 292 000 EUR, woman aged 71, rent 740 EUR."""

    def test_horizon(self, occupied_scenario):
        result = value_viager(occupied_scenario)
        assert result.horizon_years == pytest.approx(18.34)

    def test_occupancy_right(self, occupied_scenario):
        """About 220 monthly rents of 740 discounted at 2%."""
        result = value_viager(occupied_scenario)
        assert 136000 < result.occupancy_right_value < 137000
        assert 46.5 < result.discount_pct < 47.0

    def test_payment_split(self, occupied_scenario):
        result = value_viager(occupied_scenario)
        assert 155000 < result.base_value < 156000
        assert result.upfront_amount == pytest.approx(0.4 * result.base_value)
        # Indexation below the discount rate: discounting outweighs growth
        assert result.periodic_payment > result.periodic_capital / (18.34 * 12)
