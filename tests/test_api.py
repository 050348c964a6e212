"""
Tests for the calculation API endpoints.
"""

import pytest

from immosim.api.calculations import MAX_TERM_YEARS
from immosim.calculations.annuity import pv_level_annuity
from immosim.calculations.life_expectancy import life_expectancy
from immosim.calculations.viager import value_viager


# ============================================================================
# LOAN TESTS
# ============================================================================

class TestAmortizationAPI:
    """Test loan endpoints."""

    def test_calculate_amortization(self, client):
        """Form values are posted as typed, with French decimals."""
        response = client.post(
            "/api/calculate/amortization",
            json={
                "principal": "250 000",
                "annual_rate": "3,20",
                "insurance_rate": "0,30",
                "years": "25",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["schedule"]) == 300
        assert data["schedule"][0]["insurance"] == pytest.approx(62.5)
        assert data["schedule"][-1]["balance"] == 0
        assert data["total_principal"] == pytest.approx(250000)

    def test_declining_insurance(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={
                "principal": 250000,
                "annual_rate": 3.2,
                "insurance_rate": 0.3,
                "years": 25,
                "insurance_basis": "declining",
            },
        )
        assert response.status_code == 200
        schedule = response.json()["schedule"]
        assert schedule[1]["insurance"] < schedule[0]["insurance"]

    def test_dated_schedule(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={
                "principal": 12000,
                "annual_rate": 2,
                "years": 1,
                "start_date": "2025-01-15",
            },
        )
        schedule = response.json()["schedule"]
        assert schedule[0]["payment_date"] == "2025-01-15"
        assert schedule[11]["payment_date"] == "2025-12-15"

    def test_unparsable_fields_are_zero(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={"principal": "abc", "annual_rate": "", "years": "20"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["monthly_payment"] == 0
        assert data["total_interest"] == 0

    def test_invalid_insurance_basis(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={"principal": 1000, "annual_rate": 2, "years": 1, "insurance_basis": "x"},
        )
        assert response.status_code == 422

    def test_longest_term(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={"principal": 100000, "annual_rate": 3, "years": MAX_TERM_YEARS},
        )
        assert response.status_code == 200
        assert len(response.json()["schedule"]) == MAX_TERM_YEARS * 12

    def test_term_above_limit_is_rejected(self, client):
        """A stray keystroke must not build a 120 000-row schedule."""
        response = client.post(
            "/api/calculate/amortization",
            json={"principal": 1000, "annual_rate": 3, "years": "10 000"},
        )
        assert response.status_code == 422

    def test_export_amortization_csv(self, client):
        response = client.post(
            "/api/calculate/amortization/csv",
            json={"principal": 12000, "annual_rate": 2, "years": 1},
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert lines[0].startswith("Mois;")
        assert len(lines) == 13

    def test_loan_comparison(self, client):
        response = client.post(
            "/api/calculate/loan-comparison",
            json={
                "a": {"principal": "250000", "annual_rate": "3,2", "insurance_rate": "0,3", "years": "25"},
                "b": {"principal": "250000", "annual_rate": "3,6", "insurance_rate": "0,3", "years": "25"},
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["a"]["months"] == 300
        assert data["a"]["first_month_insurance"] == pytest.approx(62.5)
        assert data["total_interest_difference"] > 0
        assert data["total_cost_difference"] == pytest.approx(
            data["b"]["total_cost"] - data["a"]["total_cost"]
        )


# ============================================================================
# VALUATION TESTS
# ============================================================================

class TestValuationAPI:
    """Test annuity, life expectancy and viager endpoints."""

    def test_annuity(self, client):
        response = client.post(
            "/api/calculate/annuity",
            json={"monthly": 740, "years": 15, "discount_rate": 2, "growth_rate": 2, "target_pv": 133200},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["level_pv"] == pytest.approx(pv_level_annuity(740, 15, 2))
        assert data["indexed_pv"] == pytest.approx(740 * 180)
        assert data["solved_monthly"] == pytest.approx(740)

    def test_life_expectancy(self, client):
        response = client.get("/api/calculate/life-expectancy", params={"age": "62,5", "sex": "Homme"})
        assert response.status_code == 200
        data = response.json()
        assert data["age"] == 62.5
        assert data["years"] == pytest.approx(life_expectancy(62.5, "Homme"))

    def test_viager(self, client, occupied_scenario):
        response = client.post(
            "/api/calculate/viager",
            json={
                "market_value": "292 000",
                "age": "71",
                "sex": "Femme",
                "discount_rate": "2",
                "estimated_rent": "740",
                "upfront_pct": "40",
                "indexation_rate": "1,1",
            },
        )
        assert response.status_code == 200
        data = response.json()
        expected = value_viager(occupied_scenario)

        assert data["occupancy_right_value"] == pytest.approx(expected.occupancy_right_value)
        assert data["base_value"] == pytest.approx(expected.base_value)
        assert data["periodic_payment"] == pytest.approx(expected.periodic_payment)
        assert data["notary_fees"] == pytest.approx(expected.notary_fees)
        assert data["projection"][0]["year"] == 0

    def test_viager_term_sale(self, client):
        response = client.post(
            "/api/calculate/viager",
            json={"market_value": 240000, "age": 0, "mode": "term_sale", "term_years": 10, "upfront_pct": 0},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["horizon_years"] == 10
        assert data["periodic_payment"] == pytest.approx(2000)

    def test_viager_term_above_limit_is_rejected(self, client):
        response = client.post(
            "/api/calculate/viager",
            json={"market_value": 240000, "age": 0, "mode": "term_sale", "term_years": 1000},
        )
        assert response.status_code == 422

    def test_viager_extreme_indexation(self, client):
        response = client.post(
            "/api/calculate/viager",
            json={"market_value": "292000", "age": "50", "indexation_rate": "10 000"},
        )
        assert response.status_code == 200
        assert response.json()["periodic_payment"] == 0

    def test_viager_invalid_mode(self, client):
        response = client.post(
            "/api/calculate/viager",
            json={"market_value": 240000, "age": 70, "mode": "rented"},
        )
        assert response.status_code == 422

    def test_viager_share(self, client):
        response = client.post(
            "/api/calculate/viager/share",
            json={"market_value": "292 000", "age": 71, "estimated_rent": 740},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["params"]["valeur"] == "292000"
        assert data["params"]["loyer"] == "740"
        assert "valeur=292000" in data["query"]


# ============================================================================
# RENTAL TESTS
# ============================================================================

class TestRentalAPI:
    """Test rental endpoint."""

    def test_rental(self, client):
        response = client.post(
            "/api/calculate/rental",
            json={
                "price": "200 000",
                "monthly_rent": "1 000",
                "annual_charges": "1 200",
                "annual_property_tax": "800",
                "social_charges_rate": 0,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["notary_fees"] == pytest.approx(15000)
        assert data["gross_yield_pct"] == pytest.approx(6.0)
        assert data["net_yield_pct"] == pytest.approx(5.0)
        assert data["after_tax_monthly_cashflow"] == pytest.approx(10000 / 12)


# ============================================================================
# HEALTH CHECK TESTS
# ============================================================================

class TestHealthCheck:
    """Test health check endpoint."""

    def test_health_check(self, client):
        """Test health check returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
