"""
Rental Property Calculations

Yields and after-tax monthly cash flow for an unfurnished rental
(location nue), plus the flat notary fee approximation shared with the
viager valuation.
"""

from dataclasses import dataclass

from immosim.calculations.amortization import (
    InsuranceBasis,
    LoanParameters,
    calculate_debt_service,
)

NOTARY_FEE_RATE = 0.075  # "frais de notaire" on older properties


@dataclass(frozen=True)
class RentalScenario:
    """Inputs for a rental investment. Rates are in percent."""

    price: float
    monthly_rent: float
    vacancy_rate_pct: float = 0.0
    annual_charges: float = 0.0
    annual_property_tax: float = 0.0
    income_tax_rate_pct: float = 0.0
    social_charges_rate_pct: float = 17.2
    loan_principal: float = 0.0
    loan_rate_pct: float = 0.0
    insurance_rate_pct: float = 0.0
    loan_years: float = 20.0


@dataclass(frozen=True)
class RentalResult:
    """Yields and cash flow for a rental investment."""

    notary_fees: float
    total_acquisition_cost: float
    gross_yield_pct: float
    net_yield_pct: float
    monthly_installment: float  # loan payment including insurance
    annual_debt_service: float
    after_tax_monthly_cashflow: float


def notary_fees(price: float, rate: float = NOTARY_FEE_RATE) -> float:
    """Flat notary fees on a purchase price; 0 when there is no price."""
    if price <= 0:
        return 0.0
    return price * rate


def gross_yield_pct(annual_rent: float, price: float) -> float:
    """Gross yield in percent."""
    if price <= 0:
        return 0.0
    return annual_rent / price * 100


def net_yield_pct(
    annual_rent: float, annual_charges: float, annual_tax: float, price: float
) -> float:
    """Yield in percent after charges and property tax."""
    if price <= 0:
        return 0.0
    return (annual_rent - annual_charges - annual_tax) / price * 100


def after_tax_monthly_cashflow(
    gross_annual_revenue: float,
    annual_charges: float,
    annual_tax: float,
    income_tax_rate_pct: float,
    social_charges_rate_pct: float,
    annual_debt_service: float,
) -> float:
    """
    Monthly cash flow after income tax, social charges and the loan.

    Tax is a flat blended rate (marginal income tax + social charges) applied
    to revenue net of charges and property tax. Loan interest is not deducted.
    """
    blended_rate = (income_tax_rate_pct + social_charges_rate_pct) / 100
    net_income = gross_annual_revenue - annual_charges - annual_tax
    return (net_income * (1 - blended_rate) - annual_debt_service) / 12


def evaluate_rental(
    scenario: RentalScenario, notary_fee_rate: float = NOTARY_FEE_RATE
) -> RentalResult:
    """Compute yields and cash flow for a rental scenario."""
    annual_rent = scenario.monthly_rent * 12
    gross_annual_revenue = annual_rent * (1 - scenario.vacancy_rate_pct / 100)

    loan = LoanParameters(
        principal=scenario.loan_principal,
        annual_rate_pct=scenario.loan_rate_pct,
        insurance_rate_pct=scenario.insurance_rate_pct,
        years=scenario.loan_years,
        insurance_basis=InsuranceBasis.initial,
    )
    debt_service = calculate_debt_service(loan)
    fees = notary_fees(scenario.price, notary_fee_rate)

    return RentalResult(
        notary_fees=fees,
        total_acquisition_cost=max(0.0, scenario.price) + fees,
        gross_yield_pct=gross_yield_pct(annual_rent, scenario.price),
        net_yield_pct=net_yield_pct(
            annual_rent,
            scenario.annual_charges,
            scenario.annual_property_tax,
            scenario.price,
        ),
        monthly_installment=debt_service / 12,
        annual_debt_service=debt_service,
        after_tax_monthly_cashflow=after_tax_monthly_cashflow(
            gross_annual_revenue,
            scenario.annual_charges,
            scenario.annual_property_tax,
            scenario.income_tax_rate_pct,
            scenario.social_charges_rate_pct,
            debt_service,
        ),
    )
