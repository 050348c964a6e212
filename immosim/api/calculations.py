"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
Numeric fields accept French-formatted strings ("1 234,56") as typed in the
calculator forms, so the UI can post raw field values on every keystroke.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Annotated, Dict, List, Optional

from fastapi import APIRouter, Response
from pydantic import BaseModel, BeforeValidator, Field

from immosim.calculations import amortization, annuity, export, rental, share, viager
from immosim.calculations.life_expectancy import life_expectancy
from immosim.calculations.parsing import parse_number
from immosim.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Longest term accepted for loans, annuities and term sales (720 months)
MAX_TERM_YEARS = 60

Number = Annotated[float, BeforeValidator(parse_number)]
Years = Annotated[float, BeforeValidator(parse_number), Field(le=MAX_TERM_YEARS)]


class LoanInput(BaseModel):
    """Input for a single loan."""

    principal: Number
    annual_rate: Number  # percent
    insurance_rate: Number = 0.0  # percent
    years: Years
    insurance_basis: amortization.InsuranceBasis = amortization.InsuranceBasis.initial

    def to_parameters(self) -> amortization.LoanParameters:
        return amortization.LoanParameters(
            principal=self.principal,
            annual_rate_pct=self.annual_rate,
            insurance_rate_pct=self.insurance_rate,
            years=self.years,
            insurance_basis=self.insurance_basis,
        )


class AmortizationInput(LoanInput):
    """Input for amortization calculation."""

    start_date: Optional[date] = None


class LoanComparisonInput(BaseModel):
    """Two loans to compare (scenario A and scenario B)."""

    a: LoanInput
    b: LoanInput


class LoanSummaryResponse(BaseModel):
    """Headline figures for one loan."""

    months: int
    monthly_payment: float
    first_month_insurance: float
    monthly_total: float
    total_interest: float
    total_insurance: float
    total_cost: float


class LoanComparisonResponse(BaseModel):
    """Comparison of two loans; differences are B minus A."""

    a: LoanSummaryResponse
    b: LoanSummaryResponse
    monthly_total_difference: float
    total_interest_difference: float
    total_insurance_difference: float
    total_cost_difference: float


class AnnuityInput(BaseModel):
    """Input for annuity present value calculations."""

    monthly: Number = 0.0
    years: Years
    discount_rate: Number  # percent
    growth_rate: Number = 0.0  # percent
    target_pv: Number = 0.0


class AnnuityResponse(BaseModel):
    """Present values and solved payment."""

    level_pv: float
    indexed_pv: float
    solved_monthly: float


class ViagerInput(BaseModel):
    """Input for a viager valuation."""

    market_value: Number
    age: Number
    sex: str = "Femme"
    discount_rate: Number = 2.0
    estimated_rent: Number = 0.0
    upfront_pct: Number = 30.0
    indexation_rate: Number = 0.0
    annual_charges: Number = 0.0
    annual_property_tax: Number = 0.0
    mode: viager.SaleMode = viager.SaleMode.occupied
    term_years: Years = 0.0
    appreciation_rate: Number = 0.0
    sale_costs_pct: Number = 0.0

    def to_scenario(self) -> viager.ViagerScenario:
        return viager.ViagerScenario(
            market_value=self.market_value,
            age=self.age,
            sex=self.sex,
            discount_rate_pct=self.discount_rate,
            estimated_rent=self.estimated_rent,
            upfront_pct=self.upfront_pct,
            indexation_rate_pct=self.indexation_rate,
            annual_charges=self.annual_charges,
            annual_property_tax=self.annual_property_tax,
            mode=self.mode,
            term_years=self.term_years,
            appreciation_rate_pct=self.appreciation_rate,
            sale_costs_pct=self.sale_costs_pct,
        )


class ValuationResponse(BaseModel):
    """Viager valuation results."""

    horizon_years: float
    occupancy_right_value: float
    base_value: float
    upfront_amount: float
    periodic_capital: float
    periodic_payment: float
    notary_fees: float
    total_outlay: float
    projected_price: float
    net_proceeds: float
    annualized_return_pct: float
    discount_pct: float
    projection: List[dict]


class ShareResponse(BaseModel):
    """Share-link parameters for a scenario."""

    params: Dict[str, str]
    query: str


class RentalInput(BaseModel):
    """Input for a rental investment."""

    price: Number
    monthly_rent: Number
    vacancy_rate: Number = 0.0
    annual_charges: Number = 0.0
    annual_property_tax: Number = 0.0
    income_tax_rate: Number = 0.0
    social_charges_rate: Number = 17.2
    loan_principal: Number = 0.0
    loan_rate: Number = 0.0
    insurance_rate: Number = 0.0
    loan_years: Years = 20.0

    def to_scenario(self) -> rental.RentalScenario:
        return rental.RentalScenario(
            price=self.price,
            monthly_rent=self.monthly_rent,
            vacancy_rate_pct=self.vacancy_rate,
            annual_charges=self.annual_charges,
            annual_property_tax=self.annual_property_tax,
            income_tax_rate_pct=self.income_tax_rate,
            social_charges_rate_pct=self.social_charges_rate,
            loan_principal=self.loan_principal,
            loan_rate_pct=self.loan_rate,
            insurance_rate_pct=self.insurance_rate,
            loan_years=self.loan_years,
        )


class RentalResponse(BaseModel):
    """Rental yields and cash flow."""

    notary_fees: float
    total_acquisition_cost: float
    gross_yield_pct: float
    net_yield_pct: float
    monthly_installment: float
    annual_debt_service: float
    after_tax_monthly_cashflow: float


def _summary_response(summary: amortization.LoanSummary) -> LoanSummaryResponse:
    return LoanSummaryResponse(total_cost=summary.total_cost, **asdict(summary))


def _schedule(inputs: AmortizationInput) -> List[amortization.AmortizationRow]:
    return amortization.generate_amortization_schedule(
        principal=inputs.principal,
        annual_rate_pct=inputs.annual_rate,
        insurance_rate_pct=inputs.insurance_rate,
        years=inputs.years,
        insurance_basis=inputs.insurance_basis,
        start_date=inputs.start_date,
    )


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    schedule = _schedule(inputs)
    logger.debug(f"Amortization schedule: {len(schedule)} months")

    return {
        "monthly_payment": amortization.calculate_payment(
            inputs.principal, inputs.annual_rate, inputs.years
        ),
        "schedule": [asdict(row) for row in schedule],
        "total_interest": amortization.calculate_total_interest(schedule),
        "total_insurance": amortization.calculate_total_insurance(schedule),
        "total_principal": sum(row.principal for row in schedule),
    }


@router.post("/amortization/csv")
async def export_amortization(inputs: AmortizationInput):
    """Export the amortization schedule as semicolon-separated text."""
    content = export.schedule_to_csv(_schedule(inputs))
    filename = (
        f"amortissement_{inputs.principal:g}_{inputs.annual_rate:g}_{inputs.years:g}ans.csv"
    )
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/loan-comparison", response_model=LoanComparisonResponse)
async def calculate_loan_comparison(inputs: LoanComparisonInput):
    """Compare two loans side by side."""
    comparison = amortization.compare_loans(
        inputs.a.to_parameters(), inputs.b.to_parameters()
    )

    return LoanComparisonResponse(
        a=_summary_response(comparison.a),
        b=_summary_response(comparison.b),
        monthly_total_difference=comparison.monthly_total_difference,
        total_interest_difference=comparison.total_interest_difference,
        total_insurance_difference=comparison.total_insurance_difference,
        total_cost_difference=comparison.total_cost_difference,
    )


@router.post("/annuity", response_model=AnnuityResponse)
async def calculate_annuity(inputs: AnnuityInput):
    """Present value of level and indexed annuities, and the payment for a target PV."""
    return AnnuityResponse(
        level_pv=annuity.pv_level_annuity(
            inputs.monthly, inputs.years, inputs.discount_rate
        ),
        indexed_pv=annuity.pv_indexed_annuity(
            inputs.monthly, inputs.years, inputs.discount_rate, inputs.growth_rate
        ),
        solved_monthly=annuity.solve_monthly_from_pv(
            inputs.target_pv, inputs.years, inputs.discount_rate, inputs.growth_rate
        ),
    )


@router.get("/life-expectancy")
async def get_life_expectancy(age: str, sex: str = "Femme"):
    """Remaining life expectancy for an age and sex."""
    value = parse_number(age)
    return {"age": value, "sex": sex, "years": life_expectancy(value, sex)}


@router.post("/viager", response_model=ValuationResponse)
async def calculate_viager(inputs: ViagerInput):
    """Value a viager sale and project it over its horizon."""
    settings = get_settings()
    scenario = inputs.to_scenario()

    result = viager.value_viager(scenario, settings.notary_fee_rate)
    projection = viager.project_viager(scenario, settings.notary_fee_rate)
    logger.debug(
        f"Viager {scenario.mode.value}: horizon {result.horizon_years:.1f}y, "
        f"base value {result.base_value:.2f}"
    )

    return ValuationResponse(
        projection=[asdict(point) for point in projection],
        **asdict(result),
    )


@router.post("/viager/share", response_model=ShareResponse)
async def share_viager(inputs: ViagerInput):
    """Share-link parameters for a viager scenario."""
    params = share.viager_to_params(inputs.to_scenario())
    return ShareResponse(params=params, query=share.to_query_string(params))


@router.post("/rental", response_model=RentalResponse)
async def calculate_rental(inputs: RentalInput):
    """Yields and after-tax cash flow of a rental investment."""
    settings = get_settings()
    result = rental.evaluate_rental(inputs.to_scenario(), settings.notary_fee_rate)
    return RentalResponse(**asdict(result))
