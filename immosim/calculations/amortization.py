"""
Loan Amortization Calculations

Constant-payment (French) loan schedules with borrower insurance charged
either on the initial capital or on the outstanding balance (CRD).
"""

import enum
import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta


class InsuranceBasis(str, enum.Enum):
    """How the monthly borrower insurance premium is assessed."""

    initial = "initial"  # flat, on the borrowed capital
    declining = "declining"  # on the balance entering each month


@dataclass(frozen=True)
class LoanParameters:
    """Inputs for a single loan."""

    principal: float
    annual_rate_pct: float
    insurance_rate_pct: float
    years: float
    insurance_basis: InsuranceBasis = InsuranceBasis.initial

    @property
    def months(self) -> int:
        return term_months(self.years)

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate_pct / 100 / 12


@dataclass(frozen=True)
class AmortizationRow:
    """One month of an amortization schedule."""

    month: int
    installment: float  # interest + principal + insurance
    interest: float
    insurance: float
    principal: float
    balance: float  # outstanding balance after this month's payment
    cumulative_interest: float
    cumulative_insurance: float
    payment_date: Optional[date] = None


@dataclass(frozen=True)
class LoanSummary:
    """Headline figures for a loan, as shown on the comparator tiles."""

    months: int
    monthly_payment: float  # excluding insurance
    first_month_insurance: float
    monthly_total: float  # payment + first month insurance
    total_interest: float
    total_insurance: float

    @property
    def total_cost(self) -> float:
        return self.total_interest + self.total_insurance


@dataclass(frozen=True)
class LoanComparison:
    """Two loan summaries side by side; differences are B minus A."""

    a: LoanSummary
    b: LoanSummary

    @property
    def monthly_total_difference(self) -> float:
        return self.b.monthly_total - self.a.monthly_total

    @property
    def total_interest_difference(self) -> float:
        return self.b.total_interest - self.a.total_interest

    @property
    def total_insurance_difference(self) -> float:
        return self.b.total_insurance - self.a.total_insurance

    @property
    def total_cost_difference(self) -> float:
        return self.b.total_cost - self.a.total_cost


def term_months(years: float) -> int:
    """Number of monthly payments for a term in years, rounded half up."""
    if not math.isfinite(years) or years <= 0:
        return 0
    return math.floor(years * 12 + 0.5)


def calculate_payment(principal: float, annual_rate_pct: float, years: float) -> float:
    """
    Calculate the constant monthly payment, insurance excluded.

    Matches Excel's PMT() for positive rates. Zero or negative rates fall
    back to straight-line repayment.

    Args:
        principal: Borrowed capital
        annual_rate_pct: Nominal annual rate in percent (e.g., 3.2 for 3.2%)
        years: Term in years (may be fractional)

    Returns:
        Monthly payment (positive number), 0 for an empty loan
    """
    months = term_months(years)
    if months == 0 or principal <= 0:
        return 0.0

    monthly_rate = annual_rate_pct / 100 / 12

    if monthly_rate <= 0:
        return principal / months

    return principal * monthly_rate / (1 - (1 + monthly_rate) ** -months)


def monthly_insurance(base: float, insurance_rate_pct: float) -> float:
    """Monthly premium for an annual insurance rate applied to ``base``."""
    return base * (insurance_rate_pct / 100) / 12


def generate_amortization_schedule(
    principal: float,
    annual_rate_pct: float,
    insurance_rate_pct: float,
    years: float,
    insurance_basis: InsuranceBasis = InsuranceBasis.initial,
    start_date: Optional[date] = None,
) -> List[AmortizationRow]:
    """
    Generate a full amortization schedule.

    Interest for a month is charged on the balance entering that month. The
    final month repays whatever balance remains so the schedule always ends
    at exactly zero.

    Args:
        principal: Borrowed capital
        annual_rate_pct: Nominal annual rate in percent
        insurance_rate_pct: Annual insurance rate in percent
        years: Term in years
        insurance_basis: Premium on initial capital or on outstanding balance
        start_date: Date of the first payment, if rows should be dated

    Returns:
        One row per month
    """
    months = term_months(years)
    monthly_rate = annual_rate_pct / 100 / 12
    payment = calculate_payment(principal, annual_rate_pct, years)
    flat_premium = monthly_insurance(principal, insurance_rate_pct)

    schedule = []
    balance = max(0.0, principal)
    cumulative_interest = 0.0
    cumulative_insurance = 0.0

    for month in range(1, months + 1):
        interest = balance * monthly_rate if monthly_rate > 0 else 0.0

        principal_pmt = max(0.0, payment - interest)
        if month == months:
            principal_pmt = balance

        if insurance_basis == InsuranceBasis.declining:
            premium = monthly_insurance(balance, insurance_rate_pct)
        else:
            premium = flat_premium

        cumulative_interest += interest
        cumulative_insurance += premium
        ending_balance = max(0.0, balance - principal_pmt)

        schedule.append(
            AmortizationRow(
                month=month,
                installment=interest + principal_pmt + premium,
                interest=interest,
                insurance=premium,
                principal=principal_pmt,
                balance=ending_balance,
                cumulative_interest=cumulative_interest,
                cumulative_insurance=cumulative_insurance,
                payment_date=(
                    start_date + relativedelta(months=month - 1)
                    if start_date is not None
                    else None
                ),
            )
        )

        balance = ending_balance

    return schedule


def calculate_total_interest(schedule: List[AmortizationRow]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row.interest for row in schedule)


def calculate_total_insurance(schedule: List[AmortizationRow]) -> float:
    """Calculate total insurance paid over loan term."""
    return sum(row.insurance for row in schedule)


def summarize_loan(loan: LoanParameters) -> LoanSummary:
    """Build the headline figures for a loan from its schedule."""
    schedule = generate_amortization_schedule(
        loan.principal,
        loan.annual_rate_pct,
        loan.insurance_rate_pct,
        loan.years,
        loan.insurance_basis,
    )
    payment = calculate_payment(loan.principal, loan.annual_rate_pct, loan.years)
    first_premium = schedule[0].insurance if schedule else 0.0

    return LoanSummary(
        months=len(schedule),
        monthly_payment=payment,
        first_month_insurance=first_premium,
        monthly_total=payment + first_premium,
        total_interest=calculate_total_interest(schedule),
        total_insurance=calculate_total_insurance(schedule),
    )


def compare_loans(a: LoanParameters, b: LoanParameters) -> LoanComparison:
    """Compare two loans (scenario A vs scenario B)."""
    return LoanComparison(a=summarize_loan(a), b=summarize_loan(b))


def calculate_debt_service(loan: LoanParameters) -> float:
    """Annual debt service: first month's total installment times twelve."""
    if loan.months == 0 or loan.principal <= 0:
        return 0.0
    payment = calculate_payment(loan.principal, loan.annual_rate_pct, loan.years)
    premium = monthly_insurance(loan.principal, loan.insurance_rate_pct)
    return (payment + premium) * 12
