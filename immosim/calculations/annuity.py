"""
Annuity Present Value Calculations

Present value of monthly payment streams, used to value an occupancy right
(DUH) and to size a life-annuity payment (rente) from its capital.
"""

from immosim.calculations.amortization import term_months
from immosim.calculations.parsing import finite_or_zero

# Reference payment used to solve for the payment matching a target PV.
REFERENCE_PAYMENT = 100.0


def pv_level_annuity(monthly: float, years: float, discount_rate_pct: float) -> float:
    """
    Present value of a constant monthly payment.

    Annuity-due convention: each payment is made at the start of its month.

    Args:
        monthly: Monthly payment
        years: Duration in years
        discount_rate_pct: Annual discount rate in percent

    Returns:
        Present value, or 0 when it is not finite
    """
    months = term_months(years)
    if months == 0 or monthly == 0:
        return 0.0

    monthly_rate = discount_rate_pct / 100 / 12
    if monthly_rate <= -1:
        return 0.0

    if monthly_rate == 0:
        return finite_or_zero(monthly * months)

    # A rate close to -100% makes the discount factor overflow
    try:
        discount = (1 - (1 + monthly_rate) ** -months) / monthly_rate
    except OverflowError:
        return 0.0
    return finite_or_zero(monthly * discount * (1 + monthly_rate))


def pv_indexed_annuity(
    monthly: float,
    years: float,
    discount_rate_pct: float,
    growth_rate_pct: float,
) -> float:
    """
    Present value of a monthly payment growing at a constant rate.

    The first payment is ``monthly`` and is not discounted; each following
    payment grows by the monthly growth rate and is discounted by the monthly
    discount rate, giving a geometric series of ratio q = (1+g)/(1+r).

    Args:
        monthly: First monthly payment
        years: Duration in years
        discount_rate_pct: Annual discount rate in percent
        growth_rate_pct: Annual indexation rate in percent

    Returns:
        Present value, or 0 when it is not finite
    """
    months = term_months(years)
    if months == 0 or monthly == 0:
        return 0.0

    monthly_rate = discount_rate_pct / 100 / 12
    monthly_growth = growth_rate_pct / 100 / 12
    if monthly_rate <= -1 or monthly_growth <= -1:
        return 0.0
    ratio = (1 + monthly_growth) / (1 + monthly_rate)

    if ratio == 1:
        return finite_or_zero(monthly * months)

    # Growth far above the discount rate overflows the series
    try:
        growth_factor = ratio**months
    except OverflowError:
        return 0.0
    return finite_or_zero(monthly * (1 - growth_factor) / (1 - ratio))


def solve_monthly_from_pv(
    target_pv: float,
    years: float,
    discount_rate_pct: float,
    growth_rate_pct: float,
) -> float:
    """
    First monthly payment of an indexed annuity worth ``target_pv`` today.

    Present value is linear in the payment, so the answer scales from the
    value of a reference payment.
    """
    reference_pv = pv_indexed_annuity(
        REFERENCE_PAYMENT, years, discount_rate_pct, growth_rate_pct
    )
    if reference_pv == 0:
        return 0.0
    return finite_or_zero(target_pv / reference_pv * REFERENCE_PAYMENT)
