"""
Life-Annuity Sale (Viager) Valuation

Splits the price of a property sold in viager into the occupancy right kept
by the seller (DUH), the upfront lump sum (bouquet) and the monthly payment
(rente), then projects resale value and a simple annualized return.

The return is a single-horizon geometric approximation on undiscounted
outlays, not an IRR.
"""

import enum
import logging
import math
from dataclasses import dataclass, fields, replace
from typing import List

from immosim.calculations.annuity import pv_level_annuity, solve_monthly_from_pv
from immosim.calculations.life_expectancy import life_expectancy
from immosim.calculations.parsing import finite_or_zero
from immosim.calculations.rental import NOTARY_FEE_RATE, notary_fees

logger = logging.getLogger(__name__)

MIN_HORIZON_YEARS = 1.0


class SaleMode(str, enum.Enum):
    """How the property is sold."""

    occupied = "occupied"  # seller keeps the right to live in the property
    free = "free"  # buyer gets the property immediately
    term_sale = "term_sale"  # fixed-term installment sale, no life contingency


@dataclass(frozen=True)
class ViagerScenario:
    """Inputs for a viager valuation. Rates are in percent."""

    market_value: float
    age: float
    sex: str = "Femme"
    discount_rate_pct: float = 2.0
    estimated_rent: float = 0.0  # monthly, used to value the occupancy right
    upfront_pct: float = 30.0  # bouquet as a share of the base value
    indexation_rate_pct: float = 0.0
    annual_charges: float = 0.0
    annual_property_tax: float = 0.0
    mode: SaleMode = SaleMode.occupied
    term_years: float = 0.0
    appreciation_rate_pct: float = 0.0
    sale_costs_pct: float = 0.0


@dataclass(frozen=True)
class ValuationResult:
    """Outcome of a viager valuation."""

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


@dataclass(frozen=True)
class ProjectionPoint:
    """Buyer position at the end of a given year."""

    year: int
    cumulative_outlay: float
    property_value: float


def normalize_scenario(scenario: ViagerScenario) -> ViagerScenario:
    """Replace negative or non-finite numeric fields with 0, cap the bouquet at 100%."""
    changes = {}
    for field in fields(scenario):
        value = getattr(scenario, field.name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if not math.isfinite(value) or value < 0:
                changes[field.name] = 0.0

    upfront_pct = changes.get("upfront_pct", scenario.upfront_pct)
    if upfront_pct > 100:
        changes["upfront_pct"] = 100.0

    if not changes:
        return scenario

    logger.debug(f"Normalized viager inputs: {sorted(changes)}")
    return replace(scenario, **changes)


def growth_factor(rate_pct: float, years: float) -> float:
    """Compound growth over a number of years; infinite when it overflows."""
    try:
        return (1 + rate_pct / 100) ** years
    except OverflowError:
        return math.inf


def valuation_horizon(scenario: ViagerScenario) -> float:
    """Term for a term sale, life expectancy otherwise; at least one year."""
    if scenario.mode == SaleMode.term_sale:
        horizon = scenario.term_years
    else:
        horizon = life_expectancy(scenario.age, scenario.sex)
    return max(MIN_HORIZON_YEARS, horizon)


def value_viager(
    scenario: ViagerScenario, notary_fee_rate: float = NOTARY_FEE_RATE
) -> ValuationResult:
    """
    Value a viager sale.

    Args:
        scenario: Sale inputs (may be partially invalid; they are normalized)
        notary_fee_rate: Flat notary fee rate applied to the base value

    Returns:
        Price decomposition, payments, resale projection and annualized return
    """
    scenario = normalize_scenario(scenario)
    horizon = valuation_horizon(scenario)
    occupied = scenario.mode == SaleMode.occupied

    # === PRICE DECOMPOSITION ===
    if occupied:
        duh = pv_level_annuity(
            scenario.estimated_rent, horizon, scenario.discount_rate_pct
        )
        base_value = max(0.0, scenario.market_value - duh)
    else:
        duh = 0.0
        base_value = scenario.market_value

    # Capital first, then bouquet as the remainder, so both sum to the base exactly
    periodic_capital = max(0.0, base_value - scenario.upfront_pct / 100 * base_value)
    upfront_amount = base_value - periodic_capital

    # === PERIODIC PAYMENT ===
    if scenario.mode == SaleMode.term_sale:
        periodic_payment = periodic_capital / (horizon * 12)
    else:
        periodic_payment = solve_monthly_from_pv(
            periodic_capital,
            horizon,
            scenario.discount_rate_pct,
            scenario.indexation_rate_pct,
        )

    fees = notary_fees(base_value, notary_fee_rate)

    # === BUYER OUTLAY (undiscounted) ===
    total_outlay = (
        upfront_amount
        + fees
        + periodic_payment * horizon * 12
        + (scenario.annual_charges + scenario.annual_property_tax) * horizon
    )

    # === RESALE ===
    projected_price = scenario.market_value * growth_factor(
        scenario.appreciation_rate_pct, horizon
    )
    net_proceeds = projected_price * (1 - scenario.sale_costs_pct / 100)

    annualized_return_pct = 0.0
    if total_outlay > 0:
        multiple = max(0.0, net_proceeds / total_outlay)
        annualized_return_pct = (multiple ** (1 / horizon) - 1) * 100
        if not math.isfinite(annualized_return_pct):
            annualized_return_pct = 0.0

    discount_pct = (
        duh / scenario.market_value * 100 if scenario.market_value > 0 else 0.0
    )

    # Extreme finite inputs can still overflow; report those figures as 0
    return ValuationResult(
        horizon_years=horizon,
        occupancy_right_value=duh,
        base_value=base_value,
        upfront_amount=upfront_amount,
        periodic_capital=periodic_capital,
        periodic_payment=periodic_payment,
        notary_fees=finite_or_zero(fees),
        total_outlay=finite_or_zero(total_outlay),
        projected_price=finite_or_zero(projected_price),
        net_proceeds=finite_or_zero(net_proceeds),
        annualized_return_pct=annualized_return_pct,
        discount_pct=finite_or_zero(discount_pct),
    )


def project_viager(
    scenario: ViagerScenario, notary_fee_rate: float = NOTARY_FEE_RATE
) -> List[ProjectionPoint]:
    """
    Year-by-year buyer outlay and property value over the valuation horizon.

    Year 0 holds the signing outlay (bouquet and notary fees). Payments are
    summed without discounting, like ``total_outlay``.
    """
    scenario = normalize_scenario(scenario)
    result = value_viager(scenario, notary_fee_rate)
    horizon = result.horizon_years
    annual_payments = result.periodic_payment * 12
    annual_costs = scenario.annual_charges + scenario.annual_property_tax

    points = []
    for year in range(math.ceil(horizon) + 1):
        elapsed = min(year, horizon)
        points.append(
            ProjectionPoint(
                year=year,
                cumulative_outlay=finite_or_zero(
                    result.upfront_amount
                    + result.notary_fees
                    + (annual_payments + annual_costs) * elapsed
                ),
                property_value=finite_or_zero(
                    scenario.market_value
                    * growth_factor(scenario.appreciation_rate_pct, elapsed)
                ),
            )
        )

    return points
