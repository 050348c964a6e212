"""
Share Link Parameters

Flat key/value pairs describing a scenario, embedded in a shareable link
query string. Keys match the links produced by the web calculator.
"""

from typing import Dict, Mapping
from urllib.parse import urlencode

from immosim.calculations.amortization import InsuranceBasis, LoanParameters
from immosim.calculations.parsing import parse_number
from immosim.calculations.viager import SaleMode, ViagerScenario

LOAN_KEYS = {
    "principal": "capital",
    "annual_rate_pct": "taux",
    "insurance_rate_pct": "assurance",
    "years": "duree",
}

VIAGER_KEYS = {
    "market_value": "valeur",
    "age": "age",
    "discount_rate_pct": "taux",
    "estimated_rent": "loyer",
    "upfront_pct": "bouquet",
    "indexation_rate_pct": "index",
    "annual_charges": "charges",
    "annual_property_tax": "taxe",
    "term_years": "duree",
    "appreciation_rate_pct": "revalo",
    "sale_costs_pct": "frais",
}

SEX_KEY = "sexe"
MODE_KEY = "mode"


def format_param(value: float) -> str:
    """Decimal string without a trailing ".0" for whole numbers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def loan_to_params(loan: LoanParameters, suffix: str = "") -> Dict[str, str]:
    """Loan fields as share-link parameters; ``suffix`` marks scenario B ("B")."""
    return {
        key + suffix: format_param(getattr(loan, field))
        for field, key in LOAN_KEYS.items()
    }


def loan_from_params(
    params: Mapping[str, str],
    suffix: str = "",
    insurance_basis: InsuranceBasis = InsuranceBasis.declining,
) -> LoanParameters:
    """Rebuild a loan from share-link parameters; missing keys read as 0."""
    values = {
        field: parse_number(params.get(key + suffix))
        for field, key in LOAN_KEYS.items()
    }
    return LoanParameters(insurance_basis=insurance_basis, **values)


def viager_to_params(scenario: ViagerScenario) -> Dict[str, str]:
    """Viager scenario as share-link parameters."""
    params = {
        key: format_param(getattr(scenario, field))
        for field, key in VIAGER_KEYS.items()
    }
    params[SEX_KEY] = scenario.sex
    params[MODE_KEY] = scenario.mode.value
    return params


def viager_from_params(params: Mapping[str, str]) -> ViagerScenario:
    """
    Rebuild a viager scenario from share-link parameters.

    Missing numeric keys keep the scenario defaults; an unknown sale mode
    falls back to an occupied sale.
    """
    values = {
        field: parse_number(params[key])
        for field, key in VIAGER_KEYS.items()
        if key in params
    }
    values.setdefault("market_value", 0.0)
    values.setdefault("age", 0.0)

    if SEX_KEY in params:
        values["sex"] = params[SEX_KEY]

    try:
        values["mode"] = SaleMode(params.get(MODE_KEY, SaleMode.occupied.value))
    except ValueError:
        values["mode"] = SaleMode.occupied

    return ViagerScenario(**values)


def to_query_string(params: Mapping[str, str]) -> str:
    """URL-encode parameters for the fragment of a share link."""
    return urlencode(params)
