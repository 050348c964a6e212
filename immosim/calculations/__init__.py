"""
Financial Calculation Engine

Core calculation modules for French residential real estate: loans,
annuities, viager sales and rental yields. Every function is pure.
"""

from immosim.calculations import (
    amortization,
    annuity,
    export,
    life_expectancy,
    parsing,
    rental,
    share,
    viager,
)

__all__ = [
    "amortization",
    "annuity",
    "export",
    "life_expectancy",
    "parsing",
    "rental",
    "share",
    "viager",
]
