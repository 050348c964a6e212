"""
Life Expectancy Lookup

Simplified INSEE-style table of remaining years of life by age and sex,
linearly interpolated between five-year breakpoints. Used as the valuation
horizon of a life-annuity sale.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

MALE_MARKER = "h"  # "Homme"


@dataclass(frozen=True)
class ActuarialTable:
    """Remaining life expectancy (years) at ascending breakpoint ages."""

    ages: Tuple[float, ...]
    male: Tuple[float, ...]
    female: Tuple[float, ...]

    def __post_init__(self):
        if not (len(self.ages) == len(self.male) == len(self.female)):
            raise ValueError("Table columns must have the same length")
        if any(a1 <= a0 for a0, a1 in zip(self.ages, self.ages[1:])):
            raise ValueError("Table ages must be strictly ascending")

    def curve(self, sex: str) -> Tuple[float, ...]:
        """Male curve if ``sex`` starts with "H"/"h", female otherwise."""
        if (sex or "").strip()[:1].lower() == MALE_MARKER:
            return self.male
        return self.female

    def lookup(self, age: float, sex: str) -> float:
        """
        Remaining years for ``age``, clamped to the table's age range.

        np.interp returns the first/last value outside the breakpoints,
        so ages are never extrapolated.
        """
        return float(np.interp(age, self.ages, self.curve(sex)))


INSEE_TABLE = ActuarialTable(
    ages=(50, 55, 60, 65, 70, 75, 80, 85, 90, 95, 100),
    male=(31.0, 26.8, 22.8, 19.2, 15.7, 12.4, 9.4, 6.8, 4.8, 3.4, 2.4),
    female=(36.0, 31.5, 27.2, 23.1, 19.1, 15.3, 11.7, 8.6, 6.0, 4.1, 2.8),
)


def life_expectancy(age: float, sex: str, table: ActuarialTable = INSEE_TABLE) -> float:
    """Remaining life expectancy in years for an occupant of ``age`` and ``sex``."""
    return table.lookup(age, sex)
