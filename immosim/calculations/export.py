"""
Amortization Schedule Export

Semicolon-separated text with comma decimals, as opened by a French
spreadsheet: one row per month.
"""

import csv
import io
from typing import Iterable, List, NamedTuple

from immosim.calculations.amortization import AmortizationRow
from immosim.calculations.parsing import parse_number

HEADER = [
    "Mois",
    "Échéance totale",
    "Capital remboursé",
    "Intérêts",
    "Assurance",
    "Capital restant dû",
]


class ExportedRow(NamedTuple):
    """A schedule row read back from an export."""

    month: int
    installment: float
    principal: float
    interest: float
    insurance: float
    balance: float


def _decimal(value: float) -> str:
    return f"{value:.2f}".replace(".", ",")


def schedule_to_csv(schedule: Iterable[AmortizationRow]) -> str:
    """Serialize a schedule to semicolon-delimited text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", lineterminator="\n")
    writer.writerow(HEADER)
    for row in schedule:
        writer.writerow(
            [
                row.month,
                _decimal(row.installment),
                _decimal(row.principal),
                _decimal(row.interest),
                _decimal(row.insurance),
                _decimal(row.balance),
            ]
        )
    return buffer.getvalue()


def parse_schedule_csv(text: str) -> List[ExportedRow]:
    """Read rows written by ``schedule_to_csv``. The header and blank lines are skipped."""
    rows = []
    for record in csv.reader(io.StringIO(text), delimiter=";"):
        if not record or record == HEADER:
            continue
        values = [parse_number(value) for value in record[: len(HEADER)]]
        values += [0.0] * (len(HEADER) - len(values))
        rows.append(ExportedRow(int(values[0]), *values[1:]))
    return rows
