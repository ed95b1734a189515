# Overview: CSV export of the activity and sales query results.

"""
CSV Export

Format:
- header row, then one row per record, '\n' line separator
- every string field wrapped in double quotes, embedded quotes doubled
- numbers written bare; money with two decimals
- a line break inside a text field is written as a space, so N records
  always produce N + 1 lines
"""

from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from ..models import Activity, Sale, environment_type_label
from ..validation import to_cents


ACTIVITY_HEADERS = [
    "Fecha",
    "Hora",
    "Entorno",
    "Tipo",
    "Título",
    "Descripción",
    "Profesor",
    "Año",
    "División",
    "Grupo",
    "Duración (min)",
    "Observaciones",
]

SALES_HEADERS = ["Fecha", "Cliente", "Vendedor", "Productos", "Subtotal", "IVA", "Total"]

CSV_CONTENT_TYPE = "text/csv; charset=utf-8"


class ExportError(Exception):
    """Nothing to export."""

    def __init__(self, message: str = "There are no results to export"):
        super().__init__(message)
        self.message = message


def _cell(value):
    if isinstance(value, str):
        return " ".join(value.splitlines())
    if value is None:
        return ""
    return value


def write_csv(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    """
    Render rows as CSV text.

    Raises ExportError when there are no rows.
    """
    rows = list(rows)
    if not rows:
        raise ExportError()

    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(headers)
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for row in rows:
        writer.writerow([_cell(value) for value in row])
    return buffer.getvalue()


def _money(value: float) -> Decimal:
    return to_cents(Decimal(str(value)))


def activity_row(activity: Activity) -> list:
    return [
        activity.activity_date,
        activity.activity_time,
        activity.environment_name,
        environment_type_label(activity.environment_type),
        activity.activity_title,
        activity.activity_description,
        activity.responsible_teacher,
        activity.year,
        activity.division,
        activity.group,
        activity.duration,
        activity.observations,
    ]


def sale_row(sale: Sale) -> list:
    return [
        sale.sale_date,
        sale.customer_name,
        sale.created_by,
        sale.products_summary,
        _money(sale.subtotal),
        _money(sale.tax),
        _money(sale.total),
    ]


def activities_csv(activities: Sequence[Activity]) -> str:
    return write_csv(ACTIVITY_HEADERS, (activity_row(a) for a in activities))


def sales_csv(sales: Sequence[Sale]) -> str:
    return write_csv(SALES_HEADERS, (sale_row(s) for s in sales))


def export_filename(prefix: str, day: date) -> str:
    """e.g. consulta_actividades_2024-01-31.csv"""
    return f"{prefix}_{day.isoformat()}.csv"
