# Overview: Read-only query views over activities and sales with filters and sorting.

"""
Reporting Service

WHY: The query pages search the stored collections without changing them.
Filters arrive as query-string values; they are parsed once into a typed
filter object so the matching code never deals with raw strings.

Sales come from two stores: point-of-sale records under
`sistemaAgraria_sales` and the older query-shaped records under `sales`.
Both are read into Sale records; the older store is never written.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from ..models import Activity, Sale
from ..validation import FieldErrors, parse_int, parse_money
from agraria.time_utils import parse_iso_date
from .activity_service import newest_first
from .storage_service import Collection


SALES_SORT_FIELDS = {
    "date": lambda s: s.sale_date,
    "customer": lambda s: s.customer_name.lower(),
    "products": lambda s: len(s.items),
    "subtotal": lambda s: s.subtotal,
    "tax": lambda s: s.tax,
    "total": lambda s: s.total,
}


def _plain(args: Mapping) -> dict:
    """First value per key (works for request.args as well as plain dicts)."""
    return {key: args.get(key) for key in args}


def _text(args: Mapping, key: str) -> str:
    return str(args.get(key) or "").strip()


def _parse_date_filter(args: Mapping, key: str, errors: FieldErrors) -> str | None:
    raw = _text(args, key)
    if not raw:
        return None
    try:
        value = parse_iso_date(raw)
    except ValueError:
        value = None
    if value is None:
        errors.add(key, "Invalid date")
        return None
    return value.isoformat()


@dataclass
class ActivityFilters:
    environment_id: int | None = None
    environment_type: str = ""
    teacher: str = ""
    year: str = ""
    division: str = ""
    group: str = ""
    title: str = ""
    description: str = ""
    date_from: str | None = None
    date_to: str | None = None

    @classmethod
    def from_args(cls, args: Mapping) -> "ActivityFilters":
        errors = FieldErrors()
        filters = cls(
            environment_id=parse_int(_plain(args), "environmentId", errors),
            environment_type=_text(args, "environmentType"),
            teacher=_text(args, "teacher"),
            year=_text(args, "year"),
            division=_text(args, "division"),
            group=_text(args, "group"),
            title=_text(args, "title"),
            description=_text(args, "description"),
            date_from=_parse_date_filter(args, "dateFrom", errors),
            date_to=_parse_date_filter(args, "dateTo", errors),
        )
        errors.raise_if_any()
        return filters

    def matches(self, activity: Activity) -> bool:
        if self.environment_id is not None and activity.environment_id != self.environment_id:
            return False
        if self.environment_type and activity.environment_type != self.environment_type:
            return False
        if self.teacher and activity.responsible_teacher != self.teacher:
            return False
        if self.year and activity.year != self.year:
            return False
        if self.division and activity.division != self.division:
            return False
        if self.group and self.group.lower() not in activity.group.lower():
            return False
        if self.title and self.title.lower() not in activity.activity_title.lower():
            return False
        if self.description and self.description.lower() not in activity.activity_description.lower():
            return False
        # Inclusive range on YYYY-MM-DD strings
        if self.date_from and activity.activity_date < self.date_from:
            return False
        if self.date_to and activity.activity_date > self.date_to:
            return False
        return True


@dataclass
class SalesFilters:
    date_from: str | None = None
    date_to: str | None = None
    customer: str = ""
    product: str = ""
    min_total: Decimal | None = None
    max_total: Decimal | None = None
    sort: str = "date"
    direction: str = "desc"

    @classmethod
    def from_args(cls, args: Mapping) -> "SalesFilters":
        errors = FieldErrors()
        plain = _plain(args)
        sort = _text(args, "sort") or "date"
        if sort not in SALES_SORT_FIELDS:
            errors.add("sort", "Unknown sort field")
        direction = (_text(args, "direction") or "desc").lower()
        if direction not in ("asc", "desc"):
            errors.add("direction", "Direction must be 'asc' or 'desc'")
        filters = cls(
            date_from=_parse_date_filter(args, "dateFrom", errors),
            date_to=_parse_date_filter(args, "dateTo", errors),
            customer=_text(args, "customer"),
            product=_text(args, "product"),
            min_total=parse_money(plain, "minAmount", errors),
            max_total=parse_money(plain, "maxAmount", errors),
            sort=sort,
            direction=direction,
        )
        errors.raise_if_any()
        return filters

    def matches(self, sale: Sale) -> bool:
        if self.date_from and sale.sale_date < self.date_from:
            return False
        if self.date_to and sale.sale_date > self.date_to:
            return False
        if self.customer and self.customer.lower() not in sale.customer_name.lower():
            return False
        if self.product and not any(item.product_name == self.product for item in sale.items):
            return False
        total = Decimal(str(sale.total))
        if self.min_total is not None and total < self.min_total:
            return False
        if self.max_total is not None and total > self.max_total:
            return False
        return True


class ReportingService:
    def __init__(
        self,
        activities: Collection[Activity],
        sales: Collection[Sale],
        legacy_sales: Collection[Sale],
    ):
        self.activities = activities
        self.sales = sales
        self.legacy_sales = legacy_sales

    # ===== ACTIVITIES =====

    def query_activities(self, filters: ActivityFilters | None = None) -> list[Activity]:
        filters = filters or ActivityFilters()
        return newest_first([a for a in self.activities.load() if filters.matches(a)])

    def activity_filter_options(self) -> dict:
        """Distinct values offered by the activity query form."""
        activities = self.activities.load()
        environments = {a.environment_id: a.environment_name for a in activities if a.environment_id is not None}
        return {
            "environments": [{"id": k, "name": v} for k, v in sorted(environments.items())],
            "teachers": sorted({a.responsible_teacher for a in activities if a.responsible_teacher}),
            "years": sorted({a.year for a in activities if a.year}),
            "divisions": sorted({a.division for a in activities if a.division}),
        }

    # ===== SALES =====

    def all_sales(self) -> list[tuple[str, Sale]]:
        """(source, sale) pairs; source is 'pos' or 'legacy'."""
        rows = [("pos", sale) for sale in self.sales.load()]
        rows.extend(("legacy", sale) for sale in self.legacy_sales.load())
        return rows

    def query_sales(self, filters: SalesFilters | None = None) -> list[tuple[str, Sale]]:
        filters = filters or SalesFilters()
        rows = [(source, sale) for source, sale in self.all_sales() if filters.matches(sale)]
        key = SALES_SORT_FIELDS[filters.sort]
        rows.sort(key=lambda row: key(row[1]), reverse=filters.direction == "desc")
        return rows

    def sales_filter_options(self) -> dict:
        names = {item.product_name for _, sale in self.all_sales() for item in sale.items if item.product_name}
        return {"products": sorted(names)}
