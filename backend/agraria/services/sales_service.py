# Overview: Service-layer operations for sales; point-of-sale registration and the sales list.

"""
Sales Service

WHY: A sale is validated as a whole before anything is written: every line
must reference an existing product, lines for the same product are merged,
and the merged quantity may not exceed stock. Only then is the sale stored
and stock withdrawn (one 'Venta' outbound movement per line).

Totals are computed in Decimal and rounded half up to cents:
    subtotal = sum(line subtotals)
    tax      = subtotal * TAX_RATE
    total    = subtotal + tax
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable

from flask import current_app

from ..models import PAYMENT_METHODS, Product, Sale, SaleItem, User
from ..validation import (
    FieldErrors,
    NotFoundError,
    clean_str,
    ensure_payload,
    money,
    parse_int,
    parse_money,
    parse_past_date,
    require_fields,
    to_cents,
)
from agraria.time_utils import to_utc_z, today, utcnow
from .inventory_service import InventoryService
from .storage_service import Collection


DEFAULT_TAX_RATE = Decimal("0.21")


class SaleError(Exception):
    """Sale rule violation (stock, unknown product)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


@dataclass
class SaleLineInput:
    product_id: int
    quantity: int
    unit_price: Decimal | None


@dataclass
class SaleInput:
    sale_date: str
    customer_name: str
    payment_method: str
    observations: str
    lines: list[SaleLineInput]


def parse_sale_input(payload, today_date: date) -> SaleInput:
    payload = ensure_payload(payload)
    errors = FieldErrors()
    require_fields(payload, ["saleDate", "customerName", "paymentMethod"], errors)

    sale_date = parse_past_date(payload, "saleDate", errors, today_date)

    payment_method = clean_str(payload, "paymentMethod")
    if payment_method and payment_method not in PAYMENT_METHODS:
        errors.add("paymentMethod", "Unknown payment method")

    raw_items = payload.get("items")
    lines: list[SaleLineInput] = []
    if not isinstance(raw_items, list) or not raw_items:
        errors.add("items", "Add at least one product to the sale")
    else:
        for index, raw in enumerate(raw_items):
            prefix = f"items.{index}"
            if not isinstance(raw, dict):
                errors.add(prefix, "Invalid item")
                continue
            item_errors = FieldErrors()
            require_fields(raw, ["productId", "quantity"], item_errors)
            product_id = parse_int(raw, "productId", item_errors)
            quantity = parse_int(raw, "quantity", item_errors)
            if quantity is not None and quantity <= 0:
                item_errors.add("quantity", "Quantity must be greater than zero")
            unit_price = parse_money(raw, "unitPrice", item_errors)
            if unit_price is not None and unit_price <= 0:
                item_errors.add("unitPrice", "Price must be greater than zero")
            for name, message in item_errors.errors.items():
                errors.add(f"{prefix}.{name}", message)
            if not item_errors:
                lines.append(SaleLineInput(product_id, quantity, unit_price))

    errors.raise_if_any()
    return SaleInput(
        sale_date=sale_date.isoformat(),
        customer_name=clean_str(payload, "customerName"),
        payment_method=payment_method,
        observations=clean_str(payload, "observations"),
        lines=lines,
    )


def merge_lines(lines: list[SaleLineInput]) -> list[SaleLineInput]:
    """Lines for the same product become one; the first line's price wins."""
    merged: dict[int, SaleLineInput] = {}
    for line in lines:
        existing = merged.get(line.product_id)
        if existing is None:
            merged[line.product_id] = SaleLineInput(line.product_id, line.quantity, line.unit_price)
        else:
            existing.quantity += line.quantity
            if existing.unit_price is None:
                existing.unit_price = line.unit_price
    return list(merged.values())


def compute_totals(items: list[SaleItem], tax_rate: Decimal) -> tuple[Decimal, Decimal, Decimal]:
    subtotal = to_cents(sum((Decimal(str(item.subtotal)) for item in items), Decimal("0")))
    tax = to_cents(subtotal * tax_rate)
    return subtotal, tax, subtotal + tax


class SalesService:
    def __init__(
        self,
        sales: Collection[Sale],
        inventory: InventoryService,
        tax_rate: Decimal = DEFAULT_TAX_RATE,
        today_fn: Callable[[], date] = today,
    ):
        self.sales = sales
        self.inventory = inventory
        self.tax_rate = tax_rate
        self.today_fn = today_fn

    def list_sales(self, limit: int | None = None) -> list[Sale]:
        """Newest first (by sale date, then by id)."""
        sales = sorted(self.sales.load(), key=lambda s: (s.sale_date, s.id), reverse=True)
        return sales[:limit] if limit else sales

    def get_sale(self, sale_id: int) -> Sale:
        sale = self.sales.get(sale_id)
        if sale is None:
            raise NotFoundError("Sale not found")
        return sale

    def available_products(self) -> list[Product]:
        """Products offered at the point of sale (in stock only)."""
        return [p for p in self.inventory.list_products() if p.current_stock > 0]

    def _build_items(self, lines: list[SaleLineInput]) -> list[SaleItem]:
        products = {p.id: p for p in self.inventory.products.load()}
        items = []
        for line in merge_lines(lines):
            product = products.get(line.product_id)
            if product is None:
                raise SaleError("Product not found", {"product_id": line.product_id})
            if line.quantity > product.current_stock:
                raise SaleError(
                    f"Not enough stock for {product.name}",
                    {"product_id": product.id, "available": product.current_stock, "requested": line.quantity},
                )
            unit_price = line.unit_price if line.unit_price is not None else Decimal(str(product.unit_price))
            if unit_price <= 0:
                raise SaleError(f"{product.name} has no price", {"product_id": product.id})
            items.append(
                SaleItem(
                    product_id=product.id,
                    product_name=product.name,
                    unit=product.unit,
                    quantity=line.quantity,
                    unit_price=money(unit_price),
                    subtotal=money(unit_price * line.quantity),
                )
            )
        return items

    def register_sale(self, payload, user: User) -> Sale:
        data = parse_sale_input(payload, self.today_fn())
        items = self._build_items(data.lines)
        subtotal, tax, total = compute_totals(items, self.tax_rate)

        sales = self.sales.load()
        sale = Sale(
            id=self.sales.next_id(sales),
            sale_date=data.sale_date,
            customer_name=data.customer_name,
            payment_method=data.payment_method,
            items=items,
            subtotal=float(subtotal),
            tax=float(tax),
            total=float(total),
            observations=data.observations,
            created_by=user.username,
            user_id=user.id,
            created_at=to_utc_z(utcnow()),
        )
        sales.append(sale)
        self.sales.save(sales)

        self.inventory.withdraw_for_sale([(item.product_id, item.quantity) for item in items], user)
        current_app.logger.info("Sale %s registered by %s: total %s", sale.id, user.username, total)
        return sale
