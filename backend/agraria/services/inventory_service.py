# Overview: Service-layer operations for inventory; products, stock levels and the movement log.

"""
Inventory Service

WHY: Stock changes only through movements, so every change is explained:
- entrada: adds quantity to stock
- salida: subtracts quantity; may not exceed current stock
- ajuste: sets stock to the counted quantity

Products live under `inventory_products`. The older `sistemaAgraria_products`
key is read only when the canonical key holds nothing, and is never written.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable

from flask import current_app

from ..models import MOVEMENT_TYPES, PRODUCT_CATEGORIES, InventoryMovement, Product, User
from ..validation import (
    FieldErrors,
    NotFoundError,
    ValidationError,
    clean_str,
    ensure_payload,
    money,
    parse_int,
    parse_money,
    require_fields,
)
from agraria.time_utils import today
from .storage_service import Collection


class InventoryError(Exception):
    """Stock rule violation (e.g. outbound quantity above current stock)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


@dataclass
class MovementInput:
    product_id: int
    type: str
    quantity: int
    reason: str


@dataclass
class ProductInput:
    name: str
    category: str
    initial_stock: int
    min_stock: int
    unit_price: Decimal
    unit: str


def parse_movement_input(payload) -> MovementInput:
    payload = ensure_payload(payload)
    errors = FieldErrors()
    require_fields(payload, ["productId", "type", "quantity", "reason"], errors)

    movement_type = clean_str(payload, "type")
    if movement_type and movement_type not in MOVEMENT_TYPES:
        errors.add("type", "Unknown movement type")

    product_id = parse_int(payload, "productId", errors)
    quantity = parse_int(payload, "quantity", errors)
    if quantity is not None:
        # An adjustment may set the stock to zero; inbound/outbound must move something
        minimum = 0 if movement_type == "ajuste" else 1
        if quantity < minimum:
            errors.add("quantity", "Quantity must be greater than zero" if minimum else "Quantity cannot be negative")

    errors.raise_if_any()
    return MovementInput(
        product_id=product_id,
        type=movement_type,
        quantity=quantity,
        reason=clean_str(payload, "reason"),
    )


def parse_product_input(payload) -> ProductInput:
    payload = ensure_payload(payload)
    errors = FieldErrors()
    require_fields(payload, ["name", "category", "unitPrice", "unit"], errors)

    category = clean_str(payload, "category")
    if category and category not in PRODUCT_CATEGORIES:
        errors.add("category", "Unknown category")

    initial_stock = parse_int(payload, "initialStock", errors) or 0
    if initial_stock < 0:
        errors.add("initialStock", "Stock cannot be negative")
    min_stock = parse_int(payload, "minStock", errors) or 0
    if min_stock < 0:
        errors.add("minStock", "Minimum stock cannot be negative")

    unit_price = parse_money(payload, "unitPrice", errors)
    if unit_price is not None and unit_price <= 0:
        errors.add("unitPrice", "Price must be greater than zero")

    errors.raise_if_any()
    return ProductInput(
        name=clean_str(payload, "name"),
        category=category,
        initial_stock=initial_stock,
        min_stock=min_stock,
        unit_price=unit_price,
        unit=clean_str(payload, "unit"),
    )


def operator_name(user: User | None) -> str:
    if user is None:
        return "Sistema"
    return user.full_name or user.username


class InventoryService:
    def __init__(
        self,
        products: Collection[Product],
        movements: Collection[InventoryMovement],
        today_fn: Callable[[], date] = today,
    ):
        self.products = products
        self.movements = movements
        self.today_fn = today_fn

    # ===== QUERIES =====

    def list_products(self) -> list[Product]:
        return sorted(self.products.load(), key=lambda p: p.name.lower())

    def get_product(self, product_id: int) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def list_movements(self) -> list[InventoryMovement]:
        """Newest first (by date, then by id)."""
        return sorted(self.movements.load(), key=lambda m: (m.date, m.id), reverse=True)

    def stock_summary(self) -> dict:
        products = self.products.load()
        counts = {"total": len(products), "sin_stock": 0, "stock_bajo": 0, "ok": 0}
        for product in products:
            counts[product.stock_status] += 1
        return counts

    # ===== MOVEMENTS =====

    def _append_movement(
        self,
        movements: list[InventoryMovement],
        product: Product,
        movement_type: str,
        quantity: int,
        reason: str,
        user: User | None,
    ) -> InventoryMovement:
        movement = InventoryMovement(
            id=self.movements.next_id(movements),
            product_id=product.id,
            product_name=product.name,
            type=movement_type,
            quantity=quantity,
            reason=reason,
            date=self.today_fn().isoformat(),
            user=operator_name(user),
        )
        movements.append(movement)
        return movement

    def record_movement(self, payload, user: User | None) -> tuple[Product, InventoryMovement]:
        data = parse_movement_input(payload)
        products = self.products.load()
        product = next((p for p in products if p.id == data.product_id), None)
        if product is None:
            raise NotFoundError("Product not found")

        if data.type == "salida" and data.quantity > product.current_stock:
            raise InventoryError(
                "Not enough stock available",
                {"product_id": product.id, "available": product.current_stock, "requested": data.quantity},
            )

        if data.type == "entrada":
            product.current_stock += data.quantity
        elif data.type == "salida":
            product.current_stock -= data.quantity
        else:
            product.current_stock = data.quantity

        movements = self.movements.load()
        movement = self._append_movement(movements, product, data.type, data.quantity, data.reason, user)
        self.products.save(products)
        self.movements.save(movements)
        current_app.logger.info(
            "Inventory %s of %s x %s by %s", data.type, data.quantity, product.name, movement.user
        )
        return product, movement

    def withdraw_for_sale(self, lines: list[tuple[int, int]], user: User | None) -> None:
        """
        Decrement stock for each (product_id, quantity) of a registered sale
        and log one 'Venta' outbound movement per line. Stock never goes
        below zero; products deleted since the sale was validated are skipped.
        """
        products = self.products.load()
        movements = self.movements.load()
        by_id = {p.id: p for p in products}
        for product_id, quantity in lines:
            product = by_id.get(product_id)
            if product is None:
                continue
            product.current_stock = max(0, product.current_stock - quantity)
            self._append_movement(movements, product, "salida", quantity, "Venta", user)
        self.products.save(products)
        self.movements.save(movements)

    # ===== PRODUCTS =====

    def add_product(self, payload, user: User | None) -> Product:
        data = parse_product_input(payload)
        products = self.products.load()
        if any(p.name.lower() == data.name.lower() for p in products):
            raise ValidationError({"name": "A product with this name already exists"})

        product = Product(
            id=self.products.next_id(products),
            name=data.name,
            category=data.category,
            current_stock=data.initial_stock,
            min_stock=data.min_stock,
            unit_price=money(data.unit_price),
            unit=data.unit,
        )
        products.append(product)
        self.products.save(products)

        if data.initial_stock > 0:
            movements = self.movements.load()
            self._append_movement(movements, product, "entrada", data.initial_stock, "Stock inicial", user)
            self.movements.save(movements)
        return product

    def update_price(self, product_id: int, payload) -> Product:
        payload = ensure_payload(payload)
        errors = FieldErrors()
        require_fields(payload, ["unitPrice"], errors)
        unit_price = parse_money(payload, "unitPrice", errors)
        if unit_price is not None and unit_price <= 0:
            errors.add("unitPrice", "Price must be greater than zero")
        errors.raise_if_any()

        products = self.products.load()
        product = next((p for p in products if p.id == product_id), None)
        if product is None:
            raise NotFoundError("Product not found")
        product.unit_price = money(unit_price)
        self.products.save(products)
        return product

    def delete_product(self, product_id: int) -> None:
        if not self.products.delete(product_id):
            raise NotFoundError("Product not found")
