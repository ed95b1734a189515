from __future__ import annotations

from dataclasses import dataclass, field

PAYMENT_METHODS = {
    "efectivo": "Efectivo",
    "tarjeta": "Tarjeta",
    "transferencia": "Transferencia",
}


@dataclass
class SaleItem:
    product_id: int | None
    product_name: str
    unit: str = ""
    quantity: int = 0
    unit_price: float = 0.0
    subtotal: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "SaleItem":
        # Legacy query records use name / price instead of productName / unitPrice
        product_id = data.get("productId")
        return cls(
            product_id=int(product_id) if product_id not in (None, "") else None,
            product_name=str(data.get("productName") or data.get("name") or ""),
            unit=str(data.get("unit") or ""),
            quantity=int(data.get("quantity") or 0),
            unit_price=float(data.get("unitPrice", data.get("price")) or 0),
            subtotal=float(data.get("subtotal") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "unit": self.unit,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "subtotal": self.subtotal,
        }


@dataclass
class Sale:
    """
    A registered sale.

    Two persisted shapes exist: the point-of-sale shape (`saleDate`,
    `customerName`, `items`, `createdBy`) and the older query shape under the
    `sales` key (`date`, `customer`, `seller`, `products`). Both read into this
    record; writes always use the point-of-sale shape.
    """
    id: int
    sale_date: str
    customer_name: str
    payment_method: str = ""
    items: list[SaleItem] = field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    observations: str = ""
    created_by: str = ""
    user_id: int | None = None
    created_at: str | None = None

    @property
    def products_summary(self) -> str:
        return "; ".join(f"{item.product_name} ({item.quantity})" for item in self.items)

    @classmethod
    def from_dict(cls, data: dict) -> "Sale":
        raw_items = data.get("items")
        if raw_items is None:
            raw_items = data.get("products") or []
        user_id = data.get("userId")
        return cls(
            id=int(data["id"]),
            sale_date=str(data.get("saleDate") or data.get("date") or ""),
            customer_name=str(data.get("customerName") or data.get("customer") or ""),
            payment_method=str(data.get("paymentMethod") or ""),
            items=[SaleItem.from_dict(item) for item in raw_items if isinstance(item, dict)],
            subtotal=float(data.get("subtotal") or 0),
            tax=float(data.get("tax") or 0),
            total=float(data.get("total") or 0),
            observations=str(data.get("observations") or ""),
            created_by=str(data.get("createdBy") or data.get("seller") or ""),
            user_id=int(user_id) if user_id not in (None, "") else None,
            created_at=data.get("createdAt"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "saleDate": self.sale_date,
            "customerName": self.customer_name,
            "paymentMethod": self.payment_method,
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
            "observations": self.observations,
            "createdBy": self.created_by,
            "userId": self.user_id,
            "createdAt": self.created_at,
        }
