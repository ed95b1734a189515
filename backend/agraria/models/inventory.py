from __future__ import annotations

from dataclasses import dataclass

PRODUCT_CATEGORIES = ["semillas", "fertilizantes", "herramientas", "macetas", "sustratos", "otros"]

MOVEMENT_TYPES = {
    "entrada": "Entrada",
    "salida": "Salida",
    "ajuste": "Ajuste",
}

STOCK_OUT = "sin_stock"
STOCK_LOW = "stock_bajo"
STOCK_OK = "ok"

STOCK_STATUS_LABELS = {
    STOCK_OUT: "Sin Stock",
    STOCK_LOW: "Stock Bajo",
    STOCK_OK: "Stock OK",
}


@dataclass
class Product:
    """
    Stock item. Records from the older sales product list carry
    `defaultPrice` instead of `unitPrice`; both read into unit_price.
    """
    id: int
    name: str
    category: str = "otros"
    current_stock: int = 0
    min_stock: int = 0
    unit_price: float = 0.0
    unit: str = "unidad"

    @property
    def stock_status(self) -> str:
        if self.current_stock <= 0:
            return STOCK_OUT
        if self.current_stock <= self.min_stock:
            return STOCK_LOW
        return STOCK_OK

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            category=str(data.get("category") or "otros"),
            current_stock=int(data.get("currentStock") or 0),
            min_stock=int(data.get("minStock") or 0),
            unit_price=float(data.get("unitPrice", data.get("defaultPrice")) or 0),
            unit=str(data.get("unit") or "unidad"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "currentStock": self.current_stock,
            "minStock": self.min_stock,
            "unitPrice": self.unit_price,
            "unit": self.unit,
        }

    def to_view_dict(self) -> dict:
        data = self.to_dict()
        data["stockStatus"] = self.stock_status
        data["stockStatusLabel"] = STOCK_STATUS_LABELS[self.stock_status]
        return data


@dataclass
class InventoryMovement:
    """
    Append-only stock event. `product_name` is denormalized so the history
    still reads after a product is deleted.
    """
    id: int
    product_id: int
    product_name: str = ""
    type: str = "entrada"
    quantity: int = 0
    reason: str = ""
    date: str = ""
    user: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "InventoryMovement":
        return cls(
            id=int(data["id"]),
            product_id=int(data.get("productId") or 0),
            product_name=str(data.get("productName") or ""),
            type=str(data.get("type") or "entrada"),
            quantity=int(data.get("quantity") or 0),
            reason=str(data.get("reason") or ""),
            date=str(data.get("date") or ""),
            user=str(data.get("user") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "productName": self.product_name,
            "type": self.type,
            "quantity": self.quantity,
            "reason": self.reason,
            "date": self.date,
            "user": self.user,
        }
