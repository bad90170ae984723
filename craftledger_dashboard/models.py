"""
Record types for the ledger: materials, products, orders and ad spend.

Field names in the persisted blob are camelCase (materialIds, remainingUnits, ...).
Optional fields that are absent in the blob stay absent when written back, so
"no override" and "override of 0" never collapse into each other.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Union


class OrderStatus(str, Enum):
    PENDING = "Pending"                 # received, not yet called
    CONFIRMED = "Confirmed"             # customer confirmed by phone
    SHIPPED = "Shipped"                 # handed to courier
    DELIVERED = "Delivered"             # cash received
    RETURNED_FREE = "Returned (Free)"   # refused, courier waived the fee
    RETURNED_PAID = "Returned (Paid)"   # refused, shipping fee paid
    LOST_DAMAGED = "Lost/Damaged"       # total loss of product


class AdPurpose(str, Enum):
    TESTING = "Testing"       # R&D / opex
    SCALING = "Scaling"       # acquisition cost, counts against unit profit
    AWARENESS = "Awareness"   # long term brand / opex


PLATFORMS = ("Facebook", "Instagram", "TikTok")


# ── Override sum type ───────────────────────────────────────────────────────

class UseDefault:
    """Order field not set; the product default applies."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def resolve(self, default):
        return default

    @property
    def is_set(self):
        return False

    def __repr__(self):
        return "USE_DEFAULT"


@dataclass(frozen=True)
class Override:
    """Order field set explicitly; the value is an order total."""

    value: float

    def resolve(self, default):
        return self.value

    @property
    def is_set(self):
        return True


USE_DEFAULT = UseDefault()

FieldOverride = Union[Override, UseDefault]


def override_from_raw(raw) -> FieldOverride:
    if raw is None or raw == "":
        return USE_DEFAULT
    return Override(raw)


def _put_optional(out: dict, key: str, value):
    if value is not None:
        out[key] = value


def _number(raw, key: str):
    """Stored amount -> int/float. Numeric strings are accepted; bools and junk raise ValueError."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"{key} must be a number, got {raw!r}")
    if isinstance(raw, str):
        try:
            val = float(raw.strip())
        except ValueError:
            raise ValueError(f"{key} must be a number, got {raw!r}") from None
        raw = int(val) if val.is_integer() else val
    if not math.isfinite(raw):
        raise ValueError(f"{key} must be finite, got {raw!r}")
    return raw


def _optional_number(raw, key: str):
    if raw is None or raw == "":
        return None
    return _number(raw, key)


def _whole(raw, key: str):
    val = _optional_number(raw, key)
    if val is None:
        return None
    if val != int(val):
        raise ValueError(f"{key} must be a whole number, got {raw!r}")
    return int(val)


# ── Records ─────────────────────────────────────────────────────────────────

@dataclass
class Material:
    id: str
    name: str
    cost: float
    yield_units: float
    remaining_units: float
    date: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "cost": self.cost,
            "yield": self.yield_units,
            "date": self.date,
            "remainingUnits": self.remaining_units,
        }

    @staticmethod
    def from_dict(d: dict) -> "Material":
        return Material(
            id=d["id"],
            name=d["name"],
            cost=_number(d["cost"], "cost"),
            yield_units=_number(d["yield"], "yield"),
            remaining_units=_number(d.get("remainingUnits", d["yield"]), "remainingUnits"),
            date=d.get("date", ""),
        )


@dataclass
class Product:
    id: str
    name: str
    price: float
    material_ids: list = field(default_factory=list)
    labor_cost: float = 0
    packaging_cost: float = 0
    shipping_cost: float = 0
    fail_buffer: Optional[float] = None

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "materialIds": list(self.material_ids),
            "laborCost": self.labor_cost,
            "packagingCost": self.packaging_cost,
            "shippingCost": self.shipping_cost,
        }
        _put_optional(out, "failBuffer", self.fail_buffer)
        return out

    @staticmethod
    def from_dict(d: dict) -> "Product":
        material_ids = []
        for mid in d.get("materialIds", []):
            if mid not in material_ids:
                material_ids.append(mid)
        return Product(
            id=d["id"],
            name=d["name"],
            price=_number(d["price"], "price"),
            material_ids=material_ids,
            labor_cost=_number(d.get("laborCost", 0), "laborCost"),
            packaging_cost=_number(d.get("packagingCost", 0), "packagingCost"),
            shipping_cost=_number(d.get("shippingCost", 0), "shippingCost"),
            fail_buffer=_optional_number(d.get("failBuffer"), "failBuffer"),
        )


@dataclass
class Order:
    id: str
    customer_name: str
    product_id: str
    status: OrderStatus
    date: str
    last_updated: Optional[str] = None
    city: Optional[str] = None
    quantity: Optional[int] = None
    final_price: FieldOverride = USE_DEFAULT
    manual_shipping_cost: FieldOverride = USE_DEFAULT

    @property
    def units(self) -> int:
        """Quantity with the 'missing or zero means one' rule applied."""
        return self.quantity or 1

    def with_status(self, status: OrderStatus, when: str) -> "Order":
        return replace(self, status=status, last_updated=when)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "id": self.id,
            "customerName": self.customer_name,
        }
        _put_optional(out, "city", self.city)
        out["productId"] = self.product_id
        _put_optional(out, "quantity", self.quantity)
        out["status"] = self.status.value
        out["date"] = self.date
        _put_optional(out, "lastUpdated", self.last_updated)
        if self.final_price.is_set:
            out["finalPrice"] = self.final_price.value
        if self.manual_shipping_cost.is_set:
            out["manualShippingCost"] = self.manual_shipping_cost.value
        return out

    @staticmethod
    def from_dict(d: dict) -> "Order":
        return Order(
            id=d["id"],
            customer_name=d.get("customerName", ""),
            city=d.get("city"),
            product_id=d["productId"],
            quantity=_whole(d.get("quantity"), "quantity"),
            status=OrderStatus(d["status"]),
            date=d.get("date", ""),
            last_updated=d.get("lastUpdated"),
            final_price=override_from_raw(_optional_number(d.get("finalPrice"), "finalPrice")),
            manual_shipping_cost=override_from_raw(
                _optional_number(d.get("manualShippingCost"), "manualShippingCost")),
        )


@dataclass
class AdSpend:
    id: str
    platform: str
    amount: float
    purpose: AdPurpose
    date: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "platform": self.platform,
            "amount": self.amount,
            "purpose": self.purpose.value,
            "date": self.date,
        }

    @staticmethod
    def from_dict(d: dict) -> "AdSpend":
        return AdSpend(
            id=d["id"],
            platform=d["platform"],
            amount=_number(d["amount"], "amount"),
            purpose=AdPurpose(d["purpose"]),
            date=d.get("date", ""),
        )
