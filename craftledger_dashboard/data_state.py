"""
data_state.py: the record store and the process-wide instance the pages use.

RecordStore owns the four collections (materials, products, orders, ads). It
reads the blob once when created and rewrites it wholesale after every mutation.
Pages and callbacks go through get_store(); tests build their own store with
a MemoryBackend.
"""

import json
import logging
import os
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from store_loader import get_backend, UnreadableBlob

from craftledger_dashboard.models import (
    Material, Product, Order, AdSpend,
    OrderStatus, AdPurpose, PLATFORMS,
    Override, UseDefault, USE_DEFAULT, override_from_raw,
)
from craftledger_dashboard.metrics import compute_metrics
from craftledger_dashboard.insights import evaluate_insight

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
POLICIES = ("seed", "empty")


class RecordNotFound(KeyError):
    pass


# ══════════════════════════════════════════════════════════════════════════════
#  UTILITY FUNCTIONS
# ══════════════════════════════════════════════════════════════════════════════

def money(val, decimals=0):
    """Format a number as '1,234 MAD' (convenience for templates)."""
    if val < 0:
        return f"-{abs(val):,.{decimals}f} MAD"
    return f"{val:,.{decimals}f} MAD"


def parse_amount(val):
    """Form input -> int/float, or None when blank or unparseable."""
    if val is None or val == "":
        return None
    if isinstance(val, (int, float)):
        return val
    val = str(val).replace("MAD", "").replace(",", "").strip()
    try:
        num = float(val)
    except ValueError:
        return None
    return int(num) if num.is_integer() else num


def _now():
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _today():
    return datetime.now().date().isoformat()


def _as_override(val):
    if isinstance(val, (Override, UseDefault)):
        return val
    return override_from_raw(val)


# ── Demo data (seed policy) ─────────────────────────────────────────────────
DEMO_DATA = {
    "materials": [
        {"id": "m1", "name": "Premium Cowhide (Brown)", "cost": 1500, "yield": 30,
         "date": "2023-10-01", "remainingUnits": 15},
        {"id": "m2", "name": "Waxed Thread (Roll)", "cost": 100, "yield": 50,
         "date": "2023-10-01", "remainingUnits": 30},
    ],
    "products": [
        {"id": "p1", "name": "Classic Bifold Wallet", "price": 350, "materialIds": ["m1", "m2"],
         "laborCost": 40, "packagingCost": 15, "shippingCost": 35},
    ],
    "orders": [
        {"id": "o1", "customerName": "Ahmed B.", "city": "Casablanca", "productId": "p1",
         "quantity": 1, "status": "Delivered", "date": "2023-10-12", "lastUpdated": "2023-10-14",
         "finalPrice": 350, "manualShippingCost": 35},
        {"id": "o2", "customerName": "Sara K.", "city": "Rabat", "productId": "p1",
         "quantity": 1, "status": "Delivered", "date": "2023-10-12", "lastUpdated": "2023-10-14",
         "finalPrice": 350, "manualShippingCost": 35},
        {"id": "o3", "customerName": "Omar L.", "city": "Marrakech", "productId": "p1",
         "quantity": 1, "status": "Shipped", "date": "2023-10-13", "lastUpdated": "2023-10-13",
         "finalPrice": 350, "manualShippingCost": 35},
        {"id": "o4", "customerName": "Yassine M.", "city": "Tangier", "productId": "p1",
         "quantity": 1, "status": "Returned (Paid)", "date": "2023-10-11", "lastUpdated": "2023-10-15",
         "finalPrice": 350, "manualShippingCost": 35},
        {"id": "o5", "customerName": "Fatima Z.", "city": "Fes", "productId": "p1",
         "quantity": 2, "status": "Pending", "date": "2023-10-15", "lastUpdated": "2023-10-15",
         "finalPrice": 700, "manualShippingCost": 35},
    ],
    "ads": [
        {"id": "a1", "platform": "Facebook", "amount": 200, "purpose": "Testing", "date": "2023-10-05"},
        {"id": "a2", "platform": "Instagram", "amount": 500, "purpose": "Scaling", "date": "2023-10-10"},
    ],
}


def parse_blob(blob):
    """Blob text -> (materials, products, orders, ads). Raises ValueError/KeyError/TypeError."""
    data = json.loads(blob)
    if not isinstance(data, dict):
        raise ValueError("ledger blob is not an object")
    version = data.get("version", 1)
    if version != SCHEMA_VERSION:
        logger.warning("Ledger blob has version %s, expected %s; reading anyway", version, SCHEMA_VERSION)
    return (
        [Material.from_dict(d) for d in data.get("materials") or []],
        [Product.from_dict(d) for d in data.get("products") or []],
        [Order.from_dict(d) for d in data.get("orders") or []],
        [AdSpend.from_dict(d) for d in data.get("ads") or []],
    )


# ══════════════════════════════════════════════════════════════════════════════
#  RECORD STORE
# ══════════════════════════════════════════════════════════════════════════════

class RecordStore:
    """In-memory ledger backed by a key-value blob.

    policy decides the start state when the backend has nothing usable:
    "seed" loads the demo shop, "empty" starts with no records.
    """

    def __init__(self, backend, policy="seed"):
        if policy not in POLICIES:
            raise ValueError(f"Unknown init policy {policy!r}, expected one of {POLICIES}")
        self.backend = backend
        self.policy = policy
        self._materials: list[Material] = []
        self._products: list[Product] = []
        self._orders: list[Order] = []
        self._ads: list[AdSpend] = []
        self.load()

    # ── Load / save ────────────────────────────────────────────────────────
    def load(self):
        try:
            blob = self.backend.load()
        except UnreadableBlob as e:
            self._fall_back(e.raw, e)
            return
        if blob is None:
            logger.info("No stored ledger found, starting with policy %r", self.policy)
            self._apply_policy()
            return
        try:
            self._materials, self._products, self._orders, self._ads = parse_blob(blob)
        except (ValueError, KeyError, TypeError) as e:
            self._fall_back(blob, e)
            return
        logger.info("Loaded %d materials, %d products, %d orders, %d ad entries",
                    len(self._materials), len(self._products), len(self._orders), len(self._ads))

    reload = load

    def _fall_back(self, raw, error):
        """Unreadable blob: copy it aside before the next save overwrites it, then apply the policy."""
        logger.error("Stored ledger is unreadable (%s), starting with policy %r", error, self.policy)
        backup = getattr(self.backend, "backup", None)
        if backup is not None:
            try:
                logger.error("Unreadable ledger copied to %s", backup(raw))
            except Exception:
                logger.exception("Could not back up the unreadable ledger")
        self._apply_policy()

    def _apply_policy(self):
        if self.policy == "seed":
            self._set_demo()
        else:
            self._set_empty()

    def _set_demo(self):
        self._materials = [Material.from_dict(d) for d in DEMO_DATA["materials"]]
        self._products = [Product.from_dict(d) for d in DEMO_DATA["products"]]
        self._orders = [Order.from_dict(d) for d in DEMO_DATA["orders"]]
        self._ads = [AdSpend.from_dict(d) for d in DEMO_DATA["ads"]]

    def _set_empty(self):
        self._materials, self._products, self._orders, self._ads = [], [], [], []

    def to_blob(self) -> str:
        return json.dumps({
            "version": SCHEMA_VERSION,
            "materials": [m.to_dict() for m in self._materials],
            "products": [p.to_dict() for p in self._products],
            "orders": [o.to_dict() for o in self._orders],
            "ads": [a.to_dict() for a in self._ads],
        })

    def _flush(self):
        try:
            self.backend.save(self.to_blob())
        except Exception:
            logger.exception("Failed to save ledger to %s backend", getattr(self.backend, "name", "?"))

    # ── Read accessors ─────────────────────────────────────────────────────
    @property
    def materials(self):
        return list(self._materials)

    @property
    def products(self):
        return list(self._products)

    @property
    def orders(self):
        return list(self._orders)

    @property
    def ads(self):
        return list(self._ads)

    def get_material(self, material_id):
        return next((m for m in self._materials if m.id == material_id), None)

    def get_product(self, product_id):
        return next((p for p in self._products if p.id == product_id), None)

    def get_order(self, order_id):
        return next((o for o in self._orders if o.id == order_id), None)

    def get_ad_spend(self, ad_id):
        return next((a for a in self._ads if a.id == ad_id), None)

    # ── Generic helpers ────────────────────────────────────────────────────
    def _new_id(self, records):
        taken = {r.id for r in records}
        while True:
            new_id = uuid.uuid4().hex[:9]
            if new_id not in taken:
                return new_id

    def _replace(self, records, record):
        for i, r in enumerate(records):
            if r.id == record.id:
                records[i] = record
                self._flush()
                return record
        raise RecordNotFound(record.id)

    def _remove(self, records, record_id):
        for i, r in enumerate(records):
            if r.id == record_id:
                del records[i]
                self._flush()
                return r
        raise RecordNotFound(record_id)

    # ── Materials ──────────────────────────────────────────────────────────
    def add_material(self, name, cost, yield_units, date=None):
        mat = Material(
            id=self._new_id(self._materials),
            name=name,
            cost=cost,
            yield_units=yield_units,
            remaining_units=yield_units,
            date=date or _today(),
        )
        self._materials.append(mat)
        self._flush()
        return mat

    def update_material(self, material):
        return self._replace(self._materials, material)

    def delete_material(self, material_id):
        # products keep the dangling id; the cost resolver skips it
        return self._remove(self._materials, material_id)

    def record_material_usage(self, material_id, units):
        mat = self.get_material(material_id)
        if mat is None:
            raise RecordNotFound(material_id)
        remaining = max(0, mat.remaining_units - units)
        return self._replace(self._materials, replace(mat, remaining_units=remaining))

    # ── Products ───────────────────────────────────────────────────────────
    def add_product(self, name, price, material_ids=(), labor_cost=0, packaging_cost=0,
                    shipping_cost=0, fail_buffer=None):
        prod = Product(
            id=self._new_id(self._products),
            name=name,
            price=price,
            material_ids=list(dict.fromkeys(material_ids)),
            labor_cost=labor_cost,
            packaging_cost=packaging_cost,
            shipping_cost=shipping_cost,
            fail_buffer=fail_buffer,
        )
        self._products.append(prod)
        self._flush()
        return prod

    def update_product(self, product):
        return self._replace(self._products, product)

    def delete_product(self, product_id):
        # orders keep pointing at it and fall back to zero cost
        return self._remove(self._products, product_id)

    # ── Orders ─────────────────────────────────────────────────────────────
    def add_order(self, customer_name, product_id, status=OrderStatus.PENDING, date=None,
                  city=None, quantity=None, final_price=USE_DEFAULT,
                  manual_shipping_cost=USE_DEFAULT):
        order = Order(
            id=self._new_id(self._orders),
            customer_name=customer_name,
            product_id=product_id,
            status=OrderStatus(status),
            date=date or _today(),
            last_updated=_now(),
            city=city,
            quantity=quantity,
            final_price=_as_override(final_price),
            manual_shipping_cost=_as_override(manual_shipping_cost),
        )
        self._orders.append(order)
        self._flush()
        return order

    def update_order(self, order):
        return self._replace(self._orders, replace(order, last_updated=_now()))

    def update_order_status(self, order_id, status):
        order = self.get_order(order_id)
        if order is None:
            raise RecordNotFound(order_id)
        return self._replace(self._orders, order.with_status(OrderStatus(status), _now()))

    def delete_order(self, order_id):
        return self._remove(self._orders, order_id)

    # ── Ad spend ───────────────────────────────────────────────────────────
    def add_ad_spend(self, platform, amount, purpose=AdPurpose.SCALING, date=None):
        if platform not in PLATFORMS:
            raise ValueError(f"Unknown platform {platform!r}")
        ad = AdSpend(
            id=self._new_id(self._ads),
            platform=platform,
            amount=amount,
            purpose=AdPurpose(purpose),
            date=date or _today(),
        )
        self._ads.append(ad)
        self._flush()
        return ad

    def update_ad_spend(self, ad):
        return self._replace(self._ads, ad)

    def delete_ad_spend(self, ad_id):
        return self._remove(self._ads, ad_id)

    # ── Bulk actions ───────────────────────────────────────────────────────
    def reset_to_demo(self):
        self._set_demo()
        self._flush()

    def clear_all(self):
        self._set_empty()
        self._flush()

    def start_fresh(self):
        """Drop orders, ads and materials; keep product definitions, unlinked."""
        self._orders, self._ads, self._materials = [], [], []
        self._products = [replace(p, material_ids=[]) for p in self._products]
        self._flush()

    # ── Derived queries ────────────────────────────────────────────────────
    def metrics(self):
        return compute_metrics(self._materials, self._products, self._orders, self._ads)

    def insight(self):
        return evaluate_insight(self.metrics())


# ══════════════════════════════════════════════════════════════════════════════
#  PROCESS-WIDE STORE
# ══════════════════════════════════════════════════════════════════════════════

_STORE = None


def get_store():
    global _STORE
    if _STORE is None:
        policy = os.environ.get("CRAFTLEDGER_INIT_POLICY", "seed")
        _STORE = RecordStore(get_backend(), policy=policy)
    return _STORE


def set_store(store):
    global _STORE
    _STORE = store
    return store
