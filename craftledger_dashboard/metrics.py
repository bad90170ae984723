"""
metrics.py: business-health numbers derived from the four record collections.

Everything here is a pure function of (materials, products, orders, ads) and is
recomputed on every read; nothing is cached.

Two views share the same inputs:
  PERFORMANCE: campaign profit, profit per unit, delivery rate, break-even
  CASHFLOW:    money actually out of the drawer (bulk material buys, all ads,
                every courier fee) and the value still sitting in stock
"""

import math
from dataclasses import dataclass, asdict, field

import pandas as pd

from craftledger_dashboard.costing import (
    material_unit_cost,
    unit_material_cost,
    unit_production_cost,
    unit_total_cost,
    shipping_for_order,
    order_revenue,
)
from craftledger_dashboard.models import AdPurpose, OrderStatus
from craftledger_dashboard.outcomes import classify_orders, SHIPPING_DISPATCHED


def _round_half_up(val):
    return int(math.floor(val + 0.5))


@dataclass
class Metrics:
    # performance view
    revenue: float = 0.0
    cogs_delivered: float = 0.0
    losses_returned_free: float = 0.0
    losses_returned_paid: float = 0.0
    losses_lost_damaged: float = 0.0
    total_losses: float = 0.0
    scaling_ad_spend: float = 0.0
    non_scaling_ad_spend: float = 0.0
    total_ad_spend: float = 0.0
    campaign_profit: float = 0.0
    delivered_units: int = 0
    profit_per_unit: float = 0.0
    attempted_outcomes: int = 0
    delivery_rate: int = 0
    break_even_delivery_rate: float = 0.0
    # cashflow view
    total_material_spend: float = 0.0
    total_shipping_paid: float = 0.0
    cash_balance: float = 0.0
    inventory_value: float = 0.0
    # counts
    order_count: int = 0
    in_flight_count: int = 0
    status_counts: dict = field(default_factory=dict)

    def to_dict(self):
        return asdict(self)


def break_even_delivery_rate(product, materials):
    """Minimum % of attempted deliveries that must succeed to cover costs.

    A failed delivery still burns shipping + packaging; a success costs the
    full unit cost. Returns 0 when the denominator is 0.
    """
    fail_cost = product.shipping_cost + product.packaging_cost
    success_cost = unit_total_cost(product, materials)
    denom = product.price - success_cost + fail_cost
    if denom == 0:
        return 0.0
    return 100 * fail_cost / denom


def compute_metrics(materials, products, orders, ads) -> Metrics:
    mat_by_id = {m.id: m for m in materials}
    prod_by_id = {p.id: p for p in products}
    buckets = classify_orders(orders)
    m = Metrics()

    # ── Ad spend ────────────────────────────────────────────────────────────
    m.scaling_ad_spend = sum(a.amount for a in ads if a.purpose == AdPurpose.SCALING)
    m.non_scaling_ad_spend = sum(a.amount for a in ads if a.purpose != AdPurpose.SCALING)
    m.total_ad_spend = m.scaling_ad_spend + m.non_scaling_ad_spend

    # ── Delivered: revenue and COGS ────────────────────────────────────────
    # Orders whose product was deleted add nothing to any money sum.
    for o in buckets.delivered:
        p = prod_by_id.get(o.product_id)
        if p is None:
            continue
        m.revenue += order_revenue(o, p)
        m.cogs_delivered += unit_production_cost(p, mat_by_id) * o.units + shipping_for_order(o, p)
        m.delivered_units += o.units

    # ── Failed deliveries ──────────────────────────────────────────────────
    for o in buckets.returned_free:
        p = prod_by_id.get(o.product_id)
        if p is not None:
            # material is salvageable, courier waived the fee
            m.losses_returned_free += p.packaging_cost * o.units
    for o in buckets.returned_paid:
        p = prod_by_id.get(o.product_id)
        if p is not None:
            m.losses_returned_paid += p.packaging_cost * o.units + shipping_for_order(o, p)
    for o in buckets.lost_damaged:
        p = prod_by_id.get(o.product_id)
        if p is not None:
            m.losses_lost_damaged += unit_production_cost(p, mat_by_id) * o.units + shipping_for_order(o, p)
    m.total_losses = m.losses_returned_free + m.losses_returned_paid + m.losses_lost_damaged

    m.campaign_profit = m.revenue - m.cogs_delivered - m.total_losses - m.scaling_ad_spend
    m.profit_per_unit = m.campaign_profit / m.delivered_units if m.delivered_units > 0 else 0.0

    m.attempted_outcomes = buckets.attempted_outcomes
    if m.attempted_outcomes > 0:
        m.delivery_rate = _round_half_up(100 * len(buckets.delivered) / m.attempted_outcomes)

    # First product stands in for the catalog (single-product shop assumption).
    if products:
        m.break_even_delivery_rate = break_even_delivery_rate(products[0], mat_by_id)

    # ── Cashflow view ───────────────────────────────────────────────────────
    m.total_material_spend = sum(mat.cost for mat in materials)
    for o in orders:
        if o.status not in SHIPPING_DISPATCHED:
            continue
        p = prod_by_id.get(o.product_id)
        if p is not None:
            m.total_shipping_paid += shipping_for_order(o, p)
    m.cash_balance = m.revenue - m.total_material_spend - m.total_ad_spend - m.total_shipping_paid
    m.inventory_value = sum(material_unit_cost(mat) * mat.remaining_units for mat in materials)

    # ── Counts ──────────────────────────────────────────────────────────────
    m.order_count = len(orders)
    m.in_flight_count = len(buckets.in_flight)
    m.status_counts = {s.value: 0 for s in OrderStatus}
    for o in orders:
        m.status_counts[o.status.value] += 1

    return m


# ══════════════════════════════════════════════════════════════════════════════
#  PAGE TABLES
# ══════════════════════════════════════════════════════════════════════════════

def product_unit_economics(products, materials):
    """Per-product cost card figures, in catalog order."""
    mat_by_id = {m.id: m for m in materials}
    rows = []
    for p in products:
        material = unit_material_cost(p, mat_by_id)
        total = unit_total_cost(p, mat_by_id, include_fail_buffer=True)
        profit = p.price - total
        rows.append({
            "id": p.id,
            "name": p.name,
            "price": p.price,
            "material_cost": material,
            "production_cost": unit_production_cost(p, mat_by_id),
            "total_cost": total,
            "gross_profit": profit,
            "margin_pct": (profit / p.price * 100) if p.price else 0.0,
        })
    return rows


def ad_spend_breakdown(ads) -> pd.DataFrame:
    """Ad spend summed per platform, one column per purpose plus a total."""
    cols = [p.value for p in AdPurpose]
    if not ads:
        return pd.DataFrame(columns=["platform"] + cols + ["total"])
    df = pd.DataFrame([{"platform": a.platform, "purpose": a.purpose.value, "amount": a.amount}
                       for a in ads])
    pivot = df.pivot_table(index="platform", columns="purpose", values="amount",
                           aggfunc="sum", fill_value=0)
    pivot = pivot.reindex(columns=cols, fill_value=0)
    pivot["total"] = pivot.sum(axis=1)
    return pivot.reset_index().sort_values("total", ascending=False).reset_index(drop=True)


def order_table(orders, products) -> pd.DataFrame:
    """Orders with product fields resolved, newest first.

    Orders pointing at a deleted product show "(deleted product)" and zero
    defaults; their own overrides still display.
    """
    columns = ["id", "date", "customer", "city", "product", "quantity", "status",
               "price", "shipping", "price_overridden", "shipping_overridden"]
    if not orders:
        return pd.DataFrame(columns=columns)
    prod_by_id = {p.id: p for p in products}
    rows = []
    for o in orders:
        p = prod_by_id.get(o.product_id)
        rows.append({
            "id": o.id,
            "date": o.date,
            "customer": o.customer_name,
            "city": o.city or "",
            "product": p.name if p else "(deleted product)",
            "quantity": o.units,
            "status": o.status.value,
            "price": o.final_price.resolve(p.price * o.units if p else 0),
            "shipping": o.manual_shipping_cost.resolve(p.shipping_cost if p else 0),
            "price_overridden": o.final_price.is_set,
            "shipping_overridden": o.manual_shipping_cost.is_set,
        })
    df = pd.DataFrame(rows, columns=columns)
    df["_sort"] = pd.to_datetime(df["date"], errors="coerce")
    df = df.sort_values("_sort", ascending=False, kind="stable").drop(columns=["_sort"])
    return df.reset_index(drop=True)
