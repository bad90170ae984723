"""Coaching message for the dashboard: an ordered decision list over Metrics."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Insight:
    key: str
    severity: str        # neutral | danger | warning | info | success
    title: str
    message: str


def _no_orders(m):
    return m.order_count == 0


def _delivery_rate_danger(m):
    return m.delivery_rate > 0 and m.delivery_rate <= m.break_even_delivery_rate + 5


def _losing_per_unit(m):
    return m.profit_per_unit < 0


def _capital_in_stock(m):
    return m.cash_balance < 0 and m.inventory_value > abs(m.cash_balance)


def _ready_to_scale(m):
    return m.profit_per_unit > 50 and m.delivery_rate > 60


# First match wins; order is priority.
RULES = [
    (_no_orders, Insight(
        "no_orders", "neutral", "Welcome",
        "Add your first order to start seeing your business pulse.")),
    (_delivery_rate_danger, Insight(
        "delivery_rate_danger", "danger", "Delivery rate is at break-even",
        "Too many parcels are coming back. Call every customer to confirm before shipping.")),
    (_losing_per_unit, Insight(
        "losing_per_unit", "warning", "Losing money per unit",
        "Each delivered unit is costing more than it brings in. Review your price, "
        "return losses and scaling ad spend.")),
    (_capital_in_stock, Insight(
        "capital_in_stock", "info", "Your cash is in stock, not lost",
        "Cash balance is negative but your remaining materials are worth more than the gap.")),
    (_ready_to_scale, Insight(
        "ready_to_scale", "success", "Healthy unit economics",
        "Profit per unit and delivery rate are strong. Consider increasing scaling ad spend.")),
]

DEFAULT_INSIGHT = Insight(
    "keep_tracking", "neutral", "Keep tracking",
    "Keep logging orders, returns and ad spend to sharpen these numbers.")


def evaluate_insight(metrics) -> Insight:
    for predicate, insight in RULES:
        if predicate(metrics):
            return insight
    return DEFAULT_INSIGHT
