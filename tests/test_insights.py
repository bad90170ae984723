"""Tests for the coaching insight rules."""
from craftledger_dashboard.insights import evaluate_insight, RULES, DEFAULT_INSIGHT
from craftledger_dashboard.metrics import Metrics


def _metrics(**kw):
    base = dict(order_count=5, delivery_rate=80, break_even_delivery_rate=17.0,
                profit_per_unit=10.0, cash_balance=100.0, inventory_value=0.0)
    base.update(kw)
    return Metrics(**base)


class TestInsightRules:
    """First matching rule wins."""

    def test_no_orders(self):
        assert evaluate_insight(_metrics(order_count=0, profit_per_unit=-5)).key == "no_orders"

    def test_delivery_rate_danger(self):
        insight = evaluate_insight(_metrics(delivery_rate=22))
        assert insight.key == "delivery_rate_danger"
        assert insight.severity == "danger"

    def test_danger_beats_losing_per_unit(self):
        m = _metrics(delivery_rate=20, profit_per_unit=-30)
        assert evaluate_insight(m).key == "delivery_rate_danger"

    def test_zero_delivery_rate_is_not_danger(self):
        m = _metrics(delivery_rate=0, profit_per_unit=-30)
        assert evaluate_insight(m).key == "losing_per_unit"

    def test_losing_per_unit(self):
        insight = evaluate_insight(_metrics(profit_per_unit=-1))
        assert insight.key == "losing_per_unit"
        assert insight.severity == "warning"

    def test_capital_in_stock(self):
        insight = evaluate_insight(_metrics(cash_balance=-200, inventory_value=500))
        assert insight.key == "capital_in_stock"
        assert insight.severity == "info"

    def test_negative_cash_not_covered_by_stock(self):
        assert evaluate_insight(_metrics(cash_balance=-600, inventory_value=500)) == DEFAULT_INSIGHT

    def test_ready_to_scale(self):
        insight = evaluate_insight(_metrics(profit_per_unit=60, delivery_rate=70))
        assert insight.key == "ready_to_scale"
        assert insight.severity == "success"

    def test_thresholds_are_strict(self):
        assert evaluate_insight(_metrics(profit_per_unit=50, delivery_rate=70)) == DEFAULT_INSIGHT
        assert evaluate_insight(_metrics(profit_per_unit=60, delivery_rate=60)) == DEFAULT_INSIGHT

    def test_default(self):
        assert evaluate_insight(_metrics()).key == "keep_tracking"

    def test_rule_order(self):
        keys = [insight.key for _, insight in RULES]
        assert keys == ["no_orders", "delivery_rate_danger", "losing_per_unit",
                        "capital_in_stock", "ready_to_scale"]
