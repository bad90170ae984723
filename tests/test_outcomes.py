"""Tests for order outcome buckets and the COD workflow."""
from craftledger_dashboard.models import OrderStatus
from craftledger_dashboard.outcomes import classify_orders, next_statuses, IN_FLIGHT

from conftest import make_order


class TestClassifyOrders:
    """Partitioning orders by delivery outcome."""

    def test_every_status_lands_in_one_bucket(self):
        orders = [make_order(s.name, status=s) for s in OrderStatus]
        buckets = classify_orders(orders)
        assert [o.status for o in buckets.delivered] == [OrderStatus.DELIVERED]
        assert [o.status for o in buckets.returned_free] == [OrderStatus.RETURNED_FREE]
        assert [o.status for o in buckets.returned_paid] == [OrderStatus.RETURNED_PAID]
        assert [o.status for o in buckets.lost_damaged] == [OrderStatus.LOST_DAMAGED]
        assert {o.status for o in buckets.in_flight} == set(IN_FLIGHT)

    def test_attempted_outcomes_excludes_in_flight(self):
        orders = [make_order(s.name, status=s) for s in OrderStatus]
        buckets = classify_orders(orders)
        assert buckets.attempted_outcomes == 4
        assert len(buckets.failed) == 3

    def test_empty(self):
        buckets = classify_orders([])
        assert buckets.attempted_outcomes == 0
        assert buckets.in_flight == []


class TestWorkflow:
    """Suggested next statuses."""

    def test_pending_to_confirmed(self):
        assert next_statuses(OrderStatus.PENDING) == [OrderStatus.CONFIRMED]

    def test_confirmed_to_shipped(self):
        assert next_statuses("Confirmed") == [OrderStatus.SHIPPED]

    def test_shipped_has_four_outcomes(self):
        assert next_statuses(OrderStatus.SHIPPED) == [
            OrderStatus.DELIVERED,
            OrderStatus.RETURNED_FREE,
            OrderStatus.RETURNED_PAID,
            OrderStatus.LOST_DAMAGED,
        ]

    def test_final_states_have_no_next_step(self):
        assert next_statuses(OrderStatus.DELIVERED) == []
        assert next_statuses(OrderStatus.LOST_DAMAGED) == []
