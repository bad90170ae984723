"""Order outcome buckets for the cash-on-delivery lifecycle."""
from dataclasses import dataclass, field

from craftledger_dashboard.models import OrderStatus

IN_FLIGHT = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.SHIPPED})

# Statuses where the parcel left the workshop and a courier fee was incurred
SHIPPING_DISPATCHED = frozenset({
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.RETURNED_FREE,
    OrderStatus.RETURNED_PAID,
    OrderStatus.LOST_DAMAGED,
})

_WORKFLOW = {
    OrderStatus.PENDING: [OrderStatus.CONFIRMED],
    OrderStatus.CONFIRMED: [OrderStatus.SHIPPED],
    OrderStatus.SHIPPED: [
        OrderStatus.DELIVERED,
        OrderStatus.RETURNED_FREE,
        OrderStatus.RETURNED_PAID,
        OrderStatus.LOST_DAMAGED,
    ],
}


@dataclass
class OrderBuckets:
    delivered: list = field(default_factory=list)
    returned_free: list = field(default_factory=list)
    returned_paid: list = field(default_factory=list)
    lost_damaged: list = field(default_factory=list)
    in_flight: list = field(default_factory=list)

    @property
    def attempted_outcomes(self) -> int:
        """Orders whose delivery outcome is known."""
        return (len(self.delivered) + len(self.returned_free)
                + len(self.returned_paid) + len(self.lost_damaged))

    @property
    def failed(self) -> list:
        return self.returned_free + self.returned_paid + self.lost_damaged


def classify_orders(orders) -> OrderBuckets:
    buckets = OrderBuckets()
    for o in orders:
        if o.status == OrderStatus.DELIVERED:
            buckets.delivered.append(o)
        elif o.status == OrderStatus.RETURNED_FREE:
            buckets.returned_free.append(o)
        elif o.status == OrderStatus.RETURNED_PAID:
            buckets.returned_paid.append(o)
        elif o.status == OrderStatus.LOST_DAMAGED:
            buckets.lost_damaged.append(o)
        else:
            buckets.in_flight.append(o)
    return buckets


def next_statuses(status):
    """Suggested next steps in the COD workflow. Not enforced: any status may follow any other."""
    return list(_WORKFLOW.get(OrderStatus(status), []))
