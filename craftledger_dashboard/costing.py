"""
Per-unit cost resolution for products.

unit_material_cost() is the only place material cost per unit is computed;
everything else (metrics, product cards, break-even) goes through it.
"""


def material_unit_cost(material):
    """Cost of one product-unit's worth of a bulk material (0 when yield is 0)."""
    if material.yield_units > 0:
        return material.cost / material.yield_units
    return 0.0


def unit_material_cost(product, materials):
    """Sum of cost/yield over the product's linked materials.

    `materials` may be a list or a dict keyed by id. Ids that no longer resolve
    (deleted materials) contribute nothing.
    """
    if not isinstance(materials, dict):
        materials = {m.id: m for m in materials}
    cost = 0.0
    for mid in product.material_ids:
        mat = materials.get(mid)
        if mat is not None:
            cost += material_unit_cost(mat)
    return cost


def unit_production_cost(product, materials):
    """Material + labor + packaging: what is sunk in one finished unit."""
    return unit_material_cost(product, materials) + product.labor_cost + product.packaging_cost


def unit_total_cost(product, materials, include_fail_buffer=False):
    total = unit_production_cost(product, materials) + product.shipping_cost
    if include_fail_buffer and product.fail_buffer:
        total += product.fail_buffer
    return total


def shipping_for_order(order, product):
    # manualShippingCost is already the order total
    return order.manual_shipping_cost.resolve(product.shipping_cost)


def order_revenue(order, product):
    return order.final_price.resolve(product.price * order.units)
