"""Tests for per-unit cost resolution."""
import pytest

from craftledger_dashboard.costing import (
    material_unit_cost,
    unit_material_cost,
    unit_production_cost,
    unit_total_cost,
    shipping_for_order,
    order_revenue,
)
from craftledger_dashboard.models import Override

from conftest import make_material, make_product, make_order


class TestMaterialCost:
    """Cost per unit of bulk materials."""

    def test_cost_over_yield(self):
        assert material_unit_cost(make_material(cost=300, yield_units=15)) == 20

    @pytest.mark.parametrize("yield_units", [0, -5])
    def test_non_positive_yield_contributes_nothing(self, yield_units):
        assert material_unit_cost(make_material(cost=300, yield_units=yield_units)) == 0

    def test_sum_over_linked_materials(self):
        mats = [make_material("m1", 1500, 30), make_material("m2", 100, 50)]
        product = make_product(material_ids=["m1", "m2"])
        assert unit_material_cost(product, mats) == pytest.approx(52)

    def test_accepts_dict_of_materials(self):
        mats = {"m": make_material("m", 300, 15)}
        assert unit_material_cost(make_product(), mats) == 20

    def test_empty_material_ids(self):
        assert unit_material_cost(make_product(material_ids=[]), [make_material()]) == 0

    def test_deleted_material_is_skipped(self):
        product = make_product(material_ids=["m", "gone"])
        assert unit_material_cost(product, [make_material("m", 300, 15)]) == 20


class TestUnitCosts:
    """Production and total unit cost."""

    def test_production_cost(self):
        assert unit_production_cost(make_product(), [make_material()]) == 75

    def test_total_cost_adds_shipping(self):
        assert unit_total_cost(make_product(), [make_material()]) == 110

    def test_fail_buffer_only_on_request(self):
        product = make_product(fail_buffer=10)
        assert unit_total_cost(product, [make_material()]) == 110
        assert unit_total_cost(product, [make_material()], include_fail_buffer=True) == 120


class TestOrderAmounts:
    """Override resolution for order revenue and shipping."""

    def test_default_revenue_is_price_times_units(self):
        assert order_revenue(make_order(quantity=2), make_product()) == 700

    def test_missing_or_zero_quantity_is_one(self):
        assert order_revenue(make_order(quantity=None), make_product()) == 350
        assert order_revenue(make_order(quantity=0), make_product()) == 350

    def test_final_price_is_order_total(self):
        order = make_order(quantity=2, final_price=Override(700))
        assert order_revenue(order, make_product()) == 700

    def test_explicit_zero_price_is_kept(self):
        assert order_revenue(make_order(final_price=Override(0)), make_product()) == 0

    def test_shipping_default_and_override(self):
        assert shipping_for_order(make_order(), make_product()) == 35
        assert shipping_for_order(make_order(shipping=Override(50)), make_product()) == 50
        assert shipping_for_order(make_order(shipping=Override(0)), make_product()) == 0
