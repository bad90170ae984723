"""Tests for the form handlers behind the page callbacks."""
import pytest

from craftledger_dashboard import data_state as ds
from craftledger_dashboard.models import OrderStatus, Override, USE_DEFAULT
from craftledger_dashboard.callbacks import orders_cb, products_cb, materials_cb, ads_cb, dashboard_cb


class TestOrderForm:
    """Order modal save."""

    def test_blank_amounts_use_product_defaults(self, demo_store):
        order = orders_cb.save_order_form(demo_store, None, " Nadia ", "", "p1", None, None, "",
                                          "Pending", "2024-05-01")
        assert order.customer_name == "Nadia"
        assert order.city is None
        assert order.final_price is USE_DEFAULT
        assert order.manual_shipping_cost is USE_DEFAULT

    def test_zero_amounts_are_overrides(self, demo_store):
        order = orders_cb.save_order_form(demo_store, None, "Nadia", "Fes", "p1", 2, 0, 0,
                                          "Confirmed", None)
        assert order.final_price == Override(0)
        assert order.manual_shipping_cost == Override(0)
        assert order.quantity == 2
        assert order.status is OrderStatus.CONFIRMED
        assert order.date

    def test_edit_existing(self, demo_store):
        order = orders_cb.save_order_form(demo_store, "o5", "Fatima Z.", "Fes", "p1", 2, None, 35,
                                          "Shipped", "2023-10-15")
        assert order.id == "o5"
        assert order.final_price is USE_DEFAULT
        assert len(demo_store.orders) == 5

    def test_edit_unknown(self, demo_store):
        with pytest.raises(ds.RecordNotFound):
            orders_cb.save_order_form(demo_store, "nope", "x", "", "p1", 1, None, None, "Pending", None)

    @pytest.mark.parametrize("customer,product,qty,price", [
        ("", "p1", 1, None),
        ("x", None, 1, None),
        ("x", "p1", 0, None),
        ("x", "p1", 1.5, None),
        ("x", "p1", 1, -10),
    ])
    def test_validation(self, demo_store, customer, product, qty, price):
        with pytest.raises(orders_cb.FormError):
            orders_cb.save_order_form(demo_store, None, customer, "", product, qty, price, None,
                                      "Pending", None)


class TestProductForm:
    """Product modal save."""

    def test_add(self, empty_store):
        prod = products_cb.save_product_form(empty_store, None, "Card Holder", 150, ["m1", "m1"],
                                             20, 10, None, "")
        assert prod.material_ids == ["m1"]
        assert prod.shipping_cost == 0
        assert prod.fail_buffer is None

    def test_edit(self, demo_store):
        prod = products_cb.save_product_form(demo_store, "p1", "Wallet", 400, ["m1"], 40, 15, 35, 10)
        assert prod.price == 400
        assert prod.fail_buffer == 10
        assert len(demo_store.products) == 1

    def test_requires_name_and_price(self, empty_store):
        with pytest.raises(products_cb.FormError):
            products_cb.save_product_form(empty_store, None, "", 100, [], 0, 0, 0, None)
        with pytest.raises(products_cb.FormError):
            products_cb.save_product_form(empty_store, None, "Wallet", None, [], 0, 0, 0, None)


class TestMaterialForms:
    """Purchase form and edit modal."""

    def test_add(self, empty_store):
        mat = materials_cb.add_material_form(empty_store, "Leather", "300", 15)
        assert mat.cost == 300
        assert mat.remaining_units == 15

    def test_add_requires_fields(self, empty_store):
        with pytest.raises(materials_cb.FormError):
            materials_cb.add_material_form(empty_store, "Leather", None, 15)

    def test_edit(self, demo_store):
        mat = materials_cb.edit_material_form(demo_store, "m1", "Cowhide", 1500, 30, 10)
        assert mat.remaining_units == 10
        assert demo_store.get_material("m1").name == "Cowhide"

    def test_edit_unknown(self, demo_store):
        with pytest.raises(ds.RecordNotFound):
            materials_cb.edit_material_form(demo_store, "nope", "x", 1, 1, 1)


class TestAdForm:
    """Daily spend form."""

    def test_record(self, empty_store):
        ad = ads_cb.record_spend_form(empty_store, "Instagram", "250", "Scaling", "")
        assert ad.amount == 250
        assert empty_store.metrics().scaling_ad_spend == 250

    @pytest.mark.parametrize("platform,amount", [("Instagram", 0), ("Instagram", None), ("Snapchat", 10)])
    def test_rejects(self, empty_store, platform, amount):
        with pytest.raises(ads_cb.FormError):
            ads_cb.record_spend_form(empty_store, platform, amount, "Testing", None)


class TestBulkActions:
    """Dashboard data buttons."""

    def test_start_fresh(self, demo_store):
        msg = dashboard_cb.run_bulk_action(demo_store, "dash-start-fresh")
        assert "Products kept" in msg
        assert demo_store.orders == []

    def test_clear_all(self, demo_store):
        dashboard_cb.run_bulk_action(demo_store, "dash-clear-all")
        assert demo_store.products == []
