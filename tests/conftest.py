"""Shared fixtures: stores on an in-memory backend and small record builders."""
import pytest

from store_loader import MemoryBackend
from craftledger_dashboard import data_state as ds
from craftledger_dashboard.models import Material, Product, Order, AdSpend, OrderStatus, AdPurpose, USE_DEFAULT


@pytest.fixture
def demo_store():
    return ds.RecordStore(MemoryBackend(), policy="seed")


@pytest.fixture
def empty_store():
    return ds.RecordStore(MemoryBackend(), policy="empty")


@pytest.fixture
def active_store(monkeypatch, demo_store):
    """Install demo_store as the process-wide store for pages and callbacks."""
    monkeypatch.setattr(ds, "_STORE", demo_store)
    return demo_store


def make_material(id="m", cost=300, yield_units=15, remaining=None):
    return Material(id=id, name=f"Material {id}", cost=cost, yield_units=yield_units,
                    remaining_units=yield_units if remaining is None else remaining, date="2024-01-01")


def make_product(id="p", price=350, material_ids=("m",), labor=40, packaging=15, shipping=35,
                 fail_buffer=None):
    return Product(id=id, name=f"Product {id}", price=price, material_ids=list(material_ids),
                   labor_cost=labor, packaging_cost=packaging, shipping_cost=shipping,
                   fail_buffer=fail_buffer)


def make_order(id="o", status=OrderStatus.DELIVERED, product_id="p", quantity=None,
               final_price=USE_DEFAULT, shipping=USE_DEFAULT, date="2024-01-10"):
    return Order(id=id, customer_name=f"Customer {id}", product_id=product_id, status=status,
                 date=date, quantity=quantity, final_price=final_price, manual_shipping_cost=shipping)


def make_ad(id="a", amount=100, purpose=AdPurpose.SCALING, platform="Facebook"):
    return AdSpend(id=id, platform=platform, amount=amount, purpose=purpose, date="2024-01-05")
