"""Tests for the record store: init policy, CRUD, persistence."""
import json

import pytest

from store_loader import MemoryBackend, LocalFileBackend
from craftledger_dashboard import data_state as ds
from craftledger_dashboard.models import OrderStatus, AdPurpose, Override, USE_DEFAULT


class TestInitPolicy:
    """Start state when the backend has nothing usable."""

    def test_seed_loads_demo(self, demo_store):
        assert [p.id for p in demo_store.products] == ["p1"]
        assert len(demo_store.orders) == 5
        assert demo_store.backend.saves == 0

    def test_empty_policy(self, empty_store):
        assert empty_store.materials == []
        assert empty_store.orders == []
        assert empty_store.metrics().order_count == 0

    @pytest.mark.parametrize("blob", [
        "not json",
        "[1, 2]",
        '{"materials": [{"name": "no id"}]}',
        '{"materials": [{"id": "m", "name": "x", "cost": "abc", "yield": 4}]}',
        '{"materials": [{"id": "m", "name": "x", "cost": 300, "yield": true}]}',
        '{"products": [{"id": "p", "name": "x", "price": 350, "laborCost": "lots"}]}',
        '{"orders": [{"id": "o", "productId": "p", "status": "Pending", "finalPrice": "abc"}]}',
        '{"orders": [{"id": "o", "productId": "p", "status": "Pending", "quantity": 1.5}]}',
        '{"ads": [{"id": "a", "platform": "TikTok", "amount": [200], "purpose": "Testing"}]}',
    ])
    def test_malformed_blob_falls_back_to_policy(self, blob):
        backend = MemoryBackend(blob)
        store = ds.RecordStore(backend, policy="seed")
        assert len(store.orders) == 5
        assert backend.saves == 0
        assert backend.blob == blob
        assert backend.backups == [blob]
        assert store.metrics().order_count == 5

        store = ds.RecordStore(MemoryBackend(blob), policy="empty")
        assert store.orders == []

    def test_numeric_strings_load_as_numbers(self):
        blob = json.dumps({"materials": [{"id": "m", "name": "Thread", "cost": "300", "yield": "15"}]})
        store = ds.RecordStore(MemoryBackend(blob), policy="empty")
        assert store.get_material("m").cost == 300
        assert store.metrics().total_material_spend == 300

    def test_undecodable_bytes_fall_back(self):
        raw = b'{"materials": [\xff\xfe]}'
        backend = MemoryBackend(raw)
        store = ds.RecordStore(backend, policy="empty")
        assert store.materials == []
        assert backend.backups == [raw]

    def test_undecodable_file_is_backed_up(self, tmp_path):
        path = tmp_path / "ledger.json"
        raw = b'{"materials": [\xff\xfe]}'
        path.write_bytes(raw)
        store = ds.RecordStore(LocalFileBackend(str(path)), policy="empty")
        assert store.materials == []
        copies = list(tmp_path.glob("ledger.json.unreadable-*"))
        assert len(copies) == 1
        assert copies[0].read_bytes() == raw

        store.add_material("Thread", 100, 50)
        assert json.loads(path.read_text(encoding="utf-8"))["materials"][0]["name"] == "Thread"
        assert copies[0].read_bytes() == raw

    def test_backup_failure_still_applies_policy(self):
        backend = MemoryBackend("not json")

        def boom(raw):
            raise OSError("read-only")

        backend.backup = boom
        store = ds.RecordStore(backend, policy="seed")
        assert len(store.orders) == 5

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            ds.RecordStore(MemoryBackend(), policy="random")

    def test_blob_without_version_loads(self):
        blob = json.dumps({"materials": [], "products": [], "orders": [], "ads": [
            {"id": "a", "platform": "TikTok", "amount": 10, "purpose": "Testing", "date": "2024-01-01"}]})
        store = ds.RecordStore(MemoryBackend(blob), policy="seed")
        assert [a.id for a in store.ads] == ["a"]
        assert store.products == []

    def test_backend_read_error_propagates(self):
        class Broken:
            name = "broken"

            def load(self):
                raise ConnectionError("down")

        with pytest.raises(ConnectionError):
            ds.RecordStore(Broken())


class TestPersistence:
    """Every mutation rewrites the blob."""

    def test_each_mutation_flushes_once(self, empty_store):
        backend = empty_store.backend
        mat = empty_store.add_material("Leather", 300, 15)
        assert backend.saves == 1
        empty_store.record_material_usage(mat.id, 2)
        assert backend.saves == 2
        empty_store.delete_material(mat.id)
        assert backend.saves == 3

    def test_round_trip_is_identical(self, demo_store):
        demo_store.add_order("Nadia", "p1", city="Agadir")
        demo_store.add_order("Karim", "p1", final_price=0, manual_shipping_cost="")
        blob = demo_store.backend.blob
        reloaded = ds.RecordStore(MemoryBackend(blob), policy="empty")
        assert reloaded.to_blob() == blob
        assert reloaded.orders == demo_store.orders

    def test_absent_override_stays_absent(self, empty_store):
        empty_store.add_order("Nadia", "p1")
        saved = json.loads(empty_store.backend.blob)["orders"][0]
        assert "finalPrice" not in saved
        assert "manualShippingCost" not in saved
        assert saved["status"] == "Pending"
        assert json.loads(empty_store.backend.blob)["version"] == 1

    def test_write_failure_keeps_memory_state(self, empty_store):
        def boom(blob):
            raise OSError("disk full")

        empty_store.backend.save = boom
        mat = empty_store.add_material("Thread", 100, 50)
        assert empty_store.get_material(mat.id) is not None

    def test_reload_picks_up_backend_changes(self, demo_store):
        demo_store.backend.blob = json.dumps({"version": 1, "materials": [], "products": [],
                                              "orders": [], "ads": []})
        demo_store.reload()
        assert demo_store.orders == []


class TestCrud:
    """Add, update, delete for each record kind."""

    def test_add_material_sets_remaining(self, empty_store):
        mat = empty_store.add_material("Leather", 300, 15, date="2024-03-01")
        assert mat.remaining_units == 15
        assert mat.date == "2024-03-01"

    def test_ids_are_unique(self, empty_store):
        ids = {empty_store.add_material(f"m{i}", 1, 1).id for i in range(20)}
        assert len(ids) == 20

    def test_usage_floors_at_zero(self, demo_store):
        mat = demo_store.record_material_usage("m1", 100)
        assert mat.remaining_units == 0

    def test_add_product_dedupes_materials(self, demo_store):
        prod = demo_store.add_product("Card Holder", 150, ["m1", "m1", "m2"], labor_cost=20)
        assert prod.material_ids == ["m1", "m2"]

    def test_add_order_with_overrides(self, demo_store):
        order = demo_store.add_order("Nadia", "p1", quantity=2, final_price=650,
                                     manual_shipping_cost=Override(0))
        assert order.final_price == Override(650)
        assert order.manual_shipping_cost == Override(0)
        assert order.status is OrderStatus.PENDING
        assert order.last_updated.endswith("Z")

    def test_add_order_defaults(self, demo_store):
        order = demo_store.add_order("Nadia", "p1", final_price=None)
        assert order.final_price is USE_DEFAULT

    def test_update_order_status(self, demo_store):
        order = demo_store.update_order_status("o3", "Delivered")
        assert order.status is OrderStatus.DELIVERED
        assert demo_store.get_order("o3").status is OrderStatus.DELIVERED
        assert demo_store.metrics().revenue == 1050

    def test_update_order_refreshes_timestamp(self, demo_store):
        from dataclasses import replace
        order = demo_store.get_order("o1")
        updated = demo_store.update_order(replace(order, city="Oujda"))
        assert updated.city == "Oujda"
        assert updated.last_updated != order.last_updated

    def test_ad_spend(self, empty_store):
        ad = empty_store.add_ad_spend("TikTok", 80, AdPurpose.AWARENESS)
        assert empty_store.metrics().non_scaling_ad_spend == 80
        empty_store.delete_ad_spend(ad.id)
        assert empty_store.ads == []

    def test_unknown_platform(self, empty_store):
        with pytest.raises(ValueError):
            empty_store.add_ad_spend("Snapchat", 10)

    @pytest.mark.parametrize("call", [
        lambda s: s.delete_order("nope"),
        lambda s: s.delete_material("nope"),
        lambda s: s.delete_product("nope"),
        lambda s: s.delete_ad_spend("nope"),
        lambda s: s.update_order_status("nope", "Shipped"),
        lambda s: s.record_material_usage("nope", 1),
    ])
    def test_unknown_id_raises(self, demo_store, call):
        with pytest.raises(ds.RecordNotFound):
            call(demo_store)

    def test_record_not_found_is_key_error(self):
        assert issubclass(ds.RecordNotFound, KeyError)

    def test_collections_are_copies(self, demo_store):
        demo_store.orders.clear()
        assert len(demo_store.orders) == 5

    def test_delete_product_leaves_orphan_orders(self, demo_store):
        demo_store.delete_product("p1")
        m = demo_store.metrics()
        assert m.order_count == 5
        assert m.revenue == 0


class TestBulkActions:
    """Start fresh, demo reset, clear all."""

    def test_start_fresh_keeps_products_unlinked(self, demo_store):
        demo_store.start_fresh()
        assert demo_store.orders == []
        assert demo_store.ads == []
        assert demo_store.materials == []
        assert [p.id for p in demo_store.products] == ["p1"]
        assert demo_store.products[0].material_ids == []

    def test_clear_then_reset(self, demo_store):
        demo_store.clear_all()
        assert demo_store.products == []
        demo_store.reset_to_demo()
        assert len(demo_store.orders) == 5
        assert demo_store.backend.saves == 2


class TestHelpers:
    """Formatting and form parsing."""

    def test_money(self):
        assert ds.money(1234) == "1,234 MAD"
        assert ds.money(-50.5, 2) == "-50.50 MAD"

    @pytest.mark.parametrize("raw,expected", [
        (None, None), ("", None), ("abc", None), (12, 12), (2.5, 2.5),
        ("1,200", 1200), ("350 MAD", 350), ("12.50", 12.5),
    ])
    def test_parse_amount(self, raw, expected):
        assert ds.parse_amount(raw) == expected

    def test_get_store_reads_policy(self, monkeypatch):
        monkeypatch.setattr(ds, "_STORE", None)
        monkeypatch.setenv("CRAFTLEDGER_INIT_POLICY", "empty")
        monkeypatch.setattr(ds, "get_backend", lambda: MemoryBackend())
        store = ds.get_store()
        assert store.policy == "empty"
        assert ds.get_store() is store
