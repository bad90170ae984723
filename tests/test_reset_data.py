"""Tests for the reset maintenance script."""
import os

import reset_data
from store_loader import SupabaseBackend

from test_store_loader import FakeClient


class TestBackupFiles:
    """Local ledger backup."""

    def test_moves_ledger_into_backup(self, tmp_path):
        ledger = tmp_path / "craftledger_data_v1.json"
        ledger.write_text('{"version": 1}')
        backup_root, moved = reset_data.backup_files(str(ledger), str(tmp_path))
        assert moved == 1
        assert not ledger.exists()
        assert os.path.basename(backup_root).startswith("_backup_")
        assert (tmp_path / os.path.basename(backup_root) / ledger.name).read_text() == '{"version": 1}'

    def test_nothing_to_back_up(self, tmp_path):
        _, moved = reset_data.backup_files(str(tmp_path / "missing.json"), str(tmp_path))
        assert moved == 0


class TestClearSupabase:
    """Supabase row removal."""

    def test_deletes_row(self):
        client = FakeClient()
        SupabaseBackend(client).save("{}")
        assert reset_data.clear_supabase(client) is True
        assert SupabaseBackend(client).load() is None

    def test_skips_without_credentials(self, monkeypatch, capsys):
        monkeypatch.setattr(reset_data, "_get_supabase_client", lambda: None)
        assert reset_data.clear_supabase() is False
        assert "skipping" in capsys.readouterr().out
