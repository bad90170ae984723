"""
store_loader.py: where the ledger blob lives (Supabase, with local-file fallback).

Every backend exposes the calls the record store needs:
  load()      -> str | None   the JSON blob, or None when nothing is stored yet
  save(blob)  -> None         overwrite the stored blob wholesale
  backup(raw) -> str          keep a copy of an unreadable blob, return where it went

load() raises UnreadableBlob when the stored bytes are not text.
"""

import os
import json
import logging
from datetime import datetime

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

STORAGE_KEY = "craftledger_data_v1"
KV_TABLE = "kv_store"

logger = logging.getLogger(__name__)


class UnreadableBlob(ValueError):
    """The stored bytes are not text. ``raw`` keeps them for backup()."""

    def __init__(self, raw, reason):
        super().__init__(reason)
        self.raw = raw


def _stamp():
    return datetime.now().strftime("%Y%m%d_%H%M%S")


# ── Supabase helpers ────────────────────────────────────────────────────────

def _get_supabase_client():
    """Return a Supabase client, or None if credentials are missing."""
    from dotenv import load_dotenv
    load_dotenv(os.path.join(BASE_DIR, ".env"))

    url = os.environ.get("SUPABASE_URL", "")
    key = os.environ.get("SUPABASE_KEY", "")
    if not url or not key or "YOUR_PROJECT" in url:
        return None

    from supabase import create_client
    return create_client(url, key)


# ── Backends ────────────────────────────────────────────────────────────────

class SupabaseBackend:
    """One row per key in a key/value table (key TEXT PRIMARY KEY, value TEXT)."""

    name = "supabase"

    def __init__(self, client, key: str = STORAGE_KEY, table: str = KV_TABLE):
        self.client = client
        self.key = key
        self.table = table

    def load(self):
        resp = (
            self.client.table(self.table)
            .select("value")
            .eq("key", self.key)
            .execute()
        )
        if not resp.data:
            return None
        val = resp.data[0]["value"]
        # a JSONB column comes back already decoded
        if val is not None and not isinstance(val, str):
            val = json.dumps(val)
        return val

    def save(self, blob: str):
        self.client.table(self.table).upsert({"key": self.key, "value": blob}).execute()

    def delete(self):
        self.client.table(self.table).delete().eq("key", self.key).execute()

    def backup(self, raw) -> str:
        """Copy an unreadable blob to a side key; returns that key."""
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        backup_key = f"{self.key}_unreadable_{_stamp()}"
        self.client.table(self.table).upsert({"key": backup_key, "value": raw}).execute()
        return backup_key


class LocalFileBackend:
    name = "local"

    def __init__(self, path: str):
        self.path = path

    def load(self):
        if not os.path.exists(self.path):
            return None
        with open(self.path, "rb") as f:
            raw = f.read()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UnreadableBlob(raw, f"{self.path} is not UTF-8: {e}") from e

    def save(self, blob: str):
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(blob)

    def backup(self, raw) -> str:
        """Copy an unreadable blob next to the data file; returns the copy's path."""
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        path = f"{self.path}.unreadable-{_stamp()}"
        with open(path, "wb") as f:
            f.write(raw)
        return path


class MemoryBackend:
    """Keeps the blob in a Python attribute. Used by tests and previews."""

    name = "memory"

    def __init__(self, blob=None):
        self.blob = blob
        self.saves = 0
        self.backups = []

    def load(self):
        if isinstance(self.blob, bytes):
            try:
                return self.blob.decode("utf-8")
            except UnicodeDecodeError as e:
                raise UnreadableBlob(self.blob, str(e)) from e
        return self.blob

    def save(self, blob: str):
        self.blob = blob
        self.saves += 1

    def backup(self, raw) -> str:
        self.backups.append(raw)
        return f"memory backup #{len(self.backups)}"


# ── Public API ──────────────────────────────────────────────────────────────

def default_data_file() -> str:
    return os.environ.get(
        "CRAFTLEDGER_DATA_FILE",
        os.path.join(BASE_DIR, "data", f"{STORAGE_KEY}.json"),
    )


def get_backend():
    """
    Pick the storage backend.  Tries Supabase first; falls back to a local file.

    Supabase is used only when credentials are configured (environment or .env)
    and the client can be created.
    """
    client = None
    try:
        client = _get_supabase_client()
    except Exception as e:
        logger.warning("Supabase client unavailable (%s), falling back to local file", e)

    if client is not None:
        logger.info("Using Supabase table %s for key %s", KV_TABLE, STORAGE_KEY)
        return SupabaseBackend(client)

    path = default_data_file()
    logger.info("Using local data file %s", path)
    return LocalFileBackend(path)
