"""
reset_data.py: Reset the ledger to a blank slate.

Backs up the local ledger file into data/_backup_YYYYMMDD_HHMMSS/, then deletes
the ledger row from the Supabase key/value table.  Restart the dashboard
afterwards; it starts from CRAFTLEDGER_INIT_POLICY (demo data or empty).

Usage:  python reset_data.py
"""

import os
import shutil
from datetime import datetime

from store_loader import BASE_DIR, KV_TABLE, STORAGE_KEY, SupabaseBackend, _get_supabase_client, default_data_file

DATA_DIR = os.path.join(BASE_DIR, "data")


def backup_files(data_file=None, data_dir=None):
    """Move the local ledger file to a timestamped backup folder.

    Returns (backup_root, moved_count).
    """
    data_file = data_file or default_data_file()
    data_dir = data_dir or DATA_DIR
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_root = os.path.join(data_dir, f"_backup_{stamp}")

    if not os.path.isfile(data_file):
        return backup_root, 0
    os.makedirs(backup_root, exist_ok=True)
    shutil.move(data_file, os.path.join(backup_root, os.path.basename(data_file)))
    return backup_root, 1


def clear_supabase(client=None):
    """Delete the ledger row from Supabase. Returns True if a delete was issued."""
    if client is None:
        client = _get_supabase_client()
    if client is None:
        print("  Supabase credentials not configured, skipping.")
        return False

    try:
        SupabaseBackend(client).delete()
        print(f"  Deleted key {STORAGE_KEY} from {KV_TABLE}")
        return True
    except Exception as e:
        print(f"  Failed to clear {KV_TABLE}: {e}")
        return False


def main():
    print("=" * 50)
    print("  RESET CRAFTLEDGER DATA")
    print("=" * 50)

    # 1. Backup local file
    print("\n1. Backing up local ledger file...")
    backup_path, file_count = backup_files()
    if file_count:
        print(f"   Moved ledger file to:\n   {backup_path}")
    else:
        print("   No local ledger file found to back up.")

    # 2. Clear Supabase
    print("\n2. Clearing Supabase row...")
    cleared = clear_supabase()

    # 3. Summary
    print("\n" + "=" * 50)
    print("  DONE!")
    print(f"  Files backed up:  {file_count}")
    print(f"  Supabase cleared: {'yes' if cleared else 'no'}")
    if file_count:
        print(f"\n  Backup location:\n  {backup_path}")
        print("\n  To restore, move the file back from the backup folder.")
    print("\n  Restart the dashboard:  python -m craftledger_dashboard.app")
    print("=" * 50)


if __name__ == "__main__":
    main()
