"""Gunicorn config for deployment."""
import os
import threading
import time
import urllib.request

from craftledger_dashboard.logging_config import setup_logging

bind = f"0.0.0.0:{os.environ.get('PORT', '8070')}"
workers = 1  # one in-process ledger per deployment


def on_starting(server):
    setup_logging()


def post_worker_init(worker):
    """After gunicorn worker starts, reload the ledger from storage in background.

    Picks up any blob written by a previous deployment or restored by hand.
    """
    def _reload():
        time.sleep(3)  # wait for server to be ready
        try:
            port = worker.cfg.bind[0].split(":")[-1] if worker.cfg.bind else "8070"
            url = f"http://127.0.0.1:{port}/api/reload"
            urllib.request.urlopen(url, timeout=30)
            worker.log.info("Auto-reloaded ledger from storage")
        except Exception as e:
            worker.log.warning(f"Auto-reload failed: {e}")

    t = threading.Thread(target=_reload, daemon=True)
    t.start()
