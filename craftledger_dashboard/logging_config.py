"""
Logging setup for the dashboard process.

setup_logging() is idempotent; call it from every entry point (app, gunicorn).
Level comes from CRAFTLEDGER_LOG_LEVEL (default INFO).
"""
import logging
import os
import sys

_CONFIGURED = False

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level=None):
    global _CONFIGURED
    level_name = (level or os.environ.get("CRAFTLEDGER_LOG_LEVEL", "INFO")).upper()
    lvl = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(lvl)
    if _CONFIGURED:
        return root

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(LOG_FORMAT)
    formatter.default_msec_format = "%s.%03d"
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # dash/werkzeug request lines are noise at INFO
    logging.getLogger("werkzeug").setLevel(max(lvl, logging.WARNING))
    _CONFIGURED = True
    return root
