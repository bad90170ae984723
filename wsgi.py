"""
WSGI entry point for deployment (Gunicorn).
Usage:  gunicorn wsgi:server -c gunicorn.conf.py
"""
from craftledger_dashboard.app import server  # noqa: F401
