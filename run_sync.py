"""Standalone sync script: runs the invoice, P&L and balance sheet sync and exits.

For running the full report sync from cron or another task scheduler
without the web server. Xero must already be connected through /auth.

Usage (run from the project directory):
    python run_sync.py
"""
import sys
import os
import logging

# Ensure the project root is on the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from models.database import init_db
from scheduler.jobs import sync_all_reports
from services.errors import XeroSyncError

if __name__ == "__main__":
    init_db()
    try:
        sync_all_reports()
    except XeroSyncError:
        sys.exit(1)
