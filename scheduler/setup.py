import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from config import Config
from scheduler.jobs import sync_invoices_job

logger = logging.getLogger(__name__)


def create_scheduler() -> BackgroundScheduler:
    scheduler = BackgroundScheduler()

    # Invoice sync, every hour at the configured minute
    scheduler.add_job(
        sync_invoices_job,
        trigger=CronTrigger(minute=Config.SYNC_CRON_MINUTE),
        id="sync_invoices",
        name="Sync Xero invoices to Google Sheets",
        replace_existing=True,
        max_instances=1,
    )

    return scheduler
