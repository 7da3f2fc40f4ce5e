import logging
import threading

from services.xero_sync import sync_invoices, sync_profit_and_loss, sync_balance_sheet

logger = logging.getLogger(__name__)

# One pipeline at a time: the hourly job and the HTTP trigger share Xero,
# the stored token and the spreadsheet.
_pipeline_lock = threading.Lock()


def sync_all_reports():
    """Run the invoice, P&L and balance sheet pipelines in order.

    Stops at the first failing pipeline and re-raises its error.
    """
    with _pipeline_lock:
        logger.info("Running full Xero report sync...")
        ic = sync_invoices()
        pc = sync_profit_and_loss()
        bc = sync_balance_sheet()
        logger.info(f"Full sync done: {ic} invoices, {pc} P&L rows, {bc} balance sheet rows")


def sync_invoices_job():
    """Scheduled invoice refresh. Errors are logged, never raised into the scheduler."""
    logger.info("Running scheduled invoice sync...")
    with _pipeline_lock:
        try:
            sync_invoices()
        except Exception as e:
            logger.error(f"Error running scheduled invoice sync: {e}")
