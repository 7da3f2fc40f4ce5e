import logging
import time
from datetime import date
from typing import Callable, List, Optional

from config import Config
from services import sheets_service, token_service, xero_service
from services.errors import RemoteApiError, XeroSyncError
from services.report_rows import Report, parse_reports
from services.reports import (
    INVOICE_HEADER,
    PNL_HEADER,
    BalanceSheetTable,
    DateRange,
    ProfitAndLossTable,
    ZeroMonthStreak,
    get_months_range,
    invoice_rows,
)

logger = logging.getLogger(__name__)


def _require_credential():
    credential = token_service.ensure_fresh()
    if credential is None:
        raise RemoteApiError("Xero is not connected: no stored credential")
    return credential


def _scan_months(
    fetch: Callable[[DateRange], dict],
    add: Callable[[DateRange, List[Report]], bool],
    delay: float,
    signal: str,
    today: Optional[date] = None,
) -> int:
    """Walk months newest to oldest until ZERO_MONTHS_LIMIT empty months in a row.

    Returns the number of months fetched. A month whose fetch fails is logged
    and skipped without touching the streak.
    """
    streak = ZeroMonthStreak(Config.ZERO_MONTHS_LIMIT)
    fetched = 0
    for date_range in get_months_range(today=today, epoch_year=Config.REPORT_EPOCH_YEAR):
        if streak.exhausted:
            logger.info(
                f"Terminating further processing. {streak.limit} consecutive months with zero {signal} detected."
            )
            break

        time.sleep(delay)
        fetched += 1
        try:
            reports = parse_reports(fetch(date_range))
            if not reports:
                raise RemoteApiError(f"Reports not found in response for {date_range.start} to {date_range.end}")
            included = add(date_range, reports)
        except Exception as e:
            logger.error(f"Error fetching report for {date_range.start} to {date_range.end}: {e}")
            continue

        streak.record(included)
        if included:
            logger.info(f"Adding month {date_range.start} to {date_range.end} as its {signal} is non-zero.")
        else:
            logger.info(f"Skipping month {date_range.start} to {date_range.end} as its {signal} is zero.")
    return fetched


def sync_invoices() -> int:
    """Write authorised and paid receivable invoices to the invoice sheet."""
    logger.info("Syncing Xero invoices...")
    try:
        credential = _require_credential()
        rows = invoice_rows(xero_service.get_invoices(credential))
        sheets_service.write(Config.INVOICE_SHEET_GID, Config.INVOICE_SHEET_NAME, INVOICE_HEADER, rows)
    except XeroSyncError as e:
        logger.error(f"Error fetching invoices: {e}")
        raise

    logger.info(f"Synced {len(rows)} invoices to Google Sheets")
    return len(rows)


def sync_profit_and_loss(today: Optional[date] = None) -> int:
    """Write every month with gross or net profit to the P&L sheet, newest first."""
    logger.info("Syncing Xero profit and loss reports...")
    try:
        credential = _require_credential()
        table = ProfitAndLossTable()
        _scan_months(
            fetch=lambda r: xero_service.get_profit_and_loss(credential, r.start, r.end),
            add=lambda r, reports: table.add(reports),
            delay=Config.PNL_REQUEST_DELAY_SECONDS,
            signal="profit",
            today=today,
        )
        sheets_service.write(Config.PNL_SHEET_GID, Config.PNL_SHEET_NAME, PNL_HEADER, table.rows)
    except XeroSyncError as e:
        logger.error(f"Error fetching profit and loss reports: {e}")
        raise

    logger.info("All available profit and loss reports have been fetched and stored in Google Sheets.")
    return len(table.rows)


def sync_balance_sheet(today: Optional[date] = None) -> int:
    """Write the month-by-month balance sheet cross-tab to the balance sheet tab."""
    logger.info("Syncing Xero balance sheet reports...")
    try:
        credential = _require_credential()
        table = BalanceSheetTable()
        _scan_months(
            fetch=lambda r: xero_service.get_balance_sheet(credential, r.start),
            add=table.add,
            delay=Config.BALANCE_SHEET_REQUEST_DELAY_SECONDS,
            signal="Net Assets",
            today=today,
        )
        sheets_service.write(
            Config.BALANCE_SHEET_GID,
            Config.BALANCE_SHEET_NAME,
            table.header,
            table.rows,
            clear_rows=Config.BALANCE_SHEET_CLEAR_ROWS,
        )
    except XeroSyncError as e:
        logger.error(f"Error fetching Balance Sheet reports: {e}")
        raise

    logger.info("All available Balance Sheet reports have been fetched and stored in Google Sheets.")
    return len(table.rows)
