import re
from datetime import date, datetime, timezone
from typing import Dict, List, NamedTuple, Optional

from dateutil.relativedelta import relativedelta

from services.report_rows import Report, Row, Section, walk

INVOICE_HEADER = [
    "Invoice Type",
    "Invoice Number",
    "Invoice Reference",
    "Amount Due",
    "Amount Paid",
    "ContactName",
    "Invoice Date",
    "Invoice DueDate",
    "Invoice Status",
    "Total",
    "Currency Code",
]
PNL_HEADER = ["Date", "Head Name", "Amount"]
BALANCE_SHEET_FIRST_COLUMN = "Heads"

INVOICE_TYPE = "ACCREC"
INVOICE_STATUSES = {"AUTHORISED", "PAID"}
PROFIT_LINES = ("Gross Profit", "Net Profit")
NET_ASSETS_LINE = "Net Assets"

_XERO_DATE = re.compile(r"/Date\((-?\d+)([+-]\d{4})?\)/")


class DateRange(NamedTuple):
    start: str
    end: str


def get_months_range(today: Optional[date] = None, epoch_year: int = 2000) -> List[DateRange]:
    """Month ranges from January of the epoch year through the current month, newest first.

    Each range runs from the 2nd of the month to the 1st of the next one.
    """
    today = today or date.today()
    current = date(epoch_year, 1, 1)
    ranges = []
    while current <= today:
        ranges.append(DateRange(
            start=current.replace(day=2).isoformat(),
            end=(current + relativedelta(months=1)).isoformat(),
        ))
        current += relativedelta(months=1)
    ranges.reverse()
    return ranges


# --------------- Invoices ---------------

def parse_xero_date(value) -> Optional[datetime]:
    """Parse Xero's /Date(ms+zzzz)/ format or an ISO date string."""
    if not value:
        return None
    match = _XERO_DATE.match(str(value))
    if match:
        return datetime.fromtimestamp(int(match.group(1)) / 1000, tz=timezone.utc).replace(tzinfo=None)
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def format_date(value) -> str:
    parsed = parse_xero_date(value)
    return parsed.strftime("%d %b %Y") if parsed else ""


def _invoice_date(invoice: dict):
    return invoice.get("DateString") or invoice.get("Date")


def _due_date(invoice: dict):
    return invoice.get("DueDateString") or invoice.get("DueDate")


def filter_invoices(invoices: list) -> list:
    """Authorised or paid receivables, newest invoice date first."""
    kept = [
        inv for inv in invoices
        if inv.get("Type") == INVOICE_TYPE and inv.get("Status") in INVOICE_STATUSES
    ]
    kept.sort(key=lambda inv: parse_xero_date(_invoice_date(inv)) or datetime.min, reverse=True)
    return kept


def invoice_row(invoice: dict) -> list:
    contact = invoice.get("Contact") or {}
    return [
        invoice.get("Type"),
        invoice.get("InvoiceNumber"),
        invoice.get("Reference"),
        invoice.get("AmountDue"),
        invoice.get("AmountPaid"),
        contact.get("Name"),
        format_date(_invoice_date(invoice)),
        format_date(_due_date(invoice)),
        invoice.get("Status"),
        invoice.get("Total"),
        invoice.get("CurrencyCode"),
    ]


def invoice_rows(invoices: list) -> list:
    return [invoice_row(inv) for inv in filter_invoices(invoices)]


# --------------- Monthly reports ---------------

class ZeroMonthStreak:
    """Counts consecutive months without data; scanning stops once the limit is hit."""

    def __init__(self, limit: int):
        self.limit = limit
        self.count = 0

    def record(self, included: bool):
        self.count = 0 if included else self.count + 1

    @property
    def exhausted(self) -> bool:
        return self.count >= self.limit


def flatten_report(report: Report, month: str) -> list:
    """One row per section title and per line, each prefixed with the month label."""
    rows = []
    for section, node in walk(report.rows):
        if isinstance(node, Section):
            if node.title:
                rows.append([month, node.title])
        elif isinstance(node, Row) and section is not None:
            rows.append([month, *node.cells])
    return rows


class ProfitAndLossTable:
    """Long-format P&L: every line of every month with gross or net profit."""

    def __init__(self):
        self.rows: List[list] = []
        self._months = set()

    def add(self, reports: List[Report]) -> bool:
        """Add one month's reports; returns whether the month had profit figures."""
        included = False
        for report in reports:
            if not report.has_nonzero(*PROFIT_LINES):
                continue
            included = True
            month = report.month_label
            if not month or month in self._months:
                continue
            self._months.add(month)
            self.rows.extend(flatten_report(report, month))
            self.rows.extend([[], []])
        return included


class BalanceSheetTable:
    """Wide balance sheet: one row per line label, one column per month end."""

    def __init__(self):
        self.labels: Dict[str, None] = {}
        self.values: Dict[str, Dict[str, str]] = {}
        self.columns: List[str] = []
        self._months = set()

    def add(self, date_range: DateRange, reports: List[Report]) -> bool:
        """Add one month's reports; returns whether the month had net assets."""
        included = False
        for report in reports:
            if not report.has_nonzero(NET_ASSETS_LINE):
                continue
            included = True
            month = report.month_label
            if not month or month in self._months:
                continue
            self._months.add(month)

            column = date_range.end
            recorded = False
            for section, node in walk(report.rows):
                if isinstance(node, Section):
                    if node.title:
                        self.labels.setdefault(node.title)
                elif isinstance(node, Row) and section is not None:
                    self.labels.setdefault(node.label)
                    self.values.setdefault(node.label, {})[column] = node.value
                    recorded = True
            if recorded and column not in self.columns:
                self.columns.append(column)
        return included

    @property
    def header(self) -> list:
        return [BALANCE_SHEET_FIRST_COLUMN, *self.columns]

    @property
    def rows(self) -> list:
        return [
            [label, *(self.values.get(label, {}).get(column, "") for column in self.columns)]
            for label in self.labels
        ]
