from datetime import date

from services.report_rows import parse_reports
from services.reports import (
    BalanceSheetTable,
    DateRange,
    ProfitAndLossTable,
    ZeroMonthStreak,
    filter_invoices,
    format_date,
    get_months_range,
    invoice_rows,
)


def test_months_range_newest_first():
    ranges = get_months_range(today=date(2024, 3, 15))
    assert ranges[0] == DateRange(start="2024-03-02", end="2024-04-01")
    assert ranges[1] == DateRange(start="2024-02-02", end="2024-03-01")
    assert ranges[-1] == DateRange(start="2000-01-02", end="2000-02-01")
    assert len(ranges) == 24 * 12 + 3


def test_months_range_rolls_over_december():
    ranges = get_months_range(today=date(2024, 1, 1), epoch_year=2023)
    assert ranges[0] == DateRange(start="2024-01-02", end="2024-02-01")
    assert ranges[1] == DateRange(start="2023-12-02", end="2024-01-01")
    assert len(ranges) == 13


def _invoice(number, type_, status, day):
    return {
        "Type": type_,
        "InvoiceNumber": number,
        "Reference": f"ref-{number}",
        "AmountDue": 10.0,
        "AmountPaid": 5.0,
        "Contact": {"Name": "Acme"},
        "DateString": f"2024-03-{day:02d}T00:00:00",
        "DueDateString": f"2024-04-{day:02d}T00:00:00",
        "Status": status,
        "Total": 15.0,
        "CurrencyCode": "GBP",
    }


def test_filter_invoices_keeps_authorised_and_paid_receivables():
    invoices = [
        _invoice("INV-1", "ACCREC", "DRAFT", 1),
        _invoice("INV-2", "ACCREC", "AUTHORISED", 2),
        _invoice("INV-3", "ACCPAY", "PAID", 3),
        _invoice("INV-4", "ACCREC", "PAID", 4),
        _invoice("INV-5", "ACCPAY", "AUTHORISED", 5),
        _invoice("INV-6", "ACCREC", "AUTHORISED", 6),
    ]
    kept = filter_invoices(invoices)
    assert [inv["InvoiceNumber"] for inv in kept] == ["INV-6", "INV-4", "INV-2"]


def test_invoice_rows_project_eleven_fields():
    rows = invoice_rows([_invoice("INV-2", "ACCREC", "AUTHORISED", 5)])
    assert rows == [[
        "ACCREC", "INV-2", "ref-INV-2", 10.0, 5.0, "Acme",
        "05 Mar 2024", "05 Apr 2024", "AUTHORISED", 15.0, "GBP",
    ]]


def test_format_date_accepts_xero_json_dates():
    # 2024-03-15T00:00:00Z
    assert format_date("/Date(1710460800000+0000)/") == "15 Mar 2024"
    assert format_date("2024-03-15T00:00:00") == "15 Mar 2024"
    assert format_date(None) == ""
    assert format_date("not a date") == ""


def test_invoice_sort_falls_back_to_date_field():
    older = {"Type": "ACCREC", "Status": "PAID", "InvoiceNumber": "A", "Date": "/Date(1704067200000+0000)/"}
    newer = {"Type": "ACCREC", "Status": "PAID", "InvoiceNumber": "B", "Date": "/Date(1710460800000+0000)/"}
    assert [inv["InvoiceNumber"] for inv in filter_invoices([older, newer])] == ["B", "A"]


def test_zero_month_streak_resets_on_included_month():
    streak = ZeroMonthStreak(3)
    streak.record(False)
    streak.record(False)
    streak.record(True)
    streak.record(False)
    streak.record(False)
    assert not streak.exhausted
    streak.record(False)
    assert streak.exhausted


def test_profit_and_loss_flattens_included_month(pnl_body):
    table = ProfitAndLossTable()
    included = table.add(parse_reports(pnl_body("31 Mar 2024", gross="50.00")))

    assert included
    month = "31 Mar 2024"
    assert table.rows == [
        [month, "Income"],
        [month, "Sales", "100.00"],
        [month, "Total Income", "100.00"],
        [month, "Gross Profit", "50.00"],
        [month, "Net Profit", "0.00"],
        [],
        [],
    ]


def test_profit_and_loss_skips_month_without_profit(pnl_body):
    table = ProfitAndLossTable()
    assert not table.add(parse_reports(pnl_body("29 Feb 2024")))
    assert table.rows == []


def test_profit_and_loss_adds_repeated_month_once(pnl_body):
    table = ProfitAndLossTable()
    table.add(parse_reports(pnl_body("31 Mar 2024", net="1.00")))
    assert table.add(parse_reports(pnl_body("31 Mar 2024", net="2.00")))
    assert len(table.rows) == 7


def test_balance_sheet_crosstab_blank_for_missing_months(balance_sheet_body):
    table = BalanceSheetTable()
    table.add(
        DateRange("2024-03-02", "2024-04-01"),
        parse_reports(balance_sheet_body("2 Mar 2024", [("Bank", "50.00")], net_assets="100.00")),
    )
    table.add(
        DateRange("2024-02-02", "2024-03-01"),
        parse_reports(balance_sheet_body("2 Feb 2024", [("Loan", "20.00")], net_assets="80.00")),
    )

    assert table.header == ["Heads", "2024-04-01", "2024-03-01"]
    assert table.rows == [
        ["Assets", "", ""],
        ["Bank", "50.00", ""],
        ["Net Assets", "100.00", "80.00"],
        ["Loan", "", "20.00"],
    ]


def test_balance_sheet_ignores_months_without_net_assets(balance_sheet_body):
    table = BalanceSheetTable()
    included = table.add(
        DateRange("2024-03-02", "2024-04-01"),
        parse_reports(balance_sheet_body("2 Mar 2024", [("Bank", "50.00")], net_assets="0.00")),
    )
    assert not included
    assert table.header == ["Heads"]
    assert table.rows == []
