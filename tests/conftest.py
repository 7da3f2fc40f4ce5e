from datetime import datetime, timedelta, timezone

import pytest

from config import Config
from models.credential import Credential
from models.database import init_db


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "DB_PATH", str(tmp_path / "tokens.db"))
    init_db()
    return Config.DB_PATH


@pytest.fixture
def credential():
    return Credential(
        access_token="access-1",
        refresh_token="refresh-1",
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=30),
        id_token="id-1",
        scope="accounting.reports.read offline_access",
        token_type="Bearer",
        tenant_id="tenant-1",
    )


@pytest.fixture
def no_delays(monkeypatch):
    monkeypatch.setattr(Config, "PNL_REQUEST_DELAY_SECONDS", 0)
    monkeypatch.setattr(Config, "BALANCE_SHEET_REQUEST_DELAY_SECONDS", 0)


def _row(label, value, row_type="Row"):
    return {"RowType": row_type, "Cells": [{"Value": label}, {"Value": value}]}


@pytest.fixture
def pnl_body():
    """Build a Xero ProfitAndLoss response for one month."""
    def build(month, gross="0.00", net="0.00"):
        return {"Reports": [{"Rows": [
            {"RowType": "Header", "Cells": [{"Value": ""}, {"Value": month}]},
            {"RowType": "Section", "Title": "Income", "Rows": [
                _row("Sales", "100.00"),
                _row("Total Income", "100.00", "SummaryRow"),
            ]},
            {"RowType": "Section", "Title": "", "Rows": [_row("Gross Profit", gross)]},
            {"RowType": "Section", "Title": "", "Rows": [_row("Net Profit", net)]},
        ]}]}
    return build


@pytest.fixture
def balance_sheet_body():
    """Build a Xero BalanceSheet response for one month."""
    def build(month, lines, net_assets="100.00", title="Assets"):
        return {"Reports": [{"Rows": [
            {"RowType": "Header", "Cells": [{"Value": ""}, {"Value": month}]},
            {"RowType": "Section", "Title": title, "Rows": [_row(label, value) for label, value in lines]},
            {"RowType": "Section", "Title": "", "Rows": [_row("Net Assets", net_assets)]},
        ]}]}
    return build
