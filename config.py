import os
import secrets
from dotenv import load_dotenv

load_dotenv()


class Config:
    # Database (sqlite path or file: URI)
    DB_PATH = os.getenv("DATABASE_URI", os.path.join(os.path.dirname(__file__), "tokens.db"))

    # Flask session signing (OAuth state)
    SECRET_KEY = os.getenv("SECRET_KEY") or secrets.token_hex(32)

    # App
    APP_URL = os.getenv("APP_URL", "http://localhost:3000").rstrip("/")
    PORT = int(os.getenv("PORT", "3000"))

    # Xero OAuth
    XERO_CLIENT_ID = os.getenv("XERO_CLIENT_ID", "")
    XERO_CLIENT_SECRET = os.getenv("XERO_CLIENT_SECRET", "")
    XERO_REDIRECT_URI = os.getenv("XERO_REDIRECT_URI", "") or f"{APP_URL}/callback"
    XERO_SCOPES = os.getenv(
        "XERO_SCOPE",
        "openid profile email accounting.transactions accounting.reports.read offline_access",
    ).split()

    # Google Sheets
    GOOGLE_SHEET_ID = os.getenv("GOOGLE_SHEET_ID", "")
    GOOGLE_CREDENTIALS_FILE = os.getenv("GOOGLE_CREDENTIALS_FILE", "credentials.json")

    INVOICE_SHEET_NAME = os.getenv("INVOICE_SHEET_NAME", "KYB Invoices")
    INVOICE_SHEET_GID = int(os.getenv("INVOICE_SHEET_GID", "817851991"))
    PNL_SHEET_NAME = os.getenv("PNL_SHEET_NAME", "KYB P&L")
    PNL_SHEET_GID = int(os.getenv("PNL_SHEET_GID", "137930456"))
    BALANCE_SHEET_NAME = os.getenv("BALANCE_SHEET_NAME", "KYB BS")
    BALANCE_SHEET_GID = int(os.getenv("BALANCE_SHEET_GID", "206785303"))
    BALANCE_SHEET_CLEAR_ROWS = int(os.getenv("BALANCE_SHEET_CLEAR_ROWS", "1000"))

    # Remote calls
    HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
    PNL_REQUEST_DELAY_SECONDS = float(os.getenv("PNL_REQUEST_DELAY_SECONDS", "4"))
    BALANCE_SHEET_REQUEST_DELAY_SECONDS = float(os.getenv("BALANCE_SHEET_REQUEST_DELAY_SECONDS", "2"))

    # Report scanning: stop after this many consecutive empty months
    ZERO_MONTHS_LIMIT = int(os.getenv("ZERO_MONTHS_LIMIT", "10"))
    REPORT_EPOCH_YEAR = int(os.getenv("REPORT_EPOCH_YEAR", "2000"))

    # Scheduler
    SYNC_CRON_MINUTE = int(os.getenv("SYNC_CRON_MINUTE", "30"))
