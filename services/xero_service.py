import logging
from urllib.parse import urlencode

import requests

from config import Config
from models.credential import Credential
from services.errors import RemoteApiError, RemoteTimeoutError

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://login.xero.com/identity/connect/authorize"
TOKEN_URL = "https://identity.xero.com/connect/token"
CONNECTIONS_URL = "https://api.xero.com/connections"
BASE_URL = "https://api.xero.com/api.xro/2.0"

# Xero returns at most this many invoices per page.
INVOICE_PAGE_SIZE = 100


def _send(method: str, url: str, **kwargs):
    """Issue a request and return the decoded JSON body."""
    try:
        resp = requests.request(method, url, timeout=Config.HTTP_TIMEOUT_SECONDS, **kwargs)
        resp.raise_for_status()
    except requests.Timeout as e:
        raise RemoteTimeoutError(f"Xero request timed out: {method} {url}") from e
    except requests.RequestException as e:
        raise RemoteApiError(f"Xero request failed: {method} {url}: {e}") from e

    try:
        return resp.json()
    except ValueError as e:
        raise RemoteApiError(f"Xero returned a non-JSON body for {method} {url}") from e


def _api_headers(credential: Credential):
    return {
        "Authorization": f"Bearer {credential.access_token}",
        "xero-tenant-id": credential.tenant_id,
        "Accept": "application/json",
    }


# --------------- OAuth ---------------

def build_consent_url(state: str) -> str:
    params = {
        "response_type": "code",
        "client_id": Config.XERO_CLIENT_ID,
        "redirect_uri": Config.XERO_REDIRECT_URI,
        "scope": " ".join(Config.XERO_SCOPES),
        "state": state,
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


def exchange_code(code: str) -> dict:
    """Trade an authorization code for a token set."""
    return _send(
        "POST",
        TOKEN_URL,
        data={
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": Config.XERO_REDIRECT_URI,
        },
        auth=(Config.XERO_CLIENT_ID, Config.XERO_CLIENT_SECRET),
    )


def refresh_token(token: str) -> dict:
    """Trade a refresh token for a new token set. Xero rotates the refresh token."""
    return _send(
        "POST",
        TOKEN_URL,
        data={"grant_type": "refresh_token", "refresh_token": token},
        auth=(Config.XERO_CLIENT_ID, Config.XERO_CLIENT_SECRET),
    )


def get_connections(access_token: str) -> list:
    """List the tenants (organisations) the token has access to."""
    return _send(
        "GET",
        CONNECTIONS_URL,
        headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
    ) or []


# --------------- Accounting API ---------------

def get_invoices(credential: Credential) -> list:
    """Fetch every invoice for the tenant, handling pagination."""
    invoices = []
    page = 1

    while True:
        data = _send(
            "GET",
            f"{BASE_URL}/Invoices",
            headers=_api_headers(credential),
            params={"page": page},
        )
        batch = data.get("Invoices", [])
        invoices.extend(batch)

        if len(batch) < INVOICE_PAGE_SIZE:
            break
        page += 1

    logger.info(f"Fetched {len(invoices)} invoices from Xero")
    return invoices


def get_profit_and_loss(credential: Credential, from_date: str, to_date: str) -> dict:
    return _send(
        "GET",
        f"{BASE_URL}/Reports/ProfitAndLoss",
        headers=_api_headers(credential),
        params={"fromDate": from_date, "toDate": to_date},
    )


def get_balance_sheet(credential: Credential, date: str) -> dict:
    return _send(
        "GET",
        f"{BASE_URL}/Reports/BalanceSheet",
        headers=_api_headers(credential),
        params={"date": date},
    )
