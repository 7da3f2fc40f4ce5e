import pytest
import requests

from services import xero_service
from services.errors import RemoteApiError, RemoteTimeoutError


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def test_timeout_is_translated(monkeypatch, credential):
    def fake_request(method, url, **kwargs):
        raise requests.Timeout("read timed out")

    monkeypatch.setattr(xero_service.requests, "request", fake_request)
    with pytest.raises(RemoteTimeoutError):
        xero_service.get_profit_and_loss(credential, "2024-03-02", "2024-04-01")


def test_http_error_is_translated(monkeypatch, credential):
    monkeypatch.setattr(xero_service.requests, "request", lambda method, url, **kw: FakeResponse({}, 429))
    with pytest.raises(RemoteApiError):
        xero_service.get_balance_sheet(credential, "2024-03-02")


def test_non_json_body_is_translated(monkeypatch, credential):
    monkeypatch.setattr(xero_service.requests, "request", lambda method, url, **kw: FakeResponse(ValueError("bad")))
    with pytest.raises(RemoteApiError):
        xero_service.get_balance_sheet(credential, "2024-03-02")


def test_get_invoices_follows_pages(monkeypatch, credential):
    pages = []

    def fake_request(method, url, **kwargs):
        page = kwargs["params"]["page"]
        pages.append(page)
        assert kwargs["headers"]["xero-tenant-id"] == "tenant-1"
        assert kwargs["timeout"] == xero_service.Config.HTTP_TIMEOUT_SECONDS
        size = xero_service.INVOICE_PAGE_SIZE if page == 1 else 3
        return FakeResponse({"Invoices": [{"InvoiceNumber": f"{page}-{i}"} for i in range(size)]})

    monkeypatch.setattr(xero_service.requests, "request", fake_request)
    invoices = xero_service.get_invoices(credential)

    assert pages == [1, 2]
    assert len(invoices) == xero_service.INVOICE_PAGE_SIZE + 3


def test_refresh_token_posts_refresh_grant(monkeypatch):
    seen = {}

    def fake_request(method, url, **kwargs):
        seen.update(method=method, url=url, data=kwargs["data"])
        return FakeResponse({"access_token": "new"})

    monkeypatch.setattr(xero_service.requests, "request", fake_request)
    assert xero_service.refresh_token("r-1") == {"access_token": "new"}
    assert seen["method"] == "POST"
    assert seen["url"] == xero_service.TOKEN_URL
    assert seen["data"] == {"grant_type": "refresh_token", "refresh_token": "r-1"}


def test_consent_url_carries_scope_and_state(monkeypatch):
    monkeypatch.setattr(xero_service.Config, "XERO_SCOPES", ["openid", "offline_access"])
    url = xero_service.build_consent_url("s-1")
    assert url.startswith(xero_service.AUTHORIZE_URL)
    assert "scope=openid+offline_access" in url
    assert "state=s-1" in url
