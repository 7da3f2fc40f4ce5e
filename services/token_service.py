import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from models.credential import Credential
from models.queries import get_token, upsert_token, delete_tokens
from services import xero_service
from services.errors import AuthRefreshError, NoTenantError, RemoteApiError, XeroSyncError

logger = logging.getLogger(__name__)

# Serializes check-then-refresh so concurrent callers never refresh twice.
_refresh_lock = threading.Lock()


def load() -> Optional[Credential]:
    return get_token()


def save(token_set: dict, now: Optional[datetime] = None) -> Credential:
    """Resolve the tenant for a fresh token set and persist it as the single credential."""
    if not token_set or not token_set.get("access_token"):
        raise RemoteApiError("Token response has no access_token")

    tenants = xero_service.get_connections(token_set["access_token"])
    tenant_id = tenants[0].get("tenantId") if tenants else None
    if not tenant_id:
        raise NoTenantError("No tenant ID available.")

    credential = Credential.from_token_set(token_set, tenant_id, now=now)
    existed = get_token() is not None
    upsert_token(credential)
    if existed:
        logger.info("Access token and refresh token updated in the database")
    else:
        logger.info("New token set stored in the database")
    return credential


def refresh(credential: Credential) -> dict:
    """Return a new token set for the credential without touching the store."""
    if not credential.refresh_token:
        raise AuthRefreshError("Stored credential has no refresh token")
    try:
        return xero_service.refresh_token(credential.refresh_token)
    except XeroSyncError as e:
        raise AuthRefreshError(f"Token refresh failed: {e}") from e


def ensure_fresh(now: Optional[datetime] = None) -> Optional[Credential]:
    """Return the stored credential, refreshing and persisting it first if expired.

    Refresh failures are logged and the stale credential is returned, so the
    next API call fails on its own.
    """
    now = now or datetime.now(timezone.utc)
    with _refresh_lock:
        credential = get_token()
        if credential is None:
            logger.warning("No stored Xero credential; authorize via /auth first")
            return None
        if not credential.is_expired(now):
            return credential

        logger.info("Xero access token expired, refreshing...")
        try:
            token_set = refresh(credential)
            credential = save(token_set, now=now)
        except XeroSyncError as e:
            logger.error(f"Error refreshing token: {e}")
            return credential

        logger.info("Token has been refreshed")
        return credential


def clear() -> int:
    with _refresh_lock:
        deleted = delete_tokens()
    logger.info(f"Deleted {deleted} stored token(s)")
    return deleted
