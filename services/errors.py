class XeroSyncError(Exception):
    """Base class for failures in the Xero to Sheets sync."""


class AuthRefreshError(XeroSyncError):
    """The OAuth refresh call failed."""


class NoTenantError(XeroSyncError):
    """No Xero organisation is connected to the token."""


class RemoteApiError(XeroSyncError):
    """A call to Xero or Google Sheets failed."""


class RemoteTimeoutError(RemoteApiError):
    """A remote call exceeded the configured timeout."""
