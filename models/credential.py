from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


def _utc(now: Optional[datetime]) -> datetime:
    """Current time by default; naive times are taken as UTC."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


@dataclass(frozen=True)
class Credential:
    """The stored Xero token set plus the tenant it was issued for."""
    access_token: str
    refresh_token: Optional[str]
    expires_at: datetime
    id_token: Optional[str]
    scope: Optional[str]
    token_type: Optional[str]
    tenant_id: str

    @classmethod
    def from_token_set(cls, token_set: dict, tenant_id: str, now: Optional[datetime] = None) -> "Credential":
        """Build a credential from an OAuth token endpoint response."""
        expires_in = int(token_set.get("expires_in", 0))
        return cls(
            access_token=token_set["access_token"],
            refresh_token=token_set.get("refresh_token"),
            expires_at=_utc(now) + timedelta(seconds=expires_in),
            id_token=token_set.get("id_token"),
            scope=token_set.get("scope"),
            token_type=token_set.get("token_type"),
            tenant_id=tenant_id,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at < _utc(now)
