from datetime import datetime, timezone

from models.credential import Credential
from models.database import get_connection

# The tokens table holds at most one row, always under this id.
TOKEN_ROW_ID = 1


def _row_to_credential(row) -> Credential:
    return Credential(
        access_token=row["access_token"],
        refresh_token=row["refresh_token"],
        expires_at=datetime.fromisoformat(row["expires_at"]),
        id_token=row["id_token"],
        scope=row["scope"],
        token_type=row["token_type"],
        tenant_id=row["tenant_id"],
    )


# --------------- Tokens ---------------

def get_token():
    """Return the stored credential, or None when nothing is connected."""
    conn = get_connection()
    row = conn.execute("SELECT * FROM tokens WHERE id = ?", (TOKEN_ROW_ID,)).fetchone()
    conn.close()
    if row is None:
        return None
    return _row_to_credential(row)


def upsert_token(credential: Credential):
    now = datetime.now(timezone.utc).isoformat()
    conn = get_connection()
    conn.execute(
        """INSERT INTO tokens
               (id, access_token, refresh_token, expires_at, id_token,
                scope, token_type, tenant_id, updated_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
           ON CONFLICT(id) DO UPDATE SET
               access_token=excluded.access_token,
               refresh_token=excluded.refresh_token,
               expires_at=excluded.expires_at,
               id_token=excluded.id_token,
               scope=excluded.scope,
               token_type=excluded.token_type,
               tenant_id=excluded.tenant_id,
               updated_at=excluded.updated_at""",
        (
            TOKEN_ROW_ID,
            credential.access_token,
            credential.refresh_token,
            credential.expires_at.isoformat(),
            credential.id_token,
            credential.scope,
            credential.token_type,
            credential.tenant_id,
            now,
        ),
    )
    conn.commit()
    conn.close()


def delete_tokens() -> int:
    conn = get_connection()
    cur = conn.execute("DELETE FROM tokens")
    conn.commit()
    deleted = cur.rowcount
    conn.close()
    return deleted
