"""
Credential checks against the three identity tables.

Rows are selected by identity only; the secret is verified in-process against
the stored bcrypt hash so that the comparison never happens in SQL.
"""
import logging
from typing import Any, Dict, Tuple

from src.teams_api import db
from src.teams_api.auth_utils import create_access_token, verify_password
from src.teams_api.config import Settings
from src.teams_api.errors import AuthError, ValidationError, store_errors

logger = logging.getLogger(__name__)

# kind -> (table, identity column)
IDENTITY_TABLES: Dict[str, Tuple[str, str]] = {
    "coach": ("coaches", "username"),
    "player": ("players", "player_name"),
    "user": ("users", "name"),
}


# PUBLIC_INTERFACE
def authenticate(identity: str, secret: str, kind: str) -> Tuple[Dict[str, Any], str]:
    """
    Verify that the caller knows the secret for `identity` in the table selected by `kind`.

    Returns the first matching row (lowest id) together with the role label.
    Raises ValidationError for missing input or an unknown kind, AuthError when
    no row verifies.
    """
    if not identity or not secret or not kind:
        raise ValidationError("All fields are required.")
    if kind not in IDENTITY_TABLES:
        raise ValidationError("Invalid role.")

    table, column = IDENTITY_TABLES[kind]
    with store_errors("during login"):
        rows = db.fetch_all(f"SELECT * FROM {table} WHERE {column}=%s ORDER BY id ASC", [identity])

    for row in rows:
        if verify_password(secret, row.get("password_hash")):
            return row, kind

    logger.warning("Rejected %s login for %r", kind, identity)
    raise AuthError("Invalid credentials.")


# PUBLIC_INTERFACE
def issue_token(name: str, password: str, settings: Settings) -> Tuple[Dict[str, Any], str]:
    """Authenticate a generic user and mint a token carrying the user's id and stored role."""
    if not name or not password:
        raise ValidationError("All fields are required.")
    user, _ = authenticate(name, password, "user")
    token = create_access_token(int(user["id"]), user.get("role") or "user", settings)
    return user, token
