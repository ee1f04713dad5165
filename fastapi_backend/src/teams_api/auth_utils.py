from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from src.teams_api.config import Settings
from src.teams_api.errors import AuthError


_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# PUBLIC_INTERFACE
def hash_password(password: str) -> str:
    """Hash a plaintext password."""
    return _pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Verify a plaintext password against a stored hash. Unknown hash formats never match."""
    if not password_hash:
        return False
    try:
        return _pwd_context.verify(password, password_hash)
    except ValueError:
        return False


# PUBLIC_INTERFACE
def create_access_token(user_id: int, role: str, settings: Settings, now: Optional[datetime] = None) -> str:
    """Create a signed JWT carrying the user id and role."""
    issued = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    expire = issued + timedelta(minutes=settings.jwt_expires_minutes)
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "userId": user_id,
        "role": role,
        "iat": issued,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


# PUBLIC_INTERFACE
def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Decode and verify a token minted by create_access_token.

    No route requires a token yet; this is the check clients and tests use to
    read back the userId and role issued by /initial_login.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise AuthError("Invalid token.") from exc
    if "userId" not in payload:
        raise AuthError("Invalid token payload.")
    return payload
