import hmac
import uuid
from datetime import datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from intake.config import Settings

ADMIN_SCOPE = "admin"


def get_password_hash(password: str) -> str:
    # Bcrypt has a 72 byte limit
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


def is_admin_credential(username: str | None, password: str | None, config: Settings) -> bool:
    """Compare a submitted pair against the configured administrator pair.

    An unset admin username or password never matches.
    """
    if not config.ADMIN_USERNAME or not config.ADMIN_PASSWORD:
        return False
    if username is None or password is None:
        return False
    username_ok = hmac.compare_digest(username.encode("utf-8"), config.ADMIN_USERNAME.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), config.ADMIN_PASSWORD.encode("utf-8"))
    return username_ok and password_ok


def create_admin_token(config: Settings, expires_delta: timedelta | None = None) -> str:
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=config.ADMIN_TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": config.ADMIN_USERNAME,
        "scope": ADMIN_SCOPE,
        "jti": str(uuid.uuid4()),
        "exp": expire,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.ALGORITHM)


def decode_admin_token(token: str, config: Settings) -> dict | None:
    """Return the token payload when it is a valid admin token, else None."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.ALGORITHM])
    except JWTError:
        return None
    if payload.get("scope") != ADMIN_SCOPE:
        return None
    if not config.ADMIN_USERNAME or payload.get("sub") != config.ADMIN_USERNAME:
        return None
    return payload
