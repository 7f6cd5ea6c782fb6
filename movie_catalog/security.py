"""
Password hashing and bearer token primitives.

Passwords are hashed with bcrypt (fixed cost factor) through passlib.
Tokens are HS256 JWTs signed with the configured secret.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext

BCRYPT_ROUNDS = 10
TOKEN_ADMIN_CLAIM = "adminId"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def dummy_verify() -> None:
    """Spend the same time as a real verify, for unknown usernames."""
    pwd_context.dummy_verify()


def create_access_token(
    admin_id: int,
    secret_key: str,
    algorithm: str = "HS256",
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token carrying the admin id and an expiry (24h by default)."""
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta if expires_delta is not None else timedelta(hours=24))
    to_encode = {TOKEN_ADMIN_CLAIM: admin_id, "iat": issued_at, "exp": expire}
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        JWTError: If the token is malformed, badly signed or expired.
    """
    return jwt.decode(token, secret_key, algorithms=[algorithm])
