"""
Admin authentication service.

Registers admin accounts, verifies credentials and issues/validates
bearer tokens. bcrypt work runs in the thread pool so it never stalls
the event loop.
"""

import dataclasses
from datetime import timedelta
from typing import Optional, Tuple

from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from starlette.concurrency import run_in_threadpool

from api.exceptions import AuthenticationError, ConflictError
from api.logging_config import get_logger
from movie_catalog.config import Config
from movie_catalog.models import AdminData
from movie_catalog.security import (
    TOKEN_ADMIN_CLAIM,
    create_access_token,
    decode_access_token,
    dummy_verify,
    hash_password,
    verify_password,
)
from movie_catalog.stores import AdminStore
from movie_catalog.utils import utcnow

logger = get_logger("auth")

DUPLICATE_ACCOUNT_MESSAGE = "Username or email already exists"


class AuthService:
    """Registration, login and token validation for admin accounts."""

    def __init__(self, admins: AdminStore, config: Config):
        self.admins = admins
        self.config = config

    async def register(self, username: str, password: str, email: str) -> AdminData:
        """
        Create an admin account.

        The existence check gives an early, friendly error; the UNIQUE
        constraints on the admins table catch concurrent duplicates.

        Raises:
            ConflictError: If the username or email is already taken.
        """
        existing = await self.admins.find_by_username_or_email(username, email)
        if existing:
            logger.warning(f"Registration rejected: username={username} already exists or email in use")
            raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE)

        hashed = await run_in_threadpool(hash_password, password)

        try:
            admin = await self.admins.insert(AdminData(username=username, password=hashed, email=email))
        except IntegrityError:
            logger.warning(f"Registration lost a race on unique fields: username={username}")
            raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE)

        logger.info(f"Admin registered: admin_id={admin.id} username={admin.username}")
        return admin

    async def login(self, username: str, password: str) -> Tuple[str, AdminData]:
        """
        Verify credentials and issue a bearer token.

        Unknown usernames and wrong passwords fail identically.

        Raises:
            AuthenticationError: On bad credentials.
        """
        admin = await self.admins.find_by_username(username)
        if admin is None:
            await run_in_threadpool(dummy_verify)
            logger.warning(f"Login failed: unknown username={username}")
            raise AuthenticationError("Invalid credentials")

        if not await run_in_threadpool(verify_password, password, admin.password):
            logger.warning(f"Login failed: bad password for admin_id={admin.id}")
            raise AuthenticationError("Invalid credentials")

        now = utcnow()
        await self.admins.update_last_login(admin.id, now)
        admin = dataclasses.replace(admin, last_login=now)

        logger.info(f"Admin logged in: admin_id={admin.id}")
        return self.issue_token(admin.id), admin

    def issue_token(self, admin_id: int, expires_delta: Optional[timedelta] = None) -> str:
        """Sign a token for the admin, valid for the configured lifetime."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.config.jwt_expire_minutes)
        return create_access_token(
            admin_id,
            self.config.jwt_secret_key,
            algorithm=self.config.jwt_algorithm,
            expires_delta=expires_delta,
        )

    async def authenticate(self, authorization: Optional[str]) -> AdminData:
        """
        Resolve the admin behind an `Authorization: Bearer <token>` header.

        Raises:
            AuthenticationError: If the header is missing or malformed, the
                token is invalid or expired, or the admin no longer exists.
        """
        scheme, token = get_authorization_scheme_param(authorization)
        if not authorization or scheme.lower() != "bearer" or not token:
            raise AuthenticationError("Authentication required")

        try:
            claims = decode_access_token(token, self.config.jwt_secret_key, self.config.jwt_algorithm)
        except JWTError as e:
            logger.warning(f"Token rejected: {e}")
            raise AuthenticationError("Invalid token")

        admin_id = claims.get(TOKEN_ADMIN_CLAIM)
        if not isinstance(admin_id, int):
            raise AuthenticationError("Invalid token")

        admin = await self.admins.find_by_id(admin_id)
        if admin is None:
            logger.warning(f"Token for missing admin_id={admin_id}")
            raise AuthenticationError("Invalid token")

        return admin
