"""Identity providers: resolve bearer tokens and manage credentials.

``LocalIdentityProvider`` keeps credentials in our own database and signs
tokens with itsdangerous. ``RemoteIdentityProvider`` talks to a
GoTrue-compatible auth API over httpx. Both raise the same exception
classes so guards and services never see provider internals.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from storefront_engine.common.config import StorefrontSettings
from storefront_engine.common.exceptions import (
    AuthenticationFailure,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationFailure,
)
from storefront_engine.identity.models import IdentityModel

logger = logging.getLogger(__name__)

INVALID_TOKEN = "Invalid or expired token"
INVALID_LOGIN = "Invalid email or password"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass
class Identity:
    """A verified principal as returned by the provider."""

    id: str
    email: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class Session:
    access_token: str
    refresh_token: str
    identity: Identity
    token_type: str = "bearer"


class IdentityProvider:
    """Interface shared by the local and remote providers."""

    async def resolve(self, token: str) -> Identity:
        raise NotImplementedError

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> Identity:
        raise NotImplementedError

    async def sign_in(self, email: str, password: str) -> Session:
        raise NotImplementedError

    async def refresh(self, refresh_token: str) -> Session:
        raise NotImplementedError

    async def delete_user(self, user_id: str) -> None:
        raise NotImplementedError

    async def ping(self) -> bool:
        raise NotImplementedError


# ── Local ──


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, encoded: str) -> bool:
    try:
        return pwd_context.verify(password, encoded)
    except ValueError:
        # unrecognised hash format
        return False


class LocalIdentityProvider(IdentityProvider):
    """Database-backed provider with signed, time-limited tokens."""

    def __init__(self, settings: StorefrontSettings, db):
        self.settings = settings
        self.db = db
        self._access = URLSafeTimedSerializer(settings.secret_key, salt="access-token")
        self._refresh = URLSafeTimedSerializer(settings.secret_key, salt="refresh-token")

    def _issue(self, identity: Identity) -> Session:
        payload = {"sub": identity.id, "email": identity.email}
        return Session(
            access_token=self._access.dumps(payload),
            refresh_token=self._refresh.dumps(payload),
            identity=identity,
        )

    @staticmethod
    def _to_identity(row: IdentityModel) -> Identity:
        return Identity(id=row.id, email=row.email, metadata=dict(row.metadata_ or {}))

    async def _load(self, serializer: URLSafeTimedSerializer, token: str, max_age: int) -> Identity:
        try:
            payload = serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            raise AuthenticationFailure(INVALID_TOKEN)
        async with self.db.admin_store() as store:
            row = await store.get(IdentityModel, id=payload.get("sub"))
            if row is None:
                raise AuthenticationFailure(INVALID_TOKEN)
            return self._to_identity(row)

    async def resolve(self, token: str) -> Identity:
        return await self._load(self._access, token, self.settings.access_token_ttl)

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> Identity:
        async with self.db.admin_store() as store:
            if await store.get(IdentityModel, email=email) is not None:
                raise ConflictError("User already registered")
            row = await store.insert(
                IdentityModel,
                email=email,
                password_hash=hash_password(password),
                metadata_=metadata or {},
            )
            return self._to_identity(row)

    async def sign_in(self, email: str, password: str) -> Session:
        async with self.db.admin_store() as store:
            row = await store.get(IdentityModel, email=email)
            if row is None or not verify_password(password, row.password_hash):
                raise AuthenticationFailure(INVALID_LOGIN)
            return self._issue(self._to_identity(row))

    async def refresh(self, refresh_token: str) -> Session:
        identity = await self._load(
            self._refresh, refresh_token, self.settings.refresh_token_ttl
        )
        return self._issue(identity)

    async def delete_user(self, user_id: str) -> None:
        async with self.db.admin_store() as store:
            row = await store.get(IdentityModel, id=user_id)
            if row is None:
                raise NotFoundError("User not found")
            await store.delete(row)

    async def ping(self) -> bool:
        async with self.db.admin_store() as store:
            await store.count(IdentityModel)
        return True


# ── Remote ──


class RemoteIdentityProvider(IdentityProvider):
    """GoTrue-compatible auth API client."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        service_key: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.service_key = service_key
        self.timeout = timeout
        self._transport = transport

    async def _request(
        self, method: str, path: str, *, headers: dict[str, str], **kwargs: Any
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("Identity provider timed out: %s %s", method, path)
            raise UpstreamError(f"Identity provider timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.exception("Identity provider unreachable: %s %s", method, path)
            raise UpstreamError(f"Identity provider unreachable: {exc}") from exc
        if resp.status_code >= 500:
            logger.error(
                "Identity provider error: %s %s -> %s %s",
                method, path, resp.status_code, resp.text,
            )
            raise UpstreamError(f"Identity provider returned {resp.status_code}")
        return resp

    def _public_headers(self, token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token or self.anon_key}",
        }

    def _admin_headers(self) -> dict[str, str]:
        if not self.service_key:
            raise UpstreamError("Identity service key is not configured")
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
        }

    @staticmethod
    def _error_message(resp: httpx.Response, default: str) -> str:
        try:
            body = resp.json()
        except ValueError:
            return default
        return (
            body.get("msg")
            or body.get("error_description")
            or body.get("message")
            or default
        )

    @staticmethod
    def _to_identity(user: dict[str, Any]) -> Identity:
        return Identity(
            id=user["id"],
            email=user.get("email") or "",
            metadata=dict(user.get("user_metadata") or {}),
        )

    def _to_session(self, body: dict[str, Any]) -> Session:
        return Session(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token", ""),
            identity=self._to_identity(body["user"]),
            token_type=body.get("token_type", "bearer"),
        )

    async def resolve(self, token: str) -> Identity:
        resp = await self._request(
            "GET", "/auth/v1/user", headers=self._public_headers(token)
        )
        if resp.status_code != 200:
            raise AuthenticationFailure(INVALID_TOKEN)
        return self._to_identity(resp.json())

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> Identity:
        resp = await self._request(
            "POST", "/auth/v1/signup",
            headers=self._public_headers(),
            json={"email": email, "password": password, "data": metadata or {}},
        )
        if resp.status_code >= 400:
            raise ValidationFailure(self._error_message(resp, "Failed to create user"))
        body = resp.json()
        user = body.get("user") or body
        if not user.get("id"):
            raise ValidationFailure("Failed to create user")
        return self._to_identity(user)

    async def sign_in(self, email: str, password: str) -> Session:
        resp = await self._request(
            "POST", "/auth/v1/token",
            headers=self._public_headers(),
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if resp.status_code != 200:
            raise AuthenticationFailure(INVALID_LOGIN)
        return self._to_session(resp.json())

    async def refresh(self, refresh_token: str) -> Session:
        resp = await self._request(
            "POST", "/auth/v1/token",
            headers=self._public_headers(),
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        if resp.status_code != 200:
            raise AuthenticationFailure(INVALID_TOKEN)
        return self._to_session(resp.json())

    async def delete_user(self, user_id: str) -> None:
        resp = await self._request(
            "DELETE", f"/auth/v1/admin/users/{user_id}", headers=self._admin_headers()
        )
        if resp.status_code == 404:
            raise NotFoundError("User not found")
        if resp.status_code >= 400:
            raise UpstreamError(
                f"Identity provider refused delete: {resp.status_code} {resp.text}"
            )

    async def ping(self) -> bool:
        resp = await self._request(
            "GET", "/auth/v1/health", headers=self._public_headers()
        )
        return resp.status_code == 200
