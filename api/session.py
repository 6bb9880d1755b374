"""Trainer sessions: signed ids plus a Redis or in-process store for exported state."""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any
from uuid import uuid4

import redis.asyncio as redis
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from redis.exceptions import RedisError

from config import config

logger = logging.getLogger(__name__)

SessionData = dict[str, Any]


class SessionSigner:
    """Signs session ids so clients cannot guess or forge them."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(
            secret_key or config.security.secret_key, salt="trainer-session"
        )

    def sign(self, session_id: str) -> str:
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Recover the session id from a token.

        Args:
            token: Value of the X-Session-ID header
            max_age: Seconds a token stays valid (session_ttl if not provided)

        Returns:
            The session id, or None for expired or tampered tokens
        """
        try:
            return self._serializer.loads(token, max_age=max_age or config.session_ttl)
        except SignatureExpired:
            logger.info("Expired session token")
        except BadSignature:
            logger.warning("Rejected session token with a bad signature")
        return None


_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Process-wide signer, created on first use."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


class SessionStore(ABC):
    """Key-value store for session data, with expiry."""

    @abstractmethod
    async def get(self, session_id: str) -> SessionData | None: ...

    @abstractmethod
    async def set(self, session_id: str, data: SessionData, ttl: int | None = None) -> None: ...

    @abstractmethod
    async def delete(self, session_id: str) -> None: ...

    async def exists(self, session_id: str) -> bool:
        return await self.get(session_id) is not None

    async def cleanup_expired(self) -> int:
        """Drop expired sessions and return how many were removed."""
        return 0

    def create_session_id(self, signed: bool = True) -> str:
        """New random session id; signed unless ``signed`` is False."""
        session_id = str(uuid4())
        return get_session_signer().sign(session_id) if signed else session_id


class InMemorySessionStore(SessionStore):
    """Sessions held in this process; used when Redis is disabled or unreachable."""

    def __init__(self) -> None:
        # session id -> (data, expiry on the time.time() clock)
        self._sessions: dict[str, tuple[SessionData, float]] = {}

    async def get(self, session_id: str) -> SessionData | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        data, expires_at = entry
        if expires_at < time.time():
            del self._sessions[session_id]
            return None
        return data

    async def set(self, session_id: str, data: SessionData, ttl: int | None = None) -> None:
        self._sessions[session_id] = (data, time.time() + (ttl or config.session_ttl))

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def cleanup_expired(self) -> int:
        """Drop expired sessions and return how many were removed."""
        now = time.time()
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at < now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)


class RedisSessionStore(SessionStore):
    """Sessions stored as JSON strings under a key prefix, expired by Redis."""

    def __init__(self, redis_client: redis.Redis, prefix: str = "trainer:session:") -> None:
        self._redis = redis_client
        self._prefix = prefix

    def _key(self, session_id: str) -> str:
        return self._prefix + session_id

    async def get(self, session_id: str) -> SessionData | None:
        raw = await self._redis.get(self._key(session_id))
        return None if raw is None else json.loads(raw)

    async def set(self, session_id: str, data: SessionData, ttl: int | None = None) -> None:
        await self._redis.set(self._key(session_id), json.dumps(data), ex=ttl or config.session_ttl)

    async def delete(self, session_id: str) -> None:
        await self._redis.delete(self._key(session_id))

    async def exists(self, session_id: str) -> bool:
        return bool(await self._redis.exists(self._key(session_id)))


_session_store: SessionStore | None = None


async def get_session_store() -> SessionStore:
    """
    Return the process-wide store, choosing it on first call.

    Redis is used when REDIS_ENABLED is set and the server answers a ping;
    otherwise sessions live in memory and are lost on restart.
    """
    global _session_store
    if _session_store is not None:
        return _session_store

    if config.redis.enabled:
        client = redis.from_url(config.redis.url)
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.warning("Redis unavailable (%s); keeping sessions in memory", e)
        else:
            logger.info("Using Redis session store at %s:%s", config.redis.host, config.redis.port)
            _session_store = RedisSessionStore(client)
            return _session_store

    _session_store = InMemorySessionStore()
    return _session_store


def reset_session_store() -> None:
    """Forget the chosen store so the next call picks again."""
    global _session_store
    _session_store = None


async def create_session(data: SessionData | None = None) -> str:
    """Store a new session and return its signed token."""
    store = await get_session_store()
    token = store.create_session_id()
    await store.set(token, data or {})
    logger.info("Created session")
    return token


async def get_session(token: str) -> SessionData | None:
    return await (await get_session_store()).get(token)


async def update_session(token: str, data: SessionData) -> None:
    await (await get_session_store()).set(token, data)


async def purge_expired_sessions() -> int:
    """Sweep expired sessions from the store. Redis expires its own keys."""
    removed = await (await get_session_store()).cleanup_expired()
    if removed:
        logger.info("Purged %d expired sessions", removed)
    return removed


def extract_session_id(token: str) -> str | None:
    """Session id inside a signed token, or None if the token is invalid."""
    return get_session_signer().unsign(token)
