"""
shelter_platform.auth.jwks

Async JWKS key store for identity-provider tokens.

Responsibilities:
- Fetch the provider's JSON Web Key Set over httpx without blocking the event loop.
- Resolve signing keys by `kid`, refreshing when an unknown `kid` appears
  (provider key rotation), at most once per refresh interval.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

import httpx
import jwt
from jwt import PyJWKSetError

from shelter_platform.errors import InvalidToken
from shelter_platform.observability.logging import get_logger

log = get_logger(__name__)


class JwksKeyStore:
    """
    Keys are cached until a token names a `kid` the cache doesn't know. Such a
    miss refreshes the set unless a refresh already happened within
    `min_refresh_interval` seconds, in which case the token is rejected as is.
    """

    def __init__(
        self,
        *,
        url: str,
        http: httpx.AsyncClient,
        timeout: float = 5.0,
        min_refresh_interval: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._url = url
        self._http = http
        self._timeout = timeout
        self._min_refresh_interval = min_refresh_interval
        self._clock = clock
        self._keys: dict[str, jwt.PyJWK] = {}
        # Bumped on every successful fetch; 0 means nothing was loaded yet.
        self._generation = 0
        self._refreshed_at: float | None = None
        self._lock = asyncio.Lock()

    async def signing_key(self, kid: str) -> jwt.PyJWK:
        keys, generation = await self._current()
        if kid not in keys:
            keys = await self._refresh(seen=generation)
        try:
            return keys[kid]
        except KeyError:
            raise InvalidToken("Unknown token signing key") from None

    async def _current(self) -> tuple[dict[str, jwt.PyJWK], int]:
        async with self._lock:
            if self._generation == 0:
                await self._fetch()
            return self._keys, self._generation

    async def _refresh(self, *, seen: int) -> dict[str, jwt.PyJWK]:
        async with self._lock:
            # A concurrent miss already refetched while this one waited on the lock.
            if self._generation != seen:
                return self._keys
            now = self._clock()
            if (
                self._refreshed_at is not None
                and now - self._refreshed_at < self._min_refresh_interval
            ):
                log.info("jwks_refresh_throttled", url=self._url)
                return self._keys
            self._refreshed_at = now
            await self._fetch()
            return self._keys

    async def _fetch(self) -> None:
        try:
            r = await self._http.get(self._url, timeout=self._timeout)
            r.raise_for_status()
            jwk_set = jwt.PyJWKSet.from_dict(r.json())
        except (httpx.HTTPError, ValueError, PyJWKSetError) as e:
            log.warning("jwks_fetch_failed", url=self._url, error=str(e))
            raise InvalidToken("Unable to verify token") from e
        self._keys = {k.key_id: k for k in jwk_set.keys if k.key_id}
        self._generation += 1
        log.info("jwks_loaded", url=self._url, keys=len(self._keys), generation=self._generation)


# --- Module Notes -----------------------------------------------------------
# The cached key set is trust-anchor material, not identity data: user and
# membership lookups are never cached. The refresh interval bounds how often
# tokens with made-up `kid`s can make the service call the provider.
