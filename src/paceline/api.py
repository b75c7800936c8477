"""Client for the Claude OAuth usage endpoint, with cache-aside fallback."""

import logging
import time
from collections.abc import Callable

import httpx

from .auth import resolve_token
from .cache import CacheStore
from .models import CacheRecord, UsageSnapshot

logger = logging.getLogger(__name__)

OAUTH_USAGE_URL = "https://api.anthropic.com/api/oauth/usage"
OAUTH_BETA_HEADER = "oauth-2025-04-20"
REQUEST_TIMEOUT = 5.0


class UsageFetchError(Exception):
    pass


class AuthenticationError(UsageFetchError):
    pass


def fetch_usage(client: httpx.Client, oauth_token: str) -> str:
    """Fetch the raw usage body. Raises UsageFetchError on any failure."""
    headers = {
        "Accept": "application/json",
        "Authorization": f"Bearer {oauth_token}",
        "anthropic-beta": OAUTH_BETA_HEADER,
    }

    try:
        resp = client.get(OAUTH_USAGE_URL, headers=headers, timeout=REQUEST_TIMEOUT)
    except httpx.HTTPError as e:
        raise UsageFetchError(f"Network error: {e}") from e

    if resp.status_code in (401, 403):
        raise AuthenticationError(f"Usage API rejected the token ({resp.status_code})")
    if resp.status_code != 200:
        raise UsageFetchError(f"API returned status {resp.status_code}")
    if not resp.text.strip():
        raise UsageFetchError("API returned an empty body")

    return resp.text


class UsageFetcher:
    """Returns the current UsageSnapshot, or None when usage is unknown.

    A fresh cache record short-circuits the network. A failed fetch falls back
    to the last record of any age.
    """

    def __init__(
        self,
        cache: CacheStore,
        token_resolver: Callable[[], str | None] = resolve_token,
        client: httpx.Client | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._cache = cache
        self._resolve_token = token_resolver
        self._client = client
        self._clock = clock

    def get_usage(self) -> UsageSnapshot | None:
        now = int(self._clock())
        record = self._cache.read()

        if record is not None and self._cache.is_fresh(record, now):
            snapshot = _parse_record(record)
            if snapshot is not None:
                return snapshot

        token = self._resolve_token()
        if not token:
            return None

        try:
            payload = self._fetch(token)
            snapshot = UsageSnapshot.from_payload(payload)
        except (UsageFetchError, ValueError) as e:
            logger.debug("Usage fetch failed, using cached record: %s", e)
            return _parse_record(record) if record is not None else None

        try:
            self._cache.write(CacheRecord(captured_at=now, payload=payload))
        except OSError as e:
            logger.debug("Could not write usage cache: %s", e)
        return snapshot

    def _fetch(self, token: str) -> str:
        if self._client is not None:
            return fetch_usage(self._client, token)
        with httpx.Client() as client:
            return fetch_usage(client, token)


def _parse_record(record: CacheRecord) -> UsageSnapshot | None:
    try:
        return UsageSnapshot.from_payload(record.payload)
    except ValueError:
        logger.debug("Cached usage record is malformed")
        return None
