import httpx
import pytest

from conftest import NOW, MemoryCacheStore, usage_payload
from paceline.api import (
    OAUTH_BETA_HEADER,
    OAUTH_USAGE_URL,
    AuthenticationError,
    UsageFetchError,
    UsageFetcher,
    fetch_usage,
)
from paceline.cache import FileCacheStore
from paceline.models import CacheRecord, UsageSnapshot


def make_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def ok_handler(body: str):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=body)

    return handler


def failing_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectTimeout("timed out", request=request)


class TestFetchUsage:
    def test_sends_expected_request(self, payload):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, text=payload)

        assert fetch_usage(make_client(handler), "sk-ant-oat01-abc") == payload

        request = seen[0]
        assert str(request.url) == OAUTH_USAGE_URL
        assert request.method == "GET"
        assert request.headers["Authorization"] == "Bearer sk-ant-oat01-abc"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["anthropic-beta"] == OAUTH_BETA_HEADER

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failures(self, status):
        client = make_client(lambda request: httpx.Response(status, text="{}"))
        with pytest.raises(AuthenticationError):
            fetch_usage(client, "token")

    def test_server_error(self):
        client = make_client(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(UsageFetchError):
            fetch_usage(client, "token")

    def test_empty_body(self):
        with pytest.raises(UsageFetchError):
            fetch_usage(make_client(ok_handler("  ")), "token")

    def test_network_error_is_wrapped(self):
        with pytest.raises(UsageFetchError):
            fetch_usage(make_client(failing_handler), "token")


class TestUsageFetcher:
    def fetcher(self, cache, handler, token="token"):
        return UsageFetcher(
            cache,
            token_resolver=lambda: token,
            client=make_client(handler),
            clock=lambda: NOW + 0.9,
        )

    def test_fresh_cache_skips_network(self, payload):
        cache = MemoryCacheStore(CacheRecord(captured_at=NOW - 59, payload=payload))

        def handler(request):
            raise AssertionError("network should not be touched")

        snapshot = self.fetcher(cache, handler).get_usage()

        assert snapshot == UsageSnapshot.from_payload(payload)
        assert cache.writes == []

    def test_stale_cache_triggers_fetch_and_single_write(self, payload):
        stale = usage_payload(five_hour_util=10)
        cache = MemoryCacheStore(CacheRecord(captured_at=NOW - 61, payload=stale))

        snapshot = self.fetcher(cache, ok_handler(payload)).get_usage()

        assert snapshot.five_hour.utilization == 30.7
        assert cache.writes == [CacheRecord(captured_at=NOW, payload=payload)]

    def test_empty_cache_fetches(self, memory_cache, payload):
        snapshot = self.fetcher(memory_cache, ok_handler(payload)).get_usage()
        assert snapshot.seven_day.utilization == 50.0
        assert len(memory_cache.writes) == 1

    def test_network_failure_falls_back_to_stale_cache(self):
        stale = usage_payload(five_hour_util=12)
        cache = MemoryCacheStore(CacheRecord(captured_at=NOW - 3600, payload=stale))

        snapshot = self.fetcher(cache, failing_handler).get_usage()

        assert snapshot is not None
        assert snapshot.five_hour.utilization == 12
        assert cache.writes == []

    def test_unrecognised_body_falls_back_to_stale_cache(self):
        stale = usage_payload(five_hour_util=12)
        cache = MemoryCacheStore(CacheRecord(captured_at=NOW - 3600, payload=stale))

        body = '{"error": {"type": "rate_limit_error"}}'
        snapshot = self.fetcher(cache, ok_handler(body)).get_usage()

        assert snapshot.five_hour.utilization == 12
        assert cache.writes == []

    def test_failure_without_cache_is_unknown(self, memory_cache):
        assert self.fetcher(memory_cache, failing_handler).get_usage() is None
        assert memory_cache.writes == []

    def test_no_token_and_no_cache_is_unknown(self, memory_cache, payload):
        fetcher = self.fetcher(memory_cache, ok_handler(payload), token=None)
        assert fetcher.get_usage() is None
        assert memory_cache.writes == []

    def test_no_token_ignores_stale_cache(self, payload):
        cache = MemoryCacheStore(CacheRecord(captured_at=NOW - 120, payload=payload))
        assert self.fetcher(cache, ok_handler(payload), token=None).get_usage() is None

    def test_malformed_fresh_cache_does_not_block_fetch(self, payload):
        cache = MemoryCacheStore(CacheRecord(captured_at=NOW, payload="not json"))

        snapshot = self.fetcher(cache, ok_handler(payload)).get_usage()

        assert snapshot == UsageSnapshot.from_payload(payload)
        assert len(cache.writes) == 1

    def test_undecodable_cache_file_is_unknown(self, tmp_path):
        path = tmp_path / "usage_cache"
        path.write_bytes(f"{NOW}\n".encode() + b"\xff\xfe not utf-8")

        fetcher = self.fetcher(FileCacheStore(path), failing_handler, token=None)

        assert fetcher.get_usage() is None

    def test_undecodable_cache_file_does_not_block_fetch(self, tmp_path, payload):
        path = tmp_path / "usage_cache"
        path.write_bytes(f"{NOW}\n".encode() + b"\xff\xfe not utf-8")

        snapshot = self.fetcher(FileCacheStore(path), ok_handler(payload)).get_usage()

        assert snapshot == UsageSnapshot.from_payload(payload)
        assert FileCacheStore(path).read().payload == payload

    def test_non_finite_utilization_reads_as_zero(self, memory_cache):
        body = '{"five_hour": {"utilization": NaN}, "seven_day": {"utilization": Infinity}}'

        snapshot = self.fetcher(memory_cache, ok_handler(body)).get_usage()

        assert snapshot.five_hour.utilization == 0.0
        assert snapshot.seven_day.utilization == 0.0
        # replaying the cached body must parse the same way
        assert UsageSnapshot.from_payload(memory_cache.record.payload) == snapshot

    def test_cache_write_failure_still_returns_snapshot(self, payload):
        class ReadOnlyCache(MemoryCacheStore):
            def write(self, record):
                raise PermissionError("read-only")

        snapshot = self.fetcher(ReadOnlyCache(), ok_handler(payload)).get_usage()
        assert snapshot.five_hour.utilization == 30.7
