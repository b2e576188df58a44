from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from decimal import Decimal
from urllib.parse import parse_qs

import httpx
import pytest

from goxclient.config.settings import Settings
from goxclient.io.mtgox.client import USER_AGENT, MtGoxClient
from goxclient.io.mtgox.endpoints import Endpoint
from goxclient.io.mtgox.errors import (
    InvalidCredentials,
    InvalidCurrency,
    InvalidResponse,
    TransportError,
    UnknownEndpoint,
)
from goxclient.observability.metrics import metrics

RAW_SECRET = b"0123456789abcdef"
SECRET = base64.b64encode(RAW_SECRET).decode()


class Recorder:
    def __init__(self, text: str = '{"result":"success","data":{}}', status: int = 200):
        self.text = text
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, text=self.text)


def _client(recorder: Recorder, **kwargs) -> MtGoxClient:
    http = httpx.Client(transport=httpx.MockTransport(recorder))
    return MtGoxClient("api-key", SECRET, http_client=http, **kwargs)


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


def test_defaults() -> None:
    c = MtGoxClient()
    assert c.get_currency() == "USD"
    assert c.version == 2
    assert c.credentials is None


def test_constructor_authenticates_only_with_both_values() -> None:
    assert MtGoxClient("k", "").credentials is None
    c = MtGoxClient("k", SECRET)
    assert c.credentials.key == "k"
    assert SECRET not in repr(c.credentials)


def test_set_currency_normalizes_and_keeps_state_on_error() -> None:
    c = MtGoxClient()
    c.set_currency("eur")
    assert c.currency == "EUR"
    with pytest.raises(InvalidCurrency):
        c.set_currency("XYZ")
    assert c.currency == "EUR"


def test_set_version() -> None:
    c = MtGoxClient()
    c.set_version("1")  # type: ignore[arg-type]
    assert c.version == 1
    with pytest.raises(ValueError):
        c.set_version(0)
    with pytest.raises(ValueError):
        c.set_version("abc")  # type: ignore[arg-type]
    assert c.version == 1


def test_call_posts_signed_form() -> None:
    rec = Recorder('{"result":"success","data":{"Login":"me"}}')
    c = _client(rec)
    out = c.call("money/info", {"foo": "bar"})
    assert out == {"result": "success", "data": {"Login": "me"}}

    (req,) = rec.requests
    assert req.method == "POST"
    assert str(req.url) == "https://data.mtgox.com/api/2/BTCUSD/money/info"
    assert req.headers["Rest-Key"] == "api-key"
    assert req.headers["User-Agent"] == USER_AGENT
    assert req.headers["Content-Type"] == "application/x-www-form-urlencoded"

    body = req.content.decode()
    form = parse_qs(body)
    assert form["foo"] == ["bar"]
    assert form["nonce"][0].isdigit()
    expected = base64.b64encode(
        hmac.new(RAW_SECRET, ("BTCUSD/money/info\0" + body).encode(), hashlib.sha512).digest()
    ).decode()
    assert req.headers["Rest-Sign"] == expected
    assert metrics.counters["rest_auth_request"] == 1
    assert metrics.counters["rest_auth_success"] == 1


def test_call_routes_with_active_currency_and_enum() -> None:
    rec = Recorder()
    c = _client(rec, currency="jpy")
    c.call(Endpoint.MONEY_TICKER)
    c.call(Endpoint.MONEY_WALLET_HISTORY, {"currency": "BTC"})
    assert str(rec.requests[0].url).endswith("/api/2/BTCJPY/money/ticker")
    assert str(rec.requests[1].url).endswith("/api/2/money/wallet/history")


def test_unknown_endpoint_makes_no_request() -> None:
    rec = Recorder()
    c = _client(rec)
    with pytest.raises(UnknownEndpoint):
        c.call("not/a/real/endpoint", {})
    assert rec.requests == []
    assert metrics.counters["rest_auth_unknown_endpoint"] == 1


def test_unknown_endpoint_checked_before_credentials() -> None:
    c = MtGoxClient()
    with pytest.raises(UnknownEndpoint):
        c.call("bogus")


def test_missing_or_bad_credentials_surface_at_signing() -> None:
    rec = Recorder()
    http = httpx.Client(transport=httpx.MockTransport(rec))
    c = MtGoxClient(http_client=http)
    with pytest.raises(InvalidCredentials):
        c.call("money/info")
    c.authenticate("k", "%%%not-base64%%%")
    with pytest.raises(InvalidCredentials):
        c.call("money/info")
    assert rec.requests == []


@pytest.mark.parametrize("text", ["null", "", "   ", "not json", "{}", "[]"])
def test_empty_or_invalid_bodies(text: str) -> None:
    c = _client(Recorder(text))
    with pytest.raises(InvalidResponse):
        c.call("money/info")
    assert metrics.counters["rest_auth_invalid_response"] == 1


@pytest.mark.parametrize("text,expected", [("0", 0), ("false", False), ("[1]", [1])])
def test_falsy_scalars_are_returned(text: str, expected) -> None:
    assert _client(Recorder(text)).call("money/info") == expected


def test_error_status_body_still_decoded() -> None:
    rec = Recorder('{"result":"error","error":"Invalid call"}', status=404)
    out = _client(rec).call("money/info")
    assert out["result"] == "error"


def test_transport_error_wraps_cause() -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    c = MtGoxClient("k", SECRET, http_client=httpx.Client(transport=httpx.MockTransport(boom)))
    with pytest.raises(TransportError) as info:
        c.call("money/info")
    assert isinstance(info.value.cause, httpx.ConnectError)
    assert info.value.__cause__ is info.value.cause
    assert metrics.counters["rest_auth_transport_error"] == 1


def test_dispatch_maps_method_names() -> None:
    rec = Recorder()
    c = _client(rec)
    c.dispatch("money_info")
    c.dispatch("money_tickerFast")
    c.dispatch("money_bitcoin_addrDetails", {"hash": "abc"})
    urls = [str(r.url) for r in rec.requests]
    assert urls[0].endswith("/2/BTCUSD/money/info")
    assert urls[1].endswith("/2/BTCUSD/money/ticker_fast")
    assert urls[2].endswith("/2/money/bitcoin/addr_details")
    with pytest.raises(UnknownEndpoint, match="money/nothing"):
        c.dispatch("money_nothing")


def test_query_is_alias_for_call() -> None:
    rec = Recorder()
    _client(rec).query("money/orders")
    assert str(rec.requests[0].url).endswith("/2/BTCUSD/money/orders")


def test_version_one_signs_body_only() -> None:
    rec = Recorder()
    c = _client(rec, version=1)
    c.call("money/info")
    (req,) = rec.requests
    body = req.content.decode()
    assert str(req.url).endswith("/api/1/BTCUSD/money/info")
    expected = base64.b64encode(hmac.new(RAW_SECRET, body.encode(), hashlib.sha512).digest())
    assert req.headers["Rest-Sign"] == expected.decode()


def test_prepare_has_no_side_effects_on_transport() -> None:
    rec = Recorder()
    signed = _client(rec).prepare("money/order/add", {"type": "bid", "amount_int": 100})
    assert signed.path == "2/BTCUSD/money/order/add"
    assert signed.body.startswith("type=bid&amount_int=100&nonce=")
    assert rec.requests == []


def test_convert_to_btc_uses_active_currency() -> None:
    c = MtGoxClient(currency="SEK")
    assert c.convert_to_btc(1500) == Decimal("1.5")
    with pytest.raises(TypeError):
        c.convert_to_btc(1.5)  # type: ignore[arg-type]


def test_injected_http_client_is_not_closed() -> None:
    http = httpx.Client(transport=httpx.MockTransport(Recorder()))
    with MtGoxClient("k", SECRET, http_client=http) as c:
        c.call("money/info")
    assert http.is_closed is False
    http.close()


def test_owned_http_client_is_closed() -> None:
    c = MtGoxClient("k", SECRET, verify_tls=True)
    http = c._get_http_client()
    c.close()
    assert http.is_closed is True
    assert c._http is None


def test_cache_is_stored_but_unused() -> None:
    cache = object()
    assert MtGoxClient(cache=cache).cache is cache


def test_from_settings() -> None:
    s = Settings(
        MTGOX_API_KEY=" key ",
        MTGOX_API_SECRET=SECRET,
        MTGOX_CURRENCY="gbp",
        MTGOX_API_VERSION=1,
        MTGOX_BASE_URL="https://mirror.example/api/",
        MTGOX_VERIFY_TLS=True,
        MTGOX_TIMEOUT=3.5,
        _env_file=None,
    )
    c = MtGoxClient.from_settings(s, currency="eur")
    assert c.credentials.key == "key"
    assert c.currency == "EUR"
    assert c.version == 1
    assert c._client_kwargs() == {"verify": True, "timeout": 3.5}
    assert c.prepare("money/info").url == "https://mirror.example/api/1/BTCEUR/money/info"


def test_from_settings_rejects_bad_currency() -> None:
    s = Settings(MTGOX_CURRENCY="XYZ", _env_file=None)
    with pytest.raises(InvalidCurrency):
        MtGoxClient.from_settings(s)


def test_tls_verification_off_by_default_and_logged(caplog) -> None:
    c = MtGoxClient()
    with caplog.at_level(logging.WARNING, logger="goxclient.io.mtgox.client"):
        assert c._client_kwargs() == {"verify": False, "timeout": 10.0}
    assert any("TLS peer verification is disabled" in r.getMessage() for r in caplog.records)


def test_tls_verification_enabled_logs_nothing(caplog) -> None:
    c = MtGoxClient(verify_tls=True)
    with caplog.at_level(logging.WARNING, logger="goxclient.io.mtgox.client"):
        assert c._client_kwargs()["verify"] is True
    assert not any("TLS peer verification" in r.getMessage() for r in caplog.records)


def test_from_settings_defaults_keep_tls_off() -> None:
    c = MtGoxClient.from_settings(Settings(_env_file=None))
    assert c._client_kwargs() == {"verify": False, "timeout": 10.0}
    assert c._base_url == "https://data.mtgox.com/api/"


def test_non_ascii_key_rejected_before_sending() -> None:
    rec = Recorder()
    c = MtGoxClient("kä", SECRET, http_client=httpx.Client(transport=httpx.MockTransport(rec)))
    with pytest.raises(InvalidCredentials):
        c.call("money/info")
    assert rec.requests == []
