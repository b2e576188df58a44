from __future__ import annotations

import binascii
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import quote_plus

from goxclient.io.mtgox.errors import InvalidCredentials
from goxclient.io.mtgox.paths import signing_prefix
from goxclient.utils.crypto import build_hmac_signature, decode_secret
from goxclient.utils.nonce_manager import get_nonce

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class SignedRequest:
    """A fully built request; constructed per call and never stored."""

    url: str
    path: str
    body: str
    headers: dict[str, str] = field(default_factory=dict)
    nonce: str = ""

    @property
    def signature(self) -> str:
        return self.headers.get("Rest-Sign", "")


def _scalar(value: Any) -> str:
    if value is True:
        return "1"
    if value is False:
        return "0"
    return str(value)


def _flatten(prefix: str, value: Any, out: list[tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for k, v in value.items():
            _flatten(f"{prefix}[{k}]", v, out)
    elif isinstance(value, (list, tuple)):
        for i, v in enumerate(value):
            _flatten(f"{prefix}[{i}]", v, out)
    else:
        out.append((prefix, _scalar(value)))


def encode_params(params: Mapping[str, Any]) -> str:
    """URL-encode `params` as `k=v&k=v` in insertion order.

    Nested mappings and sequences expand to `key[sub]=...`, booleans become
    1/0 and None values are dropped, matching classic PHP form encoding.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        _flatten(str(key), value, pairs)
    return "&".join(f"{quote_plus(k)}={quote_plus(v)}" for k, v in pairs)


def sign_request(
    url: str,
    path: str,
    params: Mapping[str, Any] | None,
    *,
    key: str | None,
    secret: str | None,
    version: int,
    nonce: str | None = None,
) -> SignedRequest:
    """Nonce, form-encode and HMAC-SHA512 sign a request.

    `path` is the URL part after the base URL (`2/BTCUSD/money/info`).
    A caller-supplied `nonce` entry in `params` is always overwritten.
    """
    api_key = (key or "").strip()
    if not api_key or not secret:
        raise InvalidCredentials("API key/secret saknas; anropa authenticate() först.")
    if not api_key.isascii():
        raise InvalidCredentials("API key must be ASCII (sent as the Rest-Key header)")
    try:
        raw_secret = decode_secret(secret)
    except (binascii.Error, ValueError) as exc:
        raise InvalidCredentials("API secret is not valid base64") from exc

    body_params = dict(params or {})
    nonce = nonce if nonce is not None else get_nonce(api_key)
    body_params["nonce"] = nonce
    body = encode_params(body_params)

    message = signing_prefix(path, version) + body
    signature = build_hmac_signature(raw_secret, message.encode("utf-8"))
    headers = {
        "Rest-Key": api_key,
        "Rest-Sign": signature,
        "Content-Type": FORM_CONTENT_TYPE,
    }
    return SignedRequest(url=url, path=path, body=body, headers=headers, nonce=nonce)
