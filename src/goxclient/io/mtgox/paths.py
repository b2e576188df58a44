from __future__ import annotations

BASE_URL = "https://data.mtgox.com/api/"
BASE_ASSET = "BTC"


def currency_prefix(currency: str) -> str:
    return f"{BASE_ASSET}{currency}/"


def relative_path(version: int, currency: str, endpoint: str, requires_currency: bool) -> str:
    """Return `<version>/[BTC<CCY>/]<endpoint>` (the part after the base URL)."""
    path = endpoint
    if requires_currency:
        path = currency_prefix(currency) + path
    return f"{version}/{path}"


def build_path(
    version: int,
    currency: str,
    endpoint: str,
    requires_currency: bool,
    *,
    base_url: str = BASE_URL,
) -> str:
    """Full request URL. Deterministic: the signature is computed over part of it."""
    return base_url + relative_path(version, currency, endpoint, requires_currency)


def signing_prefix(relative: str, version: int) -> str:
    """Prefix for the signed payload.

    From API v2 on, the signed message is the path without its version
    segment, a NUL byte, then the form body. Older versions sign the body only.
    """
    if version < 2:
        return ""
    head = f"{version}/"
    path = relative[len(head):] if relative.startswith(head) else relative
    return path + "\0"
