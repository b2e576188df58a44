from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from goxclient.io.mtgox.currency import convert
from goxclient.io.mtgox.errors import ApiError, InvalidResponse

# Fält i money/ticker-svaret
RATE_TYPES: tuple[str, ...] = (
    "high",
    "low",
    "avg",
    "vwap",  # volume-weighted average price
    "vol",
    "last_local",  # last trade in the selected auxiliary currency
    "last_orig",  # last trade, any currency
    "last_all",  # last trade converted to the auxiliary currency
    "last",  # same as last_local
    "buy",
    "sell",
    "now",  # unix timestamp in microseconds
)

_INVALID_MSG = "Invalid API response data received. Make sure connection and endpoint exist."


def decode_response(text: str | None) -> Any:
    """Decode a response body.

    Empty bodies, `null`, unparseable JSON and empty objects/arrays/strings
    raise `InvalidResponse`. Legitimate scalar falsy values (`0`, `false`)
    are returned as-is.
    """
    if text is None or not text.strip():
        raise InvalidResponse(_INVALID_MSG, body=text)
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidResponse(_INVALID_MSG, body=text) from exc
    if decoded is None or (isinstance(decoded, (dict, list, str)) and not decoded):
        raise InvalidResponse(_INVALID_MSG, body=text)
    return decoded


def unwrap(response: Any) -> Any:
    """Return `data` from a `{"result": ..., "data": ...}` envelope."""
    if not isinstance(response, dict) or "result" not in response:
        raise InvalidResponse("Response is not a result envelope")
    if response["result"] != "success":
        raise ApiError(str(response.get("error") or "Unknown API error"), response.get("token"))
    return response.get("data")


def ticker_value(response: Any, rate_type: str, currency: str | None = None) -> Decimal | int:
    """Extract one rate from a money/ticker response as a decimal amount.

    Accepts either the full envelope or its `data` part. `currency` defaults
    to the currency reported by the rate itself; `now` is returned as the raw
    microsecond integer.
    """
    if rate_type not in RATE_TYPES:
        raise ValueError(f"Unknown rate type: {rate_type}")
    data = unwrap(response) if isinstance(response, dict) and "result" in response else response
    if not isinstance(data, dict) or rate_type not in data:
        raise InvalidResponse(f"Ticker response has no '{rate_type}' entry")
    entry = data[rate_type]
    try:
        if rate_type == "now":
            return int(entry)
        value_int = int(entry["value_int"])
        code = currency or entry["currency"]
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidResponse(f"Malformed ticker entry '{rate_type}'") from exc
    return convert(value_int, code)
