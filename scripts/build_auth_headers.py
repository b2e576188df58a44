#!/usr/bin/env python3
"""
Bygger signerade MtGox v2-requests (URL, body och Rest-Key/Rest-Sign).
Nyckel och signatur maskeras i utdata om inte --reveal anges.
"""

from __future__ import annotations

import argparse
import json
import sys

from goxclient.config.settings import get_settings
from goxclient.io.mtgox.client import MtGoxClient
from goxclient.io.mtgox.errors import InvalidCredentials, InvalidCurrency, UnknownEndpoint
from goxclient.io.mtgox.signer import SignedRequest
from goxclient.utils.logging_redaction import redact_mapping


def parse_params(items: list[str]) -> dict[str, str]:
    """Tolka `k=v`-par från kommandoraden."""
    params: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid param (expected key=value): {item}")
        params[key] = value
    return params


def build_request(
    endpoint: str,
    params: dict[str, str],
    *,
    currency: str | None = None,
    version: int | None = None,
) -> SignedRequest:
    s = get_settings()
    api_key = (s.MTGOX_API_KEY or "").strip()
    api_secret = (s.MTGOX_API_SECRET or "").strip()
    if not api_key or not api_secret:
        raise InvalidCredentials("MTGOX_API_KEY/SECRET saknas i settings.")

    overrides: dict[str, object] = {}
    if currency:
        overrides["currency"] = currency
    if version is not None:
        overrides["version"] = version
    client = MtGoxClient.from_settings(s, **overrides)
    return client.prepare(endpoint, params)


def safe_output(signed: SignedRequest, *, reveal: bool) -> dict:
    headers = dict(signed.headers) if reveal else redact_mapping(signed.headers)
    return {
        "url": signed.url,
        "path": signed.path,
        "nonce": signed.nonce,
        "body": signed.body,
        "headers": headers,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Bygg signerad MtGox v2-request")
    parser.add_argument("endpoint", help="Endpoint utan version, t.ex. money/info")
    parser.add_argument(
        "--param", action="append", default=[], help="Parameter key=value (kan upprepas)"
    )
    parser.add_argument("--currency", default=None, help="Aktiv valuta (default från settings)")
    parser.add_argument("--version", type=int, default=None, help="API-version (default 2)")
    parser.add_argument("--reveal", action="store_true", help="Visa Rest-Key/Rest-Sign omaskerat")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    args = parser.parse_args(argv)

    try:
        params = parse_params(args.param)
        signed = build_request(
            args.endpoint, params, currency=args.currency, version=args.version
        )
    except InvalidCredentials as e:
        print(str(e), file=sys.stderr)
        return 1
    except (UnknownEndpoint, InvalidCurrency, ValueError) as e:
        print(str(e), file=sys.stderr)
        return 2

    print(json.dumps(safe_output(signed, reveal=args.reveal), indent=2 if args.pretty else None))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
