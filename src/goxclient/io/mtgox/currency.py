from __future__ import annotations

from decimal import Decimal

from goxclient.io.mtgox.errors import InvalidCurrency

DEFAULT_CURRENCY = "USD"

# value_int -> decimal; API:t skickar alla belopp som heltal skalade per valuta
CURRENCIES: dict[str, Decimal] = {
    "BTC": Decimal("0.00000001"),
    "USD": Decimal("0.00001"),
    "AUD": Decimal("0.00001"),
    "CAD": Decimal("0.00001"),
    "CHF": Decimal("0.00001"),
    "CNY": Decimal("0.00001"),
    "DKK": Decimal("0.00001"),
    "EUR": Decimal("0.00001"),
    "GBP": Decimal("0.00001"),
    "HKD": Decimal("0.00001"),
    "JPY": Decimal("0.001"),
    "NZD": Decimal("0.00001"),
    "PLN": Decimal("0.00001"),
    "RUB": Decimal("0.00001"),
    "SEK": Decimal("0.001"),
    "SGD": Decimal("0.00001"),
    "THB": Decimal("0.00001"),
    "NOK": Decimal("0.00001"),
    "CZK": Decimal("0.00001"),
}


def normalize(code: str) -> str:
    """Upper-case a currency code and check that it is supported."""
    if not isinstance(code, str):
        raise InvalidCurrency(code)
    norm = code.strip().upper()
    if norm not in CURRENCIES:
        raise InvalidCurrency(code)
    return norm


def scale_factor(code: str) -> Decimal:
    return CURRENCIES[normalize(code)]


def convert(value: int, code: str) -> Decimal:
    """Convert a minor-unit integer (`value_int`) into a major-unit amount.

    Floats are rejected: the API represents amounts as fixed-point integers
    and a float here would already have lost precision.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("The value must be an integer.")
    return value * scale_factor(code)
