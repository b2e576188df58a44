from __future__ import annotations

import re
from enum import Enum


class Endpoint(str, Enum):
    """Whitelisted MtGox v2 endpoints. Several are more or less undocumented."""

    MONEY_BANK_REGISTER = "money/bank/register"
    MONEY_BANK_LIST = "money/bank/list"
    MONEY_BITCOIN_ADDPRIV = "money/bitcoin/addpriv"
    MONEY_BITCOIN_ADDR_DETAILS = "money/bitcoin/addr_details"
    MONEY_BITCOIN_ADDRESS = "money/bitcoin/address"
    MONEY_BITCOIN_BLOCK_LIST_TX = "money/bitcoin/block_list_tx"
    MONEY_BITCOIN_NULL = "money/bitcoin/null"
    MONEY_BITCOIN_SEND_SIMPLE = "money/bitcoin/send_simple"
    MONEY_BITCOIN_TX_DETAILS = "money/bitcoin/tx_details"
    MONEY_BITCOIN_VANITY_LOOKUP = "money/bitcoin/vanity_lookup"
    MONEY_BITCOIN_WALLET_ADD = "money/bitcoin/wallet_add"
    MONEY_BITINSTANT_FEE = "money/bitinstant/fee"
    MONEY_BITINSTANT_QUOTE = "money/bitinstant/quote"
    MONEY_CODE_LIST = "money/code/list"
    MONEY_CODE_REDEEM = "money/code/redeem"
    MONEY_CURRENCY = "money/currency"
    MONEY_DEPTH_FETCH = "money/depth/fetch"
    MONEY_DEPTH_FULL = "money/depth/full"
    MONEY_IDKEY = "money/idkey"
    MONEY_INFO = "money/info"
    MONEY_JAPAN_LOOKUP_BANK = "money/japan/lookup_bank"
    MONEY_JAPAN_LOOKUP_BRANCH = "money/japan/lookup_branch"
    MONEY_MERCHANT_ORDER_CREATE = "money/merchant/order/create"
    MONEY_MERCHANT_ORDER_PAY = "money/merchant/order/pay"
    MONEY_MERCHANT_ORDER_DETAILS = "money/merchant/order/details"
    MONEY_MERCHANT_ORDER_PAYMENT = "money/merchant/order/payment"
    MONEY_MERCHANT_POS_ORDER_CREATE = "money/merchant/pos/order/create"
    MONEY_MERCHANT_POS_ORDER_CLOSE = "money/merchant/pos/order/close"
    MONEY_MERCHANT_POS_ORDER_GET = "money/merchant/pos/order/get"
    MONEY_MERCHANT_POS_ORDER_ADD_PRODUCT = "money/merchant/pos/order/add_product"
    MONEY_MERCHANT_POS_ORDER_EDIT_PRODUCT = "money/merchant/pos/order/edit_product"
    MONEY_MERCHANT_PRODUCT_ADD = "money/merchant/product/add"
    MONEY_MERCHANT_PRODUCT_DEL = "money/merchant/product/del"
    MONEY_MERCHANT_PRODUCT_GET = "money/merchant/product/get"
    MONEY_MERCHANT_PRODUCT_EDIT = "money/merchant/product/edit"
    MONEY_ORDER_ADD = "money/order/add"
    MONEY_ORDER_CANCEL = "money/order/cancel"
    MONEY_ORDER_LAG = "money/order/lag"
    MONEY_ORDER_RESULT = "money/order/result"
    MONEY_ORDER_QUOTE = "money/order/quote"
    MONEY_ORDERS = "money/orders"
    MONEY_SWIFT_DETAILS = "money/swift/details"
    MONEY_TICKER = "money/ticker"
    MONEY_TICKER_FAST = "money/ticker_fast"
    MONEY_TICKET_CREATE = "money/ticket/create"
    MONEY_TOKEN_PROCESS = "money/token/process"
    MONEY_TRADES_FETCH = "money/trades/fetch"
    MONEY_TRADES_CANCELLED = "money/trades/cancelled"
    MONEY_WALLET_HISTORY = "money/wallet/history"
    SECURITY_HOTP_GEN = "security/hotp/gen"
    STREAM_LIST_PUBLIC = "stream/list_public"


VALID_ENDPOINTS: frozenset[str] = frozenset(e.value for e in Endpoint)

# Endpoints som räknar om BTC mot aktiv valuta; sökvägen får prefixet BTC<CCY>/
AUXILIARY_ENDPOINTS: frozenset[str] = frozenset(
    {
        Endpoint.MONEY_DEPTH_FETCH.value,
        Endpoint.MONEY_DEPTH_FULL.value,
        Endpoint.MONEY_INFO.value,
        Endpoint.MONEY_IDKEY.value,
        Endpoint.MONEY_ORDER_ADD.value,
        Endpoint.MONEY_ORDER_CANCEL.value,
        Endpoint.MONEY_ORDER_LAG.value,
        Endpoint.MONEY_ORDER_RESULT.value,
        Endpoint.MONEY_ORDER_QUOTE.value,
        Endpoint.MONEY_ORDERS.value,
        Endpoint.MONEY_CURRENCY.value,
        Endpoint.MONEY_TICKER.value,
        Endpoint.MONEY_TICKER_FAST.value,
        Endpoint.MONEY_TRADES_FETCH.value,
    }
)

_UPPER = re.compile(r"([A-Z])")
_UNDERSCORE_WORD = re.compile(r"_([a-z])")


def endpoint_name(endpoint: str | Endpoint) -> str:
    """Return the plain path string for an endpoint or enum member."""
    if isinstance(endpoint, Endpoint):
        return endpoint.value
    return endpoint


def exists(name: str | Endpoint) -> bool:
    return endpoint_name(name) in VALID_ENDPOINTS


def requires_currency(name: str | Endpoint) -> bool:
    return endpoint_name(name) in AUXILIARY_ENDPOINTS


def endpoint_from_method_name(name: str) -> str:
    """Map a method-style name to an endpoint path.

    `money_info` -> `money/info`, `money_tickerFast` -> `money/ticker_fast`.
    Underscores become path separators first; camel-case humps then become
    underscores, so both conventions can be mixed in one name.
    """
    path = name.replace("_", "/")
    return _UPPER.sub(r"_\1", path).lower()


def method_name_for(endpoint: str | Endpoint) -> str:
    """Inverse of `endpoint_from_method_name` for a whitelisted path."""
    path = endpoint_name(endpoint)
    camel = _UNDERSCORE_WORD.sub(lambda m: m.group(1).upper(), path)
    return camel.replace("/", "_")


METHOD_ENDPOINTS: dict[str, Endpoint] = {method_name_for(e): e for e in Endpoint}
