"""Cryptographic utilities for gox-client."""

import base64
import hashlib
import hmac


def decode_secret(secret: str) -> bytes:
    """
    Decode a base64-encoded API secret.

    Raises:
        binascii.Error: if the secret is not valid base64
    """
    return base64.b64decode(secret.strip(), validate=True)


def build_hmac_signature(secret: bytes, message: bytes) -> str:
    """
    Build HMAC-SHA512 signature for MtGox API authentication.

    Args:
        secret: Raw (already base64-decoded) API secret
        message: Message to sign

    Returns:
        Base64-encoded signature string
    """
    digest = hmac.new(secret, message, hashlib.sha512).digest()
    return base64.b64encode(digest).decode("ascii")
