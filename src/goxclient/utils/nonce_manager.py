from __future__ import annotations

import time
from threading import Lock

# Senast utdelade nonce per API-nyckel (mikrosekunder), endast i minnet
_LAST: dict[str, int] = {}
_lock = Lock()


def _now_micro() -> int:
    return time.time_ns() // 1_000


def get_nonce(key_id: str) -> str:
    """Returnerar en strikt ökande nonce per API-nyckel i mikrosekunder.

    Värdet lämnas som decimalsträng så att det aldrig trunkeras till en
    heltalstyp med fast bredd hos mottagaren.
    """
    now = _now_micro()
    with _lock:
        new_nonce = max(now, _LAST.get(key_id, 0) + 1)
        _LAST[key_id] = new_nonce
    return str(new_nonce)


def reset_nonces() -> None:
    """Glöm alla utdelade nonces (används av tester)."""
    with _lock:
        _LAST.clear()
