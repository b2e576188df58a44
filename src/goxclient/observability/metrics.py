import os
import time
from typing import Any, Dict, List

from goxclient.utils.env_flags import env_flag_enabled

_MAX_EVENTS = 1000


def metrics_enabled() -> bool:
    return not env_flag_enabled(os.environ.get("GOX_DISABLE_METRICS"), default=False)


class Metrics:
    def __init__(self) -> None:
        self.counters: Dict[str, int] = {}
        self.events: List[dict] = []

    def inc(self, name: str, value: int = 1) -> None:
        if not metrics_enabled():
            return
        self.counters[name] = self.counters.get(name, 0) + value

    def event(self, name: str, payload: Dict[str, Any] | None = None) -> None:
        if not metrics_enabled():
            return
        self.events.append({"ts": int(time.time()), "name": name, "payload": payload or {}})
        if len(self.events) > _MAX_EVENTS:
            del self.events[: len(self.events) - _MAX_EVENTS]

    def reset(self) -> None:
        self.counters.clear()
        self.events.clear()


metrics = Metrics()
