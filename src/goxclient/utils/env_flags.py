"""Boolean-like environment flags (e.g. GOX_DISABLE_METRICS).

`bool(os.environ.get(NAME))` would treat "0" as enabled, so every flag goes
through `env_flag_enabled`.
"""

_FALSY_VALUES: frozenset[str] = frozenset({"0", "false", "off", "no"})


def env_flag_enabled(env_value: str | None, *, default: bool = False) -> bool:
    """Interpret a boolean-like env flag value.

    - unset (None) or empty/whitespace -> `default`
    - 0/false/off/no (any case) -> False
    - anything else -> True
    """
    if env_value is None or not env_value.strip():
        return default
    return env_value.strip().lower() not in _FALSY_VALUES
