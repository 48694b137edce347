"""Access to environment variables."""

from __future__ import annotations

import os

from og_card.errors import EnvVarError


def var(key: str) -> str | None:
    """Return the value of environment variable *key*, or None if it is unset.

    Raises EnvVarError when the value is present but is not valid Unicode.
    """
    value = os.environ.get(key)
    if value is None:
        return None
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EnvVarError(key, "environment variable was not valid unicode") from exc
    return value