"""Small helpers shared by the config layer and the session store."""

import os
import re
from datetime import datetime, timezone

# ${NAME} or ${NAME:-fallback}
_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def _substitute_env(match: re.Match[str]) -> str:
    name, fallback = match.group(1), match.group(2)
    value = os.getenv(name)
    if value is not None:
        return value
    return fallback if fallback is not None else match.group(0)


def expand_env_vars(config: object) -> object:
    """Expand ``${NAME}`` references in every string of a parsed YAML tree.

    ``${NAME:-fallback}`` uses ``fallback`` when ``NAME`` is unset. References
    to unset variables without a fallback are kept as written so that
    validation reports them verbatim.
    """
    if isinstance(config, str):
        return _ENV_REF.sub(_substitute_env, config)
    if isinstance(config, list):
        return [expand_env_vars(item) for item in config]
    if isinstance(config, dict):
        return {key: expand_env_vars(value) for key, value in config.items()}  # type: ignore[misc]
    return config


def format_mtime(timestamp: float) -> str:
    """Format a filesystem modification time as ISO 8601 UTC."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat().replace("+00:00", "Z")
