import os
from typing import Union

from .errors import ConfigurationError
from .types import ClientOptions

DEFAULT_PREFIX = "LUNEX_"


def _parse_env_file(env_path: str) -> dict[str, str]:
    """Parse a simple .env file into a dict without modifying os.environ.

    Supports KEY=VALUE pairs and an optional leading ``export``; comments and
    blank lines are ignored. Surrounding single/double quotes are stripped.
    """
    values: dict[str, str] = {}
    try:
        with open(env_path) as f:
            for raw_line in f:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                if line.startswith("export "):
                    line = line[len("export ") :]
                key, val = line.split("=", 1)
                key = key.strip()
                val = val.strip().strip('"').strip("'")
                if key:
                    values[key] = val
    except FileNotFoundError:
        # A missing file just means "environment only"
        pass
    return values


def _header_name(suffix: str) -> str:
    # X_API_KEY -> X-Api-Key
    return "-".join(part.capitalize() for part in suffix.split("_") if part)


def _int_setting(env_map: dict[str, str], var: str) -> Union[int, None]:
    raw = env_map.get(var)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{var} must be an integer, got {raw!r}") from None


def load_options_from_env(
    prefix: str = DEFAULT_PREFIX,
    env_path: Union[str, None] = None,
    **kwargs,
) -> tuple[Union[str, None], ClientOptions]:
    """Build (base_url, ClientOptions) from environment variables.

    Recognized variables (with the default prefix):
    - LUNEX_BASE_URL: base URL (returned separately; None if unset)
    - LUNEX_TIMEOUT: per-attempt timeout in milliseconds
    - LUNEX_MAX_RETRIES: retry count
    - LUNEX_HEADER_<NAME>: default header, e.g. LUNEX_HEADER_X_API_KEY -> X-Api-Key

    If 'env_path' is provided, variables from that .env file augment the
    lookup without mutating the process environment; the real environment
    takes precedence over the file. Remaining kwargs (delay_fn, backoff,
    hooks, ...) are passed to ClientOptions and override the environment.
    """
    file_env = _parse_env_file(env_path) if env_path else {}
    env_map: dict[str, str] = {**file_env, **os.environ}

    settings: dict = {}
    timeout = _int_setting(env_map, f"{prefix}TIMEOUT")
    if timeout is not None:
        settings["timeout"] = timeout
    max_retries = _int_setting(env_map, f"{prefix}MAX_RETRIES")
    if max_retries is not None:
        settings["max_retries"] = max_retries

    header_prefix = f"{prefix}HEADER_"
    headers = {
        _header_name(var[len(header_prefix) :]): value
        for var, value in env_map.items()
        if var.startswith(header_prefix) and value
    }
    if headers:
        settings["default_headers"] = headers

    settings.update(kwargs)
    base_url = env_map.get(f"{prefix}BASE_URL") or None
    return base_url, ClientOptions(**settings)
