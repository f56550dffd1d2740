"""
Process-wide configuration: environment variables, with .env loaded once.

Every value is read at call time so tests and long-lived agents can change
the environment without re-importing. A .env in the current directory (or
the package's parent) is loaded with override=False, so exported variables
always win.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_API_URL = "FUTARCHY_API_URL"
ENV_FACILITATOR_URL = "FUTARCHY_FACILITATOR_URL"
ENV_HTTP_TIMEOUT = "FUTARCHY_HTTP_TIMEOUT"
ENV_NETWORK = "FUTARCHY_NETWORK"
ENV_LOG_LEVEL = "FUTARCHY_LOG_LEVEL"
ENV_PRIVATE_KEY = "WALLET_PRIVATE_KEY"

DEFAULT_API_URL = "https://futarchy402-api.fly.dev"
DEFAULT_HTTP_TIMEOUT = 30
DEFAULT_NETWORK = "solana-devnet"
DEFAULT_SLIPPAGE = 0.05

_env_loaded = False


def load_env() -> None:
    """Load .env from cwd or the repo root. Never overrides exported variables."""
    global _env_loaded
    if _env_loaded:
        return
    _env_loaded = True
    for _dir in [Path.cwd(), Path(__file__).resolve().parent.parent]:
        _env_file = _dir / ".env"
        if _env_file.exists():
            load_dotenv(_env_file, override=False)
            return


def _strip_url(url: str) -> str:
    return url.strip().rstrip("/")


def get_api_base_url(override: Optional[str] = None) -> str:
    """Governance API base URL: explicit override, then FUTARCHY_API_URL, then the public default."""
    if override and override.strip():
        return _strip_url(override)
    load_env()
    return _strip_url(os.getenv(ENV_API_URL) or DEFAULT_API_URL)


def get_facilitator_url(override: Optional[str] = None, api_base_url: Optional[str] = None) -> str:
    """Facilitator base URL. Falls back to the governance API, which hosts /facilitator/settle."""
    if override and override.strip():
        return _strip_url(override)
    load_env()
    env = (os.getenv(ENV_FACILITATOR_URL) or "").strip()
    if env:
        return _strip_url(env)
    return get_api_base_url(api_base_url)


def get_http_timeout() -> int:
    load_env()
    _env = os.getenv(ENV_HTTP_TIMEOUT, "").strip()
    if _env.isdigit() and int(_env) > 0:
        return int(_env)
    return DEFAULT_HTTP_TIMEOUT


def get_network() -> str:
    load_env()
    return (os.getenv(ENV_NETWORK) or DEFAULT_NETWORK).strip()


def get_log_level() -> str:
    load_env()
    return (os.getenv(ENV_LOG_LEVEL) or "INFO").strip().upper()


def get_configured_private_key() -> Optional[str]:
    """WALLET_PRIVATE_KEY, or None when unset or blank."""
    load_env()
    pk = os.getenv(ENV_PRIVATE_KEY)
    if not pk or not pk.strip():
        return None
    return pk.strip()
