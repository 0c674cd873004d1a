"""Load and validate environment variables. Uses python-dotenv.

This module is intentionally thin and side-effect free except for loading `.env`.
Callers should use the accessor functions below rather than reading `os.environ`
directly, to keep environment handling consistent.
"""

from pathlib import Path

from dotenv import load_dotenv
import os


DEFAULT_API_URL = "http://localhost:5000/api/v1"


def _project_root() -> Path:
    """Resolve project root (the directory holding estate_client/)."""
    return Path(__file__).resolve().parent.parent.parent


def load_config() -> None:
    """
    Load .env from project root. Idempotent; safe to call multiple times.
    Uses override=True to ensure .env values take precedence over existing env vars.
    """
    env_path = _project_root() / ".env"
    load_dotenv(env_path, override=True)


def get_optional(key: str, default: str = "") -> str:
    """Get optional env var; return default if missing or empty."""
    load_config()
    val = os.getenv(key, "").strip()
    return val if val else default


def get_optional_int(key: str, default: int) -> int:
    """Get optional env var as int; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# --- Public config accessors ---

def api_base_url() -> str:
    """Optional: REST API base URL. Trailing slashes are dropped."""
    return get_optional("ESTATE_API_URL", DEFAULT_API_URL).rstrip("/")


def request_timeout() -> int:
    """Optional: per-request timeout in seconds. Default 30."""
    return get_optional_int("ESTATE_REQUEST_TIMEOUT", 30)


def bookings_fetch_limit() -> int:
    """Optional: `limit` sent with GET /bookings. Default 10000 (agents filter client-side)."""
    limit = get_optional_int("ESTATE_BOOKINGS_LIMIT", 10000)
    return limit if limit > 0 else 10000


def session_file() -> Path:
    """Optional: where the session token and identity are persisted."""
    raw = get_optional("ESTATE_SESSION_FILE", "")
    if raw:
        return Path(raw).expanduser()
    return _project_root() / "data" / "session.json"


def log_level() -> str:
    """Optional: logging level name for setup_logger. Default INFO."""
    return get_optional("ESTATE_LOG_LEVEL", "INFO").upper()


def project_root() -> Path:
    """Project root directory."""
    return _project_root()
