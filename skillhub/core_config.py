"""
Core Configuration Definitions.

This module defines the default structure and values for the client's
configuration system using `yacs`. It serves as the single source of truth
for all configurable parameters.

Configuration is organized into sections:
- SYSTEM: Data directory.
- API: Backend base URL and login route.
- SESSION: Where the session token is persisted.
- WEB: Host/port of the bundled web frontend.
- LOGGING: Log level and rotating file settings.
"""

import os
import platform
from pathlib import Path

from yacs.config import CfgNode as CN  # type: ignore[import-untyped]


DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_WEB_PORT = 8012


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip() or default


def _env_port(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    if value < 1 or value > 65535:
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _default_data_dir() -> Path:
    system = platform.system().lower()
    if system == "windows":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / "SkillHub"
        return Path.home() / "AppData" / "Local" / "SkillHub"
    if system == "darwin":
        return Path.home() / "Library" / "Application Support" / "SkillHub"
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / "skillhub"
    return Path.home() / ".local" / "share" / "skillhub"


def get_cfg_defaults() -> CN:
    """Build a fresh config tree, reading env overrides at call time."""
    _C = CN()

    # -------------------------------------------------------------------------
    # System Configuration
    # -------------------------------------------------------------------------
    _C.SYSTEM = CN()
    _C.SYSTEM.DATA_DIR = _env_str("SKILLHUB_DATA_DIR", str(_default_data_dir()))

    # -------------------------------------------------------------------------
    # Backend API
    # -------------------------------------------------------------------------
    _C.API = CN()
    _C.API.BASE_URL = _env_str("SKILLHUB_API_URL", DEFAULT_API_URL).rstrip("/")
    # Route the client is sent to when the backend rejects the session
    _C.API.LOGIN_ROUTE = "/login"

    # -------------------------------------------------------------------------
    # Session Storage
    # -------------------------------------------------------------------------
    _C.SESSION = CN()
    _C.SESSION.FILE = _env_str(
        "SKILLHUB_SESSION_FILE",
        os.path.join(_C.SYSTEM.DATA_DIR, "session.json"),
    )
    _C.SESSION.TOKEN_KEY = "token"

    # -------------------------------------------------------------------------
    # Web Frontend
    # -------------------------------------------------------------------------
    _C.WEB = CN()
    _C.WEB.HOST = _env_str("SKILLHUB_WEB_HOST", "127.0.0.1")
    _C.WEB.PORT = _env_port("SKILLHUB_WEB_PORT", DEFAULT_WEB_PORT)
    _C.WEB.FEATURED_LIMIT = 6

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    _C.LOGGING = CN()
    _C.LOGGING.LEVEL = _env_str("LOG_LEVEL", "INFO").upper()
    _C.LOGGING.FILE = _env_str(
        "LOG_FILE",
        os.path.join(_C.SYSTEM.DATA_DIR, "logs", "skillhub.log"),
    )
    _C.LOGGING.MAX_BYTES = _env_int("LOG_MAX_BYTES", 5 * 1024 * 1024)
    _C.LOGGING.BACKUP_COUNT = _env_int("LOG_BACKUP_COUNT", 5)

    return _C.clone()
