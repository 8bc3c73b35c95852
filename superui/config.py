"""
Settings for both services.

Values come from the environment (after loading .env) and can be overridden on the
command line with KEY=value, --KEY=value, /KEY:value or -KEY=value. MCP clients
launch the tool server with those forms, so API_BASE_URL and TIMEOUT accept them.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent.parent

DEFAULT_API_BASE_URL = "http://localhost:3001"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_PORT = 3001
DEFAULT_MCP_PORT = 8000

_ARGV_OVERRIDES = ("API_BASE_URL", "TIMEOUT")
_ARGV_PATTERNS = (
    re.compile(r"^([A-Z_]+)=(.+)$"),
    re.compile(r"^--([A-Z_]+)=(.+)$"),
    re.compile(r"^/([A-Z_]+):(.+)$"),
    re.compile(r"^-([A-Z_]+)[ =](.+)$"),
)

_env_loaded = False


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    mcp_transport: str = "stdio"
    mcp_port: int = DEFAULT_MCP_PORT
    environment: str = "development"
    cors_origins: tuple[str, ...] = field(default_factory=tuple)
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def load_env() -> None:
    """Load .env from the project root, then the working directory. Never overrides the environment."""
    global _env_loaded
    if _env_loaded:
        return
    for env_path in (ROOT / ".env", Path.cwd() / ".env"):
        if env_path.is_file():
            load_dotenv(env_path, override=False)
    _env_loaded = True


def _int_setting(raw: str | None, default: int, name: str) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("[config] %s=%r is not an integer, using %d", name, raw, default)
        return default


def parse_argv_overrides(argv: list[str]) -> dict[str, str]:
    """Pick API_BASE_URL / TIMEOUT overrides out of argv. Later arguments win."""
    overrides: dict[str, str] = {}
    for arg in argv:
        for pattern in _ARGV_PATTERNS:
            match = pattern.match(arg)
            if not match:
                continue
            key, value = match.group(1), match.group(2)
            if key in _ARGV_OVERRIDES:
                overrides[key] = value.replace('"', "").replace("'", "")
            break
    return overrides


def load_settings(argv: list[str] | None = None, environ: dict | None = None) -> Settings:
    """Build Settings from the environment plus optional argv overrides.

    Args:
        argv: Command-line arguments (without the program name), or None
        environ: Mapping to read instead of os.environ (tests)

    Returns:
        A frozen Settings instance
    """
    if environ is None:
        load_env()
        environ = os.environ
    overrides = parse_argv_overrides(argv or [])

    api_base_url = overrides.get("API_BASE_URL") or environ.get("API_BASE_URL") or DEFAULT_API_BASE_URL
    timeout_raw = overrides.get("TIMEOUT", environ.get("TIMEOUT"))
    cors = tuple(o.strip() for o in environ.get("CORS_ORIGINS", "").split(",") if o.strip())

    return Settings(
        api_base_url=api_base_url.rstrip("/"),
        timeout_ms=_int_setting(timeout_raw, DEFAULT_TIMEOUT_MS, "TIMEOUT"),
        host=environ.get("HOST", "0.0.0.0"),
        port=_int_setting(environ.get("PORT"), DEFAULT_PORT, "PORT"),
        mcp_transport=environ.get("MCP_TRANSPORT", "stdio").strip() or "stdio",
        mcp_port=_int_setting(environ.get("MCP_PORT"), DEFAULT_MCP_PORT, "MCP_PORT"),
        environment=environ.get("SUPERUI_ENV", "development").strip() or "development",
        cors_origins=cors,
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
    )
