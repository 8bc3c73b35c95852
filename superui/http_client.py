"""
JSON client the MCP tool server uses to reach the HTTP API.

Any failure (connection refused, timeout, non-2xx, bad JSON) is raised as ApiError
so tool functions have one thing to catch before falling back to local text.
"""

import json
import logging
import socket
import urllib.error
import urllib.request

from superui import __version__
from superui.config import Settings, load_settings

logger = logging.getLogger(__name__)

USER_AGENT = f"SuperUI-MCP-Server/{__version__}"


class ApiError(RuntimeError):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ApiClient:
    def __init__(self, base_url: str, timeout_ms: int = 30000):
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ApiClient":
        settings = settings or load_settings()
        return cls(settings.api_base_url, settings.timeout_ms)

    def request(self, method: str, endpoint: str, payload: dict | None = None) -> dict:
        """Send one request and decode the JSON body.

        Raises:
            ApiError: on any transport, status or decoding failure
        """
        url = f"{self.base_url}{endpoint}"
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        req = urllib.request.Request(
            url,
            data=data,
            method=method,
            headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
        )
        logger.info("[http] %s %s", method, url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_ms / 1000) as response:
                body = response.read().decode("utf-8")
                status = response.status
        except urllib.error.HTTPError as e:
            detail = e.read().decode("utf-8", errors="replace")
            logger.error("[http] %s %s - %s %s", method, url, e.code, detail[:200])
            raise ApiError(f"API Server Error: {e.code} {e.reason} - {detail}", status=e.code) from e
        except (socket.timeout, TimeoutError) as e:
            raise ApiError(f"Request timeout after {self.timeout_ms}ms") from e
        except urllib.error.URLError as e:
            if isinstance(e.reason, (socket.timeout, TimeoutError)):
                raise ApiError(f"Request timeout after {self.timeout_ms}ms") from e
            logger.error("[http] %s %s - %s", method, url, e.reason)
            raise ApiError(f"Could not reach API server at {self.base_url}: {e.reason}") from e
        except OSError as e:
            raise ApiError(f"Could not reach API server at {self.base_url}: {e}") from e

        try:
            decoded = json.loads(body)
        except json.JSONDecodeError as e:
            raise ApiError(f"Invalid JSON from API server: {e}", status=status) from e
        logger.info("[http] %s %s - Status: %s", method, url, status)
        return decoded

    def get(self, endpoint: str) -> dict:
        return self.request("GET", endpoint)

    def post(self, endpoint: str, payload: dict) -> dict:
        return self.request("POST", endpoint, payload)
