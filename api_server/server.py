"""
SuperUI API Server: component lookup, landing page templates and the clone workflow over JSON/HTTP.
The MCP tool server (server.py at the project root) is its main client.
Run: python -m api_server.server -> http://0.0.0.0:3001
"""
import json
import logging
import os
import signal
import sys
import threading
import time
import urllib.parse
from datetime import datetime, timezone
from http.server import HTTPServer, BaseHTTPRequestHandler
from socketserver import ThreadingMixIn

from superui import __version__
from superui.catalog import CATEGORIES, ComponentCatalog, get_catalog
from superui.clone import CloneRequest, CloneRequestError, CloneWorkflow
from superui.config import Settings, load_settings
from superui.conversation import HELP_INFO, ConversationState, ConversationStateError, advance
from superui.details import get_component_details, get_component_guide
from superui.screenshot import ScreenshotError, ScreenshotOptionsError, ScreenshotService
from superui.search import (
    find_component,
    get_all_components,
    get_components_by_category,
    list_components,
    search_components,
)

logger = logging.getLogger("api_server")

MAX_BODY_BYTES = 10 * 1024 * 1024

LOCAL_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HttpError(Exception):
    """Short-circuits a handler with a JSON error response."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status


# ──────────────────────── Server ────────────────────────

class ThreadedHTTPServer(ThreadingMixIn, HTTPServer):
    daemon_threads = True

    def __init__(self, address, handler, settings: Settings, screenshots: ScreenshotService,
                 catalog: ComponentCatalog):
        super().__init__(address, handler)
        self.settings = settings
        self.screenshots = screenshots
        self.catalog = catalog
        self.clone = CloneWorkflow(screenshots, catalog)
        self.started_at = time.monotonic()


def make_server(settings: Settings | None = None, screenshots: ScreenshotService | None = None,
                catalog: ComponentCatalog | None = None, host: str | None = None,
                port: int | None = None) -> ThreadedHTTPServer:
    """Build (and bind) the API server. Pass port=0 for an ephemeral port."""
    settings = settings or load_settings()
    address = (host if host is not None else settings.host, port if port is not None else settings.port)
    return ThreadedHTTPServer(
        address,
        Handler,
        settings=settings,
        screenshots=screenshots if screenshots is not None else ScreenshotService(),
        catalog=catalog if catalog is not None else get_catalog(),
    )


# ──────────────────────── Handler ────────────────────────

class Handler(BaseHTTPRequestHandler):
    server: ThreadedHTTPServer
    server_version = f"SuperUI/{__version__}"

    def do_OPTIONS(self):
        self.send_response(204)
        self._send_cors_headers()
        self.send_header("Access-Control-Allow-Methods", "GET, POST, PUT, DELETE, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type, Authorization, User-Agent")
        self.send_header("Content-Length", "0")
        self.end_headers()

    def do_GET(self):
        parsed = urllib.parse.urlparse(self.path)
        path = parsed.path.rstrip("/") or "/"
        query = urllib.parse.parse_qs(parsed.query)

        if path == "/":
            self._dispatch(self.handle_info)
        elif path == "/health":
            self._dispatch(self.handle_health)
        elif path == "/api/component/search":
            self._dispatch(self.handle_component_search, query)
        elif path == "/api/component/list":
            self._dispatch(self.handle_component_list_get, query)
        elif path.startswith("/api/component/"):
            name = urllib.parse.unquote(path[len("/api/component/"):])
            self._dispatch(self.handle_component_get, name)
        elif path in ("/api/template/start", "/api/landing/start"):
            self._dispatch(self.handle_template_start)
        elif path in ("/api/template/help", "/api/landing/help"):
            self._dispatch(self.handle_template_help)
        else:
            self._send_not_found(path)

    def do_POST(self):
        path = urllib.parse.urlparse(self.path).path.rstrip("/") or "/"
        routes = {
            "/api/component": self.handle_component,
            "/api/component/list": self.handle_component_list,
            "/api/component/details": self.handle_component_details,
            "/api/clone": self.handle_clone,
            "/api/clone/screenshot": self.handle_clone_screenshot,
            "/api/template": self.handle_template,
            "/api/landing": self.handle_template,
        }
        handler = routes.get(path)
        if handler is None:
            self._drain_body()
            self._send_not_found(path)
            return
        self._dispatch(lambda: handler(self._read_json()))

    # ── Dispatch / errors ──

    def _dispatch(self, fn, *args):
        try:
            status, payload = fn(*args)
            self.send_json(payload, status)
        except HttpError as e:
            self.send_error_json(str(e), e.status)
        except (CloneRequestError, ConversationStateError, ScreenshotOptionsError) as e:
            self.send_error_json(str(e), 400)
        except ScreenshotError as e:
            logger.error("[api] %s", e)
            self.send_error_json(str(e), 500)
        except Exception as e:
            logger.exception("[api] Unhandled error on %s %s", self.command, self.path)
            message = str(e) if self.server.settings.is_development else "Internal server error"
            self.send_error_json(message, 500, path=self.path, method=self.command)

    def _read_json(self) -> dict:
        length = int(self.headers.get("Content-Length", 0) or 0)
        if length > MAX_BODY_BYTES:
            raise HttpError(413, "Request body too large")
        raw = self.rfile.read(length).decode("utf-8", errors="replace") if length else ""
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            raise HttpError(400, "Invalid JSON") from None
        if not isinstance(data, dict):
            raise HttpError(400, "Request body must be a JSON object")
        return data

    @staticmethod
    def _text(body: dict, name: str, missing: str | None = None) -> str:
        """String field from a JSON body, stripped. Raises 400 when it is not a string,
        or when it is empty and a missing message is given."""
        value = body.get(name)
        if value is not None and not isinstance(value, str):
            raise HttpError(400, f"{name} must be a string")
        value = (value or "").strip()
        if not value and missing:
            raise HttpError(400, missing)
        return value

    def _drain_body(self):
        length = int(self.headers.get("Content-Length", 0) or 0)
        if 0 < length <= MAX_BODY_BYTES:
            self.rfile.read(length)

    def _metadata(self, **extra) -> dict:
        return {**extra, "timestamp": _now(), "version": __version__}

    # ── Info ──

    def handle_info(self):
        return 200, {
            "name": "SuperUI API Server",
            "version": __version__,
            "description": "API server for UI component management",
            "endpoints": {
                "health": "/health",
                "components": {
                    "get": "/api/component/:componentName",
                    "search": "/api/component/search?q=query",
                    "list": "/api/component/list",
                    "create": "POST /api/component",
                    "listRanked": "POST /api/component/list",
                    "details": "POST /api/component/details",
                },
                "template": {
                    "converse": "POST /api/template",
                    "start": "/api/template/start",
                    "help": "/api/template/help",
                },
                "landing": {
                    "converse": "POST /api/landing",
                    "start": "/api/landing/start",
                    "help": "/api/landing/help",
                },
                "clone": {
                    "workflow": "POST /api/clone",
                    "screenshot": "POST /api/clone/screenshot",
                },
            },
            "timestamp": _now(),
        }

    def handle_health(self):
        return 200, {
            "status": "OK",
            "timestamp": _now(),
            "version": __version__,
            "uptime": round(time.monotonic() - self.server.started_at, 3),
            "pid": os.getpid(),
        }

    # ── Components ──

    def handle_component(self, body: dict):
        search_query = self._text(body, "searchQuery", "Missing required field: searchQuery")
        result = get_component_guide(
            search_query,
            self._text(body, "absolutePathToCurrentFile"),
            self._text(body, "absolutePathToProjectDirectory"),
            self.server.catalog,
        )
        return 200, {"result": result, "metadata": self._metadata(searchQuery=search_query)}

    def handle_component_search(self, query: dict):
        q = (query.get("q") or [""])[0].strip()
        if not q:
            raise HttpError(400, "Missing required query parameter: q")
        logger.info("[api] Component search: %r", q)
        results = search_components(q, self.server.catalog)
        return 200, {
            "query": q,
            "results": [self._listing(r) for r in results],
            "count": len(results),
            "timestamp": _now(),
        }

    def handle_component_list_get(self, query: dict):
        category = (query.get("category") or [""])[0].strip() or None
        if category:
            components = get_components_by_category(category, self.server.catalog)
        else:
            components = get_all_components(self.server.catalog)
        return 200, {
            "components": [self._listing(r) for r in components],
            "count": len(components),
            "category": category or "all",
            "timestamp": _now(),
        }

    def handle_component_get(self, name: str):
        record = find_component(name, self.server.catalog)
        if record is None:
            raise HttpError(404, f'Component "{name}" not found')
        return 200, {"component": record.to_dict(), "timestamp": _now()}

    def handle_component_list(self, body: dict):
        query = body.get("query")
        category = body.get("category") or None
        limit = body.get("limit") or None
        if query is not None and not isinstance(query, str):
            raise HttpError(400, "query must be a string")
        if category is not None and category not in CATEGORIES:
            raise HttpError(400, f"Unknown category. Must be one of: {', '.join(CATEGORIES)}")
        if limit is not None:
            try:
                limit = int(limit)
            except (TypeError, ValueError):
                raise HttpError(400, "limit must be a number") from None

        results = list_components(query, category, limit, self.server.catalog)
        logger.info("[api] List components query=%r category=%s -> %d", query, category or "all", len(results))
        return 200, {
            "results": [r.summary() for r in results],
            "metadata": self._metadata(query=query, category=category or "all", count=len(results)),
        }

    def handle_component_details(self, body: dict):
        name = self._text(body, "componentName", "Missing required field: componentName")
        result = get_component_details(
            name,
            self._text(body, "absolutePathToCurrentFile"),
            self._text(body, "absolutePathToProjectDirectory"),
            self.server.catalog,
        )
        return 200, {"result": result, "metadata": self._metadata(componentName=name)}

    @staticmethod
    def _listing(record) -> dict:
        return {
            "componentName": record.key,
            "displayName": record.display_name,
            "description": record.description,
            "category": record.category,
            "tags": list(record.tags),
        }

    # ── Clone ──

    def handle_clone(self, body: dict):
        request = CloneRequest.from_dict(body)
        logger.info(
            "[api] Clone request %s (targetUrl=%s, localUrl=%s, iteration=%s)",
            request.request_type, bool(request.target_url), bool(request.local_url), request.iteration,
        )
        response = self.server.clone.handle(request)
        payload = response.to_dict()
        payload["metadata"] = self._metadata(requestType=request.request_type)
        return 200, payload

    def handle_clone_screenshot(self, body: dict):
        url = self._text(body, "url", "URL is required")
        logger.info("[api] Standalone screenshot: %s", url)
        result = self.server.screenshots.capture(url, body.get("options") or {})
        return 200, {"screenshot": result.screenshot, "metadata": result.metadata, "timestamp": _now()}

    # ── Template / landing conversation ──

    def handle_template(self, body: dict):
        message = self._text(body, "message", "Message is required")
        raw_state = body.get("conversationState")
        state = ConversationState.from_dict(raw_state) if raw_state is not None else None
        reply = advance(state, message, self._text(body, "absolutePathToProjectDirectory"))
        return 200, {
            "result": reply.result,
            "conversationState": reply.state.to_dict(),
            "complete": reply.complete,
            "metadata": self._metadata(),
        }

    def handle_template_start(self):
        reply = advance(None, "")
        return 200, {
            "result": reply.result,
            "conversationState": reply.state.to_dict(),
            "complete": False,
            "metadata": self._metadata(),
        }

    def handle_template_help(self):
        return 200, HELP_INFO

    # ── Helpers ──

    def _cors_origin(self) -> str | None:
        origin = self.headers.get("Origin")
        if not origin:
            return "*"
        settings = self.server.settings
        if settings.is_development or origin in LOCAL_ORIGINS or origin in settings.cors_origins:
            return origin
        return None

    def _send_cors_headers(self):
        origin = self._cors_origin()
        if origin:
            self.send_header("Access-Control-Allow-Origin", origin)
            if origin != "*":
                self.send_header("Access-Control-Allow-Credentials", "true")
                self.send_header("Vary", "Origin")

    def _send_not_found(self, path: str):
        self.send_json({
            "error": "Endpoint not found",
            "path": path,
            "method": self.command,
            "timestamp": _now(),
        }, 404)

    def send_json(self, obj, status=200):
        body = json.dumps(obj).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self._send_cors_headers()
        self.end_headers()
        self.wfile.write(body)

    def send_error_json(self, message: str, status: int, **extra):
        self.send_json({"error": message, **extra, "timestamp": _now()}, status)

    def log_message(self, fmt, *args):
        if args and "404" in str(args):
            return
        logger.info("[api] %s", fmt % args if args else fmt)


# ──────────────────────── Main ────────────────────────

def main(argv: list[str] | None = None):
    settings = load_settings(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    screenshots = ScreenshotService()
    httpd = make_server(settings, screenshots)

    def _shutdown(signum, _frame):
        logger.info("[api] Received %s. Starting graceful shutdown...", signal.Signals(signum).name)
        screenshots.close()
        threading.Thread(target=httpd.shutdown, daemon=True).start()

    signal.signal(signal.SIGTERM, _shutdown)
    signal.signal(signal.SIGINT, _shutdown)

    host, port = httpd.server_address[:2]
    print(f"\n  SuperUI API Server: http://{host}:{port}")
    print(f"  Environment:   {settings.environment}")
    print(f"  Components:    {len(httpd.catalog)} loaded")
    print(f"  Health check:  http://localhost:{port}/health")
    print(f"  Component API: http://localhost:{port}/api/component")
    print(f"  Search:        http://localhost:{port}/api/component/search?q=button")
    print()

    with httpd:
        httpd.serve_forever()
    screenshots.close()
    print("\nShutting down.")


if __name__ == "__main__":
    main()
