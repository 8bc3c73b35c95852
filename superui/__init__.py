"""
SuperUI: shadcn/ui component lookup for coding assistants.

Architecture: 2 services, 1 shared core
  - MCP tool server (server.py): 6 tools, each calls the HTTP API
  - HTTP API server (api_server/server.py): component, template, landing, clone routes
  - Core (this package): catalog, search, matcher, conversation, screenshots
"""

__version__ = "1.0.0"
