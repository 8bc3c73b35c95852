"""
Load the SuperUI MCP server's tools into LangChain.

Usage (MCP server running with MCP_TRANSPORT=streamable-http on port 8000):
    tools = await load_mcp_tools_from_server()
"""

import logging

from langchain_mcp_adapters.tools import load_mcp_tools
from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client

logger = logging.getLogger(__name__)

MCP_SERVER_URL = "http://localhost:8000/mcp"


async def load_mcp_tools_from_server(url: str = MCP_SERVER_URL):
    """Load LangChain tools from a running MCP server.

    Returns a list of LangChain tools wrapping the server's tools, or the in-process
    tools from superui.tools when the server cannot be reached.
    """
    try:
        async with streamablehttp_client(url) as (read, write, _):
            async with ClientSession(read, write) as session:
                await session.initialize()
                return await load_mcp_tools(session)
    except Exception as e:
        logger.warning("[mcp_client] Could not connect to MCP server at %s: %s", url, e)
        logger.warning("[mcp_client] Falling back to direct tools from superui.tools")
        from superui.tools import ALL_TOOLS
        return list(ALL_TOOLS)
