#
# Copyright (c) 2026 MongoDB Inc.
# Author: Benjamin Lorenz <benjamin.lorenz@mongodb.com>
#

"""
Oracle client: spawns the UCO price MCP server over stdio and calls its tool
"""

import json
import os
import sys
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Dict, List, Optional

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

SERVER_SCRIPT = Path(__file__).resolve().parent.parent / "mcp_servers" / "uco_price.py"
TOOL_NAME = "getUcoPrice"


class OracleToolError(RuntimeError):
    """The server answered with an error envelope"""


class OracleClient:
    def __init__(self, server_script: Optional[Path] = None):
        self.server_script = Path(server_script or SERVER_SCRIPT)
        self.exit_stack = AsyncExitStack()
        self.session: Optional[ClientSession] = None

    async def __aenter__(self):
        params = StdioServerParameters(
            command=sys.executable,
            args=[str(self.server_script)],
            env=os.environ.copy()
        )
        try:
            read, write = await self.exit_stack.enter_async_context(stdio_client(params))
            self.session = await self.exit_stack.enter_async_context(ClientSession(read, write))
            await self.session.initialize()
        except BaseException:
            await self.exit_stack.aclose()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.exit_stack.aclose()
        self.session = None

    async def list_tools(self) -> List[str]:
        result = await self.session.list_tools()
        return [t.name for t in result.tools]

    async def get_uco_price(self) -> Dict:
        """Calls getUcoPrice and decodes the JSON quote, raising on error envelopes"""
        r = await self.session.call_tool(TOOL_NAME, {})
        text = r.content[0].text if r.content else ""
        if r.isError:
            raise OracleToolError(text or "getUcoPrice returned an empty error")
        return json.loads(text)
