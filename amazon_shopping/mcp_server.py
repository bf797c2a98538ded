"""
MCP stdio server exposing the search_products tool.
"""
import asyncio
from typing import Any, Dict, List, Tuple

from dotenv import load_dotenv
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from amazon_shopping import __version__
from amazon_shopping.config import load_amazon_credentials
from amazon_shopping.errors import ExternalServiceError, NetworkError
from amazon_shopping.logger import logger
from amazon_shopping.sentry import capture_provider_error, initialize_sentry
from amazon_shopping.services.amazon_service import AmazonClient
from amazon_shopping.services.transport import AiohttpTransport
from amazon_shopping.tools.search_products import (
    TOOL_DESCRIPTION,
    TOOL_NAME,
    TOOL_TITLE,
    input_schema,
    output_schema,
    run_search_products,
)


def search_products_tool() -> Tool:
    return Tool(
        name=TOOL_NAME,
        title=TOOL_TITLE,
        description=TOOL_DESCRIPTION,
        inputSchema=input_schema(),
        outputSchema=output_schema(),
    )


async def handle_call_tool(client: AmazonClient, name: str,
                           arguments: Dict[str, Any]) -> Tuple[List[TextContent], Dict[str, Any]]:
    """
    Run a tool call.

    Returns:
        (text content, structured content)

    Raises:
        ValueError: If the tool name is unknown
    """
    if name != TOOL_NAME:
        raise ValueError(f"Unknown tool: {name}")

    try:
        response = await run_search_products(client, arguments)
    except (ExternalServiceError, NetworkError) as e:
        capture_provider_error(TOOL_NAME, e)
        raise

    contents = [
        TextContent(type="text", text=block["text"]) for block in response["content"]
    ]
    return contents, response["structuredContent"]


def create_server(client: AmazonClient) -> Server:
    """Build an MCP server bound to one AmazonClient."""
    server = Server("amazon-shopping-mcp", version=__version__)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [search_products_tool()]

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> Tuple[List[TextContent], Dict[str, Any]]:
        return await handle_call_tool(client, name, arguments)

    return server


async def main():
    """Run the MCP server over stdio."""
    load_dotenv()
    initialize_sentry()
    credentials = load_amazon_credentials()

    async with AiohttpTransport() as transport:
        server = create_server(AmazonClient(credentials, transport))
        logger.info(f"Starting Amazon MCP server (host: {credentials.host})")
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options()
            )


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
