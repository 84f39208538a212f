"""
MCP server exposing RAG configuration ranking and parameter impact analysis.
"""

import logging
from pathlib import Path

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

from rag_optimizer.config import Transport, get_config
from rag_optimizer.context import build_context
from rag_optimizer.tools.tools import BestRunTool, ParameterImpactTool, RankRunsTool

# Configure logging
logger = logging.getLogger(__name__)


def register_tools(mcp: FastMCP, tools: list) -> None:
    for tool in tools:
        mcp.add_tool(tool.execute,
                     name=tool.name,
                     title=tool.title,
                     description=tool.description,
                     annotations=tool.annotations,
                     structured_output=getattr(tool, 'structured_output', None))
        logger.info(f"Registered tool: {tool.name}")


def main():
    # Load .env.local from project root (must run from project root)
    env_local_path = Path('.env.local')
    if env_local_path.exists():
        load_dotenv(env_local_path)
        logger.info("Loaded .env.local for local development")

    # Load configuration from environment variables and command-line arguments
    try:
        config = get_config()
    except Exception as e:
        logger.error(f"Invalid configuration: {e}")
        raise

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        context = build_context(config)
    except Exception as e:
        logger.error(f"Failed to open result store: {e}")
        raise

    mcp = FastMCP(host=config.host, port=config.port)
    register_tools(mcp, [
        RankRunsTool(context.analysis_service),
        ParameterImpactTool(context.analysis_service),
        BestRunTool(context.analysis_service),
    ])

    try:
        if config.transport == Transport.STDIO:
            logger.info("Running server with stdio transport")
            mcp.run(transport="stdio")
        elif config.transport == Transport.STREAMABLE_HTTP:
            logger.info(
                f"Running server with Streamable HTTP transport, address http://{config.host}:{config.port}/mcp.")
            mcp.run(transport="streamable-http")
        else:
            logger.error(f"Unexpected transport: {config.transport}")
            raise ValueError(f"Unknown transport: {config.transport}")
    finally:
        context.close()


if __name__ == "__main__":
    main()
