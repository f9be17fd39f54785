"""TastyDiet MCP Server - Entry point.

Runs the planning MCP server with HTTP transport.
Uses Starlette with the MCP HTTP app mounted at the root.
"""

import logging
import os

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, Mount

from .shell.mcp_server import mcp


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173"


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "healthy", "service": "tastydiet-planner"})


def create_app() -> Starlette:
    """Build the planner app: /health plus the MCP endpoint under /mcp/.

    CORS origins are read from CORS_ORIGINS (comma separated) on each call.
    The MCP app's lifespan drives the session manager.
    """
    mcp_app = mcp.streamable_http_app()

    routes = [
        Route("/health", health_check, methods=["GET"]),
        Mount("/", app=mcp_app),
    ]

    origins = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")

    app = Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=[o.strip() for o in origins if o.strip()],
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["*"],
            ),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )

    return app


app = create_app()


def main() -> None:
    """Run the server."""
    port = int(os.environ.get("PORT", 8080))
    host = os.environ.get("HOST", "0.0.0.0")

    logger.info("Starting TastyDiet MCP server on %s:%d", host, port)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
