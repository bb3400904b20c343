#!/usr/bin/env python3
"""Identity Server - HTTP entry point"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import init_api, router as api_router
from .config import load_config
from .provider_loader import ProviderLoader

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load configured providers for the lifetime of the app."""
    config = load_config(os.environ.get("IDENTITY_CONFIG_FILE"))
    providers = ProviderLoader(config["providers"]).load_all()

    init_api(providers)

    logger.info("Identity server initialized")
    logger.info(f"Providers: {', '.join(providers) or 'none'}")

    yield

    logger.info("Identity server shutting down")


app = FastAPI(
    title="Identity Server",
    description="Resolves OAuth2 tokens into normalized user identities",
    version="0.1.0",
    lifespan=lifespan,
)

# Mount API routes
app.include_router(api_router)


def main_cli():
    """CLI entry point."""
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Identity Server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host")
    parser.add_argument("--port", "-p", type=int, default=8000, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--config", "-c", help="Path to providers config file")
    args = parser.parse_args()

    if args.config:
        os.environ["IDENTITY_CONFIG_FILE"] = args.config

    uvicorn.run(
        "identity_server.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main_cli()
