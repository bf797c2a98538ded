"""
HTTP API entry point.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request, HTTPException

from amazon_shopping import __version__
from amazon_shopping.config import load_amazon_credentials
from amazon_shopping.errors import (
    ConfigError,
    ExternalServiceError,
    InputValidationError,
    NetworkError,
)
from amazon_shopping.logger import logger
from amazon_shopping.sentry import capture_provider_error, initialize_sentry
from amazon_shopping.services.amazon_service import AmazonClient
from amazon_shopping.services.transport import AiohttpTransport
from amazon_shopping.tools.search_products import TOOL_NAME, run_search_products


def create_app(client: Optional[AmazonClient] = None) -> FastAPI:
    """
    Build the FastAPI app.
    Without a client, one is created at startup from the environment.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Amazon Shopping API")
        transport = None
        app.state.client = client
        
        if app.state.client is None:
            load_dotenv()
            initialize_sentry()
            try:
                credentials = load_amazon_credentials()
            except ConfigError as e:
                logger.error(str(e))
            else:
                transport = AiohttpTransport()
                await transport.initialize()
                app.state.client = AmazonClient(credentials, transport)
        
        yield
        
        logger.info("Shutting down Amazon Shopping API")
        if transport is not None:
            await transport.close()

    app = FastAPI(
        title="Amazon Shopping API",
        description="Signed Amazon Product Advertising API search",
        version=__version__,
        lifespan=lifespan
    )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": "Amazon Shopping",
            "version": __version__,
            "status": "operational",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        configured = request.app.state.client is not None
        return {
            "status": "healthy" if configured else "degraded",
            "services": {"amazon": configured},
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.post("/api/v1/search")
    async def search_amazon(request: Request):
        """Search Amazon; accepts the search_products tool arguments."""
        search_client = request.app.state.client
        if search_client is None:
            raise HTTPException(status_code=503, detail="Amazon credentials not configured")
        
        try:
            arguments = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Request body must be JSON")
        
        if not isinstance(arguments, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        
        try:
            response = await run_search_products(search_client, arguments)
        except InputValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except ExternalServiceError as e:
            capture_provider_error(TOOL_NAME, e)
            raise HTTPException(status_code=502, detail=str(e))
        except NetworkError as e:
            capture_provider_error(TOOL_NAME, e)
            raise HTTPException(status_code=503, detail=str(e))
        
        return {
            "success": True,
            "text": response["content"][0]["text"],
            **response["structuredContent"],
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    return app


app = create_app()


if __name__ == "__main__":
    import os
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
