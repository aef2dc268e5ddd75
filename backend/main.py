"""
Prompt-to-Code Backend - FastAPI Application Entry Point
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import config, prompt_to_code
from services.config_manager import ConfigManager

logging.basicConfig(
    level=getattr(logging, os.environ.get("PROMPT_TO_CODE_LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    logger.info("Starting Prompt-to-Code Backend...")
    config_manager = ConfigManager.get_instance()
    logger.info("Config loaded from %s", config_manager.config_file)

    yield

    logger.info("Shutting down Prompt-to-Code Backend...")
    for service in prompt_to_code.sessions.values():
        service.stop_responding()
    prompt_to_code.sessions.clear()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Prompt-to-Code Backend",
        description="Streams LLM rewrites of IDE code selections",
        version="1.0.0",
        lifespan=lifespan,
    )

    # The IDE plugin talks to us from localhost
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(prompt_to_code.router, prefix="/api/prompt-to-code", tags=["prompt-to-code"])
    app.include_router(config.router, prefix="/api/config", tags=["config"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "prompt-to-code-backend"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "127.0.0.1"), port=server.get("port", 8000))
