"""FastAPI application entrypoint."""

from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

from app.adapters.inbound.http.error_handlers import register_error_handlers
from app.adapters.inbound.http.routes import router
from app.infrastructure.wiring.container import Container

# Load environment variables from .env file
load_dotenv()


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Dependency container (defaults to one wired from settings)

    Returns:
        Configured FastAPI application
    """
    application = FastAPI(
        title="Buyer Lead Intake",
        description="Buyer lead CRUD service with validated, audited updates",
        version="0.1.0",
    )
    application.state.container = container or Container()
    register_error_handlers(application)
    application.include_router(router)
    return application


app = create_app()
