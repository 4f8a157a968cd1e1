"""FastAPI application factory."""

from fastapi import FastAPI

from stillgrateful import __version__
from stillgrateful.pipeline.runner import SendPipeline

from .routes import router


def create_app(pipeline: SendPipeline) -> FastAPI:
    """Build the HTTP application around a configured pipeline.

    Interactive docs and the OpenAPI schema are disabled; every path other
    than /send answers 404.

    Args:
        pipeline: Send pipeline that handles POST /send

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="Still Grateful API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.pipeline = pipeline
    app.include_router(router)
    return app
