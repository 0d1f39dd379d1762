"""HTTP endpoint for BigQuery remote function calls."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from . import __version__
from .core.config import TokenizeConfig, get_config
from .dispatcher import Dispatcher
from .fns.factory import DeidServiceFactory
from .models import RemoteFnRequest, RemoteFnResponse
from .observability.logging import correlation_context

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[TokenizeConfig] = None,
    deid_service_factory: Optional[DeidServiceFactory] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Configuration is resolved here, once, so that invalid key material
    stops the process at startup.
    """
    if config is None:
        config = get_config()
    dispatcher = Dispatcher(config, deid_service_factory)

    app = FastAPI(title="BigQuery Tokenize Remote Function", version=__version__)
    app.state.dispatcher = dispatcher

    @app.post("/", response_model=None)
    def remote_function(request: RemoteFnRequest) -> JSONResponse:
        """Tokenize or reidentify every row of one call.

        Declared without async so the synchronous dispatcher runs in the
        threadpool.
        """
        with correlation_context(request.request_id):
            envelope = dispatcher.handle_context(request.calls, request.user_defined_context)
        response = RemoteFnResponse.from_envelope(envelope)
        # BigQuery does not retry a 400
        status_code = 200 if envelope.ok else 400
        return JSONResponse(content=response.to_wire(), status_code=status_code)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        """Basic liveness probe (cheap)."""
        return {"status": "ok"}

    logger.info(f"Remote function app created: algorithms={sorted(config.algorithm_names)}")
    return app
