import logging
from typing import Optional
import requests
from fastapi import FastAPI
from .canvas.api import router as canvas_router
from .canvas.session import SessionRegistry
from .config import load_settings
from .transfer.api import router as transfer_router
from .transfer.context import AppContext
from .transfer.dispatcher import TransferDispatcher


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    )


def create_app(context: Optional[AppContext] = None, http: Optional[requests.Session] = None) -> FastAPI:
    context = context or AppContext(load_settings())
    configure_logging(context.settings.log_level)

    app = FastAPI(title="Math Studium Canvas Bridge")
    app.state.context = context
    app.state.sessions = SessionRegistry(context.settings)
    app.state.dispatcher = TransferDispatcher(context, http=http)
    app.include_router(canvas_router)
    app.include_router(transfer_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
