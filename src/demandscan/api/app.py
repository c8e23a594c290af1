"""
FastAPI application exposing the crawl and detection operations.

Both operations take no body, are open to any origin and answer JSON.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Generator

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from demandscan import __version__
from demandscan.core.backends.base import Backend
from demandscan.core.config.loader import load_app_config
from demandscan.core.config.models import AppConfig
from demandscan.core.errors import ConfigError, DemandScanError
from demandscan.core.fetch.throttling import RateLimiter
from demandscan.core.logging import get_logger
from demandscan.core.notify.base import EmailSender
from demandscan.core.orchestrator.crawl import CrawlRunner
from demandscan.core.orchestrator.detection import DetectionRunner
from demandscan.core.orchestrator.pipeline import build_email_sender
from demandscan.persistence.db import get_engine, get_session

logger = get_logger("api")

SERVER_CONFIGURATION_ERROR = "Server configuration error"


def _error(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(
    config: AppConfig | None = None,
    *,
    session_factory: Callable[[], Session] | None = None,
    backend: Backend | None = None,
    rate_limiter: RateLimiter | None = None,
    email_sender: EmailSender | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Args:
        config: Fixed configuration (default: load configs/app.yaml per request)
        session_factory: Session factory (default: process-wide engine)
        backend: Fetching backend for the crawl operation
        rate_limiter: Limiter for the crawl operation
        email_sender: Email sender (default: built from config)
    """
    app = FastAPI(
        title="DemandScan API",
        description="Buyer-intent detection pipeline operations",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    def resolve_config() -> AppConfig:
        return config if config is not None else load_app_config()

    @contextmanager
    def session_scope(cfg: AppConfig) -> Generator[Session, None, None]:
        if session_factory is None:
            get_engine(cfg.database.url, echo=cfg.database.echo)
            with get_session() as session:
                yield session
            return

        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.api_route("/functions/fetch-sources", methods=["GET", "POST"])
    async def fetch_sources() -> JSONResponse:
        try:
            cfg = resolve_config()
        except ConfigError as e:
            logger.error("Missing or invalid configuration: %s", e)
            return _error(SERVER_CONFIGURATION_ERROR)

        try:
            with session_scope(cfg) as session:
                runner = CrawlRunner(
                    session,
                    cfg.crawler,
                    backend=backend,
                    rate_limiter=rate_limiter,
                )
                summary = await runner.run()
        except DemandScanError as e:
            logger.error("Crawl failed: %s", e)
            return _error(str(e))
        except Exception as e:
            logger.exception("Unexpected error during crawl")
            return _error(str(e) or "Unknown error")

        return JSONResponse(summary.to_response())

    @app.api_route("/functions/detect-leads", methods=["GET", "POST"])
    async def detect_leads() -> JSONResponse:
        try:
            cfg = resolve_config()
        except ConfigError as e:
            logger.error("Missing or invalid configuration: %s", e)
            return _error(SERVER_CONFIGURATION_ERROR)

        sender = email_sender if email_sender is not None else build_email_sender(cfg)

        try:
            with session_scope(cfg) as session:
                runner = DetectionRunner(
                    session,
                    cfg.detection,
                    email_sender=sender,
                    whatsapp=cfg.notifications.whatsapp,
                )
                summary = await runner.run()
        except DemandScanError as e:
            logger.error("Detection failed: %s", e)
            return _error(str(e))
        except Exception as e:
            logger.exception("Unexpected error during detection")
            return _error(str(e) or "Unknown error")

        return JSONResponse(summary.to_response())

    return app


# Load environment variables from .env (if present)
load_dotenv()

app = create_app()
