# infra/bootstrap.py
from __future__ import annotations

import logging
from typing import Optional

from infra.db.base import build_engine, build_session_factory
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.operational_support import OperationalSupport
from infra.services import ServiceGraph, build_service_graph
from infra.settings import EngineSettings, load_settings

logger = logging.getLogger(__name__)


def build_services(
    settings: Optional[EngineSettings] = None,
    *,
    migrate: bool = True,
    configure_logging: bool = False,
    support: Optional[OperationalSupport] = None,
) -> ServiceGraph:
    """
    Open the configured database and wire the engine's services.
    The returned graph owns its session; call ``close()`` when done.
    """
    settings = settings or load_settings()
    if configure_logging:
        setup_logging()
    if migrate:
        run_migrations(settings.database_url)

    engine = build_engine(settings.database_url)
    session = build_session_factory(engine)()
    logger.info("Services ready")
    return build_service_graph(session, settings=settings, support=support)


__all__ = ["build_services"]
