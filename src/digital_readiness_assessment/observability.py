"""structlog configuration for the readiness assessment engine.

Modules log through ``structlog.get_logger(__name__)`` with keyword events,
e.g. ``logger.info("Tier-2 scoring complete", weighted_score=0.56)``.
Call ``configure_logging`` once at process start-up; until then structlog's
defaults apply.
"""

import logging

import structlog
from structlog.types import Processor

from digital_readiness_assessment.settings import Settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog level filtering and rendering from settings.

    Args:
        settings: Service settings; ``log_level`` picks the minimum level and
            ``log_json`` switches from console to JSON rendering.
    """
    settings = settings or Settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
    structlog.get_logger(__name__).debug(
        "Logging configured",
        service_name=settings.service_name,
        log_level=settings.log_level,
        log_json=settings.log_json,
    )
