"""
Logfire observability configuration for BrandLens.

Traces validation and ranking requests when a Logfire token is present.
Without a token everything still works; spans become null contexts and
plain logging carries the detail.

Usage:
    from brandlens.core.observability import setup_logfire, scoring_span

    setup_logfire()

    with scoring_span("rank_content", project_id=project_id):
        ...

Environment Variables:
    LOGFIRE_TOKEN: Logfire write token (required to send traces)
    LOGFIRE_PROJECT_NAME: Project name in the Logfire dashboard
    LOGFIRE_ENVIRONMENT: Deployment label shown on spans
"""

import logging
import os
from contextlib import nullcontext
from typing import Optional

import logfire

logger = logging.getLogger(__name__)

_logfire_configured = False


def setup_logfire(
    project_name: Optional[str] = None,
    environment: Optional[str] = None,
    service_name: str = "brandlens"
) -> bool:
    """
    Turn on Logfire tracing for scoring requests.

    Args:
        project_name: Dashboard project; defaults to LOGFIRE_PROJECT_NAME
        environment: Deployment label; defaults to LOGFIRE_ENVIRONMENT
        service_name: Name attached to every span

    Returns:
        Whether tracing is active after the call
    """
    global _logfire_configured

    if _logfire_configured:
        return True

    token = os.getenv("LOGFIRE_TOKEN")
    if not token:
        logger.info("No LOGFIRE_TOKEN; scoring spans disabled")
        return False

    project = project_name or os.environ.get("LOGFIRE_PROJECT_NAME", "brandlens")
    env = environment or os.environ.get("LOGFIRE_ENVIRONMENT", "development")

    try:
        logfire.configure(
            token=token,
            service_name=service_name,
            environment=env,
            send_to_logfire=True,
        )
        logfire.instrument_pydantic()

        _logfire_configured = True
        logger.info(f"Scoring spans enabled ({project}/{env})")
        return True

    except Exception as e:
        logger.error(f"Logfire setup failed, continuing without spans: {e}")
        return False


def scoring_span(name: str, **attributes):
    """Logfire span when configured, otherwise a null context."""
    if _logfire_configured:
        return logfire.span(name, **attributes)
    return nullcontext()
