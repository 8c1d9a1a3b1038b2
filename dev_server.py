#!/usr/bin/env python3
"""
Development server startup script (reloads on code changes when API_RELOAD is set).
"""
import uvicorn

from shared.config.settings import settings
from shared.utils.logging_config import get_logger, setup_logging

setup_logging(log_level=settings.log_level, log_file=None, log_to_console=True)
logger = get_logger(__name__)


def main():
    logger.info("Starting marketplace dev server",
                extra={"environment": settings.environment,
                       "repository_type": settings.repository_type,
                       "email_provider": settings.email_provider})
    uvicorn.run(
        "marketplace_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
