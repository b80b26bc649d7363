#!/usr/bin/env python3
"""
Loan Service Entry Point

Starts the FastAPI server with host, port and logging taken from the
LOAN_SERVICE_* environment.
"""

import sys

import uvicorn

from loan_service.config import get_config
from loan_service.logging_config import setup_logging


def run_server(host: str, port: int, reload: bool = False, log_level: str = "info"):
    """Run the FastAPI server"""
    uvicorn.run(
        "loan_service.api:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level
    )


if __name__ == "__main__":
    config = get_config()
    logger = setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)

    logger.info("Starting Loan Service on %s:%s", config.api_host, config.api_port)
    logger.info("Storage: %s", config.database_path if config.use_sqlite else "in-memory")

    try:
        run_server(
            host=config.api_host,
            port=config.api_port,
            reload=config.api_reload,
            log_level=config.log_level.lower()
        )
    except KeyboardInterrupt:
        logger.info("Shutting down Loan Service")
    except Exception as e:
        logger.error("Error starting server: %s", e)
        sys.exit(1)
