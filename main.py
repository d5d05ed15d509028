"""
Main entrypoint: FastAPI LSI server.

Env: REPUTEOS_DB_URL / DATABASE_URL / LSI_DB_PATH, API_HOST, API_PORT, LOG_LEVEL.

Equivalent: uvicorn reputeos_lsi.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

# Configure structured JSON logging before other imports that may log
from reputeos_lsi.lsi_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Run the FastAPI server in the main thread."""
    from reputeos_lsi.api_server.app import app
    from reputeos_lsi.config import get_settings
    import uvicorn

    settings = get_settings()
    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
