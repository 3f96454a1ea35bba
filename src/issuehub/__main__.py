"""Run the IssueHub server: ``python -m issuehub``."""

import uvicorn

from issuehub.api import create_app
from issuehub.config import Settings
from issuehub.logging import setup_logging


def main() -> None:
    settings = Settings.from_env()
    logger = setup_logging()
    logger.info("Starting IssueHub on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
