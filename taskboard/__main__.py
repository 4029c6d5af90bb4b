"""Run the API with ``python -m taskboard``."""

import logging

import uvicorn

from taskboard.config import load_settings
from taskboard.logging_setup import setup_logging
from taskboard.main import create_app

logger = logging.getLogger("taskboard")


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info(
        "Task management API listening on http://%s:%d (data: %s)",
        settings.host,
        settings.port,
        settings.tasks_file,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
