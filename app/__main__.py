"""Command-line entrypoint: ``python -m app`` or ``contact-relay``.

Settings are loaded before anything binds a socket; a missing EMAIL,
PASSWORD or RECEIVER_EMAIL stops the process with exit status 1.
"""

from __future__ import annotations

import logging
import sys

import uvicorn

from app.core.errors import ConfigurationError

logger = logging.getLogger("app")


def _load_application():
    # Importing the settings module reads and validates the environment
    from app.core.config import settings
    from app.main import app

    return settings, app


def main() -> None:
    try:
        settings, application = _load_application()
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.ERROR, format="%(levelname)s %(message)s")
        logger.critical("%s", exc.message)
        sys.exit(1)

    uvicorn.run(application, host=settings.app.bind_host, port=settings.app.port)


if __name__ == "__main__":
    main()
