import logging
import sys

import uvicorn

from app import create_app
from core.config import settings

app = create_app()

logger = logging.getLogger(__name__)


def main() -> None:
    logger.info("starting to listen on %s:%s", settings.server.host, settings.server.port)
    try:
        uvicorn.run(
            "main:app",
            host=settings.server.host,
            port=settings.server.port,
            reload=settings.server.reload,
            log_level=settings.logging.level.lower(),
            access_log=False,
        )
    except OSError as e:
        logger.error("An error occurred: %r", e)
        sys.exit(1)
    except SystemExit as e:
        if e.code:
            logger.error("Server exited with code %s", e.code)
        raise


if __name__ == "__main__":
    main()
