import logging
import sys

import uvicorn

from .config import ConfigError, Settings
from .main import create_app

logger = logging.getLogger("finplatform")


def main() -> int:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error("CRITICAL: %s", e)
        return 1
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
