"""
进程入口：python -m cryptosight
"""

import uvicorn

from cryptosight.api.main import create_app
from cryptosight.infrastructure.config import get_settings
from cryptosight.infrastructure.logging import setup_logging


def main() -> None:
    settings = get_settings()
    setup_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    uvicorn.run(
        create_app(),
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
