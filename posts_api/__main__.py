"""Run the Posts API with uvicorn: ``python -m posts_api``.

Host, port and log level come from BACKEND_HOST, BACKEND_PORT and LOG_LEVEL.
"""

import uvicorn

from posts_api.config import settings


def main() -> None:
    uvicorn.run(
        "posts_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
