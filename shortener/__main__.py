"""Run the service with uvicorn: ``python -m shortener``."""

import uvicorn

from .core.config import settings


def main() -> None:
    uvicorn.run(
        "shortener.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
