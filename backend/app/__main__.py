"""
Run the Daybook server.

Usage:
    python -m app
    daybook
"""

import uvicorn

from app.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,  # app.logging_config owns the handlers
    )


if __name__ == "__main__":
    main()
