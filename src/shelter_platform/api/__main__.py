"""
shelter_platform.api.__main__

Entrypoint for `python -m shelter_platform.api` and the `shelter-platform` script.
"""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from shelter_platform.api.app import create_app
from shelter_platform.settings import get_settings


def build_app() -> FastAPI:
    # Import-string factory so uvicorn's reloader can rebuild the app in dev.
    return create_app(settings=get_settings())


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "shelter_platform.api.__main__:build_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.env == "dev",
        log_config=None,  # structlog owns logging
    )


if __name__ == "__main__":
    main()
